"""
Absolute-difference tolerance for the MATCH/MISMATCH gate.

A single kernel-level scalar: the verdict compares it against the max
element-wise |C_ref - C_test|. Negative or unparsable values are replaced by
the default rather than rejected.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Dict

DEFAULT_TOLERANCE = 1e-12

logger = logging.getLogger(__name__)

# Leading float prefix: "1e-6abc" reads as 1e-6.
_FLOAT_PREFIX_RE = re.compile(r"^\s*([+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))", re.IGNORECASE)


@dataclass(frozen=True)
class Tolerance:
    atol: float = DEFAULT_TOLERANCE

    def to_dict(self) -> Dict[str, float]:
        return {"atol": float(self.atol)}


def normalize_tolerance(value: float | None) -> Tolerance:
    """Map None, NaN or a negative value to the default; keep anything else."""
    if value is None:
        return Tolerance()
    v = float(value)
    if math.isnan(v) or v < 0.0:
        logger.info("tolerance %r replaced by default %.6e", value, DEFAULT_TOLERANCE)
        return Tolerance()
    return Tolerance(atol=v)


def parse_tolerance(text: str | None) -> Tolerance:
    """
    Parse a CLI tolerance string with leading-float semantics.

    Never raises: an unparsable string silently falls back to the default.
    """
    if text is None:
        return Tolerance()
    m = _FLOAT_PREFIX_RE.match(str(text))
    if not m:
        logger.info("tolerance %r is not a number; using default %.6e", text, DEFAULT_TOLERANCE)
        return Tolerance()
    return normalize_tolerance(float(m.group(1)))


__all__ = ["DEFAULT_TOLERANCE", "Tolerance", "normalize_tolerance", "parse_tolerance"]
