"""
Harness error taxonomy.

Every setup failure (bad arguments, unknown scenario/kernel, allocation) is a
`HarnessError`; the CLI maps any of them to exit code 1. A numerical mismatch
is NOT an error: it is the MISMATCH verdict (see `verify.verdict`).
"""

from __future__ import annotations

import difflib
from typing import Iterable, List


__all__ = [
    "HarnessError",
    "InvalidArgumentError",
    "UnknownScenarioError",
    "UnknownKernelError",
    "AllocationError",
    "closest_match",
]


class HarnessError(Exception):
    """Base class for fatal harness setup errors."""


class InvalidArgumentError(HarnessError):
    """Raised for a non-positive/unparsable N or a malformed invocation."""


class UnknownScenarioError(HarnessError):
    """Raised when a scenario name is not one of the recognized generators."""

    def __init__(self, name: str, known: Iterable[str] = ()) -> None:
        self.name = str(name)
        self.known = tuple(known)
        super().__init__(f"Unknown scenario '{self.name}'")

    @property
    def hint(self) -> str | None:
        m = closest_match(self.name, self.known)
        return f"did you mean '{m[0]}'?" if m else None


class UnknownKernelError(HarnessError):
    """Raised when a kernel name is not registered."""

    def __init__(self, name: str, known: Iterable[str] = ()) -> None:
        self.name = str(name)
        self.known = tuple(known)
        super().__init__(f"Unknown kernel '{self.name}' (known: {', '.join(self.known) or '-'})")


class AllocationError(HarnessError):
    """Raised when a matrix buffer cannot be allocated."""


def closest_match(name: str, candidates: Iterable[str], *, n: int = 1) -> List[str]:
    return list(difflib.get_close_matches(str(name), list(candidates), n=n, cutoff=0.6))
