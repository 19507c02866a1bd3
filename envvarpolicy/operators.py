"""Set operators that compare required or forbidden names with the names a container sets."""

from __future__ import annotations

from collections.abc import Iterable

CONTAINS_ANY_OF_ERROR_MSG = (
    "Resource must have at least one of the required environment variables "
    "specified by the validation rule. None of the expected environment "
    "variables were found:"
)
DOES_NOT_CONTAIN_ANY_OF_ERROR_MSG = (
    "Resource must not have any of the environment variables specified in the "
    "validation rule. The following invalid environment variables were found:"
)
CONTAINS_ALL_OF_ERROR_MSG = (
    "Resource is missing required environment variables as specified in the "
    "validation rules. The following environment variables are missing:"
)
DOES_NOT_CONTAIN_ALL_OF_ERROR_MSG = (
    "Resource has conflicting environment variables set according to the "
    "validation rules. The following environment variables should not be set "
    "together:"
)


class PolicyViolation(Exception):
    """Raised when a set of environment variable names breaks a rule."""

    def __init__(self, message: str, names: Iterable[str] = ()) -> None:
        self.names = tuple(names)
        super().__init__(message)


def _violation(prefix: str, names: Iterable[str]) -> PolicyViolation:
    ordered = sorted(names)
    return PolicyViolation(f"{prefix} {', '.join(ordered)}", ordered)


def contains_any_of(required: Iterable[str], present: Iterable[str]) -> None:
    """Require at least one of ``required`` to be among ``present``."""
    required_set = set(required)
    if required_set.isdisjoint(present):
        raise _violation(CONTAINS_ANY_OF_ERROR_MSG, required_set)


def does_not_contain_any_of(forbidden: Iterable[str], present: Iterable[str]) -> None:
    """Reject ``present`` if it holds any of ``forbidden``."""
    invalid = set(forbidden).intersection(present)
    if invalid:
        raise _violation(DOES_NOT_CONTAIN_ANY_OF_ERROR_MSG, invalid)


def contains_all_of(required: Iterable[str], present: Iterable[str]) -> None:
    """Require every name in ``required`` to be among ``present``."""
    missing = set(required).difference(present)
    if missing:
        raise _violation(CONTAINS_ALL_OF_ERROR_MSG, missing)


def does_not_contain_all_of(forbidden: Iterable[str], present: Iterable[str]) -> None:
    """Reject ``present`` if it holds every name in ``forbidden`` together."""
    forbidden_set = set(forbidden)
    if forbidden_set.issubset(present):
        raise _violation(DOES_NOT_CONTAIN_ALL_OF_ERROR_MSG, forbidden_set)