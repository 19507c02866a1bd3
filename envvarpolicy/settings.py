"""Policy settings: which criterion to apply and to which environment variable names."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from envvarpolicy.operators import (
    contains_all_of,
    contains_any_of,
    does_not_contain_all_of,
    does_not_contain_any_of,
)

# Only C identifiers are accepted as environment variable names.
_ENVIRONMENT_VARIABLE_NAME = re.compile(r"[a-zA-Z_][a-zA-Z_\d]*")


class SettingsError(ValueError):
    """Raised when settings cannot be read or are not valid."""


class Criteria(Enum):
    """The rule that relates the configured names to a container's names."""

    CONTAINS_ALL_OF = "containsAllOf"
    DOES_NOT_CONTAIN_ALL_OF = "doesNotContainAllOf"
    CONTAINS_ANY_OF = "containsAnyOf"
    DOES_NOT_CONTAIN_ANY_OF = "doesNotContainAnyOf"


_OPERATORS: dict[Criteria, Callable[[Iterable[str], Iterable[str]], None]] = {
    Criteria.CONTAINS_ALL_OF: contains_all_of,
    Criteria.DOES_NOT_CONTAIN_ALL_OF: does_not_contain_all_of,
    Criteria.CONTAINS_ANY_OF: contains_any_of,
    Criteria.DOES_NOT_CONTAIN_ANY_OF: does_not_contain_any_of,
}


@dataclass(frozen=True)
class Settings:
    """A criterion together with the environment variable names it applies to."""

    criteria: Criteria = Criteria.CONTAINS_ANY_OF
    envvars: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "criteria", Criteria(self.criteria))
        object.__setattr__(self, "envvars", frozenset(self.envvars))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Settings:
        """Build settings from their mapping form, tagged by ``criteria``."""
        if not isinstance(data, Mapping):
            raise SettingsError("settings must be a mapping")
        if "criteria" not in data:
            raise SettingsError("missing field `criteria`")
        try:
            criteria = Criteria(data["criteria"])
        except ValueError:
            expected = ", ".join(f"`{c.value}`" for c in Criteria)
            raise SettingsError(
                f"unknown variant `{data['criteria']}`, expected one of {expected}"
            ) from None
        if "envvars" not in data:
            raise SettingsError("missing field `envvars`")
        envvars = data["envvars"]
        if isinstance(envvars, (str, bytes)) or not isinstance(envvars, Iterable):
            raise SettingsError("`envvars` must be a sequence of strings")
        names = list(envvars)
        if not all(isinstance(name, str) for name in names):
            raise SettingsError("`envvars` must be a sequence of strings")
        return cls(criteria, frozenset(names))

    def to_dict(self) -> dict[str, Any]:
        """Return the mapping form of these settings."""
        return {"criteria": self.criteria.value, "envvars": sorted(self.envvars)}

    def validate(self) -> None:
        """Raise SettingsError unless the name list is non-empty and every name is valid."""
        if not self.envvars:
            raise SettingsError("Empty environment variable list is not allowed")
        invalid = sorted(
            name for name in self.envvars if not _ENVIRONMENT_VARIABLE_NAME.fullmatch(name)
        )
        if invalid:
            raise SettingsError(f"Invalid environment variable names: {', '.join(invalid)}")

    def check(self, present: Iterable[str]) -> None:
        """Apply the criterion to ``present``; raise PolicyViolation if it fails."""
        _OPERATORS[self.criteria](self.envvars, set(present))