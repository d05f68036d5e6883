"""Base classes for extractor and writer options."""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from pagereflow.exceptions import ValidationError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> Self:
        """Build options from a configuration mapping.

        Keys may use dashes or underscores. Unknown keys are rejected so that
        typos in configuration files do not go unnoticed.

        Raises
        ------
        ValidationError
            If a key does not name a field, or a value fails validation

        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in values.items():
            name = key.replace("-", "_")
            if name not in known:
                raise ValidationError(
                    f"Unknown {cls.__name__} setting: '{key}'", parameter_name=key, parameter_value=value
                )
            kwargs[name] = value
        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid {cls.__name__}: {e}", original_error=e) from e
