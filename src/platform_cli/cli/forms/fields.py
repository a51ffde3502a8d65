"""Form field kinds.

A field turns one raw user-supplied value into a final value: the optional
normalizer runs first, then the kind's own coercion, then the validator.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any
from urllib.parse import urlparse

from .exceptions import InvalidValueError

Validator = Callable[[Any], bool]
Normalizer = Callable[[str], str]

TRUE_TOKENS = frozenset({"1", "true", "yes", "y", "on"})
FALSE_TOKENS = frozenset({"0", "false", "no", "n", "off"})

_ARRAY_SPLIT = re.compile(r"[,\s]+")


class Field:
    """A plain text field.

    Args:
        name: Human readable label, used in prompts and tables.
        description: Help text for the matching command-line option.
        validator: Predicate over the normalized value.
        normalizer: Transform applied to the raw string before validation.
        default: Value used when nothing was supplied.
        conditions: Mapping of field key to allowed values; the field only
            applies when every referenced field already resolved to one of
            its allowed values.
        required: Whether resolving the form fails when no value is
            available.
        key: Machine key; normally assigned by the form.
    """

    def __init__(
        self,
        name: str,
        description: str = "",
        validator: Validator | None = None,
        normalizer: Normalizer | None = None,
        default: Any = None,
        conditions: Mapping[str, Iterable[Any]] | None = None,
        required: bool = False,
        key: str | None = None,
    ) -> None:
        self.name = name
        self.description = description
        self.validator = validator
        self.normalizer = normalizer
        self.default = default
        self.conditions = {k: tuple(v) for k, v in (conditions or {}).items()}
        self.required = required
        self.key = key or ""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key or self.name!r})"

    @property
    def option_name(self) -> str:
        """Name of the command-line option for this field, without dashes."""
        return self.key.replace("_", "-")

    def conditions_met(self, state: Mapping[str, Any]) -> bool:
        """Check whether the field applies given the values resolved so far."""
        for dependency, allowed in self.conditions.items():
            if dependency not in state or state[dependency] not in allowed:
                return False
        return True

    def get_default(self) -> Any:
        """Return a copy of the default so results never share mutable state."""
        return copy.deepcopy(self.default)

    def normalize(self, value: Any) -> Any:
        """Run the normalizer, then the kind's coercion."""
        if self.normalizer is not None and isinstance(value, str):
            value = self.normalizer(value)
        return self.coerce(value)

    def coerce(self, value: Any) -> Any:
        if not isinstance(value, str):
            raise InvalidValueError(self.key, value, "Expected a string")
        return value.strip()

    def validate(self, value: Any) -> None:
        """Raise InvalidValueError if the normalized value is not acceptable."""
        if self.validator is not None and not self.validator(value):
            raise InvalidValueError(self.key, value)

    def process(self, raw: Any) -> Any:
        """Normalize and validate a supplied value."""
        value = self.normalize(raw)
        self.validate(value)
        return value

    def check(self, raw: Any) -> bool | str:
        """Validate ``raw`` without raising, for interactive prompts.

        Returns:
            True if the value is acceptable, otherwise the error message.
        """
        try:
            self.process(raw)
        except InvalidValueError as e:
            return e.reason
        return True

    def format_value(self, value: Any) -> str:
        """Render a resolved value as a string (for prompts and tables)."""
        if value is None:
            return ""
        return str(value)


class BooleanField(Field):
    """A yes/no field. Accepts a small set of truthy and falsy tokens."""

    def __init__(self, name: str, **kwargs: Any) -> None:
        kwargs.setdefault("default", True)
        super().__init__(name, **kwargs)

    def coerce(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            token = value.strip().lower()
            if token in TRUE_TOKENS:
                return True
            if token in FALSE_TOKENS:
                return False
        raise InvalidValueError(self.key, value, "Expected a boolean (true or false)")

    def format_value(self, value: Any) -> str:
        return "true" if value else "false"


class OptionsField(Field):
    """A field restricted to an enumerated allow-list."""

    def __init__(self, name: str, options: Iterable[str], **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.options = list(options)

    def validate(self, value: Any) -> None:
        if value not in self.options:
            raise InvalidValueError(
                self.key, value, f"Must be one of: {', '.join(self.options)}"
            )
        super().validate(value)


class ArrayField(Field):
    """An ordered list of strings, given as a comma or space separated string."""

    def coerce(self, value: Any) -> list[str]:
        if isinstance(value, str):
            return [item for item in _ARRAY_SPLIT.split(value.strip()) if item]
        if isinstance(value, (list, tuple)):
            items = []
            for item in value:
                if not isinstance(item, str):
                    raise InvalidValueError(
                        self.key, value, "Expected a list of strings"
                    )
                items.extend(self.coerce(item))
            return items
        raise InvalidValueError(self.key, value, "Expected a list of strings")

    def format_value(self, value: Any) -> str:
        if value is None:
            return ""
        return ", ".join(value)


class UrlField(Field):
    """An absolute http(s) URL."""

    def validate(self, value: Any) -> None:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidValueError(self.key, value, "Invalid URL")
        super().validate(value)
