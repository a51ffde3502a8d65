"""Declarative forms: ordered fields with conditional visibility."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from .exceptions import MissingValueError
from .fields import Field

logger = logging.getLogger(__name__)

Prompter = Callable[[Field], Any]


class Form:
    """An ordered collection of fields keyed by unique machine key.

    Conditions may only reference fields declared earlier; they are
    evaluated against values already resolved in the same pass.
    """

    def __init__(self) -> None:
        self._fields: dict[str, Field] = {}

    @classmethod
    def from_dict(cls, fields: Mapping[str, Field]) -> Form:
        form = cls()
        for key, field in fields.items():
            form.add_field(key, field)
        return form

    def add_field(self, key: str, field: Field) -> None:
        if key in self._fields:
            raise ValueError(f"Duplicate field key: {key}")
        for dependency in field.conditions:
            if dependency not in self._fields:
                raise ValueError(
                    f"Field '{key}' depends on '{dependency}', "
                    "which must be declared first"
                )
        field.key = key
        self._fields[key] = field

    def get_field(self, key: str) -> Field | None:
        return self._fields.get(key)

    @property
    def fields(self) -> dict[str, Field]:
        return dict(self._fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields.values())

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def resolve(
        self,
        values: Mapping[str, Any],
        prompter: Prompter | None = None,
        partial: bool = False,
        context: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Resolve raw input into a normalized, validated value map.

        Args:
            values: Raw values keyed by field key. ``None`` means not supplied.
            prompter: Called for applicable fields with no supplied value; it
                returns a raw value, or None to fall back to the default.
            partial: Update mode. Only supplied fields are returned, defaults
                and required checks are skipped.
            context: Values of an existing resource, used to evaluate
                conditions in partial mode.

        Returns:
            Final values for every applicable field that has one.

        Raises:
            InvalidValueError: A supplied value failed validation.
            MissingValueError: A required field has no value.
        """
        state: dict[str, Any] = dict(context or {})
        result: dict[str, Any] = {}

        for key, field in self._fields.items():
            if not field.conditions_met(state):
                if values.get(key) is not None:
                    logger.debug("Ignoring value for inapplicable field %s", key)
                continue

            raw = values.get(key)
            if raw is None and prompter is not None and not partial:
                raw = prompter(field)

            if raw is None:
                if partial:
                    continue
                if field.default is not None:
                    value = field.get_default()
                elif field.required:
                    raise MissingValueError(key)
                else:
                    continue
            else:
                value = field.process(raw)

            result[key] = value
            state[key] = value

        return result
