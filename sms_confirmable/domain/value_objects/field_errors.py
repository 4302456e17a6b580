"""Field-level errors recorded by confirmation operations.

Confirmation outcomes such as "already confirmed" or "code expired" are
normal results of user input, not crashes. They are collected per field on
the state machine that produced them, and rendered into translated messages
only when a caller asks for them.
"""

from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping

from sms_confirmable.core.config.settings import settings
from sms_confirmable.utils.i18n import get_translated_message


class ConfirmationErrorCode(str, Enum):
    """Machine-readable codes for the outcomes a caller has to handle."""

    ALREADY_CONFIRMED = "already_confirmed"
    CONFIRMATION_PERIOD_EXPIRED = "confirmation_period_expired"
    NOT_FOUND = "not_found"
    BLANK = "blank"
    TAKEN = "taken"
    INVALID = "invalid"
    STALE = "stale"


@dataclass(frozen=True)
class FieldError:
    """One error attached to one field.

    Attributes:
        field: Name of the offending attribute, e.g. ``phone_number``.
        code: Error code, usually a `ConfirmationErrorCode` value.
        params: Interpolation values for the translated message.
    """

    field: str
    code: str
    params: Mapping[str, Any] = dataclass_field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.code, ConfirmationErrorCode):
            object.__setattr__(self, "code", self.code.value)

    def message(self, language: str = settings.DEFAULT_LANGUAGE) -> str:
        return get_translated_message(self.code, language, **self.params)

    def full_message(self, language: str = settings.DEFAULT_LANGUAGE) -> str:
        """Message prefixed with the humanized field name."""
        return f"{self.field.replace('_', ' ').capitalize()} {self.message(language)}"


class FieldErrors:
    """An ordered collection of `FieldError` objects."""

    def __init__(self, errors: Iterable[FieldError] = ()):
        self._errors: List[FieldError] = list(errors)

    def add(self, field_name: str, code: str, **params: Any) -> FieldError:
        error = FieldError(field_name, code, params)
        self._errors.append(error)
        return error

    def extend(self, errors: Iterable[FieldError]) -> None:
        self._errors.extend(errors)

    def clear(self) -> None:
        self._errors.clear()

    def on(self, field_name: str) -> List[FieldError]:
        return [error for error in self._errors if error.field == field_name]

    def codes(self, field_name: str) -> List[str]:
        return [error.code for error in self.on(field_name)]

    def has(self, field_name: str, code: str) -> bool:
        if isinstance(code, ConfirmationErrorCode):
            code = code.value
        return code in self.codes(field_name)

    def full_messages(self, language: str = settings.DEFAULT_LANGUAGE) -> List[str]:
        return [error.full_message(language) for error in self._errors]

    def to_dict(self, language: str = settings.DEFAULT_LANGUAGE) -> Dict[str, List[str]]:
        """Messages grouped by field, in the order they were added."""
        grouped: Dict[str, List[str]] = {}
        for error in self._errors:
            grouped.setdefault(error.field, []).append(error.message(language))
        return grouped

    @property
    def is_empty(self) -> bool:
        return not self._errors

    def __iter__(self) -> Iterator[FieldError]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __contains__(self, field_name: object) -> bool:
        return any(error.field == field_name for error in self._errors)

    def __repr__(self) -> str:
        return f"FieldErrors({[(e.field, e.code) for e in self._errors]!r})"
