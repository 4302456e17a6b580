"""A Value Object representing a phone number in the domain.

Phone numbers are stored in E.164 format (``+`` followed by up to fifteen
digits). The value object accepts common human formatting (spaces, dashes,
dots and parentheses) and normalizes it away.
"""

import re
from dataclasses import dataclass
from typing import ClassVar, Optional

from structlog import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PhoneNumber:
    """An immutable, self-validating E.164 phone number.

    Equality for `PhoneNumber` objects is based on their normalized value.

    Attributes:
        value: The normalized E.164 representation, e.g. ``+15550100``.
    """

    value: str

    E164_PATTERN: ClassVar[re.Pattern] = re.compile(r"^\+[1-9]\d{6,14}$")
    SEPARATORS: ClassVar[re.Pattern] = re.compile(r"[\s\-.()]")

    def __post_init__(self):
        """Performs validation and normalization after initialization."""
        if not isinstance(self.value, str):
            raise TypeError("Phone number value must be a string.")

        normalized_value = self.normalize(self.value)
        object.__setattr__(self, "value", normalized_value)

        if not self.E164_PATTERN.match(normalized_value):
            raise ValueError("Phone number must be in E.164 format, e.g. +15550100.")

        logger.debug("Phone number validated successfully", phone_number=self.mask_for_logging())

    @classmethod
    def normalize(cls, value: Optional[str]) -> Optional[str]:
        """Strips whitespace and separators without validating the result.

        Lookups use this so that ``"+1 555-0100"`` finds ``"+15550100"``.
        """
        if value is None:
            return None
        return cls.SEPARATORS.sub("", value)

    @classmethod
    def is_valid(cls, value: Optional[str]) -> bool:
        """Checks a raw string without raising."""
        if not value:
            return False
        return bool(cls.E164_PATTERN.match(cls.normalize(value)))

    def mask_for_logging(self) -> str:
        """Returns a masked version of the number for safe logging.

        Example: '+*****0100'
        """
        return f"+{'*' * (len(self.value) - 5)}{self.value[-4:]}"

    def __str__(self) -> str:
        return self.value
