"""A Value Object representing an email address in the domain.

The address is validated syntactically with ``email-validator`` (no DNS or
deliverability lookups) and normalized to lowercase, so lookups by email are
case-insensitive.
"""

from dataclasses import dataclass
from typing import ClassVar

from email_validator import EmailNotValidError, validate_email
from structlog import get_logger

from warden.core.exceptions import InvalidEmailError
from warden.core.logging import mask_email

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Email:
    """An immutable, self-validating email address.

    Attributes:
        value: The normalized, lower-cased address.

    Raises:
        InvalidEmailError: If the address is not syntactically valid.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 320

    def __post_init__(self):
        if not isinstance(self.value, str) or len(self.value) > self.MAX_LENGTH:
            raise InvalidEmailError()
        try:
            result = validate_email(self.value.strip(), check_deliverability=False)
        except EmailNotValidError as exc:
            logger.debug("email_rejected", reason=str(exc))
            raise InvalidEmailError() from exc
        object.__setattr__(self, "value", result.normalized.lower())

    def mask_for_logging(self) -> str:
        return mask_email(self.value)

    def __str__(self) -> str:
        return self.value
