"""Password strength rule.

The only rule is a minimum length of eight characters. Hashing lives in
``warden.utils.security``.
"""

from dataclasses import dataclass
from typing import ClassVar

from warden.core.exceptions import WeakPasswordError


@dataclass(frozen=True, slots=True)
class Password:
    """A plain-text password that satisfies the strength rule.

    Raises:
        WeakPasswordError: If the password is shorter than ``MIN_LENGTH``.
    """

    value: str

    MIN_LENGTH: ClassVar[int] = 8

    def __post_init__(self):
        if not isinstance(self.value, str) or len(self.value) < self.MIN_LENGTH:
            raise WeakPasswordError()

    def __repr__(self) -> str:
        return "Password(***)"

    __str__ = __repr__
