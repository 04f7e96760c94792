"""Repository protocols for account data.

Refinement requests and results are never stored; the only persisted entity
is the user account that gates the workspace. Implementations can use any
backend; an in-memory adapter ships in prompt_forge/adapters/.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol


@dataclass
class UserAccount:
    """A registered user.

    Attributes:
        id: Opaque unique identifier (used as the JWT subject).
        email: Login e-mail address, stored lower-cased.
        password_hash: bcrypt hash of the password.
        first_name: Given name.
        last_name: Family name.
        dob_day: Day of birth ("1"-"31").
        dob_month: Month of birth ("1"-"12").
        dob_year: Four-digit year of birth.
        mobile_number: Mobile number in international format.
        created_at: When the account was created.
        updated_at: When the account was last changed.
    """

    id: str
    email: str
    password_hash: bytes
    first_name: str = ""
    last_name: str = ""
    dob_day: str | None = None
    dob_month: str | None = None
    dob_year: str | None = None
    mobile_number: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def profile_complete(self) -> bool:
        """Whether every profile field required by the workspace is filled."""
        return all(
            [
                self.first_name,
                self.last_name,
                self.dob_day,
                self.dob_month,
                self.dob_year,
                self.mobile_number,
            ]
        )


class DuplicateEmailError(Exception):
    """An account with this e-mail address already exists."""


class UserRepository(Protocol):
    """Protocol for user account persistence."""

    async def get_by_id(self, user_id: str) -> UserAccount | None:
        """Retrieve an account by id, or None if it does not exist."""
        ...

    async def get_by_email(self, email: str) -> UserAccount | None:
        """Retrieve an account by e-mail (case-insensitive), or None."""
        ...

    async def create(self, account: UserAccount) -> UserAccount:
        """Store a new account.

        Raises:
            DuplicateEmailError: If the e-mail is already registered.
        """
        ...

    async def update(self, account: UserAccount) -> UserAccount:
        """Replace a stored account and bump its updated_at.

        Raises:
            KeyError: If the account does not exist.
        """
        ...
