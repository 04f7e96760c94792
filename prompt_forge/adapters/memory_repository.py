"""In-memory implementation of the UserRepository protocol.

Accounts live in a dictionary and are lost when the process exits. This is
the default store for development and the one used by the tests.
"""

from dataclasses import replace
from datetime import UTC, datetime

from prompt_forge.ports.repositories import DuplicateEmailError, UserAccount


class MemoryUserRepository:
    """In-memory UserRepository.

    Example:
        async with MemoryUserRepository() as repo:
            await repo.create(account)
            found = await repo.get_by_email("ada@example.com")
    """

    def __init__(self) -> None:
        self._connected = False
        # id -> account
        self._accounts: dict[str, UserAccount] = {}
        # lower-cased email -> id
        self._email_index: dict[str, str] = {}

    async def connect(self) -> None:
        self._connected = True

    async def close(self) -> None:
        self._connected = False

    async def __aenter__(self) -> "MemoryUserRepository":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def get_by_id(self, user_id: str) -> UserAccount | None:
        account = self._accounts.get(user_id)
        # Copies keep callers from mutating stored state
        return replace(account) if account is not None else None

    async def get_by_email(self, email: str) -> UserAccount | None:
        user_id = self._email_index.get(email.strip().lower())
        if user_id is None:
            return None
        return await self.get_by_id(user_id)

    async def create(self, account: UserAccount) -> UserAccount:
        email_key = account.email.strip().lower()
        if email_key in self._email_index:
            raise DuplicateEmailError(email_key)
        stored = replace(account, email=email_key)
        self._accounts[stored.id] = stored
        self._email_index[email_key] = stored.id
        return replace(stored)

    async def update(self, account: UserAccount) -> UserAccount:
        existing = self._accounts.get(account.id)
        if existing is None:
            raise KeyError(account.id)

        email_key = account.email.strip().lower()
        owner = self._email_index.get(email_key)
        if owner is not None and owner != account.id:
            raise DuplicateEmailError(email_key)

        stored = replace(account, email=email_key, updated_at=datetime.now(UTC))
        if existing.email != email_key:
            del self._email_index[existing.email]
            self._email_index[email_key] = stored.id
        self._accounts[stored.id] = stored
        return replace(stored)

    async def count(self) -> int:
        return len(self._accounts)
