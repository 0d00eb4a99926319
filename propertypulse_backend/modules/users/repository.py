"""User repositories.

Passwords are hashed on the way in and the hash never leaves the
repository; ``verify_credentials`` is the only path that reads it.
"""

from abc import abstractmethod
from typing import Any

from sqlalchemy import select

from ...core.pagination import ListOptions, Page
from ...core.repositories import DocumentRepository, Repository, SQLRepository
from ..auth.password_service import hash_password, verify_password
from .models import User, UserRole
from .schemas import UserCreate, UserResponse, UserUpdate


class UserRepository(Repository[UserResponse]):
    resource_type = "User"
    create_schema = UserCreate
    update_schema = UserUpdate
    read_schema = UserResponse

    def _hash_password(self, values: dict[str, Any]) -> dict[str, Any]:
        password = values.pop("password", None)
        if password:
            values["password_hash"] = hash_password(password)
        if values.get("email"):
            values["email"] = values["email"].lower()
        return values

    def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        values = self._hash_password(values)
        values.setdefault("password_hash", None)
        return values

    def prepare_update(self, current, changes):
        return self._hash_password(changes)

    async def find_by_email(self, email: str) -> UserResponse | None:
        page = await self.list(
            ListOptions(filters={"email": email.lower()}, limit=1, populate=False)
        )
        return page.items[0] if page.items else None

    async def find_by_role(
        self, role: UserRole | str, options: ListOptions | None = None
    ) -> Page[UserResponse]:
        return await self.list((options or ListOptions()).with_filters(role=role))

    async def verify_credentials(self, email: str, password: str) -> UserResponse | None:
        """Return the user when ``password`` matches, else None."""
        stored = await self._credentials(email.lower())
        if stored is None:
            return None
        user_id, password_hash = stored
        if not verify_password(password, password_hash):
            return None
        return await self.find_by_id(user_id)

    @abstractmethod
    async def _credentials(self, email: str) -> tuple[str, str | None] | None:
        """(id, password hash) for ``email``."""


class SQLUserRepository(SQLRepository[UserResponse], UserRepository):
    model = User

    async def _credentials(self, email: str) -> tuple[str, str | None] | None:
        query = select(User.id, User.password_hash).where(User.email == email)
        async with self.session_factory() as session:
            row = (await session.execute(query)).first()
        return (row.id, row.password_hash) if row else None


class DocumentUserRepository(DocumentRepository[UserResponse], UserRepository):
    collection = "users"
    unique_fields = ("email",)
    required_fields = ("email", "first_name", "last_name", "role")

    async def _credentials(self, email: str) -> tuple[str, str | None] | None:
        for document in self.store.all(self.collection):
            if document.get("email") == email:
                return document["id"], document.get("password_hash")
        return None
