"""
User find-or-create by email.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.user import User


class UserRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        return self._session.scalars(stmt).first()

    def find_or_create(
        self,
        *,
        email: str,
        name: str,
        username: str | None,
        password_hash: str,
    ) -> tuple[User, bool]:
        user = self.get_by_email(email)
        if user is not None:
            return user, False

        user = User(email=email, name=name, username=username, password_hash=password_hash)
        self._session.add(user)
        self._session.flush()
        return user, True
