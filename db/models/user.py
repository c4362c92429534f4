"""
db/models/user.py

Application user migrated from the legacy ``user_tb`` table.
"""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Natural key; synthesized from the legacy username when not a valid address",
    )

    username: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Legacy user_name as found in the dump",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Placeholder credential for imported accounts",
    )

    __table_args__ = (Index("ix_users_username", "username"),)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
