"""
Organization lookups and find-or-create by site code.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.organization import Organization


class OrganizationRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_code(self, code: str) -> Organization | None:
        stmt = select(Organization).where(Organization.code == code)
        return self._session.scalars(stmt).first()

    def first(self) -> Organization | None:
        stmt = select(Organization).order_by(Organization.id.asc()).limit(1)
        return self._session.scalars(stmt).first()

    def find_or_create(
        self,
        *,
        code: str,
        name: str,
        last_log_update: datetime | None = None,
    ) -> tuple[Organization, bool]:
        """
        Return the organization for ``code``, creating it when missing.

        Existing rows are returned untouched.
        """
        organization = self.get_by_code(code)
        if organization is not None:
            return organization, False

        organization = Organization(code=code, name=name, last_log_update=last_log_update)
        self._session.add(organization)
        self._session.flush()
        return organization, True
