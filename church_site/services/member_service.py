"""
Member roster service: applications, lookups and authentication
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from church_site.schemas.member import MembershipApplication, MemberRecord
from church_site.services.errors import PasswordMismatchError
from church_site.services.repositories import Store
from church_site.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

class MemberService:
    """Service for member roster operations"""

    def __init__(self, store: Store):
        self.store = store

    def list(self) -> List[MemberRecord]:
        return self.store.members.list()

    def save(self, members: Iterable[MemberRecord]) -> None:
        """Replace the whole roster"""
        members = list(members)
        self.store.members.replace_all(members)
        logger.info(f"Member roster replaced ({len(members)} members)")

    def get_by_id(self, member_id: str) -> Optional[MemberRecord]:
        return self.store.members.get(member_id)

    def apply(self, application: MembershipApplication) -> MemberRecord:
        """Create a member from a membership form submission"""
        if application.password != application.confirm_password:
            raise PasswordMismatchError("Passwords do not match")

        data = application.model_dump(exclude={"password", "confirm_password"})
        record = MemberRecord(
            **data,
            id=str(uuid.uuid4()),
            password_hash=hash_password(application.password),
            created_at=datetime.utcnow(),
        )
        return self.add(record)

    def add(self, record: MemberRecord) -> MemberRecord:
        if self.find_by_email(record.email):
            # Email uniqueness is not enforced, only reported
            logger.warning(f"Member email {record.email} is already on the roster")
        self.store.members.add(record)
        logger.info(f"Member {record.id} added ({record.membership_type})")
        return record

    def update(self, member_id: str, changes: Dict[str, Any]) -> Optional[MemberRecord]:
        return self.store.members.update(member_id, changes)

    def delete(self, member_id: str) -> bool:
        deleted = self.store.members.delete(member_id)
        if deleted:
            logger.info(f"Member {member_id} deleted")
        return deleted

    def find_by_email(self, email: str) -> List[MemberRecord]:
        email = email.lower()
        return [m for m in self.store.members.list() if m.email.lower() == email]

    def search(self, term: Optional[str]) -> List[MemberRecord]:
        """Case-insensitive match on name, email or phone"""
        members = self.store.members.list()
        if not term:
            return members
        needle = term.lower()
        return [
            m for m in members
            if needle in m.first_name.lower()
            or needle in m.last_name.lower()
            or needle in m.email.lower()
            or needle in m.phone.lower()
        ]

    def authenticate(self, email: str, password: str) -> Optional[MemberRecord]:
        """Return the member whose email and password match, if any"""
        for member in self.find_by_email(email):
            if verify_password(password, member.password_hash):
                return member
        return None
