# mypy: disable-error-code=name-defined

from __future__ import annotations

from uuid import uuid4

from sqlalchemy.dialects.postgresql import UUID

from moneyflow.extensions.database import db
from moneyflow.utils.datetime_utils import utc_now_naive

MEMBER_ROLES = ("owner", "admin", "member")


class Organization(db.Model):
    __tablename__ = "organizations"

    id = db.Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    # Identity issued by the external auth provider; there is no local users table.
    created_by = db.Column(UUID(as_uuid=True), nullable=True)

    created_at = db.Column(db.DateTime, default=utc_now_naive, nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=utc_now_naive,
        onupdate=utc_now_naive,
        nullable=False,
    )

    members = db.relationship(
        "OrganizationMember",
        backref="organization",
        lazy=True,
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Organization id={self.id} name={self.name!r}>"


class OrganizationMember(db.Model):
    __tablename__ = "organization_members"

    id = db.Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    organization_id = db.Column(
        UUID(as_uuid=True),
        db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(UUID(as_uuid=True), nullable=False, index=True)
    role = db.Column(
        db.String(20),
        nullable=False,
        default="member",
        server_default="member",
    )
    joined_at = db.Column(db.DateTime, default=utc_now_naive, nullable=False)

    __table_args__ = (
        db.UniqueConstraint(
            "organization_id",
            "user_id",
            name="uq_organization_members_org_user",
        ),
        db.CheckConstraint(
            "role IN ('owner', 'admin', 'member')",
            name="ck_organization_members_role",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<OrganizationMember organization_id={self.organization_id} "
            f"user_id={self.user_id} role={self.role!r}>"
        )
