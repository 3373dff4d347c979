# mypy: disable-error-code=name-defined

from __future__ import annotations

import enum
from uuid import uuid4

from sqlalchemy.dialects.postgresql import UUID

from moneyflow.extensions.database import db
from moneyflow.utils.datetime_utils import utc_now_naive


class CategoryType(enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"
    SAVINGS = "savings"
    TRANSFER = "transfer"


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    organization_id = db.Column(
        UUID(as_uuid=True),
        db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(255), nullable=False)
    type = db.Column(
        db.Enum(
            CategoryType,
            name="category_type",
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
    )
    parent_id = db.Column(
        UUID(as_uuid=True),
        db.ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    level = db.Column(db.Integer, nullable=False, default=1, server_default="1")

    created_at = db.Column(db.DateTime, default=utc_now_naive, nullable=False)

    children = db.relationship(
        "Category",
        backref=db.backref("parent", remote_side=[id]),
        lazy=True,
    )

    __table_args__ = (
        db.CheckConstraint("level >= 1 AND level <= 3", name="ck_categories_level"),
    )

    def __repr__(self) -> str:
        return f"<Category id={self.id} name={self.name!r} type={self.type}>"
