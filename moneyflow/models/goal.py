# mypy: disable-error-code=name-defined

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

from sqlalchemy.dialects.postgresql import UUID

from moneyflow.extensions.database import db
from moneyflow.utils.datetime_utils import utc_now_naive

GOAL_STATUSES = ("active", "completed")
GOAL_PRIORITIES = ("low", "medium", "high")


class FinancialGoal(db.Model):
    __tablename__ = "financial_goals"

    id = db.Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    organization_id = db.Column(
        UUID(as_uuid=True),
        db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(64), nullable=True)
    category_id = db.Column(
        UUID(as_uuid=True),
        db.ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )

    target_amount = db.Column(db.Numeric(15, 2), nullable=False)
    current_amount = db.Column(
        db.Numeric(15, 2),
        nullable=False,
        default=Decimal("0"),
        server_default="0",
    )
    priority = db.Column(
        db.String(10),
        nullable=False,
        default="medium",
        server_default="medium",
    )
    target_date = db.Column(db.Date, nullable=True)
    status = db.Column(
        db.String(20),
        nullable=False,
        default="active",
        server_default="active",
        index=True,
    )
    created_by = db.Column(UUID(as_uuid=True), nullable=True)

    created_at = db.Column(db.DateTime, default=utc_now_naive, nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=utc_now_naive,
        onupdate=utc_now_naive,
        nullable=False,
    )

    __table_args__ = (
        db.CheckConstraint(
            "current_amount >= 0",
            name="ck_financial_goals_current_amount_nonneg",
        ),
        db.CheckConstraint(
            "status IN ('active', 'completed')",
            name="ck_financial_goals_status",
        ),
        db.CheckConstraint(
            "priority IN ('low', 'medium', 'high')",
            name="ck_financial_goals_priority",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<FinancialGoal id={self.id} name={self.name!r} "
            f"target_amount={self.target_amount} status={self.status!r}>"
        )
