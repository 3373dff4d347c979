from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from moneyflow.application.interfaces.goal_stores import LedgerEntry
from moneyflow.extensions.database import db
from moneyflow.models.category import Category, CategoryType
from moneyflow.models.transaction import Transaction
from moneyflow.services.goal_attribution import AttributionRule


class SqlAlchemyLedgerStore:
    def find_transactions_for_goal_attribution(
        self,
        organization_id: UUID,
        rule: AttributionRule,
    ) -> list[LedgerEntry]:
        category_types = [CategoryType(value) for value in sorted(rule.category_types)]
        query = (
            db.session.query(
                Transaction.amount,
                Transaction.category_id,
                Category.type,
            )
            .join(Category, Category.id == Transaction.category_id)
            .filter(Transaction.organization_id == organization_id)
            .filter(Category.type.in_(category_types))
        )
        if rule.category_id is not None:
            query = query.filter(Transaction.category_id == rule.category_id)

        try:
            rows = query.all()
        except SQLAlchemyError:
            db.session.rollback()
            raise

        return [
            LedgerEntry(
                amount=Decimal(str(amount)),
                category_id=category_id,
                category_type=category_type.value,
            )
            for amount, category_id, category_type in rows
        ]
