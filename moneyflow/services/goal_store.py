from __future__ import annotations

from typing import Any, cast
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from moneyflow.application.interfaces.goal_stores import GoalNotFoundError
from moneyflow.extensions.database import db
from moneyflow.models.goal import FinancialGoal
from moneyflow.utils.datetime_utils import utc_now_naive


class SqlAlchemyGoalStore:
    """Goal persistence on the request-scoped session.

    A failed read or commit rolls the session back before the error
    propagates, so the next statement runs in a usable transaction.
    """

    def find_by_id(self, goal_id: UUID) -> FinancialGoal | None:
        try:
            return cast(
                FinancialGoal | None,
                FinancialGoal.query.filter_by(id=goal_id).first(),
            )
        except SQLAlchemyError:
            db.session.rollback()
            raise

    def find_all_by_organization(self, organization_id: UUID) -> list[FinancialGoal]:
        try:
            return cast(
                list[FinancialGoal],
                FinancialGoal.query.filter_by(organization_id=organization_id)
                .order_by(FinancialGoal.created_at.desc())
                .all(),
            )
        except SQLAlchemyError:
            db.session.rollback()
            raise

    def create(self, fields: dict[str, Any]) -> FinancialGoal:
        goal = FinancialGoal(**fields)
        db.session.add(goal)
        self._commit()
        return goal

    def update(self, goal_id: UUID, fields: dict[str, Any]) -> FinancialGoal:
        goal = self.find_by_id(goal_id)
        if goal is None:
            raise GoalNotFoundError(goal_id)
        for field, value in fields.items():
            setattr(goal, field, value)
        goal.updated_at = utc_now_naive()
        self._commit()
        return goal

    def delete(self, goal_id: UUID) -> None:
        goal = self.find_by_id(goal_id)
        if goal is None:
            raise GoalNotFoundError(goal_id)
        db.session.delete(goal)
        self._commit()

    @staticmethod
    def _commit() -> None:
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise
