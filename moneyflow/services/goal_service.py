from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast
from uuid import UUID

from marshmallow import ValidationError

from moneyflow.application.interfaces.goal_stores import GoalStore
from moneyflow.models.category import Category
from moneyflow.models.goal import FinancialGoal
from moneyflow.schemas.goal_schema import GoalCreateSchema, GoalUpdateSchema
from moneyflow.services.goal_attribution import is_attributable_category


@dataclass
class GoalServiceError(Exception):
    message: str
    code: str
    status_code: int
    details: dict[str, Any] | None = None


class GoalService:
    """Validation and persistence of goal mutations.

    Organization membership is checked by the caller before any of these
    methods touch a goal.
    """

    def __init__(self, goal_store: GoalStore) -> None:
        self._goal_store = goal_store
        self._create_schema = GoalCreateSchema()
        self._update_schema = GoalUpdateSchema(partial=True)

    def load_create_payload(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            validated = cast(dict[str, Any], self._create_schema.load(payload))
        except ValidationError as exc:
            raise GoalServiceError(
                message="Title, target amount, and organization ID are required.",
                code="VALIDATION_ERROR",
                status_code=400,
                details={"messages": exc.messages},
            ) from exc
        self._ensure_attributable_category(
            validated.get("category_id"),
            validated["organization_id"],
        )
        return validated

    def create_goal(
        self,
        validated: dict[str, Any],
        *,
        created_by: UUID,
    ) -> FinancialGoal:
        return self._goal_store.create(
            {**validated, "status": "active", "created_by": created_by}
        )

    def get_goal(self, goal_id: UUID) -> FinancialGoal:
        goal = self._goal_store.find_by_id(goal_id)
        if goal is None:
            raise GoalServiceError(
                message="Goal not found or access denied.",
                code="NOT_FOUND",
                status_code=404,
            )
        return goal

    def update_goal(
        self,
        goal: FinancialGoal,
        payload: dict[str, Any],
    ) -> FinancialGoal:
        try:
            validated = cast(
                dict[str, Any],
                self._update_schema.load(payload, partial=True),
            )
        except ValidationError as exc:
            raise GoalServiceError(
                message="Invalid data for goal update.",
                code="VALIDATION_ERROR",
                status_code=400,
                details={"messages": exc.messages},
            ) from exc

        if not validated:
            return goal
        self._ensure_attributable_category(
            validated.get("category_id"),
            goal.organization_id,
        )
        return self._goal_store.update(goal.id, validated)

    def delete_goal(self, goal: FinancialGoal) -> None:
        self._goal_store.delete(goal.id)

    @staticmethod
    def _ensure_attributable_category(
        category_id: UUID | None,
        organization_id: UUID,
    ) -> None:
        if category_id is None:
            return
        category = cast(
            Category | None,
            Category.query.filter_by(
                id=category_id,
                organization_id=organization_id,
            ).first(),
        )
        if category is None or not is_attributable_category(category):
            raise GoalServiceError(
                message="Goal category must be a savings or transfer category "
                "of the same organization.",
                code="VALIDATION_ERROR",
                status_code=400,
                details={"category_id": str(category_id)},
            )
