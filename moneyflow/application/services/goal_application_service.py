from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, cast
from uuid import UUID

from flask import current_app

from moneyflow.models.goal import FinancialGoal
from moneyflow.schemas.goal_schema import GoalResponseSchema, GoalStatsSchema
from moneyflow.services.goal_progress_synchronizer import (
    GoalProgressSynchronizer,
    SyncedGoal,
)
from moneyflow.services.goal_service import GoalService, GoalServiceError


@dataclass(frozen=True)
class GoalApplicationError(Exception):
    message: str
    code: str
    status_code: int
    details: dict[str, Any] | None = None


class GoalApplicationService:
    """Request-layer orchestration for goals.

    Checks organization membership, runs the synchronizer on every list and
    mutation path and maps goals to their public representation. Goal
    synchronization is best effort: a failure is logged and the last
    persisted values are served instead.
    """

    def __init__(
        self,
        *,
        user_id: UUID,
        goal_service: GoalService,
        synchronizer: GoalProgressSynchronizer,
        is_member: Callable[[UUID, UUID], bool],
    ) -> None:
        self._user_id = user_id
        self._goal_service = goal_service
        self._synchronizer = synchronizer
        self._is_member = is_member
        self._goal_schema = GoalResponseSchema()
        self._stats_schema = GoalStatsSchema()

    def list_goals(self, organization_id: Any) -> list[dict[str, Any]]:
        resolved_id = self._authorize_organization(organization_id)
        progress = self._synchronizer.organization_progress(resolved_id)
        return [self._serialize(item) for item in progress]

    def goal_stats(self, organization_id: Any) -> dict[str, Any]:
        resolved_id = self._authorize_organization(organization_id)
        stats = self._synchronizer.goal_stats(resolved_id)
        return cast(dict[str, Any], self._stats_schema.dump(stats))

    def create_goal(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            validated = self._goal_service.load_create_payload(payload)
        except GoalServiceError as exc:
            raise _to_goal_application_error(exc) from exc

        self._authorize_organization(validated["organization_id"])
        try:
            goal = self._goal_service.create_goal(validated, created_by=self._user_id)
        except GoalServiceError as exc:
            raise _to_goal_application_error(exc) from exc
        return self._serialize(self._sync_best_effort(goal, persist=True))

    def get_goal(self, goal_id: UUID) -> dict[str, Any]:
        goal = self._get_accessible_goal(goal_id)
        return self._serialize(self._sync_best_effort(goal, persist=False))

    def update_goal(self, goal_id: UUID, payload: dict[str, Any]) -> dict[str, Any]:
        goal = self._get_accessible_goal(goal_id)
        try:
            goal = self._goal_service.update_goal(goal, payload)
        except GoalServiceError as exc:
            raise _to_goal_application_error(exc) from exc
        return self._serialize(self._sync_best_effort(goal, persist=True))

    def delete_goal(self, goal_id: UUID) -> None:
        goal = self._get_accessible_goal(goal_id)
        self._goal_service.delete_goal(goal)

    def _authorize_organization(self, organization_id: Any) -> UUID:
        if organization_id is None or str(organization_id).strip() == "":
            raise GoalApplicationError(
                message="Organization ID is required.",
                code="VALIDATION_ERROR",
                status_code=400,
            )
        try:
            resolved_id = (
                organization_id
                if isinstance(organization_id, UUID)
                else UUID(str(organization_id).strip())
            )
        except ValueError as exc:
            raise GoalApplicationError(
                message="Organization ID is malformed.",
                code="VALIDATION_ERROR",
                status_code=400,
            ) from exc

        if not self._is_member(resolved_id, self._user_id):
            raise GoalApplicationError(
                message="Forbidden.",
                code="FORBIDDEN",
                status_code=403,
            )
        return resolved_id

    def _get_accessible_goal(self, goal_id: UUID) -> FinancialGoal:
        try:
            goal = self._goal_service.get_goal(goal_id)
        except GoalServiceError as exc:
            raise _to_goal_application_error(exc) from exc
        # Goals of foreign organizations are reported as missing.
        if not self._is_member(goal.organization_id, self._user_id):
            raise GoalApplicationError(
                message="Goal not found or access denied.",
                code="NOT_FOUND",
                status_code=404,
            )
        return goal

    def _sync_best_effort(self, goal: FinancialGoal, *, persist: bool) -> SyncedGoal:
        goal_id = goal.id
        try:
            return self._synchronizer.sync_goal(goal, persist=persist)
        except Exception:
            current_app.logger.exception("goal_sync_skipped goal_id=%s", goal_id)
            return SyncedGoal.from_stored(goal)

    def _serialize(self, progress: SyncedGoal) -> dict[str, Any]:
        goal = progress.goal
        return cast(
            dict[str, Any],
            self._goal_schema.dump(
                {
                    "id": goal.id,
                    "organization_id": goal.organization_id,
                    "name": goal.name,
                    "category": goal.category,
                    "category_id": goal.category_id,
                    "description": goal.description,
                    "target_amount": goal.target_amount,
                    "current_amount": progress.current_amount,
                    "achievement_rate": progress.achievement_rate,
                    "target_date": goal.target_date,
                    "priority": goal.priority,
                    "status": progress.status,
                    "created_by": goal.created_by,
                    "created_at": goal.created_at,
                    "updated_at": goal.updated_at,
                }
            ),
        )


def _to_goal_application_error(exc: GoalServiceError) -> GoalApplicationError:
    return GoalApplicationError(
        message=exc.message,
        code=exc.code,
        status_code=exc.status_code,
        details=exc.details,
    )
