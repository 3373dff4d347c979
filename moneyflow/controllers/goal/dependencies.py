from __future__ import annotations

from dataclasses import dataclass
from typing import Callable
from uuid import UUID

from flask import Flask, current_app

from moneyflow.application.services.goal_application_service import (
    GoalApplicationService,
)
from moneyflow.services.goal_progress_synchronizer import GoalProgressSynchronizer
from moneyflow.services.goal_service import GoalService
from moneyflow.services.goal_store import SqlAlchemyGoalStore
from moneyflow.services.ledger_store import SqlAlchemyLedgerStore
from moneyflow.services.membership_service import is_organization_member

GOAL_DEPENDENCIES_EXTENSION_KEY = "goal_dependencies"


@dataclass(frozen=True)
class GoalDependencies:
    synchronizer: GoalProgressSynchronizer
    goal_application_service_factory: Callable[[UUID], GoalApplicationService]


def build_goal_dependencies(*, reopen_completed: bool = False) -> GoalDependencies:
    """Wire the stores and synchronizer once; services are built per request."""
    goal_store = SqlAlchemyGoalStore()
    synchronizer = GoalProgressSynchronizer(
        goal_store=goal_store,
        ledger_store=SqlAlchemyLedgerStore(),
        reopen_completed=reopen_completed,
    )

    def goal_application_service_factory(user_id: UUID) -> GoalApplicationService:
        return GoalApplicationService(
            user_id=user_id,
            goal_service=GoalService(goal_store),
            synchronizer=synchronizer,
            is_member=is_organization_member,
        )

    return GoalDependencies(
        synchronizer=synchronizer,
        goal_application_service_factory=goal_application_service_factory,
    )


def register_goal_dependencies(
    app: Flask,
    dependencies: GoalDependencies | None = None,
) -> None:
    if dependencies is None:
        dependencies = build_goal_dependencies(
            reopen_completed=bool(app.config.get("GOAL_SYNC_REOPEN_COMPLETED")),
        )
    app.extensions[GOAL_DEPENDENCIES_EXTENSION_KEY] = dependencies


def get_goal_dependencies() -> GoalDependencies:
    configured = current_app.extensions.get(GOAL_DEPENDENCIES_EXTENSION_KEY)
    if isinstance(configured, GoalDependencies):
        return configured
    fallback = build_goal_dependencies(
        reopen_completed=bool(current_app.config.get("GOAL_SYNC_REOPEN_COMPLETED")),
    )
    current_app.extensions[GOAL_DEPENDENCIES_EXTENSION_KEY] = fallback
    return fallback
