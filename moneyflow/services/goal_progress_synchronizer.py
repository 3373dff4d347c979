"""Goal progress synchronization.

Keeps each goal's ``current_amount`` and ``status`` consistent with the
organization's transaction ledger. The ledger holds no back-references to
goals: progress is always re-derived through :class:`AttributionRule`.

``achievement_rate`` is never stored. It is computed from ``current_amount``
and ``target_amount`` whenever a goal is synchronized or presented.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable
from uuid import UUID

from flask import current_app

from moneyflow.application.interfaces.goal_stores import (
    GoalNotFoundError,
    GoalStore,
    LedgerStore,
)
from moneyflow.models.goal import FinancialGoal
from moneyflow.services.goal_attribution import AttributionRule

MONEY_QUANTIZER = Decimal("0.01")
COMPLETION_RATE = Decimal("100")

STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"


def _as_decimal(value: Decimal | int | float | str | None) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def _normalize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANTIZER, rounding=ROUND_HALF_UP)


def achievement_rate(
    current_amount: Decimal | int | float | str | None,
    target_amount: Decimal | int | float | str | None,
) -> Decimal:
    """Percentage of the target reached; 0 when the target is not positive."""
    target = _as_decimal(target_amount)
    if target <= 0:
        return Decimal("0")
    return _as_decimal(current_amount) / target * 100


@dataclass(frozen=True)
class SyncedGoal:
    goal: FinancialGoal
    current_amount: Decimal
    achievement_rate: Decimal
    status: str
    status_changed: bool = False
    persisted: bool = False

    @classmethod
    def from_stored(cls, goal: FinancialGoal) -> SyncedGoal:
        """Progress as last persisted, used when synchronization was skipped."""
        current_amount = _as_decimal(goal.current_amount)
        return cls(
            goal=goal,
            current_amount=current_amount,
            achievement_rate=achievement_rate(current_amount, goal.target_amount),
            status=goal.status,
        )


@dataclass
class GoalSyncReport:
    organization_id: UUID
    synced: list[SyncedGoal] = field(default_factory=list)
    failed: list[UUID] = field(default_factory=list)

    @property
    def completed(self) -> list[SyncedGoal]:
        return [
            item
            for item in self.synced
            if item.status_changed and item.status == STATUS_COMPLETED
        ]


@dataclass(frozen=True)
class GoalStats:
    total_goals: int
    active_goals: int
    completed_goals: int
    average_achievement: Decimal


def summarize_progress(progress: Iterable[SyncedGoal]) -> GoalStats:
    items = list(progress)
    if not items:
        return GoalStats(
            total_goals=0,
            active_goals=0,
            completed_goals=0,
            average_achievement=Decimal("0.0"),
        )

    total_rate = sum(
        (max(item.achievement_rate, Decimal("0")) for item in items),
        Decimal("0"),
    )
    average = (total_rate / len(items)).quantize(
        Decimal("0.1"), rounding=ROUND_HALF_UP
    )
    return GoalStats(
        total_goals=len(items),
        active_goals=sum(1 for item in items if item.status == STATUS_ACTIVE),
        completed_goals=sum(1 for item in items if item.status == STATUS_COMPLETED),
        average_achievement=average,
    )


class GoalProgressSynchronizer:
    def __init__(
        self,
        *,
        goal_store: GoalStore,
        ledger_store: LedgerStore,
        reopen_completed: bool = False,
    ) -> None:
        self._goal_store = goal_store
        self._ledger_store = ledger_store
        self._reopen_completed = reopen_completed

    def calculate_current_amount(self, goal_id: UUID) -> Decimal:
        goal = self._goal_store.find_by_id(goal_id)
        if goal is None:
            raise GoalNotFoundError(goal_id)
        return self._current_amount_for(goal)

    def sync_goal(self, goal: FinancialGoal, *, persist: bool = False) -> SyncedGoal:
        """Recompute progress for ``goal``.

        A status transition is always written together with the new amount.
        Without a transition the amount is only written when ``persist`` is
        set and the stored value is stale, so read paths stay write-free.
        """
        current_amount = self._current_amount_for(goal)
        rate = achievement_rate(current_amount, goal.target_amount)
        previous_status = goal.status
        status = self._next_status(previous_status, rate)

        fields: dict[str, object] = {}
        if status != previous_status:
            fields = {"current_amount": current_amount, "status": status}
        elif persist and _as_decimal(goal.current_amount) != current_amount:
            fields = {"current_amount": current_amount}

        if fields:
            goal = self._goal_store.update(goal.id, fields)
            if status != previous_status:
                current_app.logger.info(
                    "goal_status_changed goal_id=%s from=%s to=%s rate=%.1f",
                    goal.id,
                    previous_status,
                    status,
                    rate,
                )

        return SyncedGoal(
            goal=goal,
            current_amount=current_amount,
            achievement_rate=rate,
            status=status,
            status_changed=status != previous_status,
            persisted=bool(fields),
        )

    def sync_all_goals(
        self,
        organization_id: UUID,
        *,
        persist: bool = False,
    ) -> GoalSyncReport:
        report = GoalSyncReport(organization_id=organization_id)
        goals = self._goal_store.find_all_by_organization(organization_id)
        # Ids are bound while the instances are fresh; a rollback expires them.
        for goal_id, goal in [(goal.id, goal) for goal in goals]:
            try:
                report.synced.append(self.sync_goal(goal, persist=persist))
            except Exception:
                current_app.logger.exception(
                    "goal_sync_failed organization_id=%s goal_id=%s",
                    organization_id,
                    goal_id,
                )
                report.failed.append(goal_id)

        current_app.logger.info(
            "goal_sync_finished organization_id=%s synced=%d completed=%d failed=%d",
            organization_id,
            len(report.synced),
            len(report.completed),
            len(report.failed),
        )
        return report

    def organization_progress(self, organization_id: UUID) -> list[SyncedGoal]:
        """Every goal of the organization with its best known progress.

        Goals whose synchronization failed are reported with their persisted
        values. A failure of the whole batch is logged and the stored goals
        are listed as they are.
        """
        synced: dict[UUID, SyncedGoal] = {}
        try:
            report = self.sync_all_goals(organization_id)
            synced = {item.goal.id: item for item in report.synced}
        except Exception:
            current_app.logger.exception(
                "goal_sync_skipped organization_id=%s", organization_id
            )

        return [
            synced.get(goal.id) or SyncedGoal.from_stored(goal)
            for goal in self._goal_store.find_all_by_organization(organization_id)
        ]

    def goal_stats(self, organization_id: UUID) -> GoalStats:
        return summarize_progress(self.organization_progress(organization_id))

    def _current_amount_for(self, goal: FinancialGoal) -> Decimal:
        rule = AttributionRule.for_goal(goal)
        entries = self._ledger_store.find_transactions_for_goal_attribution(
            goal.organization_id,
            rule,
        )
        total = sum(
            (entry.amount for entry in entries if rule.matches(entry)),
            Decimal("0"),
        )
        return _normalize_money(max(total, Decimal("0")))

    def _next_status(self, status: str, rate: Decimal) -> str:
        if status == STATUS_ACTIVE and rate >= COMPLETION_RATE:
            return STATUS_COMPLETED
        if (
            self._reopen_completed
            and status == STATUS_COMPLETED
            and rate < COMPLETION_RATE
        ):
            return STATUS_ACTIVE
        return status
