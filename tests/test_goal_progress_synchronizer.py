from __future__ import annotations

from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

import pytest

from moneyflow.application.interfaces.goal_stores import (
    GoalNotFoundError,
    LedgerEntry,
)
from moneyflow.models.goal import FinancialGoal
from moneyflow.services.goal_progress_synchronizer import (
    GoalProgressSynchronizer,
    SyncedGoal,
    achievement_rate,
    summarize_progress,
)

ORG_A = uuid4()
ORG_B = uuid4()
SAVINGS_CATEGORY = uuid4()
EXPENSE_CATEGORY = uuid4()


class _InMemoryGoalStore:
    def __init__(
        self,
        goals: list[FinancialGoal],
        *,
        failing_ids: set[UUID] | None = None,
    ) -> None:
        self.goals = {goal.id: goal for goal in goals}
        self.failing_ids = failing_ids or set()
        self.updates: list[tuple[UUID, dict[str, Any]]] = []
        self.listed_organizations: list[UUID] = []

    def find_by_id(self, goal_id: UUID) -> FinancialGoal | None:
        return self.goals.get(goal_id)

    def find_all_by_organization(self, organization_id: UUID) -> list[FinancialGoal]:
        self.listed_organizations.append(organization_id)
        return [
            goal
            for goal in self.goals.values()
            if goal.organization_id == organization_id
        ]

    def update(self, goal_id: UUID, fields: dict[str, Any]) -> FinancialGoal:
        if goal_id in self.failing_ids:
            raise RuntimeError("goal store unavailable")
        goal = self.goals[goal_id]
        for field, value in fields.items():
            setattr(goal, field, value)
        self.updates.append((goal_id, dict(fields)))
        return goal


class _InMemoryLedgerStore:
    def __init__(self, entries: dict[UUID, list[LedgerEntry]] | None = None) -> None:
        self.entries = entries or {}
        self.requested_organizations: list[UUID] = []

    def find_transactions_for_goal_attribution(self, organization_id, rule):
        self.requested_organizations.append(organization_id)
        return list(self.entries.get(organization_id, []))


def _goal(
    *,
    organization_id: UUID = ORG_A,
    target_amount: str = "1000.00",
    current_amount: str = "0.00",
    category: str | None = "savings",
    status: str = "active",
) -> FinancialGoal:
    return FinancialGoal(
        id=uuid4(),
        organization_id=organization_id,
        name="Emergency fund",
        category=category,
        category_id=None,
        target_amount=Decimal(target_amount),
        current_amount=Decimal(current_amount),
        status=status,
        priority="medium",
    )


def _entry(amount: str, category_type: str = "savings") -> LedgerEntry:
    category_id = SAVINGS_CATEGORY if category_type == "savings" else EXPENSE_CATEGORY
    return LedgerEntry(
        amount=Decimal(amount),
        category_id=category_id,
        category_type=category_type,
    )


def _synchronizer(goal_store, ledger_store, **kwargs) -> GoalProgressSynchronizer:
    return GoalProgressSynchronizer(
        goal_store=goal_store,
        ledger_store=ledger_store,
        **kwargs,
    )


def test_achievement_rate_is_zero_for_non_positive_targets() -> None:
    assert achievement_rate(Decimal("500"), Decimal("0")) == Decimal("0")
    assert achievement_rate(Decimal("500"), Decimal("-10")) == Decimal("0")
    assert achievement_rate(Decimal("500"), None) == Decimal("0")
    assert achievement_rate(Decimal("250"), Decimal("1000")) == Decimal("25")


def test_calculate_current_amount_returns_zero_for_empty_ledger(app) -> None:
    goal = _goal()
    synchronizer = _synchronizer(_InMemoryGoalStore([goal]), _InMemoryLedgerStore())

    with app.app_context():
        assert synchronizer.calculate_current_amount(goal.id) == Decimal("0.00")


def test_calculate_current_amount_raises_for_unknown_goal(app) -> None:
    synchronizer = _synchronizer(_InMemoryGoalStore([]), _InMemoryLedgerStore())

    with app.app_context(), pytest.raises(GoalNotFoundError):
        synchronizer.calculate_current_amount(uuid4())


def test_only_attributable_entries_count_toward_savings_goal(app) -> None:
    goal = _goal()
    ledger = _InMemoryLedgerStore(
        {ORG_A: [_entry("500.00", "savings"), _entry("9999.00", "expense")]}
    )
    synchronizer = _synchronizer(_InMemoryGoalStore([goal]), ledger)

    with app.app_context():
        assert synchronizer.calculate_current_amount(goal.id) == Decimal("500.00")


def test_withdrawals_reduce_progress_but_never_below_zero(app) -> None:
    goal = _goal()
    ledger = _InMemoryLedgerStore({ORG_A: [_entry("100.00"), _entry("-250.00")]})
    synchronizer = _synchronizer(_InMemoryGoalStore([goal]), ledger)

    with app.app_context():
        assert synchronizer.calculate_current_amount(goal.id) == Decimal("0.00")


def test_sync_goal_completes_goal_reaching_its_target(app) -> None:
    goal = _goal(target_amount="1000.00")
    goal_store = _InMemoryGoalStore([goal])
    ledger = _InMemoryLedgerStore({ORG_A: [_entry("600.00"), _entry("400.00")]})
    synchronizer = _synchronizer(goal_store, ledger)

    with app.app_context():
        result = synchronizer.sync_goal(goal)

    assert result.status == "completed"
    assert result.status_changed is True
    assert result.persisted is True
    assert result.achievement_rate == Decimal("100")
    assert result.current_amount == Decimal("1000.00")
    assert goal_store.updates == [
        (goal.id, {"current_amount": Decimal("1000.00"), "status": "completed"})
    ]


def test_read_path_sync_does_not_write_without_status_change(app) -> None:
    goal = _goal(target_amount="1000.00")
    goal_store = _InMemoryGoalStore([goal])
    ledger = _InMemoryLedgerStore({ORG_A: [_entry("300.00")]})
    synchronizer = _synchronizer(goal_store, ledger)

    with app.app_context():
        result = synchronizer.sync_goal(goal)

    assert result.current_amount == Decimal("300.00")
    assert result.achievement_rate == Decimal("30")
    assert result.persisted is False
    assert goal_store.updates == []
    assert goal.current_amount == Decimal("0.00")


def test_persisted_sync_writes_stale_amount(app) -> None:
    goal = _goal(target_amount="1000.00", current_amount="50.00")
    goal_store = _InMemoryGoalStore([goal])
    ledger = _InMemoryLedgerStore({ORG_A: [_entry("300.00")]})
    synchronizer = _synchronizer(goal_store, ledger)

    with app.app_context():
        result = synchronizer.sync_goal(goal, persist=True)

    assert result.persisted is True
    assert goal_store.updates == [(goal.id, {"current_amount": Decimal("300.00")})]
    assert goal.status == "active"


def test_sync_goal_is_idempotent(app) -> None:
    goal = _goal(target_amount="1000.00")
    goal_store = _InMemoryGoalStore([goal])
    ledger = _InMemoryLedgerStore({ORG_A: [_entry("1200.00")]})
    synchronizer = _synchronizer(goal_store, ledger)

    with app.app_context():
        first = synchronizer.sync_goal(goal, persist=True)
        second = synchronizer.sync_goal(goal, persist=True)

    assert (first.current_amount, first.status) == (
        second.current_amount,
        second.status,
    )
    assert second.persisted is False
    assert len(goal_store.updates) == 1


def test_completed_goal_is_never_reopened_by_default(app) -> None:
    goal = _goal(target_amount="1000.00", current_amount="1000.00", status="completed")
    goal_store = _InMemoryGoalStore([goal])
    ledger = _InMemoryLedgerStore({ORG_A: [_entry("100.00")]})
    synchronizer = _synchronizer(goal_store, ledger)

    with app.app_context():
        result = synchronizer.sync_goal(goal, persist=True)

    assert result.status == "completed"
    assert goal.status == "completed"
    assert result.status_changed is False


def test_reopen_policy_reactivates_completed_goal_below_target(app) -> None:
    goal = _goal(target_amount="2000.00", current_amount="1000.00", status="completed")
    goal_store = _InMemoryGoalStore([goal])
    ledger = _InMemoryLedgerStore({ORG_A: [_entry("1000.00")]})
    synchronizer = _synchronizer(goal_store, ledger, reopen_completed=True)

    with app.app_context():
        result = synchronizer.sync_goal(goal)

    assert result.status == "active"
    assert result.status_changed is True
    assert goal.status == "active"


def test_zero_target_goal_never_completes(app) -> None:
    goal = _goal(target_amount="0.00")
    goal_store = _InMemoryGoalStore([goal])
    ledger = _InMemoryLedgerStore({ORG_A: [_entry("500.00")]})
    synchronizer = _synchronizer(goal_store, ledger)

    with app.app_context():
        result = synchronizer.sync_goal(goal)

    assert result.achievement_rate == Decimal("0")
    assert result.status == "active"


def test_sync_all_goals_continues_after_a_failed_persist(app) -> None:
    first, second, third = _goal(), _goal(), _goal()
    goal_store = _InMemoryGoalStore(
        [first, second, third],
        failing_ids={second.id},
    )
    ledger = _InMemoryLedgerStore({ORG_A: [_entry("500.00")]})
    synchronizer = _synchronizer(goal_store, ledger)

    with app.app_context():
        report = synchronizer.sync_all_goals(ORG_A, persist=True)

    assert report.failed == [second.id]
    assert [item.goal.id for item in report.synced] == [first.id, third.id]
    assert first.current_amount == Decimal("500.00")
    assert third.current_amount == Decimal("500.00")
    assert second.current_amount == Decimal("0.00")


def test_failed_status_flip_leaves_goal_active_for_next_run(app) -> None:
    goal = _goal(target_amount="100.00")
    goal_store = _InMemoryGoalStore([goal], failing_ids={goal.id})
    ledger = _InMemoryLedgerStore({ORG_A: [_entry("150.00")]})
    synchronizer = _synchronizer(goal_store, ledger)

    with app.app_context():
        report = synchronizer.sync_all_goals(ORG_A)
        assert goal.status == "active"

        goal_store.failing_ids.clear()
        retried = synchronizer.sync_all_goals(ORG_A)

    assert report.failed == [goal.id]
    assert [item.goal.id for item in retried.completed] == [goal.id]
    assert goal.status == "completed"


def test_sync_all_goals_is_scoped_to_one_organization(app) -> None:
    own = _goal(organization_id=ORG_A)
    foreign = _goal(organization_id=ORG_B, target_amount="10.00")
    goal_store = _InMemoryGoalStore([own, foreign])
    ledger = _InMemoryLedgerStore(
        {ORG_A: [_entry("5.00")], ORG_B: [_entry("50.00")]}
    )
    synchronizer = _synchronizer(goal_store, ledger)

    with app.app_context():
        report = synchronizer.sync_all_goals(ORG_A, persist=True)

    assert [item.goal.id for item in report.synced] == [own.id]
    assert goal_store.listed_organizations == [ORG_A]
    assert ledger.requested_organizations == [ORG_A]
    assert foreign.status == "active"
    assert foreign.current_amount == Decimal("0.00")


def test_summarize_progress_counts_statuses_and_averages_rates() -> None:
    active = _goal(target_amount="1000.00", current_amount="250.00")
    completed = _goal(
        target_amount="500.00", current_amount="500.00", status="completed"
    )
    zero_target = _goal(target_amount="0.00", current_amount="30.00")

    stats = summarize_progress(
        SyncedGoal.from_stored(goal) for goal in (active, completed, zero_target)
    )

    assert stats.total_goals == 3
    assert stats.active_goals == 2
    assert stats.completed_goals == 1
    assert stats.average_achievement == Decimal("41.7")


def test_summarize_progress_of_no_goals() -> None:
    stats = summarize_progress([])
    assert stats.total_goals == 0
    assert stats.average_achievement == Decimal("0.0")


def test_goal_stats_synchronizes_before_summarizing(app) -> None:
    reached = _goal(target_amount="500.00")
    halfway = _goal(target_amount="1000.00")
    goal_store = _InMemoryGoalStore([reached, halfway])
    ledger = _InMemoryLedgerStore({ORG_A: [_entry("500.00")]})
    synchronizer = _synchronizer(goal_store, ledger)

    with app.app_context():
        stats = synchronizer.goal_stats(ORG_A)

    assert stats.total_goals == 2
    assert stats.completed_goals == 1
    assert stats.active_goals == 1
    assert stats.average_achievement == Decimal("75.0")
    assert reached.status == "completed"
