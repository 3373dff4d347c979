from __future__ import annotations

from decimal import Decimal

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Query

from moneyflow.controllers.goal.dependencies import build_goal_dependencies
from moneyflow.extensions.database import db
from moneyflow.models.category import CategoryType
from moneyflow.models.goal import FinancialGoal
from moneyflow.services.goal_attribution import AttributionRule
from moneyflow.services.ledger_store import SqlAlchemyLedgerStore
from tests.factories import (
    create_category,
    create_goal,
    create_organization,
    record_transaction,
)


def test_ledger_store_filters_by_organization_and_category_type(app) -> None:
    with app.app_context():
        household = create_organization("Household")
        other = create_organization("Other")
        savings = create_category(household, CategoryType.SAVINGS)
        expense = create_category(household, CategoryType.EXPENSE)
        other_savings = create_category(other, CategoryType.SAVINGS)
        record_transaction(household, savings, "500.00")
        record_transaction(household, expense, "9999.00")
        record_transaction(other, other_savings, "777.00")

        entries = SqlAlchemyLedgerStore().find_transactions_for_goal_attribution(
            household.id,
            AttributionRule(category_types=frozenset({"savings"})),
        )

    assert [entry.amount for entry in entries] == [Decimal("500.00")]
    assert entries[0].category_type == "savings"


def test_sync_all_goals_persists_completion_for_one_organization_only(app) -> None:
    with app.app_context():
        household = create_organization("Household")
        neighbours = create_organization("Neighbours")
        savings = create_category(household, CategoryType.SAVINGS)
        neighbour_savings = create_category(neighbours, CategoryType.SAVINGS)
        record_transaction(household, savings, "600.00")
        record_transaction(household, savings, "400.00")
        record_transaction(neighbours, neighbour_savings, "5000.00")

        goal = create_goal(household, target_amount="1000.00")
        neighbour_goal = create_goal(neighbours, target_amount="1000.00")
        goal_id, neighbour_goal_id = goal.id, neighbour_goal.id
        updated_before = goal.updated_at

        synchronizer = build_goal_dependencies().synchronizer
        report = synchronizer.sync_all_goals(household.id)

        assert [item.goal.id for item in report.completed] == [goal_id]

        db.session.expire_all()
        stored = db.session.get(FinancialGoal, goal_id)
        untouched = db.session.get(FinancialGoal, neighbour_goal_id)
        assert stored.status == "completed"
        assert Decimal(str(stored.current_amount)) == Decimal("1000.00")
        assert stored.updated_at >= updated_before
        assert untouched.status == "active"
        assert Decimal(str(untouched.current_amount)) == Decimal("0.00")


def test_goal_linked_to_category_only_counts_that_category(app) -> None:
    with app.app_context():
        household = create_organization()
        vacation = create_category(household, CategoryType.SAVINGS, "Vacation")
        pension = create_category(household, CategoryType.SAVINGS, "Pension")
        record_transaction(household, vacation, "300.00")
        record_transaction(household, pension, "700.00")
        goal = create_goal(household, category_id=vacation.id)

        synchronizer = build_goal_dependencies().synchronizer
        assert synchronizer.calculate_current_amount(goal.id) == Decimal("300.00")


def test_transfer_entries_count_for_untagged_goals(app) -> None:
    with app.app_context():
        household = create_organization()
        savings = create_category(household, CategoryType.SAVINGS)
        transfer = create_category(household, CategoryType.TRANSFER)
        income = create_category(household, CategoryType.INCOME)
        record_transaction(household, savings, "100.00")
        record_transaction(household, transfer, "50.00")
        record_transaction(household, income, "4000.00")
        goal = create_goal(household, category=None)

        synchronizer = build_goal_dependencies().synchronizer
        assert synchronizer.calculate_current_amount(goal.id) == Decimal("150.00")


def test_failed_ledger_read_rolls_back_and_the_batch_continues(
    app, monkeypatch
) -> None:
    calls = {"queries": 0, "rollbacks": 0}
    original_all = Query.all

    def _flaky_all(self):
        calls["queries"] += 1
        # 1 lists the goals, 2-4 read the ledger for each goal.
        if calls["queries"] == 3:
            raise OperationalError(
                "SELECT", {}, Exception("server closed the connection")
            )
        return original_all(self)

    with app.app_context():
        household = create_organization()
        savings = create_category(household, CategoryType.SAVINGS)
        record_transaction(household, savings, "500.00")
        goal_ids = {
            create_goal(household, name=name, target_amount="1000.00").id
            for name in ("Car", "House", "Trip")
        }
        organization_id = household.id

        original_rollback = db.session.rollback

        def _counting_rollback() -> None:
            calls["rollbacks"] += 1
            original_rollback()

        monkeypatch.setattr(db.session, "rollback", _counting_rollback)
        monkeypatch.setattr(Query, "all", _flaky_all)

        synchronizer = build_goal_dependencies().synchronizer
        report = synchronizer.sync_all_goals(organization_id, persist=True)

        assert calls["rollbacks"] >= 1
        assert len(report.failed) == 1
        assert report.failed[0] in goal_ids
        assert len(report.synced) == 2
        assert [item.current_amount for item in report.synced] == [
            Decimal("500.00"),
            Decimal("500.00"),
        ]

        progress = synchronizer.organization_progress(organization_id)
        assert {item.goal.id for item in progress} == goal_ids


def test_goal_stats_counts_goals_whose_sync_failed(app, monkeypatch) -> None:
    with app.app_context():
        household = create_organization()
        savings = create_category(household, CategoryType.SAVINGS)
        record_transaction(household, savings, "1000.00")
        create_goal(household, target_amount="1000.00")
        create_goal(household, target_amount="1000.00", current_amount="200.00")
        organization_id = household.id

        def _unavailable_ledger(self, organization_id, rule):
            raise OperationalError("SELECT", {}, Exception("connection reset"))

        monkeypatch.setattr(
            SqlAlchemyLedgerStore,
            "find_transactions_for_goal_attribution",
            _unavailable_ledger,
        )

        stats = build_goal_dependencies().synchronizer.goal_stats(organization_id)

    assert stats.total_goals == 2
    assert stats.active_goals == 2
    assert stats.average_achievement == Decimal("10.0")
