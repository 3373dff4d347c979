from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from moneyflow.models.goal import FinancialGoal
    from moneyflow.services.goal_attribution import AttributionRule


class GoalNotFoundError(LookupError):
    def __init__(self, goal_id: UUID) -> None:
        super().__init__(f"Goal not found: {goal_id}")
        self.goal_id = goal_id


@dataclass(frozen=True)
class LedgerEntry:
    amount: Decimal
    category_id: UUID
    category_type: str


class LedgerStore(Protocol):
    def find_transactions_for_goal_attribution(
        self,
        organization_id: UUID,
        rule: AttributionRule,
    ) -> list[LedgerEntry]:
        pass


class GoalStore(Protocol):
    def find_by_id(self, goal_id: UUID) -> FinancialGoal | None:
        pass

    def find_all_by_organization(self, organization_id: UUID) -> list[FinancialGoal]:
        pass

    def create(self, fields: dict[str, Any]) -> FinancialGoal:
        pass

    def update(self, goal_id: UUID, fields: dict[str, Any]) -> FinancialGoal:
        pass

    def delete(self, goal_id: UUID) -> None:
        pass
