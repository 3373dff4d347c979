"""Which ledger entries count toward a goal.

A goal counts entries of its own organization whose category type is
attributable to it. Goals tagged ``savings`` or ``transfer`` only count that
type; any other tag (or none) counts both. A goal linked to a specific
category only counts entries of that category.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from moneyflow.models.category import Category, CategoryType

if TYPE_CHECKING:
    from moneyflow.application.interfaces.goal_stores import LedgerEntry
    from moneyflow.models.goal import FinancialGoal

ATTRIBUTABLE_CATEGORY_TYPES = frozenset(
    {CategoryType.SAVINGS.value, CategoryType.TRANSFER.value}
)


def is_attributable_category(category: Category) -> bool:
    return category.type.value in ATTRIBUTABLE_CATEGORY_TYPES


@dataclass(frozen=True)
class AttributionRule:
    category_types: frozenset[str]
    category_id: UUID | None = None

    @classmethod
    def for_goal(cls, goal: FinancialGoal) -> AttributionRule:
        tag = (goal.category or "").strip().lower()
        if tag in ATTRIBUTABLE_CATEGORY_TYPES:
            category_types = frozenset({tag})
        else:
            category_types = ATTRIBUTABLE_CATEGORY_TYPES
        return cls(category_types=category_types, category_id=goal.category_id)

    def matches(self, entry: LedgerEntry) -> bool:
        if entry.category_type not in self.category_types:
            return False
        if self.category_id is not None and entry.category_id != self.category_id:
            return False
        return True
