from .category import Category, CategoryType
from .goal import GOAL_PRIORITIES, GOAL_STATUSES, FinancialGoal
from .organization import MEMBER_ROLES, Organization, OrganizationMember
from .transaction import Transaction

__all__ = [
    "Category",
    "CategoryType",
    "FinancialGoal",
    "GOAL_PRIORITIES",
    "GOAL_STATUSES",
    "MEMBER_ROLES",
    "Organization",
    "OrganizationMember",
    "Transaction",
]
