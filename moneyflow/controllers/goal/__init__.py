from . import routes as _routes  # noqa: F401
from .blueprint import goal_bp
from .dependencies import (
    GoalDependencies,
    build_goal_dependencies,
    get_goal_dependencies,
    register_goal_dependencies,
)
from .resources import GoalCollectionResource, GoalResource, GoalStatsResource

__all__ = [
    "goal_bp",
    "GoalDependencies",
    "build_goal_dependencies",
    "register_goal_dependencies",
    "get_goal_dependencies",
    "GoalCollectionResource",
    "GoalResource",
    "GoalStatsResource",
]
