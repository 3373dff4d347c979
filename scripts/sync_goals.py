"""Synchronize goal progress for every organization (cron entry point)."""

from moneyflow import create_app
from moneyflow.controllers.goal.dependencies import get_goal_dependencies
from moneyflow.models.organization import Organization


def main() -> None:
    app = create_app()
    with app.app_context():
        synchronizer = get_goal_dependencies().synchronizer
        organization_ids = [row.id for row in Organization.query.all()]
        failed = 0
        for organization_id in organization_ids:
            report = synchronizer.sync_all_goals(organization_id, persist=True)
            failed += len(report.failed)
        print(
            f"Organizations synchronized: {len(organization_ids)} "
            f"(goal failures: {failed})"
        )


if __name__ == "__main__":
    main()
