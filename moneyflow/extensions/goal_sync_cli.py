from __future__ import annotations

from uuid import UUID

import click
from flask import Flask

from moneyflow.controllers.goal.dependencies import get_goal_dependencies


def register_goal_sync_commands(app: Flask) -> None:
    @app.cli.group("goals")
    def goals_group() -> None:
        """Operational commands for financial goal progress."""

    @goals_group.command("sync")
    @click.option("--organization-id", type=click.UUID, required=True)
    @click.option(
        "--persist/--no-persist",
        default=True,
        show_default=True,
        help="Write recomputed amounts even when no status changes.",
    )
    def sync_command(organization_id: UUID, persist: bool) -> None:
        synchronizer = get_goal_dependencies().synchronizer
        report = synchronizer.sync_all_goals(organization_id, persist=persist)
        click.echo(
            f"synced={len(report.synced)} completed={len(report.completed)} "
            f"failed={len(report.failed)}"
        )
        if report.failed:
            raise SystemExit(1)

    @goals_group.command("stats")
    @click.option("--organization-id", type=click.UUID, required=True)
    def stats_command(organization_id: UUID) -> None:
        synchronizer = get_goal_dependencies().synchronizer
        stats = synchronizer.goal_stats(organization_id)
        click.echo(
            f"total={stats.total_goals} active={stats.active_goals} "
            f"completed={stats.completed_goals} "
            f"average_achievement={stats.average_achievement}"
        )
