from __future__ import annotations

import click
from flask import Flask


def register(app: Flask, container) -> None:
    @app.cli.command("accrue-leave-days")
    def accrue_leave_days():
        """Add the monthly leave day to every active account."""
        updated = container.leave_accrual_service.add_monthly_leave_days()
        click.echo(f"Added leave days to {updated} active users")
