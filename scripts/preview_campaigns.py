#!/usr/bin/env python3
"""
Preview what a campaign plan will create before submitting it.

Usage:
    python scripts/preview_campaigns.py plans/Q3_NZ_Search.md
    python scripts/preview_campaigns.py plans/Q3_NZ_Search.md --canonical
"""

from pathlib import Path

import typer
from dotenv import load_dotenv

from camper.contexts.intake.aggregation import calculate_total_budgets, group_campaigns_by_tier
from camper.contexts.intake.campaign_parser import format_campaigns_markdown, parse_campaign_plan
from camper.contexts.intake.validation import validate_campaign_document

load_dotenv()

app = typer.Typer(help="Preview campaign plan parsing.")


@app.command()
def main(
    plan_file: Path = typer.Argument(..., help="Markdown campaign plan"),
    canonical: bool = typer.Option(
        False, "--canonical", help="Print the plan re-rendered in canonical single-line form"
    ),
):
    """Parse and validate a campaign plan and display campaigns by tier."""
    if not plan_file.exists():
        typer.echo(f"ERROR: File not found: {plan_file}", err=True)
        raise typer.Exit(1)

    text = plan_file.read_text(encoding="utf-8")
    typer.echo(f"Loading {plan_file}")

    validation = validate_campaign_document(text)
    plan = parse_campaign_plan(text)

    # Campaigns by tier
    grouped = group_campaigns_by_tier(plan.campaigns)
    for tier, campaigns in grouped.items():
        if not campaigns:
            continue
        typer.echo(f"\n=== Tier {tier} ({len(campaigns)}) ===")
        for campaign in campaigns:
            typer.echo(
                f"  {campaign.name}: ${campaign.daily_budget}/day (${campaign.monthly_budget}/month)"
            )

    # Totals
    totals = calculate_total_budgets(plan.campaigns)
    typer.echo("\n=== Totals ===")
    typer.echo(f"  Campaigns: {totals.campaign_count}")
    typer.echo(f"  Daily:     ${totals.total_daily}")
    typer.echo(f"  Monthly:   ${totals.total_monthly}")

    # Dropped records
    if plan.excluded:
        typer.echo(f"\nSkipped, already created ({len(plan.excluded)}):")
        typer.echo(f"  {', '.join(plan.excluded)}")

    if canonical and plan.campaigns:
        typer.echo("\n=== Canonical Plan ===")
        typer.echo(format_campaigns_markdown(plan.campaigns))

    if not validation.valid:
        typer.secho(f"\n✗ Invalid plan: {validation.error}", fg=typer.colors.RED)
        if validation.duplicate_names:
            typer.echo(f"  Duplicates: {', '.join(validation.duplicate_names)}")
        raise typer.Exit(1)

    typer.secho("\n✓ Plan is valid", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
