"""
Budget summaries over campaign lists.

Works on anything with name/tier/daily_budget/monthly_budget attributes, so the
same reducers serve the pre-submission preview (CampaignDefinition) and the
progress view (Campaign).
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, TypeVar

from camper.contexts.intake.campaign_patterns import VALID_TIERS

CENTS = Decimal("0.01")

CampaignLike = TypeVar("CampaignLike")


@dataclass(frozen=True)
class BudgetTotals:
    """Totals across a campaign list, rounded to cents."""

    total_daily: Decimal
    total_monthly: Decimal
    campaign_count: int


def _round_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_total_budgets(campaigns: Iterable) -> BudgetTotals:
    """
    Sum daily and monthly budgets.

    Rounding to 2 decimal places happens once, on the totals, not per campaign.
    """
    campaigns = list(campaigns)
    total_daily = sum((c.daily_budget for c in campaigns), Decimal("0"))
    total_monthly = sum((c.monthly_budget for c in campaigns), Decimal("0"))

    return BudgetTotals(
        total_daily=_round_cents(total_daily),
        total_monthly=_round_cents(total_monthly),
        campaign_count=len(campaigns),
    )


def group_campaigns_by_tier(campaigns: Iterable[CampaignLike]) -> dict[int, list[CampaignLike]]:
    """
    Group campaigns by tier, preserving relative order.

    Every tier (1-4) is present in the result; tiers without campaigns map to [].
    """
    grouped = {tier: [] for tier in VALID_TIERS}
    for campaign in campaigns:
        grouped[campaign.tier].append(campaign)
    return grouped
