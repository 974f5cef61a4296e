"""
Campaign definition data structure for the Intake context.

A CampaignDefinition is what the parser extracts from a campaign plan: a name,
a tier and a daily budget. It carries no job identity or status; the Jobs
context wraps definitions into Campaign records when a job is created.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from camper.contexts.intake.campaign_patterns import DAYS_PER_MONTH, VALID_TIERS


@dataclass(frozen=True)
class CampaignDefinition:
    """
    One campaign parsed from a plan.

    Attributes:
        name: Campaign name (non-empty after trimming)
        tier: Tier number (1-4)
        daily_budget: Daily budget, strictly positive
        monthly_budget: Derived, daily_budget * 30 (exact Decimal arithmetic)
    """

    name: str
    tier: int
    daily_budget: Decimal
    monthly_budget: Decimal = field(init=False)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Campaign name must not be empty")
        if self.tier not in VALID_TIERS:
            raise ValueError(f"Tier must be one of {VALID_TIERS}, got: {self.tier}")
        if not isinstance(self.daily_budget, Decimal):
            object.__setattr__(self, "daily_budget", Decimal(str(self.daily_budget)))
        if not self.daily_budget.is_finite() or self.daily_budget <= 0:
            raise ValueError(f"Daily budget must be positive, got: {self.daily_budget}")

        object.__setattr__(self, "monthly_budget", self.daily_budget * DAYS_PER_MONTH)

    def to_markdown_line(self) -> str:
        """Render as a canonical single-line record (e.g., "Brand Terms - $45.00")."""
        # Fixed-point, never exponent form (Decimal("1E-7") renders as 0.0000001)
        return f"{self.name} - ${format(self.daily_budget, 'f')}"
