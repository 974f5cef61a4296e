"""
Pre-submission validation of campaign plans.

Runs the parser as a black box and reports the first problem found as a
structured reason. Nothing here raises: callers decide how to surface the
reason (the intake handler wraps it in InvalidDocumentError).
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from camper.contexts.intake.campaign_parser import parse_campaign_plan

EMPTY_FILE = "file is empty"
NO_CAMPAIGNS = "no valid campaigns found"
DUPLICATE_NAMES = "duplicate campaign names found"


@dataclass
class ValidationResult:
    """
    Outcome of validating a campaign plan.

    Attributes:
        valid: True if the plan can be submitted
        error: Rejection reason when invalid
        duplicate_names: Names that appear more than once (for display)
    """

    valid: bool
    error: Optional[str] = None
    duplicate_names: list[str] = field(default_factory=list)


def validate_campaign_document(text: str) -> ValidationResult:
    """
    Validate a campaign plan before submission.

    Rules, in order:
    1. Empty or whitespace-only text → "file is empty"
    2. Parser yields no campaigns → "no valid campaigns found"
    3. Two campaigns share a name (exact, case-sensitive) → "duplicate campaign names found"

    Args:
        text: Raw campaign plan markdown

    Returns:
        ValidationResult
    """
    if not text or not text.strip():
        return ValidationResult(valid=False, error=EMPTY_FILE)

    plan = parse_campaign_plan(text)
    if not plan.campaigns:
        return ValidationResult(valid=False, error=NO_CAMPAIGNS)

    # Repeats within a tier are suppressed by the parser, so count those too
    name_counts = Counter(campaign.name for campaign in plan.campaigns)
    name_counts.update(name for _tier, name in plan.duplicates)
    duplicates = [name for name, count in name_counts.items() if count > 1]
    if duplicates:
        return ValidationResult(valid=False, error=DUPLICATE_NAMES, duplicate_names=duplicates)

    return ValidationResult(valid=True)
