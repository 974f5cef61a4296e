"""
Pattern matching for campaign plan markdown.

This module provides the regex patterns the campaign parser uses to recognize
tier markers, section boundaries, campaign headings and budget fields.

Pattern classes follow the same convention throughout the intake context:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns

These aren't meant to be exhaustive. New conventions get added here as
campaign plans in new formats turn up.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

# =============================================================================
# PARSER CONSTANTS
# =============================================================================

VALID_TIERS = (1, 2, 3, 4)

# Monthly budget is derived from the daily budget
DAYS_PER_MONTH = 30

# A "Daily Budget" line must follow its buffered campaign name within this many lines
BUDGET_LOOKAHEAD_LINES = 5

# Lines after a record that are still checked for the exclusion marker
EXCLUSION_TRAILING_LINES = 3

# Campaigns marked with this text already exist on the ad platform
ALREADY_CREATED_MARKER = "ALREADY CREATED"

# Emoji that open a new major (level 2) section and end any tier context
SECTION_BREAK_EMOJI = "📝⚙🚀✅📊📞🎯🔧⚡"

# Amount: optional $, digits with thousands separators, optional decimals
_AMOUNT = r"\$?\s*(?P<amount>\d[\d,]*(?:\.\d*)?)"


# =============================================================================
# TIER PATTERNS
# =============================================================================


@dataclass(frozen=True)
class TierPatterns:
    """
    Regex patterns for tier markers.

    Supports various formats:
    - ### **TIER 1 CAMPAIGNS (5 campaigns - $1,400/month)**
    - ### TIER 2 CAMPAIGNS
    - ## Tier 3
    - T4: Brand defence
    """

    # "TIER n CAMPAIGN(S)" anywhere in the line, any decoration
    TIER_CAMPAIGNS: re.Pattern = re.compile(r"TIER\s*(?P<tier>[1-4])\s*CAMPAIGNS?", re.IGNORECASE)

    # Line starting with "Tier n" or "Tn", optionally behind up to 3 hashes and bold markers.
    # "Tn" must not run into a name (T1-Search-Auckland is a campaign, not a marker).
    TIER_PREFIX: re.Pattern = re.compile(
        r"^(?:#{1,3}\s*)?\*{0,2}\s*(?:tier\s*(?P<tier>[1-4])|t(?P<short>[1-4]))(?![\w-])",
        re.IGNORECASE,
    )


# =============================================================================
# SECTION PATTERNS
# =============================================================================


@dataclass(frozen=True)
class SectionPatterns:
    """Regex patterns for headings that are not campaign records."""

    # ## 📝 Notes, ## 🚀 Launch Checklist, ...
    SECTION_BREAK: re.Pattern = re.compile(rf"^##\s*[{SECTION_BREAK_EMOJI}]")

    # Any markdown heading
    HEADING: re.Pattern = re.compile(r"^#{1,6}\s")


# =============================================================================
# CAMPAIGN RECORD PATTERNS
# =============================================================================


@dataclass(frozen=True)
class CampaignRecordPatterns:
    """
    Regex patterns for campaign records.

    Multi-line form:
        #### 1. T1-Search-Wellington-Invercargill
        - **Daily Budget:** $46.67

        **Campaign Name:** T1-Search-Masterton-Nelson
        **Daily Budget:** $30

    Single-line form:
        Campaign Alpha - $1,200.50
        Brand Terms: 45
        Search | Auckland | $60.00
    """

    # #### 1. <name>
    CAMPAIGN_HEADING: re.Pattern = re.compile(r"^####\s*\d+\.\s*(?P<name>.+)$")

    # **Campaign Name:** <name>
    CAMPAIGN_NAME_LABEL: re.Pattern = re.compile(
        r"Campaign Name(?!\w)[:*\s]*(?P<name>.+)", re.IGNORECASE
    )

    # - **Daily Budget:** $46.67
    DAILY_BUDGET_LABEL: re.Pattern = re.compile(
        r"Daily Budget[:*\s]*" + _AMOUNT, re.IGNORECASE
    )

    # <name> SEP <amount> with SEP one of - : |; greedy name so the rightmost separator wins
    SINGLE_LINE: re.Pattern = re.compile(r"^(?P<name>.+)[-:|]\s*" + _AMOUNT)

    # Leading list markers stripped from single-line names: "- ", "* ", "+ ", "1. ", "2) "
    LIST_MARKER: re.Pattern = re.compile(r"^(?:[-*+]|\d+[.)])\s+")

    # Bold-labelled field bullet: - **Status:** ..., **Keywords**: ...
    FIELD_LINE: re.Pattern = re.compile(r"^(?:[-*+]\s+)?\*\*[^*]+?(?::\*\*|\*\*\s*:)")

    # Field labels that look like single-line records but are not campaigns
    FIELD_LABEL: re.Pattern = re.compile(
        r"^(?:(?:daily|monthly|weekly|annual|total|overall)\s+)*"
        r"(?:budget|total|spend|cost|cpc|campaign name)s?\W*$",
        re.IGNORECASE,
    )


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def match_tier(line: str) -> Optional[int]:
    """
    Return the tier number declared by a tier marker line, or None.

    Args:
        line: Stripped line of markdown
    """
    match = TierPatterns.TIER_CAMPAIGNS.search(line)
    if match:
        return int(match.group("tier"))

    match = TierPatterns.TIER_PREFIX.match(line)
    if match and not _is_prefixed_record(line, match):
        return int(match.group("tier") or match.group("short"))

    return None


def _is_prefixed_record(line: str, prefix: re.Match) -> bool:
    """
    Check if a "Tn ..." / "Tier n ..." line is a single-line record whose name
    starts with the tier prefix ("T1 Brand - $50"), not a tier marker.

    A prefix followed only by an amount ("Tier 2: $300") stays a marker.
    """
    if is_heading(line):
        return False

    record = CampaignRecordPatterns.SINGLE_LINE.match(line)
    if record is None or record.end("name") <= prefix.end():
        return False

    return bool(line[prefix.end() : record.end("name")].strip(" :|*-"))


def is_section_break(line: str) -> bool:
    """Check if line opens a new major section (emoji-prefixed level 2 heading)."""
    return SectionPatterns.SECTION_BREAK.match(line) is not None


def is_heading(line: str) -> bool:
    """Check if line is any markdown heading."""
    return SectionPatterns.HEADING.match(line) is not None


def clean_campaign_name(raw_name: str) -> str:
    """
    Strip list markers, emphasis and surrounding whitespace from a campaign name.

    Args:
        raw_name: Name text as captured from the line

    Returns:
        Cleaned name (may be empty)
    """
    name = raw_name.strip()
    name = CampaignRecordPatterns.LIST_MARKER.sub("", name)
    return name.strip().strip("*_`").strip()


def is_field_line(line: str) -> bool:
    """Check if line is a bold-labelled field bullet rather than a record."""
    return CampaignRecordPatterns.FIELD_LINE.match(line) is not None


def is_field_label(name: str) -> bool:
    """Check if a single-line record name is really a budget/total field label."""
    return CampaignRecordPatterns.FIELD_LABEL.match(name) is not None


def parse_amount(raw_amount: str) -> Optional[Decimal]:
    """
    Parse a budget amount, stripping thousands separators and a leading $.

    Returns:
        Positive finite Decimal, or None if the amount is unusable
    """
    cleaned = raw_amount.replace(",", "").replace("$", "").strip()
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None

    if not amount.is_finite() or amount <= 0:
        return None
    return amount
