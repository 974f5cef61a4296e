"""Unit tests for campaign plan parsing."""

from decimal import Decimal

import pytest

from camper.contexts.intake.campaign_data_structure import CampaignDefinition
from camper.contexts.intake.campaign_parser import (
    format_campaigns_markdown,
    parse_campaign_file,
    parse_campaign_plan,
    parse_campaigns,
)
from camper.contexts.intake.campaign_patterns import match_tier, parse_amount

MULTI_LINE_PLAN = """# Q3 Search Plan

### **TIER 1 CAMPAIGNS (2 campaigns - $2,400/month)**

#### 1. T1-Search-Wellington-Invercargill
- **Daily Budget:** $46.67
- **Keywords:** plumber wellington
- **Status:** Ready

#### 2. T1-Search-Auckland
- **Daily Budget:** $33.33

### TIER 2 CAMPAIGNS

**Campaign Name:** T2-Search-Masterton-Nelson
**Daily Budget:** $30

## 📝 Notes
Leftover - $99
"""


def _as_tuples(campaigns):
    return [(c.name, c.tier, c.daily_budget) for c in campaigns]


@pytest.mark.unit
def test_heading_and_budget_record():
    """Test the minimal multi-line record end to end."""
    text = "TIER 1 CAMPAIGNS\n#### 1. Search-Auckland\n- **Daily Budget:** $50.00\n"

    campaigns = parse_campaigns(text)

    assert len(campaigns) == 1
    assert campaigns[0].name == "Search-Auckland"
    assert campaigns[0].tier == 1
    assert campaigns[0].daily_budget == Decimal("50.00")
    assert campaigns[0].monthly_budget == Decimal("1500.00")


@pytest.mark.unit
def test_multi_line_plan():
    """Test headings, labels and a closing section break in one plan."""
    campaigns = parse_campaigns(MULTI_LINE_PLAN)

    assert _as_tuples(campaigns) == [
        ("T1-Search-Wellington-Invercargill", 1, Decimal("46.67")),
        ("T1-Search-Auckland", 1, Decimal("33.33")),
        ("T2-Search-Masterton-Nelson", 2, Decimal("30")),
    ]


@pytest.mark.unit
def test_single_line_records():
    """Test the three single-line separators and list markers."""
    text = """## Tier 3
- Brand Terms: 45
Search | Auckland | $60.00
1. Campaign Alpha - $1,200.50
"""

    campaigns = parse_campaigns(text)

    assert _as_tuples(campaigns) == [
        ("Brand Terms", 3, Decimal("45")),
        ("Search | Auckland", 3, Decimal("60.00")),
        ("Campaign Alpha", 3, Decimal("1200.50")),
    ]


@pytest.mark.unit
def test_single_line_monthly_budget_is_exact():
    """Test monthly = daily x 30 with no rounding drift."""
    campaigns = parse_campaigns("### TIER 4 CAMPAIGNS\nRemarketing - $33.33\n")

    assert campaigns[0].monthly_budget == Decimal("999.90")


@pytest.mark.unit
def test_rightmost_separator_wins():
    """Test that a hyphenated name keeps its hyphen."""
    campaigns = parse_campaigns("### TIER 1 CAMPAIGNS\nSearch-2024 Promo - $50\n")

    assert _as_tuples(campaigns) == [("Search-2024 Promo", 1, Decimal("50"))]


@pytest.mark.unit
def test_records_outside_tier_are_ignored():
    """Test that records need an open tier section."""
    text = "Intro - $10\n#### 1. Orphan\n- **Daily Budget:** $20\n"

    assert parse_campaigns(text) == []


@pytest.mark.unit
def test_section_break_closes_tier():
    """Test that an emoji section heading ends the tier context."""
    campaigns = parse_campaigns(MULTI_LINE_PLAN)

    assert "Leftover" not in [c.name for c in campaigns]


@pytest.mark.unit
def test_tier_prefix_does_not_swallow_campaign_names():
    """Test that T1-Search-Auckland is a name, not a tier marker."""
    assert match_tier("T1-Search-Auckland - $10") is None
    assert match_tier("T2: Brand defence") == 2
    assert match_tier("## Tier 3") == 3
    assert match_tier("### **TIER 4 CAMPAIGNS (3 campaigns)**") == 4


@pytest.mark.unit
def test_tier_prefixed_single_line_record_is_a_campaign():
    """Test that "T1 Brand - $50" is a record while "Tier 2: $300" is still a marker."""
    assert match_tier("T1 Brand - $50") is None
    assert match_tier("Tier 2 Search | $20") is None
    assert match_tier("Tier 2: $300") == 2
    assert match_tier("T3 - 15") == 3

    text = "### TIER 1 CAMPAIGNS\nT1 Brand - $50\n"
    assert _as_tuples(parse_campaigns(text)) == [("T1 Brand", 1, Decimal("50"))]


@pytest.mark.unit
def test_budget_must_follow_name_closely():
    """Test that a budget more than 5 lines after its heading is not paired."""
    text = "\n".join(
        [
            "### TIER 1 CAMPAIGNS",
            "#### 1. Too Far",
            "Targets plumbers.",
            "Targets electricians.",
            "Targets builders.",
            "Targets roofers.",
            "Targets painters.",
            "- **Daily Budget:** $20",
        ]
    )

    assert parse_campaigns(text) == []


@pytest.mark.unit
def test_buffered_name_is_not_reused():
    """Test that a second budget line does not create a second record."""
    text = "### TIER 1 CAMPAIGNS\n#### 1. Once\n- **Daily Budget:** $20\n- **Daily Budget:** $30\n"

    assert _as_tuples(parse_campaigns(text)) == [("Once", 1, Decimal("20"))]


@pytest.mark.unit
def test_field_labels_are_not_records():
    """Test that budget and total lines in a single-line section are skipped."""
    text = """### TIER 2 CAMPAIGNS
Total: $500
Monthly Budget - $1,400
**Total Spend:** $2,000
Generic Search - $25
"""

    assert _as_tuples(parse_campaigns(text)) == [("Generic Search", 2, Decimal("25"))]


@pytest.mark.unit
def test_unusable_amounts_are_dropped():
    """Test zero budgets are not emitted."""
    text = "### TIER 1 CAMPAIGNS\nFree Campaign - $0\nPaid Campaign - $5\n"

    assert [c.name for c in parse_campaigns(text)] == ["Paid Campaign"]


@pytest.mark.unit
def test_already_created_records_are_excluded():
    """Test the exclusion marker within a record's trailing lines."""
    text = """### TIER 1 CAMPAIGNS
#### 1. Alpha
- **Daily Budget:** $10
- Status: ALREADY CREATED
#### 2. Beta
- **Daily Budget:** $20
"""

    plan = parse_campaign_plan(text)

    assert [c.name for c in plan.campaigns] == ["Beta"]
    assert plan.excluded == ["Alpha"]


@pytest.mark.unit
def test_exclusion_window_stops_at_next_record():
    """Test that a marker belonging to the next record does not exclude this one."""
    text = """### TIER 1 CAMPAIGNS
Alpha - $10
Beta - $20 (ALREADY CREATED)
"""

    plan = parse_campaign_plan(text)

    assert [c.name for c in plan.campaigns] == ["Alpha"]
    assert plan.excluded == ["Beta"]


@pytest.mark.unit
def test_duplicates_collapse_to_first_within_tier():
    """Test (tier, name) dedup keeps the first and reports the rest."""
    text = """### TIER 1 CAMPAIGNS
Alpha - $10
Alpha - $15
### TIER 2 CAMPAIGNS
Alpha - $20
"""

    plan = parse_campaign_plan(text)

    assert _as_tuples(plan.campaigns) == [
        ("Alpha", 1, Decimal("10")),
        ("Alpha", 2, Decimal("20")),
    ]
    assert plan.duplicates == [(1, "Alpha")]


@pytest.mark.unit
def test_unicode_is_normalized_before_parsing():
    """Test en dashes, non-breaking spaces and CRLF line endings."""
    text = "### TIER 1 CAMPAIGNS\r\nBrand Terms – $45\r\n"

    assert _as_tuples(parse_campaigns(text)) == [("Brand Terms", 1, Decimal("45"))]


@pytest.mark.unit
def test_malformed_input_yields_empty_list():
    """Test that the parser never raises."""
    assert parse_campaigns("") == []
    assert parse_campaigns("just some prose\nwith no campaigns") == []
    assert parse_campaigns("### TIER 1 CAMPAIGNS\n- **Daily Budget:** $abc") == []


ROUND_TRIP_PLAN = """### TIER 1 CAMPAIGNS

#### 1. T1 Brand
- **Daily Budget:** $50

#### 2. Tiny
- **Daily Budget:** $0.0000001

### TIER 2 CAMPAIGNS

#### 1. Tier 2 Search
- **Daily Budget:** $1,200.50

### TIER 3 CAMPAIGNS
Promo - $5 - $10
T3 | Remarketing | $7.25
"""


@pytest.mark.unit
def test_canonical_rendering_reparses_to_same_definitions():
    """Test parse -> format -> parse reproduces the parser's own output."""
    parsed = parse_campaigns(ROUND_TRIP_PLAN)
    assert _as_tuples(parsed) == [
        ("T1 Brand", 1, Decimal("50")),
        ("Tiny", 1, Decimal("0.0000001")),
        ("Tier 2 Search", 2, Decimal("1200.50")),
        ("Promo - $5", 3, Decimal("10")),
        ("T3 | Remarketing", 3, Decimal("7.25")),
    ]

    reparsed = parse_campaigns(format_campaigns_markdown(parsed))

    assert _as_tuples(reparsed) == _as_tuples(parsed)


@pytest.mark.unit
def test_canonical_line_uses_fixed_point_amounts():
    """Test small and large budgets never render in exponent form."""
    assert CampaignDefinition("Tiny", 1, Decimal("1E-7")).to_markdown_line() == "Tiny - $0.0000001"
    assert CampaignDefinition("Big", 1, Decimal("1.2E+3")).to_markdown_line() == "Big - $1200"


@pytest.mark.unit
def test_parse_campaign_file(tmp_path):
    """Test parsing from a file on disk."""
    plan_file = tmp_path / "plan.md"
    plan_file.write_text("### TIER 1 CAMPAIGNS\nAlpha - $10\n", encoding="utf-8")

    assert [c.name for c in parse_campaign_file(plan_file)] == ["Alpha"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1,200.50", Decimal("1200.50")),
        ("$45", Decimal("45")),
        ("0", None),
        ("abc", None),
    ],
)
def test_parse_amount(raw, expected):
    """Test amount parsing."""
    assert parse_amount(raw) == expected


@pytest.mark.unit
def test_definition_rejects_invalid_values():
    """Test CampaignDefinition construction checks."""
    with pytest.raises(ValueError):
        CampaignDefinition("  ", 1, Decimal("10"))
    with pytest.raises(ValueError):
        CampaignDefinition("Alpha", 5, Decimal("10"))
    with pytest.raises(ValueError):
        CampaignDefinition("Alpha", 1, Decimal("-1"))
