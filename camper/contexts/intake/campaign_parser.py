"""
Campaign plan parsing for the Intake context.

Parses a markdown campaign plan into an ordered list of CampaignDefinition.
The parser is tolerant: lines it does not recognize are skipped, amounts that
do not parse are dropped, and a plan with nothing recognizable yields [].
Deciding whether [] is an error is the caller's job (see validation.py).

Parsing is a left fold over the plan's lines. Each line is tried against an
ordered table of LineRule entries; the first rule whose matcher fires consumes
the line and returns the next ParserState. To support a new heading or field
convention, add a pattern to campaign_patterns.py and a rule to LINE_RULES.

Note: This module will keep evolving as plans in new formats are encountered.
"""

from dataclasses import dataclass, field, replace
from functools import reduce
from pathlib import Path
from typing import Any, Callable, Optional

from camper.contexts.intake.campaign_data_structure import CampaignDefinition
from camper.contexts.intake.campaign_patterns import (
    ALREADY_CREATED_MARKER,
    BUDGET_LOOKAHEAD_LINES,
    EXCLUSION_TRAILING_LINES,
    CampaignRecordPatterns,
    clean_campaign_name,
    is_field_label,
    is_field_line,
    is_heading,
    is_section_break,
    match_tier,
    parse_amount,
)
from camper.contexts.intake.normalizer import preprocess_campaign_markdown


@dataclass(frozen=True)
class ParserState:
    """
    Accumulator threaded through the fold.

    Attributes:
        current_tier: Tier declared by the most recent tier marker (None outside tiers)
        multi_line_section: True once the current tier used headings/labels for campaigns
        pending_name: Campaign name buffered by a heading or label, awaiting its budget
        pending_tier: Tier active when pending_name was buffered
        pending_index: Line index of the heading/label that buffered pending_name
        seen: (tier, name) pairs already emitted
        campaigns: Emitted definitions, in document order
        duplicates: (tier, name) pairs suppressed because they were already emitted
        excluded: Names skipped because their record is marked ALREADY CREATED
    """

    current_tier: Optional[int] = None
    multi_line_section: bool = False
    pending_name: Optional[str] = None
    pending_tier: Optional[int] = None
    pending_index: Optional[int] = None
    seen: frozenset = frozenset()
    campaigns: tuple = ()
    duplicates: tuple = ()
    excluded: tuple = ()

    def clear_pending(self) -> "ParserState":
        return replace(self, pending_name=None, pending_tier=None, pending_index=None)


@dataclass(frozen=True)
class LineContext:
    """A line being parsed, with the surrounding document for windowed checks."""

    lines: tuple
    index: int
    text: str


@dataclass(frozen=True)
class LineRule:
    """
    Declarative line rule.

    Attributes:
        name: Rule name (for debugging and tests)
        match: Returns a truthy match value for lines this rule consumes, else None
        apply: Computes the next state from (state, line context, match value)
    """

    name: str
    match: Callable[[str], Any]
    apply: Callable[[ParserState, LineContext, Any], ParserState]


# =============================================================================
# RECORD EMISSION
# =============================================================================


def _starts_record(line: str) -> bool:
    """Check if a line opens a new record (used to bound exclusion windows)."""
    return any(rule.match(line) for rule in LINE_RULES)


def _record_window(lines: tuple, start: int, end: int) -> str:
    """
    Text of a record plus a short trailing window.

    Covers lines[start:end+1] and up to EXCLUSION_TRAILING_LINES following
    lines, stopping at the first line that starts another record.
    """
    window = list(lines[start : end + 1])
    for following in lines[end + 1 : end + 1 + EXCLUSION_TRAILING_LINES]:
        if _starts_record(following.strip()):
            break
        window.append(following)
    return "\n".join(window)


def _emit(
    state: ParserState,
    lines: tuple,
    name: str,
    tier: int,
    raw_amount: str,
    start: int,
    end: int,
) -> ParserState:
    """Append a definition if it is valid, not excluded and not a duplicate."""
    amount = parse_amount(raw_amount)
    if amount is None or not name:
        return state

    if ALREADY_CREATED_MARKER in _record_window(lines, start, end):
        return replace(state, excluded=state.excluded + (name,))

    key = (tier, name)
    if key in state.seen:
        return replace(state, duplicates=state.duplicates + (key,))

    definition = CampaignDefinition(name=name, tier=tier, daily_budget=amount)
    return replace(
        state,
        seen=state.seen | {key},
        campaigns=state.campaigns + (definition,),
    )


# =============================================================================
# RULE HANDLERS
# =============================================================================


def _enter_tier(state: ParserState, ctx: LineContext, tier: int) -> ParserState:
    return replace(state.clear_pending(), current_tier=tier, multi_line_section=False)


def _close_section(state: ParserState, ctx: LineContext, _match) -> ParserState:
    return replace(state.clear_pending(), current_tier=None, multi_line_section=False)


def _buffer_name(state: ParserState, ctx: LineContext, match) -> ParserState:
    if state.current_tier is None:
        return state

    name = clean_campaign_name(match.group("name"))
    if not name:
        return state

    return replace(
        state,
        multi_line_section=True,
        pending_name=name,
        pending_tier=state.current_tier,
        pending_index=ctx.index,
    )


def _pair_budget(state: ParserState, ctx: LineContext, match) -> ParserState:
    if state.pending_name is None:
        return state

    if ctx.index - state.pending_index > BUDGET_LOOKAHEAD_LINES:
        # Too far from its heading: the buffered name is stale
        return state.clear_pending()

    emitted = _emit(
        state,
        ctx.lines,
        name=state.pending_name,
        tier=state.pending_tier,
        raw_amount=match.group("amount"),
        start=state.pending_index,
        end=ctx.index,
    )
    return emitted.clear_pending()


def _single_line_record(state: ParserState, ctx: LineContext, match) -> ParserState:
    if state.current_tier is None or state.multi_line_section or state.pending_name:
        return state

    name = clean_campaign_name(match.group("name"))
    if is_field_label(name):
        return state

    return _emit(
        state,
        ctx.lines,
        name=name,
        tier=state.current_tier,
        raw_amount=match.group("amount"),
        start=ctx.index,
        end=ctx.index,
    )


def _match_single_line(line: str):
    if is_heading(line) or is_field_line(line):
        return None
    return CampaignRecordPatterns.SINGLE_LINE.match(line)


# Tried in order; the first rule that matches consumes the line
LINE_RULES: tuple = (
    LineRule("tier_marker", match_tier, _enter_tier),
    LineRule("section_break", lambda line: is_section_break(line) or None, _close_section),
    LineRule("campaign_heading", CampaignRecordPatterns.CAMPAIGN_HEADING.match, _buffer_name),
    LineRule("campaign_name_label", CampaignRecordPatterns.CAMPAIGN_NAME_LABEL.search, _buffer_name),
    LineRule("daily_budget_label", CampaignRecordPatterns.DAILY_BUDGET_LABEL.search, _pair_budget),
    LineRule("single_line_record", _match_single_line, _single_line_record),
)


# =============================================================================
# PUBLIC API
# =============================================================================


def _step(lines: tuple) -> Callable[[ParserState, int], ParserState]:
    def step(state: ParserState, index: int) -> ParserState:
        text = lines[index].strip()
        if not text:
            return state

        ctx = LineContext(lines=lines, index=index, text=text)
        for rule in LINE_RULES:
            matched = rule.match(text)
            if matched:
                return rule.apply(state, ctx, matched)
        return state

    return step


@dataclass
class ParsedPlan:
    """
    Full parse result for a campaign plan.

    parse_campaigns() returns only the campaigns; validation and the preview CLI
    also need to know what the parser dropped.

    Attributes:
        raw_text: Plan text as given
        campaigns: Emitted definitions, in document order
        duplicates: (tier, name) pairs that appeared again after being emitted
        excluded: Names skipped because they are marked ALREADY CREATED
    """

    raw_text: str
    campaigns: list[CampaignDefinition] = field(default_factory=list)
    duplicates: list[tuple[int, str]] = field(default_factory=list)
    excluded: list[str] = field(default_factory=list)


def parse_campaign_plan(text: str) -> ParsedPlan:
    """
    Parse a markdown campaign plan, keeping track of dropped records.

    Never raises on malformed input.

    Args:
        text: Raw campaign plan markdown

    Returns:
        ParsedPlan with campaigns, suppressed duplicates and excluded names
    """
    if not text:
        return ParsedPlan(raw_text=text or "")

    lines = tuple(preprocess_campaign_markdown(text).split("\n"))
    final_state = reduce(_step(lines), range(len(lines)), ParserState())

    return ParsedPlan(
        raw_text=text,
        campaigns=list(final_state.campaigns),
        duplicates=list(final_state.duplicates),
        excluded=list(final_state.excluded),
    )


def parse_campaigns(text: str) -> list[CampaignDefinition]:
    """
    Parse a markdown campaign plan into campaign definitions.

    This is the main parsing function. It never raises on malformed input.

    Args:
        text: Raw campaign plan markdown

    Returns:
        Definitions in document order (possibly empty)
    """
    return parse_campaign_plan(text).campaigns


def parse_campaign_file(file_path: Path) -> list[CampaignDefinition]:
    """
    Parse a campaign plan from file.

    Args:
        file_path: Path to markdown file

    Returns:
        Definitions in document order (possibly empty)
    """
    return parse_campaigns(Path(file_path).read_text(encoding="utf-8"))


def format_campaigns_markdown(definitions: list[CampaignDefinition]) -> str:
    """
    Render definitions as a canonical plan (tier markers + single-line records).

    parse_campaigns() on the result reproduces the same (name, tier, daily_budget)
    for the definitions the parser produces. Some names only a "#### n." heading
    can carry: a name that embeds a "Campaign Name" or "Daily Budget" label, is a
    bare tier prefix ("T1") or is a field label ("Budget") does not survive the
    round trip.
    """
    blocks = []
    current_tier = None
    for definition in definitions:
        if definition.tier != current_tier:
            current_tier = definition.tier
            blocks.append(f"\n### TIER {current_tier} CAMPAIGNS\n")
        blocks.append(definition.to_markdown_line())
    return "\n".join(blocks).strip() + "\n"
