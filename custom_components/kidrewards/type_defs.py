"""Type definitions for KidRewards data structures.

TypedDict is used for the STATIC structures (fixed keys known at design time):
ledger entries, settings, badge unlock records and the persisted document.
Maps keyed by runtime values (calendar days, activity ids, badge ids) stay
plain ``dict[str, ...]``.

IMPORTANT: This file must NOT import from coordinator.py or any module that
imports the coordinator, to avoid circular dependencies.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime validation of persisted data
happens in RewardState.from_dict().
"""

from typing import NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ActivityId = str  # catalog key, e.g. "homework"
BadgeId = str  # catalog key, e.g. "on_fire"
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00-05:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"


# =============================================================================
# Persisted Structures
# =============================================================================


class LedgerEntry(TypedDict):
    """A single point-awarding event.

    Created by: RewardState.award_points()
    Stored in: RewardData["activities"] (newest first, max 50)
    Removed by: RewardState.undo()
    """

    activity_id: ActivityId
    activity: str  # Display label at the time of the award
    points: int
    timestamp: ISODatetime
    date: ISODate


class BadgeUnlock(TypedDict):
    """Write-once record of a badge being earned."""

    unlocked_at: ISODatetime


class SettingsData(TypedDict):
    """User-editable settings, changed only by apply_settings()."""

    display_name: str
    starting_points: int
    daily_limit: int


class MetaData(TypedDict):
    """Storage metadata."""

    schema_version: int


class RewardData(TypedDict):
    """The whole persisted document (one Store key)."""

    meta: MetaData
    total_points: int
    daily_points: dict[ISODate, int]
    daily_activities: dict[ISODate, dict[ActivityId, bool]]
    activity_counts: dict[ActivityId, int]
    activities: list[LedgerEntry]
    badges: dict[BadgeId, BadgeUnlock]
    settings: SettingsData
    last_reset: ISODate | None


# =============================================================================
# Service / Event Payloads
# =============================================================================


class AwardPayload(TypedDict):
    """Response data for award_activity / add_points and the award events."""

    activity_id: ActivityId
    activity: str
    requested: int
    awarded: int
    rejected: str | None
    adjusted: bool
    new_badges: list[BadgeId]
    total_points: int
    today_points: int


class UndoPayload(TypedDict):
    """Response data for undo_activity."""

    undone: bool
    entry: NotRequired[LedgerEntry]
    total_points: int
    today_points: int


# =============================================================================
# Badge Evaluation (BadgeEngine input/output)
# =============================================================================


class BadgeContext(TypedDict):
    """Pre-computed values a badge requirement is evaluated against.

    Built by RewardState.badge_context(); BadgeEngine never reads state itself.
    """

    total_points: int
    today_points: int
    current_streak: int
    activity_counts: dict[ActivityId, int]


class CriterionResult(TypedDict):
    """Outcome of evaluating one badge requirement."""

    kind: str
    met: bool
    progress: float  # 0.0 - 1.0
    current_value: int
    threshold: int
    reason: str
