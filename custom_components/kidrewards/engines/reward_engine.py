"""Reward Engine - The points/activity/badge state machine.

RewardState owns every persisted field of the tracker and exposes every
mutating and query operation:

- award_points / award_activity: earn points, once-per-day gating, daily cap
- undo: reverse one ledger entry (badges are kept)
- evaluate_badges / check_badge_unlocked / badge_progress: achievements
- current_streak: consecutive days with points, ending today
- rollover_if_new_day / reset_all / apply_settings: day and global bookkeeping
- chart_series / recent_activity / *_progress: read-only projections

ARCHITECTURE: Pure Python with NO Home Assistant dependencies. The caller
(KidRewardsDataCoordinator) owns one instance, persists `to_dict()` after each
mutation and turns the returned result values into events and entity updates.
Expected outcomes (already completed today, daily limit reached, award
adjusted down) are result values, never exceptions.

The clock is injected so every "today" is deterministic under test.
"""

from __future__ import annotations

from collections.abc import Callable
import copy
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Any

from .. import const
from ..catalog import (
    ActivityCatalog,
    BadgeDefinition,
    build_activity_catalog,
    build_badge_table,
)
from ..utils import dt_utils
from ..utils.math_utils import calculate_percentage
from .badge_engine import BadgeEngine

if TYPE_CHECKING:
    from ..type_defs import (
        AwardPayload,
        BadgeContext,
        BadgeUnlock,
        LedgerEntry,
        RewardData,
        SettingsData,
        UndoPayload,
    )


class UnknownActivityError(KeyError):
    """Raised when an award names an activity missing from the catalog."""

    def __init__(self, activity_id: str) -> None:
        """Initialize UnknownActivityError.

        Args:
            activity_id: The id that was not found
        """
        self.activity_id = activity_id
        super().__init__(f"Unknown activity: {activity_id}")


class DailyLimitBelowTodayError(ValueError):
    """Raised when a new daily limit is lower than the points already earned today."""

    def __init__(self, daily_limit: int, today_points: int) -> None:
        """Initialize DailyLimitBelowTodayError.

        Args:
            daily_limit: The requested limit
            today_points: Points already earned today
        """
        self.daily_limit = daily_limit
        self.today_points = today_points
        super().__init__(
            f"Daily limit {daily_limit} is below today's {today_points} points"
        )


# =============================================================================
# Result Values
# =============================================================================


@dataclass(frozen=True, slots=True)
class AwardResult:
    """Outcome of an award attempt.

    `rejected` is None on success. A success with `awarded < requested` is an
    adjusted award (capped by the daily limit), not an error.
    """

    activity_id: str
    activity: str
    requested: int
    awarded: int
    rejected: str | None
    total_points: int
    today_points: int
    new_badges: tuple[str, ...] = field(default_factory=tuple)

    @property
    def success(self) -> bool:
        """True if any points were awarded."""
        return self.rejected is None

    @property
    def adjusted(self) -> bool:
        """True if the award was reduced to fit the daily limit."""
        return self.rejected is None and self.awarded < self.requested

    def as_dict(self) -> AwardPayload:
        """Return a JSON-serializable payload for service responses and events."""
        return {
            const.ATTR_ACTIVITY_ID: self.activity_id,
            const.ATTR_ACTIVITY: self.activity,
            const.ATTR_REQUESTED: self.requested,
            const.ATTR_AWARDED: self.awarded,
            const.ATTR_REJECTED: self.rejected,
            const.ATTR_ADJUSTED: self.adjusted,
            const.ATTR_NEW_BADGES: list(self.new_badges),
            const.ATTR_TOTAL_POINTS: self.total_points,
            const.ATTR_TODAY_POINTS: self.today_points,
        }  # type: ignore[return-value]


@dataclass(frozen=True, slots=True)
class UndoResult:
    """Outcome of a successful undo."""

    entry: LedgerEntry
    total_points: int
    today_points: int

    def as_dict(self) -> UndoPayload:
        """Return a JSON-serializable payload for service responses and events."""
        return {
            const.ATTR_UNDONE: True,
            const.ATTR_ENTRY: dict(self.entry),
            const.ATTR_TOTAL_POINTS: self.total_points,
            const.ATTR_TODAY_POINTS: self.today_points,
        }  # type: ignore[return-value]


# =============================================================================
# Persisted-data sanitizers (malformed fields fall back to defaults)
# =============================================================================


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return default
    return int(value)


def _as_int_map(value: Any) -> dict[str, int]:
    if not isinstance(value, dict):
        return {}
    return {
        str(key): _as_int(count, 0)
        for key, count in value.items()
        if not isinstance(count, bool) and isinstance(count, int | float)
    }


def _as_completion_map(value: Any) -> dict[str, dict[str, bool]]:
    if not isinstance(value, dict):
        return {}
    result: dict[str, dict[str, bool]] = {}
    for day, marks in value.items():
        if isinstance(marks, dict):
            result[str(day)] = {str(k): True for k, v in marks.items() if v is True}
    return result


def _as_ledger(value: Any) -> list[LedgerEntry]:
    if not isinstance(value, list):
        return []
    ledger: list[LedgerEntry] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        points = item.get(const.DATA_LEDGER_POINTS)
        day = item.get(const.DATA_LEDGER_DATE)
        if isinstance(points, bool) or not isinstance(points, int) or not isinstance(
            day, str
        ):
            continue
        ledger.append(
            {
                "activity_id": str(item.get(const.DATA_LEDGER_ACTIVITY_ID, "")),
                "activity": str(item.get(const.DATA_LEDGER_ACTIVITY, "")),
                "points": points,
                "timestamp": str(item.get(const.DATA_LEDGER_TIMESTAMP, "")),
                "date": day,
            }
        )
    return ledger


def _as_badge_record(value: Any) -> dict[str, BadgeUnlock]:
    if not isinstance(value, dict):
        return {}
    return {
        str(badge_id): {"unlocked_at": str(record.get(const.DATA_BADGE_UNLOCKED_AT))}
        for badge_id, record in value.items()
        if isinstance(record, dict) and record.get(const.DATA_BADGE_UNLOCKED_AT)
    }


def _as_settings(value: Any) -> SettingsData:
    raw = value if isinstance(value, dict) else {}
    display_name = raw.get(const.DATA_SETTINGS_DISPLAY_NAME)
    return {
        "display_name": display_name
        if isinstance(display_name, str)
        else const.DEFAULT_DISPLAY_NAME,
        "starting_points": _as_int(
            raw.get(const.DATA_SETTINGS_STARTING_POINTS),
            const.DEFAULT_STARTING_POINTS,
        ),
        "daily_limit": _as_int(
            raw.get(const.DATA_SETTINGS_DAILY_LIMIT), const.DEFAULT_DAILY_LIMIT
        ),
    }


# =============================================================================
# RewardState
# =============================================================================


class RewardState:
    """The reward tracker's whole state and its rules.

    Not thread-safe; every call runs to completion on the caller's thread
    (the Home Assistant event loop).
    """

    def __init__(
        self,
        data: RewardData | None = None,
        *,
        activities: ActivityCatalog | None = None,
        badges: list[BadgeDefinition] | None = None,
        clock: Callable[[], datetime] | None = None,
        max_ledger_entries: int = const.DEFAULT_LEDGER_MAX_ENTRIES,
    ) -> None:
        """Initialize the state.

        Args:
            data: Persisted document; None starts from the fresh default
            activities: Activity catalog (default table if None)
            badges: Badge definitions (default table if None)
            clock: Returns the current local datetime (dt_now_local if None)
            max_ledger_entries: Ledger retention (most recent kept)
        """
        self._clock = clock or dt_utils.dt_now_local
        self._activities = activities or build_activity_catalog()
        self._badges = (
            badges
            if badges is not None
            else build_badge_table(activities=self._activities)
        )
        self._max_ledger_entries = max_ledger_entries
        self._data: RewardData = (
            self.default_data() if data is None else self._sanitize(data)
        )

    # -------------------------------------------------------------------------
    # Construction / Serialization
    # -------------------------------------------------------------------------

    @staticmethod
    def default_data() -> RewardData:
        """Return the fresh default document."""
        return {
            "meta": {"schema_version": const.SCHEMA_VERSION_CURRENT},
            "total_points": 0,
            "daily_points": {},
            "daily_activities": {},
            "activity_counts": {},
            "activities": [],
            "badges": {},
            "settings": {
                "display_name": const.DEFAULT_DISPLAY_NAME,
                "starting_points": const.DEFAULT_STARTING_POINTS,
                "daily_limit": const.DEFAULT_DAILY_LIMIT,
            },
            "last_reset": None,
        }

    @staticmethod
    def _sanitize(data: Any) -> RewardData:
        """Coerce a loaded document into shape, defaulting bad fields one by one."""
        if not isinstance(data, dict):
            const.LOGGER.warning(
                "WARNING: Stored reward data is not a mapping (%s), using defaults",
                type(data).__name__,
            )
            return RewardState.default_data()

        last_reset = data.get(const.DATA_LAST_RESET)
        parsed_reset = dt_utils.dt_parse_date(last_reset)
        return {
            "meta": {"schema_version": const.SCHEMA_VERSION_CURRENT},
            "total_points": max(0, _as_int(data.get(const.DATA_TOTAL_POINTS), 0)),
            "daily_points": _as_int_map(data.get(const.DATA_DAILY_POINTS)),
            "daily_activities": _as_completion_map(
                data.get(const.DATA_DAILY_ACTIVITIES)
            ),
            "activity_counts": _as_int_map(data.get(const.DATA_ACTIVITY_COUNTS)),
            "activities": _as_ledger(data.get(const.DATA_LEDGER)),
            "badges": _as_badge_record(data.get(const.DATA_BADGES)),
            "settings": _as_settings(data.get(const.DATA_SETTINGS)),
            "last_reset": parsed_reset.isoformat() if parsed_reset else None,
        }

    @classmethod
    def from_dict(cls, data: Any, **kwargs: Any) -> RewardState:
        """Build a state from a persisted document, tolerating malformed fields."""
        return cls(cls._sanitize(data), **kwargs)

    def to_dict(self) -> RewardData:
        """Return a deep copy of the document for persistence."""
        return copy.deepcopy(self._data)

    # -------------------------------------------------------------------------
    # Read Accessors
    # -------------------------------------------------------------------------

    @property
    def activities(self) -> ActivityCatalog:
        """The activity catalog."""
        return self._activities

    @property
    def badges(self) -> list[BadgeDefinition]:
        """The badge definitions."""
        return list(self._badges)

    @property
    def total_points(self) -> int:
        """Lifetime point total."""
        return self._data["total_points"]

    @property
    def today_points(self) -> int:
        """Points earned today."""
        return self._data["daily_points"].get(self._today_iso(), 0)

    @property
    def daily_points(self) -> dict[str, int]:
        """Copy of the per-day points map."""
        return dict(self._data["daily_points"])

    @property
    def activity_counts(self) -> dict[str, int]:
        """Copy of the lifetime activity counters."""
        return dict(self._data["activity_counts"])

    @property
    def ledger(self) -> list[LedgerEntry]:
        """Copy of the ledger, newest first."""
        return [dict(entry) for entry in self._data["activities"]]  # type: ignore[misc]

    @property
    def unlocked_badges(self) -> dict[str, BadgeUnlock]:
        """Copy of the badge-unlock record."""
        return {k: dict(v) for k, v in self._data["badges"].items()}  # type: ignore[misc]

    @property
    def settings(self) -> SettingsData:
        """Copy of the settings."""
        return dict(self._data["settings"])  # type: ignore[return-value]

    @property
    def display_name(self) -> str:
        """The kid's display name."""
        return self._data["settings"]["display_name"]

    @property
    def daily_limit(self) -> int:
        """Maximum points that can be earned per day."""
        return self._data["settings"]["daily_limit"]

    @property
    def remaining_today(self) -> int:
        """Points still available today (never negative)."""
        return max(0, self.daily_limit - self.today_points)

    @property
    def last_reset(self) -> str | None:
        """Calendar day of the last rollover or reset."""
        return self._data["last_reset"]

    def is_completed_today(self, activity_id: str) -> bool:
        """Return True if the activity is marked completed for today."""
        marks = self._data["daily_activities"].get(self._today_iso(), {})
        return bool(marks.get(activity_id))

    # -------------------------------------------------------------------------
    # Awarding
    # -------------------------------------------------------------------------

    def award_points(
        self, activity_id: str, activity_label: str, requested_points: int
    ) -> AwardResult:
        """Award points for an activity.

        Order of checks: once-per-day gate, then daily limit. A request larger
        than what remains today is reduced to the remainder.

        Args:
            activity_id: Catalog id (quick_add and custom are repeatable)
            activity_label: Label recorded in the ledger
            requested_points: Positive integer points requested

        Returns:
            AwardResult; `rejected` is set and nothing changes when refused.

        Raises:
            ValueError: If requested_points is not a positive integer.
        """
        if (
            isinstance(requested_points, bool)
            or not isinstance(requested_points, int)
            or requested_points <= 0
        ):
            raise ValueError(
                f"Requested points must be a positive integer, got {requested_points!r}"
            )

        now = self._clock()
        today = now.date().isoformat()
        exempt = self._activities.is_repeatable(activity_id)
        daily_points = self._data["daily_points"]
        daily_activities = self._data["daily_activities"]

        if not exempt and daily_activities.get(today, {}).get(activity_id):
            const.LOGGER.debug(
                "DEBUG: Award '%s' rejected: already completed today", activity_id
            )
            return self._rejection(
                activity_id,
                activity_label,
                requested_points,
                const.REJECT_ALREADY_COMPLETED_TODAY,
            )

        remaining = self.daily_limit - daily_points.get(today, 0)
        if remaining <= 0:
            const.LOGGER.debug(
                "DEBUG: Award '%s' rejected: daily limit %s reached",
                activity_id,
                self.daily_limit,
            )
            return self._rejection(
                activity_id,
                activity_label,
                requested_points,
                const.REJECT_DAILY_LIMIT_REACHED,
            )

        actual = min(requested_points, remaining)

        self._data["total_points"] += actual
        daily_points[today] = daily_points.get(today, 0) + actual
        if not exempt:
            daily_activities.setdefault(today, {})[activity_id] = True
        counts = self._data["activity_counts"]
        counts[activity_id] = counts.get(activity_id, 0) + 1

        ledger = self._data["activities"]
        ledger.insert(
            0,
            {
                "activity_id": activity_id,
                "activity": activity_label,
                "points": actual,
                "timestamp": now.isoformat(),
                "date": today,
            },
        )
        del ledger[self._max_ledger_entries :]

        new_badges = self.evaluate_badges()

        if actual < requested_points:
            const.LOGGER.info(
                "INFO: Award '%s' adjusted from %s to %s points (daily limit %s)",
                activity_id,
                requested_points,
                actual,
                self.daily_limit,
            )

        return AwardResult(
            activity_id=activity_id,
            activity=activity_label,
            requested=requested_points,
            awarded=actual,
            rejected=None,
            total_points=self.total_points,
            today_points=daily_points[today],
            new_badges=tuple(new_badges),
        )

    def award_activity(self, activity_id: str) -> AwardResult:
        """Award a fixed-value catalog activity by id.

        Raises:
            UnknownActivityError: If the id is not a fixed-value catalog activity.
        """
        activity = self._activities.get(activity_id)
        if activity is None or activity.points is None:
            raise UnknownActivityError(activity_id)
        return self.award_points(activity.id, activity.name, activity.points)

    def _rejection(
        self, activity_id: str, activity_label: str, requested: int, reason: str
    ) -> AwardResult:
        return AwardResult(
            activity_id=activity_id,
            activity=activity_label,
            requested=requested,
            awarded=0,
            rejected=reason,
            total_points=self.total_points,
            today_points=self.today_points,
        )

    # -------------------------------------------------------------------------
    # Undo
    # -------------------------------------------------------------------------

    def undo(self, ledger_index: int) -> UndoResult | None:
        """Reverse the award recorded at `ledger_index` (0 = newest).

        Out-of-range indexes are a silent no-op (returns None). Badge unlocks
        are never reverted.
        """
        ledger = self._data["activities"]
        if (
            isinstance(ledger_index, bool)
            or not isinstance(ledger_index, int)
            or not 0 <= ledger_index < len(ledger)
        ):
            return None

        entry = ledger.pop(ledger_index)
        points = entry["points"]
        day = entry["date"]
        activity_id = entry["activity_id"]

        self._data["total_points"] = max(0, self._data["total_points"] - points)

        daily_points = self._data["daily_points"]
        if day in daily_points:
            daily_points[day] = max(0, daily_points[day] - points)

        counts = self._data["activity_counts"]
        if activity_id in counts:
            counts[activity_id] = max(0, counts[activity_id] - 1)

        marks = self._data["daily_activities"].get(day)
        if marks is not None:
            marks.pop(activity_id, None)

        const.LOGGER.debug(
            "DEBUG: Undid ledger entry %s (%s, %s points)",
            ledger_index,
            activity_id,
            points,
        )
        return UndoResult(
            entry=entry,
            total_points=self.total_points,
            today_points=self.today_points,
        )

    # -------------------------------------------------------------------------
    # Badges
    # -------------------------------------------------------------------------

    def badge_context(self) -> BadgeContext:
        """Build the pre-computed context BadgeEngine evaluates against."""
        return {
            "total_points": self.total_points,
            "today_points": self.today_points,
            "current_streak": self.current_streak(),
            "activity_counts": self._data["activity_counts"],
        }

    def check_badge_unlocked(self, badge: BadgeDefinition) -> bool:
        """Return True if the badge's requirement holds for the current state."""
        return BadgeEngine.evaluate_badge(self.badge_context(), badge)["met"]

    def badge_progress(self, badge: BadgeDefinition) -> float:
        """Return progress toward the badge (0.0 - 1.0); 1.0 once unlocked."""
        if badge.id in self._data["badges"]:
            return 1.0
        return BadgeEngine.evaluate_badge(self.badge_context(), badge)["progress"]

    def is_badge_unlocked(self, badge_id: str) -> bool:
        """Return True if the badge has been earned (ever)."""
        return badge_id in self._data["badges"]

    def evaluate_badges(self) -> list[str]:
        """Record first-time unlocks and return the newly unlocked badge ids."""
        unlocked = self._data["badges"]
        pending = [badge for badge in self._badges if badge.id not in unlocked]
        if not pending:
            return []

        context = self.badge_context()
        now_iso = self._clock().isoformat()
        newly_unlocked: list[str] = []
        for badge in pending:
            if BadgeEngine.evaluate_badge(context, badge)["met"]:
                unlocked[badge.id] = {"unlocked_at": now_iso}
                newly_unlocked.append(badge.id)
                const.LOGGER.info("INFO: Badge unlocked: %s", badge.id)
        return newly_unlocked

    # -------------------------------------------------------------------------
    # Streak
    # -------------------------------------------------------------------------

    def current_streak(self) -> int:
        """Count consecutive days with points, walking back from today.

        Returns 0 when today has no points.
        """
        daily_points = self._data["daily_points"]
        day = self._today()
        streak = 0
        while daily_points.get(day.isoformat(), 0) > 0:
            streak += 1
            day -= timedelta(days=1)
        return streak

    # -------------------------------------------------------------------------
    # Day / Global Bookkeeping
    # -------------------------------------------------------------------------

    def rollover_if_new_day(self) -> bool:
        """Clear the per-day maps when the calendar day has changed.

        Clears daily_activities and daily_points in full; total points,
        counters, ledger and badges persist. Idempotent within a day.

        Returns:
            True if a rollover happened.
        """
        today = self._today_iso()
        if self._data["last_reset"] == today:
            return False

        const.LOGGER.info(
            "INFO: New day %s (last reset %s), clearing daily tracking",
            today,
            self._data["last_reset"],
        )
        self._data["daily_activities"] = {}
        self._data["daily_points"] = {}
        self._data["last_reset"] = today
        return True

    def reset_all(self, *, clear_counters: bool = False) -> None:
        """Zero the total, clear daily points and the ledger.

        Activity counters are kept unless `clear_counters` is True. Badge
        unlocks and completion marks are always kept.
        """
        self._data["total_points"] = 0
        self._data["daily_points"] = {}
        self._data["activities"] = []
        self._data["last_reset"] = self._today_iso()
        if clear_counters:
            self._data["activity_counts"] = {}
        const.LOGGER.warning(
            "WARNING: All points reset (counters cleared: %s)", clear_counters
        )

    def apply_settings(
        self, display_name: str, starting_points: int, daily_limit: int
    ) -> list[str]:
        """Store settings; bootstrap the total from starting_points if it is 0.

        Returns:
            Badge ids newly unlocked by the bootstrap, if any.

        Raises:
            ValueError: If starting_points or daily_limit is negative.
            DailyLimitBelowTodayError: If daily_limit is below today's points;
                nothing is stored.
        """
        if starting_points < 0 or daily_limit < 0:
            raise ValueError(
                "starting_points and daily_limit must not be negative, got "
                f"{starting_points} and {daily_limit}"
            )
        if daily_limit < self.today_points:
            raise DailyLimitBelowTodayError(daily_limit, self.today_points)

        self._data["settings"] = {
            "display_name": display_name,
            "starting_points": starting_points,
            "daily_limit": daily_limit,
        }
        if self._data["total_points"] == 0:
            self._data["total_points"] = starting_points
            const.LOGGER.debug(
                "DEBUG: Total bootstrapped from starting points: %s", starting_points
            )
        return self.evaluate_badges()

    # -------------------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------------------

    def chart_series(
        self, window_days: int = const.DEFAULT_CHART_WINDOW_DAYS
    ) -> list[tuple[str, int]]:
        """Return (label, points) for the last `window_days` days, oldest first.

        Raises:
            ValueError: If window_days is less than 1.
        """
        if window_days < 1:
            raise ValueError(f"window_days must be at least 1, got {window_days}")

        today = self._today()
        daily_points = self._data["daily_points"]
        series: list[tuple[str, int]] = []
        for offset in range(window_days - 1, -1, -1):
            day = dt_utils.dt_days_back(today, offset)
            series.append(
                (
                    dt_utils.dt_day_label(day, today),
                    daily_points.get(day.isoformat(), 0),
                )
            )
        return series

    def recent_activity(
        self, limit: int = const.DEFAULT_RECENT_ACTIVITY_LIMIT
    ) -> list[LedgerEntry]:
        """Return the newest `limit` ledger entries."""
        return self.ledger[: max(0, limit)]

    def total_progress(self, goal: int = const.DEFAULT_TOTAL_PROGRESS_GOAL) -> float:
        """Lifetime points as a percentage of `goal` (capped at 100)."""
        return calculate_percentage(self.total_points, goal)

    def today_progress(self) -> float:
        """Today's points as a percentage of the daily limit (capped at 100)."""
        return calculate_percentage(self.today_points, self.daily_limit)

    # -------------------------------------------------------------------------
    # Clock helpers
    # -------------------------------------------------------------------------

    def _today(self) -> date:
        return self._clock().date()

    def _today_iso(self) -> str:
        return self._today().isoformat()
