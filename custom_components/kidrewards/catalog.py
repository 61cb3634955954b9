# File: catalog.py
"""Activity catalog and badge rule table for the KidRewards integration.

Both tables are closed, validated configuration structures:

- ActivityDefinition: id, display name, fixed point value, icon, repeatable flag
- BadgeDefinition: id, name, description, icon and a BadgeRequirement whose
  `kind` is one of the four RequirementKind variants

Raw dict input (defaults below, or user-supplied tables) is validated with
voluptuous schemas and frozen into dataclasses. The "repeatable exemption set"
(activities that can be earned more than once per day) is data here: the
quick-add and custom entries are always repeatable, and any catalog activity
can opt in with `repeatable: True`.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import voluptuous as vol

from . import const


class CatalogError(ValueError):
    """Raised when an activity or badge table fails validation."""


class RequirementKind(StrEnum):
    """Closed set of badge requirement kinds."""

    TOTAL_POINTS = const.REQUIREMENT_TOTAL_POINTS
    ACTIVITY = const.REQUIREMENT_ACTIVITY
    DAILY_POINTS = const.REQUIREMENT_DAILY_POINTS
    STREAK = const.REQUIREMENT_STREAK


@dataclass(frozen=True, slots=True)
class ActivityDefinition:
    """One awardable activity.

    `points` is None for the quick-add and custom entries, whose value is
    supplied with each award.
    """

    id: str
    name: str
    points: int | None
    icon: str = const.DEFAULT_ACTIVITY_ICON
    repeatable: bool = False


@dataclass(frozen=True, slots=True)
class BadgeRequirement:
    """Unlock condition for a badge."""

    kind: RequirementKind
    threshold: int
    activity_id: str | None = None


@dataclass(frozen=True, slots=True)
class BadgeDefinition:
    """A named achievement unlocked once its requirement holds."""

    id: str
    name: str
    description: str
    icon: str
    requirement: BadgeRequirement


# =============================================================================
# Schemas
# =============================================================================

_ID = vol.All(str, vol.Length(min=1), vol.Match(r"^[a-z0-9_]+$"))

ACTIVITY_SCHEMA = vol.Schema(
    {
        vol.Required(const.CATALOG_ID): _ID,
        vol.Required(const.CATALOG_NAME): vol.All(str, vol.Length(min=1)),
        vol.Required(const.CATALOG_POINTS): vol.All(
            vol.Coerce(int),
            vol.Range(min=const.CUSTOM_POINTS_MIN, max=const.CUSTOM_POINTS_MAX),
        ),
        vol.Optional(const.CATALOG_ICON, default=const.DEFAULT_ACTIVITY_ICON): str,
        vol.Optional(const.CATALOG_REPEATABLE, default=False): bool,
    }
)


def _requirement_activity_present(value: dict[str, Any]) -> dict[str, Any]:
    """Activity requirements must name the activity they count."""
    kind = value[const.CATALOG_REQUIREMENT_KIND]
    activity_id = value.get(const.CATALOG_REQUIREMENT_ACTIVITY_ID)
    if kind == RequirementKind.ACTIVITY and not activity_id:
        raise vol.Invalid("activity requirement needs an activity_id")
    if kind != RequirementKind.ACTIVITY and activity_id:
        raise vol.Invalid(f"{kind} requirement does not take an activity_id")
    return value


REQUIREMENT_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Required(const.CATALOG_REQUIREMENT_KIND): vol.All(
                vol.In([kind.value for kind in RequirementKind]),
                vol.Coerce(RequirementKind),
            ),
            vol.Required(const.CATALOG_REQUIREMENT_THRESHOLD): vol.All(
                vol.Coerce(int), vol.Range(min=1)
            ),
            vol.Optional(const.CATALOG_REQUIREMENT_ACTIVITY_ID): _ID,
        }
    ),
    _requirement_activity_present,
)

BADGE_SCHEMA = vol.Schema(
    {
        vol.Required(const.CATALOG_ID): _ID,
        vol.Required(const.CATALOG_NAME): vol.All(str, vol.Length(min=1)),
        vol.Optional(const.CATALOG_DESCRIPTION, default=""): str,
        vol.Optional(const.CATALOG_ICON, default=const.DEFAULT_BADGES_ICON): str,
        vol.Required(const.CATALOG_REQUIREMENT): REQUIREMENT_SCHEMA,
    }
)


# =============================================================================
# Default Tables
# =============================================================================

DEFAULT_ACTIVITIES: list[dict[str, Any]] = [
    {
        const.CATALOG_ID: "homework",
        const.CATALOG_NAME: "Homework Done",
        const.CATALOG_POINTS: 10,
        const.CATALOG_ICON: "mdi:book-open-variant",
    },
    {
        const.CATALOG_ID: "clean_room",
        const.CATALOG_NAME: "Cleaned Room",
        const.CATALOG_POINTS: 15,
        const.CATALOG_ICON: "mdi:broom",
    },
    {
        const.CATALOG_ID: "brush_teeth",
        const.CATALOG_NAME: "Brushed Teeth",
        const.CATALOG_POINTS: 5,
        const.CATALOG_ICON: "mdi:toothbrush",
    },
    {
        const.CATALOG_ID: "read_book",
        const.CATALOG_NAME: "Read a Book",
        const.CATALOG_POINTS: 10,
        const.CATALOG_ICON: "mdi:book-open-page-variant",
    },
    {
        const.CATALOG_ID: "help_family",
        const.CATALOG_NAME: "Helped Family",
        const.CATALOG_POINTS: 10,
        const.CATALOG_ICON: "mdi:hand-heart",
    },
    {
        const.CATALOG_ID: "exercise",
        const.CATALOG_NAME: "Exercise",
        const.CATALOG_POINTS: 10,
        const.CATALOG_ICON: "mdi:run",
    },
    {
        const.CATALOG_ID: "good_behavior",
        const.CATALOG_NAME: "Good Behavior",
        const.CATALOG_POINTS: 5,
        const.CATALOG_ICON: "mdi:emoticon-happy-outline",
        const.CATALOG_REPEATABLE: True,
    },
]

DEFAULT_BADGES: list[dict[str, Any]] = [
    {
        const.CATALOG_ID: "first_steps",
        const.CATALOG_NAME: "First Steps",
        const.CATALOG_DESCRIPTION: "Earn your first 10 points",
        const.CATALOG_ICON: "mdi:shoe-print",
        const.CATALOG_REQUIREMENT: {
            const.CATALOG_REQUIREMENT_KIND: const.REQUIREMENT_TOTAL_POINTS,
            const.CATALOG_REQUIREMENT_THRESHOLD: 10,
        },
    },
    {
        const.CATALOG_ID: "century_club",
        const.CATALOG_NAME: "Century Club",
        const.CATALOG_DESCRIPTION: "Earn 100 points in total",
        const.CATALOG_ICON: "mdi:numeric-10-box-multiple",
        const.CATALOG_REQUIREMENT: {
            const.CATALOG_REQUIREMENT_KIND: const.REQUIREMENT_TOTAL_POINTS,
            const.CATALOG_REQUIREMENT_THRESHOLD: 100,
        },
    },
    {
        const.CATALOG_ID: "point_master",
        const.CATALOG_NAME: "Point Master",
        const.CATALOG_DESCRIPTION: "Earn 500 points in total",
        const.CATALOG_ICON: "mdi:crown",
        const.CATALOG_REQUIREMENT: {
            const.CATALOG_REQUIREMENT_KIND: const.REQUIREMENT_TOTAL_POINTS,
            const.CATALOG_REQUIREMENT_THRESHOLD: 500,
        },
    },
    {
        const.CATALOG_ID: "bookworm",
        const.CATALOG_NAME: "Bookworm",
        const.CATALOG_DESCRIPTION: "Read 5 books",
        const.CATALOG_ICON: "mdi:bookshelf",
        const.CATALOG_REQUIREMENT: {
            const.CATALOG_REQUIREMENT_KIND: const.REQUIREMENT_ACTIVITY,
            const.CATALOG_REQUIREMENT_THRESHOLD: 5,
            const.CATALOG_REQUIREMENT_ACTIVITY_ID: "read_book",
        },
    },
    {
        const.CATALOG_ID: "homework_hero",
        const.CATALOG_NAME: "Homework Hero",
        const.CATALOG_DESCRIPTION: "Finish homework 10 times",
        const.CATALOG_ICON: "mdi:school",
        const.CATALOG_REQUIREMENT: {
            const.CATALOG_REQUIREMENT_KIND: const.REQUIREMENT_ACTIVITY,
            const.CATALOG_REQUIREMENT_THRESHOLD: 10,
            const.CATALOG_REQUIREMENT_ACTIVITY_ID: "homework",
        },
    },
    {
        const.CATALOG_ID: "super_day",
        const.CATALOG_NAME: "Super Day",
        const.CATALOG_DESCRIPTION: "Earn 30 points in one day",
        const.CATALOG_ICON: "mdi:white-balance-sunny",
        const.CATALOG_REQUIREMENT: {
            const.CATALOG_REQUIREMENT_KIND: const.REQUIREMENT_DAILY_POINTS,
            const.CATALOG_REQUIREMENT_THRESHOLD: 30,
        },
    },
    {
        const.CATALOG_ID: "perfect_day",
        const.CATALOG_NAME: "Perfect Day",
        const.CATALOG_DESCRIPTION: "Earn 50 points in one day",
        const.CATALOG_ICON: "mdi:star-circle",
        const.CATALOG_REQUIREMENT: {
            const.CATALOG_REQUIREMENT_KIND: const.REQUIREMENT_DAILY_POINTS,
            const.CATALOG_REQUIREMENT_THRESHOLD: 50,
        },
    },
    {
        const.CATALOG_ID: "on_fire",
        const.CATALOG_NAME: "On Fire",
        const.CATALOG_DESCRIPTION: "Earn points 3 days in a row",
        const.CATALOG_ICON: "mdi:fire",
        const.CATALOG_REQUIREMENT: {
            const.CATALOG_REQUIREMENT_KIND: const.REQUIREMENT_STREAK,
            const.CATALOG_REQUIREMENT_THRESHOLD: 3,
        },
    },
    {
        const.CATALOG_ID: "week_warrior",
        const.CATALOG_NAME: "Week Warrior",
        const.CATALOG_DESCRIPTION: "Earn points 7 days in a row",
        const.CATALOG_ICON: "mdi:calendar-check",
        const.CATALOG_REQUIREMENT: {
            const.CATALOG_REQUIREMENT_KIND: const.REQUIREMENT_STREAK,
            const.CATALOG_REQUIREMENT_THRESHOLD: 7,
        },
    },
]


# =============================================================================
# Catalog Containers
# =============================================================================


class ActivityCatalog:
    """Ordered, read-only activity table with the built-in repeatable entries."""

    def __init__(self, activities: list[ActivityDefinition]) -> None:
        """Initialize the catalog, adding quick-add and custom entries."""
        builtins = [
            ActivityDefinition(
                id=const.ACTIVITY_ID_QUICK_ADD,
                name=const.ACTIVITY_LABEL_QUICK_ADD,
                points=None,
                icon=const.DEFAULT_QUICK_ADD_ICON,
                repeatable=True,
            ),
            ActivityDefinition(
                id=const.ACTIVITY_ID_CUSTOM,
                name=const.ACTIVITY_LABEL_CUSTOM,
                points=None,
                icon=const.DEFAULT_QUICK_ADD_ICON,
                repeatable=True,
            ),
        ]
        self._activities: dict[str, ActivityDefinition] = {
            activity.id: activity for activity in builtins
        }
        for activity in activities:
            if activity.id in self._activities:
                raise CatalogError(f"Duplicate activity id: {activity.id}")
            self._activities[activity.id] = activity

    def __contains__(self, activity_id: object) -> bool:
        return activity_id in self._activities

    def __iter__(self) -> Iterator[ActivityDefinition]:
        return iter(self._activities.values())

    def __len__(self) -> int:
        return len(self._activities)

    def get(self, activity_id: str) -> ActivityDefinition | None:
        """Return the activity definition, or None if unknown."""
        return self._activities.get(activity_id)

    def is_repeatable(self, activity_id: str) -> bool:
        """Return True if the activity may be awarded more than once per day.

        Ids not in the catalog are treated as non-repeatable.
        """
        activity = self._activities.get(activity_id)
        return activity.repeatable if activity else False

    @property
    def repeatable_ids(self) -> frozenset[str]:
        """The repeatable exemption set."""
        return frozenset(a.id for a in self._activities.values() if a.repeatable)

    @property
    def fixed_activities(self) -> list[ActivityDefinition]:
        """Catalog activities with a fixed point value (one button each)."""
        return [a for a in self._activities.values() if a.points is not None]


def build_activity_catalog(
    raw_activities: list[dict[str, Any]] | None = None,
) -> ActivityCatalog:
    """Validate a raw activity table and build an ActivityCatalog.

    Raises:
        CatalogError: If any entry fails validation or ids collide.
    """
    raw = DEFAULT_ACTIVITIES if raw_activities is None else raw_activities
    activities: list[ActivityDefinition] = []
    for item in raw:
        try:
            valid = ACTIVITY_SCHEMA(item)
        except vol.Invalid as err:
            raise CatalogError(f"Invalid activity {item!r}: {err}") from err
        activities.append(
            ActivityDefinition(
                id=valid[const.CATALOG_ID],
                name=valid[const.CATALOG_NAME],
                points=valid[const.CATALOG_POINTS],
                icon=valid[const.CATALOG_ICON],
                repeatable=valid[const.CATALOG_REPEATABLE],
            )
        )
    return ActivityCatalog(activities)


def build_badge_table(
    raw_badges: list[dict[str, Any]] | None = None,
    activities: ActivityCatalog | None = None,
) -> list[BadgeDefinition]:
    """Validate a raw badge table and build BadgeDefinitions.

    When `activities` is given, activity requirements must reference an
    activity that exists in it.

    Raises:
        CatalogError: If any badge fails validation, ids collide, or an
            activity requirement names an unknown activity.
    """
    raw = DEFAULT_BADGES if raw_badges is None else raw_badges
    badges: list[BadgeDefinition] = []
    seen: set[str] = set()
    for item in raw:
        try:
            valid = BADGE_SCHEMA(item)
        except vol.Invalid as err:
            raise CatalogError(f"Invalid badge {item!r}: {err}") from err

        badge_id = valid[const.CATALOG_ID]
        if badge_id in seen:
            raise CatalogError(f"Duplicate badge id: {badge_id}")
        seen.add(badge_id)

        req = valid[const.CATALOG_REQUIREMENT]
        requirement = BadgeRequirement(
            kind=req[const.CATALOG_REQUIREMENT_KIND],
            threshold=req[const.CATALOG_REQUIREMENT_THRESHOLD],
            activity_id=req.get(const.CATALOG_REQUIREMENT_ACTIVITY_ID),
        )
        if (
            activities is not None
            and requirement.activity_id is not None
            and requirement.activity_id not in activities
        ):
            raise CatalogError(
                f"Badge {badge_id} counts unknown activity {requirement.activity_id}"
            )

        badges.append(
            BadgeDefinition(
                id=badge_id,
                name=valid[const.CATALOG_NAME],
                description=valid[const.CATALOG_DESCRIPTION],
                icon=valid[const.CATALOG_ICON],
                requirement=requirement,
            )
        )
    return badges
