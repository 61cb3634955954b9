"""Badge Engine - Pure logic for badge requirement evaluation.

This engine provides stateless, pure Python functions for:
- Badge requirement evaluation (total points, activity count, daily points, streak)
- Progress calculation toward a requirement threshold

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are class/static methods that operate on passed-in data.

PURITY REQUIREMENT: This engine receives ALL data via the context parameter.
RewardState is responsible for building the context (today's points, current
streak, counters) and for recording unlocks.

Requirement Kinds:
- total_points: Lifetime point total >= threshold
- activity: Lifetime completions of one activity >= threshold
- daily_points: Points earned today >= threshold
- streak: Consecutive days with points (ending today) >= threshold
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from .. import const
from ..catalog import BadgeRequirement, RequirementKind

if TYPE_CHECKING:
    from ..catalog import BadgeDefinition
    from ..type_defs import BadgeContext, CriterionResult


# Handler function signature: (context, requirement) -> current value
RequirementHandler = Callable[["BadgeContext", BadgeRequirement], int]


class BadgeEngine:
    """Pure logic engine for badge evaluation.

    All methods are static - no instance state. This enables easy unit testing
    without any Home Assistant mocking.

    Evaluation Flow:
        1. RewardState builds a BadgeContext from current state
        2. Engine looks up the handler for the requirement kind
        3. Engine returns a CriterionResult (met, progress, reason)
        4. RewardState records first-time unlocks
    """

    # Maps requirement kind to the handler that extracts the current value
    _REQUIREMENT_HANDLERS: dict[RequirementKind, RequirementHandler] = {}

    @classmethod
    def _register_handlers(cls) -> None:
        """Register all requirement handlers.

        Every RequirementKind must have a handler; a missing one fails loudly
        on first use instead of silently never unlocking.
        """
        if cls._REQUIREMENT_HANDLERS:
            return

        cls._REQUIREMENT_HANDLERS = {
            RequirementKind.TOTAL_POINTS: cls._total_points_value,
            RequirementKind.ACTIVITY: cls._activity_count_value,
            RequirementKind.DAILY_POINTS: cls._daily_points_value,
            RequirementKind.STREAK: cls._streak_value,
        }
        missing = set(RequirementKind) - set(cls._REQUIREMENT_HANDLERS)
        if missing:
            raise RuntimeError(f"No badge handler for kinds: {sorted(missing)}")

    # =========================================================================
    # MAIN EVALUATION METHODS
    # =========================================================================

    @classmethod
    def evaluate_requirement(
        cls,
        context: BadgeContext,
        requirement: BadgeRequirement,
    ) -> CriterionResult:
        """Evaluate one requirement against the context.

        Args:
            context: BadgeContext with pre-computed totals
            requirement: The badge requirement to check

        Returns:
            CriterionResult with met status and progress
        """
        cls._register_handlers()
        handler = cls._REQUIREMENT_HANDLERS[requirement.kind]
        current_value = handler(context, requirement)
        threshold = requirement.threshold
        met = current_value >= threshold
        progress = min(1.0, current_value / threshold) if threshold > 0 else 1.0

        return {
            "kind": str(requirement.kind),
            "met": met,
            "progress": progress,
            "current_value": current_value,
            "threshold": threshold,
            "reason": f"{requirement.kind}: {current_value}/{threshold}",
        }

    @classmethod
    def evaluate_badge(
        cls,
        context: BadgeContext,
        badge: BadgeDefinition,
    ) -> CriterionResult:
        """Evaluate a badge definition against the context."""
        result = cls.evaluate_requirement(context, badge.requirement)
        const.LOGGER.debug(
            "DEBUG: Badge '%s' evaluated: %s (met=%s)",
            badge.id,
            result["reason"],
            result["met"],
        )
        return result

    # =========================================================================
    # REQUIREMENT HANDLERS
    # =========================================================================

    @staticmethod
    def _total_points_value(
        context: BadgeContext, requirement: BadgeRequirement
    ) -> int:
        return context["total_points"]

    @staticmethod
    def _activity_count_value(
        context: BadgeContext, requirement: BadgeRequirement
    ) -> int:
        if requirement.activity_id is None:
            return 0
        return context["activity_counts"].get(requirement.activity_id, 0)

    @staticmethod
    def _daily_points_value(
        context: BadgeContext, requirement: BadgeRequirement
    ) -> int:
        return context["today_points"]

    @staticmethod
    def _streak_value(context: BadgeContext, requirement: BadgeRequirement) -> int:
        return context["current_streak"]
