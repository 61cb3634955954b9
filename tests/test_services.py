"""Service tests for KidRewards.

Each test loads the integration with a fresh store and drives it through the
registered services, checking both the response data and the bus events.
"""

from __future__ import annotations

from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ServiceValidationError
import pytest
from pytest_homeassistant_custom_component.common import (
    MockConfigEntry,
    async_capture_events,
)
import voluptuous as vol

from custom_components.kidrewards import const
from custom_components.kidrewards.services import (
    ADD_POINTS_SCHEMA,
    GET_CHART_SERIES_SCHEMA,
)
from tests.helpers import get_coordinator


async def _call(
    hass: HomeAssistant, service: str, data: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Call a KidRewards service and return its response."""
    response = await hass.services.async_call(
        const.DOMAIN,
        service,
        data or {},
        blocking=True,
        return_response=True,
    )
    assert response is not None
    return response


# =============================================================================
# award_activity
# =============================================================================


class TestAwardActivityService:
    """Tests for kidrewards.award_activity."""

    async def test_award_returns_outcome_and_fires_events(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """A first completion awards the catalog value and unlocks first_steps."""
        awarded = async_capture_events(hass, const.EVENT_POINTS_AWARDED)
        unlocked = async_capture_events(hass, const.EVENT_BADGE_UNLOCKED)

        response = await _call(
            hass, const.SERVICE_AWARD_ACTIVITY, {const.FIELD_ACTIVITY_ID: "homework"}
        )

        assert response[const.ATTR_AWARDED] == 10
        assert response[const.ATTR_REQUESTED] == 10
        assert response[const.ATTR_REJECTED] is None
        assert response[const.ATTR_TOTAL_POINTS] == 10
        assert response[const.ATTR_NEW_BADGES] == ["first_steps"]

        assert len(awarded) == 1
        assert awarded[0].data[const.ATTR_DISPLAY_NAME] == "Alex"
        assert [event.data[const.ATTR_BADGE_ID] for event in unlocked] == [
            "first_steps"
        ]

    async def test_second_completion_same_day_is_rejected(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """A non-repeatable activity is awarded at most once per day."""
        rejected = async_capture_events(hass, const.EVENT_AWARD_REJECTED)
        data = {const.FIELD_ACTIVITY_ID: "homework"}

        await _call(hass, const.SERVICE_AWARD_ACTIVITY, data)
        response = await _call(hass, const.SERVICE_AWARD_ACTIVITY, data)

        assert response[const.ATTR_AWARDED] == 0
        assert response[const.ATTR_REJECTED] == const.REJECT_ALREADY_COMPLETED_TODAY
        assert response[const.ATTR_TOTAL_POINTS] == 10
        assert len(rejected) == 1

    async def test_repeatable_activity_can_repeat(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """good_behavior is repeatable."""
        data = {const.FIELD_ACTIVITY_ID: "good_behavior"}

        await _call(hass, const.SERVICE_AWARD_ACTIVITY, data)
        response = await _call(hass, const.SERVICE_AWARD_ACTIVITY, data)

        assert response[const.ATTR_AWARDED] == 5
        assert response[const.ATTR_TODAY_POINTS] == 10

    async def test_unknown_activity_raises(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """An id outside the catalog is a validation error."""
        with pytest.raises(ServiceValidationError):
            await _call(
                hass, const.SERVICE_AWARD_ACTIVITY, {const.FIELD_ACTIVITY_ID: "nap"}
            )

        coordinator = get_coordinator(hass, init_integration)
        assert coordinator.state.total_points == 0


# =============================================================================
# add_points
# =============================================================================


class TestAddPointsService:
    """Tests for kidrewards.add_points."""

    async def test_quick_add_uses_configured_values(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """Quick add accepts configured values only."""
        response = await _call(
            hass,
            const.SERVICE_ADD_POINTS,
            {const.FIELD_POINTS: 5, const.FIELD_QUICK_ADD: True},
        )
        assert response[const.ATTR_ACTIVITY_ID] == const.ACTIVITY_ID_QUICK_ADD
        assert response[const.ATTR_AWARDED] == 5

        with pytest.raises(ServiceValidationError):
            await _call(
                hass,
                const.SERVICE_ADD_POINTS,
                {const.FIELD_POINTS: 7, const.FIELD_QUICK_ADD: True},
            )

    async def test_custom_amount(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """Any amount in 1..100 can be added as a custom entry."""
        response = await _call(hass, const.SERVICE_ADD_POINTS, {const.FIELD_POINTS: 7})

        assert response[const.ATTR_ACTIVITY_ID] == const.ACTIVITY_ID_CUSTOM
        assert response[const.ATTR_AWARDED] == 7

    def test_schema_bounds(self) -> None:
        """Custom amounts outside 1..100 fail validation."""
        assert ADD_POINTS_SCHEMA({const.FIELD_POINTS: "100"})[const.FIELD_POINTS] == 100
        with pytest.raises(vol.Invalid):
            ADD_POINTS_SCHEMA({const.FIELD_POINTS: 0})
        with pytest.raises(vol.Invalid):
            ADD_POINTS_SCHEMA({const.FIELD_POINTS: 500})

    async def test_daily_limit_adjusts_then_rejects(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """An award past the limit is reduced; at the limit it is rejected."""
        await _call(hass, const.SERVICE_APPLY_SETTINGS, {const.FIELD_DAILY_LIMIT: 20})
        await _call(hass, const.SERVICE_ADD_POINTS, {const.FIELD_POINTS: 15})

        adjusted = await _call(hass, const.SERVICE_ADD_POINTS, {const.FIELD_POINTS: 10})
        assert adjusted[const.ATTR_AWARDED] == 5
        assert adjusted[const.ATTR_ADJUSTED] is True
        assert adjusted[const.ATTR_TODAY_POINTS] == 20

        rejected = await _call(hass, const.SERVICE_ADD_POINTS, {const.FIELD_POINTS: 1})
        assert rejected[const.ATTR_AWARDED] == 0
        assert rejected[const.ATTR_REJECTED] == const.REJECT_DAILY_LIMIT_REACHED
        assert rejected[const.ATTR_TOTAL_POINTS] == 20


# =============================================================================
# undo_activity / reset_all_points
# =============================================================================


class TestUndoAndResetServices:
    """Tests for kidrewards.undo_activity and kidrewards.reset_all_points."""

    async def test_undo_newest_entry(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """Undo subtracts the points and frees the activity for today."""
        undone = async_capture_events(hass, const.EVENT_ACTIVITY_UNDONE)
        data = {const.FIELD_ACTIVITY_ID: "homework"}
        await _call(hass, const.SERVICE_AWARD_ACTIVITY, data)

        response = await _call(
            hass, const.SERVICE_UNDO_ACTIVITY, {const.FIELD_LEDGER_INDEX: 0}
        )

        assert response[const.ATTR_UNDONE] is True
        assert response[const.ATTR_ENTRY]["activity_id"] == "homework"
        assert response[const.ATTR_TOTAL_POINTS] == 0
        assert len(undone) == 1

        again = await _call(hass, const.SERVICE_AWARD_ACTIVITY, data)
        assert again[const.ATTR_AWARDED] == 10

    async def test_undo_invalid_index(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """An index outside the ledger is reported, not raised."""
        response = await _call(
            hass, const.SERVICE_UNDO_ACTIVITY, {const.FIELD_LEDGER_INDEX: 5}
        )

        assert response[const.ATTR_UNDONE] is False
        assert response[const.ATTR_TOTAL_POINTS] == 0

    async def test_reset_keeps_badges(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """Reset zeroes points but earned badges stay unlocked."""
        reset_events = async_capture_events(hass, const.EVENT_POINTS_RESET)
        await _call(
            hass, const.SERVICE_AWARD_ACTIVITY, {const.FIELD_ACTIVITY_ID: "homework"}
        )

        await hass.services.async_call(
            const.DOMAIN, const.SERVICE_RESET_ALL_POINTS, {}, blocking=True
        )

        coordinator = get_coordinator(hass, init_integration)
        assert coordinator.state.total_points == 0
        assert coordinator.state.today_points == 0
        assert coordinator.state.ledger == []
        assert coordinator.state.is_badge_unlocked("first_steps")
        assert reset_events[0].data[const.FIELD_CLEAR_COUNTERS] is False


# =============================================================================
# apply_settings / get_chart_series
# =============================================================================


class TestSettingsAndChartServices:
    """Tests for kidrewards.apply_settings and kidrewards.get_chart_series."""

    async def test_starting_points_bootstrap_total(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """Starting points seed a zero total and can unlock badges."""
        response = await _call(
            hass,
            const.SERVICE_APPLY_SETTINGS,
            {const.FIELD_DISPLAY_NAME: "Sam", const.FIELD_STARTING_POINTS: 120},
        )

        assert response[const.ATTR_DISPLAY_NAME] == "Sam"
        assert response[const.ATTR_TOTAL_POINTS] == 120
        assert set(response[const.ATTR_NEW_BADGES]) == {"first_steps", "century_club"}
        assert response[const.ATTR_DAILY_LIMIT] == const.DEFAULT_DAILY_LIMIT

    async def test_daily_limit_below_today_rejected(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """A limit under today's points is refused and the old limit stays."""
        await _call(hass, const.SERVICE_ADD_POINTS, {const.FIELD_POINTS: 30})

        with pytest.raises(ServiceValidationError) as err:
            await _call(
                hass, const.SERVICE_APPLY_SETTINGS, {const.FIELD_DAILY_LIMIT: 20}
            )

        assert (
            err.value.translation_key == const.TRANS_KEY_ERROR_DAILY_LIMIT_BELOW_TODAY
        )
        coordinator = get_coordinator(hass, init_integration)
        assert coordinator.state.daily_limit == const.DEFAULT_DAILY_LIMIT
        assert coordinator.state.today_points <= coordinator.state.daily_limit

    async def test_blank_display_name_rejected(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """A whitespace-only name is a validation error."""
        with pytest.raises(ServiceValidationError):
            await _call(
                hass, const.SERVICE_APPLY_SETTINGS, {const.FIELD_DISPLAY_NAME: "  "}
            )

    async def test_chart_series(
        self, hass: HomeAssistant, init_integration: MockConfigEntry
    ) -> None:
        """The series runs oldest to newest and ends with today."""
        await _call(
            hass, const.SERVICE_AWARD_ACTIVITY, {const.FIELD_ACTIVITY_ID: "homework"}
        )

        response = await _call(hass, const.SERVICE_GET_CHART_SERIES)

        assert response[const.ATTR_WINDOW_DAYS] == const.DEFAULT_CHART_WINDOW_DAYS
        assert len(response[const.ATTR_LABELS]) == const.DEFAULT_CHART_WINDOW_DAYS
        assert response[const.ATTR_LABELS][-2:] == ["Yesterday", "Today"]
        assert response[const.ATTR_VALUES][-1] == 10
        assert sum(response[const.ATTR_VALUES]) == 10

        short = await _call(
            hass, const.SERVICE_GET_CHART_SERIES, {const.FIELD_WINDOW_DAYS: 3}
        )
        assert len(short[const.ATTR_VALUES]) == 3

    def test_chart_schema_bounds(self) -> None:
        """Windows are limited to 1..31 days."""
        with pytest.raises(vol.Invalid):
            GET_CHART_SERIES_SCHEMA({const.FIELD_WINDOW_DAYS: 0})
        with pytest.raises(vol.Invalid):
            GET_CHART_SERIES_SCHEMA({const.FIELD_WINDOW_DAYS: 32})
