# File: const.py
"""Constants for the KidRewards integration.

This file centralizes configuration keys, defaults, storage keys, event names,
service names and platform identifiers for consistency across the integration.
"""

import logging

from homeassistant.const import Platform

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
KIDREWARDS_TITLE = "KidRewards"

# Integration Domain
DOMAIN = "kidrewards"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.BUTTON,
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# hass.data keys
STORAGE_MANAGER = "storage_manager"

# Storage and Versioning
STORAGE_KEY = "kidrewards_data"
STORAGE_VERSION = 1

# Update Interval (minutes) - periodic refresh only re-checks the day rollover
DEFAULT_UPDATE_INTERVAL = 5

# Local midnight, used to schedule the daily rollover
DEFAULT_DAILY_RESET_TIME = {"hour": 0, "minute": 0, "second": 0}

# ------------------------------------------------------------------------------------------------
# Configuration Keys (config entry data / options)
# ------------------------------------------------------------------------------------------------
CONF_DISPLAY_NAME = "display_name"
CONF_POINTS_LABEL = "points_label"
CONF_POINTS_ICON = "points_icon"
CONF_CHART_WINDOW_DAYS = "chart_window_days"
CONF_QUICK_ADD_VALUES = "quick_add_values"

# ConfigFlow / OptionsFlow Steps
CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"

# ------------------------------------------------------------------------------------------------
# Defaults
# ------------------------------------------------------------------------------------------------
DEFAULT_DISPLAY_NAME = "Kid"
DEFAULT_POINTS_LABEL = "Points"
DEFAULT_POINTS_ICON = "mdi:star-outline"
DEFAULT_CHART_WINDOW_DAYS = 7
MIN_CHART_WINDOW_DAYS = 1
MAX_CHART_WINDOW_DAYS = 31

DEFAULT_DAILY_LIMIT = 50
DEFAULT_STARTING_POINTS = 0

# Ledger retention (most recent entries kept)
DEFAULT_LEDGER_MAX_ENTRIES = 50

# Number of ledger entries shown as "recent activity"
DEFAULT_RECENT_ACTIVITY_LIMIT = 10

# Total points that fill the lifetime progress bar
DEFAULT_TOTAL_PROGRESS_GOAL = 100

# Manual point entry bounds
CUSTOM_POINTS_MIN = 1
CUSTOM_POINTS_MAX = 100

# Float precision for progress percentages
DATA_FLOAT_PRECISION = 2

# ------------------------------------------------------------------------------------------------
# Storage Data Keys
# ------------------------------------------------------------------------------------------------
SCHEMA_VERSION_CURRENT = 1

DATA_TOTAL_POINTS = "total_points"
DATA_DAILY_POINTS = "daily_points"
DATA_DAILY_ACTIVITIES = "daily_activities"
DATA_ACTIVITY_COUNTS = "activity_counts"
DATA_LEDGER = "activities"
DATA_BADGES = "badges"
DATA_SETTINGS = "settings"
DATA_LAST_RESET = "last_reset"

# Ledger entry fields
DATA_LEDGER_ACTIVITY_ID = "activity_id"
DATA_LEDGER_ACTIVITY = "activity"
DATA_LEDGER_POINTS = "points"
DATA_LEDGER_TIMESTAMP = "timestamp"
DATA_LEDGER_DATE = "date"

# Badge unlock record fields
DATA_BADGE_UNLOCKED_AT = "unlocked_at"

# Settings fields
DATA_SETTINGS_DISPLAY_NAME = "display_name"
DATA_SETTINGS_STARTING_POINTS = "starting_points"
DATA_SETTINGS_DAILY_LIMIT = "daily_limit"

# ------------------------------------------------------------------------------------------------
# Activity Catalog
# ------------------------------------------------------------------------------------------------
ACTIVITY_ID_QUICK_ADD = "quick_add"
ACTIVITY_ID_CUSTOM = "custom"
ACTIVITY_LABEL_QUICK_ADD = "Quick Add"
ACTIVITY_LABEL_CUSTOM = "Custom Points"

# Point values offered as quick-add buttons
DEFAULT_QUICK_ADD_VALUES = [1, 5, 10]

# Catalog definition fields
CATALOG_ID = "id"
CATALOG_NAME = "name"
CATALOG_POINTS = "points"
CATALOG_ICON = "icon"
CATALOG_REPEATABLE = "repeatable"
CATALOG_DESCRIPTION = "description"
CATALOG_REQUIREMENT = "requirement"
CATALOG_REQUIREMENT_KIND = "kind"
CATALOG_REQUIREMENT_THRESHOLD = "threshold"
CATALOG_REQUIREMENT_ACTIVITY_ID = "activity_id"

# Badge requirement kinds
REQUIREMENT_TOTAL_POINTS = "total_points"
REQUIREMENT_ACTIVITY = "activity"
REQUIREMENT_DAILY_POINTS = "daily_points"
REQUIREMENT_STREAK = "streak"

# ------------------------------------------------------------------------------------------------
# Award Results
# ------------------------------------------------------------------------------------------------
REJECT_ALREADY_COMPLETED_TODAY = "already_completed_today"
REJECT_DAILY_LIMIT_REACHED = "daily_limit_reached"

# ------------------------------------------------------------------------------------------------
# Events (fired on the Home Assistant bus)
# ------------------------------------------------------------------------------------------------
EVENT_POINTS_AWARDED = f"{DOMAIN}_points_awarded"
EVENT_AWARD_REJECTED = f"{DOMAIN}_award_rejected"
EVENT_BADGE_UNLOCKED = f"{DOMAIN}_badge_unlocked"
EVENT_ACTIVITY_UNDONE = f"{DOMAIN}_activity_undone"
EVENT_POINTS_RESET = f"{DOMAIN}_points_reset"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_AWARD_ACTIVITY = "award_activity"
SERVICE_ADD_POINTS = "add_points"
SERVICE_UNDO_ACTIVITY = "undo_activity"
SERVICE_RESET_ALL_POINTS = "reset_all_points"
SERVICE_APPLY_SETTINGS = "apply_settings"
SERVICE_GET_CHART_SERIES = "get_chart_series"

# Service fields
FIELD_ACTIVITY_ID = "activity_id"
FIELD_POINTS = "points"
FIELD_QUICK_ADD = "quick_add"
FIELD_LEDGER_INDEX = "index"
FIELD_CLEAR_COUNTERS = "clear_counters"
FIELD_DISPLAY_NAME = "display_name"
FIELD_STARTING_POINTS = "starting_points"
FIELD_DAILY_LIMIT = "daily_limit"
FIELD_WINDOW_DAYS = "window_days"

# ------------------------------------------------------------------------------------------------
# Result / Attribute Keys
# ------------------------------------------------------------------------------------------------
ATTR_AWARDED = "awarded"
ATTR_POINTS = "points"
ATTR_REQUESTED = "requested"
ATTR_REJECTED = "rejected"
ATTR_ADJUSTED = "adjusted"
ATTR_NEW_BADGES = "new_badges"
ATTR_TOTAL_POINTS = "total_points"
ATTR_TODAY_POINTS = "today_points"
ATTR_UNDONE = "undone"
ATTR_ENTRY = "entry"
ATTR_ACTIVITY_ID = "activity_id"
ATTR_ACTIVITY = "activity"
ATTR_BADGE_ID = "badge_id"
ATTR_BADGE_NAME = "badge_name"
ATTR_DESCRIPTION = "description"
ATTR_DISPLAY_NAME = "display_name"
ATTR_DAILY_LIMIT = "daily_limit"
ATTR_REMAINING_TODAY = "remaining_today"
ATTR_PROGRESS = "progress"
ATTR_UNLOCKED = "unlocked"
ATTR_UNLOCKED_AT = "unlocked_at"
ATTR_REQUIREMENT = "requirement"
ATTR_THRESHOLD = "threshold"
ATTR_LABELS = "labels"
ATTR_VALUES = "values"
ATTR_SERIES = "series"
ATTR_WINDOW_DAYS = "window_days"
ATTR_RECENT_ACTIVITY = "recent_activity"
ATTR_BADGES_UNLOCKED = "badges_unlocked"
ATTR_ACTIVITY_COUNTS = "activity_counts"
ATTR_LAST_RESET = "last_reset"

# ------------------------------------------------------------------------------------------------
# Entity unique_id suffixes
# ------------------------------------------------------------------------------------------------
SENSOR_UID_SUFFIX_TOTAL_POINTS = "_total_points"
SENSOR_UID_SUFFIX_TODAY_POINTS = "_today_points"
SENSOR_UID_SUFFIX_STREAK = "_streak"
SENSOR_UID_SUFFIX_POINTS_HISTORY = "_points_history"
SENSOR_UID_SUFFIX_RECENT_ACTIVITY = "_recent_activity"
SENSOR_UID_SUFFIX_BADGES_EARNED = "_badges_earned"
SENSOR_UID_MIDFIX_BADGE = "_badge_"
BUTTON_UID_MIDFIX_ACTIVITY = "_activity_"
BUTTON_UID_MIDFIX_QUICK_ADD = "_quick_add_"

# ------------------------------------------------------------------------------------------------
# Translation Keys
# ------------------------------------------------------------------------------------------------
TRANS_KEY_SENSOR_TOTAL_POINTS = "total_points"
TRANS_KEY_SENSOR_TODAY_POINTS = "today_points"
TRANS_KEY_SENSOR_STREAK = "streak"
TRANS_KEY_SENSOR_POINTS_HISTORY = "points_history"
TRANS_KEY_SENSOR_RECENT_ACTIVITY = "recent_activity"
TRANS_KEY_SENSOR_BADGES_EARNED = "badges_earned"
TRANS_KEY_SENSOR_BADGE = "badge"
TRANS_KEY_BUTTON_ACTIVITY = "activity"
TRANS_KEY_BUTTON_QUICK_ADD = "quick_add"

TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
TRANS_KEY_ERROR_NO_ENTRY = "no_entry_loaded"
TRANS_KEY_ERROR_UNKNOWN_ACTIVITY = "unknown_activity"
TRANS_KEY_ERROR_INVALID_QUICK_ADD = "invalid_quick_add"
TRANS_KEY_ERROR_INVALID_DISPLAY_NAME = "invalid_display_name"
TRANS_KEY_ERROR_POINTS_LABEL_REQUIRED = "points_label_required"
TRANS_KEY_ERROR_DAILY_LIMIT_BELOW_TODAY = "daily_limit_below_today"

# Placeholders
TRANS_KEY_ATTR_DISPLAY_NAME = "display_name"
TRANS_KEY_ATTR_ACTIVITY_NAME = "activity_name"
TRANS_KEY_ATTR_BADGE_NAME = "badge_name"
TRANS_KEY_ATTR_POINTS = "points"
TRANS_KEY_ATTR_POINTS_LABEL = "points_label"
TRANS_KEY_ATTR_DAILY_LIMIT = "daily_limit"
TRANS_KEY_ATTR_TODAY_POINTS = "today_points"

# ------------------------------------------------------------------------------------------------
# Badge states / icons
# ------------------------------------------------------------------------------------------------
BADGE_STATE_LOCKED = "locked"
BADGE_STATE_UNLOCKED = "unlocked"

DEFAULT_STREAK_ICON = "mdi:fire"
DEFAULT_TODAY_ICON = "mdi:calendar-star"
DEFAULT_HISTORY_ICON = "mdi:chart-line"
DEFAULT_RECENT_ACTIVITY_ICON = "mdi:history"
DEFAULT_BADGES_ICON = "mdi:medal"
DEFAULT_BADGE_LOCKED_ICON = "mdi:lock-outline"
DEFAULT_QUICK_ADD_ICON = "mdi:plus-circle"
DEFAULT_ACTIVITY_ICON = "mdi:checkbox-marked-circle-outline"

# Messages
MSG_NO_ENTRY_FOUND = "No KidRewards entry found"
