"""
FILE: lanes/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - SEED_COLUMNS: Column titles every new board starts with
  - PRIORITIES / DEFAULT_PRIORITY: Valid task priorities
  - MIN_DRAG_DISTANCE / MIN_DRAG_DURATION_MS: Drop intent thresholds
  - STORAGE_KEY: Key holding the serialized board collection
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - Centralized constants to avoid magic strings
"""

# Board seeding
SEED_COLUMNS = ("TODO", "DOING", "DONE")

# Task priority constants
PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITIES = (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH)
DEFAULT_PRIORITY = PRIORITY_MEDIUM

# A drop counts as intentional if either threshold is met
MIN_DRAG_DISTANCE = 10
MIN_DRAG_DURATION_MS = 100

# Persistence
STORAGE_KEY = "kanban_data"

# User-facing persistence error messages
SAVE_ERROR_MESSAGE = "Failed to save data"
LOAD_ERROR_MESSAGE = "Failed to load data"
