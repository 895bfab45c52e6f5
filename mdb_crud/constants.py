"""
Constants for MDB_CRUD.

This module contains shared constants used across the codebase to avoid
magic numbers and stringly-typed field names.
"""

from typing import Final

# ============================================================================
# DATABASE CONSTANTS
# ============================================================================

# Connection pool defaults
DEFAULT_MAX_POOL_SIZE: Final[int] = 50
"""Default maximum MongoDB connection pool size."""

DEFAULT_MIN_POOL_SIZE: Final[int] = 10
"""Default minimum MongoDB connection pool size."""

DEFAULT_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 5000
"""Default server selection timeout in milliseconds."""

DEFAULT_MAX_IDLE_TIME_MS: Final[int] = 45000
"""Default maximum idle time before closing connections (milliseconds)."""

MIN_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 1000
"""Lowest accepted server selection timeout (milliseconds)."""

APP_NAME: Final[str] = "MDB_CRUD"
"""Application name reported to the MongoDB server."""

# ============================================================================
# DOCUMENT FIELD NAMES
# ============================================================================

ID_FIELD: Final[str] = "_id"
"""Document field holding the entity identity."""

# ============================================================================
# HTTP BOUNDARY CONSTANTS
# ============================================================================

CLAIM_USER_ID: Final[str] = "user_id"
CLAIM_FULL_NAME: Final[str] = "full_name"
CLAIM_USER_NAME: Final[str] = "user_name"
CLAIM_ROLE: Final[str] = "role"

DEFAULT_SUCCESS_MESSAGE: Final[str] = "success"
"""Message attached to result envelopes when none is given."""
