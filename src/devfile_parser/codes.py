"""Error code constants for devfile_parser errors.

These constants prevent stringly-typed error codes and ensure
client code matches on the correct resolution failure.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Resolution and parse error codes."""

    # Loading
    INVALID_CONTEXT = "INVALID_CONTEXT"
    UNSUPPORTED_API_VERSION = "UNSUPPORTED_API_VERSION"
    FETCH_FAILED = "FETCH_FAILED"

    # Decoding
    DECODE_FAILED = "DECODE_FAILED"
    DUPLICATE_ID = "DUPLICATE_ID"

    # Flattening
    OVERRIDE_TARGET_MISSING = "OVERRIDE_TARGET_MISSING"
    OVERRIDE_INVALID = "OVERRIDE_INVALID"
    MERGE_CONFLICT = "MERGE_CONFLICT"
    CYCLE_DETECTED = "CYCLE_DETECTED"
    DEPTH_EXCEEDED = "DEPTH_EXCEEDED"

    # Generator-level checks
    INVALID_CLONE_PATH = "INVALID_CLONE_PATH"
