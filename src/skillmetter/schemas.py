"""Column contracts for batch comparison files.

These define the expected columns at the batch boundary, enabling validation and
clear documentation of the CSV formats.
"""

from __future__ import annotations

from .exceptions import BatchInputError

# One comparison per row
BATCH_INPUT_COLUMNS = frozenset(["user1", "user2"])

# Verdict rows, in output order
BATCH_OUTPUT_COLUMNS = [
    "user1",
    "user2",
    "status",
    "winner",
    "winner_username",
    "user1_total",
    "user2_total",
    "margin",
    "user1_title",
    "user2_title",
    "share_id",
    "error",
]


def validate_columns(df_columns: list[str], required: frozenset[str], source: str) -> None:
    """Raise BatchInputError if any required column is absent."""
    missing = required - set(df_columns)
    if missing:
        raise BatchInputError(source, f"missing required columns: {sorted(missing)}")
