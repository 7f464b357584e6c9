"""Batch comparisons: one verdict row per username pair in a CSV file.

Pairs that fail (bad usernames, unknown users, upstream trouble) get an ``error`` row
instead of stopping the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pandas as pd
from tqdm import tqdm

from ..exceptions import BatchInputError, SkillmetterError
from ..infrastructure import LocalFileSystem
from ..observability import get_logger
from ..protocols import FileSystem
from ..schemas import BATCH_INPUT_COLUMNS, BATCH_OUTPUT_COLUMNS, validate_columns
from .compare import ComparisonResult, ComparisonService

BATCH_CLIENT_KEY = "batch"

logger = get_logger("application.batch")


@dataclass(frozen=True)
class BatchSummary:
    """Counts and output location for one batch run."""

    total: int
    succeeded: int
    failed: int
    out_path: Path


def _result_row(user1: str, user2: str, result: ComparisonResult) -> dict[str, object]:
    verdict = result.verdict
    return {
        "user1": user1,
        "user2": user2,
        "status": "ok",
        "winner": verdict.winner.value,
        "winner_username": verdict.winner_username,
        "user1_total": result.user1_scores.total_score,
        "user2_total": result.user2_scores.total_score,
        "margin": verdict.margin,
        "user1_title": verdict.user1_title.title,
        "user2_title": verdict.user2_title.title,
        "share_id": result.share_id,
        "error": "",
    }


def _error_row(user1: str, user2: str, error: Exception) -> dict[str, object]:
    row: dict[str, object] = dict.fromkeys(BATCH_OUTPUT_COLUMNS, "")
    row.update({"user1": user1, "user2": user2, "status": "error", "error": str(error)})
    return row


def _write_rows(fs: FileSystem, rows: list[dict[str, object]], out_path: Path) -> None:
    fs.write_csv(pd.DataFrame(rows, columns=BATCH_OUTPUT_COLUMNS), out_path)


def run_batch_compare(
    pairs_path: str | Path,
    out_path: str | Path,
    *,
    service: ComparisonService,
    fs: FileSystem | None = None,
    show_progress: bool = True,
) -> BatchSummary:
    """Compare every ``user1,user2`` pair in ``pairs_path`` and write verdict rows.

    Args:
        pairs_path: CSV with ``user1`` and ``user2`` columns.
        out_path: Destination CSV, written with ``BATCH_OUTPUT_COLUMNS``.
        service: Comparison service used for each pair.
        fs: Optional filesystem for testing.
        show_progress: Show a tqdm progress bar.

    Returns:
        BatchSummary with success and failure counts.

    Raises:
        BatchInputError: If the input file is missing or lacks the user columns.
    """
    fs = fs or LocalFileSystem()
    pairs_path = Path(pairs_path)
    out_path = Path(out_path)
    if not fs.exists(pairs_path):
        raise BatchInputError(str(pairs_path), "file not found")

    df = fs.read_csv(pairs_path).fillna("")
    validate_columns(list(df.columns), BATCH_INPUT_COLUMNS, str(pairs_path))
    logger.info("Batch: %s pairs from %s", len(df), pairs_path)

    rows: list[dict[str, object]] = []
    failed = 0
    pairs = list(zip(df["user1"].astype(str), df["user2"].astype(str), strict=True))
    try:
        for user1, user2 in tqdm(
            pairs, total=len(pairs), desc="Comparisons", disable=not show_progress
        ):
            try:
                result = service.compare(user1, user2, client_key=BATCH_CLIENT_KEY)
            except SkillmetterError as exc:
                logger.warning("Comparison %s vs %s failed: %s", user1, user2, exc)
                rows.append(_error_row(user1, user2, exc))
                failed += 1
                continue
            rows.append(_result_row(user1, user2, result))
    except (KeyboardInterrupt, Exception):
        logger.error("Batch stopped after %s of %s pairs", len(rows), len(pairs))
        _write_rows(fs, rows, out_path)
        raise

    _write_rows(fs, rows, out_path)
    logger.info("Batch verdicts: %s (%s ok, %s failed)", out_path, len(rows) - failed, failed)
    return BatchSummary(
        total=len(rows), succeeded=len(rows) - failed, failed=failed, out_path=out_path
    )
