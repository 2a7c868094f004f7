"""
File operation utilities.

This module provides utilities for saving classified lesson schedules
as JSON and CSV files.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from ..models.lesson import EnrichedLesson


logger = logging.getLogger(__name__)

SCHEDULE_COLUMNS = [
    "id", "date", "time", "mode", "label", "booked", "peoples", "reservation_id"
]


def save_json(data: Dict[str, Any], filepath: Path) -> bool:
    """
    Save data to JSON file.

    Args:
        data: Dictionary data to save
        filepath: Path to save the JSON file

    Returns:
        True if save successful, False otherwise
    """
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        logger.debug(f"Saved JSON file: {filepath}")
        return True

    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Failed to save JSON file {filepath}: {e}", exc_info=True)
        return False


def save_csv(df: pd.DataFrame, filepath: Path) -> bool:
    """
    Save DataFrame to CSV file.

    Args:
        df: Pandas DataFrame to save
        filepath: Path to save the CSV file

    Returns:
        True if save successful, False otherwise
    """
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)

        df.to_csv(filepath, index=False, encoding='utf-8')

        logger.debug(f"Saved CSV file: {filepath}")
        return True

    except OSError as e:
        logger.error(f"Failed to save CSV file {filepath}: {e}", exc_info=True)
        return False


def lessons_to_dataframe(lessons: List[EnrichedLesson]) -> pd.DataFrame:
    """
    Flatten classified lessons into one row per lesson.

    The roster is reduced to its size (``booked``) and the mode to its
    wire integer, so the frame carries no viewer identities.

    Examples:
        >>> df = lessons_to_dataframe(page.lessons)
        >>> df[["time", "label"]]
    """
    rows = []
    for lesson in lessons:
        rows.append({
            "id": lesson.get("id"),
            "date": lesson.get("date"),
            "time": lesson.get("time"),
            "mode": int(lesson["mode"]) if "mode" in lesson else None,
            "label": lesson.get("label"),
            "booked": len(lesson.get("users") or []),
            "peoples": lesson.get("peoples") or 0,
            "reservation_id": lesson.get("reservation_id"),
        })
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)


def export_schedule(
    lessons: List[EnrichedLesson],
    output_dir: Path,
    stem: str
) -> Dict[str, Path]:
    """
    Write a classified schedule as ``<stem>.json`` and ``<stem>.csv``.

    Args:
        lessons: Classified lessons
        output_dir: Target directory
        stem: File name without extension

    Returns:
        Mapping of format ("json"/"csv") to the path written
    """
    df = lessons_to_dataframe(lessons)
    written = {}

    json_path = output_dir / f"{stem}.json"
    # Round-trip through pandas so NaN/None serialise uniformly
    records = json.loads(df.to_json(orient="records", force_ascii=False))
    if save_json({"lessons": records}, json_path):
        written["json"] = json_path

    csv_path = output_dir / f"{stem}.csv"
    if save_csv(df, csv_path):
        written["csv"] = csv_path

    logger.info(f"Exported {len(df)} lessons to {output_dir}")
    return written
