"""
Story Overview Aggregator.

Builds a cross-story overview table from persisted statistics.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Dict, List

import pandas as pd

from src.utils.storage import StorageManager

logger = logging.getLogger(__name__)

OVERVIEW_COLUMNS = ["Story", "Total", "Unique", "Top Answer", "Top %", "Quality"]


class StoryTrendAggregator:
    """
    Aggregates per-story statistics into one overview table.
    """

    def __init__(self, storage: StorageManager):
        """
        Initialize aggregator.

        Args:
            storage: Storage manager for loading statistics and quality reports
        """
        self.storage = storage

    def build_overview(self) -> pd.DataFrame:
        """
        Build the overview DataFrame, one row per processed story.

        Sorted by total answers (descending); stories with equal totals keep
        their story-id order.
        """
        rows: List[Dict] = []

        for story_id in self.storage.get_all_story_ids():
            statistics = self.storage.load_statistics(story_id)
            if statistics is None:
                logger.warning(f"Statistics for {story_id} unreadable, skipping")
                continue

            quality = self.storage.load_quality_report(story_id)
            top = statistics.top_answers[0] if statistics.top_answers else None

            rows.append({
                "Story": story_id,
                "Total": statistics.total_answers,
                "Unique": statistics.unique_answers,
                "Top Answer": top.answer if top else "",
                "Top %": top.percentage if top else 0.0,
                "Quality": quality.quality if quality else ""
            })

        df = pd.DataFrame(rows, columns=OVERVIEW_COLUMNS)
        if not df.empty:
            df = df.sort_values("Total", ascending=False, kind="stable").reset_index(drop=True)

        return df

    def generate_overview_table(self, output_dir: str = "output") -> str:
        """
        Write the overview table as CSV with a metadata JSON beside it.

        Args:
            output_dir: Directory to save CSV output

        Returns:
            Path to generated CSV file
        """
        df = self.build_overview()

        if df.empty:
            logger.warning("No processed stories found, creating empty overview table")

        os.makedirs(output_dir, exist_ok=True)
        output_path = os.path.join(output_dir, "story_overview.csv")
        df.to_csv(output_path, index=False)

        logger.info(f"Overview table saved to {output_path} ({len(df)} stories)")

        metadata_path = os.path.join(output_dir, "story_overview_metadata.json")
        metadata = {
            "total_stories": len(df),
            "total_answers": int(df["Total"].sum()) if not df.empty else 0,
            "quality_breakdown": {
                str(k): int(v) for k, v in df["Quality"].value_counts().items()
            } if not df.empty else {},
            "generated_at": datetime.now(timezone.utc).isoformat()
        }

        with open(metadata_path, 'w', encoding='utf-8') as f:
            json.dump(metadata, f, indent=2)

        logger.info(f"Metadata saved to {metadata_path}")

        return output_path
