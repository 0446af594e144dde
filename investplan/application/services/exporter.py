"""Export services for projections.

Saves projections to JSON (full snapshot) and CSV (per-allocation table)
for analysis outside the app. Money is rounded to cents and rates to four
decimals here, never inside the engine.
"""

import json
import os
from typing import Any, Dict, Optional

from investplan.core.logging import get_logger
from investplan.core.settings import get_settings
from investplan.domain.models.projection import Projection

log = get_logger(__name__)

MONEY_COLUMNS = [
    "Principal",
    "Contribution / Period",
    "Withdrawal / Period",
    "Future Value",
    "Total Returns",
]
RATE_COLUMNS = ["Expected Return", "CAGR"]


class ResultExporter:
    """Handles exporting of strategy projections."""

    def __init__(self, output_dir: Optional[str] = None):
        """Initialize exporter.

        Args:
            output_dir: Directory where results will be saved (defaults to settings).
        """
        self.output_dir = output_dir or get_settings().export_dir
        self._ensure_dir()

    def _ensure_dir(self):
        """Ensure output directory exists."""
        if not os.path.exists(self.output_dir):
            os.makedirs(self.output_dir, exist_ok=True)
            log.info("created_output_directory", path=self.output_dir)

    def _filename(self, projection: Projection, prefix: str, ext: str) -> str:
        timestamp = projection.generated_at.strftime("%Y%m%d_%H%M%S")
        slug = "".join(c if c.isalnum() else "_" for c in projection.strategy_name.lower())
        return os.path.join(self.output_dir, f"{prefix}_{slug}_{timestamp}.{ext}")

    def save_json(
        self,
        projection: Projection,
        prefix: str = "projection",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Save a projection to a JSON file.

        Args:
            projection: Projection to export.
            prefix: Filename prefix.
            metadata: Optional metadata to include in the file.

        Returns:
            Path to the saved file.
        """
        filepath = self._filename(projection, prefix, "json")
        payload = {
            "metadata": {
                "generated_at": projection.generated_at.isoformat(),
                "count": len(projection.snapshot),
                **(metadata or {}),
            },
            "projection": projection.to_dict(),
        }

        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except OSError as e:
            log.error("projection_save_failed", path=filepath, error=str(e))
            raise

        log.info("projection_saved", path=filepath, count=len(projection.snapshot))
        return filepath

    def save_csv(self, projection: Projection, prefix: str = "projection") -> str:
        """Save the per-allocation table to CSV, rounded for display."""
        filepath = self._filename(projection, prefix, "csv")
        df = projection.to_frame()
        if not df.empty:
            df[MONEY_COLUMNS] = df[MONEY_COLUMNS].round(2)
            df[RATE_COLUMNS] = df[RATE_COLUMNS].astype(float).round(4)

        try:
            df.to_csv(filepath, index=False)
        except OSError as e:
            log.error("projection_save_failed", path=filepath, error=str(e))
            raise

        log.info("projection_saved", path=filepath, count=len(df))
        return filepath
