# File: rank_tracker/report/__init__.py
"""rank_tracker.report: Сохранение итогового набора записей в JSON и CSV."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from rank_tracker.models import CanonicalRecord
from rank_tracker.report.csv_report import render_csv
from rank_tracker.report.json_report import render_json


class ReportWriteError(OSError):
    """Отчёты не удалось записать; ``records`` по-прежнему хранит результаты."""

    def __init__(self, message: str, records: Sequence[CanonicalRecord]) -> None:
        super().__init__(message)
        self.records: List[CanonicalRecord] = list(records)


def make_timestamp(now: Optional[datetime] = None) -> str:
    """UTC-метка времени, пригодная для имён файлов, напр. ``2025-01-31T09-15-00-123Z``."""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S-") + f"{now.microsecond // 1000:03d}Z"


def write_reports(
    records: Sequence[CanonicalRecord],
    output_dir: Union[str, Path],
    timestamp: Optional[str] = None,
) -> Tuple[Path, Path]:
    """Сохраняет ``ranks-<timestamp>.json`` и ``ranks-<timestamp>.csv`` в папку *output_dir*."""
    stamp = timestamp or make_timestamp()
    out = Path(output_dir)
    try:
        json_path = render_json(records, out / f"ranks-{stamp}.json")
        csv_path = render_csv(records, out / f"ranks-{stamp}.csv")
    except OSError as exc:
        raise ReportWriteError(f"Could not write reports to {out}: {exc}", records) from exc
    return json_path, csv_path


__all__ = ["ReportWriteError", "make_timestamp", "render_csv", "render_json", "write_reports"]
