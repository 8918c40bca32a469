# rank_tracker/report/csv_report.py

"""
CSV-отчёт с фиксированным порядком колонок.

В отличие от JSON-отчёта, колонка ``country`` не выводится (см. ``CSV_COLUMNS``).
"""
import csv
from pathlib import Path
from typing import Iterable

from rank_tracker.models import CSV_COLUMNS, CanonicalRecord


def render_csv(records: Iterable[CanonicalRecord], output_path: Path | str) -> Path:
    """Пишет заголовок и по строке на запись в *output_path*, возвращает путь."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=list(CSV_COLUMNS))
        writer.writeheader()
        for record in records:
            writer.writerow(record.csv_row())

    return output
