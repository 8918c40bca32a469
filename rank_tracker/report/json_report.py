# rank_tracker/report/json_report.py

"""
Генерация JSON-отчёта трекера позиций.

Сериализация полного списка записей (все поля) в файл.
"""
import json
from pathlib import Path
from typing import Iterable

from rank_tracker.models import CanonicalRecord


def render_json(records: Iterable[CanonicalRecord], output_path: Path | str) -> Path:
    """
    Сохраняет записи records в формате JSON по указанному пути.

    :param records: канонические записи, пишутся в переданном порядке
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from rank_tracker.report.json_report import render_json
    report_path = render_json(records, 'output/ranks.json')
    ```
    """
    # Приводим к Path
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = [record.to_dict() for record in records]

    # Запись в файл с отступами и Unicode
    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
