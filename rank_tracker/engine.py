# File: rank_tracker/engine.py
"""rank_tracker.engine: Orchestration layer для одного запуска сбора позиций."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from rank_tracker.config import TrackerConfig
from rank_tracker.client import SerpClient
from rank_tracker.dedup import dedupe_by_domain
from rank_tracker.executor import run_bounded
from rank_tracker.extractor import extract
from rank_tracker.inputs import read_locations, read_queries
from rank_tracker.logger import logger
from rank_tracker.models import CanonicalRecord, Task, TaskResult
from rank_tracker.normalizer import normalize
from rank_tracker.report import ReportWriteError, write_reports
from rank_tracker.tasks import generate_tasks, surfaces_for

__all__ = ["HarvestResult", "TrackingReport", "harvest", "track_ranks"]

FetchFn = Callable[[Task], Awaitable[Any]]


@dataclass(slots=True)
class HarvestResult:
    """Записи всех задач до дедупликации и счётчики исходов по задачам."""

    records: List[CanonicalRecord] = field(default_factory=list)
    total_tasks: int = 0
    succeeded: int = 0
    failed: int = 0


@dataclass(slots=True)
class TrackingReport:
    """Результат :func:`track_ranks`."""

    records: List[CanonicalRecord]
    collected: int
    total_tasks: int
    failed_tasks: int
    json_path: Optional[Path] = None
    csv_path: Optional[Path] = None


def _log_progress(result: TaskResult, done: int, total: int) -> None:
    if result.ok:
        logger.debug("Done: %s (%d/%d)", result.task.description, done, total)
    else:
        logger.warning("No response: %s (%d/%d)", result.task.description, done, total)


async def harvest(
    tasks: Sequence[Task],
    fetch: FetchFn,
    *,
    concurrency: int = 5,
    engine: str = "google",
    preserve_submission_order: bool = False,
) -> HarvestResult:
    """
    Выполняет все задачи и превращает ответы в канонические записи.

    По умолчанию записи копятся в порядке завершения, поэтому какая из двух
    записей с одним доменом переживёт дедупликацию, зависит от сети. С
    *preserve_submission_order* результаты сначала возвращаются в порядок
    генерации задач, и итог воспроизводим. Ошибка разбора одного ответа
    засчитывается как провал этой задачи и не прерывает остальные.
    """
    results = await run_bounded(tasks, concurrency, fetch, on_result=_log_progress)
    if preserve_submission_order:
        results = sorted(results, key=lambda r: r.index)

    outcome = HarvestResult(total_tasks=len(tasks))
    for result in results:
        if not result.ok:
            outcome.failed += 1
            continue
        task: Task = result.task
        try:
            raw_results = extract(result.value, task.surface)
            records = [normalize(raw, task, engine) for raw in raw_results]
        except Exception as exc:
            logger.error("Could not read results for %s: %s", task.description, exc)
            outcome.failed += 1
            continue
        if not raw_results:
            logger.warning("No %s results found for %s", task.surface, task.description)
        outcome.records.extend(records)
        outcome.succeeded += 1
        logger.info("%s: found %d results", task.description, len(raw_results))
    return outcome


async def track_ranks(config: TrackerConfig, fetch: Optional[FetchFn] = None) -> TrackingReport:
    """
    Запускает весь конвейер для *config*.

    Parameters
    ----------
    config : TrackerConfig
        Проверенные настройки запуска.
    fetch : callable, optional
        ``async fetch(task) -> payload | None``. По умолчанию
        :class:`SerpClient`, построенный из *config*.

    Returns
    -------
    TrackingReport
        Записи после дедупликации и пути к отчётам.

    Raises
    ------
    FileNotFoundError, ValueError
        Входные файлы не читаются; бросается до запуска задач.
    ReportWriteError
        Отчёты не записаны; ``exc.records`` хранит результаты.
    """
    logger.info("Reading input files...")
    queries = read_queries(config.queries_path)
    locations = read_locations(config.locations_path)
    logger.info("Loaded %d queries and %d locations", len(queries), len(locations))

    tasks = generate_tasks(queries, locations, surfaces_for(config.surface, config.include_maps))
    logger.info("Total tasks to process: %d (concurrency %d)", len(tasks), config.concurrency)

    start = time.monotonic()
    kwargs = dict(
        concurrency=config.concurrency,
        engine=config.engine,
        preserve_submission_order=config.preserve_submission_order,
    )
    if fetch is None:
        async with SerpClient(config) as client:
            outcome = await harvest(tasks, client.fetch, **kwargs)
    else:
        outcome = await harvest(tasks, fetch, **kwargs)
    duration = time.monotonic() - start
    logger.info(
        "Harvest finished in %.2f s: %d/%d tasks answered, %d records collected",
        duration, outcome.succeeded, outcome.total_tasks, len(outcome.records),
    )

    records = dedupe_by_domain(outcome.records)
    logger.info("Results after deduplication: %d", len(records))

    report = TrackingReport(
        records=records,
        collected=len(outcome.records),
        total_tasks=outcome.total_tasks,
        failed_tasks=outcome.failed,
    )
    try:
        report.json_path, report.csv_path = write_reports(records, config.output_dir)
    except ReportWriteError as exc:
        logger.error("%s", exc)
        raise
    logger.info("JSON: %s", report.json_path)
    logger.info("CSV: %s", report.csv_path)
    return report
