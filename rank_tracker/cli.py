# === FILE: rank_tracker/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска трекера позиций через командную строку.

Команды:
  track     Собрать позиции для запросов x локаций и сохранить отчёты
  config    Показать текущую конфигурацию (токен скрыт)
  geo       Показать каноническое имя и uule-токен для города

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Пример:
  rank-tracker track --queries data/queries.csv --locations data/locations.csv --maps -c 10
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from rank_tracker import __version__
from rank_tracker.config import SUPPORTED_ENGINES, load_config
from rank_tracker.engine import track_ranks
from rank_tracker.geo import GeoResolutionError, GeoTargetResolver, encode_location
from rank_tracker.logger import DEFAULT_FORMAT, init_logging
from rank_tracker.models import Surface
from rank_tracker.report import ReportWriteError

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _load(ctx, **overrides):
    try:
        return load_config(ctx.obj['config_path'], overrides)
    except ValidationError as e:
        print_error(f'Некорректная конфигурация: {e}')
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='rank-tracker, version %(version)s')
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML или JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд трекера позиций в выдаче."""
    init_logging(level=log_level, log_file=log_file, log_format=log_format)
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('track', context_settings=CONTEXT_SETTINGS)
@click.option('--engine', '-e', type=click.Choice(SUPPORTED_ENGINES), default=None,
              help='Поисковая система [default: google]')
@click.option('--surface', '-s', type=click.Choice([s.value for s in Surface]), default=None,
              help='Основная поверхность выдачи [default: search]')
@click.option('--queries', '-q', 'queries_path', type=click.Path(path_type=Path), default=None,
              help='CSV с запросами [default: data/queries.csv]')
@click.option('--locations', '-l', 'locations_path', type=click.Path(path_type=Path), default=None,
              help='CSV с локациями [default: data/locations.csv]')
@click.option('--maps', '-m', 'include_maps', is_flag=True,
              help='Дополнительно отслеживать выдачу карт')
@click.option('--concurrency', '-c', type=int, default=None,
              help='Число параллельных запросов [default: 5]')
@click.option('--timeout', type=float, default=None,
              help='Таймаут одного запроса (секунд) [default: 30]')
@click.option('--output-dir', '-o', 'output_dir', type=click.Path(file_okay=False, path_type=Path), default=None,
              help='Папка для отчётов [default: output]')
@click.option('--ordered', 'preserve_submission_order', is_flag=True,
              help='Дедупликация в порядке задач, а не завершения')
@click.pass_context
def track(ctx, **options):
    """Собрать позиции и сохранить отчёты JSON/CSV."""
    # неустановленные флаги не должны перетирать значения из конфига
    for flag in ('include_maps', 'preserve_submission_order'):
        options[flag] = options[flag] or None
    cfg = _load(ctx, **options)
    click.echo(f'Starting SERP rank tracking with {cfg.concurrency} concurrent requests...')
    try:
        report = asyncio.run(track_ranks(cfg))
    except ReportWriteError as e:
        print_error(f'Не удалось сохранить {len(e.records)} результатов: {e}')
    except (OSError, ValueError) as e:
        print_error(f'Ошибка при сборе позиций: {e}')

    click.echo(f'JSON report: {report.json_path}')
    click.echo(f'CSV report: {report.csv_path}')
    click.echo(
        f'Total results: {len(report.records)} '
        f'({report.collected} collected, {report.failed_tasks}/{report.total_tasks} tasks failed)'
    )


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = _load(ctx)
    click.echo(json.dumps(cfg.masked(), indent=2, ensure_ascii=False))


@cli.command('geo', context_settings=CONTEXT_SETTINGS)
@click.argument('city')
@click.argument('country')
@click.option('--cache', 'cache_path', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='Файл кэша геотаргетов (встроенная таблица, если не указан)')
def geo(city, country, cache_path):
    """Показать каноническое имя локации и uule-токен для CITY, COUNTRY."""
    try:
        canonical = GeoTargetResolver(cache_path).resolve(city, country)
    except GeoResolutionError as e:
        print_error(str(e))
    click.echo(f'Canonical: {canonical}')
    click.echo(f'UULE: {encode_location(canonical)}')


if __name__ == "__main__":
    cli()
