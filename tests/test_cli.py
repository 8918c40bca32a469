# File: tests/test_cli.py
"""Тесты для CLI (`rank_tracker.cli`) с использованием click.testing.CliRunner.
Проверяют команды `track`, `config`, `geo`, `--version`, а также обработку ошибок.
"""
import importlib
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from rank_tracker.cli import cli
from rank_tracker.engine import TrackingReport
from rank_tracker.geo import encode_location
from rank_tracker.logger import init_logging
from rank_tracker.report import ReportWriteError

# The package re-exports the click group as `rank_tracker.cli`, shadowing the
# submodule attribute, so fetch the module object from sys.modules.
cli_module = importlib.import_module("rank_tracker.cli")


@pytest.fixture(autouse=True)
def restore_logging():
    """CLI привязывает лог-хендлер к stdout раннера; после теста возвращаем обычный."""
    yield
    init_logging()


@pytest.fixture()
def captured(monkeypatch):
    """Патчим track_ranks заглушкой, которая запоминает полученный конфиг."""
    seen = {}

    async def fake_track(cfg):
        seen["config"] = cfg
        return TrackingReport(
            records=[],
            collected=3,
            total_tasks=4,
            failed_tasks=1,
            json_path=Path("output/ranks-x.json"),
            csv_path=Path("output/ranks-x.csv"),
        )

    monkeypatch.setattr(cli_module, "track_ranks", fake_track)
    return seen


@pytest.fixture()
def cfg_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "config.yaml"
    path.write_text("api_token: file-token\nconcurrency: 3\n", encoding="utf-8")
    return path


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "rank-tracker" in result.output


def test_track_passes_options(cfg_file, captured):
    result = CliRunner().invoke(
        cli,
        ["--config", str(cfg_file), "track", "-s", "search", "--maps", "-c", "9", "-q", "q.csv", "--ordered"],
    )

    assert result.exit_code == 0, result.output
    cfg = captured["config"]
    assert cfg.api_token == "file-token"
    assert cfg.concurrency == 9
    assert cfg.include_maps is True
    assert cfg.preserve_submission_order is True
    assert cfg.queries_path == Path("q.csv")
    assert "Total results: 0 (3 collected, 1/4 tasks failed)" in result.output


def test_track_keeps_config_file_values(cfg_file, captured):
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "track"])

    assert result.exit_code == 0, result.output
    assert captured["config"].concurrency == 3
    assert captured["config"].include_maps is False


def test_track_without_credentials(tmp_path, monkeypatch, captured):
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli, ["track"])

    assert result.exit_code == 1
    assert "Некорректная конфигурация" in result.output
    assert "config" not in captured


def test_track_with_unreadable_config(tmp_path, monkeypatch, captured):
    monkeypatch.chdir(tmp_path)
    broken = tmp_path / "broken.yaml"
    broken.write_text("a: b: c", encoding="utf-8")

    result = CliRunner().invoke(cli, ["--config", str(broken), "track"])

    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output
    assert "config" not in captured


def test_track_rejects_zero_concurrency(cfg_file, captured):
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "track", "-c", "0"])
    assert result.exit_code == 1


def test_track_missing_inputs(cfg_file, tmp_path):
    result = CliRunner().invoke(
        cli, ["--config", str(cfg_file), "track", "-q", str(tmp_path / "none.csv")]
    )

    assert result.exit_code == 1
    assert "Ошибка при сборе позиций" in result.output


def test_track_report_write_failure(cfg_file, monkeypatch):
    async def failing(cfg):
        raise ReportWriteError("disk full", records=[object(), object()])

    monkeypatch.setattr(cli_module, "track_ranks", failing)

    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "track"])

    assert result.exit_code == 1
    assert "Не удалось сохранить 2 результатов" in result.output


def test_show_config_masks_token(cfg_file):
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["api_token"] == "file…"
    assert data["concurrency"] == 3


def test_geo_command():
    result = CliRunner().invoke(cli, ["geo", "London", "GB"])

    assert result.exit_code == 0
    assert "Canonical: London,England,United Kingdom" in result.output
    assert f"UULE: {encode_location('London,England,United Kingdom')}" in result.output


def test_geo_command_corrupt_cache(tmp_path):
    cache = tmp_path / "geo.json"
    cache.write_text("{oops", encoding="utf-8")

    result = CliRunner().invoke(cli, ["geo", "London", "GB", "--cache", str(cache)])

    assert result.exit_code == 1
