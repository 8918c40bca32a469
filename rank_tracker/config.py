# === FILE: rank_tracker/config.py ===
"""
Модуль для загрузки и валидации конфигурации трекера позиций.
Используется Pydantic для описания схемы и проверки данных.

Приоритет источников (от низшего к высшему): значения по умолчанию,
YAML/JSON-файл, переменные окружения (``.env`` читается через python-dotenv)
и явные переопределения, например опции CLI.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from rank_tracker.models import Surface

#: переменная окружения -> поле конфига
ENV_VARS: Dict[str, str] = {
    "BRIGHT_DATA_API_KEY": "api_token",
    "BRIGHT_DATA_ZONE": "zone",
}

SUPPORTED_ENGINES = ("google",)


class TrackerConfig(BaseModel):
    """Конфигурация для одного запуска сбора позиций."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    api_token: str = Field(..., min_length=1, description="Bearer-токен для SERP API.")
    zone: str = Field("serp_api1", min_length=1, description="Имя зоны провайдера.")
    api_url: HttpUrl = Field("https://api.brightdata.com/request", description="Эндпоинт запросов провайдера.")
    engine: str = Field("google", description="Поисковая система, пишется в каждую запись.")
    surface: Surface = Field(Surface.SEARCH, description="Основная поверхность выдачи.")
    include_maps: bool = Field(False, description="Дополнительно отслеживать выдачу карт.")
    concurrency: int = Field(5, ge=1, description="Макс. число одновременных запросов.")
    timeout: float = Field(30.0, gt=0, description="Таймаут на один запрос (секунд).")
    queries_path: Path = Field(Path("data/queries.csv"), description="CSV с колонкой 'keyword'.")
    locations_path: Path = Field(Path("data/locations.csv"), description="CSV с колонками city/country/language/device.")
    output_dir: Path = Field(Path("output"), description="Папка для отчётов JSON/CSV.")
    geo_cache_path: Optional[Path] = Field(
        Path("data/geo-targets-cache.json"), description="Файл кэша геотаргетов, None отключает кэш."
    )
    preserve_submission_order: bool = Field(
        False, description="Дедупликация в порядке задач, а не завершения."
    )

    @field_validator("api_token", "zone", mode="before")
    def _strip(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("engine")
    def _known_engine(cls, v: str) -> str:
        v = v.lower()
        if v not in SUPPORTED_ENGINES:
            raise ValueError(f"неподдерживаемая поисковая система {v!r}, ожидается одна из {SUPPORTED_ENGINES}")
        return v

    def masked(self) -> Dict[str, Any]:
        """Дамп для JSON со скрытым токеном."""
        data = self.model_dump(mode="json")
        token = data.get("api_token") or ""
        data["api_token"] = f"{token[:4]}…" if len(token) > 4 else "***"
        return data


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def _read_file(path_obj: Path) -> dict[str, Any]:
    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def _from_env() -> dict[str, Any]:
    load_dotenv()
    return {field: os.environ[var] for var, field in ENV_VARS.items() if os.environ.get(var)}


def load_config(
    path: Union[str, Path, None] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> TrackerConfig:
    """
    Собирает и возвращает проверенный объект TrackerConfig.

    Если явно указанного файла нет, бросает FileNotFoundError; при *path* None
    берётся ``configs/default.yaml``, только если он существует. Переопределения
    со значением None пропускаются, поэтому опции CLI передаются как есть.
    """
    data: dict[str, Any] = {}
    if path is None:
        if _DEFAULT_CFG.is_file():
            data = _read_file(_DEFAULT_CFG)
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))
        data = _read_file(path_obj)

    data.update(_from_env())
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    return TrackerConfig(**data)


__all__ = ["TrackerConfig", "load_config", "ENV_VARS", "SUPPORTED_ENGINES"]
