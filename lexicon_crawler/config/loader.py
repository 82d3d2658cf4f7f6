"""Configuration loading helpers for Lexicon-Crawler."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .models import CrawlConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CRAWL_CONFIG_FILENAME = "crawl_config.yaml"
HOME_ENV_VAR = "LEXICON_CRAWLER_HOME"


def _read_file(path: Path) -> dict:
    if path.suffix not in CONFIG_EXTENSIONS:
        raise ValueError(f"Unsupported configuration format: {path}")
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve important paths from project root."""

    project_root: Path | None = None
    data_dir: Path | None = None
    outputs_dir: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV_VAR)
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path(__file__).resolve().parents[2]).resolve()
        self.project_root = root
        self.data_dir = (root / "data").resolve()
        self.outputs_dir = (self.data_dir / "outputs").resolve()
        self.logs_dir = (root / "logs").resolve()
        self.ensure_directories()

    def ensure_directories(self) -> None:
        for directory in (self.data_dir, self.outputs_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def crawl_config_path(self) -> Path:
        return self.data_dir / CRAWL_CONFIG_FILENAME


class ConfigRepository:
    """Repository encapsulating config IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._cache: CrawlConfig | None = None

    def load_crawl_config(self, path: Path | None = None) -> CrawlConfig:
        """Load an explicit config file, or the project default (created on first use)."""

        if path is not None:
            if not path.exists():
                raise FileNotFoundError(f"Crawl configuration not found: {path}")
            return CrawlConfig.model_validate(_read_file(path))
        if self._cache is not None:
            return self._cache
        default_path = self.locator.crawl_config_path()
        if default_path.exists():
            config = CrawlConfig.model_validate(_read_file(default_path))
        else:
            config = CrawlConfig()
            self.save_crawl_config(config)
        self._cache = config
        return config

    def save_crawl_config(self, config: CrawlConfig, path: Path | None = None) -> Path:
        target = path or self.locator.crawl_config_path()
        _write_file(target, config.model_dump(mode="json"))
        if path is None:
            self._cache = config
        return target

    def output_path(self, config: CrawlConfig) -> Path:
        return config.output.resolved_path(self.locator.project_root)


__all__ = ["ConfigLocator", "ConfigRepository", "CONFIG_EXTENSIONS", "HOME_ENV_VAR"]
