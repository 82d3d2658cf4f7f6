"""Pydantic models used across Lexicon-Crawler configuration flow."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_ALPHABET = "abcdefghijklmnopqrstuvwxyz"
DEFAULT_INDEX_URL = "https://dictionary.cambridge.org/browse/english/{letter}/"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


class TerminationPolicy(str, Enum):
    """How the pipeline decides the crawl is finished."""

    QUIET = "quiet"
    RECORD_CAP = "record_cap"


class SelectorConfig(BaseModel):
    """CSS selectors and patterns describing the dictionary markup."""

    sub_index: str = "a.dil.tcbd"
    entry: str = "a.tc-bd"
    entry_pos: str = "span.pos"
    idiom_pattern: str = "idiom"
    entry_path_pattern: str = r"/dictionary/english/[^/?#]+/?$"
    article: str = "article#page-content"
    headword: str = ".hw.dhw"
    fallback_headword: str = ".headword"
    part_of_speech: str = "span.pos.dpos"

    @field_validator("idiom_pattern", "entry_path_pattern")
    @classmethod
    def _validate_regex(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid regular expression {value!r}: {exc}") from exc
        return value


class HttpConfig(BaseModel):
    """Options forwarded to the shared HTTP client."""

    timeout: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True
    extra_headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be > 0")
        return value


class OutputConfig(BaseModel):
    """Where accepted records land and how often they are flushed."""

    path: Path = Field(default=Path("data/outputs/words.csv"))
    flush_every: int = 300

    @field_validator("path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("flush_every")
    @classmethod
    def _positive_flush(cls, value: int) -> int:
        if value < 1:
            raise ValueError("flush_every must be >= 1")
        return value

    def resolved_path(self, base_dir: Path) -> Path:
        """Return the output path relative to the project home."""

        if not self.path.is_absolute():
            return (base_dir / self.path).resolve()
        return self.path


class CrawlConfig(BaseModel):
    """Full definition of a dictionary crawl."""

    index_url_template: str = DEFAULT_INDEX_URL
    alphabet: list[str] = Field(default_factory=lambda: list(DEFAULT_ALPHABET))
    quiet_interval: float = Field(
        default=10.0,
        description="Seconds without any emitted record after which the crawl is complete.",
    )
    cache_capacity: int = 50
    termination: TerminationPolicy = TerminationPolicy.QUIET
    max_records: int | None = None
    # None keeps one thread per in-flight fetch
    fetch_workers: int | None = 16
    selectors: SelectorConfig = Field(default_factory=SelectorConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("alphabet", mode="before")
    @classmethod
    def _coerce_alphabet(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            value = list(value)
        if not isinstance(value, (list, tuple)):
            raise ValueError("alphabet expects a string or a list of symbols")
        symbols = [str(item).strip() for item in value if str(item).strip()]
        if not symbols:
            raise ValueError("alphabet cannot be empty")
        return symbols

    @field_validator("index_url_template")
    @classmethod
    def _validate_template(cls, value: str) -> str:
        if "{letter}" not in value:
            raise ValueError("index_url_template must contain a {letter} placeholder")
        return value

    @model_validator(mode="after")
    def _validate_limits(self) -> "CrawlConfig":
        if self.quiet_interval <= 0:
            raise ValueError("quiet_interval must be > 0")
        if self.cache_capacity < 1:
            raise ValueError("cache_capacity must be >= 1")
        if self.fetch_workers is not None and self.fetch_workers < 1:
            raise ValueError("fetch_workers must be >= 1 or null for unbounded")
        if self.max_records is not None and self.max_records < 1:
            raise ValueError("max_records must be >= 1")
        if self.termination is TerminationPolicy.RECORD_CAP and self.max_records is None:
            raise ValueError("record_cap termination requires max_records")
        return self

    def index_url(self, letter: str) -> str:
        return self.index_url_template.format(letter=letter)

    @property
    def record_cap(self) -> int | None:
        """Accepted-record limit in effect, if the policy uses one."""

        if self.termination is TerminationPolicy.RECORD_CAP:
            return self.max_records
        return None


__all__ = [
    "CrawlConfig",
    "DEFAULT_ALPHABET",
    "DEFAULT_INDEX_URL",
    "HttpConfig",
    "OutputConfig",
    "SelectorConfig",
    "TerminationPolicy",
]
