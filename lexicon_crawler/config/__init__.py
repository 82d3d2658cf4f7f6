"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import (
    CrawlConfig,
    HttpConfig,
    OutputConfig,
    SelectorConfig,
    TerminationPolicy,
)

__all__ = [
    "ConfigLocator",
    "ConfigRepository",
    "CrawlConfig",
    "HttpConfig",
    "OutputConfig",
    "SelectorConfig",
    "TerminationPolicy",
]
