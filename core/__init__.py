"""
runner-plugins core: configuration, errors, logging and path resolution.
"""

__version__ = "0.1.0"

from core.config import ConfigManager, LoggingConfig, PluginConfig, RunnerConfig
from core.exceptions import (
    ConfigurationError,
    HookFailure,
    PluginError,
    PostReportHookFailure,
    ResultsReportedError,
)

__all__ = [
    "ConfigManager",
    "LoggingConfig",
    "PluginConfig",
    "RunnerConfig",
    "ConfigurationError",
    "HookFailure",
    "PluginError",
    "PostReportHookFailure",
    "ResultsReportedError",
]
