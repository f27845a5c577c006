"""Plugin loading, fault-isolated hook dispatch and results aggregation."""

from .base import Plugin
from .loader import PluginInstance, load_plugins
from .manager import PluginManager
from .promises import PromiseType
from .results import Assertion, PluginResults, ReportState, SpecResult
from .specs import RunnerHookSpec

__all__ = [
    "Plugin",
    "PluginInstance",
    "PluginManager",
    "PromiseType",
    "Assertion",
    "PluginResults",
    "ReportState",
    "SpecResult",
    "RunnerHookSpec",
    "load_plugins",
]
