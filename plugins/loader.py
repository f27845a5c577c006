"""Plugin loading and annotation.

This module turns ``plugins`` config entries into ``PluginInstance`` values:
it resolves each entry to exactly one plugin object, assigns its identity and
binds the capability handles plugins use to report assertions.
"""

from __future__ import annotations

import importlib
import importlib.util
import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any

from core.config import PluginConfig
from core.exceptions import ConfigurationError, wrap_exception
from core.logger import get_logger
from core.resolver import resolve_file_patterns

from .base import Plugin
from .results import Assertion, AssertionStore

logger = get_logger(__name__)

_INFO_ALIASES = {"spec_name": "specName", "stack_trace": "stackTrace"}


@dataclass(slots=True, eq=False)
class PluginInstance:
    """A loaded plugin object with its identity and capability handles.

    Attributes:
        obj: The plugin object supplied by configuration.
        name: Resolved display name, stable for the run.
        config: Config entry the plugin was loaded from.
        index: Position in the plugin list.
        store: Shared assertion store the handles write to.
    """

    obj: Any
    name: str
    config: PluginConfig
    index: int
    store: AssertionStore = field(repr=False)

    @property
    def skip_angular_stability(self) -> bool:
        return bool(getattr(self.obj, "skip_angular_stability", False))

    def implements(self, hook_name: str) -> bool:
        """Return whether the plugin object defines ``hook_name``."""
        return callable(getattr(self.obj, hook_name, None))

    def add_failure(
        self, message: str | None = None, info: Mapping[str, Any] | None = None
    ) -> None:
        self._add_assertion(info, passed=False, message=message)

    def add_success(self, info: Mapping[str, Any] | None = None) -> None:
        self._add_assertion(info, passed=True)

    def add_warning(
        self, message: str | None = None, info: Mapping[str, Any] | None = None
    ) -> None:
        spec_name = _info_value(info, "spec_name")
        where = f"in {spec_name}" if spec_name else f'from "{self.name}" plugin'
        logger.warning("Warning %s: %s", where, message, extra={"plugin": self.name})

    def _add_assertion(
        self,
        info: Mapping[str, Any] | None,
        *,
        passed: bool,
        message: str | None = None,
    ) -> None:
        spec_name = _info_value(info, "spec_name") or f"{self.name} Plugin Tests"
        if passed:
            assertion = Assertion(passed=True)
        else:
            assertion = Assertion(
                passed=False,
                error_msg=message,
                stack_trace=_info_value(info, "stack_trace"),
            )
        self.store.add(spec_name, assertion)


def load_plugins(
    configs: Iterable[PluginConfig | Mapping[str, Any]],
    config_dir: str | Path | None = None,
    store: AssertionStore | None = None,
) -> list[PluginInstance]:
    """Load and annotate every configured plugin, in order.

    Args:
        configs: Plugin config entries.
        config_dir: Directory ``path`` entries are resolved against.
        store: Assertion store shared by all handles; a new one when omitted.

    Returns:
        One ``PluginInstance`` per entry.

    Raises:
        ConfigurationError: If an entry has no usable source.
    """
    shared_store = store if store is not None else AssertionStore()
    instances: list[PluginInstance] = []

    for index, entry in enumerate(configs):
        conf = entry if isinstance(entry, PluginConfig) else PluginConfig.model_validate(entry)
        obj = load_plugin_object(conf, config_dir)
        instance = annotate(obj, conf, index, shared_store)
        logger.debug('Plugin "%s" loaded.', instance.name)
        instances.append(instance)

    return instances


def load_plugin_object(conf: PluginConfig, config_dir: str | Path | None = None) -> Any:
    """Return the single plugin object a config entry names."""
    if conf.inline is not None:
        return conf.inline

    if conf.path:
        matches = resolve_file_patterns(conf.path, config_dir)
        if not matches:
            raise ConfigurationError(
                f"Invalid path to plugin: {conf.path}",
                context={"path": conf.path, "config_dir": str(config_dir or "")},
            )
        return _plugin_from_module(_import_from_file(matches[0]))

    if conf.package:
        try:
            module = importlib.import_module(conf.package)
        except ImportError as exc:
            raise wrap_exception(
                exc,
                ConfigurationError,
                f"Cannot import plugin package: {conf.package}",
                context={"package": conf.package},
            ) from exc
        return _plugin_from_module(module)

    raise ConfigurationError(
        "Plugin configuration did not contain a valid path or inline definition."
    )


def annotate(
    obj: Any, conf: PluginConfig, index: int, store: AssertionStore
) -> PluginInstance:
    """Create the instance for ``obj`` and hand it its identity and handles.

    ``Plugin`` subclasses are bound to the instance. Other objects (modules,
    namespaces) get ``name``, ``config`` and the three handles as attributes.
    """
    instance = PluginInstance(
        obj=obj,
        name=resolve_plugin_name(obj, conf, index),
        config=conf,
        index=index,
        store=store,
    )

    if isinstance(obj, Plugin):
        obj.bind(instance)
        return instance

    attributes = {
        "name": instance.name,
        "config": conf,
        "add_failure": instance.add_failure,
        "add_success": instance.add_success,
        "add_warning": instance.add_warning,
    }
    try:
        for attr, value in attributes.items():
            setattr(obj, attr, value)
    except (AttributeError, TypeError) as exc:
        raise wrap_exception(
            exc,
            ConfigurationError,
            f'Plugin "{instance.name}" does not accept attributes; subclass plugins.Plugin',
            context={"index": index},
        ) from exc

    return instance


def resolve_plugin_name(obj: Any, conf: PluginConfig, index: int) -> str:
    """First non-empty of: object ``name``, config name, path, package, ``Plugin #i``."""
    explicit = getattr(obj, "name", None)
    if isinstance(explicit, str) and explicit:
        return explicit
    return conf.name or conf.path or conf.package or f"Plugin #{index}"


def _import_from_file(path: Path) -> ModuleType:
    module_name = f"_runner_plugin_{path.stem}_{abs(hash(path))}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ConfigurationError(
            f"Cannot load plugin module: {path}", context={"path": str(path)}
        )

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise wrap_exception(
            exc,
            ConfigurationError,
            f"Plugin module failed to import: {path}",
            context={"path": str(path)},
        ) from exc
    return module


def _plugin_from_module(module: ModuleType) -> Any:
    """A module provides its ``plugin`` attribute when set, otherwise itself."""
    plugin = getattr(module, "plugin", None)
    return plugin if plugin is not None else module


def _info_value(info: Mapping[str, Any] | None, key: str) -> Any:
    if not info:
        return None
    value = info.get(key)
    if value is None:
        value = info.get(_INFO_ALIASES[key])
    return value
