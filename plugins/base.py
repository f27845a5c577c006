"""Plugin base class definitions.

Subclassing ``Plugin`` is optional; any object with hook methods can be
loaded. Subclasses get the capability methods (``add_failure``,
``add_success``, ``add_warning``) bound by the loader instead of having them
set on the object.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from core.exceptions import ConfigurationError, PluginError

if TYPE_CHECKING:
    from core.config import PluginConfig

    from .loader import PluginInstance


class Plugin:
    """Base class for runner plugins.

    Hooks are not defined here: a plugin implements a hook by defining a
    method with the hook's name (see ``plugins.specs.RunnerHookSpec``).
    """

    name: str | None = None
    skip_angular_stability: bool = False

    _instance: PluginInstance | None = None

    def bind(self, instance: PluginInstance) -> None:
        """Attach the loader-created instance carrying identity and handles.

        A plugin without its own ``name`` takes the resolved instance name.

        Raises:
            ConfigurationError: If the plugin is already bound to another instance.
        """
        if self._instance is not None and self._instance is not instance:
            raise ConfigurationError(
                f'Plugin "{self._instance.name}" is already loaded',
                context={"index": instance.index},
            )
        self._instance = instance
        if not self.name:
            self.name = instance.name

    @property
    def instance(self) -> PluginInstance:
        if self._instance is None:
            raise PluginError(
                f"{type(self).__name__} has not been loaded by a plugin manager",
                code="PLUGIN_NOT_LOADED",
            )
        return self._instance

    @property
    def config(self) -> PluginConfig:
        return self.instance.config

    def add_failure(
        self, message: str | None = None, info: Mapping[str, Any] | None = None
    ) -> None:
        """Record a failed assertion."""
        self.instance.add_failure(message, info)

    def add_success(self, info: Mapping[str, Any] | None = None) -> None:
        """Record a passed assertion."""
        self.instance.add_success(info)

    def add_warning(
        self, message: str | None = None, info: Mapping[str, Any] | None = None
    ) -> None:
        """Log a warning; never affects results."""
        self.instance.add_warning(message, info)
