"""
Plugin Registry
===============

Validates and indexes intent handlers by name.

A plugin is any object (usually a module) exposing::

    name = "media"
    description = "Media playback control"
    intents = {
        "play": {
            "handler": play,               # async (params, context) -> str
            "confidence": 0.5,             # minimum confidence to run
            "requires_confirmation": False,
        },
    }

Intent names are unique system-wide: registering an intent that another
plugin already claims is an error, never a silent override. During
``initialize`` a bad plugin fails alone; the rest still load.
"""

import importlib
import logging
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..errors import DuplicateIntentError, PluginError, PluginValidationError

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


@dataclass(frozen=True)
class IntentSpec:
    """One intent's handler contract."""
    name: str
    handler: Handler
    confidence: float
    requires_confirmation: bool
    plugin: str = ""


@dataclass
class Plugin:
    """A validated plugin."""
    name: str
    description: str
    intents: Dict[str, IntentSpec] = field(default_factory=dict)
    source: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "intents": list(self.intents),
        }


def _requires_confirmation(config: Dict[str, Any]) -> Any:
    if "requires_confirmation" in config:
        return config["requires_confirmation"]
    return config.get("requiresConfirmation")


def validate_plugin(obj: Any) -> Plugin:
    """
    Check the plugin contract and build a ``Plugin``.

    Raises:
        PluginValidationError: On any contract violation
    """
    if isinstance(obj, Plugin):
        name, description, intents = obj.name, obj.description, obj.intents
    else:
        name = getattr(obj, "name", None)
        description = getattr(obj, "description", None)
        intents = getattr(obj, "intents", None)
    source = getattr(obj, "__name__", None) or getattr(obj, "source", "") or str(name)

    if not name or not isinstance(name, str):
        raise PluginValidationError(f"Plugin in {source} must define 'name' as a non-empty string")
    if not description or not isinstance(description, str):
        raise PluginValidationError(f"Plugin '{name}' must define 'description' as a non-empty string", name)
    if not isinstance(intents, dict):
        raise PluginValidationError(f"Plugin '{name}' must define 'intents' as a mapping", name)

    specs = {}
    for intent_name, config in intents.items():
        if isinstance(config, IntentSpec):
            config = {
                "handler": config.handler,
                "confidence": config.confidence,
                "requires_confirmation": config.requires_confirmation,
            }
        if not isinstance(config, dict):
            raise PluginValidationError(f"Intent '{intent_name}' must be a mapping", name)

        handler = config.get("handler")
        confidence = config.get("confidence")
        requires_confirmation = _requires_confirmation(config)

        if not callable(handler):
            raise PluginValidationError(f"Intent '{intent_name}' must have a 'handler' function", name)
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            raise PluginValidationError(f"Intent '{intent_name}' must specify 'confidence' as a number", name)
        if not 0.0 <= confidence <= 1.0:
            raise PluginValidationError(f"Intent '{intent_name}' confidence must be within [0, 1]", name)
        if not isinstance(requires_confirmation, bool):
            raise PluginValidationError(
                f"Intent '{intent_name}' must specify 'requires_confirmation' as a boolean", name
            )

        specs[intent_name] = IntentSpec(
            name=intent_name,
            handler=handler,
            confidence=float(confidence),
            requires_confirmation=requires_confirmation,
            plugin=name,
        )

    return Plugin(name=name, description=description, intents=specs, source=source)


def load_plugins_from_module_names(names: Iterable[str]) -> Tuple[List[Any], List[Dict[str, str]]]:
    """
    Import plugin modules by dotted name.

    Returns:
        (modules, errors) where errors are ``{"plugin", "error"}`` records
    """
    modules, errors = [], []
    for module_name in names:
        try:
            modules.append(importlib.import_module(module_name))
        except Exception as e:
            logger.error(f"Failed to import plugin module {module_name}: {e}")
            errors.append({"plugin": module_name, "error": str(e)})
    return modules, errors


class PluginRegistry:
    """
    Intent name -> handler index.

    Example:
        registry = PluginRegistry()
        registry.initialize(BUILTIN_PLUGINS)
        spec = registry.get_intent_handler("play")
    """

    def __init__(self):
        self._plugins: Dict[str, Plugin] = {}
        self._intents: Dict[str, IntentSpec] = {}
        self._load_errors: List[Dict[str, str]] = []
        self._sources: List[Any] = []
        self._module_names: List[str] = []
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def register(self, plugin: Any) -> Plugin:
        """
        Validate and register one plugin.

        Nothing is registered if any of its intents is already claimed.

        Raises:
            PluginValidationError: Contract violation
            DuplicateIntentError: Intent already registered by another plugin
        """
        validated = validate_plugin(plugin)

        if validated.name in self._plugins:
            raise PluginError(f"Plugin '{validated.name}' is already registered", validated.name)

        for intent_name in validated.intents:
            existing = self._intents.get(intent_name)
            if existing is not None:
                raise DuplicateIntentError(intent_name, validated.name, existing.plugin)

        self._plugins[validated.name] = validated
        self._intents.update(validated.intents)
        logger.debug(f"Loaded plugin: {validated.name} ({len(validated.intents)} intents)")
        return validated

    def initialize(self, plugins: Iterable[Any] = (), module_names: Iterable[str] = ()) -> None:
        """Load plugins; a failing plugin is recorded in ``load_errors`` and skipped."""
        if self._initialized:
            logger.warning("Registry already initialized, skipping")
            return

        self._sources = list(plugins)
        self._module_names = list(module_names)
        self._load_errors = []

        modules, import_errors = load_plugins_from_module_names(self._module_names)
        self._load_errors.extend(import_errors)

        for plugin in [*self._sources, *modules]:
            try:
                self.register(plugin)
            except PluginError as e:
                label = getattr(plugin, "name", None) or getattr(plugin, "__name__", repr(plugin))
                logger.error(f"Failed to load plugin {label}: {e}")
                self._load_errors.append({"plugin": str(label), "error": str(e)})

        self._initialized = True
        logger.info(
            f"Registry initialized: {len(self._plugins)} plugins, {len(self._intents)} intents"
        )

    def reload(self, plugins: Optional[Iterable[Any]] = None) -> None:
        """Replace the registry contents wholesale."""
        logger.info("Reloading plugin registry...")
        sources = list(plugins) if plugins is not None else self._sources
        if plugins is None:
            # Re-import module plugins so edited handlers are picked up
            sources = [
                importlib.reload(p) if isinstance(p, ModuleType) else p for p in sources
            ]
        module_names = self._module_names
        self._plugins.clear()
        self._intents.clear()
        self._initialized = False
        self.initialize(sources, module_names)

    # === Lookup ===

    def get_intent_handler(self, intent: str) -> Optional[IntentSpec]:
        return self._intents.get(intent)

    def has_intent(self, intent: str) -> bool:
        return intent in self._intents

    def get_intent_metadata(self, intent: str) -> Optional[Dict[str, Any]]:
        spec = self._intents.get(intent)
        if spec is None:
            return None
        plugin = self._plugins[spec.plugin]
        return {
            "intent": intent,
            "plugin": plugin.name,
            "plugin_description": plugin.description,
            "confidence": spec.confidence,
            "requires_confirmation": spec.requires_confirmation,
        }

    def all_intents(self) -> List[str]:
        return list(self._intents)

    def all_plugins(self) -> List[Dict[str, Any]]:
        return [plugin.to_dict() for plugin in self._plugins.values()]

    def get_plugin(self, name: str) -> Optional[Plugin]:
        return self._plugins.get(name)

    @property
    def load_errors(self) -> List[Dict[str, str]]:
        return list(self._load_errors)

    def stats(self) -> Dict[str, Any]:
        return {
            "plugin_count": len(self._plugins),
            "intent_count": len(self._intents),
            "initialized": self._initialized,
            "error_count": len(self._load_errors),
        }
