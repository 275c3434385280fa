"""Plugin registry, skill routing and fallback responses."""

from .registry import IntentSpec, Plugin, PluginRegistry, load_plugins_from_module_names, validate_plugin
from .responses import FallbackResponses
from .router import ConfirmationOutcome, HandlerContext, SkillRouter, is_affirmative
from .plugins import BUILTIN_PLUGINS

__all__ = [
    "BUILTIN_PLUGINS",
    "ConfirmationOutcome",
    "FallbackResponses",
    "HandlerContext",
    "IntentSpec",
    "Plugin",
    "PluginRegistry",
    "SkillRouter",
    "is_affirmative",
    "load_plugins_from_module_names",
    "validate_plugin",
]
