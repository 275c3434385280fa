"""
Engine Exceptions
=================

Exception hierarchy for load-time failures.

Runtime failures (a throwing rule, a failing handler) are caught at the
boundary where they happen and converted into misses or apology messages;
these exceptions are raised only where a caller can act on them.
"""


class EngineError(Exception):
    """Base exception for the intent engine."""


class PluginError(EngineError):
    """A plugin could not be loaded."""

    def __init__(self, message: str, plugin: str = None):
        super().__init__(message)
        self.plugin = plugin


class PluginValidationError(PluginError):
    """A plugin violates the plugin contract."""


class DuplicateIntentError(PluginError):
    """An intent name is already claimed by another plugin."""

    def __init__(self, intent: str, plugin: str, existing_plugin: str):
        super().__init__(
            f"Duplicate intent '{intent}' in plugin '{plugin}'. "
            f"Already registered by '{existing_plugin}'",
            plugin=plugin,
        )
        self.intent = intent
        self.existing_plugin = existing_plugin


class ArtifactError(EngineError):
    """An offline artifact (vectors, classifier weights) is missing or corrupt."""

    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path
