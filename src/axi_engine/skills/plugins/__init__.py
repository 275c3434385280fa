"""
Built-in plugins.

Loaded from this explicit manifest; nothing is discovered by scanning the
filesystem. Extra plugins are listed by module name in
``EngineConfig.plugin_modules``.
"""

from . import browser, communication, developer, files, general, knowledge, media, system

BUILTIN_PLUGINS = [general, browser, communication, media, files, system, developer, knowledge]

__all__ = ["BUILTIN_PLUGINS"]
