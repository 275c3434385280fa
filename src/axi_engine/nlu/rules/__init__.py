"""
Rule Sets
=========

Domain rule modules and the ordered registration manifest.

Order matters: file and developer rules run before the website rules so
that "delete notes.txt" is never read as a URL, and YouTube search runs
before generic site opening.
"""

from .matcher import Rule, RuleMatcher, hit
from . import ambiguity, communication, developer, files, hardware, information, knowledge, media, system, web

DEFAULT_RULES = [
    *ambiguity.RULES,
    *developer.RULES,
    *files.RULES,
    *knowledge.RULES,
    *communication.RULES,
    *hardware.CONNECTIVITY_RULES,
    *hardware.DISPLAY_RULES,
    *system.RULES,
    *web.YOUTUBE_RULES,
    *web.WEBSITE_RULES,
    *web.APP_RULES,
    *information.INFORMATION_RULES,
    *information.GREETING_RULES,
    *media.RULES,
]


def default_matcher() -> RuleMatcher:
    """A fresh matcher holding the default rule set."""
    return RuleMatcher(DEFAULT_RULES)


__all__ = ["Rule", "RuleMatcher", "hit", "DEFAULT_RULES", "default_matcher"]
