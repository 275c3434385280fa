"""
Media playback rules.

Specific transport commands (play, pause, next, ...) come first; anything
else that mentions music falls back to the generic ``music_control``.
"""

import re

from .matcher import Rule, hit

PAUSE = re.compile(r"^(?:pause|stop)(?:\s+(?:the\s+)?(?:music|song|video|playback|track|it))?$")
RESUME = re.compile(r"^(?:resume|unpause|continue playing)\b")
NEXT = re.compile(r"^(?:next|skip)$|\b(?:next|skip)\s+(?:the\s+)?(?:song|track|video)\b")
PREVIOUS = re.compile(r"^previous$|\b(?:previous|last)\s+(?:song|track|video)\b|\bgo back a track\b")
MUTE = re.compile(r"^(?:mute|silence)\b|\bmute\s+(?:the\s+)?(?:sound|audio|volume)\b")
PLAY = re.compile(r"^play\b\s*(.*)$")
GENERIC_PLAY_TARGET = re.compile(
    r"^(?:(?:some|a|the|my)\s+)?(?:music|songs?|tracks?|something|a song|playlist)?$"
)
MUSIC = re.compile(r"music|song|player|volume|track")


def transport_control(analysis):
    text = analysis.text.rstrip(".!")
    if PAUSE.search(text):
        return hit("pause")
    if RESUME.search(text):
        return hit("play")
    if NEXT.search(text):
        return hit("next")
    if PREVIOUS.search(text):
        return hit("previous")
    if MUTE.search(text):
        return hit("mute")
    return None


def play(analysis):
    match = PLAY.search(analysis.text.rstrip(".!"))
    if not match:
        return None
    target = match.group(1).strip()
    if GENERIC_PLAY_TARGET.match(target):
        return hit("play")
    return hit("play", song=target)


def music(analysis):
    if MUSIC.search(analysis.text):
        return hit("music_control")
    return None


RULES = [
    Rule("transport_control", "media", transport_control),
    Rule("play", "media", play),
    Rule("music", "media", music),
]
