"""System rules: volume, screen and power."""

import re

from .matcher import Rule, hit

VOLUME_UP = re.compile(
    r"\b(volume up|increase volume|increase the volume|louder|turn up|turn it up|raise volume"
    r"|volume badao|volume badha|sound up|badhao)\b"
)
VOLUME_UP_IMPLIED = re.compile(r"\b(too quiet|cant hear|can't hear|audible|volume low)\b")
VOLUME_DOWN = re.compile(
    r"\b(volume down|decrease volume|decrease the volume|quieter|turn down|turn it down|lower volume"
    r"|volume kam|sound down|ghatao)\b"
)
VOLUME_DOWN_IMPLIED = re.compile(r"\b(too loud|too noisy|hurting my ears|lower the sound)\b")

LOCK_SCREEN = re.compile(r"\b(lock screen|lock the screen|lock my pc|lock computer|lock system)\b")
SCREENSHOT = re.compile(r"\b(screenshot|screen shot|capture screen|take a picture of screen)\b")
SHUTDOWN = re.compile(r"\b(shutdown|shut down|turn off computer|turn off the computer|power off system)\b")
RESTART = re.compile(r"\b(restart|reboot|restart computer|restart system)\b")


def volume_control(analysis):
    text = analysis.text
    if VOLUME_UP.search(text):
        return hit("volume_up")
    if VOLUME_UP_IMPLIED.search(text):
        # "it's too quiet" implies louder, but less certainly
        return hit("volume_up", 0.85)
    if VOLUME_DOWN.search(text):
        return hit("volume_down")
    if VOLUME_DOWN_IMPLIED.search(text):
        return hit("volume_down", 0.85)
    return None


def screen_control(analysis):
    if LOCK_SCREEN.search(analysis.text):
        return hit("lock_screen")
    if SCREENSHOT.search(analysis.text):
        return hit("take_screenshot")
    return None


def power_control(analysis):
    if SHUTDOWN.search(analysis.text):
        return hit("shutdown_system")
    if RESTART.search(analysis.text):
        return hit("restart_system")
    return None


RULES = [
    Rule("volume_control", "system", volume_control),
    Rule("screen_control", "system", screen_control),
    Rule("power_control", "system", power_control),
]
