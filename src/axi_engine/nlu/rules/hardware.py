"""Connectivity (WiFi, Bluetooth) and display brightness rules."""

import re

from .matcher import Rule, hit

_ON = r"turn on|enable|start|switch on|connect to|connect"
_OFF = r"turn off|disable|stop|switch off|disconnect from|disconnect"
_TOGGLE = r"toggle|switch"


def _toggle_rule(intent, device):
    patterns = [
        (re.compile(rf"\b({_ON})\s+(?:the\s+)?({device})\b"), "on"),
        (re.compile(rf"\b({_OFF})\s+(?:the\s+)?({device})\b"), "off"),
        (re.compile(rf"\b({_TOGGLE})\s+(?:the\s+)?({device})\b"), "toggle"),
    ]

    def rule(analysis):
        for pattern, action in patterns:
            if pattern.search(analysis.text):
                return hit(intent, action=action)
        return None

    return rule


BRIGHTNESS_UP = re.compile(
    r"\b(brightness up|increase brightness|screen brighter|brighten screen|roshni badhao|turn up brightness)\b"
)
BRIGHTNESS_DOWN = re.compile(
    r"\b(brightness down|decrease brightness|screen dimmer|dim screen|roshni kam|turn down brightness|darken screen)\b"
)


def brightness_control(analysis):
    if BRIGHTNESS_UP.search(analysis.text):
        return hit("display.brightness_up")
    if BRIGHTNESS_DOWN.search(analysis.text):
        return hit("display.brightness_down")
    return None


CONNECTIVITY_RULES = [
    Rule("wifi_control", "connectivity", _toggle_rule("toggle_wifi", r"wifi|wi-fi")),
    Rule("bluetooth_control", "connectivity", _toggle_rule("toggle_bluetooth", r"bluetooth|bt")),
]

DISPLAY_RULES = [
    Rule("brightness_control", "display", brightness_control),
]
