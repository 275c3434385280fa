"""Weather, jokes, news, time and the greeting rule."""

import re

from .matcher import Rule, hit

WEATHER = re.compile(r"weather|raining|temperature|forecast")
JOKE = re.compile(r"joke|funny|laugh")
NEWS = re.compile(r"news|headlines")
TIME = re.compile(r"what time|tell.+time|current time|wats d time")
SCREENSHOT = re.compile(r"screenshot|capture|screen.?shot")
GREETING = re.compile(r"\b(hello|hi|hey|greetings|namaste|yo|sup|wassup)\b")


def _keyword_rule(intent, pattern):
    def rule(analysis):
        if pattern.search(analysis.text):
            return hit(intent)
        return None
    return rule


INFORMATION_RULES = [
    Rule("weather", "information", _keyword_rule("weather_check", WEATHER)),
    Rule("joke", "information", _keyword_rule("tell_joke", JOKE)),
    Rule("news", "information", _keyword_rule("news_update", NEWS)),
    Rule("time", "information", _keyword_rule("tell_time", TIME)),
    Rule("screenshot", "information", _keyword_rule("take_screenshot", SCREENSHOT)),
]

GREETING_RULES = [
    Rule("greeting", "greeting", _keyword_rule("greeting", GREETING)),
]
