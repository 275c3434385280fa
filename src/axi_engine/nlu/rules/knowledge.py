"""Calculation, unit conversion and calendar-day rules."""

import re

from .matcher import Rule, hit

UNITS = (
    r"km|kilometers?|miles?|mi|meters?|m|feet|foot|ft|centimeters?|cm|inch|inches|in"
    r"|celsius|fahrenheit|kg|kilograms?|kilos?|pounds?|lbs?|grams?|g|ounces?|oz"
    r"|liters?|l|gallons?|gal|milliliters?|ml|mb|gb|tb|megabytes?|gigabytes?|terabytes?"
)

CALCULATE_KEYWORD = re.compile(r"\b(calculate|calculation|hisaab|math solve)\b")
ARITHMETIC = re.compile(r"\d+(?:\.\d+)?\s*(?:plus|minus|times|multiplied by|divided by|x|\+|-|\*|/)\s*\d+")
WORD_OPERATION = re.compile(r"\b(add|subtract|multiply|divide)\s+(\d+(?:\.\d+)?)\s+(and|by|from)\s+(\d+(?:\.\d+)?)")
EXPRESSION_PREFIX = re.compile(r"^(?:please\s+)?(?:calculate|compute|what is|what's|whats|solve)\s+")

CONVERT_KEYWORD = re.compile(rf"\b(convert|conversion)\b.*\b({UNITS})\b")
VALUE_UNITS = re.compile(rf"(-?\d+(?:\.\d+)?)\s*({UNITS})\s+(?:in|to|into|mein|se)\s+({UNITS})\b")
HOW_MANY = re.compile(rf"how many\s+({UNITS})\s+(?:in|are in)\s+(-?\d+(?:\.\d+)?)\s*({UNITS})\b")

WHAT_DAY = re.compile(r"what day|which day|kaun sa din|kya din|today.*what day|aaj.*day")


def calculate(analysis):
    text = analysis.text.rstrip("?").strip()

    match = WORD_OPERATION.search(text)
    if match:
        op, a, _, b = match.groups()
        expression = {
            "add": f"{a} + {b}",
            "subtract": f"{b} - {a}",
            "multiply": f"{a} * {b}",
            "divide": f"{a} / {b}",
        }[op]
        return hit("calculate", expression=expression)

    if CALCULATE_KEYWORD.search(text) or ARITHMETIC.search(text):
        expression = EXPRESSION_PREFIX.sub("", text).strip() or None
        return hit("calculate", expression=expression)

    return None


def unit_convert(analysis):
    text = analysis.text

    match = HOW_MANY.search(text)
    if match:
        to_unit, value, from_unit = match.groups()
        return hit("unit_convert", value=value, from_unit=from_unit, to_unit=to_unit)

    match = VALUE_UNITS.search(text)
    if match:
        value, from_unit, to_unit = match.groups()
        return hit("unit_convert", value=value, from_unit=from_unit, to_unit=to_unit)

    if CONVERT_KEYWORD.search(text):
        return hit("unit_convert")

    return None


def what_day(analysis):
    if WHAT_DAY.search(analysis.text):
        return hit("what_day")
    return None


RULES = [
    Rule("calculate", "knowledge", calculate),
    Rule("unit_convert", "knowledge", unit_convert),
    Rule("what_day", "knowledge", what_day),
]
