"""
Knowledge Plugin
================

Arithmetic and unit conversion.

Expressions are parsed with ``ast`` and evaluated over a whitelist of
numeric operators; names, calls and attribute access are rejected.
"""

import ast
import math
import operator
import re

name = "knowledge"
description = "Calculations and unit conversions"

# ============================================================================
# Calculation
# ============================================================================

MAX_EXPONENT = 1000

# Decimal digits a float can hold
MAX_DIGITS = 308


def _power(base, exponent):
    """Refuse powers whose result would not fit in a float."""
    if abs(exponent) > MAX_EXPONENT:
        raise ValueError("Exponent too large")
    if abs(base) > 1 and exponent * math.log10(abs(base)) > MAX_DIGITS:
        raise OverflowError("Result too large")
    return operator.pow(base, exponent)


_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: _power,
}

_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

WORD_OPERATORS = [
    (r"\bmultiplied by\b", "*"),
    (r"\bdivided by\b", "/"),
    (r"\btimes\b", "*"),
    (r"\bplus\b", "+"),
    (r"\bminus\b", "-"),
    (r"\bmod\b", "%"),
    (r"(?<=\d)\s*x\s*(?=\d)", "*"),
    (r"\^", "**"),
]


def to_expression(text):
    """Rewrite spoken operators as Python ones ("3 times 4" -> "3 * 4")."""
    expression = text.lower()
    for pattern, symbol in WORD_OPERATORS:
        expression = re.sub(pattern, f" {symbol} ", expression)
    return re.sub(r"\s+", " ", expression).strip().rstrip("?=").strip()


def _eval(node):
    if isinstance(node, ast.Expression):
        return _eval(node.body)
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) \
            and not isinstance(node.value, bool):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left, right = _eval(node.left), _eval(node.right)
        return _BINARY_OPS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval(node.operand))
    raise ValueError(f"Unsupported expression: {type(node).__name__}")


def safe_eval(expression):
    """Evaluate an arithmetic expression; returns None if it is not one."""
    try:
        result = _eval(ast.parse(to_expression(expression), mode="eval"))
        if not isinstance(result, (int, float)) or not math.isfinite(result):
            return None
    except (SyntaxError, ValueError, ZeroDivisionError, OverflowError):
        return None
    return result


def format_number(value, decimals=2):
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.{decimals}f}".rstrip("0").rstrip(".")


async def calculate(params, context):
    expression = params.get("expression") or params.get("query")
    if not expression:
        return "What would you like me to calculate?"
    result = safe_eval(expression)
    if result is None:
        return f'I couldn\'t calculate "{expression}". Please check the expression.'
    return f"{expression} = {format_number(result)}, sir."


# ============================================================================
# Unit conversion
# ============================================================================

UNIT_CONVERSIONS = {
    # Length
    ("km", "mi"): 0.621371,
    ("mi", "km"): 1.60934,
    ("m", "ft"): 3.28084,
    ("ft", "m"): 0.3048,
    ("cm", "in"): 0.393701,
    ("in", "cm"): 2.54,
    # Mass
    ("kg", "lb"): 2.20462,
    ("lb", "kg"): 0.453592,
    ("g", "oz"): 0.035274,
    ("oz", "g"): 28.3495,
    # Temperature
    ("c", "f"): lambda c: c * 9 / 5 + 32,
    ("f", "c"): lambda f: (f - 32) * 5 / 9,
    # Volume
    ("l", "gal"): 0.264172,
    ("gal", "l"): 3.78541,
    ("ml", "oz"): 0.033814,
    ("oz", "ml"): 29.5735,
    # Data
    ("mb", "gb"): 0.001,
    ("gb", "mb"): 1000,
    ("gb", "tb"): 0.001,
    ("tb", "gb"): 1000,
}

UNIT_ALIASES = {
    "kilometers": "km", "kilometer": "km", "km": "km",
    "miles": "mi", "mile": "mi", "mi": "mi",
    "meters": "m", "meter": "m", "m": "m",
    "feet": "ft", "foot": "ft", "ft": "ft",
    "centimeters": "cm", "centimeter": "cm", "cm": "cm",
    "inches": "in", "inch": "in", "in": "in",
    "kilograms": "kg", "kilogram": "kg", "kg": "kg", "kilo": "kg", "kilos": "kg",
    "pounds": "lb", "pound": "lb", "lb": "lb", "lbs": "lb",
    "grams": "g", "gram": "g", "g": "g",
    "ounces": "oz", "ounce": "oz", "oz": "oz",
    "celsius": "c", "c": "c",
    "fahrenheit": "f", "f": "f",
    "liters": "l", "liter": "l", "l": "l",
    "gallons": "gal", "gallon": "gal", "gal": "gal",
    "milliliters": "ml", "milliliter": "ml", "ml": "ml",
    "megabytes": "mb", "megabyte": "mb", "mb": "mb",
    "gigabytes": "gb", "gigabyte": "gb", "gb": "gb",
    "terabytes": "tb", "terabyte": "tb", "tb": "tb",
}


def parse_unit(unit):
    if not unit:
        return None
    unit = unit.lower().strip()
    return UNIT_ALIASES.get(unit, unit)


def convert(value, from_unit, to_unit):
    """Convert between two canonical units; None if the pair is unknown."""
    factor = UNIT_CONVERSIONS.get((from_unit, to_unit))
    if factor is None:
        return None
    if callable(factor):
        return factor(value)
    return value * factor


async def unit_convert(params, context):
    try:
        value = float(params.get("value"))
    except (TypeError, ValueError):
        return "What value would you like me to convert?"

    from_unit = parse_unit(params.get("from_unit"))
    to_unit = parse_unit(params.get("to_unit"))
    if not from_unit or not to_unit:
        return "Please specify both the source and target units."

    result = convert(value, from_unit, to_unit)
    if result is None:
        return f"I don't know how to convert from {from_unit} to {to_unit}."
    return f"{format_number(value)} {from_unit} = {format_number(result)} {to_unit}, sir."


intents = {
    "calculate": {"handler": calculate, "confidence": 0.5, "requires_confirmation": False},
    "unit_convert": {"handler": unit_convert, "confidence": 0.6, "requires_confirmation": False},
}
