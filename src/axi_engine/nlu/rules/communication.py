"""Email and calendar rules."""

import re

from .matcher import Rule, hit

CHECK_EMAIL = re.compile(r"\b(check|read|show|open)\s+(my\s+)?(email|emails|inbox|gmail|messages|mails)\b")
SEND_WORDS = re.compile(r"\b(send|write|compose)\b")
SEND_EMAIL = re.compile(r"\b(send|write|compose|draft)\s+(an\s+)?(email|mail|message)\b")
CALENDAR = [
    re.compile(r"\b(check|show|open|what's on|view)\s+(my\s+)?(calendar|schedule|agenda|meetings|appointments|events)\b"),
    re.compile(r"\b(what do i have|what am i doing)\s+(today|tomorrow)\b"),
    re.compile(r"\b(do i have)\s+(any\s+)?(meetings|plans)\b"),
]


def email_control(analysis):
    text = analysis.text
    if CHECK_EMAIL.search(text) and not SEND_WORDS.search(text):
        return hit("check_email")
    if SEND_EMAIL.search(text):
        return hit("send_email")
    return None


def calendar_control(analysis):
    if any(pattern.search(analysis.text) for pattern in CALENDAR):
        return hit("check_calendar")
    return None


RULES = [
    Rule("email_control", "communication", email_control),
    Rule("calendar_control", "communication", calendar_control),
]
