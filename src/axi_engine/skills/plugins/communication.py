"""
Communication plugin.

Email and calendar open in the browser, under the same
``skills.browser.launch`` switch as the browser plugin.
"""

from .browser import launch

name = "communication"
description = "Open the email inbox, the composer and the calendar"

INBOX_URL = "https://mail.google.com"
COMPOSE_URL = "https://mail.google.com/mail/u/0/#compose"
CALENDAR_URL = "https://calendar.google.com"


async def check_email(params, context):
    launch(INBOX_URL, context)
    return "Opening your email inbox, sir."


async def send_email(params, context):
    launch(COMPOSE_URL, context)
    return "Opening the email composer, sir."


async def check_calendar(params, context):
    launch(CALENDAR_URL, context)
    return "Here is your calendar, sir."


intents = {
    "check_email": {"handler": check_email, "confidence": 0.5, "requires_confirmation": False},
    "send_email": {"handler": send_email, "confidence": 0.5, "requires_confirmation": False},
    "check_calendar": {"handler": check_calendar, "confidence": 0.5, "requires_confirmation": False},
}
