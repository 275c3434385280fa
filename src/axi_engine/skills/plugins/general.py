"""Greetings, time, jokes and other small talk."""

import random
from datetime import datetime

name = "general"
description = "Greetings, time and date, jokes and small talk"

GREETINGS = [
    "Hello sir, how can I assist you today?",
    "Good to see you, sir. What can I do for you?",
    "Hi there! How may I help?",
    "Hello! I'm ready to assist.",
]

JOKES = [
    "Why did the scarecrow win an award? Because he was outstanding in his field!",
    "Why don't skeletons fight each other? They don't have the guts.",
    "What do you call a fake noodle? An impasta.",
    "Why did the bicycle fall over? Because it was two-tired.",
]


async def greeting(params, context):
    return random.choice(GREETINGS)


async def tell_time(params, context):
    return f"The current time is {datetime.now().strftime('%I:%M %p')}, sir."


async def what_day(params, context):
    return f"Today is {datetime.now().strftime('%A, %B %d')}, sir."


async def tell_joke(params, context):
    return random.choice(JOKES)


async def weather_check(params, context):
    return "I cannot check the real-world weather yet, but I hope it's pleasant wherever you are!"


async def news_update(params, context):
    return "I don't have access to live news feeds at the moment, sir."


async def ask_which_website(params, context):
    context.request_input("open_website", "url")
    return "Which website should I open, sir?"


intents = {
    "greeting": {"handler": greeting, "confidence": 0.5, "requires_confirmation": False},
    "tell_time": {"handler": tell_time, "confidence": 0.5, "requires_confirmation": False},
    "what_day": {"handler": what_day, "confidence": 0.5, "requires_confirmation": False},
    "tell_joke": {"handler": tell_joke, "confidence": 0.5, "requires_confirmation": False},
    "weather_check": {"handler": weather_check, "confidence": 0.5, "requires_confirmation": False},
    "news_update": {"handler": news_update, "confidence": 0.5, "requires_confirmation": False},
    "ask_which_website": {"handler": ask_which_website, "confidence": 0.5, "requires_confirmation": False},
}
