"""
YouTube, website and application-launch rules.

YouTube search rules must run before the website rules: "search youtube
for lofi" mentions youtube but is a search, not a site visit.
"""

import re

from .matcher import Rule, hit

SEARCH_YOUTUBE = re.compile(r"search (?:youtube|you tube) for (.+)")
PLAY_ON_YOUTUBE = re.compile(r"^play (.+?) on (?:youtube|you tube)$")
YOUTUBE_MENTION = re.compile(r"youtube")

ASK_WHICH_WEBSITE = {"open website", "visit website", "open a website"}
YOUTUBE_ACTION = re.compile(r"search|find|play|dhundho|chalao")
GOOGLE_PLEASE = re.compile(r"\bgoogle please\b")
LAUNCH_VERB = re.compile(r"^(open|launch|start|run)\b")


def search_youtube(analysis):
    text = analysis.text

    match = SEARCH_YOUTUBE.search(text) or PLAY_ON_YOUTUBE.search(text)
    if match:
        return hit("search_youtube", query=match.group(1).strip())

    query = analysis.entities.get("search_query")
    if query and YOUTUBE_MENTION.search(text):
        return hit("search_youtube", query=query)

    return None


def ask_which_website(analysis):
    if analysis.text in ASK_WHICH_WEBSITE:
        return hit("ask_which_website")
    return None


def open_website(analysis):
    text = analysis.text
    website = analysis.entities.get("website")

    # Leave "play X on youtube" style requests to the YouTube rules
    if website == "youtube" and YOUTUBE_ACTION.search(text):
        return None

    if website and analysis.signals.is_command:
        if website == "youtube":
            return hit("open_youtube", website="youtube")
        return hit("open_website", url=website)

    if GOOGLE_PLEASE.search(text):
        return hit("open_website", url="google")

    urls = analysis.entities.get("urls") or []
    if urls:
        return hit("open_website", url=urls[0])

    return None


def open_app(analysis):
    app = analysis.entities.get("app_name")
    if app and LAUNCH_VERB.search(analysis.text):
        return hit("open_app", app=app)
    return None


YOUTUBE_RULES = [
    Rule("search_youtube", "youtube", search_youtube),
]

WEBSITE_RULES = [
    Rule("ask_which_website", "website", ask_which_website),
    Rule("open_website", "website", open_website),
]

APP_RULES = [
    Rule("open_app", "apps", open_app),
]
