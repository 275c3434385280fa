"""
Browser plugin.

URLs are resolved through ``site_map``. Pages are only actually opened
when ``skills.browser.launch`` is true; otherwise the handler just reports
what it would open.
"""

import logging
import webbrowser
from urllib.parse import quote_plus

logger = logging.getLogger(__name__)

name = "browser"
description = "Open websites and search YouTube"

YOUTUBE_URL = "https://www.youtube.com"


def resolve_url(target, site_map):
    """
    Map a site name or bare domain to a URL.

    Returns (url, is_search): unknown bare names become a Google search.
    """
    target = target.strip()
    lower = target.lower()
    if lower.startswith(("http://", "https://")):
        return target, False
    if "." not in lower:
        if lower in site_map:
            return site_map[lower], False
        return f"https://www.google.com/search?q={quote_plus(target)}", True
    return f"https://{target}", False


def launch(url, context):
    if context.settings("browser").get("launch", False):
        webbrowser.open(url)
    else:
        logger.info(f"Browser launch disabled, would open {url}")


async def open_website(params, context):
    target = params.get("url") or params.get("website")
    if not target:
        return "Which website would you like me to open?"

    site_map = context.config.site_map if context.config else {}
    url, is_search = resolve_url(target, site_map)
    launch(url, context)

    if is_search:
        return f'Searching Google for "{target}", sir.'
    display = url.split("://", 1)[-1].rstrip("/")
    return f"Opening {display}, sir."


async def open_youtube(params, context):
    launch(YOUTUBE_URL, context)
    return "Opening YouTube, sir."


async def search_youtube(params, context):
    query = params.get("query") or params.get("search_query") or context.raw_text
    launch(f"{YOUTUBE_URL}/results?search_query={quote_plus(query)}", context)
    return f'Searching YouTube for "{query}", sir.'


intents = {
    "open_website": {"handler": open_website, "confidence": 0.5, "requires_confirmation": False},
    "open_youtube": {"handler": open_youtube, "confidence": 0.5, "requires_confirmation": False},
    "search_youtube": {"handler": search_youtube, "confidence": 0.5, "requires_confirmation": False},
}
