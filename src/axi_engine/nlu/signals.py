"""
Signal Extraction
=================

Coarse linguistic signals and candidate entities for rule matching.

- Signals: question type, command-likeness, negation, sentiment
- Entities: URLs, numbers, website, search query, app name, filename
- analyze(): one-shot bundle consumed by the rule matcher
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .preprocessor import preprocess

QUESTION_WORDS = ["what", "where", "when", "who", "whom", "whose", "which", "why", "how"]

POSITIVE_WORDS = [
    "good", "great", "awesome", "nice", "love", "like", "thanks", "thank",
    "happy", "wonderful", "excellent", "amazing", "perfect", "best",
]
NEGATIVE_WORDS = [
    "bad", "terrible", "awful", "hate", "dislike", "angry", "sad", "worst",
    "horrible", "annoying", "wrong", "problem", "error",
]

YES_NO_PATTERN = re.compile(
    r"^(is|are|was|were|do|does|did|can|could|will|would|should|may|might)\s"
)
COMMAND_PATTERN = re.compile(
    r"^(open|go|show|tell|find|search|play|turn|set|make|create|delete|remove)"
)
NEGATION_PATTERN = re.compile(r"\b(not|no|never|don't|dont|doesn't|won't|can't|cannot|stop)\b")

URL_PATTERN = re.compile(
    r"(?:https?://)?(?:www\.)?([a-zA-Z0-9-]+(?:\.[a-zA-Z]{2,})+)(?:/[^\s]*)?"
)
NUMBER_PATTERN = re.compile(r"(?<![\w.])-?\d+(?:\.\d+)?(?![\w.])")
WEBSITE_PATTERN = re.compile(
    r"\b(google|youtube|facebook|instagram|twitter|amazon|flipkart|github|linkedin|netflix)\b"
)
SEARCH_PATTERNS = [
    re.compile(r"search (?:for |on youtube for |youtube for )?(.+)"),
    re.compile(r"find (.+?) (?:on|in|about)"),
    re.compile(r"look up (.+)"),
    re.compile(r"look for (.+)"),
]
APP_PATTERN = re.compile(r"(?:open|launch|start|run) (.+?)(?:\s|$)")
APP_EXCLUDE = re.compile(r"\.com|\.org|\.in|\.net|youtube|google|facebook")
FILENAME_PATTERN = re.compile(r"\b([\w-]+\.(?:txt|md|py|js|ts|json|yaml|yml|csv|log|pdf|docx?|xlsx?|png|jpe?g|html|css))\b")


@dataclass(frozen=True)
class Signals:
    """Intent signals extracted from raw text."""
    is_question: bool = False
    question_type: Optional[str] = None
    is_command: bool = False
    has_negation: bool = False
    sentiment: str = "neutral"


@dataclass(frozen=True)
class Analysis:
    """Everything a rule needs to know about an utterance."""
    raw: str
    text: str
    normalized: str
    tokens: List[str]
    entities: Dict[str, Any] = field(default_factory=dict)
    signals: Signals = field(default_factory=Signals)


def get_question_type(text: str) -> Optional[str]:
    lower = text.lower().strip()
    for word in QUESTION_WORDS:
        if lower.startswith(word):
            return word
    if YES_NO_PATTERN.match(lower):
        return "yes_no"
    return None


def analyze_sentiment(text: str) -> str:
    """Keyword-count sentiment: positive, negative or neutral."""
    lower = text.lower()
    score = sum(1 for word in POSITIVE_WORDS if word in lower)
    score -= sum(1 for word in NEGATIVE_WORDS if word in lower)
    if score > 0:
        return "positive"
    if score < 0:
        return "negative"
    return "neutral"


def extract_signals(text: str) -> Signals:
    lower = (text or "").lower().strip()
    question_type = get_question_type(lower)
    return Signals(
        is_question=lower.endswith("?") or question_type is not None,
        question_type=question_type,
        is_command=bool(COMMAND_PATTERN.match(lower)),
        has_negation=bool(NEGATION_PATTERN.search(lower)),
        sentiment=analyze_sentiment(lower),
    )


def extract_urls(text: str) -> List[str]:
    return [match.group(0).lower() for match in URL_PATTERN.finditer(text)]


def extract_website(text: str, urls: Optional[List[str]] = None) -> Optional[str]:
    """Explicit URLs win over well-known site names."""
    if urls:
        return urls[0]
    match = WEBSITE_PATTERN.search(text.lower())
    return match.group(1) if match else None


def extract_search_query(text: str) -> Optional[str]:
    lower = text.lower()
    for pattern in SEARCH_PATTERNS:
        match = pattern.search(lower)
        if match:
            return match.group(1).strip()
    return None


def extract_app_name(text: str) -> Optional[str]:
    match = APP_PATTERN.search(text.lower())
    if match:
        app = match.group(1).strip()
        if not APP_EXCLUDE.search(app):
            return app
    return None


def extract_filename(text: str) -> Optional[str]:
    match = FILENAME_PATTERN.search(text.lower())
    return match.group(1) if match else None


def extract_entities(text: str) -> Dict[str, Any]:
    """Extract candidate entities. Missing slots are None (or empty lists)."""
    text = text or ""
    filename = extract_filename(text)
    urls = [url for url in extract_urls(text) if url != filename]
    return {
        "urls": urls,
        "numbers": [float(n) if "." in n else int(n) for n in NUMBER_PATTERN.findall(text)],
        "website": extract_website(text, urls),
        "search_query": extract_search_query(text),
        "app_name": extract_app_name(text),
        "filename": filename,
    }


def analyze(text: str) -> Analysis:
    """Full analysis of one utterance (no stopword removal, no lemmatization)."""
    raw = text or ""
    result = preprocess(raw, remove_stops=False, lemma=False)
    return Analysis(
        raw=raw,
        text=raw.lower().strip(),
        normalized=result.cleaned,
        tokens=result.tokens,
        entities=extract_entities(raw),
        signals=extract_signals(raw),
    )
