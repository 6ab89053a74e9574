"""Keyword-driven analysis of free-text token prompts: themes, sentiment, audience."""
import logging
from typing import Dict, List

from launchpad.models import PromptAnalysis

logger = logging.getLogger(__name__)

# Table order is significant: themes and keywords are reported in this order.
THEME_KEYWORDS: Dict[str, List[str]] = {
    "animals": ["dog", "cat", "bear", "lion", "tiger", "wolf", "fox", "rabbit", "penguin", "monkey"],
    "tech": ["ai", "robot", "cyber", "quantum", "neural", "blockchain", "crypto", "digital"],
    "finance": ["money", "bank", "yield", "profit", "gold", "diamond", "treasure", "wealth"],
    "meme": ["moon", "rocket", "diamond", "hands", "ape", "chad", "based", "pump"],
    "luxury": ["lamborghini", "ferrari", "rolex", "luxury", "premium", "elite", "exclusive"],
}

POSITIVE_WORDS = ["amazing", "awesome", "great", "best", "incredible", "fantastic", "moon", "rocket"]
NEGATIVE_WORDS = ["bad", "terrible", "awful", "horrible", "crash", "dump", "scam"]

# First detected theme in this order picks the audience
AUDIENCE_PRIORITY = [
    ("animals", "Pet lovers and meme coin community"),
    ("luxury", "High-net-worth individuals and luxury enthusiasts"),
    ("tech", "Tech-savvy investors and DeFi users"),
    ("meme", "Meme coin traders and social media users"),
]
DEFAULT_AUDIENCE = "General crypto enthusiasts"


def _detect_themes(text: str) -> tuple:
    themes: List[str] = []
    keywords: List[str] = []
    for theme, theme_keywords in THEME_KEYWORDS.items():
        matches = [kw for kw in theme_keywords if kw in text]
        if matches:
            themes.append(theme)
            for kw in matches:
                if kw not in keywords:
                    keywords.append(kw)
    return tuple(themes), tuple(keywords)


def _sentiment(text: str) -> str:
    positive = sum(1 for w in POSITIVE_WORDS if w in text)
    negative = sum(1 for w in NEGATIVE_WORDS if w in text)
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def _target_audience(themes: tuple) -> str:
    for theme, audience in AUDIENCE_PRIORITY:
        if theme in themes:
            return audience
    return DEFAULT_AUDIENCE


def analyze(text: str) -> PromptAnalysis:
    """Analyze a prompt. Pure: same text, same analysis; never raises."""
    lowered = (text or "").lower()
    themes, keywords = _detect_themes(lowered)
    analysis = PromptAnalysis(
        sentiment=_sentiment(lowered),
        themes=themes,
        keywords=keywords,
        target_audience=_target_audience(themes),
    )
    logger.debug("Prompt analysis: themes=%s sentiment=%s", analysis.themes, analysis.sentiment)
    return analysis
