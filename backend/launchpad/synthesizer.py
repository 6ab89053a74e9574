"""Generate token name/symbol/description suggestions from an analyzed prompt.

Variants cycle through three strategies (keyword-direct, prefix+suffix,
themed name). Random picks come from an injected ``random.Random`` so a
seeded synthesizer is reproducible.
"""
import logging
import random
import re
from typing import Dict, List, Optional

from launchpad.models import PromptAnalysis, TokenSuggestion
from launchpad.prompt_analyzer import analyze

logger = logging.getLogger(__name__)

FALLBACK_THEME = "tech"
MAX_SYMBOL_LENGTH = 8
MAX_TAGS = 6
MAX_HOOKS = 3
HIGH_RISK_VIRAL_THRESHOLD = 7

THEME_PREFIXES: Dict[str, List[str]] = {
    "animals": ["Super", "Mega", "Ultra", "Cyber", "Space", "Rocket", "Moon", "Diamond"],
    "tech": ["Neo", "Quantum", "Cyber", "Neural", "Smart", "Meta", "Proto", "Ultra"],
    "finance": ["Golden", "Diamond", "Platinum", "Elite", "Premium", "Royal", "Luxury"],
    "meme": ["Moon", "Rocket", "Diamond", "Chad", "Based", "Epic", "Legendary"],
    "luxury": ["Luxury", "Premium", "Elite", "Royal", "Platinum", "Diamond", "Exclusive"],
}

THEME_SUFFIXES: Dict[str, List[str]] = {
    "animals": ["Coin", "Token", "Finance", "Protocol", "Network", "DAO", "DeFi"],
    "tech": ["AI", "Protocol", "Network", "Chain", "Tech", "Labs", "Systems"],
    "finance": ["Finance", "Capital", "Yield", "Vault", "Treasury", "Reserve", "Fund"],
    "meme": ["Moon", "Rocket", "Inu", "Pepe", "Chad", "Token", "Coin"],
    "luxury": ["Motors", "Collection", "Club", "Society", "Elite", "Premium", "Luxury"],
}

THEME_NAMES: Dict[str, List[str]] = {
    "animals": ["Beast Protocol", "Wild Finance", "Predator Coin", "Pack Token"],
    "tech": ["Neural Network", "Quantum Finance", "Cyber Protocol", "Digital Asset"],
    "finance": ["Wealth Protocol", "Capital Network", "Treasury Token", "Elite Finance"],
    "meme": ["Moon Mission", "Rocket Fuel", "Diamond Protocol", "Chad Finance"],
    "luxury": ["Premium Protocol", "Elite Network", "Luxury Finance", "Platinum Token"],
}

THEME_TAGS: Dict[str, List[str]] = {
    "meme": ["Meme", "Viral", "Community", "Fun"],
    "animals": ["Pet", "Animal", "Cute", "Community"],
    "tech": ["Technology", "Innovation", "Future", "AI"],
    "finance": ["Finance", "Yield", "Investment", "Premium"],
    "luxury": ["Luxury", "Premium", "Elite", "Exclusive"],
}
BASE_TAGS = ["Solana", "DeFi", "Community"]

VIRAL_KEYWORDS = {"moon", "rocket", "diamond", "ape", "chad"}

_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")


def derive_symbol(name: str) -> str:
    """Ticker from a name: 6 chars of one word, 3+3 of two, initials of three or more."""
    words = [w for w in (_NON_ALNUM_RE.sub("", part) for part in name.split()) if w]
    if not words:
        return "TOKEN"
    if len(words) == 1:
        symbol = words[0][:6]
    elif len(words) == 2:
        symbol = words[0][:3] + words[1][:3]
    else:
        symbol = "".join(w[0] for w in words[:3])
    return symbol.upper()[:MAX_SYMBOL_LENGTH]


def calculate_viral_potential(analysis: PromptAnalysis) -> int:
    score = 5
    if "meme" in analysis.themes:
        score += 3
    if "animals" in analysis.themes:
        score += 2
    if analysis.sentiment == "positive":
        score += 2
    score += sum(1 for k in analysis.keywords if k in VIRAL_KEYWORDS)
    return min(10, max(1, score))


def assess_risk_level(analysis: PromptAnalysis) -> str:
    if "meme" in analysis.themes or calculate_viral_potential(analysis) > HIGH_RISK_VIRAL_THRESHOLD:
        return "high"
    if "tech" in analysis.themes or "finance" in analysis.themes:
        return "low"
    return "medium"


def generate_marketing_hooks(analysis: PromptAnalysis, name: str) -> List[str]:
    hooks: List[str] = []
    if "luxury" in analysis.themes:
        hooks.append(f"💎 Experience luxury DeFi with {name}")
        hooks.append(f"👑 For the sophisticated investor - {name}")
    if "animals" in analysis.themes:
        hooks.append(f"🐕 The pack is growing - join {name}!")
        hooks.append(f"🦁 Unleash the beast with {name}")
    hooks.extend([
        f"🚀 {name} is launching to the moon!",
        f"💎 Diamond hands only for {name}",
        f"⚡ Lightning-fast gains with {name} on Solana",
        f"🏆 Join the elite {name} community",
        f"🔥 {name} is the next 1000x gem",
    ])
    return hooks[:MAX_HOOKS]


def generate_tags(analysis: PromptAnalysis) -> List[str]:
    tags: List[str] = []
    for tag in BASE_TAGS + [t for theme in analysis.themes for t in THEME_TAGS.get(theme, [])]:
        if tag not in tags:
            tags.append(tag)
    return tags[:MAX_TAGS]


def validate_prompt(prompt: str) -> Dict:
    errors = []
    if not prompt or not prompt.strip():
        errors.append("Please provide a description for your token")
    if prompt and len(prompt) < 10:
        errors.append("Description should be at least 10 characters long")
    if prompt and len(prompt) > 500:
        errors.append("Description should be 500 characters or less")
    return {"isValid": not errors, "errors": errors}


class SuggestionSynthesizer:
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def synthesize(self, prompt: str, analysis: PromptAnalysis, count: int = 3) -> List[TokenSuggestion]:
        suggestions = [self._create(prompt, analysis, i) for i in range(max(0, count))]
        logger.info("Synthesized %d suggestions (primary theme: %s)",
                    len(suggestions), analysis.primary_theme or FALLBACK_THEME)
        return suggestions

    def suggest(self, prompt: str, count: int = 3) -> List[TokenSuggestion]:
        return self.synthesize(prompt, analyze(prompt), count)

    def preview(self, prompt: str) -> TokenSuggestion:
        return self.suggest(prompt, 1)[0]

    def _create(self, prompt: str, analysis: PromptAnalysis, variant: int) -> TokenSuggestion:
        theme = analysis.primary_theme or FALLBACK_THEME
        if theme not in THEME_PREFIXES:
            theme = FALLBACK_THEME

        strategy = variant % 3
        if strategy == 0:
            name = self._keyword_name(theme, analysis)
        elif strategy == 1:
            name = self.rng.choice(THEME_PREFIXES[theme]) + self.rng.choice(THEME_SUFFIXES[theme])
        else:
            name = self.rng.choice(THEME_NAMES[theme])

        return TokenSuggestion(
            name=name,
            symbol=derive_symbol(name),
            description=self._description(prompt, name, analysis),
            category=theme,
            tags=tuple(generate_tags(analysis)),
            marketing_hooks=tuple(generate_marketing_hooks(analysis, name)),
            risk_level=assess_risk_level(analysis),
            viral_potential=calculate_viral_potential(analysis),
        )

    def _keyword_name(self, theme: str, analysis: PromptAnalysis) -> str:
        prefix = self.rng.choice(THEME_PREFIXES[theme])
        if analysis.keywords:
            keyword = analysis.keywords[0]
            return f"{prefix} {keyword[0].upper()}{keyword[1:]}"
        return f"{prefix} {self.rng.choice(THEME_SUFFIXES[theme])}"

    def _description(self, prompt: str, name: str, analysis: PromptAnalysis) -> str:
        subject = prompt.strip().lower() or "crypto culture"
        themes = " and ".join(analysis.themes) or "crypto"
        templates = [
            f"{name} brings {subject} to the Solana blockchain with innovative DeFi mechanics and community-driven growth.",
            f"Experience the future of {themes} with {name}. Built for {analysis.target_audience.lower()}.",
            f"{name} revolutionizes the {analysis.primary_theme or 'crypto'} space with cutting-edge tokenomics and viral community features.",
            f"Join the {name} movement - where {subject} meets decentralized finance on Solana's lightning-fast network.",
        ]
        return self.rng.choice(templates)
