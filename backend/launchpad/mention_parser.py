"""Extract a token launch request ("<name> + <TICKER>" or "<name> $TICKER") from mention text."""
import re
from typing import Dict, Optional

from launchpad.models import ParsedLaunch

MAX_NAME_LENGTH = 32

_HANDLE_RE = re.compile(r"@\w+")
_HASHTAG_RE = re.compile(r"#\w+")
_URL_RE = re.compile(r"https?://\S+")

# Tried in order; first match wins
LAUNCH_PATTERNS = [
    re.compile(r"^(.+?)\s*\+\s*([A-Z]{2,10})$", re.IGNORECASE),
    re.compile(r"^(.+?)\s*\$([A-Z]{2,10})$", re.IGNORECASE),
]


def clean_mention_text(text: str) -> str:
    cleaned = _URL_RE.sub("", text or "")
    cleaned = _HANDLE_RE.sub("", cleaned)
    cleaned = _HASHTAG_RE.sub("", cleaned)
    return " ".join(cleaned.split())


def parse_launch_mention(text: str) -> Optional[ParsedLaunch]:
    cleaned = clean_mention_text(text)
    for pattern in LAUNCH_PATTERNS:
        match = pattern.match(cleaned)
        if not match:
            continue
        name = match.group(1).strip()
        symbol = match.group(2).strip().upper()
        if 0 < len(name) <= MAX_NAME_LENGTH and 2 <= len(symbol) <= 10:
            return ParsedLaunch(name=name, symbol=symbol)
    return None


def test_parse(text: str) -> Dict:
    parsed = parse_launch_mention(text)
    return {
        "input": text,
        "parsed": parsed.to_dict() if parsed else None,
        "isValid": parsed is not None,
    }


# Not a test case
test_parse.__test__ = False
