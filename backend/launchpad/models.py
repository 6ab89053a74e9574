"""Data model for the launch pipeline: analyses, suggestions, requests, results."""
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

DEFAULT_SLIPPAGE_BPS = 500
DEFAULT_PRIORITY_FEE = 0.0001
DEFAULT_POOL = "pump"


@dataclass(frozen=True)
class PromptAnalysis:
    sentiment: str
    themes: Tuple[str, ...]
    keywords: Tuple[str, ...]
    target_audience: str

    @property
    def primary_theme(self) -> Optional[str]:
        return self.themes[0] if self.themes else None

    def to_dict(self) -> Dict:
        return {
            "sentiment": self.sentiment,
            "themes": list(self.themes),
            "keywords": list(self.keywords),
            "suggestedCategories": list(self.themes),
            "targetAudience": self.target_audience,
        }


@dataclass(frozen=True)
class TokenSuggestion:
    name: str
    symbol: str
    description: str
    category: str
    tags: Tuple[str, ...]
    marketing_hooks: Tuple[str, ...]
    risk_level: str
    viral_potential: int

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "description": self.description,
            "category": self.category,
            "suggestedTags": list(self.tags),
            "marketingHooks": list(self.marketing_hooks),
            "riskLevel": self.risk_level,
            "viralPotential": self.viral_potential,
        }


@dataclass(frozen=True)
class AssetReference:
    metadata_uri: str
    image_uri: Optional[str] = None


@dataclass
class LaunchRequest:
    name: str
    symbol: str
    description: str
    image_uri: Optional[str] = None
    twitter: Optional[str] = None
    telegram: Optional[str] = None
    website: Optional[str] = None
    initial_buy: float = 0.0
    slippage_bps: int = DEFAULT_SLIPPAGE_BPS
    priority_fee: float = DEFAULT_PRIORITY_FEE

    @classmethod
    def from_dict(cls, body: Dict) -> "LaunchRequest":
        """Build from a camelCase API body. Values are not validated here."""
        return cls(
            name=(body.get("name") or "").strip(),
            symbol=(body.get("symbol") or "").strip().upper(),
            description=(body.get("description") or "").strip(),
            image_uri=body.get("imageUrl") or None,
            twitter=body.get("twitter") or None,
            telegram=body.get("telegram") or None,
            website=body.get("website") or None,
            initial_buy=body.get("initialBuy") or 0.0,
            slippage_bps=body.get("slippageBps", DEFAULT_SLIPPAGE_BPS),
            priority_fee=body.get("priorityFee", DEFAULT_PRIORITY_FEE),
        )


@dataclass(frozen=True)
class LaunchResult:
    signature: str
    mint: str
    bonding_curve: str
    associated_bonding_curve: str
    metadata_uri: Optional[str] = None
    launched_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def pump_fun_url(self) -> str:
        return f"https://pump.fun/{self.mint}"

    @property
    def dexscreener_url(self) -> str:
        return f"https://dexscreener.com/solana/{self.mint}"

    def to_dict(self) -> Dict:
        return {
            "signature": self.signature,
            "mint": self.mint,
            "bondingCurve": self.bonding_curve,
            "associatedBondingCurve": self.associated_bonding_curve,
            "metadataUri": self.metadata_uri,
            "launchedAt": self.launched_at,
            "pumpFunUrl": self.pump_fun_url,
            "dexScreenerUrl": self.dexscreener_url,
        }


@dataclass(frozen=True)
class ParsedLaunch:
    name: str
    symbol: str

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class Mention:
    id: str
    text: str
    image: Optional[bytes] = None
    author: Optional[str] = None


@dataclass
class MonitorState:
    is_monitoring: bool = False
    processed_count: int = 0
    last_error: Optional[str] = None
    started_at: Optional[str] = None
    last_poll_at: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "isMonitoring": self.is_monitoring,
            "processedCount": self.processed_count,
            "lastError": self.last_error,
            "startedAt": self.started_at,
            "lastPollAt": self.last_poll_at,
        }
