"""Environment-driven settings. Entry points load .env before calling Settings.from_env()."""
import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    launch_api_url: str = "https://pumpportal.fun/api"
    solana_rpc_url: str = "https://api.mainnet-beta.solana.com"
    solana_private_key: str = ""
    http_timeout: float = 30.0
    default_slippage_bps: int = 500
    default_priority_fee: float = 0.0001
    launch_pool: str = "pump"
    monitor_poll_interval: float = 30.0
    monitor_error_backoff: float = 60.0
    monitor_initial_buy: float = 0.0
    monitor_autostart: bool = False
    twitter_handle: str = ""
    database_url: str = ""
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    sentry_dsn: str = ""
    environment: str = "production"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            launch_api_url=os.getenv("LAUNCH_API_URL", cls.launch_api_url),
            solana_rpc_url=os.getenv("SOLANA_RPC_URL", cls.solana_rpc_url),
            solana_private_key=os.getenv("SOLANA_PRIVATE_KEY", ""),
            http_timeout=float(os.getenv("HTTP_TIMEOUT", cls.http_timeout)),
            default_slippage_bps=int(os.getenv("DEFAULT_SLIPPAGE_BPS", cls.default_slippage_bps)),
            default_priority_fee=float(os.getenv("DEFAULT_PRIORITY_FEE", cls.default_priority_fee)),
            launch_pool=os.getenv("LAUNCH_POOL", cls.launch_pool),
            monitor_poll_interval=float(os.getenv("MONITOR_POLL_INTERVAL", cls.monitor_poll_interval)),
            monitor_error_backoff=float(os.getenv("MONITOR_ERROR_BACKOFF", cls.monitor_error_backoff)),
            monitor_initial_buy=float(os.getenv("MONITOR_INITIAL_BUY", cls.monitor_initial_buy)),
            monitor_autostart=_env_bool("MONITOR_AUTOSTART"),
            twitter_handle=os.getenv("TWITTER_HANDLE", "").strip().lstrip("@"),
            database_url=os.getenv("DATABASE_URL", ""),
            telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
            telegram_chat_id=os.getenv("TELEGRAM_CHAT_ID", ""),
            sentry_dsn=os.getenv("SENTRY_DSN", ""),
            environment=os.getenv("ENVIRONMENT", cls.environment),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
