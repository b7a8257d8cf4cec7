"""Settings for chat_mirror.

Each section reads `CHAT_MIRROR_<SECTION>_*` environment variables, falling
back to a local `.env` file. Unknown variables are ignored.
"""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "MongoSettings",
    "CredentialSettings",
    "ClaudeSettings",
    "ChatGPTSettings",
    "SyncSettings",
    "SearchSettings",
    "LoggingSettings",
    "ChatMirrorConfig",
]

ENV_PREFIX = "CHAT_MIRROR_"


def _section(name: str = "") -> SettingsConfigDict:
    prefix = f"{ENV_PREFIX}{name.upper()}_" if name else ""
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class MongoSettings(BaseSettings):
    """MongoDB connection settings for the canonical store."""

    model_config = _section("mongo")

    uri: SecretStr = SecretStr("mongodb://localhost:27017")
    database: str = "chat_mirror"
    collection_prefix: str = ""


class CredentialSettings(BaseSettings):
    """Session credential headers, one per remote service.

    The values are opaque cookie headers obtained outside of chat_mirror.
    """

    model_config = _section("credentials")

    claude_cookie: SecretStr | None = None
    chatgpt_cookie: SecretStr | None = None


class ClaudeSettings(BaseSettings):
    """Claude web API settings."""

    model_config = _section("claude")

    api_base_url: str = "https://claude.ai/api"
    app_base_url: str = "https://claude.ai"


class ChatGPTSettings(BaseSettings):
    """ChatGPT backend API settings."""

    model_config = _section("chatgpt")

    api_base_url: str = "https://chatgpt.com/backend-api"
    app_base_url: str = "https://chatgpt.com"
    page_size: int = 100
    page_delay: float = 0.2  # seconds between list pages


class SyncSettings(BaseSettings):
    model_config = _section("sync")

    detail_delay: float = 0.1  # seconds after each conversation fetch
    request_timeout: float = 30.0
    user_agent: str = "chat-mirror/0.1"
    auto_sync_on_detect: bool = True


class SearchSettings(BaseSettings):
    """Search index and ranking parameters."""

    model_config = _section("search")

    title_boost: float = 3.0
    fuzzy: float = 0.2
    max_results: int = 50
    tie_threshold: float = 0.2
    max_snippets: int = 3


class LoggingSettings(BaseSettings):
    model_config = _section("log")

    level: str = "INFO"
    json_output: bool = False


class ChatMirrorConfig(BaseSettings):
    """All settings sections in one object.

    Example:
        config = ChatMirrorConfig()
        page_size = config.chatgpt.page_size
    """

    model_config = _section()

    mongo: MongoSettings = MongoSettings()
    credentials: CredentialSettings = CredentialSettings()
    claude: ClaudeSettings = ClaudeSettings()
    chatgpt: ChatGPTSettings = ChatGPTSettings()
    sync: SyncSettings = SyncSettings()
    search: SearchSettings = SearchSettings()
    logging: LoggingSettings = LoggingSettings()
