from pydantic import BaseModel

from golive.shared.config import config


class AppEnvironConfig(BaseModel):
    # When enabled, external integrations use stubs and avoid network calls.
    DEMO_MODE: bool = config.get("DEMO_MODE", "true").strip().lower() == "true"  # type: ignore

    HTTP_TIMEOUT_SECONDS: float = float((config.get("HTTP_TIMEOUT_SECONDS") or "").strip() or 30)

    # Platform APIs
    TWITCH_API_BASE_URL: str = config.get("TWITCH_API_BASE_URL", "https://api.twitch.tv").strip()  # type: ignore
    TWITCH_CLIENT_ID: str | None = (config.get("TWITCH_CLIENT_ID") or "").strip() or None
    YOUTUBE_API_BASE_URL: str = config.get(
        "YOUTUBE_API_BASE_URL", "https://www.googleapis.com"
    ).strip()  # type: ignore
    FACEBOOK_GRAPH_BASE_URL: str = config.get(
        "FACEBOOK_GRAPH_BASE_URL", "https://graph.facebook.com/v19.0"
    ).strip()  # type: ignore

    # Multistream relay (optional)
    RESTREAM_API_BASE_URL: str | None = (config.get("RESTREAM_API_BASE_URL") or "").strip() or None

    # Auth broker for the browser OAuth flow (optional)
    AUTH_BASE_URL: str | None = (config.get("AUTH_BASE_URL") or "").strip() or None

    # Local collaborators
    SETTINGS_STORE_PATH: str = config.get(
        "SETTINGS_STORE_PATH", "var/go_live_settings.json"
    ).strip()  # type: ignore
    OVERLAY_DIR: str = config.get("OVERLAY_DIR", "var/overlays").strip()  # type: ignore

    # Account the user originally logged in with; merged platforms are linked to it
    PRIMARY_PLATFORM: str | None = (config.get("PRIMARY_PLATFORM") or "").strip() or None


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config
