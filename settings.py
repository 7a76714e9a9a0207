from config.loader import get_config_loader
from x_oauth.config import XConfig
from x_oauth import constants

# Get the config loader instance
config = get_config_loader()

VERSION = "1.0.0"

# Server configuration
PORT = config.get_int("PORT", 3001)
LOG_LEVEL = config.get_str("LOG_LEVEL", "info")
BIND_ADDRESS = config.get_str("BIND_ADDRESS", "0.0.0.0")

# CORS origins for browser clients (comma separated)
ALLOWED_ORIGINS = config.get_list(
    "ALLOWED_ORIGINS",
    ["http://localhost:5173", "http://localhost:5174"],
)

# X application credentials (register the app at developer.x.com)
X_CLIENT_ID = config.get_str("X_CLIENT_ID")
# Only set for confidential clients; public clients rely on PKCE alone
X_CLIENT_SECRET = config.get_secret("X_CLIENT_SECRET")

# CLI login callback
CALLBACK_PORT = config.get_int("CALLBACK_PORT", constants.OAUTH_CALLBACK_PORT)
X_REDIRECT_URI = config.get_str(
    "X_REDIRECT_URI",
    f"http://localhost:{CALLBACK_PORT}{constants.OAUTH_CALLBACK_PATH}",
)

# Timeouts (seconds)
REQUEST_TIMEOUT = config.get_float("REQUEST_TIMEOUT", constants.DEFAULT_REQUEST_TIMEOUT)
MEDIA_DOWNLOAD_TIMEOUT = config.get_float("MEDIA_DOWNLOAD_TIMEOUT", constants.MEDIA_DOWNLOAD_TIMEOUT)

# Token storage (client-held, used by the CLI only)
TOKEN_FILE = config.get_path("TOKEN_FILE", "~/.x-publisher/tokens.json")


def get_x_config() -> XConfig:
    """Build the XConfig injected into AuthSession and PublishPipeline"""
    return XConfig(
        client_id=X_CLIENT_ID,
        redirect_uri=X_REDIRECT_URI,
        client_secret=X_CLIENT_SECRET,
        request_timeout=REQUEST_TIMEOUT,
        media_download_timeout=MEDIA_DOWNLOAD_TIMEOUT,
    )
