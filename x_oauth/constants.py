"""
X OAuth 2.0 and API v2 constants
"""

# OAuth endpoints
AUTHORIZE_URL = "https://x.com/i/oauth2/authorize"
TOKEN_URL = "https://api.x.com/2/oauth2/token"
REVOKE_URL = "https://api.x.com/2/oauth2/revoke"

# API v2 endpoints
USER_ME_URL = "https://api.x.com/2/users/me"
MEDIA_UPLOAD_URL = "https://api.x.com/2/media/upload"
TWEETS_URL = "https://api.x.com/2/tweets"
POST_URL_TEMPLATE = "https://x.com/i/web/status/{post_id}"

# Read/write posts, read profile, upload media, and a refresh token
SCOPES = ("tweet.read", "tweet.write", "users.read", "offline.access", "media.write")

USER_FIELDS = "profile_image_url,username,name,verified"

CODE_CHALLENGE_METHOD = "S256"

# Local callback server used by the CLI login flow
OAUTH_CALLBACK_PORT = 5173
OAUTH_CALLBACK_PATH = "/callback"

# Timeouts (seconds)
DEFAULT_REQUEST_TIMEOUT = 30.0
MEDIA_DOWNLOAD_TIMEOUT = 30.0

MAX_MEDIA_BYTES = 5 * 1024 * 1024
