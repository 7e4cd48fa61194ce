"""Application-wide constants."""

PROJECT_NAME = "Herit API"
VERSION = "1.0.0"
API_PREFIX = "/api"

ACCESS_TOKEN_COOKIE = "herit_access_token"
REFRESH_TOKEN_COOKIE = "herit_refresh_token"
OAUTH_STATE_COOKIE = "oauth_state"

ACCESS_TOKEN_TTL_SECONDS = 24 * 60 * 60
REFRESH_TOKEN_TTL_SECONDS = 30 * 24 * 60 * 60
OAUTH_STATE_TTL_SECONDS = 10 * 60
