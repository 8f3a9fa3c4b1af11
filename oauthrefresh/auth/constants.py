"""OAuth refresh constants."""

CLIENT_ID = "9d1c250a-e61b-44d9-88ed-5944d1962f5e"
OAUTH_BETA_VERSION = "oauth-2025-04-20"
USER_AGENT = "Claude-Code/1.0.31"

CONSOLE_TOKEN_URL = "https://console.anthropic.com/v1/oauth/token"
CLAUDE_AI_TOKEN_URL = "https://api.claude.ai/oauth/token"

GRANT_TYPE = "refresh_token"
DEFAULT_TIMEOUT_SEC = 30.0
EXPIRY_BUFFER_SEC = 5 * 60
