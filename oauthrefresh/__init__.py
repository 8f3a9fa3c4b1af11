"""
oauthrefresh - OAuth token refresh for CI jobs
"""

__version__ = "0.1.0"
__logo__ = "🔑"
