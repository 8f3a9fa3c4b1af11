"""Configuration module for oauthrefresh."""

from oauthrefresh.config.loader import get_profile, list_profiles, resolve_profile_name
from oauthrefresh.config.schema import InputSource, Profile, TokenNames

__all__ = ["InputSource", "Profile", "TokenNames", "get_profile", "list_profiles", "resolve_profile_name"]
