"""CLI module for oauthrefresh."""
