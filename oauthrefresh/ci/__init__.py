"""CI environment collaborators."""

from oauthrefresh.ci.environment import CIEnvironment, ExportStyle, GitHubActionsEnvironment

__all__ = ["CIEnvironment", "ExportStyle", "GitHubActionsEnvironment"]
