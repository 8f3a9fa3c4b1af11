"""
Entry point for running oauthrefresh as a module: python -m oauthrefresh
"""

from oauthrefresh.cli.commands import app

if __name__ == "__main__":
    app()
