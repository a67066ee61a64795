"""
Convenience entry point for running bookingcheck directly.

Usage: python -m bookingcheck [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
