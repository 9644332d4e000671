#!/usr/bin/env python3
"""
Main entry point for the shaid CLI.

This delegates to the UI layer in shaid.ui.cli to keep the
console script mapping stable.
"""

from shaid.ui.cli import run as shaid


if __name__ == "__main__":
    shaid()
