#!/usr/bin/env python3
"""
Convenience entry point for running the Helensvale Connect CLI directly.

Usage: python connect.py [command] [options]
"""

from helensvale.cli.app import app

if __name__ == "__main__":
    app()
