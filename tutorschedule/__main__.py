"""
Convenience entry point for running tutorschedule as a module.

Usage: python -m tutorschedule [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
