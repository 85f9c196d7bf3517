"""
Entry point for running Word Castle as a module.

Usage:
    python -m wordcastle learn
    python -m wordcastle review
    python -m wordcastle --help
"""
from .cli import main

if __name__ == "__main__":
    main()
