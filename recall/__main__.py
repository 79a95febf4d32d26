"""
Entry point for running Recall as a module.

Usage:
    python -m recall review
    python -m recall stats
    python -m recall --help
"""
from .cli import main

if __name__ == "__main__":
    main()
