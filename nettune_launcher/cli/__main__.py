"""
Entry point for running the CLI as a module.

Usage: python -m nettune_launcher.cli [options] [command] [args]
"""

from .parser import main

if __name__ == "__main__":
    main()
