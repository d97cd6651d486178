"""
Entry point for running nettune-launcher as a module.

Usage: python -m nettune_launcher [options] [command] [args]
"""

from nettune_launcher.cli.parser import main

if __name__ == "__main__":
    main()
