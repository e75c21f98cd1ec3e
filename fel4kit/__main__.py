"""
Entry point for running fel4kit CLI as a module.

Usage: python -m fel4kit [command] [options]
"""

from fel4kit.cli.parser import main

if __name__ == "__main__":
    main()
