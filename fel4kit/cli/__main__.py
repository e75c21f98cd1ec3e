"""
Entry point for running fel4kit CLI as a module.

Usage: python -m fel4kit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
