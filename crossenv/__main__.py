"""
Entry point for running crossenv as a module.

Usage: python -m crossenv [command] [options]
"""

from crossenv.cli.parser import main

if __name__ == "__main__":
    main()
