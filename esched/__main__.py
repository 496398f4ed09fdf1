"""
Package entry point.

Allows running the application via:

    python -m esched

This simply forwards execution to esched.cli.main().
"""

from esched.cli import main

if __name__ == "__main__":
    main()
