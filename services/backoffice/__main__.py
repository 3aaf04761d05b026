"""
Entry point for running the back-office core as a module.

Usage:
    python -m services.backoffice [args]
"""

import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())
