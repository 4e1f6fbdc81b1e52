"""
Run the document management CLI: python -m app <command>

Commands: classify, search, seed-categories, stats
"""

import sys

from app.cli import main

if __name__ == "__main__":
    sys.exit(main())
