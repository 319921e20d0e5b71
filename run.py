#!/usr/bin/env python3
"""TS Refactor Agent - Entry Point.

Usage:
    python run.py ./legacy-project                 # Migrate every eligible file
    python run.py ./legacy-project --dry-run       # Show planned targets only
    python run.py ./legacy-project -m gpt-4o-mini -f gpt-4o
    python run.py --help                           # Show help
"""

import sys
from pathlib import Path

from dotenv import load_dotenv

# Add src to path for development imports
SCRIPT_DIR = Path(__file__).resolve().parent
SRC_DIR = SCRIPT_DIR / "src"
sys.path.insert(0, str(SRC_DIR))

# Load environment variables from .env file if it exists
ENV_PATH = SCRIPT_DIR / ".env"
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)

from ts_refactor.cli import main

if __name__ == "__main__":
    main()
