#!/usr/bin/env python3
"""Create the booking API request log database.

Usage:
    uv run python src/scripts/init_db.py
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.logging import create_request_log_table
from core.config import DB_PATH


def main():
    create_request_log_table(DB_PATH)
    print(f"Request log database ready at {DB_PATH}")


if __name__ == "__main__":
    main()
