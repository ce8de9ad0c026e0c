"""Print free beds per day from the rifugio availability page.

Standalone CLI script. Clicks every available day on the booking calendar,
reads the bed count from the overlay, and prints the requested days.

Run with: python scripts/check_availability.py
Range:    python scripts/check_availability.py --start-day 20 --end-day 25 --min-beds 2
Debug:    python scripts/check_availability.py --headed --verbose
JSON:     python scripts/check_availability.py --json
Diag:     python scripts/check_availability.py --dump-clickables data/clickables.json

Defaults come from environment variables / .env (START_DAY, END_DAY,
MIN_BEDS, RIFUGIO_URL, ...).

Exit codes:
  0 = success (one "<day>: <beds|unavailable>" line per day on stdout)
  1 = page or results table failed to load (message on stderr)
  2 = invalid configuration (message on stderr)
"""

import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.rifugio.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
