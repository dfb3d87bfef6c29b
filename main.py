"""Main entry point for the voice workout log."""
from __future__ import annotations

import sys

from dotenv import load_dotenv

# Load environment variables from .env early so configuration can see them
load_dotenv()

from app.startup import run_application  # noqa: E402


def main() -> None:
    """Application entry point."""
    sys.exit(run_application())


__all__ = ["main"]

if __name__ == "__main__":
    main()
