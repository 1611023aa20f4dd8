"""
Configuration settings for MovieLedger.

Centralized configuration for the ledger, storage and CLI.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("MOVIELEDGER_DATA_ROOT", PROJECT_ROOT / "data"))
OUTPUT_ROOT = Path(os.getenv("MOVIELEDGER_OUTPUT_ROOT", PROJECT_ROOT / "output"))

# Ledger storage
LEDGER_PATH = Path(os.getenv("MOVIELEDGER_PATH", DATA_ROOT / "ledger.json"))

# Ratings
MIN_SCORE = 1
MAX_SCORE = 5

# Logging
LOG_LEVEL = os.getenv("MOVIELEDGER_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = os.getenv("MOVIELEDGER_LOG_FILE", "movieledger.log")
