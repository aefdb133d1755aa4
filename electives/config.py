"""
Runtime configuration.

Values come from the environment (a local .env file is honoured via
python-dotenv). The query engine itself reads none of these; they only
locate the dataset and configure the API server.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).parent.parent

DATA_FILE = Path(os.getenv("ELECTIVES_DATA_FILE", BASE_DIR / "data" / "electives.json"))
LOG_DIR   = Path(os.getenv("ELECTIVES_LOG_DIR", BASE_DIR / "logs"))

API_HOST = os.getenv("ELECTIVES_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("ELECTIVES_API_PORT", "8000"))
