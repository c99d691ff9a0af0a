import os
from pathlib import Path

from .constants import DATA_DIR, DB_FILE_NAME

BASE_DIR = Path(__file__).resolve().parent
DATA_PATH = Path(os.environ.get("PHARMACY_POS_DATA_DIR") or (BASE_DIR / DATA_DIR))
DB_PATH = DATA_PATH / DB_FILE_NAME

# backend serving purchase orders / accounting
API_BASE_URL = os.environ.get("PHARMACY_POS_API_URL", "http://localhost:5000")
API_TOKEN = os.environ.get("PHARMACY_POS_API_TOKEN") or None
REQUEST_TIMEOUT = float(os.environ.get("PHARMACY_POS_REQUEST_TIMEOUT", "8"))
