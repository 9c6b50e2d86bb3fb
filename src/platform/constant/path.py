from pathlib import Path


# Project root (one level above the `src` package)
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

LOG_DIR = BASE_DIR / 'logs'
