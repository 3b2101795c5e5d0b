"""Configuration management for the planner application."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# Undo/redo depth (oldest snapshots are dropped first)
HISTORY_LIMIT: Final[int] = int(os.getenv('HISTORY_LIMIT', '100'))

# Inventory alerts
EXPIRING_SOON_DAYS: Final[int] = int(os.getenv('EXPIRING_SOON_DAYS', '2'))

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('PLANNER_DATA_DIR', str(BASE_DIR / 'data'))).resolve()
STATE_FILE: Final[Path] = Path(os.getenv('PLANNER_STATE_FILE', str(DATA_DIR / 'planner_state.json'))).resolve()
