"""Configuration management for the FoodStock application."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Alert thresholds
SOON_EXPIRED_THRESHOLD_DAYS: Final[int] = int(os.getenv('SOON_EXPIRED_THRESHOLD_DAYS', '3'))
NOTIFICATION_THRESHOLD_DAYS: Final[int] = int(os.getenv('NOTIFICATION_THRESHOLD_DAYS', '7'))

# Retry Configuration
MAX_RETRY_ATTEMPTS: Final[int] = int(os.getenv('MAX_RETRY_ATTEMPTS', '3'))
RETRY_BASE_DELAY: Final[float] = float(os.getenv('RETRY_BASE_DELAY', '0.5'))

# UI Settings
SEARCH_DEBOUNCE_SECONDS: Final[float] = float(os.getenv('SEARCH_DEBOUNCE_SECONDS', '0.3'))

# Logging
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'INFO').upper()

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('FOODSTOCK_DATA_DIR', str(BASE_DIR / 'data'))).resolve()
