from pathlib import Path

from foodstock.utilities.config import DATA_DIR

# Centralized paths for data files (single source of truth)
PRODUCTS_FILE: Path = DATA_DIR / 'products.json'
REMINDERS_FILE: Path = DATA_DIR / 'reminders.json'

__all__ = ['DATA_DIR', 'PRODUCTS_FILE', 'REMINDERS_FILE']
