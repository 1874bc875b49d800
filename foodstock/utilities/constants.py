from typing import Final

DATE_FORMAT: Final[str] = "%d-%m-%Y"
AVAILABLE_UNITS: Final[list[str]] = ["kg", "g", "L", "mL", "unité", "boîte", "paquet", "bouteille"]
DEFAULT_UNIT: Final[str] = "kg"
DEFAULT_EXPIRATION_OFFSET_DAYS: Final[int] = 7  # new form defaults to one week ahead
REMINDER_LEAD_HOURS: Final[int] = 24
REMINDER_ID_PREFIX: Final[str] = "expiration_"
REMINDER_CATEGORY: Final[str] = "EXPIRATION_REMINDER"
EDIT_DATE_TOLERANCE_SECONDS: Final[int] = 60
