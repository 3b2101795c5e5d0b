from typing import Final

DATE_FORMAT: Final[str] = "%Y-%m-%d"

MEAL_TYPES: Final[tuple] = ("breakfast", "lunch", "dinner", "snack")
MEAL_LABELS: Final[dict[str, str]] = {
    "breakfast": "Breakfast",
    "lunch": "Lunch",
    "dinner": "Dinner",
    "snack": "Snack",
}
DAYS_PER_WEEK: Final[int] = 7
DAY_NAMES: Final[tuple] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

CATEGORIES: Final[tuple] = ("Protein", "Dairy", "Produce", "Pantry", "Other")
DEFAULT_CATEGORY: Final[str] = "Other"

TARGET_FAMILY: Final[str] = "family"
TARGET_PROFILE: Final[str] = "profile"

# Leftovers always land on the next day's lunch
LEFTOVERS_MEAL_TYPE: Final[str] = "lunch"

MIN_QTY: Final[float] = 0.01
MIN_SERVINGS_PER_COUNT: Final[float] = 0.01
DEFAULT_SERVINGS: Final[int] = 2
COUNT_PRECISION: Final[int] = 2

INVENTORY_SORTS: Final[tuple] = ("category", "expiry")

DEFAULT_PROFILE_NAME: Final[str] = "Me"
DEFAULT_PROFILE_COLOR: Final[str] = "#6366f1"
