"""
Time estimates and chore suggestions.

Known chores carry a typical duration (and sometimes a tip). Titles that match
nothing fall back to a per-category default, keyed by lower-cased category name.
"""

from __future__ import annotations

from typing import Optional

from chorely.models.task import TaskEstimate

# title -> (category name, minutes, tip)
KNOWN_TASKS: dict[str, tuple[str, int, Optional[str]]] = {
    # Cleaning
    "vacuum living room": ("cleaning", 15, "Move furniture for best results"),
    "vacuum bedroom": ("cleaning", 10, None),
    "vacuum stairs": ("cleaning", 8, None),
    "mop kitchen floor": ("cleaning", 12, "Sweep first for best results"),
    "mop bathroom floor": ("cleaning", 8, None),
    "clean bathroom": ("cleaning", 25, "Start with toilet, then sink, finally shower"),
    "clean kitchen counters": ("cleaning", 8, None),
    "clean stovetop": ("cleaning", 12, None),
    "clean microwave": ("cleaning", 5, None),
    "wipe down appliances": ("cleaning", 10, None),
    "dust living room": ("cleaning", 15, None),
    "dust bedroom": ("cleaning", 10, None),
    "clean windows": ("cleaning", 20, None),
    "organize closet": ("organizing", 45, None),
    "make beds": ("organizing", 5, None),
    # Laundry
    "wash clothes": ("laundry", 5, "Sort by colors and fabric type"),
    "dry clothes": ("laundry", 3, None),
    "fold laundry": ("laundry", 20, None),
    "iron clothes": ("laundry", 25, None),
    "put away laundry": ("laundry", 10, None),
    # Kitchen
    "meal prep": ("kitchen", 60, "Prepare ingredients first"),
    "cook dinner": ("kitchen", 45, None),
    "cook breakfast": ("kitchen", 15, None),
    "pack lunch": ("kitchen", 10, None),
    "wash dishes": ("cleaning", 15, None),
    "load dishwasher": ("cleaning", 8, None),
    "unload dishwasher": ("cleaning", 8, None),
    # Shopping
    "grocery shopping": ("shopping", 60, "Make a list organized by store layout"),
    "buy household supplies": ("shopping", 30, None),
    "pharmacy run": ("shopping", 20, None),
    # Maintenance
    "water plants": ("maintenance", 10, None),
    "take out trash": ("maintenance", 5, None),
    "change air filter": ("maintenance", 5, None),
    "check tire pressure": ("maintenance", 10, None),
    # Outdoor
    "mow lawn": ("outdoor", 45, None),
    "weed garden": ("outdoor", 30, None),
    "water garden": ("outdoor", 15, None),
    "rake leaves": ("outdoor", 40, None),
}

CATEGORY_MINUTES: dict[str, int] = {
    "cleaning": 20,
    "kitchen": 30,
    "shopping": 45,
    "laundry": 15,
    "maintenance": 15,
    "organizing": 30,
    "outdoor": 35,
    "personal": 25,
    "other": 20,
}
DEFAULT_MINUTES = CATEGORY_MINUTES["other"]
SUGGESTION_LIMIT = 5


def get_task_estimate(title: str, category_name: Optional[str] = None) -> TaskEstimate:
    """
    Estimate how long a chore takes.

    An exact title match wins, then the first known chore whose name contains
    the title or is contained in it, then the category default.

    Examples:
        >>> get_task_estimate("Mow lawn").minutes
        45
        >>> get_task_estimate("Mow the back lawn", "Outdoor").minutes
        35
    """
    key = title.strip().lower()
    if key in KNOWN_TASKS:
        _, minutes, tips = KNOWN_TASKS[key]
        return TaskEstimate(minutes=minutes, tips=tips)

    if key:
        for name, (_, minutes, tips) in KNOWN_TASKS.items():
            if name in key or key in name:
                return TaskEstimate(minutes=minutes, tips=tips)

    category_key = (category_name or "").strip().lower()
    return TaskEstimate(minutes=CATEGORY_MINUTES.get(category_key, DEFAULT_MINUTES))


def get_task_suggestions(category_name: str, limit: int = SUGGESTION_LIMIT) -> list[str]:
    """Known chores of a category, in catalogue order."""
    category_key = category_name.strip().lower()
    return [
        name for name, (category, _, _) in KNOWN_TASKS.items() if category == category_key
    ][:limit]
