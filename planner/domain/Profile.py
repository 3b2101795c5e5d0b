"""Profile domain entity: a person the plan can be split by, with optional daily goals."""
from typing import Optional

from planner.utilities.constants import DEFAULT_PROFILE_NAME, DEFAULT_PROFILE_COLOR
from planner.utilities.ids import create_id, now_iso

GOAL_FIELDS = {
    "daily_calorie_goal": "dailyCalorieGoal",
    "daily_protein_goal_g": "dailyProteinGoalG",
    "daily_carbs_goal_g": "dailyCarbsGoalG",
    "daily_fat_goal_g": "dailyFatGoalG",
}


class LastProfileError(ValueError):
    """Raised when a command would remove the only remaining profile."""


class Profile:
    def __init__(self, name: str = DEFAULT_PROFILE_NAME, color: str = DEFAULT_PROFILE_COLOR,
                 goal_enabled: bool = False, daily_calorie_goal: Optional[float] = None,
                 daily_protein_goal_g: Optional[float] = None, daily_carbs_goal_g: Optional[float] = None,
                 daily_fat_goal_g: Optional[float] = None, id: Optional[str] = None,
                 created_at: Optional[str] = None):
        self.id = id or create_id("profile")
        self.name = name
        self.color = color
        self.goal_enabled = bool(goal_enabled)
        self.daily_calorie_goal = daily_calorie_goal
        self.daily_protein_goal_g = daily_protein_goal_g
        self.daily_carbs_goal_g = daily_carbs_goal_g
        self.daily_fat_goal_g = daily_fat_goal_g
        self.created_at = created_at or now_iso()

    def goals(self) -> dict:
        """Enabled goals only; an unset target is omitted."""
        if not self.goal_enabled:
            return {}
        return {f: getattr(self, f) for f in GOAL_FIELDS if getattr(self, f) is not None}

    def clone(self) -> "Profile":
        return Profile.from_dict(self.to_dict())

    def __str__(self) -> str:
        return f"{self.name} ({self.color})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        kwargs = {attr: d.get(key) for attr, key in GOAL_FIELDS.items()}
        return Profile(
            id=d.get("id"),
            name=str(d.get("name") or DEFAULT_PROFILE_NAME),
            color=str(d.get("color") or DEFAULT_PROFILE_COLOR),
            goal_enabled=d.get("goalEnabled", False),
            created_at=d.get("createdAt"),
            **kwargs,
        )

    def to_dict(self):
        data = {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "goalEnabled": self.goal_enabled,
            "createdAt": self.created_at,
        }
        for attr, key in GOAL_FIELDS.items():
            if getattr(self, attr) is not None:
                data[key] = getattr(self, attr)
        return data
