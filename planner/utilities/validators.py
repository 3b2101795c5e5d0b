"""
Input validation schemas using Pydantic for the HTTP command surface.

JSON bodies use the camelCase keys of the backup format; ``model_dump()`` yields the
snake_case keyword arguments the planner commands take.
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from planner.domain.WeekPlan import SlotAddress


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


def _strip(v):
    if isinstance(v, str):
        return v.strip()
    return v


class SlotAddressInput(_Schema):
    """Schema for a slot address (meal type x day x family-or-profile)."""
    meal_type: str = Field(..., alias="mealType", pattern=r'^(breakfast|lunch|dinner|snack)$')
    day: int = Field(..., ge=0, le=6)
    target_type: str = Field("family", alias="targetType", pattern=r'^(family|profile)$')
    profile_id: Optional[str] = Field(None, alias="profileId")

    def to_address(self) -> SlotAddress:
        return SlotAddress(self.meal_type, self.day, self.target_type, self.profile_id)


class NutritionInput(_Schema):
    calories: Optional[float] = Field(None, ge=0)
    protein_g: Optional[float] = Field(None, ge=0)
    carbs_g: Optional[float] = Field(None, ge=0)
    fat_g: Optional[float] = Field(None, ge=0)


class IngredientInput(NutritionInput):
    """Schema for adding (or merging into) an inventory ingredient."""
    name: str = Field(..., min_length=1, max_length=100)
    category: Optional[str] = None
    count: float = 0
    servings_per_count: Optional[float] = Field(None, alias="servingsPerCount", gt=0)
    expiration_date: Optional[date] = Field(None, alias="expirationDate")
    notes: Optional[str] = None
    pinned: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)


class IngredientPatch(NutritionInput):
    """Schema for a partial ingredient update; only supplied keys are applied."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = None
    count: Optional[float] = None
    servings_per_count: Optional[float] = Field(None, alias="servingsPerCount")
    expiration_date: Optional[date] = Field(None, alias="expirationDate")
    notes: Optional[str] = None
    pinned: Optional[bool] = None


class CountAdjustInput(_Schema):
    delta: float


class MealIngredientInput(_Schema):
    name: str = Field(..., min_length=1, max_length=100)
    qty: float = Field(1, gt=0)
    category: Optional[str] = None


class MealInput(_Schema):
    """Schema for a meal template."""
    name: str = Field(..., min_length=1, max_length=200)
    ingredients: List[MealIngredientInput] = Field(default_factory=list)
    servings_default: int = Field(2, alias="servingsDefault", ge=1, le=50)
    calories_per_serving: Optional[float] = Field(None, alias="caloriesPerServing", ge=0)
    pinned: bool = False

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate meal name."""
        if not v.strip():
            raise ValueError('Meal name cannot be empty')
        return v.strip()


class MealPatch(_Schema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    ingredients: Optional[List[MealIngredientInput]] = None
    servings_default: Optional[int] = Field(None, alias="servingsDefault", ge=1, le=50)
    calories_per_serving: Optional[float] = Field(None, alias="caloriesPerServing", ge=0)


class PinnedMoveInput(_Schema):
    direction: str = Field(..., pattern=r'^(left|right)$')


class ProfileInput(_Schema):
    """Schema for a profile and its optional daily nutrition goals."""
    name: str = Field(..., min_length=1, max_length=60)
    color: Optional[str] = Field(None, max_length=20)
    goal_enabled: bool = Field(False, alias="goalEnabled")
    daily_calorie_goal: Optional[float] = Field(None, alias="dailyCalorieGoal", ge=0)
    daily_protein_goal_g: Optional[float] = Field(None, alias="dailyProteinGoalG", ge=0)
    daily_carbs_goal_g: Optional[float] = Field(None, alias="dailyCarbsGoalG", ge=0)
    daily_fat_goal_g: Optional[float] = Field(None, alias="dailyFatGoalG", ge=0)


class ProfilePatch(ProfileInput):
    name: Optional[str] = Field(None, min_length=1, max_length=60)
    goal_enabled: Optional[bool] = Field(None, alias="goalEnabled")


class DropIngredientInput(_Schema):
    address: SlotAddressInput
    ingredient_id: str = Field(..., alias="ingredientId")


class DropMealInput(_Schema):
    address: SlotAddressInput
    meal_id: str = Field(..., alias="mealId")


class SlotInput(_Schema):
    address: SlotAddressInput


class SlotPairInput(_Schema):
    source: SlotAddressInput
    target: SlotAddressInput


class ServingsInput(_Schema):
    address: SlotAddressInput
    servings: float


class SaveAsMealInput(_Schema):
    address: SlotAddressInput
    name: str = Field(..., min_length=1, max_length=200)


class ReceiptItemInput(_Schema):
    """One draft line produced by the receipt/AI parser."""
    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    category: Optional[str] = None
    count: float = 1


class ReceiptImportInput(_Schema):
    items: List[ReceiptItemInput]


class WeekShiftInput(_Schema):
    delta: int = Field(..., ge=-520, le=520)


class WeekSetInput(_Schema):
    week_start_date: date = Field(..., alias="weekStartDate")


class CategoryInput(_Schema):
    name: str = Field(..., min_length=1, max_length=40)


class InventorySortInput(_Schema):
    sort: str = Field(..., pattern=r'^(category|expiry)$')
