from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PlanType(str, Enum):
    VEG = "veg"
    NON_VEG = "non-veg"
    COMBO = "combo"


class PlanCategory(str, Enum):
    NORMAL = "normal"
    SPECIAL = "special"


class PlanDuration(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Budget(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MenuPlan(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    type: PlanType
    category: PlanCategory
    description: str
    price_per_meal: int = Field(alias="pricePerMeal")
    weekly_price: int = Field(alias="weeklyPrice")
    monthly_price: int = Field(alias="monthlyPrice")
    features: List[str]
    is_popular: bool = Field(default=False, alias="isPopular")
    is_available: bool = Field(default=True, alias="isAvailable")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")


class PlanPricing(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    plan_id: str = Field(alias="planId")
    duration: PlanDuration
    unit_price: int = Field(alias="unitPrice")
    total_price: int = Field(alias="totalPrice")
    savings: int


class PlanComparison(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plans: List[MenuPlan]
    cheapest: MenuPlan
    most_popular: MenuPlan = Field(alias="mostPopular")
    best_value: MenuPlan = Field(alias="bestValue")
