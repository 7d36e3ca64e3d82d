from __future__ import annotations

from schemas.menu_plan import MenuPlan, PlanCategory, PlanDuration, PlanType

# Regular price is this many meals at the per-meal price.
MEALS_PER_DURATION: dict[PlanDuration, int] = {
    PlanDuration.WEEKLY: 6,
    PlanDuration.MONTHLY: 25,
}

DAYS_PER_DURATION: dict[PlanDuration, int] = {
    PlanDuration.WEEKLY: 7,
    PlanDuration.MONTHLY: 30,
}

_SPECIAL_EXTRAS = "Dessert-Sweets/Double-Salad/Papad-Or-Pickle"
_COMBO_CURRIES = ("Wednesday & Friday - Chicken Masala Curry", "Remaining Days - Veg Curry")

MENU_PLANS: tuple[MenuPlan, ...] = (
    MenuPlan(
        id="veg-normal",
        name="Veg Normal",
        type=PlanType.VEG,
        category=PlanCategory.NORMAL,
        description="Complete vegetarian meal with chapati, rice, bhaji, dal/kadi, and salad",
        price_per_meal=79,
        weekly_price=474,
        monthly_price=1925,
        features=["Chapathis", "Rice", "Bhaji", "Dal/Kadi", "Salad"],
        image_url="/images/veg-normal.jpg",
    ),
    MenuPlan(
        id="veg-special",
        name="Veg Special",
        type=PlanType.VEG,
        category=PlanCategory.SPECIAL,
        description="Premium vegetarian meal with additional dessert, sweets, or double salad",
        price_per_meal=89,
        weekly_price=534,
        monthly_price=2175,
        features=["Chapathis (May be combined)", "Rice", "Bhaji", "Dal/Kadi", _SPECIAL_EXTRAS, "Compliment"],
        is_popular=True,
        image_url="/images/veg-special.jpg",
    ),
    MenuPlan(
        id="combo-normal",
        name="Combo Normal",
        type=PlanType.COMBO,
        category=PlanCategory.NORMAL,
        description="Mixed meal plan with 2 days chicken (Wed & Fri) and 4 days vegetarian",
        price_per_meal=84,
        weekly_price=546,
        monthly_price=2205,
        features=["Chapathi", "Rice", *_COMBO_CURRIES, "Salad"],
        image_url="/images/combo-normal.jpg",
    ),
    MenuPlan(
        id="combo-special",
        name="Combo Special",
        type=PlanType.COMBO,
        category=PlanCategory.SPECIAL,
        description="Premium mixed meal plan with additional dessert and compliments",
        price_per_meal=94,
        weekly_price=606,
        monthly_price=2455,
        features=["Chapathi", "Rice", *_COMBO_CURRIES, _SPECIAL_EXTRAS, "Compliment"],
        is_popular=True,
        image_url="/images/combo-special.jpg",
    ),
    MenuPlan(
        id="non-veg-normal",
        name="Non-Veg Normal",
        type=PlanType.NON_VEG,
        category=PlanCategory.NORMAL,
        description="Non-vegetarian meal with chicken curry, chapati, rice, and salad",
        price_per_meal=115,
        weekly_price=690,
        monthly_price=2875,
        features=["Chapathi", "Rice", "Chicken Curry", "Salad"],
        image_url="/images/non-veg-normal.jpg",
    ),
    MenuPlan(
        id="non-veg-special",
        name="Non-Veg Special",
        type=PlanType.NON_VEG,
        category=PlanCategory.SPECIAL,
        description="Premium non-vegetarian meal with additional dessert and compliments",
        price_per_meal=125,
        weekly_price=750,
        monthly_price=3125,
        features=["Chapathi", "Rice", "Chicken Curry", _SPECIAL_EXTRAS, "Compliment"],
        image_url="/images/non-veg-special.jpg",
    ),
)
