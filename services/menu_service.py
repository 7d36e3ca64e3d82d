from __future__ import annotations

from typing import Iterable

from fastapi import status

from core.errors import AppException, ErrorCode, resource_not_found
from core.menu_plans import MEALS_PER_DURATION, MENU_PLANS
from schemas.menu_plan import Budget, MenuPlan, PlanComparison, PlanDuration, PlanPricing, PlanType

# Inclusive price-per-meal bands; None means unbounded.
BUDGET_RANGES: dict[Budget, tuple[int, int | None]] = {
    Budget.LOW: (0, 100),
    Budget.MEDIUM: (100, 150),
    Budget.HIGH: (150, None),
}


def list_menu_plans(
    *,
    plan_type: PlanType | None = None,
    popular_only: bool = False,
    available_only: bool = False,
) -> list[MenuPlan]:
    plans: Iterable[MenuPlan] = MENU_PLANS
    if plan_type is not None:
        plans = [plan for plan in plans if plan.type == plan_type]
    if popular_only:
        plans = [plan for plan in plans if plan.is_popular]
    if available_only:
        plans = [plan for plan in plans if plan.is_available]
    return list(plans)


def find_menu_plan(plan_id: str) -> MenuPlan | None:
    return next((plan for plan in MENU_PLANS if plan.id == plan_id), None)


def get_menu_plan(plan_id: str) -> MenuPlan:
    plan = find_menu_plan(plan_id)
    if plan is None:
        raise resource_not_found("Menu plan", plan_id)
    return plan


def get_plan_features(plan_id: str) -> list[str]:
    plan = find_menu_plan(plan_id)
    return list(plan.features) if plan is not None else []


def is_plan_available(plan_id: str) -> bool:
    plan = find_menu_plan(plan_id)
    return plan is not None and plan.is_available


def calculate_plan_pricing(plan_id: str, duration: PlanDuration) -> PlanPricing:
    plan = get_menu_plan(plan_id)
    total_price = plan.weekly_price if duration == PlanDuration.WEEKLY else plan.monthly_price
    regular_price = plan.price_per_meal * MEALS_PER_DURATION[duration]
    return PlanPricing(
        plan_id=plan.id,
        duration=duration,
        unit_price=plan.price_per_meal,
        total_price=total_price,
        savings=max(0, regular_price - total_price),
    )


def _in_budget(plan: MenuPlan, budget: Budget) -> bool:
    low, high = BUDGET_RANGES[budget]
    return plan.price_per_meal >= low and (high is None or plan.price_per_meal <= high)


def recommend_plans(*, is_vegetarian: bool | None = None, budget: Budget | None = None) -> list[MenuPlan]:
    """Available plans matching the preferences, popular first then cheapest first."""

    plans = [plan for plan in MENU_PLANS if plan.is_available]
    if is_vegetarian is True:
        plans = [plan for plan in plans if plan.type == PlanType.VEG]
    elif is_vegetarian is False:
        plans = [plan for plan in plans if plan.type != PlanType.VEG]
    if budget is not None:
        plans = [plan for plan in plans if _in_budget(plan, budget)]
    return sorted(plans, key=lambda plan: (not plan.is_popular, plan.price_per_meal))


def compare_plans(plan_ids: list[str]) -> PlanComparison:
    plans = [plan for plan in (find_menu_plan(plan_id) for plan_id in plan_ids) if plan is not None]
    if not plans:
        raise AppException(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=ErrorCode.VALIDATION_FAILED,
            message="No known plans to compare",
            details={"plan_ids": plan_ids},
        )

    cheapest = plans[0]
    best_value = plans[0]
    for plan in plans[1:]:
        if plan.price_per_meal < cheapest.price_per_meal:
            cheapest = plan
        if len(plan.features) / plan.price_per_meal > len(best_value.features) / best_value.price_per_meal:
            best_value = plan

    return PlanComparison(
        plans=plans,
        cheapest=cheapest,
        most_popular=next((plan for plan in plans if plan.is_popular), plans[0]),
        best_value=best_value,
    )
