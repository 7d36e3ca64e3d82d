from typing import Optional

from fastapi import APIRouter, Query

from core.response_envelope import document_response
from schemas.menu_plan import Budget, PlanDuration, PlanType
from services.menu_service import (
    calculate_plan_pricing,
    compare_plans,
    get_menu_plan,
    list_menu_plans,
    recommend_plans,
)

router = APIRouter(prefix="/menu", tags=["Menu"])

_PLAN_EXAMPLE = {
    "id": "veg-special",
    "name": "Veg Special",
    "type": "veg",
    "category": "special",
    "pricePerMeal": 89,
    "weeklyPrice": 534,
    "monthlyPrice": 2175,
    "isPopular": True,
    "isAvailable": True,
}


@router.get("/plans")
@document_response(success_example=[_PLAN_EXAMPLE])
async def list_plans(
    plan_type: Optional[PlanType] = Query(default=None, alias="type"),
    popular: bool = Query(default=False),
    available_only: bool = Query(default=False, alias="availableOnly"),
):
    return list_menu_plans(plan_type=plan_type, popular_only=popular, available_only=available_only)


@router.get("/recommendations")
@document_response(success_example=[_PLAN_EXAMPLE])
async def plan_recommendations(
    vegetarian: Optional[bool] = Query(default=None, alias="isVegetarian"),
    budget: Optional[Budget] = Query(default=None),
):
    return recommend_plans(is_vegetarian=vegetarian, budget=budget)


@router.get("/compare")
@document_response(response_codes={400: "None of the requested plans exist"})
async def plan_comparison(plan_ids: str = Query(..., alias="planIds", description="Comma separated plan ids.")):
    return compare_plans([plan_id.strip() for plan_id in plan_ids.split(",") if plan_id.strip()])


@router.get("/plans/{plan_id}")
@document_response(success_example=_PLAN_EXAMPLE, response_codes={404: "Plan not found"})
async def get_plan(plan_id: str):
    return get_menu_plan(plan_id)


@router.get("/plans/{plan_id}/pricing")
@document_response(
    success_example={"planId": "veg-normal", "duration": "weekly", "unitPrice": 79, "totalPrice": 474, "savings": 0},
    response_codes={404: "Plan not found"},
)
async def get_plan_pricing(plan_id: str, duration: PlanDuration = Query(default=PlanDuration.WEEKLY)):
    return calculate_plan_pricing(plan_id, duration)
