"""
Subscription plan endpoints.

Public catalogue of plans for the pricing page.
"""
from fastapi import APIRouter, HTTPException, status

from app.core.subscription_plans import PLAN_CONFIGS, InvalidPlanError, get_plan_config
from app.schemas.plan import PlanListResponse, PlanResponse

router = APIRouter(prefix="/plans", tags=["Plans"])


@router.get("", status_code=status.HTTP_200_OK, response_model=PlanListResponse)
def list_plans():
    """List every subscription plan with its quotas and capabilities."""
    return PlanListResponse(
        plans=[PlanResponse.from_features(features) for features in PLAN_CONFIGS.values()]
    )


@router.get("/{plan}", status_code=status.HTTP_200_OK, response_model=PlanResponse)
def get_plan(plan: str):
    """Get a single plan. Returns 404 for unknown plans."""
    try:
        features = get_plan_config(plan)
    except InvalidPlanError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Plan not found"
        )
    return PlanResponse.from_features(features)
