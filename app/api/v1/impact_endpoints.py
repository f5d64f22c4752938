"""
Impact Estimation API Endpoints

Provides endpoints for:
- Estimating the impact of a single action (preview, nothing is stored)
- Listing the canonical action types and their units
- Inspecting the loaded rate table
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from ...schemas.impact_schemas import (
    ActionTypeInfo,
    ImpactEstimateRequest,
    ImpactEstimateResponse,
    RateTableInfo,
    normalize_quantity,
    normalize_unit,
)
from ...services.gamification_service import gamification_service
from ...services.impact_estimator import impact_estimator
from ...services.impact_formatter import format_impact_description

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/impact", tags=["Impact Estimation"])


@router.post(
    "/estimate",
    response_model=ImpactEstimateResponse,
    summary="Estimate environmental impact",
    description="""
    Estimate the environmental impact of one sustainable action.

    This endpoint:
    1. Looks up the action type's rates (unknown types have zero impact)
    2. Applies unit-specific arithmetic (km, kg, minutes) or the flat rate
    3. Derives points and the action category
    4. Returns display strings for the result

    Nothing is logged; callers store the returned impact with their action record.
    """
)
async def estimate_impact(request: ImpactEstimateRequest):
    """Estimate impact, points and descriptions for one action."""
    try:
        quantity = normalize_quantity(request.quantity)
        unit = normalize_unit(request.unit)
        impact = impact_estimator.estimate_all(request.action_type, quantity, unit)

        return ImpactEstimateResponse(
            action_type=request.action_type,
            quantity=quantity,
            unit=unit,
            recognized=impact_estimator.is_supported(request.action_type),
            impact=impact,
            points=gamification_service.calculate_points(
                request.action_type,
                impact.co2_saved_kg,
                impact.water_saved_liters
            ),
            category=gamification_service.get_action_category(request.action_type),
            description=format_impact_description(impact),
        )
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("Failed to estimate impact", extra={"action_type": request.action_type})
        raise HTTPException(
            status_code=500,
            detail={"code": "IMPACT_ESTIMATE_FAILED", "message": f"Error estimating impact: {exc}"},
        ) from exc


@router.get(
    "/action-types",
    response_model=List[ActionTypeInfo],
    summary="List action types",
    description="List every canonical action type with its category, units and point multiplier."
)
async def list_action_types():
    """List canonical action types."""
    return gamification_service.list_action_types()


@router.get(
    "/rates",
    response_model=RateTableInfo,
    summary="Rate table info",
    description="Version and calibration constants of the loaded rate table."
)
async def get_rate_table_info():
    """Describe the loaded rate table."""
    table = impact_estimator.rate_table
    return RateTableInfo(
        version=table.version,
        action_types=len(table.actions),
        recycling_blend=table.recycling_blend,
        shower_baseline_minutes=table.shower_baseline_minutes,
    )


# Health check for this router
@router.get("/health")
async def health_check():
    """Health check for impact estimation service."""
    return {"status": "healthy", "service": "impact-estimation"}
