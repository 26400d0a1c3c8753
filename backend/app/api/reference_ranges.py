"""Pediatric reference range endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from app.schemas import ReferenceRange
from app.services.reference_ranges import get_reference_range_service

router = APIRouter(prefix="/reference-ranges", tags=["Reference Ranges"])


@router.get(
    "",
    response_model=list[ReferenceRange],
    summary="List reference ranges",
    description="List normal vital-sign ranges for every pediatric age group.",
)
async def list_reference_ranges() -> list[ReferenceRange]:
    """List all age groups, youngest first."""
    return [ReferenceRange.model_validate(r) for r in get_reference_range_service().get_all_ranges()]


@router.get(
    "/lookup",
    response_model=ReferenceRange,
    summary="Find the reference range for an age",
    description="Return the age group whose range contains the given age in years.",
)
async def lookup_reference_range(
    age: Annotated[float, Query(ge=0, description="Age in years")],
) -> ReferenceRange:
    """Find the reference range for an age.

    Raises:
        HTTPException: 404 if no age group covers the age.
    """
    group = get_reference_range_service().get_range_for_age(age)
    if group is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No pediatric reference range for age {age}",
        )
    return ReferenceRange.model_validate(group)
