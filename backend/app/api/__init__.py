"""API routers for the Pediatric Vitals Risk Service."""

from app.api.patients import router as patients_router
from app.api.reference_ranges import router as reference_ranges_router
from app.api.risk import router as risk_router
from app.api.vitals import router as vitals_router

__all__ = [
    "patients_router",
    "reference_ranges_router",
    "risk_router",
    "vitals_router",
]
