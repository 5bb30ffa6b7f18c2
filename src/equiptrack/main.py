"""
EquipTrack Service Record API
Main FastAPI application
"""

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .utils.errors import error_handler, validation_error_handler
from .middleware.rate_limiter import limiter, rate_limit_handler
from .middleware.security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="EquipTrack Service Record API",
    description="""
    ## EquipTrack Service Record API

    Compliance records for customer equipment: calibration certificates,
    spot welders, lift equipment and compressors.

    ### Key Features:
    - **Retest dates**: derived as service date + 364 days
    - **Compliance status**: valid / due-soon / expired / invalid, computed on every read
    - **Certificate numbers**: sequential `BWS-<n>` numbers with a timestamp fallback
    - **Company scoping**: users only see their own company's records; admins see all
    """,
    version="1.0.0",
    tags_metadata=[
        {"name": "Service Records", "description": "Generic calibration/service certificates"},
        {"name": "Spot Welders", "description": "Spot welder service records"},
        {"name": "Lift Services", "description": "Lift equipment service records"},
        {"name": "Compressors", "description": "Compressor service records"},
        {"name": "Equipment", "description": "Cross-category listing and helpers"},
        {"name": "Health", "description": "Liveness and readiness checks"},
    ]
)

app.state.limiter = limiter
app.add_middleware(SecurityHeadersMiddleware)

# Add exception handlers
app.add_exception_handler(StarletteHTTPException, error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint with API information"""
    return {
        "service": "EquipTrack Service Record API",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "service_records": "/api/service-records",
            "spot_welders": "/api/spot-welders",
            "lift_services": "/api/lift-services",
            "compressors": "/api/compressors",
            "all_equipment": "/api/all-equipment",
            "health": "/health/ready",
            "docs": "/docs"
        }
    }


# Import and include routers
from .routers import service_records, equipment
from .health import readiness

for record_router in service_records.routers:
    app.include_router(record_router)
app.include_router(equipment.router)
app.include_router(readiness.router)

logger.info(f"EquipTrack API configured ({settings.environment})")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=5000)
