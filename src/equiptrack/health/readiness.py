"""
Readiness and liveness checks for EquipTrack
"""

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database.core import get_db
from ..services.equipment_registry import CATEGORY_REGISTRY

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """Check database connectivity, the certificate sequence and the record tables"""
    checks = {
        "database": False,
        "certificate_sequence": False,
        "record_tables": False,
    }
    details = {}

    try:
        result = await db.execute(text("SELECT 1"))
        checks["database"] = result.scalar_one() == 1
        details["database"] = {"connected": checks["database"]}
    except Exception as e:
        logger.error(f"Readiness: database check failed: {e}")
        details["database"] = {"error": str(e)}

    if checks["database"]:
        try:
            result = await db.execute(
                text("SELECT COUNT(*) FROM pg_class WHERE relkind = 'S' AND relname = :name"),
                {"name": settings.certificate_sequence}
            )
            checks["certificate_sequence"] = result.scalar_one() > 0
            details["certificate_sequence"] = {
                "name": settings.certificate_sequence,
                "exists": checks["certificate_sequence"]
            }
        except Exception as e:
            details["certificate_sequence"] = {"error": str(e)}

        expected = [spec.table_name for spec in CATEGORY_REGISTRY.values()]
        try:
            result = await db.execute(
                text(
                    "SELECT table_name FROM information_schema.tables "
                    "WHERE table_name = ANY(:names)"
                ),
                {"names": expected}
            )
            present = {row[0] for row in result.all()}
            missing = sorted(set(expected) - present)
            checks["record_tables"] = not missing
            details["record_tables"] = {"expected": expected, "missing": missing}
        except Exception as e:
            details["record_tables"] = {"error": str(e)}

    all_ready = all(checks.values())
    if not all_ready:
        logger.warning(f"Readiness degraded: {checks}")

    return {
        "ready": all_ready,
        "status": "healthy" if all_ready else "degraded",
        "checks": checks,
        "details": details,
        "timestamp": time.time()
    }


@router.get("/live")
async def liveness_check():
    """Simple liveness check for container orchestration"""
    return {
        "alive": True,
        "service": "equiptrack-api",
        "timestamp": time.time()
    }
