"""
Equipment category registry.

Each category shares the service record lifecycle but has its own table,
URL prefix and details schema.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Type

from ..models.service_records import (
    ServiceRecordColumns,
    ServiceRecord,
    SpotWelderRecord,
    LiftServiceRecord,
    CompressorRecord,
)
from ..schemas.equipment_details import (
    EquipmentDetails,
    NoDetails,
    SpotWelderDetails,
    LiftServiceDetails,
    CompressorDetails,
)


class EquipmentCategory(str, Enum):
    SERVICE_RECORD = "service_record"
    SPOT_WELDER = "spot_welder"
    LIFT_SERVICE = "lift_service"
    COMPRESSOR = "compressor"


@dataclass(frozen=True)
class CategorySpec:
    category: EquipmentCategory
    model: Type[ServiceRecordColumns]
    prefix: str
    details_schema: Type[EquipmentDetails]
    label: str

    @property
    def table_name(self) -> str:
        return self.model.__tablename__


CATEGORY_REGISTRY: Dict[EquipmentCategory, CategorySpec] = {
    EquipmentCategory.SERVICE_RECORD: CategorySpec(
        category=EquipmentCategory.SERVICE_RECORD,
        model=ServiceRecord,
        prefix="/api/service-records",
        details_schema=NoDetails,
        label="Service Records",
    ),
    EquipmentCategory.SPOT_WELDER: CategorySpec(
        category=EquipmentCategory.SPOT_WELDER,
        model=SpotWelderRecord,
        prefix="/api/spot-welders",
        details_schema=SpotWelderDetails,
        label="Spot Welders",
    ),
    EquipmentCategory.LIFT_SERVICE: CategorySpec(
        category=EquipmentCategory.LIFT_SERVICE,
        model=LiftServiceRecord,
        prefix="/api/lift-services",
        details_schema=LiftServiceDetails,
        label="Lift Services",
    ),
    EquipmentCategory.COMPRESSOR: CategorySpec(
        category=EquipmentCategory.COMPRESSOR,
        model=CompressorRecord,
        prefix="/api/compressors",
        details_schema=CompressorDetails,
        label="Compressors",
    ),
}


def get_category(category) -> CategorySpec:
    """Look up a category by enum member or its string value"""
    try:
        return CATEGORY_REGISTRY[EquipmentCategory(category)]
    except ValueError:
        raise KeyError(f"Unknown equipment category: {category}")
