"""
Category-specific detail schemas.

These validate the ``details`` JSON column of each service record table.
Unknown keys are rejected so that typos surface as 400s instead of being
silently stored.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class EquipmentDetails(BaseModel):
    """Base class for category details"""
    model_config = ConfigDict(extra="forbid")


class NoDetails(EquipmentDetails):
    """Generic service records carry everything in the equipment slots"""


class SpotWelderDetails(EquipmentDetails):
    model: Optional[str] = Field(None, max_length=255)
    serial_number: Optional[str] = Field(None, max_length=100)
    equipment_type: Optional[str] = Field(None, max_length=100)
    voltage_max: Optional[float] = None
    voltage_min: Optional[float] = None
    air_pressure: Optional[float] = None
    tip_pressure: Optional[float] = None
    length: Optional[float] = None
    diameter: Optional[float] = None

    @field_validator(
        'voltage_max', 'voltage_min', 'air_pressure', 'tip_pressure', 'length', 'diameter',
        mode='before'
    )
    @classmethod
    def blank_to_none(cls, v):
        # Form inputs send "" for untouched numeric fields
        if isinstance(v, str) and not v.strip():
            return None
        return v


class LiftServiceDetails(EquipmentDetails):
    product_category: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=255)
    serial_number: Optional[str] = Field(None, max_length=100)
    swl: Optional[str] = Field(None, max_length=50, description="Safe working load")
    safe_working_test: Optional[bool] = None
    emergency_stops_test: Optional[bool] = None
    limit_switches_test: Optional[bool] = None
    safety_devices_test: Optional[bool] = None
    hydraulic_system_test: Optional[bool] = None


class CompressorDetails(EquipmentDetails):
    manufacturer: Optional[str] = Field(None, max_length=255)
    model: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    pressure_test_result: Optional[str] = Field(None, max_length=50)
    safety_valve_test: Optional[str] = Field(None, max_length=50)
    oil_level: Optional[str] = Field(None, max_length=50)
    belt_condition: Optional[str] = Field(None, max_length=50)
    filter_check_result: Optional[str] = Field(None, max_length=50)
