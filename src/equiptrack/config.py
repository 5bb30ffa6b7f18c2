"""
Configuration settings for EquipTrack Service Record API
"""

import json
import os
import sys
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_ENGINEER_ROSTER = (
    "Paul Jones,Danny Jennings,Mark Allen,Tommy Hannon,Connor Hill,"
    "Dominic TJ,Mason Poulton,Zack Collins,Fernando Goulart"
)


class Settings(BaseSettings):
    # Required secrets - no defaults allowed
    jwt_secret_key: str
    database_url: str

    # Configuration
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    environment: str = "development"
    log_level: str = "INFO"

    # Service record lifecycle
    retest_interval_days: int = 364
    due_soon_days: int = 30
    certificate_prefix: str = "BWS-"
    certificate_sequence: str = "service_certificate_seq"

    # Engineer roster (comma-separated, or a JSON list)
    engineer_roster: str = DEFAULT_ENGINEER_ROSTER
    enforce_engineer_roster: bool = False

    @field_validator('jwt_secret_key')
    @classmethod
    def validate_secret_strength(cls, v: str, info) -> str:
        """Enforce minimum 32-character secret keys per OWASP guidelines"""
        if len(v) < 32:
            raise ValueError(
                f"{info.field_name} must be at least 32 characters "
                f"(current: {len(v)}). Generate with: openssl rand -hex 32"
            )
        weak_patterns = ['test', 'secret', 'password', 'changeme']
        v_lower = v.lower()
        for pattern in weak_patterns:
            if v_lower.count(pattern) >= 3:
                raise ValueError(f"{info.field_name} contains weak pattern")
        return v

    @field_validator('retest_interval_days', 'due_soon_days')
    @classmethod
    def validate_positive_days(cls, v: int, info) -> int:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be a positive number of days")
        return v

    @field_validator('certificate_sequence')
    @classmethod
    def validate_sequence_name(cls, v: str) -> str:
        # Interpolated into SQL, so only plain identifiers are allowed
        if not v.replace('_', '').isalnum():
            raise ValueError("certificate_sequence must be a plain SQL identifier")
        return v

    @property
    def engineers(self) -> List[str]:
        """Engineer roster as a list, accepting either a JSON list or a comma-separated string"""
        raw = self.engineer_roster.strip()
        if raw.startswith('['):
            return [str(name).strip() for name in json.loads(raw) if str(name).strip()]
        return [name.strip() for name in raw.split(',') if name.strip()]

    class Config:
        # Do NOT use .env file in production
        env_file = None

    @classmethod
    def load_and_validate(cls):
        """Load settings and fail fast if secrets missing"""
        instance = cls(
            jwt_secret_key=os.getenv("JWT_SECRET_KEY", ""),
            database_url=os.getenv("DATABASE_URL", "")
        )

        if not instance.jwt_secret_key:
            print("ERROR: JWT_SECRET_KEY not configured")
            sys.exit(1)
        if not instance.database_url:
            print("ERROR: DATABASE_URL not configured")
            sys.exit(1)

        return instance


settings = Settings.load_and_validate()
