"""Pydantic models describing the upload configuration."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_API_URL = "https://app-staging.plant-for-the-planet.org/treemapper/interventions"
REDACTED = "***"

REQUIRED_FIELDS = ("api_url", "bearer_token", "tenant_key", "plant_project")


class UploadConfig(BaseModel):
    """Endpoint and credentials for one upload run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_url: str = DEFAULT_API_URL
    bearer_token: str = ""
    tenant_key: str = ""
    plant_project: str = ""
    timeout: float = Field(default=30.0, gt=0)
    request_delay: float = Field(default=1.0, ge=0)

    @field_validator("api_url", "bearer_token", "tenant_key", "plant_project")
    @classmethod
    def strip_value(cls, value: str) -> str:
        return value.strip()

    def missing_fields(self) -> List[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def redacted(self) -> Dict[str, object]:
        """Return the configuration as a dict safe to persist."""

        data = self.model_dump()
        if data["bearer_token"]:
            data["bearer_token"] = REDACTED
        return data
