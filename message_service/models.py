from typing import List

from pydantic import BaseModel, ConfigDict


class RefreshResult(BaseModel):
    changed: List[str]

    model_config = ConfigDict(frozen=True)


class HealthStatus(BaseModel):
    status: str = "ok"

    model_config = ConfigDict(frozen=True)
