"""Typed contracts for engine inputs."""

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ItemParamsIn(BaseModel):
    """Calibrated parameters for one item."""

    model_config = ConfigDict(frozen=True)

    discrimination: float
    difficulty: list[float] = Field(min_length=1)
    guessing: float = Field(default=0.0, ge=0.0, lt=1.0)
    name: str | None = None

    @field_validator("discrimination")
    @classmethod
    def discrimination_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError(f"discrimination must be finite, got {v}")
        return v

    @field_validator("difficulty")
    @classmethod
    def difficulty_finite(cls, v: list[float]) -> list[float]:
        for d in v:
            if not math.isfinite(d):
                raise ValueError(f"difficulty values must be finite, got {v}")
        return v
