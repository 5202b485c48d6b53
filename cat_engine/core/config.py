"""Engine settings and configuration."""

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cat_engine.config import (
    INTEGRATION_SUBINTERVALS,
    THETA_LOWER_BOUND,
    THETA_UPPER_BOUND,
    Z_CRITICAL_VALUE,
)


class Settings(BaseSettings):
    """Engine settings loaded from environment variables (prefix CAT_)."""

    model_config = SettingsConfigDict(
        env_prefix="CAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Estimation
    ESTIMATION_METHOD: Literal["EAP", "MAP", "MLE"] = Field(default="EAP")

    # Selection
    SELECTION_CRITERION: str = Field(default="MFI")
    RANDOM_SEED: int | None = Field(default=None)

    # Integration
    THETA_LOWER_BOUND: float = Field(default=THETA_LOWER_BOUND.value)
    THETA_UPPER_BOUND: float = Field(default=THETA_UPPER_BOUND.value)
    Z_CRITICAL_VALUES: list[float] = Field(default_factory=lambda: [Z_CRITICAL_VALUE.value])
    INTEGRATION_SUBINTERVALS: int = Field(default=INTEGRATION_SUBINTERVALS.value, ge=1)

    @model_validator(mode="after")
    def validate_bounds(self) -> "Settings":
        """Theta bounds must form a non-empty interval."""
        if self.THETA_LOWER_BOUND >= self.THETA_UPPER_BOUND:
            raise ValueError(
                f"THETA_LOWER_BOUND ({self.THETA_LOWER_BOUND}) must be < "
                f"THETA_UPPER_BOUND ({self.THETA_UPPER_BOUND})"
            )
        if not self.Z_CRITICAL_VALUES:
            raise ValueError("Z_CRITICAL_VALUES must contain at least one value")
        return self


settings = Settings()
