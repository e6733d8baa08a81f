# src/dealscope/adapters/config.py
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # -----------------------------
    # IRR solver (bisection)
    # -----------------------------
    IRR_MAX_ITERATIONS: int = Field(default=200)
    IRR_TOLERANCE: float = Field(default=1e-7)
    IRR_LOWER_BOUND: float = Field(default=-0.99)
    IRR_UPPER_BOUND: float = Field(default=10.0)

    # Exit cap used for reversion value when the deal does not supply one (percent)
    DEFAULT_EXIT_CAP_RATE: float = Field(default=8.0)

    model_config = SettingsConfigDict(
        env_prefix="DEALSCOPE_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("IRR_MAX_ITERATIONS", mode="before")
    @classmethod
    def _iterations_positive(cls, v: Any) -> Any:
        n = int(v)
        if n <= 0:
            raise ValueError("IRR_MAX_ITERATIONS must be > 0")
        return n

    @field_validator("IRR_TOLERANCE", mode="before")
    @classmethod
    def _tolerance_positive(cls, v: Any) -> Any:
        f = float(v)
        if f <= 0:
            raise ValueError("IRR_TOLERANCE must be > 0")
        return f

    @field_validator("DEFAULT_EXIT_CAP_RATE", mode="before")
    @classmethod
    def _exit_cap_percent(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("DEFAULT_EXIT_CAP_RATE must be numeric or percent-like") from err
        if f <= 0:
            raise ValueError("DEFAULT_EXIT_CAP_RATE must be > 0")
        return f

    @model_validator(mode="after")
    def _bracket_not_empty(self) -> "AppConfig":
        if self.IRR_LOWER_BOUND <= -1.0:
            raise ValueError("IRR_LOWER_BOUND must be > -1.0")
        if self.IRR_UPPER_BOUND <= self.IRR_LOWER_BOUND:
            raise ValueError("IRR_UPPER_BOUND must be greater than IRR_LOWER_BOUND")
        return self


config = AppConfig()
