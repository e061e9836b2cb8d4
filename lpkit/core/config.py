"""Runtime settings for the solver layer."""

from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_ENV_PREFIX = "LPKIT_"


class Settings(BaseModel):
    """Solver and logging configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    backend: str = Field(default="GLOP", min_length=1)
    tolerance: float = Field(default=1e-9, gt=0, lt=1)
    presolve: bool = True
    tight_eps: float = Field(default=1e-7, ge=0)
    log_level: str = "WARNING"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{v}'.")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``LPKIT_*`` environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        data = {}
        for field in ("backend", "tolerance", "presolve", "tight_eps", "log_level"):
            raw = env.get(_ENV_PREFIX + field.upper())
            if raw is not None and raw != "":
                data[field] = raw
        if "presolve" in data:
            data["presolve"] = data["presolve"].lower() in {"1", "true", "yes", "on"}
        return cls.model_validate(data)
