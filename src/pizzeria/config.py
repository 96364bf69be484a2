from __future__ import annotations

import logging
import os
from decimal import Decimal
from pathlib import Path
from typing import Literal, Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

ENV_PREFIX = "PIZZERIA_"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    currency: str = Field("EUR", min_length=3, max_length=3)
    bundle_size: int = Field(3, ge=1)
    relief_topping: str = Field("pineapple", min_length=1)
    relief_rate: Decimal = Field(Decimal("0.10"), ge=0, le=1)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    customer_id: str | None = None  # identity the CLI acts as

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Read ``PIZZERIA_*`` variables; unset ones keep their defaults."""
        env = os.environ if environ is None else environ
        values = {
            name: env[ENV_PREFIX + name.upper()]
            for name in cls.model_fields
            if ENV_PREFIX + name.upper() in env
        }
        if "log_level" in values:
            values["log_level"] = values["log_level"].upper()
        return cls.model_validate(values)


def load_environment(env_path: Path | str = ".env") -> bool:
    """Load ``env_path`` into the process environment if it exists.

    Variables already set in the environment win over the file.
    """
    path = Path(env_path)
    if not path.exists():
        logger.debug("no %s file, using process environment", path)
        return False
    load_dotenv(path)
    logger.debug("loaded environment from %s", path)
    return True
