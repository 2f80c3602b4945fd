"""Runtime settings read from the environment.

``CHORDGRID_API_ENDPOINT``
    Song API that hands out presigned URLs.
``CHORDGRID_STORE``
    Store location, either a directory or an API URL. Falls back to the API
    endpoint when one is set, otherwise the current directory.
``CHORDGRID_MEASURES_PER_ROW``
    Grid measures per row when writing charts (default 4).
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from .layout import MEASURES_PER_ROW

logger = logging.getLogger(__name__)

ENV_API_ENDPOINT = "CHORDGRID_API_ENDPOINT"
ENV_STORE = "CHORDGRID_STORE"
ENV_MEASURES_PER_ROW = "CHORDGRID_MEASURES_PER_ROW"


@dataclass
class Settings:
    api_endpoint: str = ""
    store: str = "."
    measures_per_row: int = MEASURES_PER_ROW

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        api_endpoint = env.get(ENV_API_ENDPOINT, "").strip()
        return cls(
            api_endpoint=api_endpoint,
            store=env.get(ENV_STORE, "").strip() or api_endpoint or ".",
            measures_per_row=_positive_int(env.get(ENV_MEASURES_PER_ROW), MEASURES_PER_ROW),
        )


def _positive_int(value: str | None, default: int) -> int:
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning("ignoring invalid %s=%r", ENV_MEASURES_PER_ROW, value)
        return default
    if parsed < 1:
        logger.warning("ignoring non-positive %s=%r", ENV_MEASURES_PER_ROW, value)
        return default
    return parsed
