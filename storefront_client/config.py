"""Configuration loaded from the environment."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_API_URL = "https://api.elven-sre.store"
DEFAULT_TRACE_VIEWER_URL = "http://localhost:16686"
DEFAULT_TIMEOUT = 10.0


class Settings(BaseModel):
    """Storefront client settings."""

    api_url: str = Field(DEFAULT_API_URL, description="Backend base URL")
    trace_viewer_url: str = Field(DEFAULT_TRACE_VIEWER_URL, description="External trace viewer URL")
    data_dir: str = Field(
        default_factory=lambda: str(Path.home() / ".storefront"),
        description="Directory holding the persisted cart",
    )
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="HTTP timeout in seconds")

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Environment variable mapping:
        - STOREFRONT_API_URL → api_url
        - STOREFRONT_TRACE_VIEWER_URL → trace_viewer_url
        - STOREFRONT_DATA_DIR → data_dir
        - STOREFRONT_TIMEOUT → timeout

        Unset or empty variables fall back to the defaults.
        """
        if environ is None:
            environ = dict(os.environ)

        values = {}
        for field, var in (
            ("api_url", "STOREFRONT_API_URL"),
            ("trace_viewer_url", "STOREFRONT_TRACE_VIEWER_URL"),
            ("data_dir", "STOREFRONT_DATA_DIR"),
            ("timeout", "STOREFRONT_TIMEOUT"),
        ):
            value = environ.get(var)
            if value:
                values[field] = value

        return cls(**values)
