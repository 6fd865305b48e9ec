"""
Runtime configuration for the privacy metrics service.

Uses ``pydantic_settings.BaseSettings`` for automatic environment
variable binding, type coercion, and validation.  The server entry
point loads a ``.env`` file first, so values set there are picked
up here as well.
"""

from __future__ import annotations

import functools
import pathlib

import pydantic
import pydantic_settings


class Settings(pydantic_settings.BaseSettings):
    """Service settings.

    Attributes:
        environment: ``production`` or ``development``.
        write_to_file: Write each session's log lines to
            ``.logs/<session>.log`` as well as stderr.
        max_batch_files: Largest number of artifacts accepted
            in a single upload session.
        max_file_size: Largest accepted artifact, in bytes, as
            reported by the upload layer (100 MB by default).
        max_concurrency: Upper bound on artifacts extracted and
            assessed at the same time within one batch.
        tables_dir: Optional directory holding replacement
            scoring tables.  Defaults to the bundled JSON data.
        host: Interface the HTTP server binds to.
        port: Port the HTTP server listens on.
    """

    environment: str = pydantic.Field(default="development", validation_alias="ENVIRONMENT")
    write_to_file: bool = pydantic.Field(default=False, validation_alias="WRITE_TO_FILE")
    max_batch_files: int = pydantic.Field(default=10, ge=1, validation_alias="OPAL_MAX_BATCH_FILES")
    max_file_size: int = pydantic.Field(default=100 * 1024 * 1024, ge=1, validation_alias="OPAL_MAX_FILE_SIZE")
    max_concurrency: int = pydantic.Field(default=4, ge=1, validation_alias="OPAL_MAX_CONCURRENCY")
    tables_dir: pathlib.Path | None = pydantic.Field(default=None, validation_alias="OPAL_TABLES_DIR")
    host: str = pydantic.Field(default="0.0.0.0", validation_alias="UVICORN_HOST")
    port: int = pydantic.Field(default=3001, validation_alias="UVICORN_PORT")

    @property
    def is_production(self) -> bool:
        """True when running with ``ENVIRONMENT=production``."""
        return self.environment == "production"


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings (read once, then cached)."""
    return Settings()
