"""Configuration models for archive runs."""

import os
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from archive_maildir.models.archive_result import ArchiveMode, SplitPolicy


def _reject_separators(v: str) -> str:
    for sep in {os.sep, os.altsep} - {None}:
        if sep in v:
            raise ValueError(f"must not contain {sep!r}")
    return v


class ProgramOptions(BaseModel):
    """Fully resolved settings of one archive run. Read-only once built."""

    model_config = ConfigDict(frozen=True)

    input_path: Path
    output_dir: Path = Path(".")
    before: date
    prefix: str = ""
    suffix: str = ""
    split_by: SplitPolicy = SplitPolicy.YEAR
    archive_mode: ArchiveMode = ArchiveMode.DRY_RUN

    @field_validator("prefix", "suffix")
    def validate_affix(cls, v: str) -> str:
        return _reject_separators(v)


class ArchiveDefaults(BaseModel):
    """Defaults used when an option is not given on the command line."""

    output_dir: str = "."
    prefix: str = ""
    suffix: str = ""
    split_by: SplitPolicy = SplitPolicy.YEAR
    mode: ArchiveMode = ArchiveMode.DRY_RUN
    before: Optional[date] = None

    @field_validator("prefix", "suffix")
    def validate_affix(cls, v: str) -> str:
        return _reject_separators(v)


class DisplayTemplates(BaseModel):
    """Display templates for the run summary."""

    summary: str = "Archived {archived}/{considered} emails"
    dry_run_marker: str = "[dry-run]"
    error_marker: str = "[error]"


class StorageConfig(BaseModel):
    """Storage configuration."""

    audit_log_path: Optional[str] = None

    def get_audit_log_path(self) -> Optional[Path]:
        """Get expanded audit log path, or None when auditing is off."""
        if not self.audit_log_path:
            return None
        return Path(self.audit_log_path).expanduser()


class AppConfig(BaseModel):
    """Main application configuration."""

    schema_version: str = "1.0"
    defaults: ArchiveDefaults = Field(default_factory=ArchiveDefaults)
    display: DisplayTemplates = Field(default_factory=DisplayTemplates)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @field_validator("schema_version")
    def validate_schema_version(cls, v: str) -> str:
        if not v:
            raise ValueError("schema_version is required")
        return v
