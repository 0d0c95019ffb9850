"""Archive pipeline."""

from .archive_pipeline import ArchivePipeline, ArchiveSetupError, run_archive

__all__ = ["ArchivePipeline", "ArchiveSetupError", "run_archive"]
