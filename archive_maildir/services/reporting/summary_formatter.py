"""Summary formatting for the command line."""

from typing import Dict, List

from archive_maildir.models.archive_result import ArchiveMode, ArchiveSummary


class SummaryFormatter:
    """Format the outcome of an archive run for display."""

    def __init__(self, config: Dict):
        """
        Initialize formatter with configuration.

        Args:
            config: Configuration dict with display templates
        """
        display = config.get("display", {})
        self.summary_template = display.get("summary", "Archived {archived}/{considered} emails")
        self.dry_run_marker = display.get("dry_run_marker", "[dry-run]")
        self.error_marker = display.get("error_marker", "[error]")

    def format_summary(self, summary: ArchiveSummary) -> str:
        """
        Format the ``archived/considered`` summary line.

        Returns:
            Summary line, prefixed with the dry-run marker in dry-run mode
        """
        line = self.summary_template.format(
            archived=summary.archived,
            considered=summary.considered,
            errors=len(summary.errors),
            skipped=summary.skipped_recent,
        )
        if summary.mode is ArchiveMode.DRY_RUN:
            line = f"{self.dry_run_marker} {line}"
        return line

    def format_destinations(self, summary: ArchiveSummary) -> List[str]:
        """One ``<count>  <destination>`` line per destination, sorted by path."""
        return [
            f"{count:>6}  {destination}"
            for destination, count in sorted(summary.destinations.items())
        ]

    def format_errors(self, summary: ArchiveSummary) -> List[str]:
        """One line per recorded error."""
        return [f"{self.error_marker} {error}" for error in summary.errors]
