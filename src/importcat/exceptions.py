"""Custom exceptions for importcat.

Exceptions:
    ImportcatError: Base class for every error raised by importcat itself.
    ConfigurationError: Raised at setup time when category definitions or
        the project config are malformed.  Carries every problem found.
    ImportcatParseError: Raised when a host cannot parse a source file.
        Wraps the original exception from LibCST or the ECMAScript scanner.

Nothing raised during per-file analysis is an ImportcatError: ordinary data
(no imports, unmatched paths, no categories) never fails.
"""

from __future__ import annotations

from collections.abc import Sequence

from importcat.lib import config


class ImportcatError(Exception):
    """Base class for importcat errors."""


class ConfigurationError(ImportcatError, ValueError):
    """Raised when category or project configuration is invalid.

    Raised once, before any file is analyzed, so a bad pattern can never
    silently weaken the check.
    """

    def __init__(self, problems: Sequence[str], source: str = "") -> None:
        """Initialize with the list of problems found.

        Args:
            problems: Human-readable descriptions, one per problem.
            source: Path or name of the offending config, if known.
        """
        self.problems = list(problems)
        self.source = source
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        header = config.get_str("messages.config_error").format(
            source=f" in {self.source}" if self.source else "",
            count=len(self.problems),
        )
        return "\n".join([header] + [f"  - {p}" for p in self.problems])


class ImportcatParseError(ImportcatError):
    """Raised when a source file cannot be parsed by its host.

    A file that cannot be parsed is reported as an error instead of
    passing with zero diagnostics.
    """

    def __init__(self, filepath: str, original_error: Exception) -> None:
        """Initialize with parse error details.

        Args:
            filepath: Path to the file that failed parsing.
            original_error: The underlying parse exception.
        """
        self.filepath = filepath
        self.original_error = original_error
        msg = config.get_str("messages.parse_error")
        super().__init__(msg.format(filepath=filepath, error=original_error))
