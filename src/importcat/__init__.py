"""importcat: import categorization and label-comment enforcement.

Stable public API (semver-protected):
    analyze: Check a host's import records against compiled options.
    lint_source: Parse a source string and analyze its imports.
    fix_source: Apply label fixes until the file converges.
    scan_file: Scan one file against a project configuration.
    compile_options: Compile raw category options, failing fast.
    ScanResult: Dataclass returned by scan_file.
    AnalysisResult: Immutable diagnostics collection returned by analyze.
    Diagnostic: A single finding with its optional fix.
    ConfigurationError: Raised for malformed categories or project config.
    ImportcatParseError: Raised when a source file cannot be parsed.
"""

__version__ = "1.0.0"

from importcat.engine import ScanResult, analyze, fix_source, lint_source, scan_file
from importcat.exceptions import ConfigurationError, ImportcatError, ImportcatParseError
from importcat.lib.categories import RuleOptions, compile_options
from importcat.lib.diagnostics import AnalysisResult
from importcat.lib.models import Diagnostic

__all__ = [
    "__version__",
    "analyze",
    "lint_source",
    "fix_source",
    "scan_file",
    "compile_options",
    "RuleOptions",
    "ScanResult",
    "AnalysisResult",
    "Diagnostic",
    "ConfigurationError",
    "ImportcatError",
    "ImportcatParseError",
]
