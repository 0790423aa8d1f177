"""logger: JSONL run log of importcat scans.

When a project enables ``logging`` in ``.importcat.yaml``, every scanned file
appends one JSON line to ``importcat_scan.jsonl`` in the configured
directory: the file, its language, the outcome, diagnostic counts per kind,
how many fixes were applied, a truncated SHA-256 of the scanned source and
the scan time.  File names and formatting constants come from
``config/defaults.yaml``.
"""

from __future__ import annotations

import datetime
import hashlib
import json
import os
from typing import Any

from importcat.lib import config


def log_scan(
    log_dir: str,
    filepath: str,
    language: str,
    status: str,
    counts: dict[str, int],
    fixes_applied: int,
    source: str,
    scan_ms: int,
) -> None:
    """Append a JSONL entry for one scanned file.

    Args:
        log_dir: Directory holding the log file; nothing is written if empty.
        filepath: Path to the scanned file.
        language: Host language used for the file.
        status: Outcome (``passed``, ``failed``, ``fixed`` or ``skipped``).
        counts: Remaining diagnostics per kind.
        fixes_applied: Number of fix edits applied.
        source: The source that was scanned (before fixing).
        scan_ms: Scan duration in milliseconds.
    """
    if not log_dir:
        return
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, config.get_str("filenames.scan_log"))

    utc_src = config.get_str("formatting.utc_offset_source")
    utc_rep = config.get_str("formatting.utc_offset_replacement")
    hash_prefix = config.get_str("formatting.hash_prefix")
    hash_trunc = config.get_int("defaults.hash_truncation_length")
    separators = tuple(config.get_list("formatting.json_separators"))

    entry: dict[str, Any] = {
        "timestamp": (
            datetime.datetime.now(datetime.timezone.utc)
            .isoformat()
            .replace(utc_src, utc_rep)
        ),
        "event": "scan",
        "file": filepath,
        "language": language,
        "status": status,
        "diagnostics": counts,
        "fixes_applied": fixes_applied,
        "code_length_lines": len(source.splitlines()),
        "code_hash": hash_prefix + hashlib.sha256(source.encode()).hexdigest()[:hash_trunc],
        "scan_ms": scan_ms,
    }

    with open(log_path, "a", encoding="utf-8") as fh:
        fh.write(json.dumps(entry, separators=separators) + "\n")
