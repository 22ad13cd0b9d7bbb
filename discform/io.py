"""Input/output utilities for reading and writing JSONL files."""

import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any


def read_jsonl(path: Path | str) -> Iterator[dict[str, Any]]:
    """Read a JSONL file and yield each record.

    Args:
        path: Path to the JSONL file.

    Yields:
        Each parsed JSON record.
    """
    with open(path, encoding="utf-8") as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON on line {line_num}: {e}") from e


def write_jsonl(path: Path | str, records: Iterable[dict[str, Any]]) -> int:
    """Write records to a JSONL file, replacing its contents.

    Returns:
        Number of records written.
    """
    return _write(path, records, "w")


def append_jsonl(path: Path | str, records: Iterable[dict[str, Any]]) -> int:
    """Append records to a JSONL file in a single write.

    Returns:
        Number of records appended.
    """
    return _write(path, records, "a")


def _write(path: Path | str, records: Iterable[dict[str, Any]], mode: str) -> int:
    lines = [json.dumps(record, ensure_ascii=False) + "\n" for record in records]
    with open(path, mode, encoding="utf-8") as f:
        f.write("".join(lines))
    return len(lines)
