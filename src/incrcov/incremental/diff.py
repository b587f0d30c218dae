"""Changed-line ranges ("incremental windows") per source file.

A diff map is ``{absolute_path: [[start_line, end_line], ...]}`` with
inclusive, 1-based line numbers. It is either read from a JSON file or
derived from unified ``git diff`` output.
"""

from __future__ import annotations

import json
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, NamedTuple

from incrcov.core.errors import InputError
from incrcov.core.logging import get_logger

log = get_logger("diff")

_HUNK_HEADER = re.compile(
    r"^@@ -(?P<old_start>\d+)(?:,(?P<old_count>\d+))? "
    r"\+(?P<new_start>\d+)(?:,(?P<new_count>\d+))? @@"
)


class DiffRange(NamedTuple):
    """Inclusive ``[start, end]`` line range."""

    start: int
    end: int

    def contains(self, line: int) -> bool:
        return self.start <= line <= self.end


DiffMap = dict[str, list[DiffRange]]


def _range_from_entry(entry: Any) -> DiffRange | None:
    if not isinstance(entry, (list, tuple)) or len(entry) < 2:
        return None
    start, end = entry[0], entry[1]
    if isinstance(start, bool) or isinstance(end, bool):
        return None
    if not isinstance(start, int) or not isinstance(end, int):
        return None
    return DiffRange(start, end)


def normalize_ranges(entries: Any, *, path: str = "<unknown>") -> list[DiffRange]:
    """Coerce one file's range list, skipping empty or malformed entries."""
    if not isinstance(entries, (list, tuple)):
        log.warning("diff_ranges_not_a_list", path=path)
        return []
    ranges: list[DiffRange] = []
    for entry in entries:
        if isinstance(entry, DiffRange):
            ranges.append(entry)
            continue
        rng = _range_from_entry(entry)
        if rng is None:
            if entry:
                log.warning("diff_range_skipped", path=path, entry=repr(entry))
            continue
        ranges.append(rng)
    return ranges


def normalize_diff_map(raw: Any) -> DiffMap:
    """Validate a raw diff mapping.

    Raises:
        InputError: If ``raw`` is not a mapping of path to range lists.
    """
    if not isinstance(raw, Mapping):
        raise InputError.invalid_diff("<memory>", "expected an object of path -> ranges")
    return {str(path): normalize_ranges(entries, path=str(path)) for path, entries in raw.items()}


def is_incremental_line(diff_map: Mapping[str, Any] | None, path: str, line: int) -> bool:
    """True when ``line`` of ``path`` falls inside one of its ranges."""
    if not diff_map:
        return False
    entries = diff_map.get(path)
    if not entries:
        return False
    for entry in entries:
        rng = entry if isinstance(entry, DiffRange) else _range_from_entry(entry)
        if rng is not None and rng.contains(line):
            return True
    return False


def load_diff_map(path: Path) -> DiffMap:
    """Read a JSON diff map from disk.

    Raises:
        InputError: If the file cannot be read or is not a valid diff map.
    """
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InputError.invalid_diff(str(path), str(e)) from e
    if not isinstance(raw, Mapping):
        raise InputError.invalid_diff(str(path), "expected an object of path -> ranges")
    diff_map = normalize_diff_map(raw)
    log.debug("diff_map_loaded", path=str(path), files=len(diff_map))
    return diff_map


def _target_path(header: str) -> str | None:
    operand = header[4:].split("\t", 1)[0].strip()
    if operand == "/dev/null" or not operand:
        return None
    if operand.startswith("b/"):
        operand = operand[2:]
    return operand


def _append_line(ranges: list[DiffRange], line: int) -> None:
    if ranges and ranges[-1].end == line - 1:
        ranges[-1] = DiffRange(ranges[-1].start, line)
    else:
        ranges.append(DiffRange(line, line))


def _default_count(value: str | None) -> int:
    return int(value) if value is not None else 1


def parse_unified_diff(text: str, base_path: str | Path | None = None) -> DiffMap:
    """Derive a diff map from unified diff text.

    Each run of consecutive added lines in the new file becomes one range.
    Deleted files and pure-deletion hunks contribute nothing. Paths are
    joined onto ``base_path`` when given.

    Raises:
        InputError: On a malformed hunk header.
    """
    diff_map: DiffMap = {}
    current: list[DiffRange] | None = None
    new_line = 0
    old_left = new_left = 0

    for line in text.splitlines():
        if old_left > 0 or new_left > 0:
            prefix = line[:1]
            if prefix == "\\":
                continue
            if prefix == "+":
                if current is not None:
                    _append_line(current, new_line)
                new_line += 1
                new_left -= 1
            elif prefix == "-":
                old_left -= 1
            else:
                new_line += 1
                new_left -= 1
                old_left -= 1
            continue

        if line.startswith("+++ "):
            target = _target_path(line)
            if target is not None and base_path is not None:
                target = os.path.join(os.fspath(base_path), target)
            current = diff_map.setdefault(target, []) if target is not None else None
        elif line.startswith("@@"):
            match = _HUNK_HEADER.match(line)
            if match is None:
                raise InputError.invalid_diff("<diff>", f"malformed hunk header: {line}")
            new_line = int(match.group("new_start"))
            old_left = _default_count(match.group("old_count"))
            new_left = _default_count(match.group("new_count"))

    return {path: ranges for path, ranges in diff_map.items() if ranges}
