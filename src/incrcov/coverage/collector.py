"""Coverage collection with additive merge semantics.

Instrumented runs (e.g. separate test processes) each produce a
coverage-final.json object. The collector folds them into one record per
file, summing hit counts:

- s[id] = sum(s[id] across runs)
- f[id] = sum(f[id] across runs)
- b[id][i] = sum(b[id][i] across runs)
- l[line] = sum(l[line] across runs)

Metadata comes from the first record seen for a path.
"""

import json
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any

from incrcov.core.errors import InputError
from incrcov.core.logging import get_logger
from incrcov.coverage.models import CoverageParseError, FileCoverage
from incrcov.coverage.summary import derive_line_hits

log = get_logger("collector")


def merge_file_coverage(files: Iterable[FileCoverage]) -> FileCoverage:
    """Merge multiple FileCoverage records for the same file.

    Args:
        files: Records to merge (must share a path).

    Returns:
        New record with summed hits.
    """
    files_list = list(files)
    if not files_list:
        raise ValueError("Cannot merge empty file coverage list")

    result = files_list[0].copy()
    for fc in files_list[1:]:
        for st_id, hits in fc.s.items():
            result.s[st_id] = result.s.get(st_id, 0) + hits
        for fn_id, hits in fc.f.items():
            result.f[fn_id] = result.f.get(fn_id, 0) + hits
        for br_id, hit_array in fc.b.items():
            existing = result.b.get(br_id)
            if existing is None:
                result.b[br_id] = list(hit_array)
                continue
            for idx, hits in enumerate(hit_array):
                if idx < len(existing):
                    existing[idx] += hits
                else:
                    existing.append(hits)
        for line, hits in fc.l.items():
            result.l[line] = result.l.get(line, 0) + hits

        # Metadata missing from the first record is filled in from later ones
        for st_id, rng in fc.statement_map.items():
            result.statement_map.setdefault(st_id, rng)
        for fn_id, fn in fc.fn_map.items():
            result.fn_map.setdefault(fn_id, fn)
        for br_id, br in fc.branch_map.items():
            result.branch_map.setdefault(br_id, br)
        if result.code is None and fc.code is not None:
            result.code = list(fc.code)

    return result


def parse_coverage_object(data: Any, *, source: str = "<memory>") -> dict[str, FileCoverage]:
    """Parse an Istanbul ``{path: record}`` object.

    Raises:
        CoverageParseError: If the object or any record is malformed.
    """
    if not isinstance(data, Mapping):
        raise CoverageParseError(f"Coverage object from {source} is not a JSON object")
    files: dict[str, FileCoverage] = {}
    for key, file_data in data.items():
        fc = FileCoverage.from_dict(file_data, path=str(key))
        files[fc.path] = fc
    return files


def load_coverage_file(path: Path) -> dict[str, FileCoverage]:
    """Read and parse one coverage-final.json file."""
    if not path.exists():
        raise CoverageParseError(f"Coverage file not found: {path}")
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CoverageParseError(f"Failed to parse coverage JSON {path}: {e}") from e
    return parse_coverage_object(data, source=str(path))


class Collector:
    """Accumulates coverage objects from one or more runs.

    A fresh collector is needed per independent report run.
    """

    def __init__(self) -> None:
        self._files: dict[str, FileCoverage] = {}

    def add(self, coverage: Mapping[str, Any] | Mapping[str, FileCoverage]) -> None:
        """Add a coverage object, merging files already present."""
        records: Iterator[FileCoverage]
        if isinstance(coverage, Mapping) and all(isinstance(v, FileCoverage) for v in coverage.values()):
            records = iter(coverage.values())  # type: ignore[arg-type]
        else:
            records = iter(parse_coverage_object(coverage).values())

        for fc in records:
            existing = self._files.get(fc.path)
            if existing is None:
                self._files[fc.path] = fc.copy()
            else:
                self._files[fc.path] = merge_file_coverage([existing, fc])
                log.debug("coverage_merged", path=fc.path)

    def add_file(self, path: Path) -> None:
        """Load and add one coverage-final.json file.

        Raises:
            InputError: If the file is missing, is not JSON, or holds
                malformed records.
        """
        try:
            coverage = load_coverage_file(path)
        except CoverageParseError as e:
            raise InputError.invalid_coverage(str(path), str(e)) from e
        self.add(coverage)

    def files(self) -> list[str]:
        """Covered file paths in the order they were first added."""
        return list(self._files)

    def file_coverage_for(self, path: str) -> FileCoverage:
        """Return a copy of the record for ``path`` with line hits derived if absent.

        Raises:
            KeyError: If the path was never added.
        """
        fc = self._files[path].copy()
        if not fc.l:
            fc.l = derive_line_hits(fc)
        return fc

    def get_final_coverage(self) -> dict[str, FileCoverage]:
        return {path: self.file_coverage_for(path) for path in self._files}

    def __len__(self) -> int:
        return len(self._files)
