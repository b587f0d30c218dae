"""Istanbul file coverage data model.

One ``FileCoverage`` per source file, keyed by its absolute path. The
metadata maps (statements, functions, branches) are keyed by the string ids
Istanbul assigns; every id in a map has a hit entry of matching shape in the
corresponding stats mapping.

Serialized form (coverage-final.json)::

    {
      "/abs/path/file.js": {
        "path": "/abs/path/file.js",
        "statementMap": {"0": {"start": {"line": 1, "column": 0}, "end": {...}}},
        "s": {"0": 1},
        "fnMap": {"0": {"name": "foo", "line": 1, "loc": {...}}},
        "f": {"0": 1},
        "branchMap": {"0": {"type": "if", "line": 5, "locations": [{...}, {...}]}},
        "b": {"0": [1, 0]},
        "l": {"1": 1}
      }
    }
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class CoverageParseError(Exception):
    """Error parsing coverage data."""

    pass


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _hit_count(value: Any, what: str, file_path: str) -> int:
    hits = _as_int(value)
    if hits is None:
        raise CoverageParseError(f"{what} in {file_path} is not an integer hit count: {value!r}")
    return hits


def _hit_map(raw: Any, name: str, file_path: str) -> dict[str, int]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise CoverageParseError(f"'{name}' in {file_path} is not an object")
    return {str(k): _hit_count(v, f"'{name}' entry {k!r}", file_path) for k, v in raw.items()}


def _line_hits(raw: Any, file_path: str) -> dict[int, int]:
    lines: dict[int, int] = {}
    for key, hits in _hit_map(raw, "l", file_path).items():
        try:
            line = int(key)
        except ValueError:
            raise CoverageParseError(f"'l' key {key!r} in {file_path} is not a line number") from None
        lines[line] = hits
    return lines


@dataclass(frozen=True, slots=True)
class Position:
    """A line/column point. Either half may be missing in the source data."""

    line: int | None
    column: int | None

    @classmethod
    def from_dict(cls, data: Any) -> Position:
        if not isinstance(data, Mapping):
            return cls(line=None, column=None)
        return cls(line=_as_int(data.get("line")), column=_as_int(data.get("column")))

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, "column": self.column}


@dataclass(frozen=True, slots=True)
class Range:
    """A start/end source span."""

    start: Position
    end: Position
    skip: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> Range | None:
        if not isinstance(data, Mapping):
            return None
        return cls(
            start=Position.from_dict(data.get("start")),
            end=Position.from_dict(data.get("end")),
            skip=bool(data.get("skip", False)),
        )

    @property
    def line_span(self) -> tuple[int | None, int | None]:
        return self.start.line, self.end.line

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"start": self.start.to_dict(), "end": self.end.to_dict()}
        if self.skip:
            data["skip"] = True
        return data


@dataclass(frozen=True, slots=True)
class FunctionMeta:
    """Function declaration metadata (``fnMap`` entry)."""

    name: str
    line: int | None = None
    decl: Range | None = None
    loc: Range | None = None
    skip: bool = False

    @classmethod
    def from_dict(cls, fn_id: str, data: Any) -> FunctionMeta:
        if not isinstance(data, Mapping):
            raise CoverageParseError(f"fnMap entry {fn_id!r} is not an object")
        loc = Range.from_dict(data.get("loc"))
        line = _as_int(data.get("line"))
        if line is None and loc is not None:
            line = loc.start.line
        return cls(
            name=str(data.get("name") or f"(anonymous_{fn_id})"),
            line=line,
            decl=Range.from_dict(data.get("decl")),
            loc=loc,
            skip=bool(data.get("skip", False)),
        )

    @property
    def line_span(self) -> tuple[int | None, int | None]:
        span = self.loc or self.decl
        if span is None:
            return None, None
        return span.line_span

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "line": self.line}
        if self.decl is not None:
            data["decl"] = self.decl.to_dict()
        if self.loc is not None:
            data["loc"] = self.loc.to_dict()
        if self.skip:
            data["skip"] = True
        return data


@dataclass(frozen=True, slots=True)
class BranchMeta:
    """Branch metadata (``branchMap`` entry).

    ``locations`` keeps its original order; entries without usable
    metadata are kept as ``None`` so hit arrays stay aligned.
    """

    type: str
    line: int | None = None
    loc: Range | None = None
    locations: tuple[Range | None, ...] = ()
    skip: bool = False

    @classmethod
    def from_dict(cls, branch_id: str, data: Any) -> BranchMeta:
        if not isinstance(data, Mapping):
            raise CoverageParseError(f"branchMap entry {branch_id!r} is not an object")
        raw_locations = data.get("locations") or []
        if not isinstance(raw_locations, list):
            raise CoverageParseError(f"branchMap entry {branch_id!r} has non-list locations")
        return cls(
            type=str(data.get("type", "")),
            line=_as_int(data.get("line")),
            loc=Range.from_dict(data.get("loc")),
            locations=tuple(Range.from_dict(loc) for loc in raw_locations),
            skip=bool(data.get("skip", False)),
        )

    @property
    def line_span(self) -> tuple[int | None, int | None]:
        """Line span of the whole branch construct.

        Uses ``loc`` when present, otherwise the first location's start to
        the last location's end, otherwise ``line`` for both ends.
        """
        if self.loc is not None:
            return self.loc.line_span
        known = [loc for loc in self.locations if loc is not None]
        if known:
            return known[0].start.line, known[-1].end.line
        return self.line, self.line

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "line": self.line,
            "locations": [loc.to_dict() if loc is not None else {} for loc in self.locations],
        }
        if self.loc is not None:
            data["loc"] = self.loc.to_dict()
        if self.skip:
            data["skip"] = True
        return data


@dataclass(slots=True)
class FileCoverage:
    """Coverage record for a single file.

    Line numbers in ``l`` are 1-based ints; ids in the metadata maps are
    strings as in the serialized form.
    """

    path: str
    statement_map: dict[str, Range] = field(default_factory=dict)
    s: dict[str, int] = field(default_factory=dict)
    fn_map: dict[str, FunctionMeta] = field(default_factory=dict)
    f: dict[str, int] = field(default_factory=dict)
    branch_map: dict[str, BranchMeta] = field(default_factory=dict)
    b: dict[str, list[int]] = field(default_factory=dict)
    l: dict[int, int] = field(default_factory=dict)  # noqa: E741
    code: list[str] | None = None

    @classmethod
    def from_dict(cls, data: Any, *, path: str | None = None) -> FileCoverage:
        """Build a record from its Istanbul JSON form.

        Args:
            data: The per-file object.
            path: Fallback path (the mapping key) when ``data`` has none.

        Raises:
            CoverageParseError: If the record is not an object, a hit count
                is not an integer, or hit counts do not match the metadata.
        """
        if not isinstance(data, Mapping):
            raise CoverageParseError(f"Coverage for {path!r} is not an object")
        file_path = data.get("path") or path
        if not file_path:
            raise CoverageParseError("Coverage record has no path")

        statement_map: dict[str, Range] = {}
        for st_id, st_data in (data.get("statementMap") or {}).items():
            rng = Range.from_dict(st_data)
            if rng is None:
                raise CoverageParseError(f"statementMap entry {st_id!r} is not an object")
            statement_map[str(st_id)] = rng

        fn_map = {
            str(fn_id): FunctionMeta.from_dict(str(fn_id), fn_data)
            for fn_id, fn_data in (data.get("fnMap") or {}).items()
        }
        branch_map = {
            str(br_id): BranchMeta.from_dict(str(br_id), br_data)
            for br_id, br_data in (data.get("branchMap") or {}).items()
        }

        b: dict[str, list[int]] = {}
        for br_id, hits in (data.get("b") or {}).items():
            if not isinstance(hits, list):
                raise CoverageParseError(f"Branch hits {br_id!r} in {file_path} is not a list")
            meta = branch_map.get(str(br_id))
            if meta is not None and meta.locations and len(hits) != len(meta.locations):
                raise CoverageParseError(
                    f"Branch {br_id!r} in {file_path} has {len(hits)} hit counts "
                    f"for {len(meta.locations)} locations"
                )
            b[str(br_id)] = [_hit_count(h, f"Branch {br_id!r} hit count", file_path) for h in hits]

        code = data.get("code")
        return cls(
            path=str(file_path),
            statement_map=statement_map,
            s=_hit_map(data.get("s"), "s", file_path),
            fn_map=fn_map,
            f=_hit_map(data.get("f"), "f", file_path),
            branch_map=branch_map,
            b=b,
            l=_line_hits(data.get("l"), file_path),
            code=list(code) if isinstance(code, list) else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "path": self.path,
            "statementMap": {k: v.to_dict() for k, v in self.statement_map.items()},
            "s": dict(self.s),
            "fnMap": {k: v.to_dict() for k, v in self.fn_map.items()},
            "f": dict(self.f),
            "branchMap": {k: v.to_dict() for k, v in self.branch_map.items()},
            "b": {k: list(v) for k, v in self.b.items()},
            "l": {str(k): v for k, v in self.l.items()},
        }
        if self.code is not None:
            data["code"] = list(self.code)
        return data

    def copy(self) -> FileCoverage:
        """Shallow-copy the record; metadata values are immutable and shared."""
        return FileCoverage(
            path=self.path,
            statement_map=dict(self.statement_map),
            s=dict(self.s),
            fn_map=dict(self.fn_map),
            f=dict(self.f),
            branch_map=dict(self.branch_map),
            b={k: list(v) for k, v in self.b.items()},
            l=dict(self.l),
            code=list(self.code) if self.code is not None else None,
        )


@dataclass(frozen=True, slots=True)
class Metrics:
    """Totals for one coverage dimension.

    ``covered + skipped <= total``; ``pct`` is 100.0 when ``total == 0``.
    """

    total: int = 0
    covered: int = 0
    skipped: int = 0
    pct: float = 100.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "covered": self.covered,
            "skipped": self.skipped,
            "pct": self.pct,
        }


DIMENSIONS = ("lines", "statements", "functions", "branches")


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    """Per-dimension metrics for a file or a group of files."""

    lines: Metrics = field(default_factory=Metrics)
    statements: Metrics = field(default_factory=Metrics)
    functions: Metrics = field(default_factory=Metrics)
    branches: Metrics = field(default_factory=Metrics)

    def dimension(self, name: str) -> Metrics:
        value: Metrics = getattr(self, name)
        return value

    def to_dict(self) -> dict[str, Any]:
        return {name: self.dimension(name).to_dict() for name in DIMENSIONS}
