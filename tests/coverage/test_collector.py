"""Tests for coverage collection and additive merge."""

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from incrcov.coverage.collector import Collector, load_coverage_file, merge_file_coverage
from incrcov.coverage.models import CoverageParseError, FileCoverage


class TestCollector:
    def test_add_keeps_insertion_order(self, calc_coverage: dict[str, Any], calc_path: str) -> None:
        other = copy.deepcopy(calc_coverage[calc_path])
        other["path"] = "/proj/src/other.js"

        collector = Collector()
        collector.add({"/proj/src/other.js": other})
        collector.add(calc_coverage)

        assert collector.files() == ["/proj/src/other.js", calc_path]
        assert len(collector) == 2

    def test_repeated_paths_are_summed(self, calc_coverage: dict[str, Any], calc_path: str) -> None:
        """
        Given two runs of the same file
        When both are added
        Then statement, function and branch hits are summed
        """
        second = copy.deepcopy(calc_coverage)
        second[calc_path]["s"] = {"0": 2, "1": 0, "2": 3, "3": 1}
        second[calc_path]["b"] = {"0": [0, 4]}

        collector = Collector()
        collector.add(calc_coverage)
        collector.add(second)

        fc = collector.file_coverage_for(calc_path)
        assert fc.s == {"0": 3, "1": 1, "2": 3, "3": 2}
        assert fc.f == {"0": 2}
        assert fc.b == {"0": [1, 4]}

    def test_file_coverage_for_derives_lines(self, calc_coverage: dict[str, Any], calc_path: str) -> None:
        collector = Collector()
        collector.add(calc_coverage)

        fc = collector.file_coverage_for(calc_path)

        assert fc.l == {2: 1, 3: 1, 5: 0, 7: 1}

    def test_file_coverage_for_returns_copy(self, calc_coverage: dict[str, Any], calc_path: str) -> None:
        collector = Collector()
        collector.add(calc_coverage)

        collector.file_coverage_for(calc_path).s["0"] = 100

        assert collector.file_coverage_for(calc_path).s["0"] == 1

    def test_accepts_parsed_records(self, calc_coverage: dict[str, Any], calc_path: str) -> None:
        fc = FileCoverage.from_dict(calc_coverage[calc_path])
        collector = Collector()
        collector.add({calc_path: fc})
        assert collector.files() == [calc_path]

    def test_unknown_path_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            Collector().file_coverage_for("/nope.js")

    def test_invalid_object_raises(self) -> None:
        with pytest.raises(CoverageParseError):
            Collector().add({"/a.js": "not a record"})

    def test_get_final_coverage(self, calc_coverage: dict[str, Any], calc_path: str) -> None:
        collector = Collector()
        collector.add(calc_coverage)
        final = collector.get_final_coverage()
        assert list(final) == [calc_path]
        assert final[calc_path].s["2"] == 0


class TestMergeFileCoverage:
    def test_empty_list_raises(self) -> None:
        with pytest.raises(ValueError):
            merge_file_coverage([])

    def test_line_hits_summed(self) -> None:
        a = FileCoverage(path="/a.js", l={1: 1, 2: 0})
        b = FileCoverage(path="/a.js", l={2: 3, 3: 1})
        assert merge_file_coverage([a, b]).l == {1: 1, 2: 3, 3: 1}

    def test_inputs_not_mutated(self) -> None:
        a = FileCoverage(path="/a.js", s={"0": 1})
        b = FileCoverage(path="/a.js", s={"0": 1})
        merge_file_coverage([a, b])
        assert a.s == {"0": 1}


class TestLoadCoverageFile:
    def test_loads_json(self, tmp_path: Path, calc_coverage: dict[str, Any], calc_path: str) -> None:
        path = tmp_path / "coverage-final.json"
        path.write_text(json.dumps(calc_coverage))

        files = load_coverage_file(path)

        assert list(files) == [calc_path]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CoverageParseError, match="not found"):
            load_coverage_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(CoverageParseError):
            load_coverage_file(path)

    def test_top_level_must_be_object(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(CoverageParseError):
            load_coverage_file(path)
