"""Navigable HTML report.

One ``index.html`` per directory node of the summary tree and one
``<file>.html`` detail page per file node. When the run has a diff map, a
second tree is built from the incremental records (using the primary tree's
prefix so node names match) and every summary row gets an "incremental"
companion row.
"""

from __future__ import annotations

import html
import os
import time
from datetime import datetime
from pathlib import Path

from incrcov.annotate.annotator import annotate_file, source_for
from incrcov.core.logging import get_logger
from incrcov.coverage.collector import Collector
from incrcov.coverage.models import DIMENSIONS, CoverageSummary, FileCoverage, Metrics
from incrcov.coverage.summary import blank_summary, summarize_file_coverage
from incrcov.coverage.tree import TreeNode, TreeSummarizer
from incrcov.incremental.filter import filter_file_coverage
from incrcov.reports.base import ReportContext, ReportOptions
from incrcov.reports.writer import FileWriter
from incrcov.store import Store, create_store
from incrcov.templates import HtmlAssets, load_html_assets

log = get_logger("reports.html")

_SUMMARY_HEADER = "\n".join(
    [
        '<div class="pad1">',
        '<table class="coverage-summary">',
        "<thead>",
        "<tr>",
        '   <th data-col="file" data-fmt="html" data-html="true" class="file">File</th>',
        '   <th data-col="pic" data-type="number" data-fmt="html" data-html="true" class="pic"></th>',
        '   <th data-col="lines" data-type="number" data-fmt="pct" class="pct">Lines</th>',
        '   <th data-col="lines_raw" data-type="number" data-fmt="html" class="abs"></th>',
        '   <th data-col="functions" data-type="number" data-fmt="pct" class="pct">Functions</th>',
        '   <th data-col="functions_raw" data-type="number" data-fmt="html" class="abs"></th>',
        '   <th data-col="statements" data-type="number" data-fmt="pct" class="pct">Statements</th>',
        '   <th data-col="statements_raw" data-type="number" data-fmt="html" class="abs"></th>',
        '   <th data-col="branches" data-type="number" data-fmt="pct" class="pct">Branches</th>',
        '   <th data-col="branches_raw" data-type="number" data-fmt="html" class="abs"></th>',
        "</tr>",
        "</thead>",
        "<tbody>",
    ]
)
_SUMMARY_FOOTER = "\n".join(["</tbody>", "</table>", "</div>"])

# Column order of the summary table (statements drive the file and chart cells)
_TABLE_DIMENSIONS = ("lines", "functions", "statements", "branches")


def clean_path(name: str) -> str:
    """Use forward slashes in links and labels."""
    return name.replace(os.sep, "/") if os.sep != "/" else name


def report_class(metrics: Metrics, watermark: tuple[float, float]) -> str:
    low, high = watermark
    if metrics.pct >= high:
        return "high"
    if metrics.pct >= low:
        return "medium"
    return "low"


def show_picture(pct: float) -> str:
    cls = " cover-full" if pct == 100 else ""
    filled = int(pct)
    return (
        f'<div class="cover-fill{cls}" style="width: {filled}%;"></div>'
        f'<div class="cover-empty" style="width:{100 - filled}%;"></div>'
    )


def show_ignores(metrics: CoverageSummary) -> str:
    parts = []
    for count, singular, plural in (
        (metrics.statements.skipped, "statement", "statements"),
        (metrics.functions.skipped, "function", "functions"),
        (metrics.branches.skipped, "branch", "branches"),
    ):
        if count > 0:
            parts.append(f"1 {singular}" if count == 1 else f"{count} {plural}")
    if not parts:
        return '<span class="ignore-none">none</span>'
    return ", ".join(parts)


def show_line_execution_counts(line_hits: dict[int, int], max_lines: int) -> str:
    cells = []
    for line in range(1, max_lines + 1):
        value = "&nbsp;"
        covered = "neutral"
        if line in line_hits:
            if line_hits[line] > 0:
                covered = "yes"
                value = f"{line_hits[line]}×"
            else:
                covered = "no"
        cells.append(f'<span class="cline-any cline-{covered}">{value}</span>')
    return "\n".join(cells)


class LinkMapper:
    """Relative hrefs between pages of the tree."""

    def from_parent(self, node: TreeNode) -> str:
        relative = clean_path(node.relative_name)
        return relative + "index.html" if node.kind == "dir" else relative + ".html"

    def ancestor_href(self, node: TreeNode, num: int) -> str:
        href = ""
        current: TreeNode | None = node
        for _ in range(num):
            if current is None:
                break
            separated = [part for part in clean_path(current.relative_name).split("/") if part != "."]
            href += "../" * (len(separated) - 1)
            current = current.parent
        return href

    def ancestor(self, node: TreeNode, num: int) -> str:
        return self.ancestor_href(node, num) + "index.html"


class HtmlReport:
    """Writes the HTML report tree into ``options.dir``."""

    def __init__(self, options: ReportOptions, *, store: Store | None = None):
        self.options = options
        self.store = store or create_store(str(options.setting("source_store", "fslookup")))
        self.link_mapper = LinkMapper()
        self.assets: HtmlAssets = options.assets or load_html_assets()
        self.timestamp = int(time.time() * 1000)
        self.datetime = datetime.now().strftime("%Y-%m-%dT%H:%M:%S")

    @property
    def report_type(self) -> str:
        return "html"

    def synopsis(self) -> str:
        return "Navigable HTML coverage report for every file and directory"

    # =========================================================================
    # Page fragments
    # =========================================================================

    def _path_html(self, node: TreeNode) -> str:
        ancestors = node.ancestors()
        links = [
            f'<a href="{self.link_mapper.ancestor(node, i + 1)}?t={self.timestamp}">'
            f"{html.escape(clean_path(ancestor.relative_name) or 'all files')}</a>"
            for i, ancestor in enumerate(ancestors)
        ]
        if not links:
            return "/"
        links.reverse()
        return " / ".join(links) + " " + html.escape(clean_path(node.display_short_name()))

    def _strip(self, metrics: CoverageSummary, label: str) -> str:
        blocks = []
        for name in ("statements", "branches", "functions", "lines"):
            m = metrics.dimension(name)
            blocks.append(
                "    <div class='fl pad1y space-right2'>\n"
                f'        <span class="strong">{m.pct}% </span>\n'
                f'        <span class="quiet">{label}{name.capitalize()}</span>\n'
                f"        <span class='fraction'>{m.covered}/{m.total}</span>\n"
                "    </div>"
            )
        return "<div class='clearfix'>\n" + "\n".join(blocks) + "\n</div>"

    def _header(self, node: TreeNode, incremental: TreeNode | None) -> str:
        metrics = node.metrics or blank_summary()
        entity = html.escape(node.name or "All files")
        watermark = self.options.watermarks.for_dimension("statements")
        strips = [self._strip(metrics, "")]
        if incremental is not None and incremental.metrics is not None:
            strips.append(self._strip(incremental.metrics, "Incremental "))
        return f"""<!doctype html>
<html lang="en">
<head>
    <title>Code coverage report for {entity}</title>
    <meta charset="utf-8" />
    <style type="text/css">
{self.assets.base_css}
    </style>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
</head>
<body>
<div class='wrapper'>
<div class='pad1'>
    <h1>{self._path_html(node)}</h1>
{chr(10).join(strips)}
    <p class="quiet">Ignored: {show_ignores(metrics)}</p>
</div>
<div class='status-line {report_class(metrics.statements, watermark)}'></div>
"""

    def _footer(self) -> str:
        return f"""<div class='push'></div>
</div>
<div class='footer quiet pad2 space-top1 center small'>
    Code coverage generated by incrcov at {self.datetime}
</div>
<script>
{self.assets.sorter_js}
</script>
</body>
</html>
"""

    def _summary_line(self, node: TreeNode, metrics: CoverageSummary, row_type: str) -> str:
        watermarks = self.options.watermarks
        classes = {name: report_class(metrics.dimension(name), watermarks.for_dimension(name)) for name in DIMENSIONS}
        file_label = html.escape(clean_path(node.display_short_name()))
        href = self.link_mapper.from_parent(node)
        cells = [
            f'<tr class="summary-line {row_type}">',
            f'<td class="file {classes["statements"]}" data-value="{file_label}">'
            f'<a href="{href}?t={self.timestamp}">{file_label}</a></td>',
            f'<td data-value="{metrics.statements.pct}" class="pic {classes["statements"]}">'
            f'<div class="chart">{show_picture(metrics.statements.pct)}</div></td>',
        ]
        for name in _TABLE_DIMENSIONS:
            m = metrics.dimension(name)
            cells.append(f'<td data-value="{m.pct}" class="pct {classes[name]}">{m.pct}%</td>')
            cells.append(f'<td data-value="{m.total}" class="abs {classes[name]}">{m.covered}/{m.total}</td>')
        cells.append("</tr>\n")
        return "\n\t".join(cells)

    # =========================================================================
    # Pages
    # =========================================================================

    def index_page(self, node: TreeNode, incremental_map: dict[str, TreeNode]) -> str:
        parts = [self._header(node, incremental_map.get(node.name)), _SUMMARY_HEADER]
        for child in sorted(node.children, key=lambda c: c.name):
            parts.append(self._summary_line(child, child.metrics or blank_summary(), "origin"))
            inc_child = incremental_map.get(child.name)
            if inc_child is not None and inc_child.metrics is not None:
                parts.append(self._summary_line(child, inc_child.metrics, "incremental"))
        parts.append(_SUMMARY_FOOTER)
        parts.append(self._footer())
        return "\n".join(parts)

    def detail_page(
        self,
        node: TreeNode,
        fc: FileCoverage,
        incremental_map: dict[str, TreeNode],
        context: ReportContext,
    ) -> str:
        source = source_for(fc)
        if source is None:
            source = self.store.get(fc.path)
        lines = annotate_file(fc, source, context.diff_map)
        max_lines = len(lines)
        code = "\n".join(line.text.to_html() or "&nbsp;" for line in lines)
        row = (
            "<tr>"
            f'<td class="line-count quiet">{chr(10).join(str(i) for i in range(1, max_lines + 1))}</td>'
            f'<td class="line-coverage quiet">{show_line_execution_counts(fc.l, max_lines)}</td>'
            f'<td class="text"><pre class="prettyprint lang-js">{code}</pre></td>'
            "</tr>\n"
        )
        return "".join(
            [
                self._header(node, incremental_map.get(node.name)),
                '<pre><table class="coverage">\n',
                row,
                "</table></pre>\n",
                self._footer(),
            ]
        )

    def _write_files(
        self,
        writer: FileWriter,
        node: TreeNode,
        directory: Path,
        collector: Collector,
        incremental_map: dict[str, TreeNode],
        context: ReportContext,
    ) -> None:
        index_file = directory / "index.html"
        log.debug("writing_page", path=str(index_file))
        writer.write_file(index_file, self.index_page(node, incremental_map))

        for child in node.children:
            if child.kind == "dir":
                self._write_files(writer, child, directory / child.relative_name, collector, incremental_map, context)
            else:
                child_file = directory / (child.relative_name + ".html")
                log.debug("writing_page", path=str(child_file))
                fc = collector.file_coverage_for(child.full_path())
                writer.write_file(child_file, self.detail_page(child, fc, incremental_map, context))

    def write_report(self, collector: Collector, context: ReportContext) -> list[Path]:
        summarizer = TreeSummarizer()
        incremental_summarizer = TreeSummarizer()
        diff_map = context.diff_map

        for key in collector.files():
            fc = collector.file_coverage_for(key)
            summarizer.add_summary(key, summarize_file_coverage(fc))
            if diff_map is not None:
                reduced = filter_file_coverage(fc, diff_map.get(key))
                if reduced is not None:
                    incremental_summarizer.add_summary(key, summarize_file_coverage(reduced))

        tree = summarizer.build_tree()
        incremental_map = incremental_summarizer.build_tree(tree.prefix).map if diff_map is not None else {}
        if self.options.verbose:
            log.debug("summary_tree", tree=tree.root.to_dict())

        writer = FileWriter()
        self._write_files(writer, tree.root, self.options.dir, collector, incremental_map, context)
        return writer.written
