"""Static assets embedded into the HTML report."""

from dataclasses import dataclass
from pathlib import Path

_ASSETS_DIR = Path(__file__).parent / "assets"


@dataclass(frozen=True, slots=True)
class HtmlAssets:
    """Stylesheet and table-sorter script inlined into every page."""

    base_css: str
    sorter_js: str


def load_html_assets(assets_dir: Path | None = None) -> HtmlAssets:
    """Read the report assets once; pass the result to the HTML report."""
    root = assets_dir or _ASSETS_DIR
    return HtmlAssets(
        base_css=(root / "base.css").read_text(encoding="utf-8"),
        sorter_js=(root / "sorter.js").read_text(encoding="utf-8"),
    )


__all__ = ["HtmlAssets", "load_html_assets"]
