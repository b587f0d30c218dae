"""File output for reports."""

from pathlib import Path

from incrcov.core.logging import get_logger

log = get_logger("reports.writer")


class FileWriter:
    """Writes UTF-8 text files, creating parent directories as needed.

    Keeps the list of files written so callers can report them.
    """

    def __init__(self) -> None:
        self.written: list[Path] = []

    def write_file(self, path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        self.written.append(path)
        log.debug("report_file_written", path=str(path), size=len(content))
        return path
