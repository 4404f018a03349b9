"""Spreadsheet context for the analyst prompt.

Reads a fixed list of workbooks from the data directory, flattens every sheet
into a row/column-bounded table and serializes the lot as JSON under a hard
character budget. A missing or unreadable workbook only poisons its own slot.
"""

import asyncio
import json
import logging
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

from openpyxl import load_workbook

from analyst_chat.core.config import settings

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n... [truncated]"


def _cell_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def _read_workbook(path: Path, max_rows: int, max_cols: int) -> dict[str, list[list[Any]]]:
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        sheets: dict[str, list[list[Any]]] = {}
        for worksheet in workbook.worksheets:
            rows: list[list[Any]] = []
            for row in worksheet.iter_rows(max_row=max_rows, max_col=max_cols, values_only=True):
                cells = [_cell_value(v) for v in row]
                while cells and cells[-1] is None:
                    cells.pop()
                rows.append(cells)
            sheets[worksheet.title] = rows
        return sheets
    finally:
        workbook.close()


def truncate_context(text: str, max_chars: int) -> str:
    """Cut ``text`` so the result, marker included, fits in ``max_chars``."""
    if len(text) <= max_chars:
        return text
    keep = max(max_chars - len(TRUNCATION_MARKER), 0)
    return (text[:keep] + TRUNCATION_MARKER)[:max_chars]


class ContextLoader:
    def __init__(
        self,
        data_dir: Path,
        files: list[str],
        max_rows: int = 50,
        max_cols: int = 10,
        max_chars: int = 50_000,
    ):
        self.data_dir = data_dir
        self.files = files
        self.max_rows = max_rows
        self.max_cols = max_cols
        self.max_chars = max_chars

    def read(self) -> str:
        try:
            logger.info(f"Reading spreadsheet context from {self.data_dir}")
            all_data: dict[str, Any] = {}
            for name in self.files:
                path = self.data_dir / name
                if not path.is_file():
                    logger.error(f"Spreadsheet does not exist: {path}")
                    all_data[name] = {"error": f"File not found: {name}"}
                    continue
                try:
                    sheets = _read_workbook(path, self.max_rows, self.max_cols)
                except Exception as e:
                    logger.error(f"Error reading {name}: {e}")
                    all_data[name] = {"error": f"Failed to read {name}: {e}"}
                    continue
                all_data[name] = sheets
                logger.info(f"Read {name} with {len(sheets)} sheets")

            text = json.dumps(all_data, indent=2, ensure_ascii=False, default=str)
        except Exception as e:
            logger.exception("Error reading spreadsheets")
            text = json.dumps({"error": "Failed to read spreadsheets", "details": str(e)})
        return truncate_context(text, self.max_chars)

    async def load(self) -> str:
        """Read the bounded context without blocking the event loop."""
        return await asyncio.to_thread(self.read)

    def inspect(self) -> dict[str, Any]:
        """Per-file diagnostics: sheet names or the read error."""
        results: dict[str, Any] = {}
        for name in self.files:
            path = self.data_dir / name
            if not path.is_file():
                results[name] = {"success": False, "error": "File not found"}
                continue
            try:
                workbook = load_workbook(path, read_only=True)
                sheet_names = list(workbook.sheetnames)
                workbook.close()
            except Exception as e:
                results[name] = {"success": False, "error": str(e)}
                continue
            results[name] = {"success": True, "sheets": sheet_names, "sheetCount": len(sheet_names)}
        return results


def get_context_loader() -> ContextLoader:
    return ContextLoader(
        data_dir=settings.data_dir,
        files=settings.context_files,
        max_rows=settings.context_max_rows,
        max_cols=settings.context_max_cols,
        max_chars=settings.context_max_chars,
    )
