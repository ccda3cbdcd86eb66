"""
Report Generator - Render the variant matrix for people and spreadsheets.

Console and XLSX output group rows by the first variation value (row-span),
the way the form's table shows them. CSV is flat, one line per row.
"""

import csv
import io
import logging
import re
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Optional, TextIO

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from .config import MatrixSettings, get_settings
from .models import DimensionShape, MatrixState
from .rows import row_groups
from .size_chart import size_chart_advisories

logger = logging.getLogger(__name__)


def _headers(state: MatrixState, settings: MatrixSettings) -> list[str]:
    headers = [d.name for d in state.dimensions]
    headers += [f"Price ({settings.currency_label})", "Stock", "SKU"]
    return headers


def format_console(state: MatrixState, settings: Optional[MatrixSettings] = None) -> str:
    """
    Format the matrix for console display.

    The first column is only printed on the first row of each group.

    Returns:
        Formatted string for console output
    """
    settings = settings or get_settings()

    if state.shape == DimensionShape.ZERO:
        return "No variations defined.\n"
    if not state.rows:
        empty = [d.name for d in state.dimensions if not d.options]
        return f"No variant rows - add options to: {', '.join(empty)}\n"

    two = state.shape == DimensionShape.TWO
    headers = _headers(state, settings)

    lines = []
    if two:
        lines.append(f"{headers[0]:<16} {headers[1]:<12} {headers[2]:>12} {headers[3]:>8} {headers[4]:<16}")
    else:
        lines.append(f"{headers[0]:<16} {headers[1]:>12} {headers[2]:>8} {headers[3]:<16}")
    lines.append("-" * 70)

    for group in row_groups(state):
        label = group.value1
        if group.value1 in state.media:
            label += " [img]"

        for offset, row in enumerate(group.rows):
            first = label[:16] if offset == 0 else ""
            if two:
                lines.append(f"{first:<16} {row.value2[:12]:<12} {row.price:>12} {row.stock:>8} {row.sku:<16}")
            else:
                lines.append(f"{first:<16} {row.price:>12} {row.stock:>8} {row.sku:<16}")

    lines.append("-" * 70)
    lines.append(f"  Rows:   {len(state.rows)}")
    lines.append(f"  Images: {len(state.media)}")
    if state.size_chart is not None:
        lines.append(f"  Size chart: {state.size_chart.kind}")
    for message in size_chart_advisories(state, settings):
        lines.append(f"  Note: {message}")

    return "\n".join(lines)


def export_csv(
    state: MatrixState,
    output: TextIO | None = None,
    settings: Optional[MatrixSettings] = None,
) -> str:
    """
    Export rows to CSV format.

    Args:
        state: Matrix to export
        output: Optional file handle to write to

    Returns:
        CSV string (also writes to output if provided)
    """
    settings = settings or get_settings()
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    writer.writerow(["identity_key"] + _headers(state, settings) + ["image_url"])

    for row in state.rows:
        writer.writerow(
            [row.identity_key]
            + list(row.values)
            + [str(row.price), row.stock, row.sku, state.media.get(row.value1, "")]
        )

    csv_content = buffer.getvalue()

    if output:
        output.write(csv_content)

    return csv_content


def export_xlsx(
    state: MatrixState,
    output_path: str | Path | None = None,
    settings: Optional[MatrixSettings] = None,
) -> bytes:
    """
    Export the matrix to an XLSX workbook.

    The first-variation column is merged across each group so the sheet
    reads like the form's table.

    Returns:
        XLSX file contents (also saved to output_path if provided)
    """
    settings = settings or get_settings()

    wb = Workbook()
    ws = wb.active
    ws.title = "Variants"

    headers = _headers(state, settings) + ["Image URL"]
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    dim_count = len(state.dimensions)
    price_col = dim_count + 1

    excel_row = 2
    for group in row_groups(state):
        first_row = excel_row
        for row in group.rows:
            for col_idx, value in enumerate(row.values, start=1):
                ws.cell(row=excel_row, column=col_idx, value=value)
            ws.cell(row=excel_row, column=price_col, value=float(row.price)).number_format = "0.00"
            ws.cell(row=excel_row, column=price_col + 1, value=row.stock)
            ws.cell(row=excel_row, column=price_col + 2, value=row.sku)
            excel_row += 1

        ws.cell(row=first_row, column=len(headers), value=state.media.get(group.value1))
        if group.span > 1:
            ws.merge_cells(start_row=first_row, start_column=1, end_row=excel_row - 1, end_column=1)
            ws.merge_cells(
                start_row=first_row, start_column=len(headers),
                end_row=excel_row - 1, end_column=len(headers),
            )
        ws.cell(row=first_row, column=1).alignment = Alignment(vertical="top")

    for col_idx, header in enumerate(headers, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = max(12, len(header) + 4)

    buffer = BytesIO()
    wb.save(buffer)
    content = buffer.getvalue()

    if output_path:
        Path(output_path).write_bytes(content)
        logger.info(f"Exported {len(state.rows)} variant rows to {output_path}")

    return content


def generate_report_filename(product_name: str | None = None, extension: str = "csv") -> str:
    """
    Generate a filename for the report.

    Returns:
        Filename like "variants_Summer_Tee_2026-01-08.csv"
    """
    date_str = datetime.now().strftime("%Y-%m-%d")
    if product_name:
        safe = re.sub(r"[^\w\-]+", "_", product_name.strip()).strip("_")
        if safe:
            return f"variants_{safe}_{date_str}.{extension}"
    return f"variants_{date_str}.{extension}"
