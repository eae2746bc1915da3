"""
Cell-level writers: table headers, data cells, KPI cards, column widths.
"""
from __future__ import annotations

from decimal import Decimal

from openpyxl.cell.cell import Cell
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from sales_engine.excel import styles

NUMBER_FORMATS = {
    "currency": '"$"#,##0.00',
    "percent": '0.00"%"',
    "number": "#,##0",
    "decimal": "0.00",
}


def _put(cell: Cell, value, col_type: str) -> None:
    # Workbooks store floats; cents survive the conversion
    cell.value = float(value) if isinstance(value, Decimal) else value
    if col_type in NUMBER_FORMATS:
        cell.number_format = NUMBER_FORMATS[col_type]


def format_header_row(ws: Worksheet, row_num: int, num_cols: int) -> None:
    for col in range(1, num_cols + 1):
        cell = ws.cell(row=row_num, column=col)
        cell.font, cell.fill = styles.HEADER_FONT, styles.HEADER_FILL
        cell.border, cell.alignment = styles.HEADER_BORDER, styles.CENTER


def format_data_cell(
    ws: Worksheet,
    row_num: int,
    col_num: int,
    value,
    col_type: str = "text",
    is_total: bool = False,
    highlight: str | None = None,
) -> None:
    """Write one table cell. Fill precedence: named highlight, totals row, stripe."""
    cell = ws.cell(row=row_num, column=col_num)
    _put(cell, value, col_type)
    cell.alignment = styles.RIGHT if col_type in NUMBER_FORMATS else styles.LEFT
    if is_total:
        cell.font, cell.border = styles.TOTAL_FONT, styles.TOTAL_BORDER
    else:
        cell.font, cell.border = styles.DATA_FONT, styles.DATA_BORDER

    fill = styles.HIGHLIGHT_FILLS.get(highlight) if highlight else None
    if fill is None and is_total:
        fill = styles.TOTAL_FILL
    if fill is None and row_num % 2 == 0:
        fill = styles.STRIPE_FILL
    if fill is not None:
        cell.fill = fill


def auto_column_width(ws: Worksheet, min_width: int = 10, max_width: int = 50) -> None:
    for column in ws.columns:
        longest = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        ws.column_dimensions[get_column_letter(column[0].column)].width = min(max(longest + 2, min_width), max_width)


def add_kpi_card(
    ws: Worksheet,
    row: int,
    col: int,
    value,
    label: str,
    format_type: str = "number",
) -> None:
    """Big value over a small caption. A statistic that could not be computed (``None``) shows as n/a."""
    value_cell = ws.cell(row=row, column=col)
    if value is None:
        value_cell.value = "n/a"
    else:
        _put(value_cell, value, format_type)
    value_cell.font, value_cell.alignment = styles.KPI_VALUE_FONT, styles.CENTER

    label_cell = ws.cell(row=row + 1, column=col, value=label)
    label_cell.font, label_cell.alignment = styles.KPI_LABEL_FONT, styles.CENTER
