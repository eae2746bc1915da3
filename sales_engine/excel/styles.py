"""
Workbook theme for the sales summary: palette, fonts, fills, borders, alignment.
"""
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------
NAVY = "1F3A5F"
STEEL = "3C6E9F"
INK = "000000"
PAPER = "FFFFFF"
MUTED = "666666"
GRID = "CCCCCC"
RULE = "999999"
STRIPE = "F5F5F5"
TOTALS = "E3F2FD"
GOLD = "FFF8DC"
PALE_BLUE = "EAF1F8"


def _font(size: int, color: str, **kwargs) -> Font:
    return Font(name="Calibri", size=size, color=color, **kwargs)


def _solid(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _box(color: str, top: str = "thin", bottom: str = "thin") -> Border:
    side = Side(style="thin", color=color)
    return Border(left=side, right=side, top=Side(style=top, color=color), bottom=Side(style=bottom, color=color))


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------
TITLE_FONT = _font(22, NAVY, bold=True)
SUBTITLE_FONT = _font(12, MUTED, italic=True)
SECTION_FONT = _font(14, NAVY, bold=True)
HEADER_FONT = _font(11, PAPER, bold=True)
DATA_FONT = _font(10, INK)
TOTAL_FONT = _font(10, INK, bold=True)
KPI_VALUE_FONT = _font(24, STEEL, bold=True)
KPI_LABEL_FONT = _font(10, MUTED)

# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------
HEADER_FILL = _solid(NAVY)
STRIPE_FILL = _solid(STRIPE)
TOTAL_FILL = _solid(TOTALS)

HEADER_BORDER = _box(NAVY, bottom="medium")
DATA_BORDER = _box(GRID)
TOTAL_BORDER = _box(RULE, top="medium", bottom="medium")

CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")

# Row highlights the summary report asks for by name
HIGHLIGHT_FILLS = {
    "top_day": _solid(GOLD),
    "leader": _solid(PALE_BLUE),
}
