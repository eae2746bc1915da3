"""
Sales Engine — Configuration: paths, file names, analytics constants.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths: override with SALES_ENGINE_DATA_DIR env var for deployment
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("SALES_ENGINE_DATA_DIR", str(Path.cwd() / "data")))
DATA_FOLDER = _data_dir
REPORTS_FOLDER = Path(os.environ.get("SALES_ENGINE_REPORTS_DIR", str(_data_dir / "reports")))

# ---------------------------------------------------------------------------
# CSV export file names, one per collection
# ---------------------------------------------------------------------------
CSV_FILES = {
    "merchants": "merchants.csv",
    "items": "items.csv",
    "customers": "customers.csv",
    "invoices": "invoices.csv",
    "invoice_items": "invoice_items.csv",
    "transactions": "transactions.csv",
}

# ---------------------------------------------------------------------------
# Analytics defaults
# ---------------------------------------------------------------------------
TOP_N_DEFAULT = int(os.environ.get("SALES_ENGINE_TOP_N", "20"))

# Outlier thresholds: mean + k * sample std-dev
GOLDEN_ITEM_STD_DEVS = 2
HIGH_ITEM_COUNT_STD_DEVS = 1
INVOICE_COUNT_STD_DEVS = 2
TOP_DAY_STD_DEVS = 1
