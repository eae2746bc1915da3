"""Entities, indexed repositories, relations and CSV loading."""
from .loader import discover_csvs, load_rows, read_rows
from .store import SalesEngine
from .relations import Relations
from .repository import Repository
from .schemas import DAY_NAMES, InvoiceStatus, TransactionResult
