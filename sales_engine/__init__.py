"""Sales Engine — indexed in-memory sales data with cross-relation analytics."""
from sales_engine.analytics.analyst import SalesAnalyst
from sales_engine.data.store import SalesEngine

__version__ = "1.0.0"

__all__ = ["SalesAnalyst", "SalesEngine", "__version__"]
