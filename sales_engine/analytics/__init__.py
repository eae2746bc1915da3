"""Statistics, rankings and outlier queries over a SalesEngine."""
from .analyst import SalesAnalyst
from .customers import CustomerStats
from .invoices import InvoiceStats
from .items import ItemStats
from .merchants import MerchantStats
