"""FastAPI presentation layer over SalesAnalyst."""
