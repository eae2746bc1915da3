"""Report generators (JSON + Excel)."""
