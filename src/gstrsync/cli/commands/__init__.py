"""gstrsync CLI command modules."""
