"""Command line interface for gstrsync."""
