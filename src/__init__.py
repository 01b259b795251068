"""Rename and group scanned RUT/C.I. documents."""
