"""Normalize notebook execution tracking workbooks into dashboard records."""

__version__ = "0.1.0"
