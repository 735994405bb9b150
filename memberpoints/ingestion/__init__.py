"""Ingestion adapters for importing event attendance."""

from memberpoints.ingestion.base import BaseAdapter, ImportResult
from memberpoints.ingestion.sheet_csv import SheetCsvAdapter, iter_sheet_files

__all__ = ["BaseAdapter", "ImportResult", "SheetCsvAdapter", "iter_sheet_files"]
