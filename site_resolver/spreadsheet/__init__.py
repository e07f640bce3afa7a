"""Spreadsheet import/export for the Company Website Resolver."""

from .reader import SpreadsheetReader
from .writer import SpreadsheetWriter

__all__ = ['SpreadsheetReader', 'SpreadsheetWriter']
