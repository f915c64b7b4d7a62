"""Composable OCR receipt parser components."""

from .common import clean_item_description, find_item_window
from .fields_parser import _extract_date, _extract_store_name, _extract_total
from .items_text_parser import _extract_items

__all__ = [
    "_extract_date",
    "_extract_items",
    "_extract_store_name",
    "_extract_total",
    "clean_item_description",
    "find_item_window",
]
