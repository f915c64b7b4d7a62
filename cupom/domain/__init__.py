"""Core domain models for cupom.

- ParsedReceipt, ParsedLineItem: receipt produced by either parsing path
- StructuredReceiptSummary, StructuredReceiptItem: extraction service input

Usage:
    from cupom.domain import ParsedReceipt, ParsedLineItem
"""

from cupom.domain.receipt import (
    ParsedLineItem,
    ParsedReceipt,
    StructuredReceiptItem,
    StructuredReceiptSummary,
    round_money,
)

__all__ = [
    "ParsedLineItem",
    "ParsedReceipt",
    "StructuredReceiptItem",
    "StructuredReceiptSummary",
    "round_money",
]
