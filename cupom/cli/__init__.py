"""Unified command-line interface for cupom.

Usage:
    cupom parse [file] [--json]
    cupom scan <image> [--ocr-url URL] [--json]
    cupom extract <image> [--extraction-url URL] [--json]
    cupom serve [--host] [--port]
"""
