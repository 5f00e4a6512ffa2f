"""Command-line interface for receiptlens.

Usage:
    receiptlens analyze <image>
    receiptlens analyze <image> --include-ocr --json
    receiptlens serve [--host] [--port]
"""
