"""Render analyzed receipts as JSON-ready dicts and review text."""

from decimal import Decimal
from typing import Any

from receiptlens.domain.receipt import ReceiptAmount, ReceiptAnalysisResult, ReceiptLineItem


def _amount_to_dict(amount: ReceiptAmount | None) -> dict[str, Any] | None:
    if amount is None:
        return None
    return {"value": f"{amount.value:.2f}", "currency": amount.currency}


def _decimal_to_str(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


def _item_to_dict(item: ReceiptLineItem) -> dict[str, Any]:
    return {
        "description": item.description,
        "quantity": _decimal_to_str(item.quantity),
        "unit_price": _amount_to_dict(item.unit_price),
        "total_price": _amount_to_dict(item.total_price),
        "confidence": item.confidence,
    }


def receipt_to_dict(result: ReceiptAnalysisResult) -> dict[str, Any]:
    """Convert a receipt record into plain JSON-serializable data."""
    summary = result.summary
    return {
        "summary": {
            "classification": summary.classification.name,
            "merchant_name": summary.merchant_name,
            "merchant_address": summary.merchant_address,
            "merchant_phone_number": summary.merchant_phone_number,
            "transaction_date": summary.transaction_date.isoformat() if summary.transaction_date else None,
            "transaction_time": summary.transaction_time.isoformat() if summary.transaction_time else None,
            "subtotal": _amount_to_dict(summary.subtotal),
            "tax": _amount_to_dict(summary.tax),
            "total": _amount_to_dict(summary.total),
        },
        "items": [_item_to_dict(item) for item in result.items],
        "ocr": {
            "raw_text": result.ocr.raw_text,
            "document_confidence": result.ocr.document_confidence,
        },
        "model": {
            "provider": result.model.provider,
            "model_name": result.model.model_name,
            "model_id": result.model.model_id,
        },
    }


def _format_amount(amount: ReceiptAmount | None) -> str:
    if amount is None:
        return "-"
    if amount.currency:
        return f"{amount.value:.2f} {amount.currency}"
    return f"{amount.value:.2f}"


def _format_lines_aligned(
    rows: list[tuple[str, str, str | None]],
    indent: str = "  ",
) -> list[str]:
    """
    Format rows with aligned labels, amounts and trailing comments.

    Args:
        rows: List of (label, amount, comment_or_none) tuples
        indent: Indentation prefix for each line

    Returns:
        List of formatted lines
    """
    if not rows:
        return []

    max_label_len = max(len(label) for label, _, _ in rows)
    max_amount_len = max(len(amount) for _, amount, _ in rows)

    lines = []
    for label, amount, comment in rows:
        base = f"{indent}{label.ljust(max_label_len)}  {amount.rjust(max_amount_len)}"
        if comment:
            lines.append(f"{base}  ; {comment}")
        else:
            lines.append(base)

    return lines


def format_receipt_summary(result: ReceiptAnalysisResult) -> str:
    """Format a receipt record for terminal review."""
    summary = result.summary
    lines = [
        f"Classification: {summary.classification.name}",
        f"Merchant: {summary.merchant_name or 'UNKNOWN'}",
    ]
    if summary.merchant_address:
        lines.append(f"Address: {summary.merchant_address}")
    if summary.merchant_phone_number:
        lines.append(f"Phone: {summary.merchant_phone_number}")

    date_str = summary.transaction_date.isoformat() if summary.transaction_date else "UNKNOWN"
    if summary.transaction_time:
        date_str = f"{date_str} {summary.transaction_time.isoformat()}"
    lines.append(f"Date: {date_str}")

    lines.append(f"\nItems ({len(result.items)}):")
    item_rows: list[tuple[str, str, str | None]] = []
    for i, item in enumerate(result.items, 1):
        label = f"{i}. {item.description or '(no description)'}"
        comment = None
        if item.quantity is not None and item.quantity != 1:
            comment = f"qty {item.quantity}"
            if item.unit_price is not None:
                comment += f" @ {_format_amount(item.unit_price)}"
        item_rows.append((label, _format_amount(item.total_price), comment))
    lines.extend(_format_lines_aligned(item_rows))

    lines.append("")
    lines.extend(
        _format_lines_aligned(
            [
                ("Subtotal", _format_amount(summary.subtotal), None),
                ("Tax", _format_amount(summary.tax), None),
                ("Total", _format_amount(summary.total), None),
            ],
            indent="",
        )
    )
    lines.append(f"\nModel: {result.model.provider}/{result.model.model_name} ({result.model.model_id or 'unknown'})")
    return "\n".join(lines)
