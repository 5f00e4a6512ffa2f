#!/usr/bin/env python3

import argparse
import json
import logging
from collections.abc import Sequence
from pathlib import Path

from receiptlens.runtime import get_logger, set_log_level

logger = get_logger(__name__)


def _print_error(error: str) -> None:
    for line in error.splitlines():
        print(line)


def cmd_analyze(args: argparse.Namespace) -> int:
    """Analyze a receipt image and print the mapped receipt."""
    from receiptlens.application.receipts.analyze import ReceiptAnalysisRequest, run_receipt_analysis
    from receiptlens.receipt.formatter import format_receipt_summary, receipt_to_dict
    from receiptlens.runtime.settings import load_settings

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as exc:
        _print_error(f"Invalid configuration: {exc}")
        return 1

    try:
        outcome = run_receipt_analysis(
            ReceiptAnalysisRequest(
                image_path=Path(args.image),
                settings=settings,
                include_ocr_content=args.include_ocr,
                downscale=args.downscale,
            )
        )
    except ValueError as exc:
        # Blank endpoint or key
        _print_error(f"Invalid configuration: {exc}")
        print("Set AZURE_DOCUMENT_INTELLIGENCE_ENDPOINT and AZURE_DOCUMENT_INTELLIGENCE_KEY.")
        return 1

    if outcome.status == "file_not_found":
        logger.error("%s", outcome.error)
        print(f"Error: {outcome.error}")
        return 1

    if outcome.status == "invalid_image":
        print(f"Invalid receipt image: {outcome.error}")
        return 1

    if outcome.status == "analysis_failed":
        print(f"Receipt analysis failed ({outcome.failure_kind}): {outcome.error}")
        return 1

    result = outcome.result
    if result is None:
        print("Analysis failed: missing receipt output.")
        return 1

    if args.json:
        print(json.dumps(receipt_to_dict(result), indent=2, ensure_ascii=False))
        return 0

    print("=" * 60)
    print("ANALYZED RECEIPT")
    print("=" * 60)
    print(format_receipt_summary(result))
    if args.include_ocr and result.ocr.raw_text:
        print("-" * 60)
        print(result.ocr.raw_text)
    print("=" * 60)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the FastAPI server for receipt uploads."""
    import uvicorn

    from receiptlens.runtime import receipt_server as server

    print(f"Starting receipt server on {args.host}:{args.port}")
    print(f"Upload endpoint: http://{args.host}:{args.port}/analyze")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Receipt analysis with Azure AI Document Intelligence",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  analyze <image>            Analyze a receipt image
  serve [--host] [--port]    Start receipt upload server

Environment:
  AZURE_DOCUMENT_INTELLIGENCE_ENDPOINT   Resource endpoint URL
  AZURE_DOCUMENT_INTELLIGENCE_KEY        Resource key
  RECEIPTLENS_CONFIG                     Optional TOML settings file
""",
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze a receipt image")
    analyze_parser.add_argument("image", help="Path to receipt image")
    analyze_parser.add_argument("--include-ocr", action="store_true", help="Include the raw recognized text")
    analyze_parser.add_argument("--json", action="store_true", help="Print the receipt as JSON")
    analyze_parser.add_argument(
        "--downscale", action="store_true", help="Downscale oversized images before upload"
    )
    analyze_parser.add_argument("--config", default=None, help="Path to a TOML settings file")

    serve_parser = subparsers.add_parser("serve", help="Start receipt upload server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level(logging.DEBUG)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "analyze":
        return cmd_analyze(args)

    if args.command == "serve":
        return cmd_serve(args)

    return 1


def entrypoint() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    entrypoint()
