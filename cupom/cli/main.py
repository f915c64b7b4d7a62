#!/usr/bin/env python3

import argparse
from collections.abc import Sequence


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Receipt (cupom fiscal) parsing CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  parse [file]               Parse raw OCR text (stdin if no file)
  scan <image>               OCR a receipt image and parse the text
  extract <image>            Normalize a receipt segmented by the extraction service
  serve [--host] [--port]    Start receipt parsing server

Environment:
  OCR_SERVICE_URL, EXTRACTION_SERVICE_URL, CUPOM_CONFIG_DIR, CUPOM_LOG_LEVEL
""",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override CUPOM_LOG_LEVEL for this run",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Parse raw OCR receipt text")
    parse_parser.add_argument("file", nargs="?", help="Text file with OCR output (reads stdin if omitted)")
    parse_parser.add_argument("--json", action="store_true", help="Print the parsed receipt as JSON")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="OCR a receipt image and parse it")
    scan_parser.add_argument("image", help="Path to receipt image")
    scan_parser.add_argument("--ocr-url", default=None, help="OCR service URL (default: $OCR_SERVICE_URL)")
    scan_parser.add_argument("--json", action="store_true", help="Print the parsed receipt as JSON")

    # extract command
    extract_parser = subparsers.add_parser("extract", help="Run a receipt image through the extraction service")
    extract_parser.add_argument("image", help="Path to receipt image")
    extract_parser.add_argument(
        "--extraction-url", default=None, help="Extraction service URL (default: $EXTRACTION_SERVICE_URL)"
    )
    extract_parser.add_argument("--json", action="store_true", help="Print the parsed receipt as JSON")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start receipt parsing server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    args = parser.parse_args(argv)

    if args.log_level:
        from cupom.runtime import set_log_level

        set_log_level(args.log_level)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "parse":
        from cupom.cli.receipt import cmd_parse

        return cmd_parse(args)
    elif args.command == "scan":
        from cupom.cli.receipt import cmd_scan

        return cmd_scan(args)
    elif args.command == "extract":
        from cupom.cli.receipt import cmd_extract

        return cmd_extract(args)
    elif args.command == "serve":
        from cupom.cli.receipt import cmd_serve

        return cmd_serve(args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
