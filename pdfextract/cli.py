"""
pdfextract CLI.

Commands:
    serve      Expose the extraction tools via MCP over stdio
    web        Start the HTTP front door
    extract    Run one extraction and print the result
    files      List the files-to-extract working directory

Examples:
    pdfextract serve
    pdfextract web -p 45451
    pdfextract extract text report.pdf -f markdown -p 1-3
    pdfextract extract images report.pdf --image-format jpg
    pdfextract --files-dir ./inbox files
"""

from __future__ import annotations

import argparse
import logging
import sys

from pdfextract.config import ExtractorConfig, load_config

EXTRACTION_KINDS = ["text", "images", "tables", "forms", "metadata", "full"]


def _config(args: argparse.Namespace) -> ExtractorConfig:
    return load_config(
        output_directory=args.output_dir,
        max_file_size=args.max_file_size,
        max_pages=args.max_pages,
        files_directory=args.files_dir,
    )


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle serve command."""
    import asyncio

    from pdfextract.serve import run_server

    try:
        config = _config(args)
        print("MCP server ready on stdio (waiting for client connection)", file=sys.stderr)
        print("Tip: This command is meant to be invoked by an MCP client.", file=sys.stderr)
        print("     Press Ctrl+C to exit.", file=sys.stderr)
        asyncio.run(run_server(config))
        return 0
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_web(args: argparse.Namespace) -> int:
    """Handle web command - start the HTTP server."""
    from pdfextract.web import run_server

    try:
        config = _config(args)
        run_server(config, host=args.host, port=args.port)
        return 0
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_extract(args: argparse.Namespace) -> int:
    """Handle extract command."""
    from pdfextract.errors import ExtractorError
    from pdfextract.extract import ExtractionKind, ExtractionRequest
    from pdfextract.extract.image import parse_image_format
    from pdfextract.formatting import parse_output_format
    from pdfextract.router import ExtractionRouter

    try:
        config = _config(args)
        request = ExtractionRequest(
            file_path=args.file,
            kind=ExtractionKind(args.kind),
            output_format=parse_output_format(args.format),
            page_range=args.pages,
            image_format=parse_image_format(args.image_format),
        )
        print(ExtractionRouter(config).extract(request))
        return 0
    except ExtractorError as e:
        print(f"Error: [{e.code.value}] {e.message}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_files(args: argparse.Namespace) -> int:
    """Handle files command."""
    from pdfextract.errors import ExtractorError
    from pdfextract.storage import DocumentWorkspace

    try:
        config = _config(args)
        listing = DocumentWorkspace(config.files_directory).list_files()
    except ExtractorError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Directory: {listing['path']}")
    if listing.get("message"):
        print(listing["message"])
        return 0

    for name, info in listing["files"].items():
        print(f"  {name}  {info['size']:,} bytes  {info['mimeType']}")
    print(f"{listing['count']} file(s)")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="pdfextract",
        description="Extract text, images, tables, forms and metadata from PDF documents.",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Root directory for extraction artifacts (default: extracted_data)",
    )
    parser.add_argument(
        "--max-file-size",
        default=None,
        help="Largest accepted input, e.g. 50MB (default: 50MB)",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Maximum pages processed per document (default: 1000)",
    )
    parser.add_argument(
        "--files-dir",
        default=None,
        help="Working directory of the file tools (default: files-to-extract)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug information to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # serve
    subparsers.add_parser(
        "serve",
        help="Expose the extraction tools via MCP",
    )

    # web
    web_parser = subparsers.add_parser(
        "web",
        help="Start the HTTP server",
    )
    web_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    web_parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=None,
        help="Port to bind to (default: SERVER_PORT or 45451)",
    )

    # extract
    extract_parser = subparsers.add_parser(
        "extract",
        help="Run one extraction and print the result",
    )
    extract_parser.add_argument(
        "kind",
        choices=EXTRACTION_KINDS,
        help="What to extract",
    )
    extract_parser.add_argument(
        "file",
        help="Path to the PDF file",
    )
    extract_parser.add_argument(
        "-f",
        "--format",
        default="json",
        help="Output format: json, markdown or plaintext (default: json)",
    )
    extract_parser.add_argument(
        "-p",
        "--pages",
        default="all",
        help="Pages to process, e.g. 'all', '1-5', '1,3,5' (default: all)",
    )
    extract_parser.add_argument(
        "--image-format",
        default="png",
        help="Format for saved images: png, jpg or gif (default: png)",
    )

    # files
    subparsers.add_parser(
        "files",
        help="List the files-to-extract working directory",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "serve":
        return cmd_serve(args)
    elif args.command == "web":
        return cmd_web(args)
    elif args.command == "extract":
        return cmd_extract(args)
    elif args.command == "files":
        return cmd_files(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
