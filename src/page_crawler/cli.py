"""Command line interface for the page crawler."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

from .api.server import CrawlServer
from .core.config import load_configuration
from .crawler.runner import CrawlOptions, run_crawl


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="page-crawler", description="Bounded headless-browser crawler")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    crawl_parser = subparsers.add_parser("crawl", help="Crawl from seed URLs and print the result")
    crawl_parser.add_argument("urls", nargs="+", help="Seed URLs")
    crawl_parser.add_argument(
        "-m", "--match", action="append", default=[], help="Glob pattern for links to follow (repeatable)"
    )
    crawl_parser.add_argument(
        "-x", "--exclude", action="append", default=[], help="Glob pattern for links to skip (repeatable)"
    )
    crawl_parser.add_argument("--max-urls", type=int, default=None, help="Maximum number of pages to fetch")
    crawl_parser.add_argument("--max-concurrency", type=int, default=None, help="Maximum simultaneous fetches")
    crawl_parser.add_argument("--selector", default=None, help="CSS selector or XPath to wait for and extract")
    crawl_parser.add_argument("--ignore-selector", default=None, help="CSS selector removed before extraction")
    crawl_parser.add_argument("--wait-timeout", type=int, default=None, help="Readiness wait in milliseconds")
    crawl_parser.add_argument("-o", "--output", default=None, help="Write the JSON report to this file")

    serve_parser = subparsers.add_parser("serve", help="Run the JSON HTTP adapter")
    serve_parser.add_argument("--host", default=None, help="Interface to bind")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to listen on")

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def run_crawl_command(args: argparse.Namespace) -> int:
    config = load_configuration(
        max_urls_to_crawl=args.max_urls,
        max_concurrency=args.max_concurrency,
    )
    options = CrawlOptions(
        urls=args.urls,
        match=args.match,
        exclude=args.exclude,
        selector=args.selector,
        ignore_selector=args.ignore_selector,
        wait_for_selector_timeout=(
            args.wait_timeout if args.wait_timeout is not None else config.wait_for_selector_timeout
        ),
        max_urls_to_crawl=config.max_urls_to_crawl,
        max_concurrency=config.max_concurrency,
    )

    report = asyncio.run(run_crawl(options, config=config))

    if args.output:
        report_path = Path(args.output).resolve()
        report.save(report_path)
        print(f"[+] {len(report.pages)} pages saved to {report_path}")
    else:
        print(report.to_json())

    for failure in report.failures:
        print(f"[!] {failure.kind} :: {failure.url} :: {failure.message}")
    return 0


def run_serve_command(args: argparse.Namespace) -> int:
    config = load_configuration(host=args.host, port=args.port)
    server = CrawlServer(config)
    print(f"[*] Server is running on {config.base_url}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\n[*] Shutting down")
    return 0


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    if args.command == "crawl":
        return run_crawl_command(args)
    return run_serve_command(args)


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
