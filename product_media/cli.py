#!/usr/bin/env python3
"""
Command line entry point.

    product-media serve --port 8000
    product-media fetch > product.json
    product-media generate --product-file product.json --watch
    product-media watch <job_id> --server http://localhost:8000 --source status
"""

import argparse
import json
import logging
import sys

from product_media import config
from product_media.catalog import fetch_random_product
from product_media.dispatcher import start_generation
from product_media.progress import COMPLETED, watch_job

logger = logging.getLogger(__name__)

STATUS_SOURCES = ("results", "status", "jobs")


def status_url(server: str, job_id: str, source: str = "results") -> str:
    return f"{server.rstrip('/')}/api/{source}/{job_id}"


def cmd_serve(args) -> int:
    import uvicorn

    uvicorn.run("product_media.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def cmd_fetch(args) -> int:
    result = fetch_random_product()
    if not result["success"]:
        print(f"Error: {result['error']}", file=sys.stderr)
        return 1
    print(json.dumps(result["data"], indent=2))
    return 0


def cmd_generate(args) -> int:
    if args.product_file:
        with open(args.product_file, "r", encoding="utf-8") as f:
            product = json.load(f)
    else:
        fetched = fetch_random_product()
        if not fetched["success"]:
            print(f"Error fetching product: {fetched['error']}", file=sys.stderr)
            return 1
        product = fetched["data"]

    handle = start_generation(product)
    print(json.dumps(handle, indent=2))
    if not handle.get("jobId") or handle.get("status") == "failed":
        return 1
    if not args.watch:
        return 0

    links = {"results": handle.get("resultsUrl"), "status": handle.get("statusUrl")}
    url = links.get(args.source) or status_url(args.server, handle["jobId"], args.source)
    return _watch(handle["jobId"], url, args.timeout)


def cmd_watch(args) -> int:
    return _watch(args.job_id, status_url(args.server, args.job_id, args.source), args.timeout)


def _watch(job_id: str, url: str, timeout) -> int:
    tracker = watch_job(job_id, url, timeout=timeout)
    if tracker.state == COMPLETED:
        print(json.dumps(tracker.data, indent=2))
        return 0
    if tracker.error:
        print(f"Error: {tracker.error}", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Product media generation relay")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=cmd_serve)

    fetch = sub.add_parser("fetch", help="Fetch a random product from the catalog webhook")
    fetch.set_defaults(func=cmd_fetch)

    generate = sub.add_parser("generate", help="Start media generation for a product")
    generate.add_argument("--product-file", help="Product JSON file (default: fetch a random product)")
    generate.add_argument("--watch", action="store_true", help="Poll until the job finishes")
    generate.add_argument("--server", default=config.BASE_URL or "http://127.0.0.1:8000")
    generate.add_argument("--source", choices=STATUS_SOURCES, default="results")
    generate.add_argument("--timeout", type=float, default=None, help="Stop watching after N seconds")
    generate.set_defaults(func=cmd_generate)

    watch = sub.add_parser("watch", help="Show progress of a running job")
    watch.add_argument("job_id")
    watch.add_argument("--server", default=config.BASE_URL or "http://127.0.0.1:8000")
    watch.add_argument("--source", choices=STATUS_SOURCES, default="results")
    watch.add_argument("--timeout", type=float, default=None, help="Stop watching after N seconds")
    watch.set_defaults(func=cmd_watch)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
