from __future__ import annotations

import argparse
import os


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the link-walking smoke runner."""
    parser = argparse.ArgumentParser(description="Walk the catalog API by following its links")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:8000"))
    parser.add_argument("--query", default=None, help="value for the templated `q` variable")
    parser.add_argument("--tag", action="append", default=[], help="repeatable tag filter")
    parser.add_argument("--size", type=int, default=None, help="page size to request")
    parser.add_argument("--max-pages", type=int, default=1000, dest="max_pages")
    parser.add_argument("--timeout", type=float, default=20.0, help="health check timeout")
    return parser.parse_args(argv)
