#!/usr/bin/env python3
"""Run the filedrop backend with explicit args (avoids shell interpolation)."""
from __future__ import annotations

import argparse
from pathlib import Path

import uvicorn

from filedrop.api.app import create_app
from filedrop.api.config import APIConfig


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument(
        "--storage-root",
        type=Path,
        default=None,
        help="Directory holding uploaded files (default: $FILEDROP_STORAGE_ROOT or ./uploads)",
    )
    parser.add_argument("--serve-ui", action=argparse.BooleanOptionalAction, default=True)
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    config = APIConfig(serve_ui=args.serve_ui)
    if args.storage_root is not None:
        config.storage_root = args.storage_root
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
