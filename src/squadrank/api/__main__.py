"""Run the API with uvicorn: ``python -m squadrank.api``."""

from __future__ import annotations

import argparse

import uvicorn

from squadrank.api import create_app


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the squadrank REST API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--db-path", default=None, help="SQLite path (defaults to SQUADRANK_DB_PATH)")
    args = parser.parse_args()
    uvicorn.run(create_app(args.db_path), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
