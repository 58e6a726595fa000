"""
Command line entry point: ``invoicing``.

Usage:
    invoicing init-db [--database-url URL]
    invoicing serve [--host HOST] [--port PORT]

Both commands read configuration through get_active_config(), so
JWT_SECRET_KEY must be set (or provided in INVOICE_CONFIG_FILE).
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="invoicing",
        description="Invoicing backend tools.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help="YAML configuration file (default: INVOICE_CONFIG_FILE env).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_db = subparsers.add_parser("init-db", help="Create all tables.")
    init_db.add_argument(
        "--database-url",
        default=None,
        help="Database URL (default: DATABASE_URL from configuration).",
    )

    serve = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn.")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1).")
    serve.add_argument("--port", type=int, default=8000, help="Port (default: 8000).")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    # Lazy imports so we fail fast on args first
    from invoice_config import ConfigurationError, get_active_config

    try:
        config = get_active_config(config_file=args.config_file)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.command == "init-db":
        from invoice_kernel.db.engine import create_tables, init_engine_from_url, reset_engine
        from invoice_kernel.logging_config import configure_logging

        if args.database_url:
            config = dataclasses.replace(config, database_url=args.database_url)
        configure_logging(level=config.log_level)
        init_engine_from_url(config.database_url)
        try:
            create_tables()
        finally:
            reset_engine()
        print(f"Tables created in {config.database_url}")
        return 0

    import uvicorn

    from invoice_api.app import create_app

    uvicorn.run(create_app(config), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
