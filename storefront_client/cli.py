"""CLI entry point for the Storefront MCP server."""

import argparse
import asyncio
import logging
import sys

from .config import Settings


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Storefront MCP Server")
    parser.add_argument(
        "--api-url",
        help="Backend base URL (default: STOREFRONT_API_URL or https://api.elven-sre.store)",
    )
    parser.add_argument(
        "--data-dir",
        help="Directory for the persisted cart (default: STOREFRONT_DATA_DIR or ~/.storefront)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    args = parser.parse_args()

    settings = Settings.from_env()
    overrides = {}
    if args.api_url:
        overrides["api_url"] = args.api_url
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if overrides:
        settings = settings.model_copy(update=overrides)

    from .server import main as server_main

    logging.getLogger().setLevel(args.log_level)

    try:
        asyncio.run(server_main(settings))
    except KeyboardInterrupt:
        print("\nShutting down...", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    main()
