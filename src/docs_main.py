#!/usr/bin/env python
"""
Documentation Downloader Entry Point.

Usage:
    python -m src.docs_main -p openshift_container_platform --product-version 4.18
    python -m src.docs_main -p openshift_container_platform --product-version 4.18 --no-headless
    python -m src.docs_main -p openshift_container_platform --product-version 4.14 --dry-run
"""
import sys


def main() -> int:
    """Main entry point for the downloader CLI."""
    from src.infrastructure.cli.docs_cli import main as cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
