"""Storefront CLI — inspect the slug routes a kernel resolves.

Entry point registered as ``storefront`` in ``pyproject.toml``::

    [project.scripts]
    storefront = "storefront.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``storefront`` command."""
    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Storefront — slug routing for plugin-based shops.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- storefront routes ------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List every resolvable route")
    routes_parser.add_argument("app", help="Import string (e.g. shop:kernel)")
    routes_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum entities listed per class (0 = unlimited)",
    )

    # -- storefront match -------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Show the routes a path resolves to")
    match_parser.add_argument("app", help="Import string (e.g. shop:kernel)")
    match_parser.add_argument("path", help="Request path (e.g. /fr/products/red-mug)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from storefront.cli._routes import run_routes

        run_routes(args)
    elif args.command == "match":
        from storefront.cli._match import run_match

        run_match(args)
