"""``storefront match`` — show what a request path resolves to."""

import argparse
import sys

import anyio

from storefront.cli._resolve import resolve_kernel
from storefront.cli._table import print_table, route_rows
from storefront.kernel import Kernel
from storefront.routing.route import PathMatch


async def _match(kernel: Kernel, path: str) -> PathMatch:
    await kernel.startup()
    try:
        return await kernel.provider.match_path(path)
    finally:
        await kernel.shutdown()


def run_match(args: argparse.Namespace) -> None:
    try:
        kernel = resolve_kernel(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    result = anyio.run(_match, kernel, args.path)
    if not result:
        print(f"No route matches {args.path!r}.", file=sys.stderr)
        raise SystemExit(1)

    print(f"Locale: {result.locale}")
    print_table(route_rows(result.routes.items()))
