"""``storefront routes`` — list every route the kernel can resolve.

Starts the kernel (connecting its database and registering every
bundle repository) and prints NAME, PATH, LOCALE and ENTITY for each
entity the repositories return.
"""

import argparse
import sys

import anyio

from storefront.cli._resolve import resolve_kernel
from storefront.cli._table import print_table, route_rows
from storefront.kernel import Kernel


async def _collect(kernel: Kernel, limit: int | None) -> list[tuple[str, str, str, str]]:
    await kernel.startup()
    try:
        provider = kernel.provider
        if limit is not None:
            provider.route_collection_limit = limit
        collection = await provider.resolve_all_by_names()
        return route_rows(collection.items())
    finally:
        await kernel.shutdown()


def run_routes(args: argparse.Namespace) -> None:
    try:
        kernel = resolve_kernel(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows = anyio.run(_collect, kernel, args.limit)
    if not rows:
        print("No routes found.")
        return
    print_table(rows)
