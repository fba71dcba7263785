"""Plain-text route tables shared by the CLI commands."""

from collections.abc import Iterable

from storefront.routing.route import RouteDescriptor

_HEADERS = ("NAME", "PATH", "LOCALE", "ENTITY")


def route_rows(routes: Iterable[tuple[str, RouteDescriptor]]) -> list[tuple[str, str, str, str]]:
    rows: list[tuple[str, str, str, str]] = []
    for name, route in routes:
        path = route.path
        if route.format:
            path = f"{path}.{route.format}"
        rows.append((name, path, route.locale or "", type(route.entity).__name__))
    return rows


def print_table(rows: list[tuple[str, str, str, str]]) -> None:
    widths = [
        max(len(_HEADERS[i]), *(len(row[i]) for row in rows)) for i in range(len(_HEADERS) - 1)
    ]
    fmt = "  ".join(f"{{:<{w}}}" for w in widths) + "  {}"
    print(fmt.format(*_HEADERS))
    sep_len = sum(widths) + 2 * len(widths) + max(len(row[-1]) for row in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))
