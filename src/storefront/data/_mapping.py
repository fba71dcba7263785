"""Row-to-dataclass mapping with scalar coercion.

SQLite hands back ints for booleans and may hand back strings for
numeric columns. Fields annotated ``int``, ``float``, ``bool`` or ``str``
are coerced to their annotation; everything else passes through.
"""

import dataclasses
import types
from typing import Any, get_args, get_origin, get_type_hints

_COERCIBLE: dict[type, Any] = {
    int: lambda v: int(v) if v != "" else 0,
    float: lambda v: float(v) if v != "" else 0.0,
    bool: lambda v: bool(int(v)) if isinstance(v, str) else bool(v),
    str: str,
}


def _coercion_map(cls: type) -> dict[str, type | None]:
    """Build a {field_name: target_type} map, ``None`` where no coercion applies."""
    hints = get_type_hints(cls)
    result: dict[str, type | None] = {}
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type)
        # X | None coerces to X
        if get_origin(annotation) is types.UnionType:
            args = [a for a in get_args(annotation) if a is not type(None)]
            annotation = args[0] if len(args) == 1 else None
        result[f.name] = annotation if annotation in _COERCIBLE else None
    return result


def _coerce(value: Any, target: type | None) -> Any:
    if target is None or value is None or isinstance(value, target):
        return value
    return _COERCIBLE[target](value)


def _require_dataclass(cls: type) -> None:
    if not dataclasses.is_dataclass(cls):
        msg = f"{cls.__name__} is not a dataclass — storefront.data maps rows to dataclasses"
        raise TypeError(msg)


def column_names(cls: type) -> frozenset[str]:
    """Field names of a row dataclass, usable as column identifiers."""
    _require_dataclass(cls)
    return frozenset(f.name for f in dataclasses.fields(cls))


def map_row[T](cls: type[T], row: dict[str, Any]) -> T:
    """Map a row dict to a dataclass instance.

    Columns without a matching field are ignored, so ``SELECT *`` is fine.
    Raises ``TypeError`` if required fields are missing from the row.
    """
    _require_dataclass(cls)
    coercion = _coercion_map(cls)
    return cls(**{k: _coerce(v, coercion[k]) for k, v in row.items() if k in coercion})


def map_rows[T](cls: type[T], rows: list[dict[str, Any]]) -> list[T]:
    """Map a list of row dicts, building the coercion map once."""
    _require_dataclass(cls)
    coercion = _coercion_map(cls)
    return [
        cls(**{k: _coerce(v, coercion[k]) for k, v in row.items() if k in coercion})
        for row in rows
    ]
