"""Narrowing helpers for untyped TOML data.

`tomllib` hands back plain dicts and lists of `object`; the config loader
reads them through these accessors, which check the runtime type and narrow
it for the type checker in one step. Every accessor answers None (or the
given default) for a missing key or a value of the wrong type.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    if not isinstance(obj, dict):
        return False
    return all(isinstance(key, str) for key in cast(dict[object, object], obj))


def as_str_dict(obj: object) -> StrDict | None:
    return obj if is_str_dict(obj) else None


def as_obj_list(obj: object) -> ObjList | None:
    return cast(ObjList, obj) if isinstance(obj, list) else None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Stripped string value; blank strings count as missing."""
    match table.get(key):
        case str(value) if value.strip():
            return value.strip()
        case _:
            return None


def get_bool(table: Mapping[str, object], key: str, default: bool = False) -> bool:
    """Boolean value; integers and strings such as "true" are not accepted."""
    value = table.get(key)
    return value if isinstance(value, bool) else default


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_list(table: Mapping[str, object], key: str) -> ObjList | None:
    return as_obj_list(table.get(key))
