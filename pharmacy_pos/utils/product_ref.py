"""
utils/product_ref.py

A product reference arrives either as a bare id string or as an embedded
product object ({"_id": ..., "id": ..., "productId": ..., "code": ..., "name": ...}).
Both shapes are folded into one small tagged union here so every caller
(cart lines, purchase lines, FIFO matching, status cache) resolves the id
the same way.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

__all__ = ["IdRef", "EmbeddedRef", "ProductRef", "as_product_ref", "resolve_product_id"]

# lookup order for embedded objects; first key that is present wins
_ID_KEYS = ("_id", "id", "productId")


@dataclass(frozen=True)
class IdRef:
    id: str
    kind: str = field(default="id", init=False)


@dataclass(frozen=True)
class EmbeddedRef:
    ref: Mapping[str, Any]
    kind: str = field(default="ref", init=False)

    @property
    def id(self) -> Optional[str]:
        for key in _ID_KEYS:
            val = self.ref.get(key)
            if val is not None:
                return str(val)
        return None

    @property
    def code(self) -> Optional[str]:
        code = self.ref.get("code")
        if isinstance(code, str) and code.strip():
            return code
        return None

    @property
    def name(self) -> Optional[str]:
        return self.ref.get("name")


ProductRef = Union[IdRef, EmbeddedRef]


def as_product_ref(value: Any) -> Optional[ProductRef]:
    """Wrap a raw reference; None for anything that is neither an id nor an object."""
    if isinstance(value, (IdRef, EmbeddedRef)):
        return value
    if isinstance(value, str):
        return IdRef(value)
    if isinstance(value, Mapping):
        return EmbeddedRef(value)
    return None


def resolve_product_id(value: Any) -> Optional[str]:
    """The product id behind a raw or wrapped reference, or None."""
    ref = as_product_ref(value)
    return ref.id if ref is not None else None
