"""Multi-asset value bundles.

An :class:`AssetBundle` maps asset identifiers (``policyid.assetname`` or the
reserved base-coin id ``lovelace``) to non-negative integer quantities. Python
integers are unbounded, so sums across many UTXOs never overflow; floating
point quantities are rejected outright instead of being coerced.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from decimal import Decimal
from typing import Any, Iterable, Tuple

from .errors import ValidationError

# Consider: ADA is the coin, lovelace is the token.
LOVELACE = "lovelace"

# 1 ADA = 10^6 lovelace.
ADA_COIN2TOKEN = 1_000_000

ACTION_MINT = "mint"
ACTION_BURN = "burn"
MINT_ACTIONS = frozenset({ACTION_MINT, ACTION_BURN})


class AssetError(ValidationError):
    """Raised when an asset id or quantity cannot live inside a bundle."""


def coerce_quantity(value: Any, *, asset: str = "") -> int:
    """Return ``value`` as a non-negative ``int`` or raise :class:`AssetError`."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise AssetError(
            f"Quantity for {asset or 'asset'} must be an integer, got {type(value).__name__}"
        )
    if value < 0:
        raise AssetError(f"Quantity for {asset or 'asset'} must not be negative: {value}")
    return value


class AssetBundle(Mapping[str, int]):
    """Immutable mapping of asset id to quantity.

    Equality follows :class:`~collections.abc.Mapping`, so key order never
    matters: ``AssetBundle({"a": 1, "b": 2}) == {"b": 2, "a": 1}``.
    """

    __slots__ = ("_quantities",)

    def __init__(
        self,
        quantities: Mapping[str, int] | Iterable[Tuple[str, int]] | None = None,
    ) -> None:
        items = quantities.items() if isinstance(quantities, Mapping) else (quantities or ())
        validated: dict[str, int] = {}
        for asset, quantity in items:
            if not isinstance(asset, str) or not asset:
                raise AssetError(f"Asset id must be a non-empty string, got {asset!r}")
            if asset in validated:
                raise AssetError(f"Duplicate asset id in bundle: {asset}")
            validated[asset] = coerce_quantity(quantity, asset=asset)
        self._quantities = validated

    def __getitem__(self, asset: str) -> int:
        return self._quantities[asset]

    def __iter__(self) -> Iterator[str]:
        return iter(self._quantities)

    def __len__(self) -> int:
        return len(self._quantities)

    def __hash__(self) -> int:
        return hash(frozenset(self._quantities.items()))

    def __repr__(self) -> str:
        return f"AssetBundle({self._quantities!r})"

    def get(self, asset: str, default: int = 0) -> int:  # type: ignore[override]
        """Return the quantity held for ``asset``, zero when absent."""

        return self._quantities.get(asset, default)

    def merge(self, other: Mapping[str, int]) -> "AssetBundle":
        """Return a new bundle where quantities of identical ids are summed."""

        merged = dict(self._quantities)
        for asset, quantity in other.items():
            merged[asset] = merged.get(asset, 0) + coerce_quantity(quantity, asset=asset)
        return AssetBundle(merged)

    def with_quantity(self, asset: str, quantity: int) -> "AssetBundle":
        """Return a copy with ``asset`` set to ``quantity`` (replacing any value)."""

        updated = dict(self._quantities)
        updated[asset] = quantity
        return AssetBundle(updated)

    def base_quantity(self, base_asset: str = LOVELACE) -> int:
        return self.get(base_asset)

    def non_base_items(self, base_asset: str = LOVELACE) -> list[Tuple[str, int]]:
        """Return ``(asset, quantity)`` pairs other than the base coin, in insertion order."""

        return [(asset, qty) for asset, qty in self._quantities.items() if asset != base_asset]

    def to_dict(self) -> dict[str, int]:
        return dict(self._quantities)


EMPTY_BUNDLE = AssetBundle()


def merge(a: Mapping[str, int], b: Mapping[str, int]) -> AssetBundle:
    """Sum two bundles into a new one."""

    left = a if isinstance(a, AssetBundle) else AssetBundle(a)
    return left.merge(b)


def lovelace_to_ada(quantity: int) -> Decimal:
    """Convert a lovelace amount to ADA without float rounding."""

    return Decimal(coerce_quantity(quantity, asset=LOVELACE)) / ADA_COIN2TOKEN
