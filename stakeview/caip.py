"""CAIP identifier helpers: no I/O.

Account specifiers are CAIP-10 (``namespace:reference:address``), chain ids
CAIP-2 (``namespace:reference``), asset ids CAIP-19
(``namespace:reference/asset_namespace:asset_reference``).
"""
from __future__ import annotations


def split_account_specifier(account_specifier: str) -> tuple[str, str]:
    """Split a CAIP-10 account specifier into ``(chain_id, address)``.

    Examples:
        "cosmos:cosmoshub-4:cosmos1abc" → ("cosmos:cosmoshub-4", "cosmos1abc")
    """
    parts = account_specifier.split(":")
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"Invalid account specifier: {account_specifier!r}")
    return f"{parts[0]}:{parts[1]}", parts[2]


def chain_id_from_asset_id(asset_id: str) -> str:
    """Return the CAIP-2 chain id an asset id lives on."""
    chain_id, _, _ = asset_id.partition("/")
    return chain_id


def is_fee_asset_id(asset_id: str) -> bool:
    """Native (fee) assets use the ``slip44`` asset namespace."""
    _, _, asset_part = asset_id.partition("/")
    return asset_part.startswith("slip44:")
