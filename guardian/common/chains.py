"""Wormhole chain identifiers."""

from __future__ import annotations

from enum import IntEnum


class ChainID(IntEnum):
    """Numeric chain identifiers as they appear on the wire."""

    UNSET = 0
    SOLANA = 1
    ETHEREUM = 2
    TERRA = 3
    BSC = 4
    POLYGON = 5
    AVALANCHE = 6
    OASIS = 7
    ALGORAND = 8
    AURORA = 9
    FANTOM = 10
    KARURA = 11
    ACALA = 12
    KLAYTN = 13
    CELO = 14
    NEAR = 15
    MOONBEAM = 16
    NEON = 17
    TERRA2 = 18
    INJECTIVE = 19
    OSMOSIS = 20
    SUI = 21
    APTOS = 22

    def __str__(self) -> str:
        return self.name.lower()


__all__ = ["ChainID"]
