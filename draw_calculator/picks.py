"""ABI codec for the per-draw pick index lists carried by a calculate call.

Pick lists travel as a single ``uint256[][]`` blob, one inner list per draw,
the same layout a Solidity ``abi.encode(uint256[][])`` produces.
"""

from __future__ import annotations

from typing import List, Sequence, Union

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import to_bytes

from .errors import InvalidPickEncoding

PICKS_ABI_TYPE = "uint256[][]"

EncodedPicks = Union[bytes, bytearray, str]


def _as_bytes(data: EncodedPicks) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if isinstance(data, str):
        try:
            return to_bytes(hexstr=data)
        except ValueError as exc:
            raise InvalidPickEncoding(f"encoded picks are not valid hex: {exc}") from exc
    raise InvalidPickEncoding(
        f"encoded picks must be bytes or a hex string, got {type(data).__name__}"
    )


def decode_picks(data: EncodedPicks) -> List[List[int]]:
    """Decode a ``uint256[][]`` blob into one list of pick indices per draw."""
    raw = _as_bytes(data)
    try:
        (pick_lists,) = decode([PICKS_ABI_TYPE], raw)
    except DecodingError as exc:
        raise InvalidPickEncoding(f"unable to decode picks: {exc}") from exc
    return [list(picks) for picks in pick_lists]


def encode_picks(pick_lists: Sequence[Sequence[int]]) -> bytes:
    try:
        return encode([PICKS_ABI_TYPE], [[list(picks) for picks in pick_lists]])
    except EncodingError as exc:
        raise InvalidPickEncoding(f"unable to encode picks: {exc}") from exc
