"""Binary and integer encodings of hereditary stratigraphic columns."""

from __future__ import annotations

from collections.abc import Iterable

from .column import (
    MAX_BIT_WIDTH,
    HereditaryStratigraphicColumn,
    Stratum,
    StratumRetentionPolicy,
    differentia_mask,
)

DEFAULT_NUM_STRATA_DEPOSITED_BYTE_WIDTH = 4
"""Default byte width of the ``num_strata_deposited`` packet header."""

_MAX_HEADER_BYTE_WIDTH = 8


class DeserializationError(ValueError):
    """Raised when encoded column data cannot be decoded."""


class InvalidBitWidthError(ValueError):
    """Raised when a differentia bit width lies outside ``1..=64``."""

    def __init__(self, bit_width: int) -> None:
        super().__init__(
            f"invalid differentia bit width {bit_width}, expected 1..={MAX_BIT_WIDTH}"
        )
        self.bit_width = bit_width


def _check_bit_width(bit_width: int) -> None:
    if not 1 <= bit_width <= MAX_BIT_WIDTH:
        raise InvalidBitWidthError(bit_width)


def _padding_bits(total_bits: int) -> int:
    return -total_bits % 8


def pack_differentiae(differentiae: Iterable[int], bit_width: int) -> bytes:
    """Pack differentiae at ``bit_width`` bits each, MSB first, zero-padded."""
    _check_bit_width(bit_width)
    mask = differentia_mask(bit_width)
    values = list(differentiae)
    if not values:
        return b""
    packed = 0
    for value in values:
        packed = (packed << bit_width) | (value & mask)
    total_bits = len(values) * bit_width
    padding = _padding_bits(total_bits)
    return (packed << padding).to_bytes((total_bits + padding) // 8, "big")


def unpack_differentiae(data: bytes, bit_width: int, count: int) -> list[int]:
    """Read ``count`` differentiae of ``bit_width`` bits each from ``data``."""
    _check_bit_width(bit_width)
    total_bits = count * bit_width
    padding = _padding_bits(total_bits)
    needed = (total_bits + padding) // 8
    if len(data) < needed:
        raise DeserializationError(
            f"not enough bytes: have {len(data)}, need {needed}"
        )
    packed = int.from_bytes(data[:needed], "big") >> padding
    mask = differentia_mask(bit_width)
    return [
        (packed >> (bit_width * (count - 1 - position))) & mask
        for position in range(count)
    ]


def col_to_packet(
    column: HereditaryStratigraphicColumn,
    num_strata_deposited_byte_width: int = DEFAULT_NUM_STRATA_DEPOSITED_BYTE_WIDTH,
) -> bytes:
    """Encode a column as a big-endian deposit count followed by packed differentiae."""
    if not 1 <= num_strata_deposited_byte_width <= _MAX_HEADER_BYTE_WIDTH:
        raise ValueError(
            "num_strata_deposited_byte_width must be in 1..=8, "
            f"got {num_strata_deposited_byte_width}"
        )
    num_deposited = column.num_strata_deposited
    if num_deposited >= 1 << (8 * num_strata_deposited_byte_width):
        raise ValueError(
            f"num_strata_deposited={num_deposited} does not fit in "
            f"{num_strata_deposited_byte_width} bytes"
        )
    header = num_deposited.to_bytes(num_strata_deposited_byte_width, "big")
    body = pack_differentiae(
        column.iter_retained_differentia(), column.differentia_bit_width
    )
    return header + body


def col_from_packet(
    packet: bytes,
    policy: StratumRetentionPolicy,
    differentia_bit_width: int,
    num_strata_deposited_byte_width: int = DEFAULT_NUM_STRATA_DEPOSITED_BYTE_WIDTH,
) -> HereditaryStratigraphicColumn:
    """Decode a column from a packet, recovering retained ranks from ``policy``."""
    if not 1 <= num_strata_deposited_byte_width <= _MAX_HEADER_BYTE_WIDTH:
        raise DeserializationError(
            f"invalid header width {num_strata_deposited_byte_width}, expected 1..=8"
        )
    _check_bit_width(differentia_bit_width)
    if len(packet) < num_strata_deposited_byte_width:
        raise DeserializationError("packet too short for header")

    num_deposited = int.from_bytes(packet[:num_strata_deposited_byte_width], "big")
    num_retained = policy.calc_num_strata_retained_exact(num_deposited)
    differentiae = unpack_differentiae(
        packet[num_strata_deposited_byte_width:], differentia_bit_width, num_retained
    )
    ranks = list(policy.iter_retained_ranks(num_deposited))
    if len(ranks) != len(differentiae):
        raise DeserializationError(
            f"rank count {len(ranks)} != differentia count {len(differentiae)}"
        )
    strata = (Stratum(rank, value) for rank, value in zip(ranks, differentiae))
    return HereditaryStratigraphicColumn.from_parts(
        policy, differentia_bit_width, strata, num_deposited
    )


def col_to_int(
    column: HereditaryStratigraphicColumn,
    num_strata_deposited_byte_width: int = DEFAULT_NUM_STRATA_DEPOSITED_BYTE_WIDTH,
) -> int:
    """Encode a column as an integer: its packet below a sentry bit at ``8 * len``."""
    packet = col_to_packet(column, num_strata_deposited_byte_width)
    return (1 << (8 * len(packet))) | int.from_bytes(packet, "big")


def col_from_int(
    value: int,
    policy: StratumRetentionPolicy,
    differentia_bit_width: int,
    num_strata_deposited_byte_width: int = DEFAULT_NUM_STRATA_DEPOSITED_BYTE_WIDTH,
) -> HereditaryStratigraphicColumn:
    """Decode a column from its sentry-bit integer encoding."""
    if value <= 0:
        raise DeserializationError("col_from_int: value has no sentry bit")
    num_bytes = (value.bit_length() - 1) // 8
    payload = value & ((1 << (8 * num_bytes)) - 1)
    packet = payload.to_bytes(num_bytes, "big")
    return col_from_packet(
        packet, policy, differentia_bit_width, num_strata_deposited_byte_width
    )