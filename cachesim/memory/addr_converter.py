from typing import NamedTuple

from cachesim.entity.model import ADDRESS_BITS

ADDRESS_MASK = (1 << ADDRESS_BITS) - 1


class AddressParts(NamedTuple):
    tag: int
    set_index: int
    offset: int


def mask(bits: int) -> int:
    """Return an integer with the lowest ``bits`` bits set."""
    if not 0 <= bits <= ADDRESS_BITS:
        raise ValueError(f"mask width out of range: {bits}")
    return (1 << bits) - 1


def decompose(addr: int, s: int, b: int) -> AddressParts:
    """Split a 64-bit address into tag, set index and block offset."""
    addr &= ADDRESS_MASK
    return AddressParts(
        tag=addr >> (s + b),
        set_index=(addr >> b) & mask(s),
        offset=addr & mask(b),
    )


__all__ = ["ADDRESS_MASK", "AddressParts", "decompose", "mask"]
