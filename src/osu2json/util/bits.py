from __future__ import annotations

# masks may be IntFlag members; ~ on those complements within the enum only,
# so everything is reduced to plain ints first

def has_flag(value: int, flag: int) -> bool:
    return (int(value) & int(flag)) != 0

def clear_flag(value: int, flag: int) -> int:
    return int(value) & ~int(flag)

def extract_field(value: int, mask: int) -> int:
    """Value of a packed field, shifted down to its lowest set mask bit."""
    mask = int(mask)
    if not mask:
        return 0
    shift = (mask & -mask).bit_length() - 1
    return (int(value) & mask) >> shift
