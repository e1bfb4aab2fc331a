"""
ARMv7 bitfield helpers

All words are handled as 32-bit unsigned values.
"""


def to_signed32(value):
    """Convert a 32-bit unsigned value to signed."""
    value &= 0xFFFFFFFF
    if value & 0x80000000:
        return value - 0x100000000
    return value


def sign_extend(value, bits):
    """Sign extend from `bits` to 32 bits (unsigned result)."""
    sign_bit = 1 << (bits - 1)
    mask = (1 << bits) - 1
    value &= mask
    if value & sign_bit:
        value |= 0xFFFFFFFF << bits
    return value & 0xFFFFFFFF


def bits(word, hi, lo):
    """Extract bits [hi:lo] (inclusive)."""
    return (word >> lo) & ((1 << (hi - lo + 1)) - 1)


def bit(word, n):
    return (word >> n) & 1


# Shift types as encoded in the instruction word
SHIFT_LSL = 0
SHIFT_LSR = 1
SHIFT_ASR = 2
SHIFT_ROR = 3
