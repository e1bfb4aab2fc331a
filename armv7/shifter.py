"""
Shifter operand decoding.

Resolves the 2-bit shift type and 5-bit immediate amount of an ARM shifter
operand to the shift the instruction actually performs.
"""

from armv7.bits import SHIFT_LSL, SHIFT_LSR, SHIFT_ASR, SHIFT_ROR


SHIFT_NAMES = ("LSL", "LSR", "ASR", "ROR")


def decode_shift(shift_type, amount):
    """
    Decode (shift_type, imm5) -> (label, amount).

    LSL #0  -> (None, 0), no shift at all
    ROR #0  -> ("RRX", 0)
    LSR #0  -> ("LSR", 32)
    ASR #0  -> ("ASR", 32)
    """
    if shift_type not in (SHIFT_LSL, SHIFT_LSR, SHIFT_ASR, SHIFT_ROR):
        raise ValueError(f"Unknown shift type: {shift_type}")

    if amount == 0:
        if shift_type == SHIFT_LSL:
            return None, 0
        if shift_type == SHIFT_ROR:
            return "RRX", 0
        # LSR #0 and ASR #0 encode a shift by 32
        return SHIFT_NAMES[shift_type], 32

    return SHIFT_NAMES[shift_type], amount
