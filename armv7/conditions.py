"""
ARMv7 condition codes

Maps the 4-bit condition field (bits 31-28) to its mnemonic suffix and to
its meaning after an integer compare and after a floating-point compare
(ARM ARM, table A8-1).  Supports the reverse lookup from suffix text.
"""

from enum import IntEnum


class Condition(IntEnum):
    """Condition field values."""
    EQ = 0   # Z==1
    NE = 1   # Z==0
    CS = 2   # C==1 (HS)
    CC = 3   # C==0 (LO)
    MI = 4   # N==1
    PL = 5   # N==0
    VS = 6   # V==1
    VC = 7   # V==0
    HI = 8   # C==1 and Z==0
    LS = 9   # C==0 or Z==1
    GE = 10  # N==V
    LT = 11  # N!=V
    GT = 12  # Z==0 and N==V
    LE = 13  # Z==1 or N!=V
    AL = 14  # Always
    NV = 15  # Unconditional instruction space, not decoded


# (suffix, integer meaning, floating-point meaning)
# Indexes 0-14 match the condition field; the last two are legacy aliases.
CONDITION_CODES = (
    ("EQ", "Equal", "Equal"),
    ("NE", "Not equal", "Not equal, or unordered"),
    ("CS", "Carry set", "Greater than, equal, or unordered"),
    ("CC", "Carry clear", "Less than"),
    ("MI", "Minus, negative", "Less than"),
    ("PL", "Plus, positive or zero", "Greater than, equal, or unordered"),
    ("VS", "Overflow", "Unordered"),
    ("VC", "No overflow", "Not unordered"),
    ("HI", "Unsigned higher", "Greater than, or unordered"),
    ("LS", "Unsigned lower or same", "Less than or equal"),
    ("GE", "Signed greater than or equal", "Greater than or equal"),
    ("LT", "Signed less than", "Less than, or unordered"),
    ("GT", "Signed greater than", "Greater than"),
    ("LE", "Signed less than or equal", "Less than, equal, or unordered"),
    ("AL", "Always (unconditional)", "Always (unconditional)"),

    # alias for CS
    ("HS", "Carry set", "Greater than, equal, or unordered"),
    # alias for CC
    ("LO", "Carry clear", "Less than"),
)

# Alias rows sit after AL; their field value is the canonical entry's.
_ALIASES = {
    "HS": Condition.CS,
    "LO": Condition.CC,
}


def condition_info(condition, omit_always=False):
    """
    Look up a condition field.

    Returns (suffix, integer_meaning, fp_meaning), or None when the field is
    outside 0-14.  With omit_always the AL suffix is returned as "", since
    assembly syntax leaves it out.
    """
    if condition < Condition.EQ or condition > Condition.AL:
        return None

    suffix, meaning_integer, meaning_fp = CONDITION_CODES[condition]
    if omit_always and condition == Condition.AL:
        suffix = ""
    return suffix, meaning_integer, meaning_fp


def condition_index(condition_code):
    """
    Reverse lookup: suffix text -> condition field.

    "" means AL.  Matching is exact and case-sensitive.  Returns None for
    unknown text.
    """
    if condition_code is None:
        return None

    if condition_code == "":
        return int(Condition.AL)

    for index, (suffix, _, _) in enumerate(CONDITION_CODES):
        if suffix == condition_code:
            return int(_ALIASES.get(suffix, index))

    return None
