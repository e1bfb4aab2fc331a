"""
ARMv7 (ARM mode) decode tables

Static, read-only lookup data for the decoder:

- INSTR_LABELS / INSTR_TYPES: default instruction and encoding class,
  indexed by bits 27-20 of the instruction word.
- BRNCHMISC_LOOKUP: bits 7-4 of the branch/misc class.
- OPLESS_LOOKUP: bits 2-0 of the hint class.
- DST_SRC_LOOKUP: bits 7-4 of the MOV (register) / shift class.

Plus the display name tables and their bounds-checked accessors.
"""

from enum import IntEnum


class Instr(IntEnum):
    """Instruction identities."""
    INVLD = 0

    # Data processing
    ADC = 1
    ADD = 2
    ADR = 3
    AND = 4
    BIC = 5
    CMN = 6
    CMP = 7
    EOR = 8
    MOV = 9
    MOVT = 10
    MOVW = 11
    MVN = 12
    ORR = 13
    RSB = 14
    RSC = 15
    SBC = 16
    SUB = 17
    TEQ = 18
    TST = 19

    # Shifts
    ASR = 20
    LSL = 21
    LSR = 22
    ROR = 23
    RRX = 24

    # Branch / exception generating
    B = 25
    BL = 26
    BLX = 27
    BX = 28
    BXJ = 29
    BKPT = 30
    SVC = 31

    # Status register access
    MSR = 32

    # Hints
    NOP = 33
    YIELD = 34
    WFE = 35
    WFI = 36
    SEV = 37

    # Recognised in the misc space but not decoded
    QSUB = 38
    SMLAW = 39
    SMULW = 40


class EncType(IntEnum):
    """Encoding classes (bit layouts)."""
    INVLD = 0
    ARITH_SHIFT = 1   # <op>{S} Rd, Rn, Rm {, <shift>}
    ARITH_IMM = 2     # <op>{S} Rd, Rn, #imm12
    BRNCHSC = 3       # B/BL #imm24, SVC #imm24
    BRNCHMISC = 4     # BX/BXJ/BLX Rm, BKPT #imm16, MSR <mask>, Rn
    MOV_IMM = 5       # MOV/MVN{S} Rd, #imm12, MOVW/MOVT Rd, #imm16
    CMP_OP = 6        # <op> Rn, Rm {, <shift>}
    CMP_IMM = 7       # <op> Rn, #imm12
    OPLESS = 8        # NOP/YIELD/WFE/WFI/SEV
    DST_SRC = 9       # MOV/LSL/LSR/ASR/ROR/RRX{S} Rd, Rm ...


class Register(IntEnum):
    R0 = 0
    R1 = 1
    R2 = 2
    R3 = 3
    R4 = 4
    R5 = 5
    R6 = 6
    R7 = 7
    R8 = 8
    R9 = 9
    R10 = 10
    R11 = 11
    R12 = 12
    SP = 13
    LR = 14
    PC = 15


# ===============================================================
# Primary table (bits 27-20)
# ===============================================================

# Data processing opcode, bits 24-21
_DP_OPCODES = (
    Instr.AND, Instr.EOR, Instr.SUB, Instr.RSB,
    Instr.ADD, Instr.ADC, Instr.SBC, Instr.RSC,
    Instr.TST, Instr.TEQ, Instr.CMP, Instr.CMN,
    Instr.ORR, Instr.MOV, Instr.BIC, Instr.MVN,
)

_COMPARES = (Instr.TST, Instr.TEQ, Instr.CMP, Instr.CMN)


def _build_primary():
    labels = [Instr.INVLD] * 256
    types = [EncType.INVLD] * 256

    for opcode, instr in enumerate(_DP_OPCODES):
        for s in (0, 1):
            reg_index = (opcode << 1) | s           # 000 oooo S
            imm_index = 0x20 | (opcode << 1) | s    # 001 oooo S

            if instr in _COMPARES:
                # S=0 slots belong to the misc / MOVW / MOVT / hint space
                if s == 0:
                    continue
                labels[reg_index], types[reg_index] = instr, EncType.CMP_OP
                labels[imm_index], types[imm_index] = instr, EncType.CMP_IMM
            elif instr == Instr.MOV:
                labels[reg_index], types[reg_index] = instr, EncType.DST_SRC
                labels[imm_index], types[imm_index] = instr, EncType.MOV_IMM
            elif instr == Instr.MVN:
                labels[reg_index], types[reg_index] = instr, EncType.ARITH_SHIFT
                labels[imm_index], types[imm_index] = instr, EncType.MOV_IMM
            else:
                labels[reg_index], types[reg_index] = instr, EncType.ARITH_SHIFT
                labels[imm_index], types[imm_index] = instr, EncType.ARITH_IMM

    # Miscellaneous instructions, op=01 (BX, BXJ, BLX, BKPT, MSR register)
    labels[0x12], types[0x12] = Instr.BX, EncType.BRNCHMISC

    # 16-bit immediate loads
    labels[0x30], types[0x30] = Instr.MOVW, EncType.MOV_IMM
    labels[0x34], types[0x34] = Instr.MOVT, EncType.MOV_IMM

    # MSR (immediate) / hints
    labels[0x32], types[0x32] = Instr.NOP, EncType.OPLESS

    for index in range(0xA0, 0xB0):
        labels[index], types[index] = Instr.B, EncType.BRNCHSC
    for index in range(0xB0, 0xC0):
        labels[index], types[index] = Instr.BL, EncType.BRNCHSC
    for index in range(0xF0, 0x100):
        labels[index], types[index] = Instr.SVC, EncType.BRNCHSC

    return tuple(labels), tuple(types)


INSTR_LABELS, INSTR_TYPES = _build_primary()


# ===============================================================
# Secondary tables
# ===============================================================

# bits 7-4 within the misc space (bits 27-20 = 0x12)
BRNCHMISC_LOOKUP = (
    Instr.MSR, Instr.BX, Instr.BXJ, Instr.BLX,
    Instr.INVLD, Instr.QSUB, Instr.INVLD, Instr.BKPT,
    Instr.SMLAW, Instr.INVLD, Instr.SMULW, Instr.INVLD,
    Instr.SMLAW, Instr.INVLD, Instr.SMULW, Instr.INVLD,
)

# bits 2-0 of the hint space (bits 27-20 = 0x32)
OPLESS_LOOKUP = (
    Instr.NOP, Instr.YIELD, Instr.WFE, Instr.WFI,
    Instr.SEV, Instr.INVLD, Instr.INVLD, Instr.INVLD,
)

# bits 7-4 of MOV (register) space; odd values with bit 7 set are the
# extra load/store encodings (STRH, LDRD, ...)
DST_SRC_LOOKUP = (
    Instr.LSL, Instr.LSL, Instr.LSR, Instr.LSR,
    Instr.ASR, Instr.ASR, Instr.ROR, Instr.ROR,
    Instr.LSL, Instr.INVLD, Instr.LSR, Instr.INVLD,
    Instr.ASR, Instr.INVLD, Instr.ROR, Instr.INVLD,
)


# ===============================================================
# Names
# ===============================================================

MNEMONICS = tuple(instr.name for instr in Instr)

ENCTYPES = tuple(enctype.name for enctype in EncType)

REGISTERS = tuple(reg.name for reg in Register)


def _by_index(table, index):
    if index < 0 or index >= len(table):
        return None
    return table[index]


def mnemonic_by_index(instr):
    """Mnemonic for an Instr value, or None."""
    return _by_index(MNEMONICS, instr)


def enctype_by_index(enctype):
    """Encoding class name for an EncType value, or None."""
    return _by_index(ENCTYPES, enctype)


def register_by_index(reg):
    """Register name (R0..R12, SP, LR, PC), or None."""
    return _by_index(REGISTERS, reg)
