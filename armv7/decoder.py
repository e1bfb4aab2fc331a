"""
ARMv7 Instruction Decoder (ARM mode)

Decodes one 32-bit ARM instruction word into an immutable Instruction.

Decoding runs in two phases: the encoding class extractor fills a mutable
draft, then the alias rewrite rules (ADR, MOV/NOP, RRX) are applied and the
draft is frozen.  Words that cannot be decoded raise DecodeError; no partial
record is ever returned.

Unconditional instructions (cond == 0b1111) are not decoded.
"""

from dataclasses import dataclass, fields

from armv7.bits import bits, bit, sign_extend, to_signed32, SHIFT_LSL, SHIFT_ROR
from armv7.conditions import Condition, condition_info
from armv7.shifter import decode_shift, SHIFT_NAMES
from armv7.tables import (
    Instr, EncType, Register,
    INSTR_LABELS, INSTR_TYPES,
    BRNCHMISC_LOOKUP, OPLESS_LOOKUP, DST_SRC_LOOKUP,
    mnemonic_by_index, register_by_index,
)


class DecodeError(ValueError):
    """The word is not decodable by this decoder."""

    def __init__(self, word, reason):
        super().__init__(f"0x{word:08X}: {reason}")
        self.word = word
        self.reason = reason


@dataclass(frozen=True, repr=False)
class Instruction:
    """
    Decoded instruction.

    Only the fields of the encoding class are meaningful; everything else is
    left at its zero default.
    """
    raw: int = 0                        # original instruction word
    cond: Condition = Condition.EQ
    op: Instr = Instr.INVLD
    encoding: EncType = EncType.INVLD
    setflags: bool = False
    rd: int = 0
    rn: int = 0
    rm: int = 0
    rs: int = 0                         # register holding the shift amount
    shift_type: int = SHIFT_LSL
    shift_n: int = 0                    # imm5 shift amount
    shift_is_reg: bool = False
    imm: int = 0                        # assembled / sign extended immediate
    add: bool = False                   # ADR: add (True) or subtract the offset

    @property
    def mnemonic(self):
        return mnemonic_by_index(self.op)

    def condition_suffix(self, omit_always=True):
        return condition_info(self.cond, omit_always)[0]

    def shift(self):
        """
        Effective shift of the shifter operand.

        Immediate form: decode_shift(shift_type, shift_n).
        Register form: (label, rs), the amount lives in Rs.
        """
        if self.shift_is_reg:
            return SHIFT_NAMES[self.shift_type], self.rs
        return decode_shift(self.shift_type, self.shift_n)

    def __repr__(self):
        parts = [self.mnemonic]
        if self.setflags and self.encoding not in (EncType.CMP_OP, EncType.CMP_IMM):
            parts[0] += "S"
        if self.cond != Condition.AL:
            parts[0] += f".{self.cond.name}"
        parts.append(f"[{self.encoding.name}]")

        if self.encoding in (EncType.ARITH_SHIFT, EncType.ARITH_IMM,
                             EncType.MOV_IMM, EncType.DST_SRC):
            parts.append(f"Rd={register_by_index(self.rd)}")
        if self.encoding in (EncType.ARITH_SHIFT, EncType.ARITH_IMM,
                             EncType.CMP_OP, EncType.CMP_IMM) or self.op == Instr.MSR:
            if self.op != Instr.ADR:
                parts.append(f"Rn={register_by_index(self.rn)}")
        if self.encoding in (EncType.ARITH_SHIFT, EncType.CMP_OP, EncType.DST_SRC) \
                or self.op in (Instr.BX, Instr.BXJ, Instr.BLX):
            parts.append(f"Rm={register_by_index(self.rm)}")
        if self.encoding in (EncType.ARITH_SHIFT, EncType.CMP_OP, EncType.DST_SRC):
            label, amount = self.shift()
            if label is None:
                pass
            elif self.shift_is_reg:
                parts.append(f"{label} {register_by_index(amount)}")
            elif label == "RRX":
                parts.append(label)
            else:
                parts.append(f"{label} #{amount}")
        if self.encoding in (EncType.ARITH_IMM, EncType.MOV_IMM, EncType.CMP_IMM,
                             EncType.BRNCHSC) \
                or self.op in (Instr.BKPT, Instr.MSR):
            if self.imm < 0:
                parts.append(f"imm=-0x{-self.imm:X}")
            else:
                parts.append(f"imm=0x{self.imm:X}")
        if self.op == Instr.ADR:
            parts.append("add" if self.add else "sub")
        return f"Inst(0x{self.raw:08X}: {' '.join(parts)})"


class _Draft:
    """Mutable record filled during a single decode pass."""

    __slots__ = [f.name for f in fields(Instruction)]

    def __init__(self):
        for f in fields(Instruction):
            setattr(self, f.name, f.default)

    def freeze(self):
        return Instruction(**{name: getattr(self, name) for name in self.__slots__})


class Decoder:
    """
    ARM (A32) instruction decoder.

    Stateless: one Decoder may be shared between threads.
    """

    def __init__(self):
        self._extractors = {
            EncType.ARITH_SHIFT: self._decode_arith_shift,
            EncType.ARITH_IMM: self._decode_arith_imm,
            EncType.BRNCHSC: self._decode_branch_svc,
            EncType.BRNCHMISC: self._decode_branch_misc,
            EncType.MOV_IMM: self._decode_mov_imm,
            EncType.CMP_OP: self._decode_cmp_op,
            EncType.CMP_IMM: self._decode_cmp_imm,
            EncType.OPLESS: self._decode_opless,
            EncType.DST_SRC: self._decode_dst_src,
        }
        missing = set(EncType) - set(self._extractors) - {EncType.INVLD}
        assert not missing, f"No extractor for {missing}"

    def decode(self, word):
        """
        Decode a 32-bit instruction word.

        Returns Instruction, raises DecodeError.
        """
        if not 0 <= word <= 0xFFFFFFFF:
            raise ValueError(f"Not a 32-bit word: {word!r}")

        inst = _Draft()
        inst.raw = word
        inst.cond = Condition(bits(word, 31, 28))

        if inst.cond == Condition.NV:
            raise DecodeError(word, "unconditional instructions are not supported")

        self._decode_cond(word, inst)
        self._rewrite(inst)
        return inst.freeze()

    def _decode_cond(self, word, inst):
        """Dispatch on bits 27-20."""
        index = bits(word, 27, 20)
        inst.op = INSTR_LABELS[index]
        inst.encoding = INSTR_TYPES[index]

        if inst.encoding == EncType.INVLD:
            raise DecodeError(word, f"invalid encoding (bits 27-20 = 0x{index:02X})")

        self._extractors[inst.encoding](word, inst)

    # ===============================================================
    # Field extractors
    # ===============================================================

    @staticmethod
    def _decode_shifter(word, inst):
        """Rm plus an immediate or register controlled shift."""
        inst.rm = bits(word, 3, 0)
        inst.shift_type = bits(word, 6, 5)
        inst.shift_is_reg = bool(bit(word, 4))
        if inst.shift_is_reg:
            inst.rs = bits(word, 11, 8)
        else:
            inst.shift_n = bits(word, 11, 7)

    def _decode_arith_shift(self, word, inst):
        """<op>{S} Rd, Rn, Rm {, <shift>}"""
        inst.setflags = bool(bit(word, 20))
        inst.rd = bits(word, 15, 12)
        inst.rn = bits(word, 19, 16)
        self._decode_shifter(word, inst)

    def _decode_arith_imm(self, word, inst):
        """<op>{S} Rd, Rn, #imm12"""
        inst.setflags = bool(bit(word, 20))
        inst.rd = bits(word, 15, 12)
        inst.rn = bits(word, 19, 16)
        inst.imm = bits(word, 11, 0)

    def _decode_branch_svc(self, word, inst):
        """B/BL #imm24 (word offset), SVC #imm24."""
        inst.imm = bits(word, 23, 0)

        # B and BL: sign extend imm24 and scale to a byte offset
        if inst.op != Instr.SVC:
            inst.imm = to_signed32(sign_extend(inst.imm, 24) << 2)

    def _decode_branch_misc(self, word, inst):
        """Miscellaneous space: the real instruction comes from bits 7-4."""
        inst.op = BRNCHMISC_LOOKUP[bits(word, 7, 4)]

        if inst.op == Instr.BKPT:
            inst.imm = (bits(word, 19, 8) << 4) | bits(word, 3, 0)
        elif inst.op in (Instr.BX, Instr.BXJ, Instr.BLX):
            inst.rm = bits(word, 3, 0)
        elif inst.op == Instr.MSR:
            inst.rn = bits(word, 3, 0)
            inst.imm = bits(word, 19, 18)   # mask: write_nzcvq, write_g
        else:
            # QSUB, SMLAW, SMULW and unallocated slots
            raise DecodeError(word, f"{inst.op.name} is not decoded in the misc space")

    def _decode_mov_imm(self, word, inst):
        """MOV/MVN{S} Rd, #imm12; MOVW/MOVT Rd, #imm16"""
        inst.rd = bits(word, 15, 12)
        inst.imm = bits(word, 11, 0)

        if inst.op in (Instr.MOV, Instr.MVN):
            inst.setflags = bool(bit(word, 20))
        else:
            # MOVW / MOVT: imm4 in bits 19-16
            inst.imm |= bits(word, 19, 16) << 12

    def _decode_cmp_op(self, word, inst):
        """TST/TEQ/CMP/CMN Rn, Rm {, <shift>}"""
        inst.setflags = True
        inst.rn = bits(word, 19, 16)
        self._decode_shifter(word, inst)

    def _decode_cmp_imm(self, word, inst):
        """TST/TEQ/CMP/CMN Rn, #imm12"""
        inst.setflags = True
        inst.rn = bits(word, 19, 16)
        inst.imm = bits(word, 11, 0)

    def _decode_opless(self, word, inst):
        """Hints: the instruction comes from bits 2-0."""
        inst.op = OPLESS_LOOKUP[bits(word, 2, 0)]
        if inst.op == Instr.INVLD:
            raise DecodeError(word, f"unallocated hint 0x{bits(word, 7, 0):02X}")

    def _decode_dst_src(self, word, inst):
        """MOV (register) space: LSL/LSR/ASR/ROR{S} Rd, Rm, <Rs | #imm5>"""
        inst.op = DST_SRC_LOOKUP[bits(word, 7, 4)]

        # extra load/store encodings (STRH, LDRD, ...) share this index
        if inst.op == Instr.INVLD:
            raise DecodeError(word, "load/store encoding in the MOV (register) space")

        inst.setflags = bool(bit(word, 20))
        inst.rd = bits(word, 15, 12)
        self._decode_shifter(word, inst)

    # ===============================================================
    # Alias rewrites
    # ===============================================================

    def _rewrite(self, inst):
        if inst.encoding == EncType.ARITH_IMM:
            self._rewrite_adr(inst)
        elif inst.encoding == EncType.DST_SRC and not inst.shift_is_reg:
            self._rewrite_shift_alias(inst)

    @staticmethod
    def _rewrite_adr(inst):
        """ADD/SUB Rd, PC, #imm12 -> ADR Rd, <label>"""
        if inst.op in (Instr.ADD, Instr.SUB) and not inst.setflags \
                and inst.rn == Register.PC:
            inst.add = bool(bit(inst.raw, 23))
            inst.op = Instr.ADR
            inst.rn = 0

    @staticmethod
    def _rewrite_shift_alias(inst):
        """LSL #0 -> MOV (NOP when Rd == Rm), ROR #0 -> RRX"""
        if inst.op == Instr.LSL and inst.shift_type == SHIFT_LSL and inst.shift_n == 0:
            inst.op = Instr.MOV

            # the manual only names MOV r0, r0, any Rd == Rm is a no-op
            if inst.rd == inst.rm:
                inst.op = Instr.NOP
        elif inst.op == Instr.ROR and inst.shift_type == SHIFT_ROR and inst.shift_n == 0:
            inst.op = Instr.RRX


_DECODER = Decoder()


def decode(word):
    """Decode one instruction word with the shared decoder."""
    return _DECODER.decode(word)
