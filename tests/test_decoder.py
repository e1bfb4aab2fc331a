import dataclasses
import unittest

from armv7.conditions import Condition
from armv7.decoder import DecodeError, Decoder, Instruction, decode
from armv7.tables import EncType, Instr, Register


class ArithmeticTests(unittest.TestCase):
    def test_add_register(self) -> None:
        inst = decode(0xE0810002)  # ADD r0, r1, r2
        self.assertEqual(inst.op, Instr.ADD)
        self.assertEqual(inst.encoding, EncType.ARITH_SHIFT)
        self.assertEqual(inst.cond, Condition.AL)
        self.assertFalse(inst.setflags)
        self.assertEqual((inst.rd, inst.rn, inst.rm), (0, 1, 2))
        self.assertFalse(inst.shift_is_reg)
        self.assertEqual(inst.shift(), (None, 0))

    def test_adds_immediate_shift(self) -> None:
        inst = decode(0xE0910182)  # ADDS r0, r1, r2, LSL #3
        self.assertTrue(inst.setflags)
        self.assertEqual(inst.shift_type, 0)
        self.assertEqual(inst.shift_n, 3)
        self.assertEqual(inst.shift(), ("LSL", 3))

    def test_register_shift(self) -> None:
        inst = decode(0xE0810332)  # ADD r0, r1, r2, LSR r3
        self.assertTrue(inst.shift_is_reg)
        self.assertEqual(inst.rs, 3)
        self.assertEqual(inst.shift_n, 0)
        self.assertEqual(inst.shift(), ("LSR", 3))

    def test_rrx_shifter_operand(self) -> None:
        inst = decode(0xE0810062)  # ADD r0, r1, r2, RRX
        self.assertEqual(inst.op, Instr.ADD)
        self.assertEqual(inst.shift(), ("RRX", 0))

    def test_conditional(self) -> None:
        inst = decode(0x10810002)  # ADDNE r0, r1, r2
        self.assertEqual(inst.cond, Condition.NE)
        self.assertEqual(inst.condition_suffix(), "NE")

    def test_add_immediate(self) -> None:
        inst = decode(0xE2810004)  # ADD r0, r1, #4
        self.assertEqual(inst.op, Instr.ADD)
        self.assertEqual(inst.encoding, EncType.ARITH_IMM)
        self.assertEqual((inst.rd, inst.rn, inst.imm), (0, 1, 4))
        self.assertFalse(inst.add)

    def test_adr_add(self) -> None:
        inst = decode(0xE28F0008)  # ADD r0, PC, #8
        self.assertEqual(inst.op, Instr.ADR)
        self.assertEqual(inst.rn, 0)
        self.assertEqual(inst.rd, 0)
        self.assertEqual(inst.imm, 8)
        self.assertTrue(inst.add)

    def test_adr_sub(self) -> None:
        inst = decode(0xE24F3010)  # SUB r3, PC, #16
        self.assertEqual(inst.op, Instr.ADR)
        self.assertEqual(inst.rn, 0)
        self.assertEqual(inst.rd, 3)
        self.assertEqual(inst.imm, 0x10)
        self.assertFalse(inst.add)

    def test_adds_pc_is_not_adr(self) -> None:
        inst = decode(0xE29F0008)  # ADDS r0, PC, #8
        self.assertEqual(inst.op, Instr.ADD)
        self.assertEqual(inst.rn, Register.PC)
        self.assertTrue(inst.setflags)

    def test_mvn_register(self) -> None:
        inst = decode(0xE1E01002)  # MVN r1, r2
        self.assertEqual(inst.op, Instr.MVN)
        self.assertEqual(inst.encoding, EncType.ARITH_SHIFT)
        self.assertEqual((inst.rd, inst.rm), (1, 2))


class BranchTests(unittest.TestCase):
    def test_branch_backward(self) -> None:
        inst = decode(0xEAFFFFFE)  # B .
        self.assertEqual(inst.op, Instr.B)
        self.assertEqual(inst.encoding, EncType.BRNCHSC)
        self.assertEqual(inst.imm, -8)

    def test_branch_forward(self) -> None:
        inst = decode(0xEB000001)  # BL +4
        self.assertEqual(inst.op, Instr.BL)
        self.assertEqual(inst.imm, 4)

    def test_branch_most_negative(self) -> None:
        inst = decode(0xEA800000)
        self.assertEqual(inst.imm, -(1 << 25))

    def test_svc_not_scaled(self) -> None:
        inst = decode(0xEFFFFFFF)  # SVC #0xFFFFFF
        self.assertEqual(inst.op, Instr.SVC)
        self.assertEqual(inst.imm, 0xFFFFFF)

    def test_bx(self) -> None:
        inst = decode(0xE12FFF1E)  # BX lr
        self.assertEqual(inst.op, Instr.BX)
        self.assertEqual(inst.encoding, EncType.BRNCHMISC)
        self.assertEqual(inst.rm, Register.LR)

    def test_blx_bxj(self) -> None:
        self.assertEqual(decode(0xE12FFF33).op, Instr.BLX)
        self.assertEqual(decode(0xE12FFF33).rm, 3)
        self.assertEqual(decode(0xE12FFF22).op, Instr.BXJ)
        self.assertEqual(decode(0xE12FFF22).rm, 2)

    def test_bkpt(self) -> None:
        inst = decode(0xE1212374)  # BKPT #0x1234
        self.assertEqual(inst.op, Instr.BKPT)
        self.assertEqual(inst.imm, 0x1234)

    def test_msr_register(self) -> None:
        inst = decode(0xE128F000)  # MSR APSR_nzcvq, r0
        self.assertEqual(inst.op, Instr.MSR)
        self.assertEqual(inst.rn, 0)
        self.assertEqual(inst.imm, 0b10)

        inst = decode(0xE12CF005)  # MSR APSR_nzcvqg, r5
        self.assertEqual(inst.rn, 5)
        self.assertEqual(inst.imm, 0b11)

    def test_unmodeled_misc(self) -> None:
        for word in (0xE1220051,   # QSUB
                     0xE12000A1,   # SMULWB
                     0xE1200081,   # SMLAWB
                     0xE1200041):  # unallocated
            with self.assertRaises(DecodeError):
                decode(word)


class MoveCompareTests(unittest.TestCase):
    def test_mov_immediate(self) -> None:
        inst = decode(0xE3A00001)  # MOV r0, #1
        self.assertEqual(inst.op, Instr.MOV)
        self.assertEqual(inst.encoding, EncType.MOV_IMM)
        self.assertEqual((inst.rd, inst.imm), (0, 1))
        self.assertFalse(inst.setflags)

    def test_movs_mvn(self) -> None:
        inst = decode(0xE3B010FF)  # MOVS r1, #0xFF
        self.assertTrue(inst.setflags)
        self.assertEqual(inst.imm, 0xFF)
        inst = decode(0xE3E02000)  # MVN r2, #0
        self.assertEqual(inst.op, Instr.MVN)
        self.assertEqual(inst.rd, 2)

    def test_movw_movt(self) -> None:
        inst = decode(0xE3010234)  # MOVW r0, #0x1234
        self.assertEqual(inst.op, Instr.MOVW)
        self.assertEqual(inst.imm, 0x1234)
        self.assertFalse(inst.setflags)

        inst = decode(0xE34A1BCD)  # MOVT r1, #0xABCD
        self.assertEqual(inst.op, Instr.MOVT)
        self.assertEqual(inst.rd, 1)
        self.assertEqual(inst.imm, 0xABCD)

    def test_cmp_register(self) -> None:
        inst = decode(0xE1500001)  # CMP r0, r1
        self.assertEqual(inst.op, Instr.CMP)
        self.assertEqual(inst.encoding, EncType.CMP_OP)
        self.assertTrue(inst.setflags)
        self.assertEqual((inst.rn, inst.rm, inst.rd), (0, 1, 0))

    def test_cmp_register_shift(self) -> None:
        inst = decode(0xE1520413)  # CMP r2, r3, LSL r4
        self.assertEqual(inst.rn, 2)
        self.assertEqual(inst.rm, 3)
        self.assertTrue(inst.shift_is_reg)
        self.assertEqual(inst.rs, 4)

    def test_compare_immediate(self) -> None:
        inst = decode(0xE31000FF)  # TST r0, #0xFF
        self.assertEqual(inst.op, Instr.TST)
        self.assertEqual(inst.encoding, EncType.CMP_IMM)
        self.assertTrue(inst.setflags)
        self.assertEqual(inst.imm, 0xFF)

        inst = decode(0xE3710001)  # CMN r1, #1
        self.assertEqual(inst.op, Instr.CMN)
        self.assertEqual(inst.rn, 1)


class HintTests(unittest.TestCase):
    def test_nop(self) -> None:
        inst = decode(0xE320F000)
        self.assertEqual(inst.op, Instr.NOP)
        self.assertEqual(inst.encoding, EncType.OPLESS)
        self.assertEqual(inst.cond, Condition.AL)
        self.assertEqual((inst.rd, inst.rn, inst.rm, inst.rs, inst.imm), (0, 0, 0, 0, 0))

    def test_hints(self) -> None:
        self.assertEqual(decode(0xE320F001).op, Instr.YIELD)
        self.assertEqual(decode(0xE320F002).op, Instr.WFE)
        self.assertEqual(decode(0xE320F003).op, Instr.WFI)
        self.assertEqual(decode(0xE320F004).op, Instr.SEV)

    def test_unallocated_hint(self) -> None:
        with self.assertRaises(DecodeError):
            decode(0xE320F005)


class ShiftAliasTests(unittest.TestCase):
    def test_mov_register(self) -> None:
        inst = decode(0xE1A00001)  # MOV r0, r1
        self.assertEqual(inst.op, Instr.MOV)
        self.assertEqual(inst.encoding, EncType.DST_SRC)
        self.assertEqual((inst.rd, inst.rm), (0, 1))

    def test_nop_alias(self) -> None:
        inst = decode(0xE1A00000)  # MOV r0, r0
        self.assertEqual(inst.op, Instr.NOP)
        self.assertEqual(decode(0xE1A05005).op, Instr.NOP)

    def test_movs(self) -> None:
        inst = decode(0xE1B00001)  # MOVS r0, r1
        self.assertEqual(inst.op, Instr.MOV)
        self.assertTrue(inst.setflags)

    def test_lsl_immediate(self) -> None:
        inst = decode(0xE1A00101)  # LSL r0, r1, #2
        self.assertEqual(inst.op, Instr.LSL)
        self.assertEqual(inst.shift_n, 2)
        self.assertEqual(inst.shift(), ("LSL", 2))

    def test_lsr_32(self) -> None:
        inst = decode(0xE1A00021)  # LSR r0, r1, #32
        self.assertEqual(inst.op, Instr.LSR)
        self.assertEqual(inst.shift_n, 0)
        self.assertEqual(inst.shift(), ("LSR", 32))

    def test_rrx_alias(self) -> None:
        inst = decode(0xE1A00061)  # ROR r0, r1, #0
        self.assertEqual(inst.op, Instr.RRX)
        self.assertEqual(inst.rm, 1)
        self.assertEqual(inst.shift(), ("RRX", 0))

    def test_ror_immediate(self) -> None:
        inst = decode(0xE1A00261)  # ROR r0, r1, #4
        self.assertEqual(inst.op, Instr.ROR)
        self.assertEqual(inst.shift_n, 4)

    def test_register_controlled_shift(self) -> None:
        inst = decode(0xE1A00211)  # LSL r0, r1, r2
        self.assertEqual(inst.op, Instr.LSL)
        self.assertTrue(inst.shift_is_reg)
        self.assertEqual((inst.rd, inst.rm, inst.rs), (0, 1, 2))

        # no MOV rewrite for a register shift, even with Rs == 0
        inst = decode(0xE1A00010)  # LSL r0, r0, r0
        self.assertEqual(inst.op, Instr.LSL)

    def test_extra_load_store(self) -> None:
        with self.assertRaises(DecodeError):
            decode(0xE1A000B1)


class DecodeFailureTests(unittest.TestCase):
    def test_unconditional(self) -> None:
        with self.assertRaises(DecodeError) as ctx:
            decode(0xF57FF04F)  # DSB SY
        self.assertEqual(ctx.exception.word, 0xF57FF04F)
        self.assertIn("unconditional", ctx.exception.reason)

    def test_invalid_encoding(self) -> None:
        with self.assertRaises(DecodeError):
            decode(0xE5910000)  # LDR r0, [r1]

    def test_decode_error_is_value_error(self) -> None:
        self.assertTrue(issubclass(DecodeError, ValueError))

    def test_word_out_of_range(self) -> None:
        with self.assertRaises(ValueError):
            decode(-1)
        with self.assertRaises(ValueError):
            decode(1 << 32)


class RecordTests(unittest.TestCase):
    def test_pure(self) -> None:
        decoder = Decoder()
        first = decoder.decode(0xE28F0008)
        decoder.decode(0xE1A00061)
        self.assertEqual(decoder.decode(0xE28F0008), first)
        self.assertEqual(decode(0xE28F0008), first)

    def test_frozen(self) -> None:
        inst = decode(0xE3A00001)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            inst.imm = 2

    def test_raw_preserved(self) -> None:
        self.assertEqual(decode(0xE1A00061).raw, 0xE1A00061)

    def test_default_record(self) -> None:
        inst = Instruction()
        self.assertEqual(inst.op, Instr.INVLD)
        self.assertEqual(inst.imm, 0)

    def test_repr(self) -> None:
        self.assertIn("ADR", repr(decode(0xE28F0008)))
        self.assertIn("imm=-0x8", repr(decode(0xEAFFFFFE)))
        self.assertIn("ADDS.NE", repr(decode(0x10910002)))
        self.assertIn("LSR R3", repr(decode(0xE0810332)))


if __name__ == "__main__":
    unittest.main()
