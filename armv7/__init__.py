"""ARMv7 (ARM mode) instruction decoder."""

from armv7.decoder import Decoder, DecodeError, Instruction, decode
from armv7.conditions import Condition, condition_info, condition_index
from armv7.shifter import decode_shift
from armv7.tables import (
    Instr, EncType, Register,
    mnemonic_by_index, enctype_by_index, register_by_index,
)
from armv7.image import DecodeResult, disassemble, iter_words, load_image
