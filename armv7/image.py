from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from .decoder import DecodeError, Decoder, Instruction


@dataclass(frozen=True)
class DecodeResult:
    address: int
    word: int
    inst: Optional[Instruction] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.inst is not None


def load_image(path: Path) -> bytes:
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Image not found: {path}")
    with path.open("rb") as handle:
        return handle.read()


def iter_words(data: bytes, endian: str = "little") -> Iterator[int]:
    if endian not in ("little", "big"):
        raise ValueError(f"Unknown endian: {endian!r}")
    # a trailing partial word is ignored
    for offset in range(0, len(data) - 3, 4):
        yield int.from_bytes(data[offset : offset + 4], endian)


def disassemble(
    data: bytes,
    base_address: int = 0,
    endian: str = "little",
    logger=None,
    strict: bool = False,
    decoder: Optional[Decoder] = None,
) -> Iterator[DecodeResult]:
    decoder = decoder or Decoder()
    for index, word in enumerate(iter_words(data, endian)):
        address = (base_address + index * 4) & 0xFFFFFFFF
        try:
            inst = decoder.decode(word)
        except DecodeError as exc:
            if logger is not None:
                logger.undecodable(address, word, exc.reason)
            if strict:
                raise
            yield DecodeResult(address, word, error=exc)
            continue
        if logger is not None:
            logger.decoded(address, inst)
        yield DecodeResult(address, word, inst=inst)
