#!/usr/bin/env python3
"""
ARMv7 Decoder - Main Entry Point

Decodes ARM-mode instruction words given on the command line or read from
a raw binary image, one line per word.

Usage:
    python main.py E1A00000 E3A00001          # Decode words given as hex
    python main.py --file fw.bin --base 0x8000
    python main.py --file fw.bin --big-endian --strict
    python main.py --config decode.json --file fw.bin
    python main.py --conditions               # Print the condition table
    python main.py --help
"""

import sys
import os
import argparse

# Add the project root to the path
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# === Imports ===
from utils.config import Config
from utils.logger import Logger, LogLevel

from armv7.conditions import Condition, condition_info
from armv7.decoder import DecodeError, Decoder
from armv7.image import disassemble, load_image


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="ARMv7 (ARM mode) instruction decoder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Unconditional (cond = 0xF) and Thumb encodings are not decoded.
Words that cannot be decoded are reported and skipped unless --strict.
        """
    )
    parser.add_argument("words", nargs="*",
                        help="Instruction words in hex (e.g. E1A00000)")
    parser.add_argument("--file", default=None,
                        help="Raw binary image to decode")
    parser.add_argument("--base", default=None,
                        help="Address of the first word (default: 0)")
    parser.add_argument("--big-endian", action="store_true",
                        help="Image words are big endian")
    parser.add_argument("--max-words", type=int, default=None,
                        help="Decode at most N words (0 = unlimited)")
    parser.add_argument("--strict", action="store_true",
                        help="Stop at the first undecodable word")
    parser.add_argument("--config", default=None,
                        help="JSON config file")
    parser.add_argument("--log-level", default=None,
                        choices=["error", "warn", "info", "debug", "trace"],
                        help="Log level (default: info)")
    parser.add_argument("--log-file", default=None,
                        help="Log to file")
    parser.add_argument("--conditions", action="store_true",
                        help="Print the condition code table and exit")
    return parser.parse_args(argv)


def build_config(args):
    """Config file values, overridden by command line flags."""
    config = Config.load(args.config) if args.config else Config()
    config.update({
        "base_address": args.base,
        "endian": "big" if args.big_endian else None,
        "strict": True if args.strict else None,
        "log_level": args.log_level,
        "log_file": args.log_file,
        "max_words": args.max_words,
    })
    return config


def print_conditions(out=sys.stdout):
    """Condition code table."""
    print(f"{'cond':6s} {'sfx':4s} {'integer':30s} floating point", file=out)
    for cond in Condition:
        info = condition_info(cond)
        if info is None:
            continue
        suffix, meaning_integer, meaning_fp = info
        print(f"{cond.value:04b}   {suffix:4s} {meaning_integer:30s} {meaning_fp}",
              file=out)


def parse_words(texts):
    """Hex strings -> list of 32-bit words."""
    words = []
    for text in texts:
        word = int(text, 16)
        if not 0 <= word <= 0xFFFFFFFF:
            raise ValueError(f"Not a 32-bit word: {text}")
        words.append(word)
    return words


def main(argv=None, out=None):
    """Decoder front end. Returns the process exit status."""
    out = out or sys.stdout
    args = parse_args(argv)

    if args.conditions:
        print_conditions(out)
        return 0

    # === Config ===
    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"[CONFIG] {e}", file=sys.stderr)
        return 2

    # === Logger ===
    logger = Logger(level=LogLevel.from_name(config.log_level, LogLevel.INFO),
                    log_file=config.log_file)

    if config.source_path:
        logger.info("CONFIG", f"Loaded {config.source_path}")

    ok, errors = config.validate()
    if not ok:
        for err in errors:
            logger.error("CONFIG", err)
        logger.close()
        return 2

    # === Input ===
    try:
        if args.file:
            data = load_image(args.file)
            endian = config.endian
            logger.info("CLI", f"Loaded {args.file}: {len(data)} bytes")
        else:
            data = b"".join(w.to_bytes(4, "little") for w in parse_words(args.words))
            endian = "little"
    except (FileNotFoundError, ValueError) as e:
        logger.error("CLI", str(e))
        logger.close()
        return 2

    if config.max_words:
        data = data[:config.max_words * 4]

    # === Decode ===
    decoder = Decoder()
    decoded = failed = 0
    status = 0
    try:
        for result in disassemble(data, config.base_address, endian,
                                  logger=logger, strict=config.strict,
                                  decoder=decoder):
            if result.ok:
                decoded += 1
                print(f"{result.address:08X}:  {result.word:08X}  {result.inst!r}",
                      file=out)
            else:
                failed += 1
                print(f"{result.address:08X}:  {result.word:08X}  "
                      f"<undecodable: {result.error.reason}>", file=out)
    except DecodeError as e:
        logger.error("DECODE", f"Stopped: {e}")
        status = 1

    logger.info("CLI", f"Decoded {decoded} words, {failed} undecodable")
    logger.close()
    return status


if __name__ == "__main__":
    sys.exit(main() or 0)
