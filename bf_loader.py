from pathlib import Path
from typing import Union

from brainfuck import INSTRUCTION_BYTES
from bf_log import init_logger

logger = init_logger("BF_LOADER")


def filter_source(text: Union[str, bytes]) -> bytes:
    """Keep only instruction characters; everything else is a comment."""
    raw = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    source = bytes(b for b in raw if b in INSTRUCTION_BYTES)
    logger.debug("Filtered %d bytes down to %d instructions", len(raw), len(source))
    return source


def load_program_file(path) -> bytes:
    """Read a program file and return its filtered instruction bytes."""
    path = Path(path)
    logger.info("Loading program from %s", path)
    return filter_source(path.read_bytes())
