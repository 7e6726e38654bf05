#!/usr/bin/env python3
"""
Brainfuck Interpreter

Brainfuck is an esoteric programming language with only 8 commands:
    >   Move the pointer to the right
    <   Move the pointer to the left
    +   Increment the memory cell at the pointer
    -   Decrement the memory cell at the pointer
    .   Output the character signified by the cell at the pointer
    ,   Input a character and store it in the cell at the pointer
    [   Jump past the matching ] if the cell at the pointer is 0
    ]   Jump back to the matching [ if the cell at the pointer is nonzero

All other characters are treated as comments and are filtered out before a
program reaches the interpreter (see bf_loader).

The tape holds MEMORY_SIZE unsigned 8-bit cells. Cell arithmetic and pointer
movement both wrap around, so the pointer is always a valid index.
"""

from enum import IntEnum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from bf_io import LineInput, StreamOutput
from bf_log import init_logger

MEMORY_SIZE = 30000

logger = init_logger("BF_ENGINE")


class BrainfuckError(Exception):
    """Base class for every condition that stops a run."""

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.position = position

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self):
        if self.position is None:
            return self.message
        return f"{self.message} (at position {self.position})"


class UnknownInstruction(BrainfuckError):
    def __init__(self, byte: int, position: Optional[int] = None):
        super().__init__(f"Unknown instruction byte {byte}", position)
        self.byte = byte


class MalformedProgram(BrainfuckError):
    pass


class InputExhausted(BrainfuckError):
    def __init__(self, position: Optional[int] = None):
        super().__init__("Input exhausted", position)


class TapeBoundsViolation(BrainfuckError):
    def __init__(self, index: int):
        super().__init__(f"Tape index {index} outside [0, {MEMORY_SIZE})", None)
        self.index = index


class Instruction(IntEnum):
    """The eight commands, valued by the byte that spells them."""
    INCREMENT = ord('+')
    DECREMENT = ord('-')
    MOVE_RIGHT = ord('>')
    MOVE_LEFT = ord('<')
    OUTPUT = ord('.')
    INPUT = ord(',')
    JUMP_IF_ZERO = ord('[')
    JUMP_IF_NONZERO = ord(']')

    @classmethod
    def decode(cls, byte: int, position: Optional[int] = None) -> "Instruction":
        try:
            return cls(byte)
        except ValueError:
            raise UnknownInstruction(byte, position) from None

    @property
    def char(self) -> str:
        return chr(self.value)


INSTRUCTION_BYTES = frozenset(int(i) for i in Instruction)

Program = Tuple[Instruction, ...]
JumpTable = Mapping[int, int]


def decode_program(source: Union[bytes, Iterable[int]]) -> Program:
    """Decode filtered instruction bytes into an immutable Program."""
    return tuple(Instruction.decode(b, i) for i, b in enumerate(source))


def build_jump_table(program: Sequence[Instruction]) -> JumpTable:
    """Build a read-only table mapping each bracket position to its match."""
    jump_table = {}
    stack = []

    for i, cmd in enumerate(program):
        if cmd == Instruction.JUMP_IF_ZERO:
            stack.append(i)
        elif cmd == Instruction.JUMP_IF_NONZERO:
            if not stack:
                raise MalformedProgram("Unmatched ']'", i)
            start = stack.pop()
            jump_table[start] = i
            jump_table[i] = start

    if stack:
        raise MalformedProgram("Unmatched '['", stack[-1])

    logger.debug("Jump table built: %d bracket pairs over %d instructions",
                 len(jump_table) // 2, len(program))
    return MappingProxyType(jump_table)


class BrainfuckInterpreter:
    def __init__(self, source, output=None, input_source=None,
                 jump_table: Optional[JumpTable] = None):
        """source is either filtered instruction bytes or a decoded Program.

        output needs write_byte(int); input_source needs read_byte() returning
        an int or None once exhausted. Both default to the process streams.
        A prebuilt jump_table may be shared between interpreters running the
        same program.
        """
        if isinstance(source, tuple) and all(isinstance(c, Instruction) for c in source):
            self.program: Program = source
        else:
            self.program = decode_program(source)
        self.jump_table = build_jump_table(self.program) if jump_table is None else jump_table
        self.output = output if output is not None else StreamOutput()
        self.input_source = input_source if input_source is not None else LineInput()

        self.memory = np.zeros(MEMORY_SIZE, dtype=np.uint8)
        self.pointer = 0
        self.instruction_pointer = 0
        self.steps = 0

    def reset(self):
        self.memory[:] = 0
        self.pointer = 0
        self.instruction_pointer = 0
        self.steps = 0

    @property
    def finished(self) -> bool:
        return self.instruction_pointer >= len(self.program)

    def peek(self, index: Optional[int] = None) -> int:
        """Value of the cell at index (default: the current cell)."""
        if index is None:
            index = self.pointer
        if not 0 <= index < MEMORY_SIZE:
            raise TapeBoundsViolation(index)
        return int(self.memory[index])

    def _jump_target(self) -> int:
        try:
            return self.jump_table[self.instruction_pointer]
        except KeyError:
            raise MalformedProgram("No jump target", self.instruction_pointer) from None

    def step(self) -> bool:
        """Execute one instruction. Returns False once the program has ended."""
        if self.finished:
            return False

        cmd = self.program[self.instruction_pointer]
        ptr = self.pointer

        if cmd == Instruction.INCREMENT:
            self.memory[ptr] = (int(self.memory[ptr]) + 1) % 256

        elif cmd == Instruction.DECREMENT:
            self.memory[ptr] = (int(self.memory[ptr]) - 1) % 256

        elif cmd == Instruction.MOVE_RIGHT:
            self.pointer = (ptr + 1) % MEMORY_SIZE

        elif cmd == Instruction.MOVE_LEFT:
            self.pointer = (ptr - 1) % MEMORY_SIZE

        elif cmd == Instruction.OUTPUT:
            self.output.write_byte(int(self.memory[ptr]))

        elif cmd == Instruction.INPUT:
            value = self.input_source.read_byte()
            if value is None:
                raise InputExhausted(self.instruction_pointer)
            self.memory[ptr] = value

        elif cmd == Instruction.JUMP_IF_ZERO:
            if self.memory[ptr] == 0:
                self.instruction_pointer = self._jump_target()

        elif cmd == Instruction.JUMP_IF_NONZERO:
            if self.memory[ptr] != 0:
                self.instruction_pointer = self._jump_target()

        self.instruction_pointer += 1
        self.steps += 1
        return True

    def run(self):
        """Execute until the instruction pointer leaves the program."""
        logger.info("Running %d instructions", len(self.program))
        while self.step():
            pass
        logger.info("Finished after %d steps", self.steps)
