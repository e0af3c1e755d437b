"""Core data types for the expression language: tokens, bytecode and runtime context."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto

Q_VARIABLE_COUNT = 32


class TokenType(Enum):
    """Kinds of token produced by the lexer."""

    NUMBER = auto()
    IDENTIFIER = auto()
    PLUS = auto()
    MINUS = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    MODULO = auto()
    POWER = auto()
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    COMMA = auto()
    SEMICOLON = auto()
    ASSIGN = auto()
    EQUAL = auto()
    NOT_EQUAL = auto()
    LESS = auto()
    GREATER = auto()
    LESS_EQUAL = auto()
    GREATER_EQUAL = auto()
    LOGICAL_AND = auto()
    LOGICAL_OR = auto()
    END = auto()


@dataclass(frozen=True)
class Token:
    """A single lexical token."""

    type: TokenType
    text: str = ""
    value: float = 0.0


class OpCode(Enum):
    """Operations understood by the stack machine."""

    PUSH = auto()
    LOAD = auto()
    STORE = auto()

    ADD = auto()
    SUBTRACT = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    MODULO = auto()
    NEGATE = auto()

    SIN = auto()
    COS = auto()
    TAN = auto()
    ASIN = auto()
    ACOS = auto()
    ATAN = auto()
    ATAN2 = auto()
    SQRT = auto()
    ABS = auto()
    SQR = auto()
    POW = auto()
    EXP = auto()
    LOG = auto()
    LOG10 = auto()

    MIN = auto()
    MAX = auto()
    SIGN = auto()
    RAND = auto()
    IF = auto()
    EQUAL = auto()
    ABOVE = auto()
    BELOW = auto()

    CMP_EQUAL = auto()
    CMP_NOT_EQUAL = auto()
    CMP_LESS = auto()
    CMP_GREATER = auto()
    CMP_LESS_EQUAL = auto()
    CMP_GREATER_EQUAL = auto()

    AND = auto()
    OR = auto()

    JUMP = auto()
    JUMP_IF_FALSE = auto()
    HALT = auto()


@dataclass(frozen=True)
class Instruction:
    """One bytecode instruction with an optional constant or variable slot."""

    opcode: OpCode
    operand: float = 0.0
    var_index: int = -1


@dataclass
class CompiledExpression:
    """Bytecode plus the table of variable names it refers to."""

    bytecode: list[Instruction] = field(default_factory=list)
    variable_names: list[str] = field(default_factory=list)

    def clear(self) -> None:
        """Drop all bytecode and variable names."""
        self.bytecode.clear()
        self.variable_names.clear()

    def add_variable(self, name: str) -> int:
        """Return the slot of ``name``, adding it to the table if new."""
        try:
            return self.variable_names.index(name)
        except ValueError:
            self.variable_names.append(name)
            return len(self.variable_names) - 1


_BUILTIN_NAMES = frozenset(
    {
        "bass", "mid", "treb", "bass_att", "mid_att", "treb_att",
        "time", "frame", "fps",
        "zoom", "rot", "cx", "cy", "dx", "dy", "warp", "sx", "sy",
        "wave_r", "wave_g", "wave_b", "wave_a",
        "x", "y", "rad", "ang",
    }
)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _q_index(name: str) -> int | None:
    """Return the zero-based q slot named by ``name``, or None if it is not one.

    Names of two or more characters starting with ``q`` must carry a leading
    integer after the ``q``; anything else raises ValueError.
    """
    if len(name) < 2 or name[0] != "q":
        return None
    match = _LEADING_INT.match(name, 1)
    if match is None:
        raise ValueError(f"invalid q variable name: {name!r}")
    index = int(match.group(1)) - 1
    return index if 0 <= index < Q_VARIABLE_COUNT else None


@dataclass
class ExecutionContext:
    """Variables visible to running expressions."""

    variables: dict[str, float] = field(default_factory=dict)

    bass: float = 0.0
    mid: float = 0.0
    treb: float = 0.0
    bass_att: float = 0.0
    mid_att: float = 0.0
    treb_att: float = 0.0

    time: float = 0.0
    frame: float = 0.0
    fps: float = 60.0

    zoom: float = 1.0
    rot: float = 0.0
    cx: float = 0.5
    cy: float = 0.5
    dx: float = 0.0
    dy: float = 0.0
    warp: float = 1.0
    sx: float = 1.0
    sy: float = 1.0

    wave_r: float = 1.0
    wave_g: float = 1.0
    wave_b: float = 1.0
    wave_a: float = 1.0

    q: list[float] = field(default_factory=lambda: [0.0] * Q_VARIABLE_COUNT)

    x: float = 0.0
    y: float = 0.0
    rad: float = 0.0
    ang: float = 0.0

    def get_variable(self, name: str) -> float:
        """Read a built-in, q or custom variable; unknown names read as 0.0."""
        if name in _BUILTIN_NAMES:
            return getattr(self, name)
        index = _q_index(name)
        if index is not None:
            return self.q[index]
        return self.variables.get(name, 0.0)

    def set_variable(self, name: str, value: float) -> None:
        """Write a built-in, q or custom variable."""
        if name in _BUILTIN_NAMES:
            setattr(self, name, value)
            return
        index = _q_index(name)
        if index is not None:
            self.q[index] = value
            return
        self.variables[name] = value