"""Compiler and stack machine for the preset expression language."""

from __future__ import annotations

import math
import random
from typing import Callable

from flarkviz.expression_types import (
    CompiledExpression,
    ExecutionContext,
    Instruction,
    OpCode,
    Token,
    TokenType,
)
from flarkviz.lexer import tokenize


class CompilationError(Exception):
    """Raised when an expression cannot be compiled."""


class _SyntaxError(Exception):
    """Internal parse failure, reported to callers as CompilationError."""


_FUNCTIONS: dict[str, OpCode] = {
    "sin": OpCode.SIN,
    "cos": OpCode.COS,
    "tan": OpCode.TAN,
    "asin": OpCode.ASIN,
    "acos": OpCode.ACOS,
    "atan": OpCode.ATAN,
    "atan2": OpCode.ATAN2,
    "sqrt": OpCode.SQRT,
    "abs": OpCode.ABS,
    "sqr": OpCode.SQR,
    "pow": OpCode.POW,
    "exp": OpCode.EXP,
    "log": OpCode.LOG,
    "log10": OpCode.LOG10,
    "min": OpCode.MIN,
    "max": OpCode.MAX,
    "sign": OpCode.SIGN,
    "rand": OpCode.RAND,
    "if": OpCode.IF,
    "equal": OpCode.EQUAL,
    "above": OpCode.ABOVE,
    "below": OpCode.BELOW,
}

_COMPARISONS: dict[TokenType, OpCode] = {
    TokenType.EQUAL: OpCode.CMP_EQUAL,
    TokenType.NOT_EQUAL: OpCode.CMP_NOT_EQUAL,
    TokenType.LESS: OpCode.CMP_LESS,
    TokenType.GREATER: OpCode.CMP_GREATER,
    TokenType.LESS_EQUAL: OpCode.CMP_LESS_EQUAL,
    TokenType.GREATER_EQUAL: OpCode.CMP_GREATER_EQUAL,
}

_TERM_OPS = {TokenType.PLUS: OpCode.ADD, TokenType.MINUS: OpCode.SUBTRACT}

_FACTOR_OPS = {
    TokenType.MULTIPLY: OpCode.MULTIPLY,
    TokenType.DIVIDE: OpCode.DIVIDE,
    TokenType.MODULO: OpCode.MODULO,
}


class _Parser:
    """Recursive-descent parser emitting bytecode for one statement."""

    def __init__(self, tokens: list[Token], compiled: CompiledExpression) -> None:
        self._tokens = tokens
        self._pos = 0
        self._compiled = compiled

    # -- token helpers -------------------------------------------------

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _previous(self) -> Token:
        return self._tokens[self._pos - 1]

    def _at_end(self) -> bool:
        return self._peek().type is TokenType.END

    def _check(self, token_type: TokenType) -> bool:
        return not self._at_end() and self._peek().type is token_type

    def _advance(self) -> Token:
        if not self._at_end():
            self._pos += 1
        return self._previous()

    def _match(self, token_type: TokenType) -> bool:
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _match_any(self, table: dict[TokenType, OpCode]) -> OpCode | None:
        for token_type, opcode in table.items():
            if self._match(token_type):
                return opcode
        return None

    def _emit(self, opcode: OpCode, operand: float = 0.0, var_index: int = -1) -> None:
        self._compiled.bytecode.append(Instruction(opcode, operand, var_index))

    # -- grammar -------------------------------------------------------

    def statement(self) -> None:
        if self._check(TokenType.IDENTIFIER):
            ident = self._advance()
            if self._match(TokenType.ASSIGN):
                self._expression()
                slot = self._compiled.add_variable(ident.text)
                self._emit(OpCode.STORE, var_index=slot)
                return
            self._pos -= 1
        self._expression()

    def _expression(self) -> None:
        self._logical_or()

    def _logical_or(self) -> None:
        self._logical_and()
        while self._match(TokenType.LOGICAL_OR):
            self._logical_and()
            self._emit(OpCode.OR)

    def _logical_and(self) -> None:
        self._comparison()
        while self._match(TokenType.LOGICAL_AND):
            self._comparison()
            self._emit(OpCode.AND)

    def _comparison(self) -> None:
        self._term()
        opcode = self._match_any(_COMPARISONS)
        if opcode is not None:
            self._term()
            self._emit(opcode)

    def _term(self) -> None:
        self._factor()
        while (opcode := self._match_any(_TERM_OPS)) is not None:
            self._factor()
            self._emit(opcode)

    def _factor(self) -> None:
        self._unary()
        while (opcode := self._match_any(_FACTOR_OPS)) is not None:
            self._unary()
            self._emit(opcode)

    def _unary(self) -> None:
        if self._match(TokenType.MINUS):
            self._unary()
            self._emit(OpCode.NEGATE)
        elif self._match(TokenType.PLUS):
            self._unary()
        else:
            self._primary()

    def _primary(self) -> None:
        if self._match(TokenType.NUMBER):
            self._emit(OpCode.PUSH, operand=self._previous().value)
            return

        if self._match(TokenType.IDENTIFIER):
            name = self._previous().text
            if self._check(TokenType.LEFT_PAREN):
                self._function_call(name)
                return
            slot = self._compiled.add_variable(name)
            self._emit(OpCode.LOAD, var_index=slot)
            return

        if self._match(TokenType.LEFT_PAREN):
            self._expression()
            if not self._match(TokenType.RIGHT_PAREN):
                raise _SyntaxError("Expected ')' after expression")
            return

        raise _SyntaxError("Expected expression")

    def _function_call(self, name: str) -> None:
        if not self._match(TokenType.LEFT_PAREN):
            raise _SyntaxError("Expected '(' after function name")

        if not self._check(TokenType.RIGHT_PAREN):
            self._expression()
            while self._match(TokenType.COMMA):
                self._expression()

        if not self._match(TokenType.RIGHT_PAREN):
            raise _SyntaxError("Expected ')' after function arguments")

        opcode = _FUNCTIONS.get(name)
        if opcode is None:
            raise _SyntaxError(f"Unknown function: {name}")
        self._emit(opcode)


# -- numeric helpers with IEEE results instead of Python exceptions ---------


def _ieee(fn: Callable[[float], float]) -> Callable[[float], float]:
    def wrapped(v: float) -> float:
        try:
            return fn(v)
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf

    return wrapped


def _log(fn: Callable[[float], float]) -> Callable[[float], float]:
    def wrapped(v: float) -> float:
        v = abs(v)
        if v == 0.0:
            return -math.inf
        return fn(v)

    return wrapped


def _is_odd_integer(v: float) -> bool:
    return math.isfinite(v) and v == math.floor(v) and int(v) % 2 == 1


def _pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return -math.inf if base < 0 and _is_odd_integer(exponent) else math.inf
    except ValueError:
        if base == 0.0 and exponent < 0:
            return math.inf
        return math.nan


def _fmod(a: float, b: float) -> float:
    if b == 0.0:
        return 0.0
    try:
        return math.fmod(a, b)
    except ValueError:
        return math.nan


def _sign(v: float) -> float:
    if v > 0.0:
        return 1.0
    if v < 0.0:
        return -1.0
    return 0.0


_UNARY: dict[OpCode, Callable[[float], float]] = {
    OpCode.NEGATE: lambda v: -v,
    OpCode.SIN: _ieee(math.sin),
    OpCode.COS: _ieee(math.cos),
    OpCode.TAN: _ieee(math.tan),
    OpCode.ASIN: _ieee(math.asin),
    OpCode.ACOS: _ieee(math.acos),
    OpCode.ATAN: math.atan,
    OpCode.SQRT: lambda v: math.sqrt(abs(v)),
    OpCode.ABS: abs,
    OpCode.SQR: lambda v: v * v,
    OpCode.EXP: _ieee(math.exp),
    OpCode.LOG: _log(math.log),
    OpCode.LOG10: _log(math.log10),
    OpCode.SIGN: _sign,
    OpCode.RAND: lambda v: random.random() * v,
}

_BINARY: dict[OpCode, Callable[[float, float], float]] = {
    OpCode.ADD: lambda a, b: a + b,
    OpCode.SUBTRACT: lambda a, b: a - b,
    OpCode.MULTIPLY: lambda a, b: a * b,
    OpCode.DIVIDE: lambda a, b: a / b if b != 0.0 else 0.0,
    OpCode.MODULO: _fmod,
    OpCode.ATAN2: math.atan2,
    OpCode.POW: _pow,
    OpCode.MIN: min,
    OpCode.MAX: max,
    OpCode.EQUAL: lambda a, b: float(a == b),
    OpCode.ABOVE: lambda a, b: float(a > b),
    OpCode.BELOW: lambda a, b: float(a < b),
    OpCode.CMP_EQUAL: lambda a, b: float(a == b),
    OpCode.CMP_NOT_EQUAL: lambda a, b: float(a != b),
    OpCode.CMP_LESS: lambda a, b: float(a < b),
    OpCode.CMP_GREATER: lambda a, b: float(a > b),
    OpCode.CMP_LESS_EQUAL: lambda a, b: float(a <= b),
    OpCode.CMP_GREATER_EQUAL: lambda a, b: float(a >= b),
    OpCode.AND: lambda a, b: float(a != 0.0 and b != 0.0),
    OpCode.OR: lambda a, b: float(a != 0.0 or b != 0.0),
}


class MilkdropEval:
    """Compiles preset equations to bytecode and runs them on a stack machine."""

    def __init__(self) -> None:
        self.compiled = CompiledExpression()
        self.last_error = ""

    def clear(self) -> None:
        """Forget any compiled code and the last error."""
        self.compiled.clear()
        self.last_error = ""

    def _compile_statement(self, statement: str) -> None:
        _Parser(tokenize(statement), self.compiled).statement()

    def _fail(self, error: Exception) -> CompilationError:
        self.last_error = f"Compilation error: {error}"
        return CompilationError(self.last_error)

    def compile(self, expression: str) -> None:
        """Compile a single statement, replacing any previous code."""
        self.clear()
        try:
            self._compile_statement(expression)
        except (_SyntaxError, ValueError) as error:
            raise self._fail(error) from error
        self.compiled.bytecode.append(Instruction(OpCode.HALT))

    def compile_block(self, code: str) -> None:
        """Compile statements separated by semicolons and newlines."""
        self.clear()
        statements = [
            stripped
            for line in code.split("\n")
            for part in line.split(";")
            if (stripped := part.strip(" \t\r\n"))
        ]
        try:
            for statement in statements:
                self._compile_statement(statement)
        except (_SyntaxError, ValueError) as error:
            raise self._fail(error) from error
        self.compiled.bytecode.append(Instruction(OpCode.HALT))

    def execute(self, context: ExecutionContext) -> float:
        """Run the compiled code against ``context`` and return the last value."""
        stack: list[float] = []

        def pop() -> float:
            if not stack:
                raise RuntimeError("Stack underflow")
            return stack.pop()

        names = self.compiled.variable_names
        for instr in self.compiled.bytecode:
            op = instr.opcode
            if op is OpCode.PUSH:
                stack.append(instr.operand)
            elif op is OpCode.LOAD:
                stack.append(context.get_variable(names[instr.var_index]))
            elif op is OpCode.STORE:
                value = pop()
                context.set_variable(names[instr.var_index], value)
                stack.append(value)
            elif op in _UNARY:
                stack.append(_UNARY[op](pop()))
            elif op in _BINARY:
                b = pop()
                a = pop()
                stack.append(_BINARY[op](a, b))
            elif op is OpCode.IF:
                false_value = pop()
                true_value = pop()
                condition = pop()
                stack.append(true_value if condition != 0.0 else false_value)
            elif op is OpCode.HALT:
                break
            else:
                raise RuntimeError("Unknown opcode")

        return stack[-1] if stack else 0.0