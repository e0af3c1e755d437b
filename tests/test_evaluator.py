import math

import pytest

from flarkviz.evaluator import CompilationError, MilkdropEval
from flarkviz.expression_types import ExecutionContext, OpCode


def run(expression, context=None):
    evaluator = MilkdropEval()
    evaluator.compile(expression)
    return evaluator.execute(context if context is not None else ExecutionContext())


def test_assignment_to_builtin_returns_value_and_stores():
    ctx = ExecutionContext()
    assert run("zoom = 1.5", ctx) == 1.5
    assert ctx.zoom == 1.5


def test_assignment_to_custom_variable():
    ctx = ExecutionContext()
    run("foo = 2.5", ctx)
    assert ctx.variables["foo"] == 2.5


def test_assignment_to_q_variable():
    ctx = ExecutionContext()
    run("q3 = 0.75", ctx)
    assert ctx.q[2] == 0.75


def test_reads_context_variables():
    ctx = ExecutionContext(bass=0.5)
    assert run("-bass", ctx) == -0.5


def test_unknown_variable_reads_as_zero():
    assert run("nothing_here") == 0.0


def test_multiplication_binds_tighter_than_addition():
    assert run("2 + 3 * 4") == run("2 + (3 * 4)")
    assert run("(2 + 3) * 4") == run("(3 + 2) * 4")
    assert run("2 + 3 * 4") < run("(2 + 3) * 4")


def test_subtraction_is_left_associative():
    assert run("10 - 4 - 3") == run("(10 - 4) - 3")


def test_division_and_modulo_by_zero_give_zero():
    assert run("5 / 0") == 0.0
    assert run("5 % 0") == 0.0


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("1 < 2", 1.0),
        ("2 < 1", 0.0),
        ("2 >= 2", 1.0),
        ("3 <= 2", 0.0),
        ("1 == 1", 1.0),
        ("1 != 1", 0.0),
        ("1 && 0", 0.0),
        ("0 || 2", 1.0),
        ("above(3, 2)", 1.0),
        ("below(3, 2)", 0.0),
        ("equal(4, 4)", 1.0),
        ("sign(-3)", -1.0),
        ("sign(0)", 0.0),
    ],
)
def test_boolean_results(expression, expected):
    assert run(expression) == expected


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("sin(0.5)", math.sin(0.5)),
        ("cos(0.5)", math.cos(0.5)),
        ("atan2(0.3, 0.7)", math.atan2(0.3, 0.7)),
        ("pow(1.5, 2.5)", math.pow(1.5, 2.5)),
        ("sqrt(-4)", math.sqrt(4)),
        ("log(-2)", math.log(2)),
        ("min(0.25, 0.75)", 0.25),
        ("max(0.25, 0.75)", 0.75),
        ("if(0, 3, 7)", 7.0),
        ("if(1, 3, 7)", 3.0),
    ],
)
def test_functions(expression, expected):
    assert run(expression) == pytest.approx(expected)


def test_sqr_matches_multiplication():
    assert run("sqr(1.25)") == run("1.25 * 1.25")


def test_ieee_edge_results():
    assert run("log(0)") == -math.inf
    assert run("exp(1000)") == math.inf
    assert math.isnan(run("asin(2)"))


def test_rand_is_within_range():
    for _ in range(20):
        assert 0.0 <= run("rand(1)") <= 1.0


def test_compile_block_runs_statements_in_order():
    evaluator = MilkdropEval()
    evaluator.compile_block("a = 1; b = a + 1\n\n  c = b ;")
    ctx = ExecutionContext()
    result = evaluator.execute(ctx)
    assert ctx.variables["b"] == ctx.variables["a"] + 1
    assert ctx.variables["c"] == ctx.variables["b"]
    assert result == ctx.variables["c"]


def test_block_state_accumulates_over_executions():
    evaluator = MilkdropEval()
    evaluator.compile_block("rot = rot + 0.5")
    ctx = ExecutionContext()
    evaluator.execute(ctx)
    first = ctx.rot
    evaluator.execute(ctx)
    assert ctx.rot == first + 0.5


def test_variable_table_is_shared_in_block():
    evaluator = MilkdropEval()
    evaluator.compile_block("x = 1; y = x; x = y")
    assert evaluator.compiled.variable_names.count("x") == 1
    assert evaluator.compiled.bytecode[-1].opcode is OpCode.HALT


def test_unknown_function_raises():
    evaluator = MilkdropEval()
    with pytest.raises(CompilationError, match="Unknown function: foo"):
        evaluator.compile("foo(1)")
    assert evaluator.last_error == "Compilation error: Unknown function: foo"


def test_missing_close_paren_raises():
    with pytest.raises(CompilationError, match="Expected '\\)' after expression"):
        MilkdropEval().compile("(1 + 2")


def test_missing_function_close_paren_raises():
    with pytest.raises(CompilationError, match="after function arguments"):
        MilkdropEval().compile("sin(1")


def test_empty_expression_raises():
    with pytest.raises(CompilationError, match="Expected expression"):
        MilkdropEval().compile("")


def test_block_error_reports():
    evaluator = MilkdropEval()
    with pytest.raises(CompilationError):
        evaluator.compile_block("a = 1; b = *")
    assert evaluator.last_error.startswith("Compilation error:")


def test_function_without_arguments_underflows():
    evaluator = MilkdropEval()
    evaluator.compile("sin()")
    with pytest.raises(RuntimeError, match="Stack underflow"):
        evaluator.execute(ExecutionContext())


def test_execute_without_code_returns_zero():
    assert MilkdropEval().execute(ExecutionContext()) == 0.0


def test_clear_drops_compiled_code():
    evaluator = MilkdropEval()
    evaluator.compile("wave_r = 0.25")
    evaluator.clear()
    ctx = ExecutionContext()
    assert evaluator.execute(ctx) == 0.0
    assert ctx.wave_r == ExecutionContext().wave_r
    assert evaluator.compiled.bytecode == []


def test_recompile_replaces_previous_code():
    evaluator = MilkdropEval()
    evaluator.compile("dx = 0.1")
    evaluator.compile("dy = 0.2")
    ctx = ExecutionContext()
    evaluator.execute(ctx)
    assert ctx.dy == 0.2
    assert ctx.dx == ExecutionContext().dx
    assert evaluator.compiled.variable_names == ["dy"]