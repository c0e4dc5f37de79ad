"""
rpnblocks Standard Library
Native operations installed in every new environment
Each one is a contract against the operand stack
"""

from typing import Callable, Dict
import operator

from error_handling import IndexOutOfRange
from values import NativeOperation, Number, as_block, as_number, as_symbol, display, wrap_i32
from utilities import (
  binary_arithmetic_op,
  binary_comparison_op,
  drop_operands,
  number_operands,
  peek_operands,
  truncating_div,
)


# ============================================================================
# ARITHMETIC AND COMPARISON
# ============================================================================

rpn_add = binary_arithmetic_op(operator.add, "+")
rpn_sub = binary_arithmetic_op(operator.sub, "-")
rpn_mul = binary_arithmetic_op(operator.mul, "*")
rpn_lt = binary_comparison_op(operator.lt, "<")


def rpn_div(env) -> None:
  """left right / -> left / right, rounded toward zero"""
  left, right = (as_number(value, "/") for value in peek_operands(env, "/", 2))
  quotient = truncating_div(left, right)
  drop_operands(env, 2)
  env.push(Number(wrap_i32(quotient)))


# ============================================================================
# CONTROL FLOW AND BINDING
# ============================================================================

def rpn_if(env) -> None:
  """{cond} {true} {false} if

  Runs the condition block, pops its verdict and runs the true block when
  the verdict is nonzero, the false block otherwise.
  """
  condition, when_true, when_false = (
      as_block(value, "if") for value in peek_operands(env, "if", 3))
  drop_operands(env, 3)

  env.evaluate_block(condition)
  verdict, = number_operands(env, "if", 1)
  env.evaluate_block(when_true if verdict != 0 else when_false)


def rpn_def(env) -> None:
  """/name value def

  The value is evaluated once before binding, so a block stays a block and
  a name resolves to whatever it is bound to right now.
  """
  name_value, _ = peek_operands(env, "def", 2)
  name = as_symbol(name_value, "def")

  value = env.pop("def")
  env.evaluate(value)
  resolved = env.pop("def")
  env.pop("def")
  env.bind(name, resolved)


# ============================================================================
# OUTPUT
# ============================================================================

def rpn_puts(env) -> None:
  """Write the display form of the top value to the output sink"""
  env.write(display(env.pop("puts")))


# ============================================================================
# STACK MANIPULATION
# ============================================================================

def rpn_pop(env) -> None:
  env.pop("pop")


def rpn_dup(env) -> None:
  env.push(env.peek("dup"))


def rpn_exch(env) -> None:
  below, top = peek_operands(env, "exch", 2)
  env.stack[-2:] = [top, below]


def rpn_index(env) -> None:
  """n index -> copy of the value n places below the top (0 is the top)"""
  n = as_number(env.peek("index"), "index")
  depth = len(env.stack) - 1
  if n < 0 or n >= depth:
    raise IndexOutOfRange(n, depth)
  env.pop("index")
  env.push(env.stack[-1 - n])


# ============================================================================
# BUILTIN TABLE
# ============================================================================

BUILTIN_OPERATIONS: Dict[str, Callable] = {
  "+": rpn_add,
  "-": rpn_sub,
  "*": rpn_mul,
  "/": rpn_div,
  "<": rpn_lt,
  "if": rpn_if,
  "def": rpn_def,
  "puts": rpn_puts,
  "pop": rpn_pop,
  "dup": rpn_dup,
  "exch": rpn_exch,
  "index": rpn_index,
}


def create_builtin_bindings() -> Dict[str, NativeOperation]:
  """Fresh name -> NativeOperation table for a new environment"""
  return {name: NativeOperation(name, fn) for name, fn in BUILTIN_OPERATIONS.items()}
