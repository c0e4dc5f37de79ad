"""
Utilities module for the rpnblocks interpreter
Operand helpers and operation factories shared by the native library
"""

from typing import Callable, List

from error_handling import StackUnderflow, DivisionByZero
from values import Number, Value, as_number, wrap_i32


# ==================== OPERAND UTILITIES ====================

def require_operands(env, op: str, count: int) -> None:
  """
  Check the operand stack holds at least `count` values

  Raises:
    StackUnderflow naming the operation
  """
  if len(env.stack) < count:
    raise StackUnderflow(op, count, len(env.stack))


def peek_operands(env, op: str, count: int) -> List[Value]:
  """
  Top `count` values in push order, without removing them

  Examples:
    stack [1, 2, 3]: peek_operands(env, "+", 2) -> [2, 3]
  """
  require_operands(env, op, count)
  return env.stack[len(env.stack) - count:]


def drop_operands(env, count: int) -> None:
  del env.stack[len(env.stack) - count:]


def number_operands(env, op: str, count: int) -> List[int]:
  """
  Integer payloads of the top `count` values, consumed only if all are Numbers

  Raises:
    StackUnderflow or TypeMismatch, leaving the stack untouched
  """
  values = [as_number(value, op) for value in peek_operands(env, op, count)]
  drop_operands(env, count)
  return values


# ==================== ARITHMETIC ====================

def truncating_div(left: int, right: int) -> int:
  """Integer division rounding toward zero"""
  if right == 0:
    raise DivisionByZero()
  quotient = abs(left) // abs(right)
  return quotient if (left < 0) == (right < 0) else -quotient


# ==================== BINARY OPERATION FACTORIES ====================

def binary_arithmetic_op(op: Callable[[int, int], int], op_name: str) -> Callable:
  """
  Factory for binary arithmetic operations

  Args:
    op: Python operator function (e.g., operator.add)
    op_name: Name for error messages

  Returns:
    Native procedure popping right then left and pushing `left op right`,
    wrapped to 32 bits
  """
  def arithmetic(env) -> None:
    left, right = number_operands(env, op_name, 2)
    env.push(Number(wrap_i32(op(left, right))))

  return arithmetic


def binary_comparison_op(op: Callable[[int, int], bool], op_name: str) -> Callable:
  """
  Factory for binary comparison operations

  Returns:
    Native procedure pushing 1 when `left op right` holds, else 0
  """
  def comparison(env) -> None:
    left, right = number_operands(env, op_name, 2)
    env.push(Number(1 if op(left, right) else 0))

  return comparison
