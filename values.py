"""
rpnblocks runtime values
The closed set of values the evaluator pushes, binds and captures
"""

from typing import Callable, Tuple, Union
from dataclasses import dataclass, field

from error_handling import TypeMismatch


INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


# ============================================================================
# VALUE VARIANTS (Immutable Dataclasses)
# ============================================================================

@dataclass(frozen=True)
class Number:
  """A 32-bit signed integer"""
  value: int

  def __str__(self) -> str:
    return str(self.value)


@dataclass(frozen=True)
class OperatorName:
  """A bare word still waiting to be looked up"""
  name: str

  def __str__(self) -> str:
    return self.name


@dataclass(frozen=True)
class Symbol:
  """A quoted name, the left-hand side of def"""
  name: str

  def __str__(self) -> str:
    return f"/{self.name}"


@dataclass(frozen=True)
class Block:
  """Captured code, stored unexecuted"""
  body: Tuple['Value', ...] = ()

  def __str__(self) -> str:
    return show(self)


@dataclass(frozen=True)
class NativeOperation:
  """A built-in primitive; compares by name only"""
  name: str
  fn: Callable = field(compare=False, repr=False)

  def __call__(self, env) -> None:
    self.fn(env)

  def __str__(self) -> str:
    return f"<native {self.name}>"


Value = Union[Number, OperatorName, Symbol, Block, NativeOperation]


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def wrap_i32(n: int) -> int:
  """Wrap an integer into the signed 32-bit range"""
  return (n - INT32_MIN) % (2 ** 32) + INT32_MIN


def fits_i32(n: int) -> bool:
  return INT32_MIN <= n <= INT32_MAX


def type_name(value: Value) -> str:
  """Variant name used in error messages"""
  return type(value).__name__


def as_number(value: Value, op: str = "") -> int:
  """Integer payload of a Number, or TypeMismatch"""
  if isinstance(value, Number):
    return value.value
  raise TypeMismatch("Number", type_name(value), op)


def as_block(value: Value, op: str = "") -> Block:
  if isinstance(value, Block):
    return value
  raise TypeMismatch("Block", type_name(value), op)


def as_symbol(value: Value, op: str = "") -> str:
  """Name carried by a Symbol, or TypeMismatch"""
  if isinstance(value, Symbol):
    return value.name
  raise TypeMismatch("Symbol", type_name(value), op)


def display(value: Value) -> str:
  """Text written by puts; never shows what a block contains"""
  if isinstance(value, Number):
    return str(value.value)
  elif isinstance(value, (OperatorName, Symbol)):
    return value.name
  elif isinstance(value, Block):
    return "<block>"
  else:
    return "<native>"


def show(value: Value) -> str:
  """
  Source-like rendering used by stack dumps

  Examples:
    show(Number(3)) -> "3"
    show(Symbol("x")) -> "/x"
    show(Block((Number(3), Number(4)))) -> "{ 3 4 }"
  """
  if isinstance(value, Block):
    if not value.body:
      return "{ }"
    return "{ " + " ".join(show(item) for item in value.body) + " }"
  return str(value)
