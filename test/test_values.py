"""
Tests for the rpnblocks value model
"""

import pytest
from values import (
  Number, OperatorName, Symbol, Block, NativeOperation,
  as_number, as_block, as_symbol, display, show, wrap_i32,
)
from error_handling import TypeMismatch


class TestConversions:
  """Fallible conversions"""

  def test_as_number(self):
    assert as_number(Number(7)) == 7

  def test_as_number_rejects_block(self):
    with pytest.raises(TypeMismatch) as info:
      as_number(Block(), "+")
    assert info.value.expected == "Number"
    assert info.value.found == "Block"
    assert info.value.op == "+"

  def test_as_block(self):
    block = Block((Number(1),))
    assert as_block(block) is block

  def test_as_block_rejects_number(self):
    with pytest.raises(TypeMismatch):
      as_block(Number(1))

  def test_as_symbol(self):
    assert as_symbol(Symbol("x")) == "x"

  def test_as_symbol_rejects_operator_name(self):
    with pytest.raises(TypeMismatch) as info:
      as_symbol(OperatorName("x"), "def")
    assert info.value.found == "OperatorName"


class TestEquality:

  def test_blocks_compare_structurally(self):
    left = Block((Number(1), Block((OperatorName("x"),))))
    right = Block((Number(1), Block((OperatorName("x"),))))
    assert left == right
    assert left != Block((Number(1),))

  def test_native_operations_compare_by_name(self):
    assert NativeOperation("+", lambda env: None) == NativeOperation("+", print)
    assert NativeOperation("+", print) != NativeOperation("-", print)

  def test_symbol_is_not_operator_name(self):
    assert Symbol("x") != OperatorName("x")


class TestDisplay:
  """puts form and dump form"""

  def test_display_forms(self):
    assert display(Number(-12)) == "-12"
    assert display(Symbol("x")) == "x"
    assert display(OperatorName("dup")) == "dup"

  def test_display_hides_block_contents(self):
    assert display(Block((Number(1), Number(2)))) == "<block>"
    assert display(NativeOperation("+", print)) == "<native>"

  def test_show_nested_block(self):
    block = Block((Number(3), Block((OperatorName("x"), Symbol("y")))))
    assert show(block) == "{ 3 { x /y } }"
    assert show(Block()) == "{ }"


class TestWrapping:

  def test_wrap_i32(self):
    assert wrap_i32(2 ** 31) == -(2 ** 31)
    assert wrap_i32(-(2 ** 31) - 1) == 2 ** 31 - 1
    assert wrap_i32(42) == 42
