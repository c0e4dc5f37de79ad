"""
Tokenizer tests for rpnblocks
"""

import pytest
from parsing import (
  create_tokenizer, classify_words,
  NUMBER, SYMBOL, BLOCK_OPEN, BLOCK_CLOSE, IDENT,
)
from values import Number, OperatorName, Symbol, display


class TestClassification:
  """Each word lands in exactly one token type"""

  @pytest.fixture
  def tokenizer(self):
    return create_tokenizer()

  def types(self, tokenizer, text):
    return [(token.type, token.value) for token in tokenizer.tokenize(text)]

  def test_numbers(self, tokenizer):
    assert self.types(tokenizer, "1 -42 007") == [
        (NUMBER, 1), (NUMBER, -42), (NUMBER, 7)]

  def test_braces(self, tokenizer):
    assert self.types(tokenizer, "{ }") == [(BLOCK_OPEN, "{"), (BLOCK_CLOSE, "}")]

  def test_symbol_strips_slash(self, tokenizer):
    assert self.types(tokenizer, "/x /double") == [(SYMBOL, "x"), (SYMBOL, "double")]

  def test_lone_slash_is_division(self, tokenizer):
    assert self.types(tokenizer, "/") == [(IDENT, "/")]

  def test_operators_and_names(self, tokenizer):
    assert self.types(tokenizer, "+ - <= dup 1x") == [
        (IDENT, "+"), (IDENT, "-"), (IDENT, "<="), (IDENT, "dup"), (IDENT, "1x")]

  def test_braces_must_stand_alone(self, tokenizer):
    assert self.types(tokenizer, "{1 }x") == [(IDENT, "{1"), (IDENT, "}x")]

  def test_number_wider_than_32_bits_is_a_name(self, tokenizer):
    assert self.types(tokenizer, "2147483647 2147483648 -2147483648") == [
        (NUMBER, 2147483647), (IDENT, "2147483648"), (NUMBER, -2147483648)]

  def test_comments_are_skipped(self, tokenizer):
    assert self.types(tokenizer, "1 # the rest\n2") == [(NUMBER, 1), (NUMBER, 2)]

  def test_empty_input(self, tokenizer):
    assert tokenizer.tokenize("   \n ") == []


class TestSpans:

  def test_line_and_column(self):
    tokens = create_tokenizer().tokenize("1 2\n  dup", "prog.rpn")
    span = tokens[2].span
    assert (span.filename, span.line, span.column, span.text) == ("prog.rpn", 2, 3, "dup")
    assert str(span) == "prog.rpn:2:3"

  def test_tab_separated_words(self):
    tokens = create_tokenizer().tokenize("1\toops\t\t+")
    assert [(token.type, token.value) for token in tokens] == [
        (NUMBER, 1), (IDENT, "oops"), (IDENT, "+")]
    assert [(token.span.column, token.span.text) for token in tokens] == [
        (1, "1"), (3, "oops"), (9, "+")]

  def test_tab_indented_lines(self):
    tokens = create_tokenizer().tokenize("\t\t\t\t1 2 +\n\tdup", "prog.rpn")
    assert [token.span.text for token in tokens] == ["1", "2", "+", "dup"]
    assert [(token.span.line, token.span.column) for token in tokens] == [
        (1, 5), (1, 7), (1, 9), (2, 2)]

  def test_symbol_span_keeps_slash(self):
    token, = create_tokenizer().tokenize("/x")
    assert token.span.text == "/x"


class TestValues:

  def test_to_value(self):
    words = classify_words(["5", "/x", "x"])
    assert [token.to_value() for token in words] == [
        Number(5), Symbol("x"), OperatorName("x")]

  def test_hash_word_is_a_name_when_pre_split(self):
    assert [token.to_value() for token in classify_words(["1", "#"])] == [
        Number(1), OperatorName("#")]

  def test_braces_have_no_value(self):
    brace, = classify_words(["{"])
    with pytest.raises(ValueError):
      brace.to_value()

  @pytest.mark.parametrize("n", [0, 17, -17, 2147483647, -2147483648])
  def test_number_display_round_trip(self, n):
    token, = create_tokenizer().tokenize(display(Number(n)))
    assert token.to_value() == Number(n)
