"""
Error taxonomy for the rpnblocks evaluator with detailed error messages
The core raises these; callers decide what to do with them
"""

from typing import Optional
from pyparsing import ParseException


# ============================================================================
# RUNTIME ERRORS
# ============================================================================

class RPNRuntimeError(Exception):
  """Base class for every failure raised while evaluating a unit"""

  def __init__(self, message: str, span=None, source_line: Optional[str] = None):
    self.message = message
    self.span = span
    self.source_line = source_line
    super().__init__(message)

  def locate(self, span, source_text: Optional[str] = None) -> 'RPNRuntimeError':
    """Attach a source location unless one is already recorded"""
    if self.span is None:
      self.span = span
    if self.source_line is None and source_text is not None and self.span is not None:
      lines = source_text.split('\n')
      if 0 < self.span.line <= len(lines):
        self.source_line = lines[self.span.line - 1]
    return self

  def __str__(self) -> str:
    if self.span is not None:
      return f"{self.message} at {self.span}"
    return self.message


class StackUnderflow(RPNRuntimeError):
  def __init__(self, op: str, needed: int, available: int):
    self.op = op
    self.needed = needed
    self.available = available
    super().__init__(
        f"Stack underflow: '{op}' needs {needed} operand(s), found {available}")


class TypeMismatch(RPNRuntimeError):
  def __init__(self, expected: str, found: str, op: str = ""):
    self.expected = expected
    self.found = found
    self.op = op
    where = f"'{op}' " if op else ""
    super().__init__(f"Type mismatch: {where}expected {expected}, found {found}")


class UndefinedOperation(RPNRuntimeError):
  def __init__(self, name: str):
    self.name = name
    super().__init__(f"Undefined operation: {name}")


class DivisionByZero(RPNRuntimeError):
  def __init__(self):
    super().__init__("Division by zero")


class BlockUnderrun(RPNRuntimeError):
  """A '}' with no open '{'"""

  def __init__(self):
    super().__init__("Block underrun: '}' without matching '{'")


class UnterminatedBlock(RPNRuntimeError):
  """Input ended while one or more '{' were still open"""

  def __init__(self, depth: int):
    self.depth = depth
    super().__init__(f"Unterminated block: {depth} '{{' still open at end of input")


class IndexOutOfRange(RPNRuntimeError):
  def __init__(self, index: int, depth: int):
    self.index = index
    self.depth = depth
    super().__init__(f"Index out of range: {index} (stack depth {depth})")


class RPNTokenizerError(Exception):
  """Text the tokenizer could not consume"""

  def __init__(self, message: str, line: int = 0, column: int = 0,
               source_line: Optional[str] = None):
    self.message = message
    self.line = line
    self.column = column
    self.source_line = source_line
    super().__init__(message)

  def __str__(self) -> str:
    return f"Tokenizer error at line {self.line}, column {self.column}: {self.message}"


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def caret_excerpt(source_line: str, column: int) -> str:
  """Source line with a caret under the given 1-based column"""
  return f"  {source_line}\n  {' ' * (column - 1)}^"


def format_runtime_error(error: RPNRuntimeError) -> str:
  """Format a runtime error for the command line"""
  result = f"Error: {error.message}\n"
  if error.span is not None:
    result += f"  Location: {error.span}\n"
    if error.source_line:
      result += caret_excerpt(error.source_line, error.span.column) + "\n"
  return result


def enhance_parse_exception(exc: ParseException, source_text: str) -> RPNTokenizerError:
  """Convert a pyparsing exception into a tokenizer error with context"""
  lines = source_text.split('\n')
  source_line = lines[exc.lineno - 1] if 0 < exc.lineno <= len(lines) else None
  return RPNTokenizerError(str(exc), exc.lineno, exc.column, source_line)
