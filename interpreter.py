"""
rpnblocks Interpreter
Block capture, the session environment and the evaluator, in one linear
pass over the token stream: no separate tree-building phase
"""

from typing import Callable, Dict, Iterable, List, Optional
from pathlib import Path

from error_handling import (
  RPNRuntimeError,
  StackUnderflow,
  UndefinedOperation,
  BlockUnderrun,
  UnterminatedBlock,
)
from parsing import BLOCK_OPEN, BLOCK_CLOSE, Token, create_tokenizer, classify_words
from stdlib import create_builtin_bindings
from values import Block, NativeOperation, OperatorName, Value, show


# ============================================================================
# BLOCK CAPTURE
# ============================================================================

class BlockCaptureStack:
  """One frame of deferred values per currently open '{'"""

  def __init__(self):
    self.frames: List[List[Value]] = []
    self.spans: List[Optional[object]] = []

  @property
  def depth(self) -> int:
    return len(self.frames)

  @property
  def is_capturing(self) -> bool:
    return bool(self.frames)

  def open(self, span=None) -> None:
    self.frames.append([])
    self.spans.append(span)

  def push(self, value: Value) -> None:
    """Append to the innermost open frame"""
    if not self.frames:
      raise BlockUnderrun()
    self.frames[-1].append(value)

  def close(self) -> Block:
    """Pop the innermost frame as a finished Block"""
    if not self.frames:
      raise BlockUnderrun()
    self.spans.pop()
    return Block(tuple(self.frames.pop()))

  def ensure_closed(self) -> None:
    """Raise UnterminatedBlock, pointing at the innermost open '{'"""
    if self.frames:
      raise UnterminatedBlock(len(self.frames)).locate(self.spans[-1])

  def reset(self) -> None:
    self.frames.clear()
    self.spans.clear()


# ============================================================================
# ENVIRONMENT
# ============================================================================

class Environment:
  """Operand stack, bindings and capture stack for one session"""

  def __init__(self, output: Optional[Callable[[str], None]] = None,
               debug: bool = False, trace: Optional[Callable[[str], None]] = None):
    self.stack: List[Value] = []
    self.bindings: Dict[str, Value] = create_builtin_bindings()
    self.capture = BlockCaptureStack()
    self.output = output or print
    self.trace = trace or print
    self.debug = debug

  # ── Operand stack ─────────────────────────────────────────────────────────

  def push(self, value: Value) -> None:
    self.stack.append(value)

  def pop(self, op: str = "pop") -> Value:
    if not self.stack:
      raise StackUnderflow(op, 1, 0)
    return self.stack.pop()

  def peek(self, op: str = "peek") -> Value:
    if not self.stack:
      raise StackUnderflow(op, 1, 0)
    return self.stack[-1]

  # ── Bindings ──────────────────────────────────────────────────────────────

  def bind(self, name: str, value: Value) -> None:
    if self.debug:
      self.trace(f"Binding: {name} = {show(value)}")
    self.bindings[name] = value

  def lookup(self, name: str) -> Value:
    try:
      return self.bindings[name]
    except KeyError:
      raise UndefinedOperation(name) from None

  def user_bindings(self) -> Dict[str, Value]:
    """Bindings that are not the stock native operations"""
    return {name: value for name, value in self.bindings.items()
            if not isinstance(value, NativeOperation)}

  # ── Evaluation hooks used by native operations ────────────────────────────

  def evaluate(self, value: Value) -> None:
    evaluate(value, self)

  def evaluate_block(self, block: Block) -> None:
    evaluate_block(block, self)

  def write(self, text: str) -> None:
    self.output(text)

  # ── Unit bookkeeping ──────────────────────────────────────────────────────

  def snapshot(self):
    return list(self.stack), dict(self.bindings)

  def restore(self, snapshot) -> None:
    stack, bindings = snapshot
    self.stack[:] = stack
    self.bindings.clear()
    self.bindings.update(bindings)
    self.capture.reset()


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def evaluate(value: Value, env: Environment) -> None:
  """
  Decide the fate of one value.
  While a block is open the value is captured verbatim; otherwise names are
  resolved and everything else is pushed.
  """
  if env.capture.is_capturing:
    if env.debug:
      env.trace(f"Capturing: {show(value)} (depth {env.capture.depth})")
    env.capture.push(value)
    return

  if env.debug:
    env.trace(f"Evaluating: {show(value)}")

  if not isinstance(value, OperatorName):
    env.push(value)
    return

  bound = env.lookup(value.name)
  if isinstance(bound, Block):
    evaluate_block(bound, env)
  elif isinstance(bound, NativeOperation):
    bound(env)
  else:
    env.push(bound)


def evaluate_block(block: Block, env: Environment) -> None:
  """Inline a block's body into the current environment"""
  for item in block.body:
    evaluate(item, env)


def feed_token(token: Token, env: Environment) -> None:
  """Drive one classified token through the capture state machine"""
  if token.type == BLOCK_OPEN:
    env.capture.open(token.span)
  elif token.type == BLOCK_CLOSE:
    evaluate(env.capture.close(), env)
  else:
    evaluate(token.to_value(), env)


# ============================================================================
# INTERPRETER
# ============================================================================

class Interpreter:
  """Runs input units against one environment.

  A unit is a line in interactive mode or a whole file in batch mode. A
  failing unit leaves the stack and bindings as they were before it started.
  """

  def __init__(self, env: Optional[Environment] = None, debug: bool = False,
               output: Optional[Callable[[str], None]] = None):
    self.debug = debug
    self.env = env or Environment(output=output, debug=debug)
    self.tokenizer = create_tokenizer(debug)

  @property
  def stack(self) -> List[Value]:
    return self.env.stack

  def run_unit(self, tokens: Iterable[Token], source_text: Optional[str] = None) -> List[Value]:
    """Feed every token of one unit; the unit must close all its blocks"""
    env = self.env
    saved = env.snapshot()
    current = None
    try:
      for current in tokens:
        feed_token(current, env)
      env.capture.ensure_closed()
    except BaseException as e:
      env.restore(saved)
      if isinstance(e, RPNRuntimeError) and current is not None:
        e.locate(current.span, source_text)
      raise
    return env.stack

  def run_source(self, text: str, filename: str = "<input>") -> List[Value]:
    """Tokenize and run text as a single unit"""
    return self.run_unit(self.tokenizer.tokenize(text, filename), text)

  def run_words(self, words: Iterable[str]) -> List[Value]:
    """Run already-split words as a single unit"""
    return self.run_unit(classify_words(words, self.tokenizer))

  def run_file(self, path) -> List[Value]:
    path = Path(path)
    return self.run_source(path.read_text(encoding='utf-8'), str(path))


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_environment(output: Optional[Callable[[str], None]] = None,
                       debug: bool = False) -> Environment:
  """Fresh environment with the native operations bound"""
  return Environment(output=output, debug=debug)


def create_interpreter(debug: bool = False,
                       output: Optional[Callable[[str], None]] = None) -> Interpreter:
  """Factory function returning an interpreter with its own environment"""
  return Interpreter(debug=debug, output=output)


def create_debug_interpreter(output: Optional[Callable[[str], None]] = None) -> Interpreter:
  return create_interpreter(debug=True, output=output)
