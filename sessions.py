"""
Isolated interpreter sessions (Using Pykka)
Each actor owns exactly one environment; nothing mutable is shared
"""

from typing import List, Optional, Sequence
from dataclasses import dataclass, field
import pykka

from error_handling import RPNRuntimeError, RPNTokenizerError
from interpreter import create_interpreter
from values import Value


@dataclass
class SessionResult:
  """What one session produced"""
  name: str
  stack: List[Value] = field(default_factory=list)
  output: List[str] = field(default_factory=list)
  error: Optional[Exception] = None

  @property
  def ok(self) -> bool:
    return self.error is None


class SessionActor(pykka.ThreadingActor):
  """Actor running source units against its own environment"""

  def __init__(self, name: str, debug: bool = False):
    super().__init__()
    self.name = name
    self.output: List[str] = []
    self.interpreter = create_interpreter(debug=debug, output=self.output.append)

  def run_source(self, text: str, filename: Optional[str] = None) -> SessionResult:
    """Run text as one unit and report stack, output and any error"""
    result = SessionResult(self.name)
    try:
      self.interpreter.run_source(text, filename or self.name)
    except (RPNRuntimeError, RPNTokenizerError, RecursionError) as e:
      result.error = e
    result.stack = list(self.interpreter.stack)
    result.output = list(self.output)
    self.output.clear()
    return result

  def run_file(self, path: str) -> SessionResult:
    try:
      with open(path, 'r', encoding='utf-8') as f:
        text = f.read()
    except (OSError, UnicodeDecodeError) as e:
      return SessionResult(self.name, error=e)
    return self.run_source(text, path)


def run_sessions(paths: Sequence[str], debug: bool = False,
                 timeout: Optional[float] = None) -> List[SessionResult]:
  """Run each file in its own session actor; results keep argument order"""
  actors = [SessionActor.start(path, debug) for path in paths]
  try:
    futures = [actor.proxy().run_file(path) for actor, path in zip(actors, paths)]
    return pykka.get_all(futures, timeout=timeout)
  finally:
    for actor in actors:
      actor.stop()
