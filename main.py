"""
rpnblocks - Main Entry Point
A stack-based scripting language with deferred code blocks
"""

import sys
import argparse
from typing import Iterable, List, Optional, TextIO
import os

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from error_handling import RPNRuntimeError, RPNTokenizerError, format_runtime_error
from interpreter import Interpreter, create_interpreter
from sessions import run_sessions
from values import Value, show


VERSION = "rpnblocks v0.1.0"
HISTORY_FILE = "~/.rpnblocks_history"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='rpnblocks',
      description='rpnblocks - a reverse-Polish scripting language with code blocks',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.rpn             # Run a script, dump the final stack
  %(prog)s a.rpn b.rpn            # Run each file in its own session
  echo "1 2 +" | %(prog)s         # Evaluate stdin line by line
  %(prog)s -i                     # Interactive mode
  %(prog)s --debug script.rpn     # Trace every evaluation step
        """
  )

  parser.add_argument(
      'scripts',
      nargs='*',
      help='script files to execute; stdin is read line by line when omitted'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable evaluation tracing and tracebacks'
  )

  parser.add_argument(
      '--no-dump',
      dest='dump',
      action='store_false',
      help='Do not print the operand stack after each unit'
  )

  parser.add_argument(
      '--stop-on-error',
      action='store_true',
      help='Stop reading stdin at the first failing line'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def format_stack(stack: List[Value]) -> str:
  """Render the operand stack, bottom first"""
  return "stack: [" + ", ".join(show(value) for value in stack) + "]"


def report_error(error: Exception, debug: bool = False, source: str = "") -> None:
  """Print an error the way every mode reports it"""
  if isinstance(error, RPNRuntimeError):
    print(format_runtime_error(error), end='')
  elif isinstance(error, RPNTokenizerError):
    print(f"Error: {error}")
  elif isinstance(error, (OSError, UnicodeDecodeError)):
    print(f"Error: Cannot read '{source}': {error}")
  else:
    print(f"Unexpected error: {error}")
    if debug:
      import traceback
      traceback.print_exception(type(error), error, error.__traceback__)


# ============================================================================
# BATCH MODE
# ============================================================================

def run_script_files(paths: List[str], debug: bool = False, dump: bool = True) -> int:
  """Run every file in its own session; 1 if any of them failed"""
  status = 0
  for result in run_sessions(paths, debug=debug):
    for text in result.output:
      print(text)
    if result.error is not None:
      print(f"In '{result.name}':")
      report_error(result.error, debug, result.name)
      status = 1
    if dump:
      print(format_stack(result.stack))
  return status


# ============================================================================
# LINE MODE
# ============================================================================

def run_lines(lines: Iterable[str], interpreter: Interpreter, dump: bool = True,
              stop_on_error: bool = False, filename: str = "<stdin>") -> int:
  """Evaluate each line as its own unit, like a pipe-fed REPL"""
  status = 0
  for line_num, line in enumerate(lines, 1):
    line = line.rstrip('\n')
    try:
      interpreter.run_source(line, f"{filename}:{line_num}")
    except (RPNRuntimeError, RPNTokenizerError, RecursionError) as e:
      report_error(e, interpreter.debug)
      status = 1
      if stop_on_error:
        break
    if dump:
      print(format_stack(interpreter.stack))
  return status


# ============================================================================
# INTERACTIVE MODE
# ============================================================================

def setup_readline(interpreter: Interpreter) -> None:
  """Setup readline with history and completion of bound names"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser(HISTORY_FILE)
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet

  readline.set_history_length(1000)

  commands = [":stack", ":env", ":clear", ":help", "exit."]

  def completer(text, state):
    names = sorted(interpreter.env.bindings) + commands
    options = [name for name in names if name.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(readline.write_history_file, history_file)


def print_help() -> None:
  print("REPL Commands:")
  print("  :stack            - Show the operand stack")
  print("  :env              - Show user bindings")
  print("  :clear            - Empty the operand stack")
  print("  :help             - Show this help")
  print("  exit.             - Exit REPL")
  print()
  print("Language:")
  print("  1 2 +                         - push 3")
  print("  /x 10 def                     - bind x")
  print("  /double { 2 * } def 4 double  - define and call an operator")
  print("  { x 5 < } { 1 } { 0 } if      - conditional")
  print("  x puts                        - print a value")


def handle_command(command: str, interpreter: Interpreter) -> bool:
  """Run a ':' command; False if the line is not one"""
  if command == ":stack":
    print(format_stack(interpreter.stack))
  elif command == ":env":
    bindings = interpreter.env.user_bindings()
    if not bindings:
      print("  (no user-defined bindings)")
    for name, value in bindings.items():
      print(f"  {name} = {show(value)}")
  elif command == ":clear":
    interpreter.stack.clear()
  elif command == ":help":
    print_help()
  else:
    return False
  return True


def run_interactive_mode(debug: bool = False, dump: bool = True) -> None:
  """Run a read-eval-print loop; errors never end the session"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit.' to quit, ':help' for commands")
  if debug:
    print("Debug mode enabled")
  print()

  interpreter = create_interpreter(debug=debug)
  setup_readline(interpreter)

  line_num = 0
  while True:
    try:
      code = input("rpn> ").strip()
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    if code == "exit.":
      break
    if not code or handle_command(code, interpreter):
      continue

    line_num += 1
    try:
      interpreter.run_source(code, f"<repl>:{line_num}")
    except (RPNRuntimeError, RPNTokenizerError, RecursionError) as e:
      report_error(e, debug)
      continue
    except KeyboardInterrupt:
      print("\nInterrupted")
      continue
    if dump:
      print(format_stack(interpreter.stack))


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None) -> int:
  """Main entry point for rpnblocks"""
  args = create_arg_parser().parse_args(argv)
  stdin = stdin or sys.stdin

  if args.interactive:
    run_interactive_mode(debug=args.debug, dump=args.dump)
    return 0

  if args.scripts:
    return run_script_files(args.scripts, debug=args.debug, dump=args.dump)

  if stdin.isatty():
    run_interactive_mode(debug=args.debug, dump=args.dump)
    return 0

  interpreter = create_interpreter(debug=args.debug)
  return run_lines(stdin, interpreter, dump=args.dump, stop_on_error=args.stop_on_error)


if __name__ == "__main__":
  sys.exit(main())
