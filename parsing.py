"""
rpnblocks tokenizer
Splits source text into whitespace-delimited words and classifies each one,
keeping source spans for error reporting
"""

from typing import Any, Iterable, List
from dataclasses import dataclass

# Import pyparsing with error handling
try:
    from pyparsing import (
        Regex, ZeroOrMore, StringEnd, ParseException, python_style_comment,
        lineno, col
    )
except ImportError:
    raise ImportError("pyparsing library not found. Install with: pip install pyparsing")

from error_handling import RPNTokenizerError, enhance_parse_exception
from values import Number, OperatorName, Symbol, Value, fits_i32


# Token types
NUMBER = "NUMBER"
SYMBOL = "SYMBOL"
BLOCK_OPEN = "BLOCK_OPEN"
BLOCK_CLOSE = "BLOCK_CLOSE"
IDENT = "IDENT"


@dataclass(frozen=True)
class SourceSpan:
    """Where a token came from"""
    filename: str
    line: int
    column: int
    text: str = ""

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Token:
    """Classified word with source information"""
    type: str
    value: Any
    span: SourceSpan

    def __str__(self) -> str:
        return f"{self.type}({self.value})"

    def to_value(self) -> Value:
        """Runtime value for a non-brace token"""
        if self.type == NUMBER:
            return Number(self.value)
        elif self.type == SYMBOL:
            return Symbol(self.value)
        elif self.type == IDENT:
            return OperatorName(self.value)
        raise ValueError(f"{self.type} token has no runtime value")


class RPNGrammar:
    """Token grammar using pyparsing

    token  ::= NUMBER | SYMBOL | "{" | "}" | IDENT
    NUMBER ::= ["-"] DIGIT+   (only when it fits in 32 bits)
    SYMBOL ::= "/" IDENT
    """

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._setup_grammar()

    def _word_grammar(self):
        """Fresh alternatives for one word; separate trees so ignores do not leak"""
        # Every token is a full whitespace-delimited word, hence the (?!\S) guards
        block_open = Regex(r'\{(?!\S)').set_parse_action(
            lambda s, loc, t: (BLOCK_OPEN, t[0], loc))
        block_close = Regex(r'\}(?!\S)').set_parse_action(
            lambda s, loc, t: (BLOCK_CLOSE, t[0], loc))

        # Digit runs too wide for 32 bits fall through to IDENT
        number = Regex(r'-?\d+(?!\S)').add_condition(
            lambda t: fits_i32(int(t[0]))).add_parse_action(
            lambda s, loc, t: (NUMBER, int(t[0]), loc))

        symbol = Regex(r'/\S+').set_parse_action(
            lambda s, loc, t: (SYMBOL, t[0][1:], loc))
        ident = Regex(r'\S+').set_parse_action(
            lambda s, loc, t: (IDENT, t[0], loc))

        return block_open | block_close | number | symbol | ident

    def _setup_grammar(self):
        # Pre-split words: '#' is an ordinary name here
        self.token = self._word_grammar().parse_with_tabs()

        # Locations must index the original text, so tabs are kept
        self.program = (ZeroOrMore(self._word_grammar()) + StringEnd()).parse_with_tabs()
        self.program.ignore(python_style_comment)

    def tokenize(self, text: str, filename: str = "<input>") -> List[Token]:
        """Tokenize source text, keeping line and column of every word"""
        try:
            result = self.program.parse_string(text, parse_all=True)
        except ParseException as e:
            raise enhance_parse_exception(e, text) from e

        tokens = []
        for token_type, value, loc in result:
            word = text[loc:].split(None, 1)[0]
            span = SourceSpan(filename, lineno(loc, text), col(loc, text), word)
            tokens.append(Token(token_type, value, span))
            if self.debug:
                print(f"Token: {tokens[-1]} at {span}")
        return tokens

    def classify(self, word: str, span: SourceSpan = None) -> Token:
        """Classify one already-split word"""
        try:
            token_type, value, _ = self.token.parse_string(word, parse_all=True)[0]
        except ParseException as e:
            raise RPNTokenizerError(f"Cannot classify {word!r}: {e}") from e
        return Token(token_type, value, span or SourceSpan("<word>", 1, 1, word))


def classify_words(words: Iterable[str], grammar: RPNGrammar = None) -> List[Token]:
    """Classify a sequence of pre-split words"""
    grammar = grammar or RPNGrammar()
    return [grammar.classify(word, SourceSpan("<words>", 1, i + 1, word))
            for i, word in enumerate(words)]


# Factory functions for creating tokenizers
def create_tokenizer(debug: bool = False) -> RPNGrammar:
    """Create a tokenizer"""
    return RPNGrammar(debug=debug)
