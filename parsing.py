"""
Chevron Language Parser
Tokenizer (pyparsing) and cursor-based statement parser with source spans
"""

from typing import List, Tuple, Optional, Union, Sequence
from dataclasses import dataclass, field
from enum import Enum
import sys

from pyparsing import (
    Word, alphas, alphanums, Regex, Literal, MatchFirst, ZeroOrMore,
    StringEnd, ParseException, lineno, col
)

from error_handling import LexError, ParseError, get_context_lines


# C-locale isspace() set; pyparsing's default omits \f and \v
WHITESPACE = " \t\n\r\f\v"


class TokenKind(Enum):
    OUT = "out"
    IN = "in"
    REDIRECT_OUT = ">>"
    REDIRECT_IN = "<<"
    STRING = "string"
    IDENTIFIER = "identifier"
    STOP = "stop"
    TERMINATOR = ";"
    INT = "int"
    END = "end"
    INVALID = "invalid"


KEYWORDS = {
    "out": TokenKind.OUT,
    "in": TokenKind.IN,
    "stop": TokenKind.STOP,
    "int": TokenKind.INT,
}

# Prefix rules tried in this order when keywords are matched without word boundaries
LEGACY_PREFIX_RULES = (
    ("out", TokenKind.OUT),
    (">>", TokenKind.REDIRECT_OUT),
    ("in", TokenKind.IN),
    ("<<", TokenKind.REDIRECT_IN),
    ("stop", TokenKind.STOP),
    ("int", TokenKind.INT),
)

# Kinds whose payload is the lexeme itself
PAYLOAD_KINDS = (TokenKind.STRING, TokenKind.IDENTIFIER, TokenKind.INVALID)


@dataclass(frozen=True)
class SourceSpan:
    """Source location information for tokens and errors"""
    filename: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    text: str = ""

    def __str__(self) -> str:
        if self.start_line == self.end_line:
            return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_col}"
        return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


@dataclass(frozen=True)
class Token:
    """Chevron token; the span is informational and ignored by equality"""
    kind: TokenKind
    text: str = ""
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    @property
    def lexeme(self) -> str:
        """Source spelling that lexes back to this token"""
        if self.kind is TokenKind.STRING:
            return f'"{self.text}"'
        if self.kind in PAYLOAD_KINDS:
            return self.text
        if self.kind is TokenKind.END:
            return ""
        return self.kind.value

    def __str__(self) -> str:
        if self.kind in PAYLOAD_KINDS:
            return f"{self.kind.value}({self.text})"
        return self.kind.value


END_TOKEN = Token(TokenKind.END)


# ============================================================================
# STATEMENTS
# ============================================================================

@dataclass(frozen=True)
class OutStatement:
    """out >> target >> target ... [stop]"""
    targets: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'targets', tuple(self.targets))


@dataclass(frozen=True)
class InStatement:
    """in << name"""
    name: str


Statement = Union[OutStatement, InStatement]


# ============================================================================
# TOKENIZER
# ============================================================================

class ChevronTokenizer:
    """Chevron tokenizer built from pyparsing elements"""

    def __init__(self, filename: str = "<input>", legacy_keywords: bool = False, debug: bool = False):
        self.filename = filename
        self.legacy_keywords = legacy_keywords
        self.debug = debug
        self._setup_grammar()

    def _setup_grammar(self):
        """Setup the token rules; each rule's parse action yields a Token"""

        redirect_out = Literal(">>").setParseAction(self._make_action(TokenKind.REDIRECT_OUT))
        redirect_in = Literal("<<").setParseAction(self._make_action(TokenKind.REDIRECT_IN))
        terminator = Literal(";").setParseAction(self._make_action(TokenKind.TERMINATOR))

        # An unterminated quote runs to end of input
        string_literal = Regex(r'"[^"]*"?').setParseAction(self._make_string)

        if self.legacy_keywords:
            prefixes = [
                Literal(text).setParseAction(self._make_action(kind))
                for text, kind in LEGACY_PREFIX_RULES
            ]
            identifier = Word(alphas, alphanums).setParseAction(self._make_action(TokenKind.IDENTIFIER))
            rules = prefixes + [string_literal, identifier, terminator]
        else:
            word = Word(alphas, alphanums).setParseAction(self._classify_word)
            rules = [redirect_out, redirect_in, string_literal, word, terminator]

        for rule in rules:
            rule.setWhitespaceChars(WHITESPACE)

        token = MatchFirst(rules)
        end = StringEnd().setWhitespaceChars(WHITESPACE)

        # Tabs stay as-is so literals and columns match the source text
        self.program = (ZeroOrMore(token) + end).parseWithTabs()

    def _span(self, instring: str, loc: int, length: int) -> SourceSpan:
        end_loc = loc + length
        return SourceSpan(
            self.filename,
            lineno(loc, instring), col(loc, instring),
            lineno(end_loc, instring), col(end_loc, instring),
            instring[loc:end_loc]
        )

    def _make_action(self, kind: TokenKind):
        def action(instring, loc, tokens):
            lexeme = tokens[0]
            text = lexeme if kind in PAYLOAD_KINDS else ""
            return Token(kind, text, self._span(instring, loc, len(lexeme)))
        return action

    def _classify_word(self, instring, loc, tokens):
        lexeme = tokens[0]
        kind = KEYWORDS.get(lexeme, TokenKind.IDENTIFIER)
        text = lexeme if kind is TokenKind.IDENTIFIER else ""
        return Token(kind, text, self._span(instring, loc, len(lexeme)))

    def _make_string(self, instring, loc, tokens):
        lexeme = tokens[0]
        body = lexeme[1:]
        if body.endswith('"'):
            body = body[:-1]
        return Token(TokenKind.STRING, body, self._span(instring, loc, len(lexeme)))

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize Chevron source code"""
        try:
            result = self.program.parseString(text, parseAll=True)
        except ParseException as e:
            raise self._unknown_character(text, e.loc) from e

        tokens = list(result)
        if self.debug:
            print(f"Tokenized {len(tokens)} tokens from {self.filename}", file=sys.stderr)
        return tokens

    def _unknown_character(self, text: str, loc: int) -> LexError:
        pos = loc
        while text[pos] in WHITESPACE:
            pos += 1
        char = text[pos]
        span = self._span(text, pos, 1)
        context = get_context_lines(text, span.start_line, span.start_col)
        return LexError(f"Unknown character '{char}'", span, context, Token(TokenKind.INVALID, char, span))


# ============================================================================
# PARSER (pure functions over a token cursor)
# ============================================================================

def token_at(tokens: Sequence[Token], index: int) -> Token:
    """Token under the cursor, or the END sentinel past the last token"""
    if index < len(tokens):
        return tokens[index]
    return END_TOKEN


def parse_out_statement(tokens: Sequence[Token], index: int) -> Tuple[OutStatement, int]:
    """Parse 'out' at index; returns (statement, next_index)"""
    index += 1  # Skip 'out'
    targets = []

    while token_at(tokens, index).kind in (TokenKind.REDIRECT_OUT, TokenKind.STRING, TokenKind.IDENTIFIER):
        token = tokens[index]
        if token.kind is not TokenKind.REDIRECT_OUT:
            targets.append(token.text)
        index += 1

    if token_at(tokens, index).kind is TokenKind.STOP:
        index += 1

    return OutStatement(tuple(targets)), index


def parse_in_statement(tokens: Sequence[Token], index: int) -> Tuple[InStatement, int]:
    """Parse 'in' at index; returns (statement, next_index)"""
    keyword = tokens[index]
    index += 1  # Skip 'in'

    redirect = token_at(tokens, index)
    if redirect.kind is not TokenKind.REDIRECT_IN:
        raise ParseError("Invalid 'in' statement", redirect.span or keyword.span)
    index += 1

    name = token_at(tokens, index)
    if name.kind is not TokenKind.IDENTIFIER:
        raise ParseError("Invalid 'in' statement", name.span or keyword.span)

    return InStatement(name.text), index + 1


STATEMENT_PARSERS = {
    TokenKind.OUT: parse_out_statement,
    TokenKind.IN: parse_in_statement,
}


def parse_statements(tokens: Sequence[Token], debug: bool = False) -> List[Statement]:
    """Scan for statement starts; anything else at top level is skipped"""
    statements = []
    index = 0

    while index < len(tokens):
        parse_fn = STATEMENT_PARSERS.get(tokens[index].kind)
        if parse_fn is None:
            index += 1
            continue

        statement, index = parse_fn(tokens, index)
        if debug:
            print(f"Parsed: {statement}", file=sys.stderr)
        statements.append(statement)

    return statements


class ChevronParser:
    """Main Chevron parser combining tokenizer and statement parser"""

    def __init__(self, debug: bool = False, legacy_keywords: bool = False):
        self.debug = debug
        self.legacy_keywords = legacy_keywords

    def tokenize(self, text: str, filename: str = "<input>") -> List[Token]:
        """Tokenize Chevron source code"""
        tokenizer = ChevronTokenizer(filename, self.legacy_keywords, self.debug)
        return tokenizer.tokenize(text)

    def parse(self, tokens: Sequence[Token]) -> List[Statement]:
        """Parse a token sequence into statements"""
        return parse_statements(tokens, self.debug)

    def parse_string(self, text: str, filename: str = "<input>") -> List[Statement]:
        """Parse Chevron source code from string"""
        tokens = self.tokenize(text, filename)
        try:
            return self.parse(tokens)
        except ParseError as e:
            if e.span is None or e.context:
                raise
            context = get_context_lines(text, e.span.start_line, e.span.start_col)
            raise ParseError(e.message, e.span, context) from e


# Factory functions for creating tokenizers and parsers
def create_tokenizer(filename: str = "<input>", legacy_keywords: bool = False,
                     debug: bool = False) -> ChevronTokenizer:
    """Create a Chevron tokenizer"""
    return ChevronTokenizer(filename, legacy_keywords, debug)


def create_parser(debug: bool = False, legacy_keywords: bool = False) -> ChevronParser:
    """Create a Chevron parser"""
    return ChevronParser(debug=debug, legacy_keywords=legacy_keywords)


def create_debug_parser() -> ChevronParser:
    """Create a Chevron parser with debug enabled"""
    return ChevronParser(debug=True)


def tokenize(source: str, filename: str = "<input>", legacy_keywords: bool = False) -> List[Token]:
    return create_tokenizer(filename, legacy_keywords).tokenize(source)


def parse(tokens: Sequence[Token]) -> List[Statement]:
    return parse_statements(tokens)


# Utility functions for debug dumps
def pretty_print_tokens(tokens: Sequence[Token]) -> str:
    """One token per line, with its source location"""
    result = ""
    for token in tokens:
        location = f"{token.span.start_line}:{token.span.start_col}" if token.span else "?"
        result += f"{location:>8}  {token}\n"
    return result


def pretty_print_statements(statements: Sequence[Statement]) -> str:
    """Pretty print statements for debugging"""
    result = ""
    for statement in statements:
        if isinstance(statement, OutStatement):
            targets = " >> ".join(repr(t) for t in statement.targets)
            result += f"OUT {targets}\n" if targets else "OUT\n"
        else:
            result += f"IN {statement.name}\n"
    return result
