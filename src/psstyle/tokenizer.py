"""
Tokenizer for PowerShell scripts (Layer 1: raw text -> tokens).

Splits script text into a flat list of tokens. The tokenizer knows enough
PowerShell to keep strings, comments and here-strings opaque, to tell
keywords from command words, and to tell dash operators (-eq, -match)
from command parameters (-Path).

Whitespace is not tokenized. Line-oriented checks work on the raw lines
kept by the parser; token-oriented checks work on this list.

Token positions:
    line / column:  1-based, where the token starts
    start / end:    absolute character offsets (end exclusive)
    end_line:       line of the last character of the token
"""

import re
from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from psstyle.errors import TokenizeError


class TokenKind(Enum):
    """Kinds of tokens produced by the tokenizer."""

    NEWLINE = "newline"
    COMMENT = "comment"
    BLOCK_COMMENT = "block_comment"
    STRING = "string"
    VARIABLE = "variable"
    NUMBER = "number"
    KEYWORD = "keyword"
    WORD = "word"
    PARAMETER = "parameter"
    OPERATOR = "operator"
    LBRACE = "lbrace"
    RBRACE = "rbrace"
    LPAREN = "lparen"
    RPAREN = "rparen"
    LBRACKET = "lbracket"
    RBRACKET = "rbracket"
    SEMICOLON = "semicolon"
    PIPE = "pipe"
    COMMA = "comma"
    CONTINUATION = "continuation"
    EOF = "eof"


KEYWORDS = frozenset({
    "begin", "break", "catch", "class", "continue", "data", "define", "do",
    "dynamicparam", "else", "elseif", "end", "enum", "exit", "filter",
    "finally", "for", "foreach", "from", "function", "hidden", "if", "in",
    "param", "process", "return", "static", "switch", "throw", "trap", "try",
    "until", "using", "var", "while", "workflow",
})

_BASE_DASH_OPERATORS = (
    "eq", "ne", "gt", "ge", "lt", "le", "like", "notlike", "match",
    "notmatch", "contains", "notcontains", "in", "notin", "replace",
)

DASH_OPERATORS = frozenset(
    [op for base in _BASE_DASH_OPERATORS for op in (base, "c" + base, "i" + base)]
    + [
        "split", "csplit", "isplit", "join", "is", "isnot", "as",
        "and", "or", "xor", "not", "band", "bor", "bxor", "bnot",
        "shl", "shr", "f",
    ]
)

ASSIGNMENT_OPERATORS = frozenset({"=", "+=", "-=", "*=", "/=", "%=", "??="})

_SYMBOL_OPERATORS = frozenset({
    "??=", "&&", "||", "::", "..", "+=", "-=", "*=", "/=", "%=", "??", "++",
    "--", ">>",
})

_PUNCTUATION = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ";": TokenKind.SEMICOLON,
    ",": TokenKind.COMMA,
    "|": TokenKind.PIPE,
}

_OPENERS = (TokenKind.LBRACE, TokenKind.LPAREN, TokenKind.LBRACKET)
_CLOSERS = (TokenKind.RBRACE, TokenKind.RPAREN, TokenKind.RBRACKET)
_TRIVIA = (TokenKind.NEWLINE, TokenKind.COMMENT, TokenKind.BLOCK_COMMENT, TokenKind.CONTINUATION)

# A keyword can only start a statement: at the start of the script or after
# one of these. Anywhere else a keyword-shaped word is a command argument,
# a hashtable key or a member name.
_STATEMENT_BOUNDARIES = (TokenKind.NEWLINE, TokenKind.SEMICOLON, TokenKind.LBRACE, TokenKind.RBRACE)
_STATEMENT_OPENERS = ("$(", "@(")
_CHAIN_OPERATORS = ("&&", "||")
# Statements that also yield a value on the right of an assignment
_VALUE_KEYWORDS = frozenset({"if", "switch", "foreach", "for", "while", "do", "try"})

_WORD_RE = re.compile(r"[^\W\d]\w*(?:[-.]\w+)*")
_DASH_WORD_RE = re.compile(r"-[^\W\d]\w*:?")
_NUMBER_RE = re.compile(
    r"0[xX][0-9A-Fa-f]+|\d+(?:\.\d+)?(?:[eE][+-]?\d+)?[dDlL]?(?:[kKmMgGtTpP][bB])?"
)
_VARIABLE_RE = re.compile(r"\$(?:[A-Za-z_]\w*:(?=\w))?\w+|\$[$?^]")
_SPLAT_RE = re.compile(r"@\w+")
_SINGLE_HERE_END_RE = re.compile(r"^'@", re.MULTILINE)
_DOUBLE_HERE_END_RE = re.compile(r'^"@', re.MULTILINE)


@dataclass(frozen=True)
class Token:
    """
    A single lexical token.

    Tokens are immutable and carry their own location, so rules can
    report and fix without going back to the tokenizer.
    """

    kind: TokenKind
    text: str
    line: int
    column: int
    start: int
    end: int
    end_line: int

    @property
    def is_significant(self) -> bool:
        """True for tokens that are not newlines, comments or continuations."""
        return self.kind not in _TRIVIA

    @property
    def is_comment(self) -> bool:
        return self.kind in (TokenKind.COMMENT, TokenKind.BLOCK_COMMENT)

    @property
    def is_opener(self) -> bool:
        return self.kind in _OPENERS

    @property
    def is_closer(self) -> bool:
        return self.kind in _CLOSERS

    @property
    def is_multiline(self) -> bool:
        return self.end_line > self.line

    @property
    def quote(self) -> Optional[str]:
        """Quote character of a string token, or None for other tokens."""
        if self.kind is not TokenKind.STRING:
            return None
        return self.text.lstrip("@")[0]

    @property
    def is_here_string(self) -> bool:
        return self.kind is TokenKind.STRING and self.text.startswith("@")

    def is_keyword(self, *names: str) -> bool:
        """True if this is a keyword token, optionally one of ``names``."""
        if self.kind is not TokenKind.KEYWORD:
            return False
        return not names or self.text.lower() in names

    def is_operator(self, *texts: str) -> bool:
        if self.kind is not TokenKind.OPERATOR:
            return False
        return not texts or self.text.lower() in texts


def tokenize(source: str) -> List[Token]:
    """
    Split PowerShell source text into tokens.

    Args:
        source: Script text

    Returns:
        List of tokens, always terminated by an EOF token

    Raises:
        TokenizeError: On unterminated strings, here-strings,
            block comments or braced variable names
    """
    return _Tokenizer(source).run()


class _Tokenizer:
    """Single-use scanner over one source string."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.length = len(source)
        self.pos = 0
        self.tokens: List[Token] = []
        # Indexes into self.tokens of the openers not closed yet
        self._open: List[int] = []
        self._line_starts = [0] + [i + 1 for i, ch in enumerate(source) if ch == "\n"]

    # =========================================================================
    # Helpers
    # =========================================================================

    def _location(self, offset: int):
        index = bisect_right(self._line_starts, offset) - 1
        return index + 1, offset - self._line_starts[index] + 1

    def _error(self, message: str, offset: int) -> TokenizeError:
        line, column = self._location(offset)
        return TokenizeError(message, line, column)

    def _char(self, offset: int) -> str:
        return self.source[offset] if offset < self.length else ""

    def _emit(self, kind: TokenKind, start: int, end: int) -> Token:
        line, column = self._location(start)
        end_line, _ = self._location(max(start, end - 1))
        token = Token(kind, self.source[start:end], line, column, start, end, end_line)
        self.tokens.append(token)
        if kind in _OPENERS:
            self._open.append(len(self.tokens) - 1)
        elif kind in _CLOSERS and self._open:
            self._open.pop()
        self.pos = end
        return token

    def _previous_code(self) -> Optional[Token]:
        """Last token that is not a comment or a line continuation."""
        for token in reversed(self.tokens):
            if not token.is_comment and token.kind is not TokenKind.CONTINUATION:
                return token
        return None

    def _innermost_opener(self) -> Optional[Token]:
        return self.tokens[self._open[-1]] if self._open else None

    def _in_foreach_header(self) -> bool:
        """True inside the parentheses of a foreach statement."""
        opener = self._innermost_opener()
        if opener is None or opener.text != "(":
            return False
        for token in reversed(self.tokens[:self._open[-1]]):
            if token.is_significant:
                return token.is_keyword("foreach")
        return False

    # =========================================================================
    # Main loop
    # =========================================================================

    def run(self) -> List[Token]:
        while self.pos < self.length:
            ch = self.source[self.pos]
            nxt = self._char(self.pos + 1)

            if ch in " \t\r\f\v\ufeff":
                self.pos += 1
            elif ch == "\n":
                self._emit(TokenKind.NEWLINE, self.pos, self.pos + 1)
            elif ch == "`":
                self._scan_backtick()
            elif ch == "#":
                self._scan_line_comment()
            elif ch == "<" and nxt == "#":
                self._scan_block_comment()
            elif ch == "@":
                self._scan_at()
            elif ch == "$":
                self._scan_dollar()
            elif ch == "'":
                self._emit(TokenKind.STRING, self.pos, self._skip_single_quoted(self.pos))
            elif ch == '"':
                self._emit(TokenKind.STRING, self.pos, self._skip_double_quoted(self.pos))
            elif ch == "|" and nxt == "|":
                self._emit(TokenKind.OPERATOR, self.pos, self.pos + 2)
            elif ch in _PUNCTUATION:
                self._emit(_PUNCTUATION[ch], self.pos, self.pos + 1)
            elif ch == "-" and (nxt.isalpha() or nxt == "_"):
                self._scan_dash_word()
            elif ch.isdigit():
                match = _NUMBER_RE.match(self.source, self.pos)
                self._emit(TokenKind.NUMBER, self.pos, match.end())
            elif ch.isalpha() or ch == "_":
                self._scan_word()
            else:
                self._scan_symbol()

        line, column = self._location(self.length)
        self.tokens.append(Token(TokenKind.EOF, "", line, column, self.length, self.length, line))
        return self.tokens

    # =========================================================================
    # Scanners
    # =========================================================================

    def _scan_backtick(self) -> None:
        start = self.pos
        if self._char(start + 1) == "\n":
            self._emit(TokenKind.CONTINUATION, start, start + 1)
            self.pos = start + 2
        elif self.source.startswith("\r\n", start + 1):
            self._emit(TokenKind.CONTINUATION, start, start + 1)
            self.pos = start + 3
        else:
            # Escaped character in a bare argument
            self._emit(TokenKind.WORD, start, min(start + 2, self.length))

    def _scan_line_comment(self) -> None:
        end = self.source.find("\n", self.pos)
        if end == -1:
            end = self.length
        if end > self.pos and self.source[end - 1] == "\r":
            end -= 1
        self._emit(TokenKind.COMMENT, self.pos, end)

    def _scan_block_comment(self) -> None:
        end = self.source.find("#>", self.pos + 2)
        if end == -1:
            raise self._error("unterminated block comment", self.pos)
        self._emit(TokenKind.BLOCK_COMMENT, self.pos, end + 2)

    def _scan_at(self) -> None:
        start = self.pos
        nxt = self._char(start + 1)
        if nxt in ("'", '"'):
            self._emit(TokenKind.STRING, start, self._skip_here_string(start, nxt))
        elif nxt == "{":
            self._emit(TokenKind.LBRACE, start, start + 2)
        elif nxt == "(":
            self._emit(TokenKind.LPAREN, start, start + 2)
        else:
            match = _SPLAT_RE.match(self.source, start)
            if match:
                self._emit(TokenKind.VARIABLE, start, match.end())
            else:
                self._emit(TokenKind.OPERATOR, start, start + 1)

    def _scan_dollar(self) -> None:
        start = self.pos
        nxt = self._char(start + 1)
        if nxt == "{":
            end = self.source.find("}", start + 2)
            if end == -1:
                raise self._error("unterminated braced variable name", start)
            self._emit(TokenKind.VARIABLE, start, end + 1)
        elif nxt == "(":
            self._emit(TokenKind.LPAREN, start, start + 2)
        else:
            match = _VARIABLE_RE.match(self.source, start)
            if match:
                self._emit(TokenKind.VARIABLE, start, match.end())
            else:
                self._emit(TokenKind.OPERATOR, start, start + 1)

    def _scan_dash_word(self) -> None:
        match = _DASH_WORD_RE.match(self.source, self.pos)
        if match is None:
            self._scan_symbol()
            return
        text = match.group(0)
        if not text.endswith(":") and text[1:].lower() in DASH_OPERATORS:
            self._emit(TokenKind.OPERATOR, self.pos, match.end())
        else:
            self._emit(TokenKind.PARAMETER, self.pos, match.end())

    def _scan_word(self) -> None:
        start = self.pos
        match = _WORD_RE.match(self.source, start)
        if match is None:
            self._scan_symbol()
            return
        end = match.end()
        kind = TokenKind.WORD
        word = match.group(0).lower()
        if word in KEYWORDS and self._keyword_allowed(word):
            kind = TokenKind.KEYWORD
        self._emit(kind, start, end)

    def _keyword_allowed(self, word: str) -> bool:
        opener = self._innermost_opener()
        if opener is not None and opener.kind is TokenKind.LBRACKET:
            return False
        previous = self._previous_code()
        if word == "in":
            return (previous is not None and previous.kind is TokenKind.VARIABLE
                    and self._in_foreach_header())
        if opener is not None and opener.text == "@{":
            # Keys are never keywords; a value may be a statement
            if previous is not None and previous.kind is TokenKind.RBRACE:
                return True
            return (previous is not None and previous.text in ASSIGNMENT_OPERATORS
                    and word in _VALUE_KEYWORDS)
        if previous is None or previous.kind in _STATEMENT_BOUNDARIES:
            return True
        if previous.kind is TokenKind.LPAREN:
            return previous.text in _STATEMENT_OPENERS
        if previous.kind is TokenKind.OPERATOR:
            if previous.text in _CHAIN_OPERATORS:
                return True
            return previous.text in ASSIGNMENT_OPERATORS and word in _VALUE_KEYWORDS
        # [CmdletBinding()] param(...)
        return previous.kind is TokenKind.RBRACKET and word == "param"

    def _scan_symbol(self) -> None:
        start = self.pos
        for width in (3, 2):
            candidate = self.source[start:start + width]
            if len(candidate) == width and candidate in _SYMBOL_OPERATORS:
                self._emit(TokenKind.OPERATOR, start, start + width)
                return
        self._emit(TokenKind.OPERATOR, start, start + 1)

    # =========================================================================
    # String skipping (returns the end offset, exclusive)
    # =========================================================================

    def _skip_single_quoted(self, start: int) -> int:
        i = start + 1
        while True:
            idx = self.source.find("'", i)
            if idx == -1:
                raise self._error("unterminated string", start)
            if self._char(idx + 1) == "'":
                i = idx + 2
                continue
            return idx + 1

    def _skip_double_quoted(self, start: int) -> int:
        i = start + 1
        while i < self.length:
            ch = self.source[i]
            if ch == "`":
                i += 2
            elif ch == '"':
                if self._char(i + 1) == '"':
                    i += 2
                else:
                    return i + 1
            elif ch == "$" and self._char(i + 1) == "(":
                i = self._skip_subexpression(i + 1)
            else:
                i += 1
        raise self._error("unterminated string", start)

    def _skip_subexpression(self, open_index: int) -> int:
        depth = 0
        i = open_index
        while i < self.length:
            ch = self.source[i]
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    return i + 1
            elif ch == "'":
                i = self._skip_single_quoted(i)
                continue
            elif ch == '"':
                i = self._skip_double_quoted(i)
                continue
            elif ch == "`":
                i += 1
            i += 1
        raise self._error("unterminated subexpression", open_index)

    def _skip_here_string(self, start: int, quote: str) -> int:
        header_end = self.source.find("\n", start + 2)
        if header_end == -1 or self.source[start + 2:header_end].strip():
            raise self._error("here-string header must be followed by a line break", start)
        terminator = _SINGLE_HERE_END_RE if quote == "'" else _DOUBLE_HERE_END_RE
        match = terminator.search(self.source, header_end + 1)
        if match is None:
            raise self._error("unterminated here-string", start)
        return match.end()
