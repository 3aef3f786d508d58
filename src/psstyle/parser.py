"""
Structural parser for PowerShell scripts (Layer 2: tokens -> Script).

This is not a full PowerShell grammar. It recovers exactly the structure
the style rules need:

    - Matched bracket pairs ({}, (), []) and what each brace opens
    - Function definitions: name, inline parameters, param() block,
      attributes such as [CmdletBinding()], comment-based help
    - Command invocations in statement position

ARCHITECTURAL RULE:
    The parser never reports style problems. An unbalanced bracket is
    the only thing it rejects (ParseError); everything else is recorded
    as-is and judged by the rules.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set

from psstyle.errors import ParseError
from psstyle.tokenizer import ASSIGNMENT_OPERATORS, Token, TokenKind, tokenize


_HELP_KEYWORD_RE = re.compile(
    r"^[\s#<]*\.(SYNOPSIS|DESCRIPTION|PARAMETER|EXAMPLE|INPUTS|OUTPUTS|NOTES|LINK|"
    r"COMPONENT|ROLE|FUNCTIONALITY|FORWARDHELPTARGETNAME|FORWARDHELPCATEGORY|"
    r"REMOTEHELPRUNSPACE|EXTERNALHELP)\b",
    re.IGNORECASE | re.MULTILINE,
)

_MATCHING = {
    TokenKind.LBRACE: TokenKind.RBRACE,
    TokenKind.LPAREN: TokenKind.RPAREN,
    TokenKind.LBRACKET: TokenKind.RBRACKET,
}

_FUNCTION_KEYWORDS = ("function", "filter", "workflow")
_DECLARATION_KEYWORDS = ("class", "enum", "switch")
_STATEMENT_PREFIX_KEYWORDS = ("return", "throw")


class PairContext(Enum):
    """What a bracket pair encloses."""

    BLOCK = "block"              # script block or statement body
    HASHTABLE = "hashtable"      # @{ ... }
    DECLARATION = "declaration"  # class / enum / switch body
    PAREN = "paren"              # (), $(), @()
    BRACKET = "bracket"          # [type] or [Attribute()]


@dataclass(frozen=True)
class BracePair:
    """A matched opening/closing bracket."""

    open: Token
    close: Token
    context: PairContext

    @property
    def is_multiline(self) -> bool:
        return self.close.line > self.open.line


@dataclass
class ParameterDeclaration:
    """
    A parameter declared by a function.

    Properties:
        name: Parameter name without the leading '$'
        token: The VARIABLE token declaring it
        attributes: Type constraints and attributes preceding it
            (e.g. ["Parameter", "string"])
    """

    name: str
    token: Token
    attributes: List[str] = field(default_factory=list)


@dataclass
class ParamBlock:
    """A param( ... ) block at the top of a function or script."""

    keyword: Token
    parens: BracePair
    parameters: List[ParameterDeclaration] = field(default_factory=list)


@dataclass
class FunctionDefinition:
    """
    A function (or filter/workflow) definition.

    Properties:
        keyword: The 'function' keyword token
        name: Function name as written (scope prefix removed)
        name_token: Token carrying the name
        body: Brace pair of the body, None for malformed definitions
        inline_parameters: Parameters declared as function Name($a, $b)
        param_block: The param() block inside the body, if any
        attributes: Attribute names declared before param(), e.g.
            ["CmdletBinding", "OutputType"]
        help: Comment tokens holding comment-based help
    """

    keyword: Token
    name: str
    name_token: Token
    body: Optional[BracePair] = None
    inline_parameters: List[ParameterDeclaration] = field(default_factory=list)
    param_block: Optional[ParamBlock] = None
    attributes: List[str] = field(default_factory=list)
    help: List[Token] = field(default_factory=list)

    @property
    def has_help(self) -> bool:
        return bool(self.help)

    def has_attribute(self, name: str) -> bool:
        return name.lower() in (a.lower() for a in self.attributes)


@dataclass
class CommandCall:
    """A command name in statement position (Get-ChildItem, gci, %, ...)."""

    name: str
    token: Token


@dataclass
class Script:
    """
    Root container for one parsed script.

    INVARIANTS:
        - tokens ends with an EOF token
        - every opener token has exactly one BracePair
        - lines[i] is line i + 1 without its line ending
    """

    path: str
    source: str
    lines: List[str]
    tokens: List[Token]
    brace_pairs: List[BracePair] = field(default_factory=list)
    functions: List[FunctionDefinition] = field(default_factory=list)
    commands: List[CommandCall] = field(default_factory=list)
    param_block: Optional[ParamBlock] = None
    string_lines: Set[int] = field(default_factory=set)
    comment_lines: Set[int] = field(default_factory=set)
    line_starts: List[int] = field(default_factory=list)
    _index: Dict[int, int] = field(default_factory=dict, repr=False)
    _pairs: Dict[int, BracePair] = field(default_factory=dict, repr=False)

    @property
    def newline(self) -> str:
        """Line ending of the script, taken from its first line; LF if it has none."""
        end = self.source.find("\n")
        return "\r\n" if end > 0 and self.source[end - 1] == "\r" else "\n"

    def line_offset(self, line: int) -> int:
        """Absolute offset of the first character of a 1-based line."""
        return self.line_starts[line - 1]

    def numbered_lines(self):
        """Yield (line number, text) pairs, skipping the empty tail after a final newline."""
        count = len(self.lines)
        if count > 1 and self.source.endswith("\n"):
            count -= 1
        for number in range(1, count + 1):
            yield number, self.lines[number - 1]

    def index_of(self, token: Token) -> int:
        return self._index[token.start]

    def pair_for(self, token: Token) -> Optional[BracePair]:
        """Return the bracket pair a bracket token belongs to."""
        pair = self._pairs.get(token.start)
        if pair is not None and token in (pair.open, pair.close):
            return pair
        return None

    def previous_significant(self, index: int) -> Optional[Token]:
        for i in range(index - 1, -1, -1):
            if self.tokens[i].is_significant:
                return self.tokens[i]
        return None

    def next_significant(self, index: int) -> Optional[Token]:
        for i in range(index + 1, len(self.tokens)):
            if self.tokens[i].is_significant:
                return self.tokens[i]
        return None

    def starts_line(self, index: int) -> bool:
        """True if no token precedes tokens[index] on its line."""
        if index == 0:
            return True
        return self.tokens[index - 1].kind in (TokenKind.NEWLINE, TokenKind.CONTINUATION)

    def ends_line(self, index: int) -> bool:
        """True if only a comment (or nothing) follows tokens[index] on its line."""
        for token in self.tokens[index + 1:]:
            if token.kind in (TokenKind.NEWLINE, TokenKind.EOF):
                return True
            if token.kind is not TokenKind.COMMENT:
                return False
        return True


def parse(source: str, path: str = "<string>") -> Script:
    """
    Parse script text into a Script.

    Args:
        source: Script text
        path: Path used in error messages and reports

    Returns:
        Script with pairs, functions and commands populated

    Raises:
        TokenizeError: If the text cannot be tokenized
        ParseError: If brackets are unbalanced
    """
    tokens = tokenize(source)
    script = Script(
        path=path,
        source=source,
        lines=[line.rstrip("\r") for line in source.split("\n")],
        tokens=tokens,
        line_starts=[0] + [i + 1 for i, ch in enumerate(source) if ch == "\n"],
    )
    script._index = {token.start: i for i, token in enumerate(tokens)}

    _Parser(script).run()
    return script


def parse_file(path: str) -> Script:
    """Read and parse a script file (UTF-8, BOM tolerated)."""
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        source = f.read()
    return parse(source, path=path)


class _Parser:
    """Populates a Script from its token list."""

    def __init__(self, script: Script) -> None:
        self.script = script
        self.tokens = script.tokens
        self._close_of: Dict[int, int] = {}
        self._open_of: Dict[int, int] = {}

    def run(self) -> None:
        self._match_pairs()
        self._mark_multiline_tokens()
        self._find_commands()
        self._find_functions()
        self.script.param_block = self._script_param_block()

    # =========================================================================
    # 1. BRACKET PAIRS
    # =========================================================================

    def _match_pairs(self) -> None:
        stack: List[int] = []
        for i, token in enumerate(self.tokens):
            if token.is_opener:
                stack.append(i)
            elif token.is_closer:
                if not stack:
                    raise ParseError(f"unmatched '{token.text}'", token.line, token.column,
                                     self.script.path)
                opener = self.tokens[stack.pop()]
                if _MATCHING[opener.kind] is not token.kind:
                    raise ParseError(
                        f"'{token.text}' does not close '{opener.text}' opened at line {opener.line}",
                        token.line, token.column, self.script.path,
                    )
                open_index = self.script.index_of(opener)
                self._close_of[open_index] = i
                self._open_of[i] = open_index
        if stack:
            opener = self.tokens[stack[-1]]
            raise ParseError(f"'{opener.text}' is never closed", opener.line, opener.column,
                             self.script.path)

        for open_index in sorted(self._close_of):
            close_index = self._close_of[open_index]
            opener = self.tokens[open_index]
            pair = BracePair(opener, self.tokens[close_index], self._context_for(open_index))
            self.script.brace_pairs.append(pair)
            self.script._pairs[opener.start] = pair
            self.script._pairs[pair.close.start] = pair

    def _context_for(self, open_index: int) -> PairContext:
        opener = self.tokens[open_index]
        if opener.kind is TokenKind.LPAREN:
            return PairContext.PAREN
        if opener.kind is TokenKind.LBRACKET:
            return PairContext.BRACKET
        if opener.text == "@{":
            return PairContext.HASHTABLE
        head = self._statement_head(open_index)
        if head is not None and head.is_keyword(*_DECLARATION_KEYWORDS):
            return PairContext.DECLARATION
        return PairContext.BLOCK

    def _statement_head(self, open_index: int) -> Optional[Token]:
        """First significant token of the statement an opening brace belongs to."""
        i = open_index - 1
        # An opening brace on its own line still belongs to the line above.
        while i >= 0 and not self.tokens[i].is_significant:
            i -= 1
        head = None
        while i >= 0:
            token = self.tokens[i]
            if token.kind in (TokenKind.NEWLINE, TokenKind.SEMICOLON) or token.is_opener:
                break
            if token.is_closer:
                i = self._open_of.get(i, i)
            if token.is_significant:
                head = self.tokens[i]
            i -= 1
        return head

    def _mark_multiline_tokens(self) -> None:
        for token in self.tokens:
            if not token.is_multiline:
                continue
            interior = range(token.line + 1, token.end_line + 1)
            if token.kind is TokenKind.STRING:
                self.script.string_lines.update(interior)
            elif token.kind is TokenKind.BLOCK_COMMENT:
                self.script.comment_lines.update(interior)

    # =========================================================================
    # 2. COMMANDS
    # =========================================================================

    def _find_commands(self) -> None:
        contexts: List[PairContext] = []
        at_start = True
        previous: Optional[Token] = None

        for token in self.tokens:
            if token.kind is TokenKind.NEWLINE:
                at_start = True
                continue
            if not token.is_significant:
                continue

            if at_start and self._command_context(contexts):
                if token.kind is TokenKind.WORD:
                    self.script.commands.append(CommandCall(token.text, token))
                elif (token.is_operator("%", "?") and previous is not None
                      and previous.kind is TokenKind.PIPE):
                    self.script.commands.append(CommandCall(token.text, token))

            if token.is_opener:
                contexts.append(self.script.pair_for(token).context)
            elif token.is_closer:
                contexts.pop()

            at_start = (
                token.kind in (TokenKind.SEMICOLON, TokenKind.PIPE, TokenKind.LBRACE, TokenKind.LPAREN)
                or token.is_operator("&&", "||")
                or (token.kind is TokenKind.OPERATOR and token.text in ASSIGNMENT_OPERATORS)
                or token.is_keyword(*_STATEMENT_PREFIX_KEYWORDS)
            )
            previous = token

    @staticmethod
    def _command_context(contexts: List[PairContext]) -> bool:
        if PairContext.BRACKET in contexts:
            return False
        if contexts and contexts[-1] in (PairContext.HASHTABLE, PairContext.DECLARATION):
            return False
        return True

    # =========================================================================
    # 3. FUNCTIONS
    # =========================================================================

    def _next_significant_index(self, index: int) -> Optional[int]:
        for i in range(index + 1, len(self.tokens)):
            if self.tokens[i].is_significant:
                return i
        return None

    def _find_functions(self) -> None:
        for i, token in enumerate(self.tokens):
            if token.is_keyword(*_FUNCTION_KEYWORDS):
                definition = self._parse_function(i)
                if definition is not None:
                    self.script.functions.append(definition)

    def _parse_function(self, keyword_index: int) -> Optional[FunctionDefinition]:
        name_index = self._next_significant_index(keyword_index)
        if name_index is None or self.tokens[name_index].kind is not TokenKind.WORD:
            return None

        # function global:Get-Thing { }
        after = name_index + 1
        if (after + 1 < len(self.tokens) and self.tokens[after].text == ":"
                and self.tokens[after + 1].kind is TokenKind.WORD):
            name_index = after + 1

        name_token = self.tokens[name_index]
        definition = FunctionDefinition(
            keyword=self.tokens[keyword_index],
            name=name_token.text,
            name_token=name_token,
        )

        i = self._next_significant_index(name_index)
        if i is not None and self.tokens[i].kind is TokenKind.LPAREN:
            definition.inline_parameters = self._parse_parameters(i)
            i = self._next_significant_index(self._close_of[i])
        if i is None or self.tokens[i].kind is not TokenKind.LBRACE:
            return definition

        definition.body = self.script.pair_for(self.tokens[i])
        definition.attributes, definition.param_block = self._parse_preamble(i)
        definition.help = self._find_help(keyword_index, i)
        return definition

    def _parse_preamble(self, open_index: int):
        """Read [Attribute()] ... param( ... ) at the start of a body."""
        attributes: List[str] = []
        i = self._next_significant_index(open_index)
        while i is not None and self.tokens[i].kind is TokenKind.LBRACKET:
            name_index = self._next_significant_index(i)
            if name_index is not None and self.tokens[name_index].kind is TokenKind.WORD:
                attributes.append(self.tokens[name_index].text)
            i = self._next_significant_index(self._close_of[i])

        if i is None or not self.tokens[i].is_keyword("param"):
            return attributes, None
        paren_index = self._next_significant_index(i)
        if paren_index is None or self.tokens[paren_index].kind is not TokenKind.LPAREN:
            return attributes, None
        block = ParamBlock(
            keyword=self.tokens[i],
            parens=self.script.pair_for(self.tokens[paren_index]),
            parameters=self._parse_parameters(paren_index),
        )
        return attributes, block

    def _script_param_block(self) -> Optional[ParamBlock]:
        """The script-level param() block, preceded only by attributes and comments."""
        i = self._next_significant_index(-1)
        while i is not None and self.tokens[i].kind is TokenKind.LBRACKET:
            i = self._next_significant_index(self._close_of[i])
        if i is None or not self.tokens[i].is_keyword("param"):
            return None
        paren_index = self._next_significant_index(i)
        if paren_index is None or self.tokens[paren_index].kind is not TokenKind.LPAREN:
            return None
        return ParamBlock(
            keyword=self.tokens[i],
            parens=self.script.pair_for(self.tokens[paren_index]),
            parameters=self._parse_parameters(paren_index),
        )

    def _parse_parameters(self, open_index: int) -> List[ParameterDeclaration]:
        parameters: List[ParameterDeclaration] = []
        pending: List[str] = []
        previous: Optional[Token] = self.tokens[open_index]
        i = open_index + 1
        close_index = self._close_of[open_index]

        while i < close_index:
            token = self.tokens[i]
            if not token.is_significant:
                i += 1
                continue
            if token.kind is TokenKind.LBRACKET:
                name_index = self._next_significant_index(i)
                if name_index is not None and self.tokens[name_index].kind is TokenKind.WORD:
                    pending.append(self.tokens[name_index].text)
                i = self._close_of[i]
                previous = self.tokens[i]
                i += 1
                continue
            if token.is_opener:
                # Default values such as = @('a', 'b') or = $(Get-Date)
                i = self._close_of[i]
                previous = self.tokens[i]
                i += 1
                continue
            if token.kind is TokenKind.VARIABLE and previous is not None and (
                previous is self.tokens[open_index]
                or previous.kind in (TokenKind.COMMA, TokenKind.RBRACKET)
            ):
                parameters.append(ParameterDeclaration(token.text.lstrip("$"), token, pending))
                pending = []
            elif token.kind is TokenKind.COMMA:
                pending = []
            previous = token
            i += 1
        return parameters

    def _find_help(self, keyword_index: int, open_index: int) -> List[Token]:
        before = self._comments_around(keyword_index, step=-1)
        if _is_help(before):
            return before
        close_index = self._close_of[open_index]
        at_start = self._comments_around(open_index, step=1, stop=close_index)
        if _is_help(at_start):
            return at_start
        at_end = self._comments_around(close_index, step=-1, stop=open_index)
        if _is_help(at_end):
            return at_end
        return []

    def _comments_around(self, index: int, step: int, stop: Optional[int] = None) -> List[Token]:
        """Consecutive comment tokens next to tokens[index], skipping newlines."""
        comments: List[Token] = []
        i = index + step
        while 0 <= i < len(self.tokens) and i != stop:
            token = self.tokens[i]
            if token.is_comment:
                comments.append(token)
            elif token.kind is not TokenKind.NEWLINE:
                break
            i += step
        if step < 0:
            comments.reverse()
        return comments


def _is_help(comments: List[Token]) -> bool:
    return any(_HELP_KEYWORD_RE.search(c.text) for c in comments)
