"""Parser for the shell's command language: words, redirections, pipes, lists, background jobs and blocks."""

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Union

WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"
MAXARGS = 10

WORD = "word"

_SINGLE = "|();&<"


class ShellSyntaxError(ValueError):
    """Raised when a command line cannot be parsed."""

    def __init__(self, message, leftovers=None):
        super().__init__(message)
        self.leftovers = leftovers


class RedirMode(enum.Enum):
    """How a redirected file is opened."""

    READ = "<"
    WRITE = ">"
    APPEND = ">>"

    @property
    def fd(self):
        """The file descriptor the redirection replaces."""
        return 0 if self is RedirMode.READ else 1

    @property
    def truncates(self):
        """True if opening the file discards its contents."""
        return self is RedirMode.WRITE

    @property
    def creates(self):
        """True if the file is created when missing."""
        return self is not RedirMode.READ


@dataclass
class ExecCmd:
    """Run a program with arguments; ``argv[0]`` names the program."""

    argv: List[str] = field(default_factory=list)


@dataclass
class RedirCmd:
    """Run ``cmd`` with one file descriptor redirected to ``file``."""

    cmd: "Command"
    file: str
    mode: RedirMode

    @property
    def fd(self):
        return self.mode.fd


@dataclass
class PipeCmd:
    """Connect the output of ``left`` to the input of ``right``."""

    left: "Command"
    right: "Command"


@dataclass
class ListCmd:
    """Run ``left`` to completion, then ``right``."""

    left: "Command"
    right: "Command"


@dataclass
class BackCmd:
    """Run ``cmd`` without waiting for it."""

    cmd: "Command"


Command = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str
    start: int


def _visible(line):
    return line.split("\0", 1)[0]


def _lex(line):
    end = len(line)
    pos = 0
    tokens = []
    while True:
        while pos < end and line[pos] in WHITESPACE:
            pos += 1
        if pos >= end:
            return tokens
        start = pos
        c = line[pos]
        if c in _SINGLE:
            kind = c
            pos += 1
        elif c == ">":
            pos += 1
            if pos < end and line[pos] == ">":
                kind = ">>"
                pos += 1
            else:
                kind = ">"
        else:
            while pos < end and line[pos] not in WHITESPACE and line[pos] not in SYMBOLS:
                pos += 1
            kind = WORD
        tokens.append(_Token(kind, line[start:pos], start))


def tokenize(line):
    """Split a command line into ``(kind, text)`` pairs.

    ``kind`` is ``"word"`` for words and the operator itself otherwise:
    one of ``| ( ) ; & < > >>``.
    """
    return [(tok.kind, tok.text) for tok in _lex(_visible(line))]


class _Parser:
    def __init__(self, line):
        self.line = line
        self.tokens = _lex(line)
        self.index = 0

    def peek(self, kinds):
        return self.index < len(self.tokens) and self.tokens[self.index].kind in kinds

    def take(self) -> Optional[_Token]:
        if self.index >= len(self.tokens):
            return None
        tok = self.tokens[self.index]
        self.index += 1
        return tok

    def parse_line(self):
        cmd = self.parse_pipe()
        while self.peek({"&"}):
            self.take()
            cmd = BackCmd(cmd)
        if self.peek({";"}):
            self.take()
            cmd = ListCmd(cmd, self.parse_line())
        return cmd

    def parse_pipe(self):
        cmd = self.parse_exec()
        if self.peek({"|"}):
            self.take()
            cmd = PipeCmd(cmd, self.parse_pipe())
        return cmd

    def parse_redirs(self, cmd):
        while self.peek({"<", ">", ">>"}):
            op = self.take()
            target = self.take()
            if target is None or target.kind != WORD:
                raise ShellSyntaxError("missing file for redirection")
            cmd = RedirCmd(cmd, target.text, RedirMode(op.kind))
        return cmd

    def parse_block(self):
        if not self.peek({"("}):
            raise ShellSyntaxError("parseblock")
        self.take()
        cmd = self.parse_line()
        if not self.peek({")"}):
            raise ShellSyntaxError("syntax - missing )")
        self.take()
        return self.parse_redirs(cmd)

    def parse_exec(self):
        if self.peek({"("}):
            return self.parse_block()
        exec_cmd = ExecCmd()
        ret = self.parse_redirs(exec_cmd)
        while not self.peek({"|", ")", "&", ";"}):
            tok = self.take()
            if tok is None:
                break
            if tok.kind != WORD:
                raise ShellSyntaxError("syntax")
            exec_cmd.argv.append(tok.text)
            if len(exec_cmd.argv) >= MAXARGS:
                raise ShellSyntaxError("too many args")
            ret = self.parse_redirs(ret)
        return ret


def parse_cmd(line):
    """Parse a whole command line into a command tree.

    Raises ShellSyntaxError for malformed input, including text left over
    after a complete command.
    """
    parser = _Parser(_visible(line))
    cmd = parser.parse_line()
    if parser.index < len(parser.tokens):
        rest = parser.line[parser.tokens[parser.index].start:]
        raise ShellSyntaxError("syntax", leftovers=rest)
    return cmd