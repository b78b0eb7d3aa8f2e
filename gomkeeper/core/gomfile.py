"""Gomfile parser.

Parses the Ruby-flavoured manifest format used by gom:

- ``gom 'github.com/foo/bar'``
- ``gom 'github.com/foo/bar', :commit => 'a1b2c3', :group => 'test'``
- ``gom 'github.com/foo/bar', goos: [:linux, :darwin]`` (new-style keys)
- ``group :test, :development do`` … ``end`` blocks, which tag every
  enclosed entry with ``:group``
- ``platform :windows do`` … ``end`` blocks, which tag enclosed entries
  with ``:goos``
- ``#`` comments, whole-line or trailing

Typical usage::

    from gomkeeper.core.gomfile import GomfileParser

    parser = GomfileParser()
    for dep in parser.parse_file("Gomfile"):
        print(dep.name, dep.options)
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from gomkeeper.exceptions import ParseError
from gomkeeper.utils import get_logger, safe_read_file
from gomkeeper.models.dependency import (
    GOOS_OPTION,
    GROUP_OPTION,
    Dependency,
    Symbol,
)

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<comment>\#.*)
  | (?P<sq>'(?:[^'\\]|\\.)*')
  | (?P<dq>"(?:[^"\\]|\\.)*")
  | (?P<arrow>=>)
  | (?P<label>[A-Za-z_]\w*:(?!:))
  | (?P<symbol>:[A-Za-z_]\w*)
  | (?P<word>[A-Za-z_]\w*)
  | (?P<punct>[,\[\]()])
    """,
    re.VERBOSE,
)

#: Block keywords and the option they apply to enclosed entries.
_BLOCK_OPTIONS = {
    "group": GROUP_OPTION,
    "platform": GOOS_OPTION,
}

Token = Tuple[str, str]


def _tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ValueError(f"unexpected character {text[pos]!r}")
        kind = match.lastgroup
        if kind == "comment":
            break
        if kind != "ws":
            tokens.append((kind, match.group()))
        pos = match.end()
    return tokens


def _unquote(literal: str) -> str:
    return re.sub(r"\\(.)", r"\1", literal[1:-1])


class _ArgumentReader:
    """Reads a comma-separated Ruby argument list from a token stream."""

    def __init__(self, tokens: List[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self) -> Token:
        token = self.peek()
        if token is None:
            raise ValueError("unexpected end of line")
        self.pos += 1
        return token

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def value(self) -> Any:
        kind, text = self.take()
        if kind in ("sq", "dq"):
            return _unquote(text)
        if kind == "symbol":
            return Symbol(text[1:])
        if kind == "word" and text in ("true", "false"):
            return text == "true"
        if (kind, text) == ("punct", "["):
            items: List[Any] = []
            while self.peek() != ("punct", "]"):
                items.append(self.value())
                if self.peek() == ("punct", ","):
                    self.take()
                elif self.peek() != ("punct", "]"):
                    raise ValueError("expected ',' or ']' in array")
            self.take()
            return items
        raise ValueError(f"unexpected {text!r}")

    def arguments(self, *, stop: Optional[str] = None) -> Tuple[List[Any], Dict[str, Any]]:
        """Read positional values and ``key => value`` options.

        Reading ends at the end of the line, or before the bare word
        ``stop`` (``do`` for block headers).
        """
        positional: List[Any] = []
        options: Dict[str, Any] = {}

        while not self.at_end() and self.peek() != ("word", stop):
            kind, text = self.peek()  # type: ignore[misc]
            if kind == "label":
                self.take()
                options[text[:-1]] = self.value()
            elif kind == "symbol" and self._followed_by_arrow():
                self.take()
                self.take()
                options[text[1:]] = self.value()
            else:
                if options:
                    raise ValueError("positional argument after options")
                positional.append(self.value())

            if self.peek() == ("punct", ","):
                self.take()
                if self.at_end():
                    raise ValueError("trailing ','")
            elif not self.at_end() and self.peek() != ("word", stop):
                raise ValueError(f"expected ',' before {self.peek()[1]!r}")  # type: ignore[index]

        return positional, options

    def _followed_by_arrow(self) -> bool:
        nxt = self.tokens[self.pos + 1] if self.pos + 1 < len(self.tokens) else None
        return nxt is not None and nxt[0] == "arrow"


class GomfileParser:
    """Parser for Gomfile manifests.

    Block state (``group``/``platform`` nesting) lives on the instance for
    the duration of one :meth:`parse_string` call.
    """

    def __init__(self) -> None:
        self.logger = get_logger("gomfile")
        self._blocks: List[Tuple[str, List[str]]] = []

    def parse_file(self, file_path: Union[str, Path]) -> List[Dependency]:
        """Parse a Gomfile from disk.

        Raises:
            FileOperationError: The file does not exist or cannot be read.
            ParseError: The file contains invalid syntax.
        """
        path = Path(file_path)
        self.logger.debug("Parsing file: %s", path)
        return self.parse_string(safe_read_file(path), source_file_path=str(path))

    def parse_string(
        self,
        content: str,
        source_file_path: Optional[str] = None,
    ) -> List[Dependency]:
        """Parse Gomfile text into dependencies, in source order.

        Raises:
            ParseError: Invalid syntax, unbalanced ``do``/``end``, or a
                dependency declared twice.
        """
        self._blocks = []
        dependencies: List[Dependency] = []
        seen: Dict[str, int] = {}

        for line_number, line_text in enumerate(content.splitlines(), start=1):
            dep = self.parse_line(line_text, line_number, source_file_path)
            if dep is None:
                continue

            if dep.name in seen:
                raise ParseError(
                    f"Duplicate dependency {dep.name!r} "
                    f"(first declared on line {seen[dep.name]})",
                    line_number=line_number,
                    line_content=line_text,
                    file_path=source_file_path,
                )
            seen[dep.name] = line_number
            dependencies.append(dep)

        if self._blocks:
            keyword, _ = self._blocks[-1]
            raise ParseError(
                f"Unterminated '{keyword}' block: missing 'end'",
                file_path=source_file_path,
            )

        self.logger.debug("Parsed %d dependency(ies)", len(dependencies))
        return dependencies

    def parse_line(
        self,
        line_text: str,
        line_number: int,
        source_file_path: Optional[str] = None,
    ) -> Optional[Dependency]:
        """Parse one line; returns ``None`` for blanks, comments and blocks."""

        def fail(message: str) -> ParseError:
            return ParseError(
                message,
                line_number=line_number,
                line_content=line_text.strip(),
                file_path=source_file_path,
            )

        try:
            tokens = _tokenize(line_text)
        except ValueError as exc:
            raise fail(f"Invalid Gomfile syntax: {exc}") from exc

        if not tokens:
            return None

        kind, keyword = tokens[0]
        if kind != "word":
            raise fail(f"Unexpected {keyword!r} at start of line")

        if keyword == "end":
            if len(tokens) > 1:
                raise fail("Unexpected tokens after 'end'")
            if not self._blocks:
                raise fail("'end' without a matching block")
            self._blocks.pop()
            return None

        reader = _ArgumentReader(_strip_call_parens(tokens[1:]))

        try:
            if keyword in _BLOCK_OPTIONS:
                values, _ = reader.arguments(stop="do")
                if reader.take() != ("word", "do") or not reader.at_end():
                    raise ValueError(f"expected 'do' at end of '{keyword}'")
                if not values:
                    raise ValueError(f"'{keyword}' needs at least one value")
                self._blocks.append((keyword, [str(v) for v in _flatten(values)]))
                return None

            if keyword != "gom":
                raise ValueError(f"unknown directive '{keyword}'")

            positional, options = reader.arguments()
        except ValueError as exc:
            raise fail(f"Invalid Gomfile syntax: {exc}") from exc

        if len(positional) != 1 or not isinstance(positional[0], str) or not positional[0]:
            raise fail("'gom' takes exactly one import path")

        # Innermost block wins
        for block_keyword, block_values in reversed(self._blocks):
            option = _BLOCK_OPTIONS[block_keyword]
            options.setdefault(option, [Symbol(v) for v in block_values])

        return Dependency(
            name=str(positional[0]),
            options=options,
            line_number=line_number,
        )


def _strip_call_parens(tokens: List[Token]) -> List[Token]:
    """Drop the parentheses of ``gom('x', ...)`` / ``group(:test) do``."""
    if not tokens or tokens[0] != ("punct", "("):
        return tokens
    for index, token in enumerate(tokens):
        if token == ("punct", ")"):
            return tokens[1:index] + tokens[index + 1 :]
    return tokens


def _flatten(values: List[Any]) -> List[Any]:
    flat: List[Any] = []
    for value in values:
        if isinstance(value, list):
            flat.extend(value)
        else:
            flat.append(value)
    return flat


def parse_gomfile(file_path: Union[str, Path]) -> List[Dependency]:
    """Parse ``file_path`` with a fresh :class:`GomfileParser`."""
    return GomfileParser().parse_file(file_path)
