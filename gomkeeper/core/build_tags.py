"""Go build constraints.

A Go file may open with ``//go:build <expr>`` (``&&``, ``||``, ``!`` and
parentheses over tag names) or with one or more legacy ``// +build`` lines
(space means OR, comma means AND, ``!`` negates, separate lines are ANDed).
When a ``//go:build`` line is present the ``+build`` lines are ignored.

:class:`BuildTags` decides which tags hold for a target: its GOOS and
GOARCH, ``unix`` on Unix-like systems, the ``gc`` and ``cgo`` tags, and
every ``go1.N`` release tag. Any other tag, ``ignore`` included, is unset.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

from gomkeeper.constants import GOOS_ALSO_MATCHES, UNIX_GOOS

GO_BUILD_RE = re.compile(r"^//go:build(?:\s|$)")
PLUS_BUILD_RE = re.compile(r"^//\s*\+build(?:\s|$)")

_TAG_RE = re.compile(r"^[\w.]+$")
_RELEASE_TAG_RE = re.compile(r"^go1\.\d+$")
_EXPR_TOKEN_RE = re.compile(r"\s*(?:(&&|\|\||[!()])|([\w.]+))")

#: ``("tag", name)``, ``("not", expr)``, ``("and", a, b)`` or ``("or", a, b)``.
Expr = Tuple[Union[str, "Expr"], ...]


@dataclass(frozen=True)
class BuildTags:
    """Tags satisfied when building for ``goos``/``goarch``."""

    goos: str
    goarch: str

    def matches(self, tag: str) -> bool:
        if tag in (self.goos, self.goarch, "gc", "cgo"):
            return True
        if tag == "unix":
            return self.goos in UNIX_GOOS
        if GOOS_ALSO_MATCHES.get(self.goos) == tag:
            return True
        return _RELEASE_TAG_RE.match(tag) is not None


@dataclass(frozen=True)
class BuildConstraint:
    """A parsed constraint together with the comment lines it came from."""

    expr: Expr
    lines: Tuple[str, ...]

    def satisfied_by(self, tags: BuildTags) -> bool:
        return evaluate(self.expr, tags.matches)

    @classmethod
    def from_lines(cls, lines: Sequence[str]) -> Optional["BuildConstraint"]:
        """Combine the constraint comments of one file header.

        Returns ``None`` when the lines place no constraint.

        Raises:
            ValueError: A line is malformed, or there are two ``//go:build``
                lines.
        """
        go_build = [line for line in lines if GO_BUILD_RE.match(line)]
        if len(go_build) > 1:
            raise ValueError("multiple //go:build lines")
        if go_build:
            return cls(parse_go_build(go_build[0]), (go_build[0],))

        plus_lines = [line for line in lines if PLUS_BUILD_RE.match(line)]
        exprs = [expr for expr in map(parse_plus_build, plus_lines) if expr is not None]
        if not exprs:
            return None
        combined = exprs[0]
        for expr in exprs[1:]:
            combined = ("and", combined, expr)
        return cls(combined, tuple(plus_lines))


def evaluate(expr: Expr, matches: Callable[[str], bool]) -> bool:
    op = expr[0]
    if op == "tag":
        return matches(expr[1])  # type: ignore[arg-type]
    if op == "not":
        return not evaluate(expr[1], matches)  # type: ignore[arg-type]
    left = evaluate(expr[1], matches)  # type: ignore[arg-type]
    if op == "and":
        return left and evaluate(expr[2], matches)  # type: ignore[arg-type]
    return left or evaluate(expr[2], matches)  # type: ignore[arg-type]


def parse_plus_build(line: str) -> Optional[Expr]:
    """Parse a ``// +build`` line; ``None`` when it lists no options."""
    options: List[Expr] = []
    for option in line.split("+build", 1)[1].split():
        terms: List[Expr] = []
        for term in option.split(","):
            negated = term.startswith("!")
            name = term[1:] if negated else term
            if not _TAG_RE.match(name):
                raise ValueError(f"invalid +build term {term!r}")
            terms.append(("not", ("tag", name)) if negated else ("tag", name))
        options.append(_fold("and", terms))
    return _fold("or", options) if options else None


def parse_go_build(line: str) -> Expr:
    """Parse a ``//go:build`` line.

    Raises:
        ValueError: The expression is malformed.
    """
    return _ExprParser(line[len("//go:build"):]).parse()


def _fold(op: str, exprs: List[Expr]) -> Expr:
    result = exprs[0]
    for expr in exprs[1:]:
        result = (op, result, expr)
    return result


class _ExprParser:
    """Recursive descent over ``||`` < ``&&`` < ``!`` and parentheses."""

    def __init__(self, text: str) -> None:
        self.tokens: List[Tuple[str, str]] = []
        pos = 0
        text = text.rstrip()
        while pos < len(text):
            match = _EXPR_TOKEN_RE.match(text, pos)
            if match is None:
                raise ValueError(f"unexpected {text[pos:].strip()[:1]!r} in //go:build")
            if match.group(1):
                self.tokens.append(("op", match.group(1)))
            else:
                self.tokens.append(("tag", match.group(2)))
            pos = match.end()
        self.pos = 0

    def parse(self) -> Expr:
        if not self.tokens:
            raise ValueError("empty //go:build expression")
        expr = self._or()
        if self.pos < len(self.tokens):
            raise ValueError(f"unexpected {self.tokens[self.pos][1]!r} in //go:build")
        return expr

    def _peek(self) -> Optional[Tuple[str, str]]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _take(self) -> Tuple[str, str]:
        token = self._peek()
        if token is None:
            raise ValueError("unexpected end of //go:build expression")
        self.pos += 1
        return token

    def _or(self) -> Expr:
        expr = self._and()
        while self._peek() == ("op", "||"):
            self._take()
            expr = ("or", expr, self._and())
        return expr

    def _and(self) -> Expr:
        expr = self._not()
        while self._peek() == ("op", "&&"):
            self._take()
            expr = ("and", expr, self._not())
        return expr

    def _not(self) -> Expr:
        kind, text = self._take()
        if (kind, text) == ("op", "!"):
            return ("not", self._not())
        if (kind, text) == ("op", "("):
            expr = self._or()
            if self._take() != ("op", ")"):
                raise ValueError("missing ')' in //go:build")
            return expr
        if kind != "tag":
            raise ValueError(f"unexpected {text!r} in //go:build")
        return ("tag", text)
