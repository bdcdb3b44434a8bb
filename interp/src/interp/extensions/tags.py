"""Extension tags - template directives beyond value substitution.

    {% credential github_token %}   the agent's credential named "github_token"
    {% credential my api key %}     the whole markup, trimmed, is the name
    {% credential "my-api key" %}   quoted form, also accepted
    {% line_break %}                a literal newline

Rendered credentials end up in the interpolated options verbatim, so
interpolated output must be treated as secret-bearing.
"""

import re
from typing import Any

from jinja2 import nodes
from jinja2.ext import Extension
from jinja2.parser import Parser
from jinja2.runtime import Context

from interp.context import REGISTERS_KEY
from interp.errors import CredentialNotFound, TemplatingRuntimeError


class CredentialExtension(Extension):
    """``{% credential name %}`` - look up a credential on the rendering agent."""

    tags = {"credential"}

    def __init__(self, environment):
        super().__init__(environment)
        block_end = re.escape(environment.block_end_string)
        self._bare_tag = re.compile(
            rf"({re.escape(environment.block_start_string)}[-+]?\s*credential\s+)"
            rf"(?![\s\"'])((?:(?!{block_end}).)+?)"
            rf"(\s*[-+]?{block_end})"
        )

    def preprocess(self, source: str, name: str | None, filename: str | None = None) -> str:
        # The raw markup is the name, trimmed at both ends only
        return self._bare_tag.sub(self._quote_name, source)

    @staticmethod
    def _quote_name(match: re.Match) -> str:
        name = match.group(2).replace("\\", "\\\\").replace('"', '\\"')
        return f'{match.group(1)}"{name}"{match.group(3)}'

    def parse(self, parser: Parser) -> nodes.Node:
        lineno = next(parser.stream).lineno
        name = self._parse_name(parser, lineno)
        call = self.call_method(
            "_render_credential",
            [nodes.ContextReference(), nodes.Const(name)],
            lineno=lineno,
        )
        return nodes.Output([call], lineno=lineno)

    @staticmethod
    def _parse_name(parser: Parser, lineno: int) -> str:
        stream = parser.stream
        if stream.current.type != "string":
            parser.fail("credential tag requires a credential name", lineno)
        name = next(stream).value.strip()
        if not name:
            parser.fail("credential tag requires a credential name", lineno)
        if stream.current.type != "block_end":
            parser.fail("credential tag takes a single name; quote names with spaces", lineno)
        return name

    def _render_credential(self, context: Context, name: str) -> str:
        registers: dict[str, Any] | None = context.get(REGISTERS_KEY)
        if not registers or registers.get("agent") is None:
            raise TemplatingRuntimeError(
                f"credential '{name}' used outside of an agent's interpolation context"
            )

        credential = registers["agent"].credential(name)
        if credential is None:
            raise CredentialNotFound(name)
        return credential


class LineBreakExtension(Extension):
    """``{% line_break %}`` - emit a single newline."""

    tags = {"line_break"}

    def parse(self, parser: Parser) -> nodes.Node:
        lineno = next(parser.stream).lineno
        return nodes.Output([nodes.TemplateData("\n")], lineno=lineno)


__all__ = ["CredentialExtension", "LineBreakExtension"]
