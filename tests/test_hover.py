"""
test_hover.py - Testes para textDocument/hover

Propósito:
    Validar a conversão de posição para o compilador e o Markdown gerado
    a partir de SymbolInfo. Usa consultas simuladas (sem compilador).
"""

from __future__ import annotations

import asyncio

from lsprotocol.types import MarkupKind, Position

from volta_lsp.errors import PARSE_ERROR, SYMBOL_NOT_FOUND
from volta_lsp.hover import compute_hover, format_hover_markdown, to_compiler_position
from volta_lsp.symbols import (
    CompilerQueryResult,
    ParameterDoc,
    SymbolInfo,
    SymbolKind,
    parse_query_response,
)


def _make_query(result: CompilerQueryResult, calls: list = None):
    async def query(line, column):
        if calls is not None:
            calls.append((line, column))
        return result

    return query


def _function_info(**overrides):
    data = dict(
        kind=SymbolKind.FUNCTION,
        name="add",
        type="fn(int, int) -> int",
        signature="fn add(a: int, b: int) -> int",
        documentation="Soma dois inteiros.",
        parameters=[
            ParameterDoc("a", "primeiro operando"),
            ParameterDoc("b", ""),
        ],
        return_doc="a soma de a e b",
    )
    data.update(overrides)
    return SymbolInfo(**data)


# --- Conversão de posição ---


def test_to_compiler_position():
    """Linha vira 1-based; coluna permanece 0-based."""
    assert to_compiler_position(Position(line=0, character=0)) == (1, 0)
    assert to_compiler_position(Position(line=9, character=4)) == (10, 4)


# --- Markdown ---


def test_markdown_full():
    md = format_hover_markdown(_function_info())

    assert md.startswith("**add**: `fn(int, int) -> int`")
    assert "```volta\nfn add(a: int, b: int) -> int\n```" in md
    assert "Soma dois inteiros." in md
    assert "**Parameters:**" in md
    assert "- `a`: primeiro operando" in md
    assert "- `b`" not in md  # sem documentação
    assert md.endswith("**Returns:** a soma de a e b")


def test_markdown_minimal_variable():
    info = SymbolInfo(kind=SymbolKind.VARIABLE, name="count", type="int", signature="let count: int")
    md = format_hover_markdown(info)

    assert md == "**count**: `int`\n\n```volta\nlet count: int\n```"


def test_markdown_no_documented_parameters():
    md = format_hover_markdown(
        _function_info(parameters=[ParameterDoc("a"), ParameterDoc("b")], return_doc=None)
    )
    assert "Parameters" not in md
    assert "Returns" not in md


# --- compute_hover ---


def test_hover_success():
    calls = []
    query = _make_query(CompilerQueryResult.ok(_function_info()), calls)

    hover = asyncio.run(compute_hover(Position(line=2, character=7), query))

    assert hover is not None
    assert hover.contents.kind == MarkupKind.Markdown
    assert "**add**" in hover.contents.value
    assert calls == [(3, 7)]


def test_hover_symbol_not_found():
    query = _make_query(CompilerQueryResult.failure(SYMBOL_NOT_FOUND, "nada"))
    assert asyncio.run(compute_hover(Position(line=0, character=0), query)) is None


def test_hover_malformed_json_returns_none():
    """JSON inválido do compilador → ParseError → sem hover."""
    result = parse_query_response("<<not json>>")
    assert result.error.code == PARSE_ERROR

    hover = asyncio.run(compute_hover(Position(line=0, character=0), _make_query(result)))
    assert hover is None
