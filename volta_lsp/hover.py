"""
hover.py - Informação contextual ao passar o mouse (textDocument/hover)

Propósito:
    Consulta o compilador sobre o símbolo sob o cursor e formata a
    resposta como Markdown.

Formato do hover:
    **nome**: `tipo`
    ```volta
    assinatura
    ```
    documentação
    **Parameters:** (apenas parâmetros documentados)
    **Returns:** documentação do retorno

Notas de implementação:
    - Posição LSP (0-based) → linha 1-based, coluna 0-based para o compilador
    - Qualquer falha da consulta → None (sem hover, sem erro ao usuário)
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from lsprotocol.types import Hover, MarkupContent, MarkupKind, Position

from volta_lsp.symbols import CompilerQueryResult, SymbolInfo

logger = logging.getLogger(__name__)

# (linha 1-based, coluna 0-based) → CompilerQueryResult
SymbolQuery = Callable[[int, int], Awaitable[CompilerQueryResult]]


def to_compiler_position(position: Position) -> tuple[int, int]:
    """Converte Position LSP para a convenção do compilador."""
    return position.line + 1, position.character


def format_hover_markdown(info: SymbolInfo) -> str:
    """Monta o Markdown do hover a partir de SymbolInfo."""
    md = f"**{info.name}**: `{info.type}`\n\n"
    md += f"```volta\n{info.signature}\n```"

    if info.documentation:
        md += f"\n\n{info.documentation}"

    documented = [p for p in (info.parameters or []) if p.documentation]
    if documented:
        md += "\n\n**Parameters:**\n"
        for param in documented:
            md += f"- `{param.name}`: {param.documentation}\n"

    if info.return_doc:
        md += f"\n\n**Returns:** {info.return_doc}"

    return md


async def compute_hover(position: Position, query: SymbolQuery) -> Optional[Hover]:
    """
    Computa hover para a posição do cursor.

    Args:
        position: Posição do cursor (0-based)
        query: Consulta de símbolo ligada ao documento

    Returns:
        Hover com MarkupContent ou None se nada encontrado
    """
    line, column = to_compiler_position(position)
    result = await query(line, column)

    if not result.success or result.result is None:
        code = result.error.code if result.error else "?"
        logger.debug(f"Hover sem informação em {line}:{column} ({code})")
        return None

    return Hover(
        contents=MarkupContent(
            kind=MarkupKind.Markdown,
            value=format_hover_markdown(result.result),
        )
    )
