"""
definition.py - Go-to-definition via --lsp-info

Propósito:
    Resolve a definição do símbolo sob o cursor consultando o compilador.

Notas de implementação:
    - Se o compilador informa "location", ela é usada (line 1-based → 0-based,
      column já 0-based); sem "file" a localização é no próprio documento
    - Sem "location" o resultado é a própria posição do cursor (o compilador
      ainda não expõe a declaração em todos os casos)
    - Consulta com falha → None
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from lsprotocol.types import Location, Position, Range

from volta_lsp.hover import SymbolQuery, to_compiler_position
from volta_lsp.symbols import SymbolLocation

logger = logging.getLogger(__name__)


async def compute_definition(
    uri: str, position: Position, query: SymbolQuery
) -> Optional[Location]:
    """
    Resolve a definição do símbolo na posição.

    Args:
        uri: URI do documento consultado
        position: Posição do cursor (0-based)
        query: Consulta de símbolo ligada ao documento

    Returns:
        Location da definição, ou None
    """
    line, column = to_compiler_position(position)
    result = await query(line, column)
    if not result.success or result.result is None:
        return None

    location = result.result.location
    if location is not None:
        return _location_to_lsp(location, uri)

    return Location(uri=uri, range=Range(start=position, end=position))


def _location_to_lsp(location: SymbolLocation, uri: str) -> Location:
    """Converte SymbolLocation do compilador para LSP Location."""
    target = uri
    if location.file:
        target = Path(location.file).resolve().as_uri()

    line = max(0, location.line - 1)  # 1-based → 0-based
    col = max(0, location.column)
    pos = Position(line=line, character=col)

    return Location(uri=target, range=Range(start=pos, end=pos))
