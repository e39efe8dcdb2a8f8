"""
diagnostics.py - Conversão da saída de erro do compilador Volta para LSP

Propósito:
    Extrair diagnósticos estruturados das linhas de texto livre que o
    compilador escreve em stderr no modo --no-execute.

Componentes principais:
    - convert_severity: "error"/"warning" → DiagnosticSeverity
    - parse_diagnostic_line: Uma linha → Diagnostic (ou None)
    - parse_compiler_output: Bloco de texto → List[Diagnostic]

Exemplo de uso:
    from volta_lsp.diagnostics import parse_compiler_output

    diagnostics = parse_compiler_output(":3:5-7: error: Type mismatch")

Notas de implementação:
    - Formato: :linha:coluna[-coluna_fim]: (error|warning): mensagem
    - Linha do compilador é 1-based; convertida para 0-based (LSP)
    - Coluna do compilador é usada como está (já tratada como 0-based)
    - Sem coluna_fim, o range tem comprimento 1
    - Linhas fora do formato (banner, stack trace, vazias) são ignoradas
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from lsprotocol.types import (
    Diagnostic,
    DiagnosticSeverity,
    Position,
    Range,
)

logger = logging.getLogger(__name__)

DIAGNOSTIC_SOURCE = "volta"

# Maior valor aceito por Position.line/character no lsprotocol
_MAX_POSITION = 2**31 - 1

_DIAGNOSTIC_LINE = re.compile(
    r":(?P<line>\d+):(?P<col>\d+)(?:-(?P<end>\d+))?: (?P<tag>error|warning): (?P<message>.+)"
)


def convert_severity(tag: str) -> DiagnosticSeverity:
    """
    Mapeia o rótulo de severidade do compilador para DiagnosticSeverity.

    Mapeamento:
        error   → DiagnosticSeverity.Error (1)
        warning → DiagnosticSeverity.Warning (2)
    """
    if tag == "error":
        return DiagnosticSeverity.Error
    return DiagnosticSeverity.Warning


def parse_diagnostic_line(line: str) -> Optional[Diagnostic]:
    """Converte uma linha de stderr em Diagnostic, ou None se não casar."""
    match = _DIAGNOSTIC_LINE.search(line)
    if not match:
        return None

    line_number = int(match.group("line")) - 1
    start_char = int(match.group("col"))
    end = match.group("end")
    end_char = int(end) if end is not None else start_char + 1

    # Linha 0 ou números fora do intervalo do protocolo não são posições válidas
    if line_number < 0 or max(line_number, start_char, end_char) > _MAX_POSITION:
        logger.debug(f"Posição fora do intervalo ignorada: {line.strip()}")
        return None

    return Diagnostic(
        range=Range(
            start=Position(line=line_number, character=start_char),
            end=Position(line=line_number, character=end_char),
        ),
        severity=convert_severity(match.group("tag")),
        source=DIAGNOSTIC_SOURCE,
        message=match.group("message").strip(),
    )


def parse_compiler_output(text: str) -> List[Diagnostic]:
    """
    Extrai todos os diagnósticos de um bloco de saída do compilador.

    Args:
        text: stderr completo do compilador

    Returns:
        Lista de Diagnostic na ordem em que aparecem no texto

    Nota:
        - Nunca falha; linhas não reconhecidas são descartadas
    """
    diagnostics: List[Diagnostic] = []

    for line in text.splitlines():
        diagnostic = parse_diagnostic_line(line)
        if diagnostic is not None:
            diagnostics.append(diagnostic)

    logger.debug(f"{len(diagnostics)} diagnósticos extraídos da saída do compilador")
    return diagnostics
