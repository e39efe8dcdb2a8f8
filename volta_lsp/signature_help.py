"""
signature_help.py - Ajuda de assinatura para chamadas de função Volta

Propósito:
    Exibe os parâmetros da função sendo chamada enquanto o usuário digita
    os argumentos. Trigger: "(" e ",".

Heurística (textual, não semântica):
    1. Texto da linha atual até o cursor
    2. "(" mais próximo ainda não fechado; sem ele, não há chamada
    3. Identificador imediatamente antes do "(" = nome da função
    4. Primeira linha do documento com "fn <nome>(" = definição
    5. Consulta --lsp-info na posição do nome na definição
    6. Uma única assinatura "<nome>(p1, p2)" com os parâmetros documentados
    7. Parâmetro ativo = vírgulas entre o "(" e o cursor, limitado a [0, n-1]

Notas de implementação:
    - A busca pela definição pode casar texto em strings ou comentários e
      ignora escopo e sombreamento; a tabela de símbolos real é do compilador
    - Vírgulas dentro de parênteses aninhados não contam
    - Qualquer passo sem resultado → None
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from lsprotocol.types import (
    ParameterInformation,
    Position,
    SignatureHelp,
    SignatureInformation,
)

from volta_lsp.hover import SymbolQuery
from volta_lsp.symbols import SymbolInfo

logger = logging.getLogger(__name__)

FUNCTION_KEYWORD = "fn"

# Identificador no fim do texto antes do "("
_TRAILING_IDENTIFIER = re.compile(r"(\w+)$")


@dataclass
class CallContext:
    """Chamada em andamento na linha do cursor."""

    function_name: str
    open_paren: int
    active_parameter: int


def find_open_paren(text: str) -> int:
    """Índice do "(" não fechado mais próximo do fim de text, ou -1."""
    depth = 0
    for index in range(len(text) - 1, -1, -1):
        char = text[index]
        if char == ")":
            depth += 1
        elif char == "(":
            if depth == 0:
                return index
            depth -= 1
    return -1


def count_top_level_commas(text: str) -> int:
    """Conta vírgulas fora de parênteses aninhados."""
    depth = 0
    commas = 0
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        elif char == "," and depth == 0:
            commas += 1
    return commas


def find_call_context(line_text: str, character: int) -> Optional[CallContext]:
    """Localiza a chamada que contém o cursor na linha."""
    before_cursor = line_text[:character]

    open_paren = find_open_paren(before_cursor)
    if open_paren == -1:
        return None

    match = _TRAILING_IDENTIFIER.search(before_cursor[:open_paren].rstrip())
    if not match:
        return None

    return CallContext(
        function_name=match.group(1),
        open_paren=open_paren,
        active_parameter=count_top_level_commas(before_cursor[open_paren + 1:]),
    )


def find_function_definition(lines: List[str], name: str) -> Optional[tuple[int, int]]:
    """
    Procura a primeira definição textual "fn <name>(" no documento.

    Returns:
        (linha 1-based, coluna 0-based do nome) ou None
    """
    pattern = re.compile(
        rf"\b{FUNCTION_KEYWORD}\s+(?P<name>{re.escape(name)})\s*\("
    )
    for index, line in enumerate(lines):
        match = pattern.search(line)
        if match:
            return index + 1, match.start("name")
    return None


def build_signature_help(info: SymbolInfo, active_parameter: int) -> SignatureHelp:
    """Constrói SignatureHelp com uma única assinatura."""
    params = info.parameters or []

    parameters = [
        ParameterInformation(
            label=param.name,
            documentation=param.documentation or None,
        )
        for param in params
    ]

    label = f"{info.name}({', '.join(p.name for p in params)})"

    sig = SignatureInformation(
        label=label,
        documentation=info.documentation or None,
        parameters=parameters,
    )

    active = max(0, min(active_parameter, len(parameters) - 1))

    return SignatureHelp(
        signatures=[sig],
        active_signature=0,
        active_parameter=active,
    )


async def compute_signature_help(
    source: str,
    position: Position,
    query: SymbolQuery,
) -> Optional[SignatureHelp]:
    """
    Computa SignatureHelp para a chamada sob o cursor.

    Args:
        source: Texto-fonte do documento
        position: Posição do cursor (0-based)
        query: Consulta de símbolo ligada ao documento

    Returns:
        SignatureHelp com uma assinatura, ou None
    """
    # Linhas como o editor as conta: só \n (e \r\n) quebram linha
    lines = [line[:-1] if line.endswith("\r") else line for line in source.split("\n")]
    if position.line >= len(lines):
        return None

    call = find_call_context(lines[position.line], position.character)
    if call is None:
        logger.debug("Nenhuma chamada aberta antes do cursor")
        return None

    definition = find_function_definition(lines, call.function_name)
    if definition is None:
        logger.debug(f"Definição de {call.function_name} não encontrada")
        return None

    def_line, def_column = definition
    result = await query(def_line, def_column)
    if not result.success or result.result is None or result.result.parameters is None:
        logger.debug(f"Sem parâmetros para {call.function_name} em {def_line}:{def_column}")
        return None

    return build_signature_help(result.result, call.active_parameter)
