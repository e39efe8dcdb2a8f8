"""
symbols.py - Consulta de informações de símbolo ao compilador (--lsp-info)

Propósito:
    Pergunta ao compilador qual símbolo está numa posição do arquivo e
    converte o envelope JSON devolvido em tipos Python.

Componentes principais:
    - SymbolKind / ParameterDoc / SymbolLocation / SymbolInfo: Metadados do símbolo
    - QueryError: Código e mensagem de falha
    - CompilerQueryResult: Envelope sucesso/falha de toda consulta
    - parse_query_response: stdout JSON → CompilerQueryResult
    - query_symbol_info: Executa o compilador e devolve CompilerQueryResult

Formato esperado em stdout:
    {"success": true, "result": {"kind": "Function", "name": "add",
     "type": "fn(int, int) -> int", "signature": "fn add(a: int, b: int) -> int",
     "documentation": "...", "parameters": [{"name": "a", "documentation": "..."}],
     "returnDoc": "...", "location": {"line": 3, "column": 3}}}
    {"success": false, "error": {"code": "SymbolNotFound", "message": "..."}}

Notas de implementação:
    - line é 1-based, column é 0-based (conversão feita pelo chamador)
    - stderr é ignorado nesta chamada
    - Nunca levanta exceção: JSON inválido → ParseError, falha ao iniciar → SpawnError
    - Resultados não são cacheados
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from volta_lsp.bridge import DEFAULT_TIMEOUT, QUERY_FLAG, invoke
from volta_lsp.errors import PARSE_ERROR, SYMBOL_NOT_FOUND, VoltaBridgeError

logger = logging.getLogger(__name__)


class SymbolKind(Enum):
    FUNCTION = "Function"
    VARIABLE = "Variable"
    STRUCT = "Struct"
    TYPE = "Type"
    UNKNOWN = "Unknown"

    @classmethod
    def from_name(cls, name: Any) -> "SymbolKind":
        """Aceita o nome do tipo em qualquer capitalização."""
        if isinstance(name, str):
            for kind in cls:
                if kind.value.lower() == name.lower():
                    return kind
        return cls.UNKNOWN


@dataclass
class ParameterDoc:
    name: str
    documentation: str = ""


@dataclass
class SymbolLocation:
    """Posição de declaração informada pelo compilador (line 1-based, column 0-based)."""

    line: int
    column: int
    file: Optional[str] = None


@dataclass
class SymbolInfo:
    """Metadados de um símbolo devolvidos por --lsp-info."""

    kind: SymbolKind
    name: str
    type: str = ""
    signature: str = ""
    documentation: Optional[str] = None
    parameters: Optional[list[ParameterDoc]] = None
    return_doc: Optional[str] = None
    location: Optional[SymbolLocation] = None

    @classmethod
    def from_dict(cls, data: dict) -> "SymbolInfo":
        """
        Constrói SymbolInfo a partir do objeto "result" do envelope.

        Raises:
            KeyError, TypeError, ValueError: Objeto fora do formato esperado
        """
        name = data["name"]
        if not isinstance(name, str):
            raise TypeError(f"'name' deve ser string, recebido {type(name).__name__}")

        parameters = None
        raw_params = data.get("parameters")
        if raw_params is not None:
            parameters = [
                ParameterDoc(
                    name=str(param["name"]),
                    documentation=param.get("documentation") or "",
                )
                for param in raw_params
            ]

        location = None
        raw_location = data.get("location")
        if raw_location:
            location = SymbolLocation(
                line=int(raw_location["line"]),
                column=int(raw_location.get("column", 0)),
                file=raw_location.get("file"),
            )

        return cls(
            kind=SymbolKind.from_name(data.get("kind")),
            name=name,
            type=str(data.get("type") or ""),
            signature=str(data.get("signature") or ""),
            documentation=data.get("documentation") or None,
            parameters=parameters,
            return_doc=data.get("returnDoc") or None,
            location=location,
        )


@dataclass
class QueryError:
    code: str
    message: str = ""


@dataclass
class CompilerQueryResult:
    """Envelope uniforme: success=True com result, ou success=False com error."""

    success: bool
    result: Optional[SymbolInfo] = None
    error: Optional[QueryError] = field(default=None)

    @classmethod
    def ok(cls, result: SymbolInfo) -> "CompilerQueryResult":
        return cls(success=True, result=result)

    @classmethod
    def failure(cls, code: str, message: str = "") -> "CompilerQueryResult":
        return cls(success=False, error=QueryError(code=code, message=message))


def parse_query_response(stdout: str) -> CompilerQueryResult:
    """
    Interpreta stdout do compilador como um envelope CompilerQueryResult.

    Args:
        stdout: Saída padrão completa do modo --lsp-info

    Returns:
        CompilerQueryResult (falhas de formato viram ParseError)
    """
    try:
        payload = json.loads(stdout)
    except ValueError as e:
        return CompilerQueryResult.failure(
            PARSE_ERROR, f"Failed to parse compiler output: {e}"
        )

    if not isinstance(payload, dict):
        return CompilerQueryResult.failure(
            PARSE_ERROR, "Failed to parse compiler output: envelope is not an object"
        )

    if payload.get("success") is True:
        raw_result = payload.get("result")
        if not isinstance(raw_result, dict):
            return CompilerQueryResult.failure(
                PARSE_ERROR, "Failed to parse compiler output: missing 'result'"
            )
        try:
            return CompilerQueryResult.ok(SymbolInfo.from_dict(raw_result))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            return CompilerQueryResult.failure(
                PARSE_ERROR, f"Failed to parse compiler output: invalid result ({e!r})"
            )

    error = payload.get("error")
    if not isinstance(error, dict):
        error = {}
    return CompilerQueryResult.failure(
        str(error.get("code") or SYMBOL_NOT_FOUND),
        str(error.get("message") or ""),
    )


async def query_symbol_info(
    compiler_path: str,
    file_path: str,
    line: int,
    column: int,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> CompilerQueryResult:
    """
    Consulta o símbolo na posição (line 1-based, column 0-based) de file_path.

    Returns:
        CompilerQueryResult; falhas do processo viram SpawnError/TimeoutError
    """
    try:
        output = await invoke(
            compiler_path, [QUERY_FLAG, file_path, str(line), str(column)], timeout=timeout
        )
    except VoltaBridgeError as e:
        logger.warning(f"Consulta de símbolo falhou ({e.code}): {e.message}")
        return CompilerQueryResult.failure(e.code, e.message)

    result = parse_query_response(output.stdout)
    if not result.success and result.error and result.error.code == PARSE_ERROR:
        logger.warning(f"Saída inválida de --lsp-info em {line}:{column}: {result.error.message}")
    return result
