"""
validation.py - Pipeline de validação (modo --no-execute do compilador)

Propósito:
    Valida o texto de um documento executando o compilador sobre uma cópia
    temporária e convertendo stderr em diagnósticos LSP.

Componentes principais:
    - CheckResult: Diagnósticos ou código de falha
    - run_check: Arquivo temporário → compilador → parse_compiler_output

Fluxo:
    1. Escreve o texto em um arquivo temporário exclusivo
    2. Executa <compilador> --no-execute <arquivo>
    3. Converte stderr em List[Diagnostic]
    4. Remove o arquivo temporário (sempre)

Notas de implementação:
    - Nunca levanta exceção; falhas do processo viram CheckResult com código
    - Exit code do compilador é ignorado
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from lsprotocol.types import Diagnostic

from volta_lsp.bridge import CHECK_FLAG, DEFAULT_TIMEOUT, invoke
from volta_lsp.diagnostics import parse_compiler_output
from volta_lsp.errors import SPAWN_ERROR, VoltaBridgeError
from volta_lsp.scratch import scratch_file

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Resultado de uma validação: sucesso com diagnósticos, ou falha com código."""

    success: bool
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error_code: Optional[str] = None
    error_message: str = ""

    @classmethod
    def ok(cls, diagnostics: List[Diagnostic]) -> "CheckResult":
        return cls(success=True, diagnostics=diagnostics)

    @classmethod
    def failure(cls, code: str, message: str) -> "CheckResult":
        return cls(success=False, error_code=code, error_message=message)


async def run_check(
    compiler_path: str,
    text: str,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> CheckResult:
    """
    Executa o compilador em modo de verificação sobre o texto dado.

    Args:
        compiler_path: Executável resolvido do compilador
        text: Conteúdo atual do documento
        timeout: Limite de espera pelo processo

    Returns:
        CheckResult com os diagnósticos extraídos de stderr
    """
    try:
        with scratch_file(text) as path:
            output = await invoke(compiler_path, [CHECK_FLAG, path], timeout=timeout)
    except VoltaBridgeError as e:
        logger.warning(f"Validação não executada ({e.code}): {e.message}")
        return CheckResult.failure(e.code, e.message)
    except OSError as e:
        logger.error(f"Falha ao criar arquivo temporário: {e}", exc_info=True)
        return CheckResult.failure(SPAWN_ERROR, f"Failed to create scratch file: {e}")

    diagnostics = parse_compiler_output(output.stderr)
    return CheckResult.ok(diagnostics)
