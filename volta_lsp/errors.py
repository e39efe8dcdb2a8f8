"""
errors.py - Taxonomia de erros da ponte com o compilador

Propósito:
    Exceções levantadas pela execução do compilador externo e códigos de
    erro usados nos envelopes de resultado (CompilerQueryResult, CheckResult).

Notas de implementação:
    - Apenas bridge.invoke levanta estas exceções
    - symbols e validation capturam e convertem em resultados com código
    - Nenhuma destas exceções chega aos handlers LSP
"""

from __future__ import annotations

# Códigos de erro dos envelopes de resultado
SPAWN_ERROR = "SpawnError"
PARSE_ERROR = "ParseError"
SYMBOL_NOT_FOUND = "SymbolNotFound"
TIMEOUT_ERROR = "TimeoutError"
CONFIGURATION_MISSING = "ConfigurationMissing"


class VoltaBridgeError(Exception):
    """Falha ao executar o compilador externo."""

    code = SPAWN_ERROR

    def __init__(self, executable: str, message: str):
        super().__init__(message)
        self.executable = executable
        self.message = message


class SpawnError(VoltaBridgeError):
    """O processo do compilador não pôde ser iniciado (binário ausente, sem permissão)."""

    code = SPAWN_ERROR


class CompilerTimeoutError(VoltaBridgeError):
    """O compilador não terminou dentro do tempo limite."""

    code = TIMEOUT_ERROR
