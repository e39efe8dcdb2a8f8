"""
settings.py - Configuração do servidor (seção "volta") e cache por documento

Propósito:
    Representa as configurações do usuário e mantém o cache de
    configurações por URI de documento.

Componentes principais:
    - VoltaSettings: maxNumberOfProblems + compilerPath
    - SettingsCache: Dicionário URI → VoltaSettings

Notas de implementação:
    - Aceita {"volta": {...}} ou a seção diretamente
    - Valores com tipo errado caem no padrão (com aviso no log)
    - Cache invalidado em didChangeConfiguration (tudo) e didClose (URI)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

SETTINGS_SECTION = "volta"
DEFAULT_MAX_PROBLEMS = 1000
DEFAULT_COMPILER_PATH = "volta"


@dataclass(frozen=True)
class VoltaSettings:
    """Configurações efetivas para um documento (ou globais)."""

    max_number_of_problems: int = DEFAULT_MAX_PROBLEMS
    compiler_path: str = DEFAULT_COMPILER_PATH

    @classmethod
    def from_dict(cls, data: Any) -> "VoltaSettings":
        """Constrói a partir do payload do cliente (tolerante a formatos)."""
        if not isinstance(data, dict):
            return cls()

        section = data.get(SETTINGS_SECTION, data)
        if not isinstance(section, dict):
            return cls()

        max_problems = section.get("maxNumberOfProblems", section.get("maxDiagnostics"))
        if max_problems is None:
            max_problems = DEFAULT_MAX_PROBLEMS
        elif isinstance(max_problems, bool) or not isinstance(max_problems, int) or max_problems < 0:
            logger.warning(f"volta.maxNumberOfProblems inválido: {max_problems!r}")
            max_problems = DEFAULT_MAX_PROBLEMS

        compiler_path = section.get("compilerPath")
        if compiler_path is None or compiler_path == "":
            compiler_path = DEFAULT_COMPILER_PATH
        elif not isinstance(compiler_path, str):
            logger.warning(f"volta.compilerPath inválido: {compiler_path!r}")
            compiler_path = DEFAULT_COMPILER_PATH

        return cls(max_number_of_problems=max_problems, compiler_path=compiler_path)


class SettingsCache:
    """Cache de VoltaSettings por URI de documento."""

    def __init__(self):
        self._cache: dict[str, VoltaSettings] = {}

    def get(self, uri: str) -> Optional[VoltaSettings]:
        """Retorna configurações em cache para o documento, ou None."""
        return self._cache.get(uri)

    def put(self, uri: str, settings: VoltaSettings) -> None:
        """Armazena configurações do documento."""
        self._cache[uri] = settings

    def invalidate(self, uri: str) -> None:
        """Remove configurações do documento."""
        if self._cache.pop(uri, None):
            logger.debug(f"Configurações invalidadas para: {uri}")

    def clear(self) -> None:
        """Remove todas as configurações em cache."""
        self._cache.clear()

    def has(self, uri: str) -> bool:
        return uri in self._cache
