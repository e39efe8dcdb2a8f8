"""
compiler_path.py - Localização do executável do compilador Volta

Propósito:
    Resolve o caminho do compilador a partir da configuração do usuário,
    do PATH e de locais de instalação convencionais.

Estratégia:
    1. compilerPath configurado (se não for o padrão "volta") e executável
    2. "volta" encontrado no PATH
    3. /usr/local/bin/volta, /usr/bin/volta, ~/.local/bin/volta
    4. Não encontrado → None (validação e consultas são puladas)
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_COMPILER_NAME = "volta"


def _common_paths() -> list[str]:
    return [
        "/usr/local/bin/volta",
        "/usr/bin/volta",
        str(Path.home() / ".local" / "bin" / "volta"),
    ]


def is_executable(file_path: str) -> bool:
    """Verifica se o arquivo existe e pode ser executado."""
    return os.path.isfile(file_path) and os.access(file_path, os.X_OK)


def find_compiler(configured_path: Optional[str] = None) -> Optional[str]:
    """
    Encontra o executável do compilador.

    Args:
        configured_path: Valor de volta.compilerPath (pode ser None)

    Returns:
        Caminho do executável, ou None se não encontrado
    """
    if configured_path and configured_path != DEFAULT_COMPILER_NAME:
        if is_executable(configured_path):
            return configured_path
        logger.warning(
            f"Configured Volta compiler path not found or not executable: {configured_path}"
        )

    found = shutil.which(DEFAULT_COMPILER_NAME)
    if found and is_executable(found):
        return found

    for candidate in _common_paths():
        if is_executable(candidate):
            return candidate

    return None


def compiler_not_found_message() -> str:
    """Mensagem exibida ao usuário quando o compilador não é encontrado."""
    return """Volta compiler not found. Please:
1. Install Volta compiler and ensure it's in your PATH, or
2. Set "volta.compilerPath" in your editor settings to point to the Volta executable.

Example settings.json:
{
  "volta.compilerPath": "/path/to/volta"
}"""
