"""
scratch.py - Arquivos temporários com o conteúdo do buffer do editor

Propósito:
    O compilador só trabalha com caminhos reais; o buffer do editor pode
    não estar salvo. Cada chamada ao compilador recebe uma cópia do texto
    atual em um arquivo temporário exclusivo.

Notas de implementação:
    - Nome único via tempfile.mkstemp (prefixo volta_lsp_, sufixo .vlt)
    - O arquivo existe exatamente durante o bloco with
    - Remoção sempre ocorre, com ou sem exceção no bloco
"""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "volta_lsp_"
SCRATCH_SUFFIX = ".vlt"


@contextmanager
def scratch_file(text: str, directory: Optional[str] = None) -> Iterator[str]:
    """Escreve text em um arquivo temporário e devolve seu caminho."""
    fd, path = tempfile.mkstemp(prefix=SCRATCH_PREFIX, suffix=SCRATCH_SUFFIX, dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        yield path
    finally:
        try:
            os.unlink(path)
        except OSError as e:
            logger.warning(f"Falha ao remover arquivo temporário {path}: {e}")
