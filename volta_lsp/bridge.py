"""
bridge.py - Execução do compilador Volta como processo externo

Propósito:
    Inicia o executável do compilador com os argumentos dados, coleta
    stdout e stderr até o término do processo e devolve o texto capturado.

Componentes principais:
    - ProcessOutput: stdout, stderr e código de saída capturados
    - invoke: Executa um processo por chamada (sem reuso, sem pool)

Notas de implementação:
    - Exit code é informativo; qualquer término normal devolve ProcessOutput
    - Falha ao iniciar → SpawnError com a mensagem do sistema operacional
    - Tempo limite esgotado → processo é morto e CompilerTimeoutError é levantado
    - Saída decodificada como UTF-8 com substituição de bytes inválidos
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from volta_lsp.errors import CompilerTimeoutError, SpawnError

logger = logging.getLogger(__name__)

# Tempo máximo de espera pelo compilador (segundos)
DEFAULT_TIMEOUT = 10.0

# Flags da CLI do compilador
CHECK_FLAG = "--no-execute"
QUERY_FLAG = "--lsp-info"


@dataclass
class ProcessOutput:
    """Saída capturada de uma execução do compilador."""

    stdout: str
    stderr: str
    exit_code: Optional[int]


async def invoke(
    executable: str,
    arguments: Sequence[str],
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> ProcessOutput:
    """
    Executa o compilador e espera seu término.

    Args:
        executable: Caminho do executável do compilador
        arguments: Argumentos de linha de comando
        timeout: Limite em segundos (None = sem limite)

    Returns:
        ProcessOutput com os streams capturados

    Raises:
        SpawnError: O processo não pôde ser iniciado
        CompilerTimeoutError: O processo excedeu o tempo limite
    """
    args = [str(arg) for arg in arguments]
    logger.debug(f"Executando compilador: {executable} {' '.join(args)}")

    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise SpawnError(executable, f"Failed to spawn compiler: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Compilador excedeu {timeout}s, encerrando: {executable}")
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()
        raise CompilerTimeoutError(
            executable, f"Compiler did not finish within {timeout} seconds"
        )

    logger.debug(f"Compilador terminou com código {process.returncode}")

    return ProcessOutput(
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
        exit_code=process.returncode,
    )
