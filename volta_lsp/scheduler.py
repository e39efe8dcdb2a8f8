"""
scheduler.py - Fila de tarefas com debounce por chave

Propósito:
    Mantém, para cada chave (URI), no máximo uma tarefa pendente.
    Agendar de novo cancela a pendente e reinicia a contagem.

Notas de implementação:
    - Só a espera é cancelável; depois que o atraso expira a tarefa sai
      do registro e roda até o fim
    - Exige um event loop asyncio em execução (pygls fornece)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class DebouncedTaskQueue:
    """Registro de "última tarefa pendente" por chave, com cancelar-e-substituir."""

    def __init__(self, delay: float):
        self.delay = delay
        self._pending: dict[str, asyncio.Task] = {}

    def schedule(self, key: str, action: Callable[[], Awaitable[None]]) -> asyncio.Task:
        """Agenda action após self.delay segundos, cancelando a pendente de key."""
        self.cancel(key)
        task = asyncio.ensure_future(self._run_later(key, action))
        self._pending[key] = task
        task.add_done_callback(lambda t: self._forget(key, t))
        return task

    def cancel(self, key: str) -> bool:
        """Cancela a tarefa pendente de key. Retorna True se havia uma."""
        task = self._pending.pop(key, None)
        if task is None:
            return False
        task.cancel()
        logger.debug(f"Validação pendente cancelada: {key}")
        return True

    def cancel_all(self) -> None:
        for key in list(self._pending):
            self.cancel(key)

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    async def _run_later(self, key: str, action: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self.delay)
        # Disparou: a partir daqui não é mais cancelável
        self._forget(key, asyncio.current_task())
        await action()

    def _forget(self, key: str, task) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]
