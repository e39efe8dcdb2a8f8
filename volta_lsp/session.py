"""
session.py - Ciclo de vida dos documentos e agendamento de validação

Propósito:
    Estado por servidor: documentos abertos, configurações por documento,
    timers de debounce e revisões de validação. Decide quando o
    compilador é chamado e descarta resultados obsoletos.

Componentes principais:
    - DocumentSession: Open/Change/Close/Validate/Configuração + consultas de símbolo

Estados por URI:
    Unopened → Open(validated=False) → Open(validated=True) ⇄ PendingValidation → Closed

Notas de implementação:
    - Abertura valida imediatamente (apenas na primeira vez)
    - Mudança reinicia o debounce (1000ms); só o texto do disparo é validado
    - Cada validação iniciada recebe uma revisão crescente; resultado cuja
      revisão não é a última iniciada para a URI é descartado
    - Sem compilador resolvido: nada é executado e nada é publicado
    - SpawnError/TimeoutError notificados ao usuário uma vez por executável
    - Independente de pygls: publicação, leitura de texto, configurações e
      notificações chegam como callables
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Awaitable, Callable, List, Optional

from lsprotocol.types import Diagnostic

from volta_lsp.bridge import DEFAULT_TIMEOUT
from volta_lsp.compiler_path import compiler_not_found_message, find_compiler
from volta_lsp.errors import (
    CONFIGURATION_MISSING,
    SPAWN_ERROR,
    SYMBOL_NOT_FOUND,
    TIMEOUT_ERROR,
)
from volta_lsp.scheduler import DebouncedTaskQueue
from volta_lsp.scratch import scratch_file
from volta_lsp.settings import SettingsCache, VoltaSettings
from volta_lsp.symbols import CompilerQueryResult, query_symbol_info
from volta_lsp.validation import run_check

logger = logging.getLogger(__name__)

# Período de silêncio antes de validar após uma edição (segundos)
VALIDATION_DELAY = 1.0

PublishFunc = Callable[[str, List[Diagnostic]], None]
TextFunc = Callable[[str], Optional[str]]
SettingsFunc = Callable[[Optional[str]], Awaitable[VoltaSettings]]
NotifyFunc = Callable[[str], None]


class DocumentSession:
    """
    Contexto de um servidor: documentos abertos e agendamento de validação.

    Attributes:
        open_documents: URIs atualmente abertas
        validated: URIs já validadas ao menos uma vez desde a abertura
        compiler_path: Compilador resolvido a partir das configurações globais
        timers: Debounce por URI
        settings_cache: VoltaSettings por URI
    """

    def __init__(
        self,
        publish: PublishFunc,
        get_text: TextFunc,
        fetch_settings: SettingsFunc,
        notify: NotifyFunc,
        debounce_delay: float = VALIDATION_DELAY,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        self._publish = publish
        self._get_text = get_text
        self._fetch_settings = fetch_settings
        self._notify = notify
        self.timeout = timeout

        self.timers = DebouncedTaskQueue(debounce_delay)
        self.settings_cache = SettingsCache()
        self.open_documents: set[str] = set()
        self.validated: set[str] = set()
        self.compiler_path: Optional[str] = None

        self._revision_counter = itertools.count(1)
        self._latest_revision: dict[str, int] = {}
        self._resolved: dict[str, str] = {}
        self._missing_reported = False
        self._failures_reported: set[str] = set()

    # ------------------------------------------------------------------
    # Configuração e compilador
    # ------------------------------------------------------------------

    async def initialize(self) -> Optional[str]:
        """Resolve o compilador a partir das configurações globais."""
        settings = await self._fetch_settings(None)
        self.compiler_path = self._resolve(settings.compiler_path)
        self._report_compiler_status()
        return self.compiler_path

    async def settings_for(self, uri: str) -> VoltaSettings:
        """Configurações do documento (lazy, em cache enquanto aberto)."""
        cached = self.settings_cache.get(uri)
        if cached is not None:
            return cached

        settings = await self._fetch_settings(uri)
        if uri in self.open_documents:
            self.settings_cache.put(uri, settings)
        return settings

    async def compiler_for(self, uri: str) -> Optional[str]:
        settings = await self.settings_for(uri)
        return self._resolve(settings.compiler_path)

    def _resolve(self, configured: str) -> Optional[str]:
        # Só caminhos encontrados ficam em cache; compilador instalado depois é detectado
        if configured in self._resolved:
            return self._resolved[configured]
        found = find_compiler(configured)
        if found:
            self._resolved[configured] = found
        return found

    def _report_compiler_status(self) -> None:
        if self.compiler_path:
            logger.info(f"Volta compiler found at: {self.compiler_path}")
            self._missing_reported = False
            return

        logger.warning("Volta compiler not found!")
        if not self._missing_reported:
            self._missing_reported = True
            self._notify(compiler_not_found_message())

    def _report_failure(self, compiler: str, code: Optional[str], message: str) -> None:
        """Notifica o usuário na primeira falha de execução de cada compilador."""
        if code not in (SPAWN_ERROR, TIMEOUT_ERROR):
            return
        if compiler in self._failures_reported:
            return
        self._failures_reported.add(compiler)
        self._notify(f"Failed to run Volta compiler ({compiler}): {message}")

    async def configuration_changed(self) -> bool:
        """
        Trata workspace/didChangeConfiguration.

        Limpa o cache de configurações, resolve o compilador de novo e
        revalida todos os documentos abertos somente se o caminho mudou.

        Returns:
            True se o compilador resolvido mudou
        """
        self.settings_cache.clear()
        self._resolved.clear()

        old_path = self.compiler_path
        settings = await self._fetch_settings(None)
        self.compiler_path = self._resolve(settings.compiler_path)
        self._report_compiler_status()

        if old_path == self.compiler_path:
            logger.debug("Compilador inalterado, revalidação não necessária")
            return False

        logger.info(f"Compilador mudou ({old_path} → {self.compiler_path}), revalidando documentos abertos")
        await asyncio.gather(*(self.validate(uri) for uri in sorted(self.open_documents)))
        return True

    # ------------------------------------------------------------------
    # Ciclo de vida dos documentos
    # ------------------------------------------------------------------

    async def did_open(self, uri: str) -> None:
        """Abertura: valida imediatamente se o documento nunca foi validado."""
        self.open_documents.add(uri)
        if uri in self.validated:
            return
        self.validated.add(uri)
        await self.validate(uri)

    def did_change(self, uri: str) -> None:
        """Mudança: cancela a validação pendente e agenda outra após o debounce."""
        if uri not in self.open_documents:
            logger.debug(f"Mudança em documento não aberto ignorada: {uri}")
            return
        self.timers.schedule(uri, lambda: self.validate(uri))

    def did_close(self, uri: str) -> None:
        """Fechamento: libera timer, configurações, marca de validação e revisão."""
        self.timers.cancel(uri)
        self.settings_cache.invalidate(uri)
        self.validated.discard(uri)
        self.open_documents.discard(uri)
        self._latest_revision.pop(uri, None)
        self._publish(uri, [])

    def is_current(self, uri: str, revision: int) -> bool:
        """True se revision é a última validação iniciada para a URI."""
        return self._latest_revision.get(uri) == revision

    async def validate(self, uri: str) -> None:
        """
        Valida o documento e publica diagnósticos.

        Fluxo:
            1. Obtém configurações e resolve o compilador (ausente → retorna)
            2. Lê o texto atual e registra uma nova revisão
            3. Executa run_check (arquivo temporário → compilador → parser)
            4. Descarta o resultado se outra validação começou depois
            5. Publica até max_number_of_problems diagnósticos (substitui os anteriores)

        Tratamento de Erros:
            - Falha do compilador: diagnósticos anteriores permanecem
            - Qualquer exceção é logada; nunca propaga
        """
        try:
            if uri not in self.open_documents:
                logger.debug(f"Documento não está aberto, validação ignorada: {uri}")
                return

            settings = await self.settings_for(uri)
            if uri not in self.open_documents:
                logger.debug(f"Documento fechado durante a validação: {uri}")
                return

            compiler = self._resolve(settings.compiler_path)
            if not compiler:
                logger.info(f"Compiler not available, skipping validation: {uri}")
                return

            text = self._get_text(uri)
            if text is None:
                return

            revision = next(self._revision_counter)
            self._latest_revision[uri] = revision
            logger.info(f"Validating document: {uri} (revisão {revision})")

            result = await run_check(compiler, text, timeout=self.timeout)

            if not self.is_current(uri, revision):
                logger.debug(f"Resultado obsoleto descartado: {uri} (revisão {revision})")
                return

            if not result.success:
                self._report_failure(compiler, result.error_code, result.error_message)
                return

            diagnostics = result.diagnostics[: settings.max_number_of_problems]
            self._publish(uri, diagnostics)

            if diagnostics:
                logger.info(f"Document has {len(diagnostics)} problem(s): {uri}")
            else:
                logger.info(f"Document validated successfully: {uri}")

        except Exception as e:
            logger.error(f"Erro ao validar {uri}: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Consultas de símbolo
    # ------------------------------------------------------------------

    async def query_symbol(self, uri: str, line: int, column: int) -> CompilerQueryResult:
        """
        Consulta --lsp-info sobre uma cópia do texto atual do documento.

        Args:
            uri: Documento consultado
            line: Linha 1-based
            column: Coluna 0-based

        Returns:
            CompilerQueryResult (nunca levanta exceção)
        """
        compiler = await self.compiler_for(uri)
        if not compiler:
            return CompilerQueryResult.failure(CONFIGURATION_MISSING, "Volta compiler not found")

        text = self._get_text(uri)
        if text is None:
            return CompilerQueryResult.failure(SYMBOL_NOT_FOUND, f"Document not available: {uri}")

        try:
            with scratch_file(text) as path:
                result = await query_symbol_info(compiler, path, line, column, timeout=self.timeout)
        except OSError as e:
            logger.error(f"Falha ao criar arquivo temporário: {e}", exc_info=True)
            return CompilerQueryResult.failure(SPAWN_ERROR, f"Failed to create scratch file: {e}")

        if result.success and result.result and result.result.location:
            # Declaração no arquivo temporário pertence ao próprio documento
            if result.result.location.file == path:
                result.result.location.file = None
        elif not result.success and result.error:
            self._report_failure(compiler, result.error.code, result.error.message)

        return result
