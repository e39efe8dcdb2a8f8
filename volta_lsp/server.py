"""
server.py - Servidor LSP principal para Volta usando pygls

Propósito:
    Servidor Language Server Protocol que conecta o editor ao compilador
    Volta externo: diagnósticos em tempo real, hover, definição,
    signature help e completion de palavras-chave.

Componentes principais:
    - VoltaLanguageServer: Servidor pygls com DocumentSession e configurações globais
    - Event handlers: did_open, did_change, did_close, didChangeConfiguration
    - Features: hover, definition, signatureHelp, completion

Dependências críticas:
    - pygls: Framework LSP
    - volta_lsp.session: Ciclo de vida dos documentos e debounce
    - compilador volta: executável externo

Exemplo de uso:
    python -m volta_lsp

Notas de implementação:
    - Comunica via STDIO (entrada/saída padrão); logs vão para stderr
    - Validação imediata em did_open, debounce de 1000ms em did_change
    - Configurações por documento via workspace/configuration quando o
      cliente suporta; senão, payload de didChangeConfiguration
    - Tratamento robusto de exceções (nunca crasha)
"""

from __future__ import annotations

import logging
import sys
from functools import partial
from typing import Optional

from lsprotocol.types import (
    COMPLETION_ITEM_RESOLVE,
    INITIALIZED,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DEFINITION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_HOVER,
    TEXT_DOCUMENT_SIGNATURE_HELP,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    WORKSPACE_DID_CHANGE_WATCHED_FILES,
    CompletionItem,
    CompletionOptions,
    CompletionParams,
    ConfigurationItem,
    DefinitionParams,
    DidChangeConfigurationParams,
    DidChangeTextDocumentParams,
    DidChangeWatchedFilesParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    HoverParams,
    InitializedParams,
    MessageType,
    Registration,
    RegistrationParams,
    SignatureHelpOptions,
    SignatureHelpParams,
    WorkspaceConfigurationParams,
)
from pygls.server import LanguageServer

from volta_lsp import __version__
from volta_lsp.completion import compute_completions, resolve_completion
from volta_lsp.definition import compute_definition
from volta_lsp.hover import compute_hover
from volta_lsp.session import DocumentSession
from volta_lsp.settings import SETTINGS_SECTION, VoltaSettings
from volta_lsp.signature_help import compute_signature_help

# Configuração de logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class VoltaLanguageServer(LanguageServer):
    """
    Servidor LSP especializado para Volta.

    Attributes:
        global_settings: Configurações recebidas via didChangeConfiguration
                         (usadas quando o cliente não suporta workspace/configuration)
        session: Estado dos documentos abertos, debounce e revisões
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.global_settings: VoltaSettings = VoltaSettings()
        self.session = DocumentSession(
            publish=self.publish_diagnostics,
            get_text=self.document_text,
            fetch_settings=self.fetch_settings,
            notify=self.notify_error,
        )

    @property
    def supports_configuration(self) -> bool:
        """Cliente suporta a requisição workspace/configuration."""
        workspace = getattr(self.client_capabilities, "workspace", None)
        return bool(workspace and workspace.configuration)

    @property
    def supports_configuration_registration(self) -> bool:
        workspace = getattr(self.client_capabilities, "workspace", None)
        did_change = getattr(workspace, "did_change_configuration", None)
        return bool(did_change and did_change.dynamic_registration)

    def document_text(self, uri: str) -> Optional[str]:
        """Texto atual do documento aberto no workspace."""
        try:
            return self.workspace.get_text_document(uri).source
        except Exception as e:
            logger.warning(f"Documento indisponível {uri}: {e}")
            return None

    async def fetch_settings(self, uri: Optional[str]) -> VoltaSettings:
        """
        Obtém configurações da seção "volta".

        Com suporte a workspace/configuration, consulta o cliente (escopo do
        documento quando uri é dado). Senão, usa global_settings.
        """
        if not self.supports_configuration:
            return self.global_settings

        try:
            response = await self.get_configuration_async(
                WorkspaceConfigurationParams(
                    items=[ConfigurationItem(scope_uri=uri, section=SETTINGS_SECTION)]
                )
            )
        except Exception as e:
            logger.warning(f"Falha ao obter configuração para {uri}: {e}")
            return self.global_settings

        return VoltaSettings.from_dict(response[0] if response else None)

    def notify_error(self, message: str) -> None:
        self.show_message(message, MessageType.Error)


# Instância global do servidor
server = VoltaLanguageServer("volta-lsp", f"v{__version__}")


@server.feature(INITIALIZED)
async def initialized(ls: VoltaLanguageServer, params: InitializedParams) -> None:
    """
    Registra interesse em mudanças de configuração e localiza o compilador.

    Se o compilador não for encontrado, o usuário recebe uma notificação.
    """
    if ls.supports_configuration and ls.supports_configuration_registration:
        try:
            await ls.register_capability_async(
                RegistrationParams(
                    registrations=[
                        Registration(
                            id="volta-did-change-configuration",
                            method=WORKSPACE_DID_CHANGE_CONFIGURATION,
                        )
                    ]
                )
            )
        except Exception as e:
            logger.warning(f"Falha ao registrar didChangeConfiguration: {e}")

    try:
        await ls.session.initialize()
    except Exception as e:
        logger.error(f"Erro ao localizar compilador: {e}", exc_info=True)


@server.feature(TEXT_DOCUMENT_DID_OPEN)
async def did_open(ls: VoltaLanguageServer, params: DidOpenTextDocumentParams) -> None:
    """
    Handler para abertura de documento.

    Valida imediatamente na primeira abertura.
    """
    logger.info(f"Documento aberto: {params.text_document.uri}")
    await ls.session.did_open(params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: VoltaLanguageServer, params: DidChangeTextDocumentParams) -> None:
    """
    Handler para mudanças no documento.

    Reinicia o debounce; a validação roda após 1000ms sem novas edições.
    """
    logger.debug(f"Documento modificado: {params.text_document.uri}")
    ls.session.did_change(params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: VoltaLanguageServer, params: DidCloseTextDocumentParams) -> None:
    """
    Handler para fechamento de documento.

    Cancela validação pendente, limpa diagnósticos e libera o estado do documento.
    """
    uri = params.text_document.uri
    logger.info(f"Documento fechado: {uri}")
    ls.session.did_close(uri)


@server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
async def did_change_configuration(
    ls: VoltaLanguageServer, params: DidChangeConfigurationParams
) -> None:
    """
    Handler para mudanças na configuração do workspace.

    Sem workspace/configuration, a seção "volta" vem em params.settings.
    Documentos abertos são revalidados apenas se o compilador resolvido mudou.
    """
    try:
        if not ls.supports_configuration:
            ls.global_settings = VoltaSettings.from_dict(params.settings)
            logger.info(f"Configuração atualizada: {ls.global_settings}")

        await ls.session.configuration_changed()

    except Exception as e:
        logger.error(f"Erro ao processar mudança de configuração: {e}", exc_info=True)


@server.feature(WORKSPACE_DID_CHANGE_WATCHED_FILES)
def did_change_watched_files(
    ls: VoltaLanguageServer, params: DidChangeWatchedFilesParams
) -> None:
    for change in params.changes:
        logger.info(f"Arquivo monitorado mudou: {change.uri} (tipo: {change.type.name})")


@server.feature(TEXT_DOCUMENT_HOVER)
async def hover(ls: VoltaLanguageServer, params: HoverParams):
    """
    Retorna informação do símbolo sob o cursor (nome, tipo, assinatura, docs).

    Retorna None se o compilador não estiver disponível ou não souber responder.
    """
    uri = params.text_document.uri
    try:
        return await compute_hover(params.position, partial(ls.session.query_symbol, uri))
    except Exception as e:
        logger.error(f"Hover error em {uri}: {e}", exc_info=True)
        return None


@server.feature(TEXT_DOCUMENT_DEFINITION)
async def definition(ls: VoltaLanguageServer, params: DefinitionParams):
    """Go-to-definition via consulta --lsp-info."""
    uri = params.text_document.uri
    try:
        return await compute_definition(
            uri, params.position, partial(ls.session.query_symbol, uri)
        )
    except Exception as e:
        logger.error(f"Definition error em {uri}: {e}", exc_info=True)
        return None


@server.feature(
    TEXT_DOCUMENT_SIGNATURE_HELP,
    SignatureHelpOptions(trigger_characters=["(", ","], retrigger_characters=[","]),
)
async def signature_help(ls: VoltaLanguageServer, params: SignatureHelpParams):
    """
    Mostra os parâmetros da função durante a digitação dos argumentos.

    Trigger: "(" e ",". Parâmetro ativo conforme vírgulas antes do cursor.
    """
    uri = params.text_document.uri
    source = ls.document_text(uri)
    if source is None:
        return None

    try:
        return await compute_signature_help(
            source, params.position, partial(ls.session.query_symbol, uri)
        )
    except Exception as e:
        logger.error(f"Signature help error em {uri}: {e}", exc_info=True)
        return None


@server.feature(
    TEXT_DOCUMENT_COMPLETION,
    CompletionOptions(resolve_provider=True),
)
def completion(ls: VoltaLanguageServer, params: CompletionParams):
    """Autocomplete: palavras-chave da linguagem."""
    return compute_completions()


@server.feature(COMPLETION_ITEM_RESOLVE)
def completion_resolve(ls: VoltaLanguageServer, item: CompletionItem) -> CompletionItem:
    """Acrescenta detalhes ao item de completion selecionado."""
    return resolve_completion(item)


def main() -> None:
    """
    Ponto de entrada principal do servidor.

    Inicia servidor LSP em modo STDIO para comunicação com o editor.
    """
    logger.info("Iniciando Volta Language Server...")
    logger.info("Python executable: %s", sys.executable)
    logger.info("volta-lsp package: %s", __version__)
    server.start_io()


if __name__ == "__main__":
    main()
