"""
volta_lsp - Language Server Protocol para Volta

Propósito:
    Servidor LSP que faz a ponte entre o editor e o compilador Volta
    (executável externo), fornecendo diagnósticos, hover, definição,
    signature help e completion.

Componentes principais:
    - server: Servidor principal usando pygls
    - session: Ciclo de vida dos documentos e agendamento de validação
    - bridge: Execução do compilador externo (um processo por chamada)
    - diagnostics: Conversão stderr do compilador → LSP Diagnostic
    - symbols: Consulta --lsp-info e parsing do envelope JSON

Dependências críticas:
    - pygls: Framework LSP
    - lsprotocol: Tipos do protocolo
    - compilador volta: executável externo (--no-execute, --lsp-info)

Exemplo de uso:
    python -m volta_lsp

Notas de implementação:
    - Comunica via STDIO com o cliente
    - Debounce de 1000ms para validação
    - Nenhuma falha do compilador derruba o servidor
"""
from importlib.metadata import PackageNotFoundError, version as _pkg_version
from pathlib import Path
import re


def _read_version_from_pyproject() -> str:
    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    try:
        text = pyproject.read_text(encoding="utf-8")
    except OSError:
        return "0.0.0"
    match = re.search(r'(?m)^version = "([^"]+)"\s*$', text)
    return match.group(1) if match else "0.0.0"


try:
    __version__ = _pkg_version("volta-lsp")
except PackageNotFoundError:
    __version__ = _read_version_from_pyproject()

__all__ = ["server", "session", "bridge", "diagnostics", "symbols"]
