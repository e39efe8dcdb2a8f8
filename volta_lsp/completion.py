"""
completion.py - Autocomplete de palavras-chave Volta

Propósito:
    Lista fixa de palavras-chave da linguagem e detalhes adicionais
    fornecidos em completionItem/resolve.

Notas de implementação:
    - Não depende do compilador nem do documento
    - CompletionItem.data identifica a palavra-chave no resolve
"""

from __future__ import annotations

from lsprotocol.types import CompletionItem, CompletionItemKind, CompletionList

KEYWORDS = ["fn", "if", "else", "while", "for", "return", "match"]

# data → (detail, documentation)
_KEYWORD_DETAILS = {
    1: ("Function declaration", "Creates a new function"),
    2: ("If statement", "Conditional execution"),
}


def compute_completions() -> CompletionList:
    """Retorna as palavras-chave da linguagem."""
    items = [
        CompletionItem(label=keyword, kind=CompletionItemKind.Keyword, data=index)
        for index, keyword in enumerate(KEYWORDS, start=1)
    ]
    return CompletionList(is_incomplete=False, items=items)


def resolve_completion(item: CompletionItem) -> CompletionItem:
    """Acrescenta detail/documentation para itens conhecidos."""
    details = _KEYWORD_DETAILS.get(item.data) if isinstance(item.data, int) else None
    if details:
        item.detail, item.documentation = details
    return item
