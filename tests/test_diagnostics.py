"""
test_diagnostics.py - Testes unitários para o parser de stderr do compilador

Propósito:
    Validar a extração de diagnósticos das linhas ":linha:col[-col]: tag: msg",
    incluindo a conversão de linha (1-based → 0-based) e a coluna sem ajuste.
"""

from __future__ import annotations

from lsprotocol.types import DiagnosticSeverity

from volta_lsp.diagnostics import (
    DIAGNOSTIC_SOURCE,
    convert_severity,
    parse_compiler_output,
    parse_diagnostic_line,
)


def test_error_with_column_range():
    """Erro com intervalo de colunas."""
    diagnostics = parse_compiler_output(":3:5-7: error: Type mismatch")

    assert len(diagnostics) == 1
    diag = diagnostics[0]
    assert diag.severity == DiagnosticSeverity.Error
    assert diag.range.start.line == 2
    assert diag.range.start.character == 5
    assert diag.range.end.line == 2
    assert diag.range.end.character == 7
    assert diag.message == "Type mismatch"
    assert diag.source == DIAGNOSTIC_SOURCE


def test_warning_single_column():
    """Warning sem coluna final tem comprimento 1."""
    diagnostics = parse_compiler_output(":10:2: warning: unused variable")

    assert len(diagnostics) == 1
    diag = diagnostics[0]
    assert diag.severity == DiagnosticSeverity.Warning
    assert diag.range.start.line == 9
    assert diag.range.start.character == 2
    assert diag.range.end.line == 9
    assert diag.range.end.character == 3
    assert diag.message == "unused variable"


def test_column_is_not_shifted():
    """Coluna do compilador é usada como está; só a linha é ajustada."""
    diag = parse_diagnostic_line(":1:0: error: bad token")
    assert diag.range.start.line == 0
    assert diag.range.start.character == 0
    assert diag.range.end.character == 1


def test_message_is_trimmed():
    diag = parse_diagnostic_line(":2:1: error:   trailing spaces   ")
    assert diag.message == "trailing spaces"


def test_prefix_with_file_name():
    """Linhas com nome de arquivo antes do ':' também casam."""
    diag = parse_diagnostic_line("/tmp/volta_lsp_x.vlt:4:8: error: Undefined variable 'x'")
    assert diag is not None
    assert diag.range.start.line == 3
    assert diag.message == "Undefined variable 'x'"


def test_unknown_tag_is_dropped():
    assert parse_diagnostic_line(":1:1: note: something") is None
    assert parse_diagnostic_line(":1:1: info: something") is None


def test_non_matching_lines_ignored():
    """Banner, stack trace e linhas vazias são descartados."""
    text = "\n".join(
        [
            "Volta compiler v0.4",
            "",
            ":1:4: error: Expected ';'",
            "    at parse (parser.cpp:120)",
            "Traceback:",
            ":7:0-3: warning: Shadowed name",
        ]
    )
    diagnostics = parse_compiler_output(text)

    assert [d.range.start.line for d in diagnostics] == [0, 6]
    assert [d.severity for d in diagnostics] == [
        DiagnosticSeverity.Error,
        DiagnosticSeverity.Warning,
    ]


def test_order_preserved():
    text = ":5:1: error: b\n:1:1: error: a\n:3:1: warning: c\n"
    diagnostics = parse_compiler_output(text)
    assert [d.message for d in diagnostics] == ["b", "a", "c"]


def test_empty_output():
    assert parse_compiler_output("") == []


def test_windows_line_endings():
    diagnostics = parse_compiler_output(":1:1: error: one\r\n:2:2: error: two\r\n")
    assert [d.message for d in diagnostics] == ["one", "two"]


def test_line_zero_is_dropped():
    """Linha 0 não vira posição negativa; as demais linhas continuam valendo."""
    diagnostics = parse_compiler_output(":0:1: error: boom\n:3:5-7: error: Type mismatch")

    assert len(diagnostics) == 1
    assert diagnostics[0].range.start.line == 2
    assert diagnostics[0].message == "Type mismatch"


def test_numbers_beyond_protocol_range_are_dropped():
    text = "\n".join(
        [
            ":3:99999999999: error: huge column",
            ":99999999999:1: error: huge line",
            ":2:1-99999999999: warning: huge end",
            ":2:4: warning: kept",
        ]
    )
    diagnostics = parse_compiler_output(text)

    assert [d.message for d in diagnostics] == ["kept"]


def test_largest_protocol_position_accepted():
    """Fim implícito (coluna + 1) também precisa caber no protocolo."""
    diag = parse_diagnostic_line(":2:2147483646: error: edge")
    assert diag is not None
    assert diag.range.end.character == 2147483647
    assert parse_diagnostic_line(":2:2147483647: error: edge") is None


def test_convert_severity():
    assert convert_severity("error") == DiagnosticSeverity.Error
    assert convert_severity("warning") == DiagnosticSeverity.Warning
