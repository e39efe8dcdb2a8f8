"""
test_bridge.py - Testes para a execução do compilador externo

Propósito:
    Validar invoke com processos reais (o próprio interpretador Python
    fazendo o papel do compilador): captura de streams, exit code
    informativo, falha ao iniciar e tempo limite.
"""

from __future__ import annotations

import asyncio
import sys

import pytest

from volta_lsp.bridge import ProcessOutput, invoke
from volta_lsp.errors import (
    SPAWN_ERROR,
    TIMEOUT_ERROR,
    CompilerTimeoutError,
    SpawnError,
    VoltaBridgeError,
)


def _run(coro):
    return asyncio.run(coro)


def test_captures_stdout_and_stderr():
    script = "import sys; sys.stdout.write('out'); sys.stderr.write(':1:1: error: x')"
    output = _run(invoke(sys.executable, ["-c", script]))

    assert isinstance(output, ProcessOutput)
    assert output.stdout == "out"
    assert output.stderr == ":1:1: error: x"
    assert output.exit_code == 0


def test_nonzero_exit_code_still_resolves():
    """Exit code é informativo, não indica falha."""
    script = "import sys; sys.stderr.write('boom'); sys.exit(3)"
    output = _run(invoke(sys.executable, ["-c", script]))

    assert output.exit_code == 3
    assert output.stderr == "boom"


def test_arguments_passed_through():
    script = "import sys, json; print(json.dumps(sys.argv[1:]))"
    output = _run(invoke(sys.executable, ["-c", script, "--lsp-info", "f.vlt", 3, 4]))
    assert output.stdout.strip() == '["--lsp-info", "f.vlt", "3", "4"]'


def test_missing_executable_raises_spawn_error(tmp_path):
    missing = str(tmp_path / "no-such-volta")

    with pytest.raises(SpawnError) as exc_info:
        _run(invoke(missing, ["--no-execute", "x.vlt"]))

    assert exc_info.value.code == SPAWN_ERROR
    assert exc_info.value.executable == missing
    assert "Failed to spawn compiler" in exc_info.value.message


def test_timeout_raises_and_kills():
    with pytest.raises(CompilerTimeoutError) as exc_info:
        _run(invoke(sys.executable, ["-c", "import time; time.sleep(30)"], timeout=0.5))

    assert exc_info.value.code == TIMEOUT_ERROR
    assert isinstance(exc_info.value, VoltaBridgeError)
