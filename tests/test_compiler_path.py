"""
test_compiler_path.py - Testes para a localização do compilador

Propósito:
    Validar a ordem de resolução: caminho configurado → PATH → locais
    convencionais → None.
"""

from __future__ import annotations

import os
import stat

from volta_lsp import compiler_path
from volta_lsp.compiler_path import (
    compiler_not_found_message,
    find_compiler,
    is_executable,
)


def _make_executable(path):
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return str(path)


def _isolate(monkeypatch, which=None, common=None):
    monkeypatch.setattr(compiler_path.shutil, "which", lambda name: which)
    monkeypatch.setattr(compiler_path, "_common_paths", lambda: list(common or []))


def test_configured_path_wins(tmp_path, monkeypatch):
    configured = _make_executable(tmp_path / "my-volta")
    other = _make_executable(tmp_path / "volta")
    _isolate(monkeypatch, which=other)

    assert find_compiler(configured) == configured


def test_configured_not_executable_falls_back_to_path(tmp_path, monkeypatch):
    plain = tmp_path / "not-exec"
    plain.write_text("")
    plain.chmod(0o644)
    on_path = _make_executable(tmp_path / "volta")
    _isolate(monkeypatch, which=on_path)

    assert find_compiler(str(plain)) == on_path


def test_default_name_uses_path(tmp_path, monkeypatch):
    on_path = _make_executable(tmp_path / "volta")
    _isolate(monkeypatch, which=on_path)

    assert find_compiler("volta") == on_path
    assert find_compiler(None) == on_path


def test_common_locations(tmp_path, monkeypatch):
    installed = _make_executable(tmp_path / "installed-volta")
    _isolate(monkeypatch, which=None, common=[str(tmp_path / "missing"), installed])

    assert find_compiler("volta") == installed


def test_not_found(tmp_path, monkeypatch):
    _isolate(monkeypatch, which=None, common=[str(tmp_path / "missing")])

    assert find_compiler(str(tmp_path / "nope")) is None


def test_is_executable(tmp_path):
    exe = _make_executable(tmp_path / "exe")
    assert is_executable(exe) is True
    assert is_executable(str(tmp_path / "missing")) is False
    assert is_executable(str(tmp_path)) is False


def test_not_found_message_mentions_setting():
    message = compiler_not_found_message()
    assert "volta.compilerPath" in message
    assert "PATH" in message
