"""
test_settings.py - Testes unitários para VoltaSettings e SettingsCache

Propósito:
    Validar a leitura tolerante da seção "volta" e as operações do cache
    por documento: put, get, invalidate, clear, has.
"""

from __future__ import annotations

from volta_lsp.settings import (
    DEFAULT_COMPILER_PATH,
    DEFAULT_MAX_PROBLEMS,
    SettingsCache,
    VoltaSettings,
)


class TestVoltaSettings:
    def test_defaults(self):
        settings = VoltaSettings()
        assert settings.max_number_of_problems == DEFAULT_MAX_PROBLEMS
        assert settings.compiler_path == DEFAULT_COMPILER_PATH

    def test_wrapped_section(self):
        settings = VoltaSettings.from_dict(
            {"volta": {"maxNumberOfProblems": 5, "compilerPath": "/opt/volta/bin/volta"}}
        )
        assert settings.max_number_of_problems == 5
        assert settings.compiler_path == "/opt/volta/bin/volta"

    def test_bare_section(self):
        settings = VoltaSettings.from_dict({"maxNumberOfProblems": 7})
        assert settings.max_number_of_problems == 7
        assert settings.compiler_path == DEFAULT_COMPILER_PATH

    def test_max_diagnostics_alias(self):
        settings = VoltaSettings.from_dict({"maxDiagnostics": 3})
        assert settings.max_number_of_problems == 3

    def test_invalid_values_fall_back(self):
        settings = VoltaSettings.from_dict(
            {"volta": {"maxNumberOfProblems": "muitos", "compilerPath": 42}}
        )
        assert settings == VoltaSettings()

    def test_negative_and_bool_rejected(self):
        assert VoltaSettings.from_dict({"maxNumberOfProblems": -1}).max_number_of_problems == DEFAULT_MAX_PROBLEMS
        assert VoltaSettings.from_dict({"maxNumberOfProblems": True}).max_number_of_problems == DEFAULT_MAX_PROBLEMS

    def test_empty_compiler_path(self):
        assert VoltaSettings.from_dict({"compilerPath": ""}).compiler_path == DEFAULT_COMPILER_PATH

    def test_non_dict_payloads(self):
        assert VoltaSettings.from_dict(None) == VoltaSettings()
        assert VoltaSettings.from_dict([1, 2]) == VoltaSettings()
        assert VoltaSettings.from_dict({"volta": "x"}) == VoltaSettings()


class TestSettingsCache:
    def test_put_get(self):
        cache = SettingsCache()
        settings = VoltaSettings(max_number_of_problems=1)
        cache.put("file:///a.vlt", settings)

        assert cache.get("file:///a.vlt") is settings
        assert cache.has("file:///a.vlt") is True

    def test_get_missing(self):
        assert SettingsCache().get("file:///nada.vlt") is None

    def test_invalidate(self):
        cache = SettingsCache()
        cache.put("file:///a.vlt", VoltaSettings())
        cache.invalidate("file:///a.vlt")

        assert cache.get("file:///a.vlt") is None
        cache.invalidate("file:///a.vlt")  # Não deve lançar exceção

    def test_clear(self):
        cache = SettingsCache()
        cache.put("file:///a.vlt", VoltaSettings())
        cache.put("file:///b.vlt", VoltaSettings())
        cache.clear()

        assert cache.has("file:///a.vlt") is False
        assert cache.has("file:///b.vlt") is False
