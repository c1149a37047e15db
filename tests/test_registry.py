# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Tests for the handler registry."""

import pytest

from acvp_kat import (
    CIPHER_KDF108,
    HandlerRegistry,
    HandlerResult,
    Settings,
    UnsupportedOperation,
    create_default_registry,
)
from acvp_kat.crypto import Kdf108Handler
from acvp_kat.errors import FailureKind

from conftest import RecordingHandler


class TestHandlerRegistry:
    """Registration and lookup."""

    def test_register_and_lookup(self):
        registry = HandlerRegistry()
        handler = RecordingHandler()

        registry.register(CIPHER_KDF108, handler)

        assert registry.lookup("KDF") is handler
        assert registry.is_registered("KDF")
        assert "KDF" in registry
        assert len(registry) == 1

    def test_lookup_unregistered(self):
        registry = HandlerRegistry()

        with pytest.raises(UnsupportedOperation, match="unsupported capability") as exc_info:
            registry.lookup("KAS-ECC")

        assert exc_info.value.kind is FailureKind.UNSUPPORTED_OPERATION

    def test_duplicate_registration_rejected(self):
        registry = HandlerRegistry()
        registry.register("KDF", RecordingHandler())

        with pytest.raises(ValueError, match="already registered"):
            registry.register("KDF", RecordingHandler())

    def test_replace_registration(self):
        registry = HandlerRegistry()
        registry.register("KDF", RecordingHandler())
        replacement = RecordingHandler()

        registry.register("KDF", replacement, replace=True)

        assert registry.lookup("KDF") is replacement

    def test_unregister(self):
        registry = HandlerRegistry()
        registry.register("KDF", RecordingHandler())

        registry.unregister("KDF")

        assert not registry.is_registered("KDF")
        with pytest.raises(KeyError):
            registry.unregister("KDF")

    def test_list_ciphers_sorted(self):
        registry = HandlerRegistry()
        registry.register("KDF", RecordingHandler())
        registry.register("ACVP-AES-GCM", RecordingHandler())

        assert registry.list_ciphers() == ["ACVP-AES-GCM", "KDF"]


class TestHandlerResult:
    def test_success(self):
        result = HandlerResult.success()
        assert result.ok
        assert result.message == ""

    def test_failure(self):
        result = HandlerResult.failure("boom")
        assert not result.ok
        assert result.message == "boom"


class TestDefaultRegistry:
    def test_kdf108_registered(self):
        registry = create_default_registry()

        assert registry.list_ciphers() == ["KDF"]
        assert isinstance(registry.lookup("KDF"), Kdf108Handler)

    def test_fixed_data_length_from_settings(self):
        registry = create_default_registry(Settings(fixed_data_length=48))

        assert registry.lookup("KDF").fixed_data_length == 48
