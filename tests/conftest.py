# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Pytest configuration and fixtures."""

import pytest

from acvp_kat import CIPHER_KDF108, HandlerRegistry, HandlerResult, Settings
from acvp_kat.crypto import Kdf108Handler


def counting_fixed_data(length: int) -> bytes:
    """Deterministic fixed data: 00 01 02 ..."""
    return bytes(i % 256 for i in range(length))


def make_group(tests, **overrides) -> dict:
    group = {
        "kdfMode": "counter",
        "macMode": "HMAC-SHA2-256",
        "counterLength": 8,
        "counterLocation": "before fixed data",
        "keyOutLength": 256,
        "tests": tests,
    }
    group.update(overrides)
    return group


def make_case(tc_id: int, key_in: str = "00112233", deferred: bool = False) -> dict:
    return {"tcId": tc_id, "keyIn": key_in, "deferred": deferred}


class RecordingHandler:
    """
    Test double for a crypto module.

    Records every context it is lent and which other contexts were still
    live at that moment. Can be told to fail (or raise) on the n-th call.
    """

    def __init__(self, fail_on_call=None, raise_on_call=None):
        self.fail_on_call = fail_on_call
        self.raise_on_call = raise_on_call
        self.calls = []
        self.contexts = []
        self.key_in_buffers = []
        self.live_overlaps = []

    def process(self, context):
        self.live_overlaps.append([c.tc_id for c in self.contexts if not c.is_disposed])
        self.contexts.append(context)
        self.key_in_buffers.append(context._key_in)
        self.calls.append(context.tc_id)

        call_number = len(self.calls)
        if call_number == self.raise_on_call:
            raise RuntimeError("module fault")
        if call_number == self.fail_on_call:
            return HandlerResult.failure("self-test failure")

        context.key_out = bytes([context.tc_id % 256]) * (context.key_out_length // 8)
        context.fixed_data = b"\xfd" * 8
        return HandlerResult.success()


@pytest.fixture
def scenario_a_request():
    """Single counter-mode HMAC-SHA256 test case."""
    return {
        "testGroups": [
            {
                "kdfMode": "counter",
                "macMode": "HMAC-SHA256",
                "counterLength": 8,
                "counterLocation": "before fixed data",
                "keyOutLength": 256,
                "tests": [{"tcId": 1, "keyIn": "00112233", "deferred": False}],
            }
        ]
    }


@pytest.fixture
def multi_group_request():
    """Two groups with tcIds out of numeric order."""
    return {
        "vsId": 1564,
        "algorithm": "KDF",
        "testGroups": [
            make_group([make_case(7), make_case(3), make_case(11)], tgId=1),
            make_group(
                [make_case(2, "000102030405060708090A0B0C0D0E0F"), make_case(40, "FF" * 16, deferred=True)],
                tgId=2,
                macMode="CMAC-AES128",
                keyOutLength=128,
            ),
        ],
    }


@pytest.fixture
def test_settings():
    return Settings(fixed_data_length=16, pretty_print=False)


@pytest.fixture
def kdf_handler():
    return Kdf108Handler(fixed_data_length=16, fixed_data_source=counting_fixed_data)


@pytest.fixture
def kdf_registry(kdf_handler):
    registry = HandlerRegistry()
    registry.register(CIPHER_KDF108, kdf_handler)
    return registry


@pytest.fixture
def recording_handler():
    return RecordingHandler()


@pytest.fixture
def recording_registry(recording_handler):
    registry = HandlerRegistry()
    registry.register(CIPHER_KDF108, recording_handler)
    return registry
