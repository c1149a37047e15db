# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Core data types for KAT processing.

Modules:
    vector_set: Parsed request model (VectorSet, TestGroup, TestCase)
    results: Per-case response entries (TestResult)

Example Usage:
    >>> from acvp_kat.types import TestCase, TestGroup, VectorSet
    >>>
    >>> case = TestCase(tc_id=1, key_in=bytes.fromhex("00112233"))
    >>> group = TestGroup(
    ...     kdf_mode="counter",
    ...     mac_mode="HMAC-SHA2-256",
    ...     counter_location="before fixed data",
    ...     counter_length=8,
    ...     key_out_length=256,
    ...     tests=(case,),
    ... )
    >>> VectorSet(vs_id=42, algorithm="KDF", test_groups=(group,)).case_count
    1
"""

from .vector_set import (
    TestCase,
    TestGroup,
    VectorSet,
)

from .results import (
    TestResult,
)

__all__ = [
    "TestCase",
    "TestGroup",
    "VectorSet",
    "TestResult",
]
