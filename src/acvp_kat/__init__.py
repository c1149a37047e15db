# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
ACVP KAT Harness - SP 800-108 Key Derivation

Validates a crypto module's KDF108 implementation against ACVP vector sets:
parses the request document, runs every test case through a registered
crypto handler and builds the response document.

Modules:
    parser: Request document -> VectorSet
    case_context: Per-case context lent to the crypto handler
    registry: Cipher identifier -> crypto handler
    response: Response document assembly and serialization
    harness: Run loop with all-or-nothing error handling
    crypto: Reference KDF108 handler

Example:
    >>> from acvp_kat import create_default_registry, run_kdf108_kat
    >>>
    >>> registry = create_default_registry()
    >>> response = run_kdf108_kat(request_json, registry, vs_id=1564)
"""

__version__ = "0.1.0"
__author__ = "The Birthmark Standard Foundation"

from .errors import (
    AllocationFailure,
    FailureKind,
    HandlerFailure,
    KatDiagnostic,
    KatError,
    LifecycleError,
    MalformedDocument,
    UnsupportedOperation,
)

from .config import Settings, settings

from .types import TestCase, TestGroup, TestResult, VectorSet

from .parser import parse_vector_set

from .registry import (
    CIPHER_KDF108,
    HandlerRegistry,
    HandlerResult,
    KatHandler,
    create_default_registry,
)

from .case_context import ContextState, Kdf108TestCaseContext

from .response import ResponseBuilder, serialize_response

from .harness import HarnessState, KdfKatHarness, run_kdf108_kat

__all__ = [
    # Errors
    "AllocationFailure",
    "FailureKind",
    "HandlerFailure",
    "KatDiagnostic",
    "KatError",
    "LifecycleError",
    "MalformedDocument",
    "UnsupportedOperation",
    # Configuration
    "Settings",
    "settings",
    # Types
    "TestCase",
    "TestGroup",
    "TestResult",
    "VectorSet",
    # Parsing
    "parse_vector_set",
    # Handlers
    "CIPHER_KDF108",
    "HandlerRegistry",
    "HandlerResult",
    "KatHandler",
    "create_default_registry",
    # Test case context
    "ContextState",
    "Kdf108TestCaseContext",
    # Response
    "ResponseBuilder",
    "serialize_response",
    # Harness
    "HarnessState",
    "KdfKatHarness",
    "run_kdf108_kat",
]
