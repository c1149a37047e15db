# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Reference crypto handlers.

Modules:
    kdf108: SP 800-108 counter, feedback and double-pipeline KDFs (HMAC/CMAC PRFs)
"""

from .kdf108 import (
    KDF_MODES,
    Kdf108Handler,
    derive_kdf108,
    normalize_mac_mode,
    supported_mac_modes,
)

__all__ = [
    "KDF_MODES",
    "Kdf108Handler",
    "derive_kdf108",
    "normalize_mac_mode",
    "supported_mac_modes",
]
