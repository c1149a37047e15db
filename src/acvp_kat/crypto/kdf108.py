# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
SP 800-108r1 key-based key derivation (KDF108).

Reference crypto handler for KDF vector sets. The PRF is HMAC or CMAC from
the cryptography library; the iteration modes are assembled here because the
library's KBKDF only covers counter mode and does not expose the PRF input
layout needed for feedback and double-pipeline iteration.

Modes:
- counter: K(i) = PRF(KI, [i] || FixedData)  (counter before/after/inside fixed data)
- feedback: K(i) = PRF(KI, K(i-1) {|| [i]} || FixedData), K(0) = IV
- double pipeline iteration: A(i) = PRF(KI, A(i-1)), A(0) = FixedData,
  K(i) = PRF(KI, A(i) {|| [i]} || FixedData)

The derived key is the first L bits of K(1) || K(2) || ... .
"""

import logging
import secrets
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from cryptography.hazmat.primitives import cmac, hashes, hmac
from cryptography.hazmat.primitives.ciphers import algorithms

from ..registry import HandlerResult

if TYPE_CHECKING:
    from ..case_context import Kdf108TestCaseContext

logger = logging.getLogger(__name__)

MODE_COUNTER = "counter"
MODE_FEEDBACK = "feedback"
MODE_DOUBLE_PIPELINE = "double pipeline iteration"
KDF_MODES = (MODE_COUNTER, MODE_FEEDBACK, MODE_DOUBLE_PIPELINE)

LOCATION_NONE = "none"
LOCATION_BEFORE_FIXED = "before fixed data"
LOCATION_AFTER_FIXED = "after fixed data"
LOCATION_MIDDLE_FIXED = "middle fixed data"
LOCATION_BEFORE_ITERATOR = "before iterator"

VALID_LOCATIONS = {
    MODE_COUNTER: (LOCATION_BEFORE_FIXED, LOCATION_AFTER_FIXED, LOCATION_MIDDLE_FIXED),
    MODE_FEEDBACK: (
        LOCATION_NONE,
        LOCATION_BEFORE_FIXED,
        LOCATION_AFTER_FIXED,
        LOCATION_BEFORE_ITERATOR,
    ),
    MODE_DOUBLE_PIPELINE: (
        LOCATION_NONE,
        LOCATION_BEFORE_FIXED,
        LOCATION_AFTER_FIXED,
        LOCATION_BEFORE_ITERATOR,
    ),
}

COUNTER_LENGTHS = (8, 16, 24, 32)

# MAC mode name -> hash algorithm factory
_HMAC_ALGORITHMS: Dict[str, Callable[[], hashes.HashAlgorithm]] = {
    "HMAC-SHA-1": hashes.SHA1,
    "HMAC-SHA2-224": hashes.SHA224,
    "HMAC-SHA2-256": hashes.SHA256,
    "HMAC-SHA2-384": hashes.SHA384,
    "HMAC-SHA2-512": hashes.SHA512,
    "HMAC-SHA2-512/224": hashes.SHA512_224,
    "HMAC-SHA2-512/256": hashes.SHA512_256,
    "HMAC-SHA3-224": hashes.SHA3_224,
    "HMAC-SHA3-256": hashes.SHA3_256,
    "HMAC-SHA3-384": hashes.SHA3_384,
    "HMAC-SHA3-512": hashes.SHA3_512,
}

# MAC mode name -> AES key size in bytes
_CMAC_KEY_SIZES: Dict[str, int] = {
    "CMAC-AES128": 16,
    "CMAC-AES192": 24,
    "CMAC-AES256": 32,
}

# Compact spellings seen in older vector sets
_MAC_ALIASES: Dict[str, str] = {
    "HMAC-SHA1": "HMAC-SHA-1",
    "HMAC-SHA224": "HMAC-SHA2-224",
    "HMAC-SHA256": "HMAC-SHA2-256",
    "HMAC-SHA384": "HMAC-SHA2-384",
    "HMAC-SHA512": "HMAC-SHA2-512",
    "CMAC-AES-128": "CMAC-AES128",
    "CMAC-AES-192": "CMAC-AES192",
    "CMAC-AES-256": "CMAC-AES256",
}

Prf = Callable[[bytes], bytes]


def normalize_mac_mode(mac_mode: str) -> str:
    """Map a MAC mode spelling onto its canonical ACVP name."""
    name = mac_mode.strip().upper()
    return _MAC_ALIASES.get(name, name)


def supported_mac_modes() -> Tuple[str, ...]:
    return tuple(_HMAC_ALGORITHMS) + tuple(_CMAC_KEY_SIZES)


def _make_prf(mac_mode: str, key_in: bytes) -> Tuple[Prf, int]:
    """
    Build the PRF keyed with KI.

    Returns:
        Tuple of (prf, output length in bytes)

    Raises:
        ValueError: If the MAC mode is unsupported or the key does not fit it
    """
    name = normalize_mac_mode(mac_mode)

    if name in _HMAC_ALGORITHMS:
        algorithm = _HMAC_ALGORITHMS[name]()

        def prf(data: bytes) -> bytes:
            h = hmac.HMAC(key_in, algorithm)
            h.update(data)
            return h.finalize()

        return prf, algorithm.digest_size

    if name in _CMAC_KEY_SIZES:
        if len(key_in) != _CMAC_KEY_SIZES[name]:
            raise ValueError(
                f"{name} requires a {_CMAC_KEY_SIZES[name]}-byte key, got {len(key_in)}"
            )

        def prf(data: bytes) -> bytes:
            c = cmac.CMAC(algorithms.AES(key_in))
            c.update(data)
            return c.finalize()

        return prf, algorithms.AES.block_size // 8

    raise ValueError(f"Unsupported MAC mode: {mac_mode}")


def _check_parameters(
    kdf_mode: str,
    counter_location: str,
    counter_length: int,
    key_out_length: int,
) -> None:
    if kdf_mode not in KDF_MODES:
        raise ValueError(f"Unsupported KDF mode: {kdf_mode}")

    if counter_location not in VALID_LOCATIONS[kdf_mode]:
        raise ValueError(
            f"Counter location {counter_location!r} is not valid in {kdf_mode} mode"
        )

    if counter_location == LOCATION_NONE:
        if counter_length != 0:
            raise ValueError("Counter length must be 0 when counter location is none")
    elif counter_length not in COUNTER_LENGTHS:
        raise ValueError(
            f"Counter length must be one of {COUNTER_LENGTHS}, got {counter_length}"
        )

    if key_out_length <= 0:
        raise ValueError(f"Key output length must be positive, got {key_out_length}")


def _resolve_break(fixed_data: bytes, break_location: Optional[int]) -> int:
    """Byte offset at which the counter is inserted for middle fixed data."""
    if break_location is None:
        return len(fixed_data) // 2
    if break_location % 8:
        raise ValueError(f"Break location must be byte aligned, got {break_location} bits")
    offset = break_location // 8
    if offset > len(fixed_data):
        raise ValueError(
            f"Break location {break_location} is beyond fixed data ({len(fixed_data) * 8} bits)"
        )
    return offset


def derive_kdf108(
    key_in: bytes,
    kdf_mode: str,
    mac_mode: str,
    counter_location: str,
    counter_length: int,
    key_out_length: int,
    fixed_data: bytes,
    iv: bytes = b"",
    break_location: Optional[int] = None,
) -> bytes:
    """
    Derive keying material with an SP 800-108 KDF.

    Args:
        key_in: Key derivation key (KI)
        kdf_mode: "counter", "feedback" or "double pipeline iteration"
        mac_mode: PRF name (e.g. "HMAC-SHA2-256", "CMAC-AES128")
        counter_location: Position of the counter in the PRF input
        counter_length: Counter width in bits (0 only with location "none")
        key_out_length: Output length L in bits
        fixed_data: Fixed input data (label, context, length encoding)
        iv: Initial value for feedback mode
        break_location: Counter bit offset for "middle fixed data"

    Returns:
        ceil(L / 8) bytes of derived key with unused trailing bits cleared

    Raises:
        ValueError: If any parameter is invalid or unsupported
    """
    _check_parameters(kdf_mode, counter_location, counter_length, key_out_length)
    prf, block_len = _make_prf(mac_mode, key_in)

    out_len = (key_out_length + 7) // 8
    iterations = (out_len + block_len - 1) // block_len
    if counter_length and iterations >= 1 << counter_length:
        raise ValueError(
            f"{iterations} iterations do not fit a {counter_length}-bit counter"
        )

    split = 0
    if counter_location == LOCATION_MIDDLE_FIXED:
        split = _resolve_break(fixed_data, break_location)

    output = bytearray()
    previous = iv
    a_value = fixed_data
    for i in range(1, iterations + 1):
        counter = i.to_bytes(counter_length // 8, "big") if counter_length else b""

        if kdf_mode == MODE_COUNTER:
            if counter_location == LOCATION_BEFORE_FIXED:
                data = counter + fixed_data
            elif counter_location == LOCATION_AFTER_FIXED:
                data = fixed_data + counter
            else:
                data = fixed_data[:split] + counter + fixed_data[split:]
        else:
            if kdf_mode == MODE_FEEDBACK:
                iterator = previous
            else:
                a_value = prf(a_value)
                iterator = a_value

            if counter_location == LOCATION_BEFORE_ITERATOR:
                data = counter + iterator + fixed_data
            elif counter_location == LOCATION_BEFORE_FIXED:
                data = iterator + counter + fixed_data
            elif counter_location == LOCATION_AFTER_FIXED:
                data = iterator + fixed_data + counter
            else:
                data = iterator + fixed_data

        previous = prf(data)
        output += previous

    key_out = bytearray(output[:out_len])
    if key_out_length % 8:
        key_out[-1] &= (0xFF << (8 - key_out_length % 8)) & 0xFF
    return bytes(key_out)


class Kdf108Handler:
    """
    Reference KDF108 crypto handler.

    Generates fixed data for every case, derives keyOut and writes both into
    the test case context. Invalid case parameters are reported as a failed
    HandlerResult rather than an exception.
    """

    def __init__(
        self,
        fixed_data_length: int = 32,
        fixed_data_source: Callable[[int], bytes] = secrets.token_bytes,
    ):
        """
        Args:
            fixed_data_length: Bytes of fixed data per case
            fixed_data_source: Callable returning n bytes (random by default)
        """
        if fixed_data_length <= 0:
            raise ValueError(f"Fixed data length must be positive, got {fixed_data_length}")
        self.fixed_data_length = fixed_data_length
        self._fixed_data_source = fixed_data_source

    def process(self, context: "Kdf108TestCaseContext") -> HandlerResult:
        fixed_data = self._fixed_data_source(self.fixed_data_length)
        try:
            key_out = derive_kdf108(
                key_in=context.key_in,
                kdf_mode=context.kdf_mode,
                mac_mode=context.mac_mode,
                counter_location=context.counter_location,
                counter_length=context.counter_length,
                key_out_length=context.key_out_length,
                fixed_data=fixed_data,
                iv=context.iv,
                break_location=context.break_location,
            )
        except ValueError as e:
            logger.error(f"KDF108 derivation failed for tcId {context.tc_id}: {e}")
            return HandlerResult.failure(str(e))

        context.key_out = key_out
        context.fixed_data = fixed_data
        return HandlerResult.success()
