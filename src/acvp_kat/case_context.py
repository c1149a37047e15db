# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Per-case working context passed from the harness to a crypto handler.

Lifecycle:
1. create(group, case) copies every input the handler needs into buffers
   owned by the context (never references into the parsed document)
2. invoke(handler) lends the context to the handler exactly once; only the
   output fields (key_out, fixed_data) are writable during the call
3. dispose() zeroes and drops every owned buffer; it is idempotent and runs
   automatically when the context is used as a context manager

Example:
    >>> with Kdf108TestCaseContext.create(group, case) as ctx:
    ...     ctx.invoke(handler)
    ...     builder.add_result(ctx.tc_id, ctx.key_out, ctx.fixed_data)
"""

import logging
from enum import Enum
from typing import Optional

from .errors import AllocationFailure, HandlerFailure, LifecycleError
from .registry import CIPHER_KDF108, HandlerResult, KatHandler
from .types import TestCase, TestGroup

logger = logging.getLogger(__name__)


class ContextState(str, Enum):
    CREATED = "created"
    INVOKING = "invoking"
    INVOKED = "invoked"
    DISPOSED = "disposed"


def _wipe(buffer: Optional[bytearray]) -> None:
    if buffer is not None:
        for i in range(len(buffer)):
            buffer[i] = 0


def _owned_copy(name: str, value) -> bytearray:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes, got {type(value).__name__}")
    return bytearray(value)


class Kdf108TestCaseContext:
    """
    Mutable scratch structure for one KDF108 test case.

    Inputs are exposed as read-only properties; byte inputs are handed out as
    fresh copies so a handler cannot modify the context's buffers. Outputs can
    only be assigned while invoke() is running.
    """

    def __init__(
        self,
        tc_id: int,
        kdf_mode: str,
        mac_mode: str,
        counter_location: str,
        counter_length: int,
        key_out_length: int,
        key_in: bytes,
        deferred: bool = False,
        iv: bytes = b"",
        break_location: Optional[int] = None,
    ):
        self.cipher = CIPHER_KDF108
        self._tc_id = int(tc_id)
        self._kdf_mode = str(kdf_mode)
        self._mac_mode = str(mac_mode)
        self._counter_location = str(counter_location)
        self._counter_length = int(counter_length)
        self._key_out_length = int(key_out_length)
        self._deferred = bool(deferred)
        self._break_location = None if break_location is None else int(break_location)

        # Owned copies of the byte inputs
        self._key_in: Optional[bytearray] = bytearray(key_in)
        self._iv: Optional[bytearray] = bytearray(iv)

        self._key_out: Optional[bytearray] = None
        self._fixed_data: Optional[bytearray] = None
        self._state = ContextState.CREATED

    @classmethod
    def create(cls, group: TestGroup, case: TestCase) -> "Kdf108TestCaseContext":
        """
        Build a context from a group's shared parameters and one case.

        Raises:
            AllocationFailure: If the owned buffers cannot be allocated
        """
        try:
            return cls(
                tc_id=case.tc_id,
                kdf_mode=group.kdf_mode,
                mac_mode=group.mac_mode,
                counter_location=group.counter_location,
                counter_length=group.counter_length,
                key_out_length=group.key_out_length,
                key_in=case.key_in,
                deferred=case.deferred,
                iv=case.iv,
                break_location=case.break_location,
            )
        except MemoryError as e:
            raise AllocationFailure(
                "Unable to allocate test case context", tc_id=case.tc_id
            ) from e

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    @property
    def state(self) -> ContextState:
        return self._state

    @property
    def is_disposed(self) -> bool:
        return self._state is ContextState.DISPOSED

    @property
    def tc_id(self) -> int:
        return self._tc_id

    @property
    def kdf_mode(self) -> str:
        return self._kdf_mode

    @property
    def mac_mode(self) -> str:
        return self._mac_mode

    @property
    def counter_location(self) -> str:
        return self._counter_location

    @property
    def counter_length(self) -> int:
        return self._counter_length

    @property
    def key_out_length(self) -> int:
        return self._key_out_length

    @property
    def deferred(self) -> bool:
        return self._deferred

    @property
    def break_location(self) -> Optional[int]:
        return self._break_location

    @property
    def key_in(self) -> bytes:
        self._check_live()
        return bytes(self._key_in)

    @property
    def iv(self) -> bytes:
        self._check_live()
        return bytes(self._iv)

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    @property
    def key_out(self) -> Optional[bytes]:
        self._check_live()
        return None if self._key_out is None else bytes(self._key_out)

    @key_out.setter
    def key_out(self, value: bytes) -> None:
        self._check_writable("key_out")
        buffer = _owned_copy("key_out", value)
        _wipe(self._key_out)
        self._key_out = buffer

    @property
    def fixed_data(self) -> Optional[bytes]:
        self._check_live()
        return None if self._fixed_data is None else bytes(self._fixed_data)

    @fixed_data.setter
    def fixed_data(self, value: bytes) -> None:
        self._check_writable("fixed_data")
        buffer = _owned_copy("fixed_data", value)
        _wipe(self._fixed_data)
        self._fixed_data = buffer

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _check_live(self) -> None:
        if self._state is ContextState.DISPOSED:
            raise LifecycleError(f"Test case context {self._tc_id} used after dispose")

    def _check_writable(self, name: str) -> None:
        if self._state is not ContextState.INVOKING:
            raise LifecycleError(
                f"{name} can only be set by the handler during invoke "
                f"(context state: {self._state.value})"
            )

    def invoke(self, handler: KatHandler) -> HandlerResult:
        """
        Run the handler on this context exactly once.

        Returns:
            The handler's successful HandlerResult

        Raises:
            LifecycleError: If the context was already invoked or disposed
            HandlerFailure: If the handler reports failure, raises, or
                succeeds without producing both outputs
        """
        if self._state is not ContextState.CREATED:
            raise LifecycleError(
                f"Test case context {self._tc_id} cannot be invoked "
                f"in state {self._state.value}"
            )

        logger.debug(f"Invoking {type(handler).__name__} for tcId {self._tc_id}")
        self._state = ContextState.INVOKING
        try:
            result = handler.process(self)
        except Exception as e:
            raise HandlerFailure(
                f"Crypto module raised {type(e).__name__}: {e}", tc_id=self._tc_id
            ) from e
        finally:
            self._state = ContextState.INVOKED

        if not isinstance(result, HandlerResult):
            raise HandlerFailure(
                f"Crypto module returned {type(result).__name__}, expected HandlerResult",
                tc_id=self._tc_id,
            )
        if not result.ok:
            raise HandlerFailure(
                f"Crypto module failed the operation: {result.message or 'no reason given'}",
                tc_id=self._tc_id,
            )
        if self._key_out is None or self._fixed_data is None:
            raise HandlerFailure(
                "Crypto module reported success without keyOut and fixedData",
                tc_id=self._tc_id,
            )
        return result

    def dispose(self) -> None:
        """Zero and release every owned buffer. Safe to call more than once."""
        if self._state is ContextState.DISPOSED:
            return

        for buffer in (self._key_in, self._iv, self._key_out, self._fixed_data):
            _wipe(buffer)
        self._key_in = None
        self._iv = None
        self._key_out = None
        self._fixed_data = None
        self._state = ContextState.DISPOSED

    def __enter__(self) -> "Kdf108TestCaseContext":
        self._check_live()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def __repr__(self) -> str:
        return (
            f"Kdf108TestCaseContext(tc_id={self._tc_id}, kdf_mode={self._kdf_mode!r}, "
            f"mac_mode={self._mac_mode!r}, state={self._state.value})"
        )
