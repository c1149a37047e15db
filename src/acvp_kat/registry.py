# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Handler registry mapping cipher identifiers to crypto handlers.

A handler is the module-under-test's single-operation capability for one
algorithm family. The harness resolves it by the vector set's algorithm
identifier and lends it each test case context for the duration of one
call. Handlers must not keep a reference to the context afterwards and
may only write the context's output fields.

Example Usage:
    >>> registry = HandlerRegistry()
    >>> registry.register(CIPHER_KDF108, Kdf108Handler())
    >>> handler = registry.lookup("KDF")
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol

from .config import Settings, settings as default_settings
from .errors import UnsupportedOperation

if TYPE_CHECKING:
    from .case_context import Kdf108TestCaseContext

logger = logging.getLogger(__name__)

# Algorithm identifier of SP 800-108 vector sets
CIPHER_KDF108 = "KDF"


@dataclass(frozen=True)
class HandlerResult:
    """
    Structured outcome of one handler call.

    Attributes:
        ok: True if the module produced outputs for the case
        message: Failure description (empty on success)
    """

    ok: bool
    message: str = ""

    @classmethod
    def success(cls) -> "HandlerResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, message: str) -> "HandlerResult":
        return cls(ok=False, message=message)


class KatHandler(Protocol):
    """Processing capability implemented once per algorithm family."""

    def process(self, context: "Kdf108TestCaseContext") -> HandlerResult:
        ...


class HandlerRegistry:
    """Registry of crypto handlers keyed by cipher identifier."""

    def __init__(self):
        self._handlers: Dict[str, KatHandler] = {}

    def register(self, cipher_id: str, handler: KatHandler, replace: bool = False) -> None:
        """
        Register a handler for a cipher identifier.

        Args:
            cipher_id: Algorithm identifier as it appears in vector sets
            handler: Object implementing process(context)
            replace: Allow overwriting an existing registration

        Raises:
            ValueError: If cipher_id is already registered and replace is False
        """
        if cipher_id in self._handlers and not replace:
            raise ValueError(f"Handler already registered for cipher {cipher_id!r}")
        self._handlers[cipher_id] = handler
        logger.debug(f"Registered handler {type(handler).__name__} for {cipher_id!r}")

    def unregister(self, cipher_id: str) -> None:
        if cipher_id not in self._handlers:
            raise KeyError(f"No handler registered for cipher {cipher_id!r}")
        del self._handlers[cipher_id]

    def lookup(self, cipher_id: str) -> KatHandler:
        """
        Resolve the handler for a cipher identifier.

        Raises:
            UnsupportedOperation: If no handler is registered
        """
        handler = self._handlers.get(cipher_id)
        if handler is None:
            raise UnsupportedOperation(
                f"Server requested unsupported capability {cipher_id!r}"
            )
        return handler

    def is_registered(self, cipher_id: str) -> bool:
        return cipher_id in self._handlers

    def list_ciphers(self) -> List[str]:
        return sorted(self._handlers)

    def __contains__(self, cipher_id: object) -> bool:
        return cipher_id in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


def create_default_registry(config: Optional[Settings] = None) -> HandlerRegistry:
    """Registry with the reference KDF108 handler registered under "KDF"."""
    from .crypto.kdf108 import Kdf108Handler

    config = config or default_settings
    registry = HandlerRegistry()
    registry.register(
        CIPHER_KDF108,
        Kdf108Handler(fixed_data_length=config.fixed_data_length),
    )
    return registry
