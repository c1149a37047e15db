# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
KAT harness for KDF108 vector sets.

This module implements the run loop:
1. Parse the request document into a VectorSet
2. Resolve the crypto handler for the vector set's algorithm
3. For every group, then every case, in document order:
   build a test case context, invoke the handler, copy the outputs into
   the response, dispose the context
4. Finish and return the response document

A KAT run is all-or-nothing. The first failure aborts the run, the partial
response is discarded and the error (annotated with group index and tcId)
propagates to the caller.

State machine:
    IDLE -> PARSING -> PROCESSING -> FINALIZING -> FINALIZED
    (any failure) -> ABORTED
"""

import logging
from enum import Enum
from typing import Optional, Tuple

from .case_context import Kdf108TestCaseContext
from .config import Settings, settings as default_settings
from .errors import KatDiagnostic, KatError, LifecycleError
from .parser import RawDocument, parse_vector_set
from .registry import HandlerRegistry
from .response import ResponseBuilder, serialize_response
from .types import VectorSet

logger = logging.getLogger(__name__)


class HarnessState(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    PROCESSING = "processing"
    FINALIZING = "finalizing"
    FINALIZED = "finalized"
    ABORTED = "aborted"


class KdfKatHarness:
    """
    Drives one KDF108 vector set through a registered crypto handler.

    A harness instance performs a single run. After run() returns, the
    response is available as `response`; after it raises, `diagnostic`
    describes the failure.
    """

    def __init__(self, registry: HandlerRegistry, config: Optional[Settings] = None):
        """
        Args:
            registry: Handler registry used to resolve the crypto module
            config: Harness settings (module settings if None)
        """
        self.registry = registry
        self.config = config or default_settings

        self.state = HarnessState.IDLE
        self.vector_set: Optional[VectorSet] = None
        self.response: Optional[dict] = None
        self.diagnostic: Optional[KatDiagnostic] = None
        self.completed_cases = 0
        self._position: Tuple[Optional[int], Optional[int]] = (None, None)

    @property
    def position(self) -> Tuple[Optional[int], Optional[int]]:
        """(group_index, tc_id) of the case currently or last processed."""
        return self._position

    def run(self, document: RawDocument, vs_id: Optional[int] = None) -> dict:
        """
        Process a request document and return the response document.

        Args:
            document: Raw request document
            vs_id: Session-supplied vector set ID

        Returns:
            Response dict with vsId, algorithm and testResults

        Raises:
            LifecycleError: If this harness has already run
            MalformedDocument: If the request cannot be parsed
            UnsupportedOperation: If no handler serves the algorithm
            AllocationFailure: If a test case context cannot be built
            HandlerFailure: If the crypto module fails any case
        """
        if self.state is not HarnessState.IDLE:
            raise LifecycleError(f"Harness already used (state: {self.state.value})")

        try:
            self.state = HarnessState.PARSING
            self.vector_set = parse_vector_set(document, vs_id=vs_id, config=self.config)
            handler = self.registry.lookup(self.vector_set.algorithm)

            builder = ResponseBuilder().begin(self.vector_set.vs_id, self.vector_set.algorithm)
            self.state = HarnessState.PROCESSING
            self._process(self.vector_set, handler, builder)

            self.state = HarnessState.FINALIZING
            response = builder.finish()
        except KatError as e:
            self.state = HarnessState.ABORTED
            self.diagnostic = e.diagnostic
            logger.error(f"KAT run aborted: {e}")
            raise
        except Exception as e:
            self.state = HarnessState.ABORTED
            logger.error(f"KAT run aborted by unexpected {type(e).__name__}: {e}")
            raise

        self.response = response
        self.state = HarnessState.FINALIZED
        self._log_response(response)
        logger.info(
            f"Vector set {self.vector_set.vs_id} completed: "
            f"{self.completed_cases} test cases"
        )
        return response

    def _process(self, vector_set: VectorSet, handler, builder: ResponseBuilder) -> None:
        current_group = None
        for group_index, group, case in vector_set.iter_cases():
            if group_index != current_group:
                current_group = group_index
                logger.info(f"Test group: {group_index}")

            self._position = (group_index, case.tc_id)
            logger.debug(
                f"Test case tcId {case.tc_id}: kdfMode={group.kdf_mode}, "
                f"macMode={group.mac_mode}, deferred={case.deferred}"
            )

            try:
                with Kdf108TestCaseContext.create(group, case) as context:
                    context.invoke(handler)
                    builder.add_result(context.tc_id, context.key_out, context.fixed_data)
            except KatError as e:
                raise e.annotate(group_index, case.tc_id)

            self.completed_cases += 1

    def _log_response(self, response: dict) -> None:
        serialized = serialize_response(
            response,
            acv_version=self.config.acv_version,
            pretty=self.config.pretty_print,
        )
        level = logging.INFO if self.config.verbose else logging.DEBUG
        logger.log(level, f"Vector set response:\n{serialized}")


def run_kdf108_kat(
    document: RawDocument,
    registry: HandlerRegistry,
    vs_id: Optional[int] = None,
    config: Optional[Settings] = None,
) -> dict:
    """
    Run one KDF108 vector set with a fresh harness.

    Example:
        >>> registry = create_default_registry()
        >>> response = run_kdf108_kat(request_json, registry, vs_id=1564)
        >>> response["testResults"][0]["tcId"]
        1
    """
    harness = KdfKatHarness(registry, config=config)
    return harness.run(document, vs_id=vs_id)
