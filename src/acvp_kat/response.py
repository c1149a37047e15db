# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Response document assembly.

ResponseBuilder collects one TestResult per processed case, in the order the
harness hands them over, and produces the vector-set response:

    {"vsId": 42, "algorithm": "KDF",
     "testResults": [{"tcId": 1, "keyOut": "...", "fixedData": "..."}]}

serialize_response() wraps that document in the ACVP envelope
[{"acvVersion": "1.0"}, {...}] for upload.
"""

import json
import logging
from typing import List, Optional

from .errors import LifecycleError
from .types import TestResult

logger = logging.getLogger(__name__)


class ResponseBuilder:
    """Accumulates test results for one vector set."""

    def __init__(self):
        self._vs_id: Optional[int] = None
        self._algorithm: Optional[str] = None
        self._results: List[TestResult] = []
        self._begun = False
        self._finished = False

    def begin(self, vs_id: int, algorithm: str) -> "ResponseBuilder":
        """Initialize the response shell. Must be called exactly once."""
        if self._begun:
            raise LifecycleError("Response already begun")
        self._vs_id = vs_id
        self._algorithm = algorithm
        self._begun = True
        return self

    def add_result(self, tc_id: int, key_out: bytes, fixed_data: bytes) -> TestResult:
        """
        Append one test result in traversal order.

        The output bytes are copied, so the caller may release its buffers
        as soon as this returns.
        """
        if not self._begun or self._finished:
            raise LifecycleError("Results can only be added between begin() and finish()")
        result = TestResult(tc_id=tc_id, key_out=bytes(key_out), fixed_data=bytes(fixed_data))
        self._results.append(result)
        return result

    @property
    def result_count(self) -> int:
        return len(self._results)

    @property
    def results(self) -> List[TestResult]:
        return list(self._results)

    def finish(self) -> dict:
        """
        Close the builder and return the response document.

        Returns:
            Dict with keys in the order vsId, algorithm, testResults
        """
        if not self._begun:
            raise LifecycleError("Response was never begun")
        if self._finished:
            raise LifecycleError("Response already finished")
        self._finished = True

        return {
            "vsId": self._vs_id,
            "algorithm": self._algorithm,
            "testResults": [result.to_dict() for result in self._results],
        }


def serialize_response(document: dict, acv_version: str = "1.0", pretty: bool = True) -> str:
    """
    Serialize a response document inside the ACVP version envelope.

    Args:
        document: Output of ResponseBuilder.finish()
        acv_version: Protocol version for the envelope
        pretty: Indent the JSON output

    Returns:
        JSON text of [{"acvVersion": ...}, document]
    """
    envelope = [{"acvVersion": acv_version}, document]
    return json.dumps(envelope, indent=3 if pretty else None)
