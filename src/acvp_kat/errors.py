# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Error taxonomy for KAT vector-set processing.

Every failure that aborts a run is a KatError subclass. The harness annotates
the error with the group index and tcId of the case being processed, so the
caller always receives the first failure together with where it happened.

Failure kinds:
    MalformedDocument: Missing or mistyped request fields (before any case)
    UnsupportedOperation: No handler registered for the algorithm (before any case)
    AllocationFailure: Resources exhausted while building a test case context
    HandlerFailure: The crypto module reported an error for one test case
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    """Machine-readable failure categories."""

    MALFORMED_DOCUMENT = "malformed_document"
    UNSUPPORTED_OPERATION = "unsupported_operation"
    ALLOCATION_FAILURE = "allocation_failure"
    HANDLER_FAILURE = "handler_failure"


@dataclass(frozen=True)
class KatDiagnostic:
    """
    Structured description of the failure that aborted a run.

    Attributes:
        kind: Failure category
        message: Human-readable description
        group_index: Zero-based index of the test group, if a case was in flight
        tc_id: tcId of the failing test case, if any
    """

    kind: FailureKind
    message: str
    group_index: Optional[int] = None
    tc_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "groupIndex": self.group_index,
            "tcId": self.tc_id,
        }


class KatError(Exception):
    """Base class for all fatal KAT run errors."""

    kind: FailureKind

    def __init__(
        self,
        message: str,
        group_index: Optional[int] = None,
        tc_id: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.group_index = group_index
        self.tc_id = tc_id

    def annotate(self, group_index: int, tc_id: int) -> "KatError":
        """Fill in location fields that are not already set."""
        if self.group_index is None:
            self.group_index = group_index
        if self.tc_id is None:
            self.tc_id = tc_id
        return self

    @property
    def diagnostic(self) -> KatDiagnostic:
        return KatDiagnostic(
            kind=self.kind,
            message=self.message,
            group_index=self.group_index,
            tc_id=self.tc_id,
        )

    def __str__(self) -> str:
        location = []
        if self.group_index is not None:
            location.append(f"group {self.group_index}")
        if self.tc_id is not None:
            location.append(f"tcId {self.tc_id}")
        if location:
            return f"{self.message} ({', '.join(location)})"
        return self.message


class MalformedDocument(KatError):
    """Request document has absent or mistyped fields."""

    kind = FailureKind.MALFORMED_DOCUMENT


class UnsupportedOperation(KatError):
    """No handler is registered for the requested cipher."""

    kind = FailureKind.UNSUPPORTED_OPERATION


class AllocationFailure(KatError):
    """A test case context could not be built."""

    kind = FailureKind.ALLOCATION_FAILURE


class HandlerFailure(KatError):
    """The crypto module failed to process a test case."""

    kind = FailureKind.HANDLER_FAILURE


class LifecycleError(RuntimeError):
    """An object was used outside its allowed lifecycle (e.g. after dispose)."""
