# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Vector set types produced by the request parser.

These are the harness's in-memory view of an ACVP request document:
a vector set holds test groups in document order, and each group holds
its test cases in document order.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True)
class TestCase:
    """
    A single KDF108 test case.

    Attributes:
        tc_id: Test case ID, unique within the vector set
        key_in: Input key material (KI)
        deferred: Expected result is withheld by the server (pass-through only)
        iv: Feedback-mode initial value (empty when not supplied)
        break_location: Bit offset of the counter for "middle fixed data"
    """

    __test__ = False

    tc_id: int
    key_in: bytes
    deferred: bool = False
    iv: bytes = b""
    break_location: Optional[int] = None


@dataclass(frozen=True)
class TestGroup:
    """
    Test cases sharing one KDF108 configuration.

    Attributes:
        kdf_mode: "counter", "feedback" or "double pipeline iteration"
        mac_mode: PRF identifier (e.g. "HMAC-SHA2-256", "CMAC-AES128")
        counter_location: Where the counter sits in the PRF input
        counter_length: Counter width in bits
        key_out_length: Derived key length in bits
        tests: Test cases in document order
        tg_id: Test group ID, when the server supplies one
    """

    __test__ = False

    kdf_mode: str
    mac_mode: str
    counter_location: str
    counter_length: int
    key_out_length: int
    tests: Tuple[TestCase, ...] = field(default_factory=tuple)
    tg_id: Optional[int] = None


@dataclass(frozen=True)
class VectorSet:
    """
    One ACVP vector set (a numbered validation job).

    Attributes:
        vs_id: Vector set ID
        algorithm: Algorithm identifier used to select the handler
        test_groups: Test groups in document order
    """

    vs_id: int
    algorithm: str
    test_groups: Tuple[TestGroup, ...] = field(default_factory=tuple)

    @property
    def case_count(self) -> int:
        return sum(len(group.tests) for group in self.test_groups)

    def iter_cases(self) -> Iterator[Tuple[int, TestGroup, TestCase]]:
        """Yield (group_index, group, case) in traversal order."""
        for group_index, group in enumerate(self.test_groups):
            for case in group.tests:
                yield group_index, group, case
