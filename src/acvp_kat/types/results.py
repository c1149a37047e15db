# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Per-case result type written into the response document."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TestResult:
    """
    Outputs of one processed test case.

    Attributes:
        tc_id: Test case ID copied from the request
        key_out: Derived key material
        fixed_data: Fixed input data the module used for the derivation
    """

    __test__ = False

    tc_id: int
    key_out: bytes
    fixed_data: bytes

    def to_dict(self) -> dict:
        """Response entry with upper-case hex, in ACVP field order."""
        return {
            "tcId": self.tc_id,
            "keyOut": self.key_out.hex().upper(),
            "fixedData": self.fixed_data.hex().upper(),
        }
