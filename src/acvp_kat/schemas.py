# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Pydantic schemas for ACVP KDF108 request documents."""

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, field_validator


_HEX_PATTERN = re.compile(r"(?:[0-9A-Fa-f]{2})*")


def _check_hex(v: str) -> str:
    if not _HEX_PATTERN.fullmatch(v):
        raise ValueError("must be an even-length hexadecimal string")
    return v


class TestCaseSchema(BaseModel):
    """One entry of a group's "tests" array."""

    __test__ = False

    model_config = ConfigDict(extra="ignore")

    tc_id: StrictInt = Field(..., alias="tcId", ge=0, description="Test case ID")
    key_in: StrictStr = Field(..., alias="keyIn", description="Hex-encoded input key")
    deferred: StrictBool = Field(False, description="Expected result withheld by server")
    iv: StrictStr = Field("", description="Hex-encoded feedback-mode IV")
    break_location: Optional[StrictInt] = Field(
        None, alias="breakLocation", ge=0, description="Counter bit offset for middle fixed data"
    )

    @field_validator("key_in", "iv")
    @classmethod
    def validate_hex(cls, v: str) -> str:
        """Validate hex encoding."""
        return _check_hex(v)


class TestGroupSchema(BaseModel):
    """One entry of the "testGroups" array."""

    __test__ = False

    model_config = ConfigDict(extra="ignore")

    tg_id: Optional[StrictInt] = Field(None, alias="tgId", description="Test group ID")
    kdf_mode: StrictStr = Field(..., alias="kdfMode")
    mac_mode: StrictStr = Field(..., alias="macMode")
    counter_location: StrictStr = Field(..., alias="counterLocation")
    counter_length: StrictInt = Field(..., alias="counterLength", ge=0, description="Counter bits")
    key_out_length: StrictInt = Field(..., alias="keyOutLength", gt=0, description="Output bits")
    tests: List[TestCaseSchema]


class VectorSetSchema(BaseModel):
    """Vector set object of a request document."""

    model_config = ConfigDict(extra="ignore")

    vs_id: Optional[StrictInt] = Field(None, alias="vsId", ge=0)
    algorithm: Optional[StrictStr] = None
    test_groups: List[TestGroupSchema] = Field(..., alias="testGroups")
