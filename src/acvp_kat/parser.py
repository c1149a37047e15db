# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Request document parser.

Turns a raw ACVP request (JSON text, JSON bytes, an already-decoded
mapping, or the ACVP envelope array) into a VectorSet. The parser never
modifies its input and raises MalformedDocument for anything it cannot use.
"""

import json
import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from .config import Settings, settings as default_settings
from .errors import MalformedDocument
from .schemas import VectorSetSchema
from .types import TestCase, TestGroup, VectorSet

logger = logging.getLogger(__name__)

RawDocument = Union[str, bytes, bytearray, Mapping[str, Any], list]


def _decode(document: RawDocument) -> Any:
    if isinstance(document, (str, bytes, bytearray)):
        try:
            return json.loads(document)
        except (ValueError, RecursionError) as e:
            raise MalformedDocument(f"Request is not valid JSON: {e}") from e
    return document


def _select_vector_set(decoded: Any) -> Mapping[str, Any]:
    """Pick the vector set object, unwrapping the [{acvVersion}, {...}] envelope."""
    if isinstance(decoded, Mapping):
        return decoded

    if isinstance(decoded, list):
        candidates = [
            item for item in decoded
            if isinstance(item, Mapping) and "testGroups" in item
        ]
        if len(candidates) == 1:
            return candidates[0]
        raise MalformedDocument(
            f"Expected exactly one vector set in request envelope, found {len(candidates)}"
        )

    raise MalformedDocument(
        f"Request must be a JSON object or array, got {type(decoded).__name__}"
    )


def _format_validation_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"Invalid field '{location}': {first['msg']}"


def parse_vector_set(
    document: RawDocument,
    vs_id: Optional[int] = None,
    config: Optional[Settings] = None,
) -> VectorSet:
    """
    Parse a KDF108 request document into a VectorSet.

    Args:
        document: Raw request (JSON text/bytes, mapping, or envelope array)
        vs_id: Session-supplied vector set ID; overrides a missing document vsId
        config: Settings providing the default algorithm (module settings if None)

    Returns:
        VectorSet with groups and cases in document order

    Raises:
        MalformedDocument: If required fields are absent or mistyped, vsId is
            missing or contradicts vs_id, or a tcId repeats
    """
    config = config or default_settings

    vector_set_obj = _select_vector_set(_decode(document))

    try:
        schema = VectorSetSchema.model_validate(vector_set_obj)
    except ValidationError as e:
        raise MalformedDocument(_format_validation_error(e)) from e

    if vs_id is not None and schema.vs_id is not None and vs_id != schema.vs_id:
        raise MalformedDocument(
            f"Document vsId {schema.vs_id} does not match session vsId {vs_id}"
        )
    resolved_vs_id = vs_id if vs_id is not None else schema.vs_id
    if resolved_vs_id is None:
        raise MalformedDocument("Missing vsId")

    seen_tc_ids = set()
    groups = []
    for group_index, group in enumerate(schema.test_groups):
        cases = []
        for case in group.tests:
            if case.tc_id in seen_tc_ids:
                raise MalformedDocument(
                    f"Duplicate tcId {case.tc_id}",
                    group_index=group_index,
                    tc_id=case.tc_id,
                )
            seen_tc_ids.add(case.tc_id)
            cases.append(
                TestCase(
                    tc_id=case.tc_id,
                    key_in=bytes.fromhex(case.key_in),
                    deferred=case.deferred,
                    iv=bytes.fromhex(case.iv),
                    break_location=case.break_location,
                )
            )
        groups.append(
            TestGroup(
                kdf_mode=group.kdf_mode,
                mac_mode=group.mac_mode,
                counter_location=group.counter_location,
                counter_length=group.counter_length,
                key_out_length=group.key_out_length,
                tests=tuple(cases),
                tg_id=group.tg_id,
            )
        )

    vector_set = VectorSet(
        vs_id=resolved_vs_id,
        algorithm=schema.algorithm or config.default_algorithm,
        test_groups=tuple(groups),
    )
    logger.debug(
        f"Parsed vector set {vector_set.vs_id}: {len(groups)} groups, "
        f"{vector_set.case_count} cases"
    )
    return vector_set
