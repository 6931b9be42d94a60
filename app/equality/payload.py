# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# equality/payload.py

import cbor2

from equality.equality import Proof

# map keys of the proof payload
PROOF_KEYS = {0: "c", 1: "d", 2: "d1", 3: "d2"}


def build_payload(proof: Proof) -> bytes:
    """
    Build a canonical CBOR-encoded equality proof map.

    The payload follows the schema:
        { 0 => int, 1 => int, 2 => int, 3 => int }
    holding `c`, `D`, `D1` and `D2` in that order. Responses wider than 64 bits
    are written as CBOR bignums (tags 2 and 3), so no precision is lost.

    Uses canonical CBOR encoding (RFC 8949 §4.2) for deterministic output.

    Args:
        proof: The proof to encode.

    Returns:
        Canonical CBOR-encoded bytes.
    """
    m = {0: proof.c, 1: proof.d, 2: proof.d1, 3: proof.d2}
    return cbor2.dumps(m, canonical=True)


def parse_payload(data: bytes) -> Proof:
    """
    Parse a CBOR-encoded equality proof map.

    Args:
        data: Raw CBOR bytes to decode.

    Returns:
        The decoded `Proof`.

    Raises:
        ValueError: If the CBOR structure does not match the proof schema.
    """
    m = cbor2.loads(data)
    if not isinstance(m, dict):
        raise ValueError(f"Expected CBOR map, got {type(m).__name__}")
    if set(m) != set(PROOF_KEYS):
        raise ValueError(f"Expected keys {sorted(PROOF_KEYS)}, got {sorted(m, key=str)}")
    for k, v in m.items():
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"All values must be int, got {type(v).__name__} for key {k}")
    return Proof.from_dict({name: m[k] for k, name in PROOF_KEYS.items()})
