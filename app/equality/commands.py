# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import logging
from pathlib import Path

from equality.equality import Secret, check_proof, construct_proof, proof_from_file, proof_to_file
from equality.rsa_group import GroupParameters, as_int, commit
from equality.sampler import RandomSource, system_source
from equality.schema import SecuritySchema
from equality.files import load_json, save_json

logger = logging.getLogger(__name__)


def _schema(schema_path: str | Path | None) -> SecuritySchema:
    return SecuritySchema.from_file(schema_path) if schema_path is not None else SecuritySchema()


def create_equality_proof(
    params_path: str | Path,
    x: int,
    r1: int,
    r2: int,
    proof_path: str | Path = "../data/equality.json",
    commitments_path: str | Path = "../data/commitments.json",
    schema_path: str | Path | None = None,
    source: RandomSource | None = None,
) -> None:
    """
    Create the artifacts for an equality proof between two commitments.

    High-level steps:
    1. Load the group parameters (and optionally the security schema).
    2. Compute the public commitments
         E = g1^x h1^r1 mod N
         F = g2^x h2^r2 mod N
       and write them to `commitments_path`.
    3. Prove that `E` and `F` hide the same `x` and write the proof datum.

    Side effects (writes files):
    - Commitments via `save_json(...)`
    - Proof via `proof_to_file(...)`

    Args:
        params_path: JSON file readable by `GroupParameters.from_file`.
        x: The committed value.
        r1: Blinding of the first commitment.
        r2: Blinding of the second commitment.
        proof_path: Destination of the proof datum.
        commitments_path: Destination of `{"e": E, "f": F}`.
        schema_path: Optional JSON file readable by `SecuritySchema.from_file`.
        source: Random source, a fresh `secrets.SystemRandom` when omitted.
    """
    params = GroupParameters.from_file(params_path)
    schema = _schema(schema_path)
    source = source if source is not None else system_source()

    e = commit(params.g1, params.h1, x, r1, params.n)
    f = commit(params.g2, params.h2, x, r2, params.n)
    save_json(commitments_path, {"e": hex(e), "f": hex(f)})

    proof = construct_proof(params, Secret(x, r1, r2), schema, source)
    proof_to_file(proof, proof_path)
    logger.info("wrote equality proof to %s", proof_path)


def verify_equality_proof(
    params_path: str | Path,
    proof_path: str | Path = "../data/equality.json",
    commitments_path: str | Path = "../data/commitments.json",
) -> None:
    """
    Verify an equality proof datum against the commitments written next to it.

    Raises:
        VerificationFailure: If the proof does not hold.
        InvalidParameterError: If the group parameters are malformed.
    """
    params = GroupParameters.from_file(params_path)
    commitments = load_json(commitments_path)
    e = as_int(commitments["e"], "e")
    f = as_int(commitments["f"], "f")
    proof = proof_from_file(proof_path)
    check_proof(params, e, f, proof)
    logger.info("equality proof %s verified", proof_path)
