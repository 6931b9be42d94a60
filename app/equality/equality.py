# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from equality.constants import EQL_DOMAIN_TAG, CHALLENGE_BYTES
from equality.errors import InvalidParameterError, VerificationFailure
from equality.files import load_json, save_json
from equality.hashing import generate, length_prefixed
from equality.rsa_group import GroupParameters, combine, from_int, invert, scale, to_int
from equality.sampler import RandomSource, blinding_witness_range, sample_in_range, witness_range
from equality.schema import SecuritySchema

logger = logging.getLogger(__name__)

# (W1, W2) -> c, identical on both sides
Challenge = Callable[[int, int], int]


@dataclass(frozen=True)
class Secret:
    """
    Prover-only opening of both commitments: the value `x` and blindings `r1`, `r2`.

    Nothing is shown in the repr so a secret never ends up in a log line.
    """

    x: int = field(repr=False)
    r1: int = field(repr=False)
    r2: int = field(repr=False)


@dataclass(frozen=True)
class Proof:
    """
    Non-interactive proof `(c, D, D1, D2)`.

    The responses are integers over Z, never reduced modulo N.
    """

    c: int
    d: int
    d1: int
    d2: int

    def to_dict(self) -> dict[str, int]:
        return {"c": self.c, "d": self.d, "d1": self.d1, "d2": self.d2}

    @classmethod
    def from_dict(cls, data: dict) -> "Proof":
        values = []
        for name in ("c", "d", "d1", "d2"):
            if name not in data:
                raise ValueError(f"Missing proof field {name}")
            value = data[name]
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Proof field {name} must be int, got {type(value).__name__}")
            values.append(value)
        return cls(*values)


def fiat_shamir_heuristic(w1: int, w2: int) -> int:
    """
    Compute the Fiat–Shamir challenge for the equality proof.

    The challenge is derived by hashing a domain-separated transcript:

        EQL_DOMAIN_TAG || len(W1) || W1 || len(W2) || W2

    where each group element is its minimal big-endian encoding and `len` is a
    fixed width byte count, so distinct pairs never share a transcript.

    Args:
        w1: Ephemeral commitment `g1^w * h1^n1 mod N`.
        w2: Ephemeral commitment `g2^w * h2^n2 mod N`.

    Returns:
        The digest of `CHALLENGE_BYTES` bytes read as an unsigned integer.
    """
    transcript = EQL_DOMAIN_TAG + length_prefixed(from_int(w1)) + length_prefixed(from_int(w2))
    return to_int(generate(transcript, CHALLENGE_BYTES))


def construct_proof(
    params: GroupParameters,
    secret: Secret,
    schema: SecuritySchema,
    source: RandomSource,
    challenge: Challenge = fiat_shamir_heuristic,
) -> Proof:
    """
    Prove that `E = g1^x h1^r1` and `F = g2^x h2^r2` hide the same `x`.

    This is the proof of section 2.2 of Boudot, "Efficient Proofs that a
    Committed Number Lies in an Interval", made non-interactive:

    Commit:
        w  <-$ [1, 2^(l+t) b - 1]
        n1 <-$ [1, 2^(l+t+s1) N - 1]
        n2 <-$ [1, 2^(l+t+s2) N - 1]
        W1 = g1^w h1^n1 mod N
        W2 = g2^w h2^n2 mod N

    Challenge:
        c = H(W1, W2)

    Response (over the integers):
        D  = w  + c x
        D1 = n1 + c r1
        D2 = n2 + c r2

    Args:
        params: Public group parameters.
        secret: The opening `(x, r1, r2)` of both commitments.
        schema: Security constants, identical to the verifier's.
        source: Random source for the witnesses.
        challenge: Challenge derivation, `fiat_shamir_heuristic` by default.

    Returns:
        The proof `(c, D, D1, D2)`.

    Raises:
        InvalidParameterError: If `x` lies outside [0, range_bound) or the
            random source fails to honour a range.
    """
    if not 0 <= secret.x < schema.range_bound:
        raise InvalidParameterError("committed value lies outside [0, range_bound)")

    n = params.n
    w = sample_in_range(*witness_range(schema), source)
    n1 = sample_in_range(*blinding_witness_range(schema, schema.s1, n), source)
    n2 = sample_in_range(*blinding_witness_range(schema, schema.s2, n), source)

    w1 = combine(scale(params.g1, w, n), scale(params.h1, n1, n), n)
    w2 = combine(scale(params.g2, w, n), scale(params.h2, n2, n), n)

    c = challenge(w1, w2)

    d = w + c * secret.x
    d1 = n1 + c * secret.r1
    d2 = n2 + c * secret.r2
    logger.debug("constructed equality proof over a %d-bit modulus", n.bit_length())
    return Proof(c, d, d1, d2)


def check_proof(
    params: GroupParameters,
    e: int,
    f: int,
    proof: Proof,
    challenge: Challenge = fiat_shamir_heuristic,
) -> None:
    """
    Verify that commitments `E` and `F` hide the same value.

    Rebuilds the ephemeral commitments and compares the challenge:

        W1' = g1^D h1^D1 E^-c mod N
        W2' = g2^D h2^D2 F^-c mod N
        c'  = H(W1', W2')  ?=  c

    With honest responses `g1^(w + cx) h1^(n1 + c r1) g1^(-cx) h1^(-c r1)`
    collapses to `g1^w h1^n1`. When `E` and `F` open to different values the
    `cx` terms do not cancel on both sides at once.

    Raises:
        VerificationFailure: If either commitment is zero or not invertible,
            or the recomputed challenge differs from `c`.
    """
    if e == 0 or f == 0:
        # 0^-c is undefined
        logger.debug("equality proof rejected: zero commitment")
        raise VerificationFailure()

    n = params.n
    try:
        e_inv = invert(e, n)
        f_inv = invert(f, n)
        w1 = combine(
            combine(scale(params.g1, proof.d, n), scale(params.h1, proof.d1, n), n),
            scale(e_inv, proof.c, n),
            n,
        )
        w2 = combine(
            combine(scale(params.g2, proof.d, n), scale(params.h2, proof.d2, n), n),
            scale(f_inv, proof.c, n),
            n,
        )
    except ValueError:
        logger.debug("equality proof rejected: element not invertible")
        raise VerificationFailure() from None

    if challenge(w1, w2) != proof.c:
        logger.debug("equality proof rejected: challenge mismatch")
        raise VerificationFailure()
    logger.debug("equality proof accepted")


def is_valid_proof(
    params: GroupParameters,
    e: int,
    f: int,
    proof: Proof,
    challenge: Challenge = fiat_shamir_heuristic,
) -> bool:
    """
    Boolean form of `check_proof`.
    """
    try:
        check_proof(params, e, f, proof, challenge)
    except VerificationFailure:
        return False
    return True


def proof_to_file(proof: Proof, path: str | Path = "../data/equality.json") -> None:
    """
    Serialize an equality proof `(c, D, D1, D2)` to a JSON datum file.

    The output schema matches a Plutus/Aiken constructor encoding:
        {
          "constructor": 0,
          "fields": [
            {"int": c},
            {"int": D},
            {"int": D1},
            {"int": D2}
          ]
        }

    Args:
        proof: The proof to write.
        path: Destination file, `../data/equality.json` by default.

    Raises:
        Any exceptions raised by `save_json` will propagate.
    """
    data = {
        "constructor": 0,
        "fields": [
            {"int": proof.c},
            {"int": proof.d},
            {"int": proof.d1},
            {"int": proof.d2},
        ],
    }
    save_json(path, data)


def proof_from_file(path: str | Path = "../data/equality.json") -> Proof:
    """
    Read a proof datum written by `proof_to_file`.

    Raises:
        ValueError: If the datum does not have the expected shape.
    """
    data = load_json(path)
    if not isinstance(data, dict) or data.get("constructor") != 0:
        raise ValueError("Expected constructor 0 datum")
    fields = data.get("fields")
    if not isinstance(fields, list) or len(fields) != 4:
        raise ValueError("Expected 4 proof fields")
    try:
        values = [entry["int"] for entry in fields]
    except (KeyError, TypeError):
        raise ValueError("Every proof field must be an int datum") from None
    return Proof.from_dict(dict(zip(("c", "d", "d1", "d2"), values)))
