# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import logging
from math import gcd

from cryptography.hazmat.primitives.asymmetric import rsa

from equality.rsa_group import GroupParameters, scale
from equality.sampler import RandomSource, sample_in_range, system_source

logger = logging.getLogger(__name__)


def _generator(n: int, source: RandomSource) -> int:
    # squares land in the large-order subgroup of quadratic residues
    while True:
        b = sample_in_range(2, n - 2, source)
        g = scale(b, 2, n)
        if g != 1 and gcd(g, n) == 1:
            return g


def _partner(g: int, n: int, source: RandomSource) -> int:
    # h = g^alpha, alpha is dropped on return
    while True:
        h = scale(g, sample_in_range(2, n - 1, source), n)
        if h not in (1, g):
            return h


def generate_group(bits: int = 2048, source: RandomSource | None = None) -> GroupParameters:
    """
    Act as the trusted third party and create fresh group parameters.

    The modulus is an RSA modulus `N = pq` from `cryptography`'s key generation.
    Each `g_i` is a random square modulo `N` and each `h_i = g_i^alpha_i`.
    The factorization and every `alpha_i` are discarded before returning, so
    neither prover nor verifier can learn them from this call.

    Args:
        bits: Modulus size; `cryptography` refuses anything below 1024.
        source: Random source for the generators, OS entropy by default.

    Returns:
        Public `GroupParameters`.
    """
    source = source if source is not None else system_source()
    key = rsa.generate_private_key(public_exponent=65537, key_size=bits)
    n = key.private_numbers().public_numbers.n
    del key

    g1 = _generator(n, source)
    g2 = _generator(n, source)
    h1 = _partner(g1, n, source)
    h2 = _partner(g2, n, source)
    logger.info("generated %d-bit equality proof group", n.bit_length())
    return GroupParameters(n=n, g1=g1, h1=h1, g2=g2, h2=h2)
