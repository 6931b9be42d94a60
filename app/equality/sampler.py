# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import secrets
from typing import Protocol

from equality.errors import InvalidParameterError
from equality.schema import SecuritySchema


class RandomSource(Protocol):
    """
    Anything that draws uniform integers from an inclusive range.

    `secrets.SystemRandom` satisfies this. Drawing mutates the source, so a
    single instance must not be shared across threads without its own locking.
    """

    def randint(self, a: int, b: int) -> int: ...


def system_source() -> RandomSource:
    """
    Return a fresh OS-backed cryptographically secure random source.
    """
    return secrets.SystemRandom()


def sample_in_range(low: int, high: int, source: RandomSource) -> int:
    """
    Draw a uniformly distributed integer from [low, high].

    Args:
        low: Inclusive lower bound.
        high: Inclusive upper bound.
        source: Caller supplied random source.

    Returns:
        An integer in [low, high].

    Raises:
        InvalidParameterError: If the range is empty or the source misbehaves.
    """
    if low > high:
        raise InvalidParameterError("cannot sample from an empty range")
    value = source.randint(low, high)
    if not low <= value <= high:
        raise InvalidParameterError("random source returned a value outside the range")
    return value


def witness_range(schema: SecuritySchema) -> tuple[int, int]:
    """
    Range of the value witness `w`: [1, 2^(l+t) * b - 1].
    """
    bound = 2 ** (schema.hiding_bits + schema.soundness_bits) * schema.range_bound
    return 1, bound - 1


def blinding_witness_range(schema: SecuritySchema, s: int, modulus: int) -> tuple[int, int]:
    """
    Range of a blinding witness `n_i`: [1, 2^(l+t+s_i) * N - 1].
    """
    bound = 2 ** (schema.hiding_bits + schema.soundness_bits + s) * modulus
    return 1, bound - 1
