# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from equality.errors import InvalidParameterError
from equality.files import load_json, save_json


def as_int(value: Any, name: str) -> int:
    """
    Read an integer field from a decoded JSON document.

    Integers may be given directly or as strings understood by `int(value, 0)`,
    so `"0x1f"` and `"31"` both decode to 31.

    Args:
        value: The raw JSON value.
        name: Field name used in the error message.

    Returns:
        The decoded integer.

    Raises:
        InvalidParameterError: If the value is not an integer or integer string.
    """
    if isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError:
            raise InvalidParameterError(f"{name} is not an integer string") from None
    raise InvalidParameterError(f"{name} must be an integer, got {type(value).__name__}")


@dataclass(frozen=True)
class GroupParameters:
    """
    Public group shared by prover and verifier.

    `n` is a composite modulus whose factorization neither party knows, and the
    discrete logarithm of `h1` base `g1` (and of `h2` base `g2`) is unknown to
    both. Those properties come from the trusted setup and are not rechecked;
    only the structural shape of the values is validated here.
    """

    n: int
    g1: int
    h1: int
    g2: int
    h2: int

    def __post_init__(self):
        for name in ("n", "g1", "h1", "g2", "h2"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidParameterError(f"{name} must be an integer")
        if self.n <= 1:
            raise InvalidParameterError("modulus must be greater than one")
        for name in ("g1", "h1", "g2", "h2"):
            if not 0 < getattr(self, name) < self.n:
                raise InvalidParameterError(f"{name} must lie in [1, n - 1]")

    @classmethod
    def from_dict(cls, data: dict) -> "GroupParameters":
        try:
            fields = {name: as_int(data[name], name) for name in ("n", "g1", "h1", "g2", "h2")}
        except KeyError as missing:
            raise InvalidParameterError(f"missing group parameter {missing}") from None
        return cls(**fields)

    @classmethod
    def from_file(cls, path: str | Path) -> "GroupParameters":
        return cls.from_dict(load_json(path))

    def to_dict(self) -> dict[str, str]:
        return {name: hex(getattr(self, name)) for name in ("n", "g1", "h1", "g2", "h2")}

    def to_file(self, path: str | Path) -> None:
        save_json(path, self.to_dict())


def invert(element: int, modulus: int) -> int:
    """
    Calculates the multiplicative inverse of an element modulo `modulus`.

    Uses the extended Euclidean algorithm directly instead of relying on a
    negative exponent in `pow`.

    Args:
        element (int): The element to invert.
        modulus (int): A modulus greater than one.

    Returns:
        int: The inverse in the range [1, modulus - 1].

    Raises:
        ValueError: If `element` shares a factor with `modulus`.
    """
    old_r, r = element % modulus, modulus
    old_s, s = 1, 0
    while r != 0:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, old_s - q * s
    if old_r != 1:
        raise ValueError("element is not invertible modulo the group modulus")
    return old_s % modulus


def scale(element: int, exponent: int, modulus: int) -> int:
    """
    Raises an element to an integer exponent modulo `modulus`.

    A negative exponent is evaluated as the inverse raised to its magnitude:

        element^(-k) = (element^-1)^k mod modulus

    Args:
        element (int): The base.
        exponent (int): Any integer exponent.
        modulus (int): The group modulus.

    Returns:
        int: The resulting group element.

    Raises:
        ValueError: If the exponent is negative and `element` is not invertible.
    """
    if exponent < 0:
        return pow(invert(element, modulus), -exponent, modulus)
    return pow(element, exponent, modulus)


def combine(left_element: int, right_element: int, modulus: int) -> int:
    """
    Combines two group elements using multiplication.
    """
    return (left_element * right_element) % modulus


def commit(g: int, h: int, x: int, r: int, modulus: int) -> int:
    """
    Compute the commitment `g^x * h^r mod modulus` to `x` blinded by `r`.
    """
    return combine(scale(g, x, modulus), scale(h, r, modulus), modulus)


def to_int(hash_digest: str) -> int:
    """
    Interpret a hex digest as an unsigned big-endian integer.

    Unlike a curve scalar this is not reduced; the challenge keeps the full
    width of the digest.
    """
    return int(hash_digest, 16)


def from_int(integer: int) -> str:
    """
    Encode a non-negative integer as a minimal-length big-endian hex string.

    `0` is encoded as `"00"` so the byte representation is never empty.

    Raises:
        ValueError: If `integer` is negative.
    """
    if integer < 0:
        raise ValueError("cannot encode a negative integer")
    if integer == 0:
        return "00"
    length = (integer.bit_length() + 7) // 8
    return integer.to_bytes(length, "big").hex()
