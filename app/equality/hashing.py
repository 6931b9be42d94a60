# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

import hashlib
import binascii

# length prefix width, in bytes, of every integer in a transcript
LENGTH_PREFIX_BYTES = 4


def generate(input_string: str, digest_size: int = 28) -> str:
    """
    Calculates the blake2b hash digest of a hex-encoded input string.

    Args:
        input_string (str): The hex string to be hashed.
        digest_size (int): Digest length in bytes, 28 gives blake2b_224.

    Returns:
        str: The hex digest of the decoded input bytes.
    """
    hash_digest = hashlib.blake2b(
        binascii.unhexlify(input_string), digest_size=digest_size
    ).hexdigest()

    return hash_digest


def length_prefixed(element: str) -> str:
    """
    Prefix a hex-encoded element with its byte length.

    The length is a fixed width big-endian integer so that concatenated
    transcripts have exactly one parse:

        len(element) || element

    Args:
        element: Hex string with an even number of characters.

    Returns:
        The hex string `len || element`.

    Raises:
        ValueError: If `element` is not whole bytes.
    """
    if len(element) % 2 != 0:
        raise ValueError(f"hex element must be whole bytes, got {len(element)} chars")
    size = len(element) // 2
    return size.to_bytes(LENGTH_PREFIX_BYTES, "big").hex() + element
