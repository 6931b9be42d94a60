# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only


class ZeroKnowledgeError(Exception):
    """Base class for every error raised by the equality proof."""


class VerificationFailure(ZeroKnowledgeError):
    """
    The proof does not hold for the supplied commitments.

    The message never says why; callers only learn that the proof is invalid.
    """

    def __init__(self) -> None:
        super().__init__("Zero-knowledge proof validation failed")


class InvalidParameterError(ZeroKnowledgeError, ValueError):
    """Group parameters, schema or prover inputs are structurally invalid."""
