# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
from dataclasses import asdict, dataclass
from pathlib import Path

from equality.constants import SOUNDNESS_BITS, HIDING_BITS, BLINDING_BITS, RANGE_BOUND
from equality.errors import InvalidParameterError
from equality.files import load_json, save_json
from equality.rsa_group import as_int


@dataclass(frozen=True)
class SecuritySchema:
    """
    Protocol constants fixed per deployment.

    Fields:
        soundness_bits: `t`, a cheating prover succeeds with probability at
            most 2^-t.
        hiding_bits: `l`, the statistical zero-knowledge margin.
        s1: Blinding parameter `s` of the first commitment.
        s2: Blinding parameter `s` of the second commitment.
        range_bound: `b`, the committed value satisfies 0 <= x < b.

    Prover and verifier must run with the same schema. The verifier has no way
    to detect a mismatch on its own; a mismatched deployment is unsound.
    """

    soundness_bits: int = SOUNDNESS_BITS
    hiding_bits: int = HIDING_BITS
    s1: int = BLINDING_BITS
    s2: int = BLINDING_BITS
    range_bound: int = RANGE_BOUND

    def __post_init__(self):
        for name in ("soundness_bits", "hiding_bits", "s1", "s2"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidParameterError(f"{name} must be a non-negative integer")
        if isinstance(self.range_bound, bool) or not isinstance(self.range_bound, int):
            raise InvalidParameterError("range_bound must be an integer")
        if self.range_bound <= 0:
            raise InvalidParameterError("range_bound must be positive")

    @classmethod
    def from_dict(cls, data: dict) -> "SecuritySchema":
        """
        Build a schema from a decoded JSON document.

        Missing keys fall back to the defaults in `equality.constants`.
        """
        known = ("soundness_bits", "hiding_bits", "s1", "s2", "range_bound")
        unknown = set(data) - set(known)
        if unknown:
            raise InvalidParameterError(f"unknown schema keys: {sorted(unknown)}")
        return cls(**{name: as_int(data[name], name) for name in known if name in data})

    @classmethod
    def from_file(cls, path: str | Path) -> "SecuritySchema":
        return cls.from_dict(load_json(path))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["range_bound"] = hex(self.range_bound)
        return data

    def to_file(self, path: str | Path) -> None:
        save_json(path, self.to_dict())
