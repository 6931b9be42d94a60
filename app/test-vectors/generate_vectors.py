#!/usr/bin/env python3

# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

"""
Generate challenge-vectors.json for cross-platform Fiat–Shamir mirror tests.

Run from the app/ directory:
    PYTHONPATH=. python test-vectors/generate_vectors.py
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from equality.constants import EQL_DOMAIN_TAG
from equality.equality import fiat_shamir_heuristic
from equality.hashing import length_prefixed
from equality.rsa_group import from_int


def make_vector(name: str, w1: int, w2: int) -> dict:
    transcript = EQL_DOMAIN_TAG + length_prefixed(from_int(w1)) + length_prefixed(from_int(w2))
    return {
        "name": name,
        "w1": hex(w1),
        "w2": hex(w2),
        "transcript": transcript,
        "challenge": hex(fiat_shamir_heuristic(w1, w2)),
    }


vectors = [
    make_vector("toy-ephemeral-commitments", 916, 13),
    make_vector("zero-and-one", 0, 1),
    make_vector("length-prefix-separates-bytes", 0x010000, 0xFF),
    make_vector("multi-word-elements", 0xC0FFEE0123456789ABCDEF, 0x0FEDCBA987654321),
]

out_path = Path(__file__).resolve().parent / "challenge-vectors.json"
out_path.write_text(json.dumps(vectors, indent=2) + "\n")
print(f"Wrote {len(vectors)} vectors to {out_path}")
