# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# domain tags
EQL_DOMAIN_TAG = "EQUALITY|PROOF|v1|".encode("utf-8").hex()

# security parameters
SOUNDNESS_BITS = 128  # t, half the bit length of the challenge hash
HIDING_BITS = 40  # l, statistical zero-knowledge parameter
BLINDING_BITS = 80  # s, blinding factors are drawn below 2^s * N
RANGE_BOUND = 2**256  # b, max uint in Ethereum

# the challenge digest carries 2t bits
CHALLENGE_BYTES = 2 * SOUNDNESS_BITS // 8
