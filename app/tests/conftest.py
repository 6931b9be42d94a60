# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import secrets

import pytest

from equality.rsa_group import GroupParameters
from equality.ttp import generate_group


class FixedSource:
    """Random source that replays fixed values and records every requested range."""

    def __init__(self, *values: int):
        self.values = list(values)
        self.ranges: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.ranges.append((a, b))
        return self.values.pop(0)


@pytest.fixture()
def toy_params() -> GroupParameters:
    # 3233 = 53 * 61, far too small for real use
    return GroupParameters(n=3233, g1=5, h1=7, g2=11, h2=13)


@pytest.fixture(scope="session")
def group() -> GroupParameters:
    return generate_group(1024, secrets.SystemRandom())


@pytest.fixture()
def source() -> secrets.SystemRandom:
    return secrets.SystemRandom()


@pytest.fixture()
def fixed_source() -> type[FixedSource]:
    return FixedSource
