# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
import secrets

import pytest

import equality.equality as equality_mod
from equality.errors import InvalidParameterError, VerificationFailure
from equality.equality import (
    Proof,
    Secret,
    check_proof,
    construct_proof,
    fiat_shamir_heuristic,
    is_valid_proof,
    proof_from_file,
    proof_to_file,
)
from equality.rsa_group import commit
from equality.schema import SecuritySchema

VECTORS_PATH = (
    Path(__file__).resolve().parent.parent / "test-vectors" / "challenge-vectors.json"
)


def toy_challenge(a: int, b: int) -> int:
    return (a + 2 * b) % 1009


def commitments(params, secret):
    e = commit(params.g1, params.h1, secret.x, secret.r1, params.n)
    f = commit(params.g2, params.h2, secret.x, secret.r2, params.n)
    return e, f


def random_secret(params, schema=SecuritySchema()):
    return Secret(
        x=secrets.randbelow(schema.range_bound),
        r1=secrets.randbelow(2**schema.s1 * params.n),
        r2=secrets.randbelow(2**schema.s2 * params.n),
    )


class TestToyScenario:
    def test_literal_values(self, toy_params, fixed_source):
        seen = []

        def challenge(a, b):
            seen.append((a, b))
            return toy_challenge(a, b)

        secret = Secret(x=42, r1=17, r2=23)
        source = fixed_source(100, 200, 301)
        proof = construct_proof(toy_params, secret, SecuritySchema(), source, challenge)

        assert seen == [(916, 13)]
        assert proof == Proof(c=942, d=39664, d1=16214, d2=21967)
        assert source.ranges == [
            (1, 2**424 - 1),
            (1, 2**248 * 3233 - 1),
            (1, 2**248 * 3233 - 1),
        ]

    def test_commitments(self, toy_params):
        assert commitments(toy_params, Secret(x=42, r1=17, r2=23)) == (2911, 2027)

    def test_accepts(self, toy_params):
        proof = Proof(c=942, d=39664, d1=16214, d2=21967)
        check_proof(toy_params, 2911, 2027, proof, toy_challenge)

    def test_responses_are_not_reduced(self, toy_params):
        proof = Proof(c=942, d=39664, d1=16214, d2=21967)
        assert proof.d > toy_params.n
        reduced = Proof(c=942, d=39664 % 3233, d1=16214 % 3233, d2=21967 % 3233)
        assert not is_valid_proof(toy_params, 2911, 2027, reduced, toy_challenge)

    def test_rejects_incremented_response(self, toy_params):
        proof = Proof(c=942, d=39665, d1=16214, d2=21967)
        with pytest.raises(VerificationFailure):
            check_proof(toy_params, 2911, 2027, proof, toy_challenge)

    def test_real_challenge(self, toy_params, fixed_source):
        secret = Secret(x=42, r1=17, r2=23)
        proof = construct_proof(
            toy_params, secret, SecuritySchema(), fixed_source(100, 200, 301)
        )
        c = 0xF7B744D1C686F7E77FE8A48E7D3DEBB88FFF6A0C2F5B76D263ED527B328470B0
        assert proof == Proof(c=c, d=100 + c * 42, d1=200 + c * 17, d2=301 + c * 23)
        check_proof(toy_params, 2911, 2027, proof)


class TestChallenge:
    def test_vectors(self):
        for vector in json.loads(VECTORS_PATH.read_text()):
            w1 = int(vector["w1"], 16)
            w2 = int(vector["w2"], 16)
            assert fiat_shamir_heuristic(w1, w2) == int(vector["challenge"], 16), vector["name"]

    def test_deterministic(self):
        assert fiat_shamir_heuristic(916, 13) == fiat_shamir_heuristic(916, 13)

    def test_order_matters(self):
        assert fiat_shamir_heuristic(916, 13) != fiat_shamir_heuristic(13, 916)

    def test_bounded(self):
        assert 0 <= fiat_shamir_heuristic(2**2048 - 1, 2**2048 - 3) < 2**256


class TestCompleteness:
    def test_random_secrets(self, group, source):
        schema = SecuritySchema()
        for _ in range(10):
            secret = random_secret(group, schema)
            e, f = commitments(group, secret)
            proof = construct_proof(group, secret, schema, source)
            check_proof(group, e, f, proof)

    def test_edges_of_range(self, group, source):
        schema = SecuritySchema()
        for x in (0, 1, schema.range_bound - 1):
            secret = Secret(x=x, r1=12345, r2=67890)
            e, f = commitments(group, secret)
            check_proof(group, e, f, construct_proof(group, secret, schema, source))

    def test_negative_blinding(self, group, source):
        secret = Secret(x=7, r1=-5, r2=-9)
        e, f = commitments(group, secret)
        check_proof(group, e, f, construct_proof(group, secret, SecuritySchema(), source))

    def test_custom_schema(self, group, source):
        schema = SecuritySchema(soundness_bits=64, hiding_bits=20, s1=40, s2=60, range_bound=2**32)
        secret = random_secret(group, schema)
        e, f = commitments(group, secret)
        check_proof(group, e, f, construct_proof(group, secret, schema, source))

    def test_verification_is_repeatable(self, group, source):
        secret = random_secret(group)
        e, f = commitments(group, secret)
        proof = construct_proof(group, secret, SecuritySchema(), source)
        assert is_valid_proof(group, e, f, proof)
        assert is_valid_proof(group, e, f, proof)

    def test_concurrent_provers(self, group):
        schema = SecuritySchema()

        def run(_):
            secret = random_secret(group, schema)
            e, f = commitments(group, secret)
            proof = construct_proof(group, secret, schema, secrets.SystemRandom())
            return is_valid_proof(group, e, f, proof)

        with ThreadPoolExecutor(max_workers=4) as pool:
            assert all(pool.map(run, range(8)))


class TestSoundness:
    def test_different_values(self, group, source):
        schema = SecuritySchema()
        accepted = 0
        for _ in range(50):
            secret = random_secret(group, schema)
            other = Secret(x=(secret.x + 1) % schema.range_bound, r1=secret.r1, r2=secret.r2)
            e, _ = commitments(group, secret)
            _, f = commitments(group, other)
            proof = construct_proof(group, secret, schema, source)
            accepted += is_valid_proof(group, e, f, proof)
        assert accepted == 0

    def test_mismatched_blinding(self, group, source):
        schema = SecuritySchema()
        accepted = 0
        for _ in range(50):
            secret = random_secret(group, schema)
            committed = Secret(x=secret.x, r1=secret.r1, r2=secret.r2 + 1)
            e, f = commitments(group, committed)
            proof = construct_proof(group, secret, schema, source)
            accepted += is_valid_proof(group, e, f, proof)
        assert accepted == 0

    def test_swapped_commitments(self, group, source):
        secret = Secret(x=3, r1=11, r2=13)
        e, f = commitments(group, secret)
        proof = construct_proof(group, secret, SecuritySchema(), source)
        assert not is_valid_proof(group, f, e, proof)


class TestTamper:
    @pytest.mark.parametrize("name", ["c", "d", "d1", "d2"])
    @pytest.mark.parametrize("bit", [0, 1, 7, 64, 200])
    def test_bit_flip(self, group, source, name, bit):
        secret = random_secret(group)
        e, f = commitments(group, secret)
        proof = construct_proof(group, secret, SecuritySchema(), source)
        fields = proof.to_dict()
        fields[name] ^= 1 << bit
        with pytest.raises(VerificationFailure):
            check_proof(group, e, f, Proof.from_dict(fields))

    def test_negated_challenge(self, group, source):
        secret = random_secret(group)
        e, f = commitments(group, secret)
        proof = construct_proof(group, secret, SecuritySchema(), source)
        forged = Proof(c=-proof.c, d=proof.d, d1=proof.d1, d2=proof.d2)
        assert not is_valid_proof(group, e, f, forged)


class TestGuards:
    @pytest.mark.parametrize("e, f", [(0, 2027), (2911, 0), (0, 0)])
    def test_zero_commitment(self, toy_params, e, f):
        proof = Proof(c=942, d=39664, d1=16214, d2=21967)
        with pytest.raises(VerificationFailure):
            check_proof(toy_params, e, f, proof, toy_challenge)

    def test_zero_commitment_negative_responses(self, toy_params):
        proof = Proof(c=-1, d=-1, d1=-1, d2=-1)
        assert not is_valid_proof(toy_params, 0, 0, proof, toy_challenge)

    def test_non_invertible_commitment(self, toy_params):
        proof = Proof(c=942, d=39664, d1=16214, d2=21967)
        with pytest.raises(VerificationFailure):
            check_proof(toy_params, 53, 2027, proof, toy_challenge)
        with pytest.raises(VerificationFailure):
            check_proof(toy_params, 2911, 3233, proof, toy_challenge)

    def test_failure_has_no_detail(self, toy_params):
        with pytest.raises(VerificationFailure) as info:
            check_proof(toy_params, 0, 2027, Proof(1, 1, 1, 1), toy_challenge)
        assert str(info.value) == "Zero-knowledge proof validation failed"

    @pytest.mark.parametrize("x", [-1, 2**256])
    def test_value_outside_range(self, toy_params, fixed_source, x):
        source = fixed_source(100, 200, 301)
        with pytest.raises(InvalidParameterError, match="range_bound"):
            construct_proof(toy_params, Secret(x=x, r1=17, r2=23), SecuritySchema(), source)
        assert source.ranges == []

    def test_value_outside_custom_range(self, toy_params, fixed_source):
        schema = SecuritySchema(range_bound=42)
        with pytest.raises(InvalidParameterError):
            construct_proof(toy_params, Secret(x=42, r1=17, r2=23), schema, fixed_source())

    def test_secret_repr_hides_values(self):
        assert "42" not in repr(Secret(x=42, r1=17, r2=23))


class TestProofFile:
    def test_proof_to_file_writes_correct_structure(self, monkeypatch):
        captured = {}

        def fake_save_json(path, data):
            captured["path"] = path
            captured["data"] = data

        monkeypatch.setattr(equality_mod, "save_json", fake_save_json)

        proof_to_file(Proof(c=942, d=39664, d1=16214, d2=21967))

        assert captured["path"] == "../data/equality.json"
        data = captured["data"]
        assert data["constructor"] == 0
        assert data["fields"] == [
            {"int": 942},
            {"int": 39664},
            {"int": 16214},
            {"int": 21967},
        ]

    def test_file_round_trip(self, tmp_path):
        c = 0xF7B744D1C686F7E77FE8A48E7D3DEBB88FFF6A0C2F5B76D263ED527B328470B0
        proof = Proof(c=c, d=100 + c * 42, d1=200 + c * 17, d2=301 + c * 23)
        path = tmp_path / "equality.json"
        proof_to_file(proof, path)
        assert proof_from_file(path) == proof

    @pytest.mark.parametrize(
        "datum",
        [
            [],
            {"constructor": 1, "fields": []},
            {"constructor": 0, "fields": [{"int": 1}]},
            {"constructor": 0, "fields": [{"bytes": "00"}] * 4},
            {"constructor": 0, "fields": [{"int": "1"}] * 4},
        ],
    )
    def test_rejects_malformed_datum(self, tmp_path, datum):
        path = tmp_path / "equality.json"
        path.write_text(json.dumps(datum))
        with pytest.raises(ValueError):
            proof_from_file(path)

    def test_dict_requires_every_field(self):
        with pytest.raises(ValueError, match="d2"):
            Proof.from_dict({"c": 1, "d": 2, "d1": 3})


if __name__ == "__main__":
    pytest.main()
