"""
증명 디코더 테스트
==================

테스트 범위:
  - 변형별 레이아웃 크기 (38 / 38 / 40 워드)
  - 인코딩/디코딩 대칭
  - 길이 오류 → MalformedProof
  - 곡선 밖의 점, 기저체 범위 밖 좌표 → PointNotOnCurve
  - (0, 0) = 무한원점, 스칼라의 R 축소
  - 공개 입력 개수 검사, 변형 이름 검사
"""

import pytest
from py_ecc import optimized_bn128 as bn128

from tokamak_verifier.errors import MalformedProof, PointNotOnCurve
from tokamak_verifier.field import FR, G1, Z1, CURVE_ORDER, FIELD_MODULUS
from tokamak_verifier.field import g1_to_affine, is_inf, points_equal
from tokamak_verifier.proof import (
    COMMON_POINTS, SCALARS, LAYOUTS,
    Proof, ProofVariant,
    decode, decode_proof, decode_public_inputs,
    encode_proof, layout_size, proof_to_bytes, to_words, words_to_bytes,
)


def _sample_proof(variant):
    """k·G1 점과 작은 스칼라로 채운 증명."""
    points, scalars = LAYOUTS[variant]
    elements = {}
    for k, name in enumerate(points, start=2):
        elements[name] = bn128.multiply(G1, k)
    for k, name in enumerate(scalars, start=100):
        elements[name] = FR(k)
    return Proof(variant, **elements)


class TestLayout:
    """레이아웃 크기."""

    def test_two_round_size(self):
        assert layout_size(ProofVariant.TWO_ROUND) == 38

    def test_three_round_size(self):
        assert layout_size(ProofVariant.THREE_ROUND) == 38

    def test_public_commitment_size(self):
        assert layout_size(ProofVariant.PUBLIC_COMMITMENT) == 40
        assert LAYOUTS[ProofVariant.PUBLIC_COMMITMENT][0][0] == "a_comm"

    def test_common_block(self):
        assert len(COMMON_POINTS) == 17
        assert COMMON_POINTS[0] == "b_comm"
        assert SCALARS == ("r_xy", "r_prime_xy", "r_double_prime_xy", "v_xy")


class TestRoundTrip:
    """인코딩/디코딩 대칭."""

    @pytest.mark.parametrize("variant", list(ProofVariant))
    def test_decode_of_encode(self, variant):
        proof = _sample_proof(variant)
        decoded = decode_proof(encode_proof(proof), variant)
        for name in proof.point_names():
            assert points_equal(getattr(decoded, name), getattr(proof, name))
        for name in proof.scalar_names():
            assert getattr(decoded, name) == getattr(proof, name)

    def test_bytes_and_hex_inputs(self):
        proof = _sample_proof(ProofVariant.THREE_ROUND)
        raw = proof_to_bytes(proof)
        assert len(raw) == 38 * 32
        from_bytes = decode_proof(raw, "three_round")
        from_hex = decode_proof("0x" + raw.hex(), "three_round")
        assert encode_proof(from_bytes) == encode_proof(from_hex) == encode_proof(proof)

    def test_words_to_bytes_inverse(self):
        words = [0, 1, (1 << 256) - 1]
        assert to_words(words_to_bytes(words)) == words


class TestMalformed:
    """길이/형식 오류."""

    def test_too_few_words(self):
        words = encode_proof(_sample_proof(ProofVariant.TWO_ROUND))[:-1]
        with pytest.raises(MalformedProof):
            decode_proof(words, ProofVariant.TWO_ROUND)

    def test_public_commitment_layout_for_three_round(self):
        words = encode_proof(_sample_proof(ProofVariant.PUBLIC_COMMITMENT))
        with pytest.raises(MalformedProof):
            decode_proof(words, ProofVariant.THREE_ROUND)

    def test_byte_length_not_multiple_of_32(self):
        raw = proof_to_bytes(_sample_proof(ProofVariant.TWO_ROUND)) + b"\x00"
        with pytest.raises(MalformedProof):
            decode_proof(raw, ProofVariant.TWO_ROUND)

    def test_bad_hex(self):
        with pytest.raises(MalformedProof):
            decode_proof("0xzz", ProofVariant.TWO_ROUND)

    def test_word_out_of_range(self):
        with pytest.raises(MalformedProof):
            to_words([1 << 256])

    def test_bool_word_rejected(self):
        with pytest.raises(MalformedProof):
            to_words([True])

    def test_bare_scalar_rejected(self):
        with pytest.raises(MalformedProof):
            to_words(35)

    def test_tuple_and_generator_accepted(self):
        assert to_words((1, 2)) == [1, 2]
        assert to_words(w for w in (3, 4)) == [3, 4]

    def test_unknown_variant(self):
        with pytest.raises(MalformedProof):
            ProofVariant.parse("four_round")

    def test_variant_parse_is_case_insensitive(self):
        assert ProofVariant.parse("TWO_ROUND") is ProofVariant.TWO_ROUND

    def test_unknown_element(self):
        with pytest.raises(MalformedProof):
            Proof(ProofVariant.TWO_ROUND, a_comm=G1)


class TestCurveChecks:
    """곡선 소속 / 좌표 범위."""

    def test_first_point_off_curve(self):
        words = encode_proof(_sample_proof(ProofVariant.THREE_ROUND))
        words[0] += 1
        with pytest.raises(PointNotOnCurve):
            decode_proof(words, ProofVariant.THREE_ROUND)

    def test_coordinate_not_reduced(self):
        """x + Q는 같은 점으로 축소되더라도 거부해야 한다."""
        words = encode_proof(_sample_proof(ProofVariant.THREE_ROUND))
        words[2] += FIELD_MODULUS
        with pytest.raises(PointNotOnCurve):
            decode_proof(words, ProofVariant.THREE_ROUND)

    def test_zero_pair_is_infinity(self):
        words = encode_proof(_sample_proof(ProofVariant.TWO_ROUND))
        words[0] = 0
        words[1] = 0
        proof = decode_proof(words, ProofVariant.TWO_ROUND)
        assert is_inf(proof.b_comm)
        assert encode_proof(proof)[:2] == [0, 0]

    def test_scalar_reduced_mod_r(self):
        words = encode_proof(_sample_proof(ProofVariant.TWO_ROUND))
        words[34] = CURVE_ORDER + 5
        proof = decode_proof(words, ProofVariant.TWO_ROUND)
        assert proof.r_xy == FR(5)


class TestDecodeInputs:
    """공개 입력과 decode()."""

    def test_public_input_count(self, toy_vk):
        assert decode_public_inputs([35], toy_vk) == [FR(35)]
        with pytest.raises(MalformedProof):
            decode_public_inputs([1, 2], toy_vk)
        with pytest.raises(MalformedProof):
            decode_public_inputs([], toy_vk)

    def test_scalar_public_input_rejected(self, toy_vk):
        with pytest.raises(MalformedProof):
            decode_public_inputs(35, toy_vk)

    def test_public_inputs_reduced_mod_r(self, toy_vk):
        assert decode_public_inputs([CURVE_ORDER + 1], toy_vk) == [FR(1)]

    def test_decode_accepts_proof_object(self, toy_vk):
        proof = _sample_proof(ProofVariant.TWO_ROUND)
        inputs, same = decode([35], proof, toy_vk, "two_round")
        assert same is proof
        assert inputs == [FR(35)]

    def test_decode_rejects_variant_mismatch(self, toy_vk):
        proof = _sample_proof(ProofVariant.TWO_ROUND)
        with pytest.raises(MalformedProof):
            decode([35], proof, toy_vk, ProofVariant.THREE_ROUND)

    def test_decode_checks_proof_object_points(self, toy_vk):
        bad = (bn128.FQ(1), bn128.FQ(1), bn128.FQ(1))
        proof = _sample_proof(ProofVariant.TWO_ROUND).copy(u_comm=bad)
        with pytest.raises(PointNotOnCurve):
            decode([35], proof, toy_vk, ProofVariant.TWO_ROUND)

    def test_decode_rejects_missing_element(self, toy_vk):
        proof = Proof(ProofVariant.TWO_ROUND, b_comm=G1)
        with pytest.raises(MalformedProof):
            decode([35], proof, toy_vk, ProofVariant.TWO_ROUND)

    def test_infinity_in_proof_object(self, toy_vk):
        proof = _sample_proof(ProofVariant.TWO_ROUND).copy(r_comm=Z1)
        _, decoded = decode([35], proof, toy_vk, ProofVariant.TWO_ROUND)
        assert g1_to_affine(decoded.r_comm) == (0, 0)
