"""
질의 준비 단계 테스트
=====================

테스트 범위:
  - 소거 다항식 평가, K0(χ), A_pub (손으로 계산한 값과 비교)
  - 보조 커밋먼트 [F], [G], [O_pub], [A]의 이산로그 검사
  - χ = 1, χ = ω_l^j 충돌 → DivisionByZero
"""

import pytest
from py_ecc import optimized_bn128 as bn128

from tokamak_verifier.errors import DivisionByZero
from tokamak_verifier.field import FR, G1, points_equal
from tokamak_verifier.host import CurveService
from tokamak_verifier.proof import LAYOUTS, Proof, ProofVariant
from tokamak_verifier.queries import (
    lagrange_normalizer, linear_combination, prepare_queries,
    public_input_eval, safe_div, vanishing_eval,
)
from tokamak_verifier.transcript import ChallengeSet


def _dlog_proof():
    """이산로그를 아는 점으로 채운 TWO_ROUND 증명."""
    points, scalars = LAYOUTS[ProofVariant.TWO_ROUND]
    elements = {name: bn128.multiply(G1, k) for k, name in enumerate(points, start=2)}
    elements.update({name: FR(k) for k, name in enumerate(scalars, start=4)})
    return Proof(ProofVariant.TWO_ROUND, **elements)


def _challenges(chi=19, zeta=23):
    return ChallengeSet(3, 5, 7, 11, 13, 17, chi, zeta)


def _on(point, scalar):
    return points_equal(point, bn128.multiply(G1, int(scalar)))


class TestScalars:
    """스칼라 질의."""

    def test_vanishing_eval(self):
        curve = CurveService()
        assert vanishing_eval(curve, FR(3), 4) == FR(80)
        assert vanishing_eval(curve, FR(1), 8) == FR(0)

    def test_lagrange_normalizer(self):
        """m_I = 2 이면 K0(χ) = (χ + 1) / 2."""
        curve = CurveService()
        chi = FR(19)
        assert lagrange_normalizer(curve, chi, 2) == (chi + FR(1)) / FR(2)

    def test_k0_at_domain_point_other_than_one(self, pair_setup):
        vk, _ = pair_setup
        # ω_mI은 1이 아닌 도메인 점: K0 = 0
        omega_mi = FR(1) / vk.omega_mi_inv
        assert lagrange_normalizer(CurveService(), omega_mi, vk.m_i) == FR(0)

    def test_k0_chi_one_raises(self):
        with pytest.raises(DivisionByZero):
            lagrange_normalizer(CurveService(), FR(1), 4)

    def test_public_input_eval_single(self):
        """l = 1 이면 M_0(χ) = 1."""
        assert public_input_eval(CurveService(), [FR(35)], FR(1), FR(19)) == FR(35)

    def test_public_input_eval_pair(self, pair_setup):
        """l = 2: M_0(χ) = (χ - ω)/(1 - ω), M_1(χ) = (χ - 1)/(ω - 1)."""
        vk, _ = pair_setup
        omega = vk.omega_l
        chi = FR(19)
        a0, a1 = FR(3), FR(35)
        expected = (
            a0 * (chi - omega) / (FR(1) - omega)
            + a1 * (chi - FR(1)) / (omega - FR(1))
        )
        assert public_input_eval(CurveService(), [a0, a1], omega, chi) == expected

    def test_public_input_eval_domain_collision(self, pair_setup):
        vk, _ = pair_setup
        with pytest.raises(DivisionByZero, match="M_1"):
            public_input_eval(CurveService(), [FR(3), FR(35)], vk.omega_l, vk.omega_l)

    def test_safe_div(self):
        assert safe_div(FR(6), FR(3), "x") == FR(2)
        with pytest.raises(DivisionByZero):
            safe_div(FR(6), FR(0), "x")

    def test_division_by_zero_is_zero_division_error(self):
        with pytest.raises(ZeroDivisionError):
            safe_div(FR(1), FR(0), "x")


class TestLinearCombination:
    """선형 결합 헬퍼."""

    def test_weighted_sum(self):
        curve = CurveService()
        p = bn128.multiply(G1, 3)
        q = bn128.multiply(G1, 5)
        assert _on(linear_combination(curve, [(p, FR(2)), (q, FR(4))]), 26)

    def test_zero_scalar_skipped(self):
        curve = CurveService()
        linear_combination(curve, [(G1, FR(0)), (G1, FR(1))])
        # g1_mul 1회 + g1_add 1회
        assert curve.gas_used == 6000 + 150

    def test_start_point(self):
        curve = CurveService()
        assert _on(linear_combination(curve, [(G1, FR(2))], start=G1), 3)


class TestPrepareQueries:
    """prepare_queries 전체."""

    def test_toy_queries(self, toy_vk, toxic):
        curve = CurveService()
        proof = _dlog_proof()
        ch = _challenges()
        q = prepare_queries(curve, ch, proof, [FR(35)], toy_vk)

        chi, zeta = ch.chi, ch.zeta
        assert q.t_n_chi == chi ** 4 - FR(1)
        assert q.t_smax_zeta == zeta ** 4 - FR(1)
        assert q.t_mi_chi == chi ** 2 - FR(1)
        assert q.k0_chi == (chi + FR(1)) / FR(2)
        assert q.a_pub == FR(35)
        assert q.chi_shifted == toy_vk.omega_mi_inv * chi
        assert q.zeta_shifted == toy_vk.omega_smax_inv * zeta

        b = FR(2)  # b_comm = 2·G1
        assert _on(q.f_comm, b + ch.theta0 * toxic.s0 + ch.theta1 * toxic.s1 + ch.theta2)
        assert _on(q.g_comm, b + ch.theta0 * toxic.x + ch.theta1 * toxic.y + ch.theta2)
        assert _on(q.o_pub_comm, FR(35) * toxic.o_pub[0])
        assert _on(q.a_comm, 35)

    def test_explicit_public_commitment_used(self, toy_vk):
        a_comm = bn128.multiply(G1, 777)
        q = prepare_queries(CurveService(), _challenges(), _dlog_proof(), [FR(35)],
                            toy_vk, a_comm=a_comm)
        assert q.a_comm is a_comm

    def test_chi_one_raises_from_k0(self, toy_vk):
        with pytest.raises(DivisionByZero, match="K0"):
            prepare_queries(CurveService(), _challenges(chi=1), _dlog_proof(), [FR(35)], toy_vk)

    def test_chi_on_public_input_domain(self, pair_setup):
        vk, _ = pair_setup
        ch = _challenges(chi=int(vk.omega_l))
        with pytest.raises(DivisionByZero, match="M_1"):
            prepare_queries(CurveService(), ch, _dlog_proof(), [FR(3), FR(35)], vk)

    def test_scalars_dict(self, toy_vk):
        q = prepare_queries(CurveService(), _challenges(), _dlog_proof(), [FR(35)], toy_vk)
        assert set(q.scalars()) == {
            "t_n_chi", "t_smax_zeta", "t_mi_chi", "k0_chi",
            "a_pub", "chi_shifted", "zeta_shifted",
        }
