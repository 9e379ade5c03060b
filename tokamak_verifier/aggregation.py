"""
Tokamak 집계 커밋먼트 구성 (Aggregated-Commitment Builder)
==========================================================

모든 평가값, 증명 커밋먼트, 챌린지를 하나의 좌변 커밋먼트와 두 개의
우변 커밋먼트로 접는다. 각 단계는 곡선 서비스를 통한 스칼라 가중 점
덧셈/뺄셈이다.

**산술 제약** ((χ, ζ)에서 0으로 열림):
    LHS_A = V_xy·[U] - [W] + κ1·([V] - V_xy·[1])
            - t_n(χ)·[Q_AX] - t_smax(ζ)·[Q_AY]

**복사 제약**:
    copy  = (R_xy - 1)·K0(χ)·[1]
            + (κ0(χ-1)·R_xy + κ0²K0(χ)·R_xy)·[G]
            - (κ0(χ-1)·R'_xy + κ0²K0(χ)·R''_xy)·[F]
            - t_mI(χ)·[Q_CX] - t_smax(ζ)·[Q_CY]
    LHS_C = κ1²·copy + κ1³·([R] - R_xy·[1])
            + κ2·([R] - R'_xy·[1]) + κ2²·([R] - R''_xy·[1])

**공개 입력**:
    LHS_B = (1 + κ2·κ1⁴)·[A] - κ2·κ1⁴·A_pub·[1]

**합계**:
    LHS   = LHS_B + κ2·(LHS_A + LHS_C)
    AUX   = κ2·(χ·[Π_χ] + ζ·[Π_ζ])
            + κ2²·(χ'·[M_χ] + ζ·[M_ζ])
            + κ2³·(χ'·[N_χ] + ζ'·[N_ζ])          (χ' = ω_mI⁻¹χ, ζ' = ω_smax⁻¹ζ)
    RHS1  = κ2·[Π_χ] + κ2²·[M_χ] + κ2³·[N_χ]      ([x]₂와 짝지음)
    RHS2  = κ2·[Π_ζ] + κ2²·[M_ζ] + κ2³·[N_ζ]      ([y]₂와 짝지음)

KZG 열기 관계 P(x,y) - v = (x - a)·π_x + (y - b)·π_y 를 세 점에서 동시에
확인하는 구조이며, κ2의 거듭제곱이 세 열기를 묶는다. 모든 가중치는
트랜스크립트 챌린지이거나 그로부터 결정론적으로 계산된 값이다.
"""

from tokamak_verifier.field import FR
from tokamak_verifier.queries import linear_combination


class AggregatedCommitments:
    """집계 결과 (G1 점).

    속성:
        lhs_a, lhs_b, lhs_c: 부분 좌변 (디버깅용)
        lhs: 최종 좌변 커밋먼트
        aux: 열기 증명의 평가점 보정 항
        rhs1, rhs2: [x]₂, [y]₂와 짝지을 우변 커밋먼트
    """

    def __init__(self, lhs_a, lhs_b, lhs_c, lhs, aux, rhs1, rhs2):
        self.lhs_a = lhs_a
        self.lhs_b = lhs_b
        self.lhs_c = lhs_c
        self.lhs = lhs
        self.aux = aux
        self.rhs1 = rhs1
        self.rhs2 = rhs2


def build_lhs_a(curve, challenges, queries, proof, vk):
    """산술 제약 U·V - W = Q_AX·t_n + Q_AY·t_smax 의 선형화 커밋먼트."""
    v_xy = proof.v_xy
    kappa1 = challenges.kappa1
    return linear_combination(curve, [
        (proof.u_comm, v_xy),
        (proof.w_comm, -FR(1)),
        (proof.v_comm, kappa1),
        (vk.g1, -(kappa1 * v_xy)),
        (proof.q_ax_comm, -queries.t_n_chi),
        (proof.q_ay_comm, -queries.t_smax_zeta),
    ])


def build_lhs_c(curve, challenges, queries, proof, vk):
    """복사 제약(누적자 R)과 R의 세 열기를 묶은 커밋먼트."""
    kappa0 = challenges.kappa0
    kappa1 = challenges.kappa1
    kappa2 = challenges.kappa2
    k0 = queries.k0_chi
    chi_minus_one = challenges.chi - FR(1)

    kappa1_sq = kappa1 * kappa1
    kappa1_cu = kappa1_sq * kappa1
    kappa2_sq = kappa2 * kappa2

    step = kappa0 * chi_minus_one
    wrap = kappa0 * kappa0 * k0

    g_weight = (step + wrap) * proof.r_xy
    f_weight = step * proof.r_prime_xy + wrap * proof.r_double_prime_xy

    # [1]의 계수: κ1²·(R_xy - 1)·K0 - κ1³·R_xy - κ2·R'_xy - κ2²·R''_xy
    one_weight = (
        kappa1_sq * (proof.r_xy - FR(1)) * k0
        - kappa1_cu * proof.r_xy
        - kappa2 * proof.r_prime_xy
        - kappa2_sq * proof.r_double_prime_xy
    )

    return linear_combination(curve, [
        (queries.g_comm, kappa1_sq * g_weight),
        (queries.f_comm, -(kappa1_sq * f_weight)),
        (proof.q_cx_comm, -(kappa1_sq * queries.t_mi_chi)),
        (proof.q_cy_comm, -(kappa1_sq * queries.t_smax_zeta)),
        (proof.r_comm, kappa1_cu + kappa2 + kappa2_sq),
        (vk.g1, one_weight),
    ])


def build_lhs_b(curve, challenges, queries, vk):
    """공개 입력 커밋먼트 [A]와 그 평가값 A_pub의 열기."""
    kappa1 = challenges.kappa1
    kappa1_4 = (kappa1 * kappa1) * (kappa1 * kappa1)
    weight = challenges.kappa2 * kappa1_4
    return linear_combination(curve, [
        (queries.a_comm, FR(1) + weight),
        (vk.g1, -(weight * queries.a_pub)),
    ])


def build_opening_terms(curve, challenges, queries, proof):
    """AUX, RHS1, RHS2 를 계산한다.

    Returns:
        (aux, rhs1, rhs2)
    """
    kappa2 = challenges.kappa2
    kappa2_sq = kappa2 * kappa2
    kappa2_cu = kappa2_sq * kappa2
    chi = challenges.chi
    zeta = challenges.zeta
    chi_s = queries.chi_shifted
    zeta_s = queries.zeta_shifted

    aux = linear_combination(curve, [
        (proof.pi_chi_comm, kappa2 * chi),
        (proof.pi_zeta_comm, kappa2 * zeta),
        (proof.m_chi_comm, kappa2_sq * chi_s),
        (proof.m_zeta_comm, kappa2_sq * zeta),
        (proof.n_chi_comm, kappa2_cu * chi_s),
        (proof.n_zeta_comm, kappa2_cu * zeta_s),
    ])
    rhs1 = linear_combination(curve, [
        (proof.pi_chi_comm, kappa2),
        (proof.m_chi_comm, kappa2_sq),
        (proof.n_chi_comm, kappa2_cu),
    ])
    rhs2 = linear_combination(curve, [
        (proof.pi_zeta_comm, kappa2),
        (proof.m_zeta_comm, kappa2_sq),
        (proof.n_zeta_comm, kappa2_cu),
    ])
    return aux, rhs1, rhs2


def build_aggregate(curve, challenges, queries, proof, vk):
    """집계 단계 전체를 수행한다.

    Args:
        curve: CurveService
        challenges: ChallengeSet
        queries: Queries
        proof: Proof
        vk: VerificationKey

    Returns:
        AggregatedCommitments
    """
    lhs_a = build_lhs_a(curve, challenges, queries, proof, vk)
    lhs_c = build_lhs_c(curve, challenges, queries, proof, vk)
    lhs_b = build_lhs_b(curve, challenges, queries, vk)

    # LHS = LHS_B + κ2·(LHS_A + LHS_C)
    lhs = curve.g1_add(
        lhs_b,
        curve.g1_mul(curve.g1_add(lhs_a, lhs_c), challenges.kappa2),
    )
    aux, rhs1, rhs2 = build_opening_terms(curve, challenges, queries, proof)

    return AggregatedCommitments(
        lhs_a=lhs_a, lhs_b=lhs_b, lhs_c=lhs_c,
        lhs=lhs, aux=aux, rhs1=rhs1, rhs2=rhs2,
    )
