"""
Tokamak 질의 준비 (Query Preparer)
====================================

챌린지, 증명, 공개 입력, 검증 키로부터 보조 스칼라와 보조 커밋먼트를 만든다.

**소거 다항식 평가** (모듈러 거듭제곱은 곡선 서비스의 mod_exp 사용):
    t_n(χ)    = χⁿ - 1
    t_smax(ζ) = ζ^{s_max} - 1
    t_mI(χ)   = χ^{m_I} - 1

**Lagrange 정규화 인자**:
    K0(χ) = (χ^{m_I} - 1) / (m_I · (χ - 1))       (χ = 1 이면 DivisionByZero)

**공개 입력 다항식 평가** (공개 입력 도메인 {ω^m} 위의 보간):
    A_pub = Σ_j a_j · M_j(χ)
    M_j(χ) = Π_{m≠j} (χ - ω^m)/(ω^j - ω^m)
           = ω^j · (χ^l - 1) / (l · (χ - ω^j))     (χ = ω^j 이면 DivisionByZero)

**보조 커밋먼트**:
    [F] = [B] + θ₀·[s⁽⁰⁾] + θ₁·[s⁽¹⁾] + θ₂·[1]
    [G] = [B] + θ₀·[x]    + θ₁·[y]    + θ₂·[1]
    [O_pub] = Σ_j a_j · o_pub_g1[j]
    [A]     = Σ_j a_j · lagrange_g1[j]   (PUBLIC_COMMITMENT 변형은 증명의 [A] 사용)
"""

from tokamak_verifier.errors import DivisionByZero
from tokamak_verifier.field import FR, Z1


class Queries:
    """질의 준비 결과.

    속성 (스칼라):
        t_n_chi, t_smax_zeta, t_mi_chi, k0_chi, a_pub: FR
        chi_shifted:  ω_mI⁻¹ · χ
        zeta_shifted: ω_smax⁻¹ · ζ

    속성 (G1 점):
        f_comm, g_comm, a_comm, o_pub_comm
    """

    def __init__(self, t_n_chi, t_smax_zeta, t_mi_chi, k0_chi, a_pub,
                 chi_shifted, zeta_shifted, f_comm, g_comm, a_comm, o_pub_comm):
        self.t_n_chi = t_n_chi
        self.t_smax_zeta = t_smax_zeta
        self.t_mi_chi = t_mi_chi
        self.k0_chi = k0_chi
        self.a_pub = a_pub
        self.chi_shifted = chi_shifted
        self.zeta_shifted = zeta_shifted
        self.f_comm = f_comm
        self.g_comm = g_comm
        self.a_comm = a_comm
        self.o_pub_comm = o_pub_comm

    def scalars(self):
        return {
            "t_n_chi": self.t_n_chi,
            "t_smax_zeta": self.t_smax_zeta,
            "t_mi_chi": self.t_mi_chi,
            "k0_chi": self.k0_chi,
            "a_pub": self.a_pub,
            "chi_shifted": self.chi_shifted,
            "zeta_shifted": self.zeta_shifted,
        }


def safe_div(numerator, denominator, what):
    """분모가 0이면 DivisionByZero를 던지는 FR 나눗셈."""
    if denominator == FR(0):
        raise DivisionByZero(f"{what}: 분모가 0입니다")
    return numerator / denominator


def vanishing_eval(curve, point, degree):
    """소거 다항식 point^degree - 1 을 평가한다."""
    return curve.mod_exp(point, degree) - FR(1)


def lagrange_normalizer(curve, chi, m_i):
    """K0(χ) = (χ^{m_I} - 1) / (m_I · (χ - 1)).

    X축 도메인 크기 m_I 위의 첫 번째 Lagrange 기저를 χ에서 평가한 값이다.

    Raises:
        DivisionByZero: χ = 1 일 때
    """
    numerator = vanishing_eval(curve, chi, m_i)
    denominator = FR(m_i) * (chi - FR(1))
    return safe_div(numerator, denominator, "K0(χ)")


def public_input_eval(curve, public_inputs, omega_l, chi):
    """A_pub = Σ_j a_j · M_j(χ) 를 계산한다.

    Args:
        curve: CurveService
        public_inputs: FR 리스트 (길이 l)
        omega_l: l차 원시 단위근
        chi: 평가점

    Raises:
        DivisionByZero: χ가 공개 입력 도메인의 점과 같을 때
    """
    l = len(public_inputs)
    t_l_chi = vanishing_eval(curve, chi, l)
    l_inv_t = safe_div(t_l_chi, FR(l), "1/l")

    result = FR(0)
    omega_j = FR(1)
    for j, a_j in enumerate(public_inputs):
        basis = safe_div(omega_j * l_inv_t, chi - omega_j, f"M_{j}(χ)")
        result = result + a_j * basis
        omega_j = omega_j * omega_l
    return result


def linear_combination(curve, terms, start=None):
    """Σ sᵢ · Pᵢ 를 계산한다. 스칼라가 0인 항은 건너뛴다.

    Args:
        terms: (G1 점, 스칼라) 튜플의 리스트
        start: 시작 점 (기본값: 무한원점)
    """
    acc = Z1 if start is None else start
    for point, scalar in terms:
        if int(scalar) == 0:
            continue
        acc = curve.g1_add(acc, curve.g1_mul(point, scalar))
    return acc


def prepare_queries(curve, challenges, proof, public_inputs, vk, a_comm=None):
    """질의 준비 단계 전체를 수행한다.

    Args:
        curve: CurveService
        challenges: ChallengeSet
        proof: Proof
        public_inputs: FR 리스트
        vk: VerificationKey
        a_comm: 공개 입력 커밋먼트 [A]. None이면 lagrange_g1로부터 계산한다.

    Returns:
        Queries

    Raises:
        DivisionByZero: χ = 1 또는 χ가 공개 입력 도메인 점일 때
    """
    chi = challenges.chi
    zeta = challenges.zeta

    t_n_chi = vanishing_eval(curve, chi, vk.n)
    t_smax_zeta = vanishing_eval(curve, zeta, vk.s_max)
    t_mi_chi = vanishing_eval(curve, chi, vk.m_i)

    # K0를 먼저 계산한다: χ = 1 이면 여기서 실패해야 한다.
    k0_chi = lagrange_normalizer(curve, chi, vk.m_i)
    a_pub = public_input_eval(curve, public_inputs, vk.omega_l, chi)

    f_comm = linear_combination(curve, [
        (vk.s0_g1, challenges.theta0),
        (vk.s1_g1, challenges.theta1),
        (vk.g1, challenges.theta2),
    ], start=proof.b_comm)
    g_comm = linear_combination(curve, [
        (vk.x_g1, challenges.theta0),
        (vk.y_g1, challenges.theta1),
        (vk.g1, challenges.theta2),
    ], start=proof.b_comm)

    o_pub_comm = linear_combination(curve, zip(vk.o_pub_g1, public_inputs))
    if a_comm is None:
        a_comm = linear_combination(curve, zip(vk.lagrange_g1, public_inputs))

    return Queries(
        t_n_chi=t_n_chi,
        t_smax_zeta=t_smax_zeta,
        t_mi_chi=t_mi_chi,
        k0_chi=k0_chi,
        a_pub=a_pub,
        chi_shifted=vk.omega_mi_inv * chi,
        zeta_shifted=vk.omega_smax_inv * zeta,
        f_comm=f_comm,
        g_comm=g_comm,
        a_comm=a_comm,
        o_pub_comm=o_pub_comm,
    )
