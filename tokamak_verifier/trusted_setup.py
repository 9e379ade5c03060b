"""
Tokamak 신뢰 설정 (Trusted Setup)
===================================

검증 키를 toxic waste(비밀 스칼라)로부터 결정론적으로 생성한다.

**비밀 값**:
  x, y        : 이변수 다항식 커밋먼트의 평가점
  α           : 와이어 커밋먼트 U, V, W, B를 묶는 결합 스칼라
  γ, η, δ     : 공개/중간/비공개 출력 커밋먼트의 분리 스칼라
  s0, s1      : 순열 다항식 s⁽⁰⁾(x,y), s⁽¹⁾(x,y)의 값
  o_j         : 공개 입력 출력 기저 o_j(x,y)/γ

**보안**:
  toxic waste를 아는 사람은 임의의 거짓 증명을 만들 수 있다.
  실제 배포에서는 MPC로 생성하고 폐기해야 한다. 여기서는 테스트와 데모를
  위해 seed에서 결정론적으로 유도한다.

사용 예시:
    >>> vk, toxic = generate_setup(n=4, s_max=4, m_i=2, l=1, seed=42)
    >>> vk.n   # 4
"""

import hashlib
import secrets

from tokamak_verifier.field import FR, CURVE_ORDER, G1, G2, get_root_of_unity
from tokamak_verifier.host import CurveService
from tokamak_verifier.keys import VerificationKey


class ToxicWaste:
    """설정에 사용된 비밀 스칼라 묶음 (테스트용 트랩도어).

    속성:
        x, y, alpha, gamma, eta, delta, s0, s1: FR
        o_pub: list[FR] (길이 l)
    """

    def __init__(self, x, y, alpha, gamma, eta, delta, s0, s1, o_pub):
        self.x = x
        self.y = y
        self.alpha = alpha
        self.gamma = gamma
        self.eta = eta
        self.delta = delta
        self.s0 = s0
        self.s1 = s1
        self.o_pub = o_pub


def _derive_secret(seed, label):
    """seed와 레이블로부터 0이 아닌 스칼라를 유도한다."""
    if seed is None:
        return FR(secrets.randbelow(CURVE_ORDER - 1) + 1)
    counter = 0
    while True:
        h = hashlib.sha256(f"{seed}:{label}:{counter}".encode()).digest()
        value = int.from_bytes(h, "big") % CURVE_ORDER
        if value != 0:
            return FR(value)
        counter += 1


def lagrange_basis_at(j, l, omega, point):
    """공개 입력 도메인 위의 j번째 Lagrange 기저 M_j(point)를 계산한다.

    point가 도메인 점이면 크로네커 델타 값을 돌려준다
    (설정 단계에서만 쓰이며, 검증 단계는 queries 모듈을 사용한다).
    """
    omega_j = omega ** j
    if point == omega_j:
        return FR(1)
    if (point ** l) == FR(1):
        return FR(0)
    numerator = omega_j * (point ** l - FR(1))
    denominator = FR(l) * (point - omega_j)
    return numerator / denominator


def generate_setup(n, s_max, m_i, l, seed=None):
    """검증 키와 toxic waste를 생성한다.

    Args:
        n, s_max, m_i, l: 회로 형태 (모두 2의 거듭제곱)
        seed: 결정론적 생성을 위한 시드. None이면 secrets로 무작위 생성.

    Returns:
        (VerificationKey, ToxicWaste)

    예시 (n=4, s_max=4, m_I=2, l=1 장난감 회로):
        >>> vk, toxic = generate_setup(4, 4, 2, 1, seed=1234)
    """
    curve = CurveService()

    x = _derive_secret(seed, "x")
    y = _derive_secret(seed, "y")
    alpha = _derive_secret(seed, "alpha")
    gamma = _derive_secret(seed, "gamma")
    eta = _derive_secret(seed, "eta")
    delta = _derive_secret(seed, "delta")
    s0 = _derive_secret(seed, "s0")
    s1 = _derive_secret(seed, "s1")
    o_pub = [_derive_secret(seed, f"o_pub:{j}") for j in range(l)]

    omega_l = get_root_of_unity(l)
    omega_mi_inv = FR(1) / get_root_of_unity(m_i)
    omega_smax_inv = FR(1) / get_root_of_unity(s_max)

    lagrange_g1 = [
        curve.g1_mul(G1, lagrange_basis_at(j, l, omega_l, x)) for j in range(l)
    ]
    o_pub_g1 = [curve.g1_mul(G1, o_j) for o_j in o_pub]

    alpha2 = alpha * alpha
    vk = VerificationKey(
        n=n, s_max=s_max, m_i=m_i, l=l,
        omega_l=omega_l,
        omega_mi_inv=omega_mi_inv,
        omega_smax_inv=omega_smax_inv,
        g1=G1,
        x_g1=curve.g1_mul(G1, x),
        y_g1=curve.g1_mul(G1, y),
        s0_g1=curve.g1_mul(G1, s0),
        s1_g1=curve.g1_mul(G1, s1),
        lagrange_g1=lagrange_g1,
        o_pub_g1=o_pub_g1,
        g2=G2,
        alpha_g2=curve.g2_mul(G2, alpha),
        alpha2_g2=curve.g2_mul(G2, alpha2),
        alpha3_g2=curve.g2_mul(G2, alpha2 * alpha),
        alpha4_g2=curve.g2_mul(G2, alpha2 * alpha2),
        gamma_g2=curve.g2_mul(G2, gamma),
        eta_g2=curve.g2_mul(G2, eta),
        delta_g2=curve.g2_mul(G2, delta),
        x_g2=curve.g2_mul(G2, x),
        y_g2=curve.g2_mul(G2, y),
    )
    vk.validate()

    toxic = ToxicWaste(x, y, alpha, gamma, eta, delta, s0, s1, o_pub)
    return vk, toxic
