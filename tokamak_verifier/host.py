"""
곡선 연산 서비스 (Host Curve-Arithmetic Service)
=================================================

검증기가 사용하는 모든 타원곡선/페어링 연산을 한 곳에 모은 래퍼.
py_ecc의 optimized_bn128 백엔드를 사용한다.

**제공 연산**:
  - g1_add, g1_mul, g1_neg
  - g2_add, g2_mul, g2_neg
  - pairing_check: Π e(Pᵢ, Qᵢ) == 1 인지 확인
  - mod_exp: base^exponent mod modulus

**가스 계량**:
  EVM 프리컴파일 요금표를 따라 연산마다 가스를 차감한다.
  gas_limit를 넘으면 연산을 실행하기 전에 ResourceExhausted를 던진다.

    ECADD   150                  (EIP-1108)
    ECMUL   6000                 (EIP-1108)
    PAIRING 45000 + 34000·k      (EIP-1108)
    MODEXP  200                  (EIP-2565 최소 요금)
    G2ADD   600, G2MUL 22500     (EIP-2537)

**실패 처리**:
  백엔드에서 발생한 예외는 HostPrimitiveFailure로 감싸서 던진다
  (원래 예외는 __cause__로 남는다).

사용 예시:
    >>> curve = CurveService()
    >>> P = curve.g1_mul(G1, 5)
    >>> curve.pairing_check([(P, G2), (curve.g1_neg(P), G2)])  # True
"""

import logging

from py_ecc import optimized_bn128 as bn128

from tokamak_verifier.errors import HostPrimitiveFailure, ResourceExhausted
from tokamak_verifier.field import FR, CURVE_ORDER, is_inf


logger = logging.getLogger(__name__)


ECADD_GAS = 150
ECMUL_GAS = 6000
PAIRING_BASE_GAS = 45000
PAIRING_PER_PAIR_GAS = 34000
MODEXP_GAS = 200
G2ADD_GAS = 600
G2MUL_GAS = 22500


# ─────────────────────────────────────────────────────────────────────
# 곡선 소속 검사
# ─────────────────────────────────────────────────────────────────────

def is_on_curve_g1(point):
    """G1 점이 y² = x³ + 3 을 만족하는지 확인한다. 무한원점은 True."""
    return bool(bn128.is_on_curve(point, bn128.b))


def is_on_curve_g2(point):
    """G2 점이 트위스트 곡선 위에 있는지 확인한다. 무한원점은 True."""
    return bool(bn128.is_on_curve(point, bn128.b2))


def is_in_subgroup_g2(point):
    """G2 점이 위수 R의 부분군에 속하는지 확인한다.

    트위스트 곡선의 보조인수는 1이 아니므로 곡선 소속만으로는 부족하다.
    """
    return bool(bn128.is_inf(bn128.multiply(point, CURVE_ORDER)))


# ─────────────────────────────────────────────────────────────────────
# 페어링
# ─────────────────────────────────────────────────────────────────────

def pairing(g1_point, g2_point):
    """최종 지수승까지 마친 단일 페어링 e(P, Q) ∈ GT.

    주의:
        py_ecc.pairing의 인자 순서는 (G2, G1)이다.
    """
    return bn128.pairing(g2_point, g1_point)


def multi_pairing_product(pairs):
    """Π e(Pᵢ, Qᵢ)를 계산한다.

    쌍마다 밀러 루프(Miller loop)만 수행하고, 곱한 뒤 최종 지수승을
    한 번만 적용한다. 무한원점이 포함된 쌍은 1을 기여한다.

    Args:
        pairs: (G1 점, G2 점) 튜플의 리스트

    Returns:
        FQ12: 페어링 곱
    """
    acc = bn128.FQ12.one()
    for g1_point, g2_point in pairs:
        if is_inf(g1_point) or is_inf(g2_point):
            continue
        acc = acc * bn128.pairing(g2_point, g1_point, final_exponentiate=False)
    return bn128.final_exponentiate(acc)


# ─────────────────────────────────────────────────────────────────────
# 서비스
# ─────────────────────────────────────────────────────────────────────

class CurveService:
    """가스 계량이 붙은 곡선 연산 서비스.

    한 번의 검증 호출마다 새 인스턴스를 사용한다 (gas_used가 누적되므로).

    속성:
        gas_limit: 가스 한도 (None이면 무제한)
        gas_used: 지금까지 사용한 가스
    """

    def __init__(self, gas_limit=None):
        self.gas_limit = gas_limit
        self.gas_used = 0

    def _charge(self, amount, op):
        if self.gas_limit is not None and self.gas_used + amount > self.gas_limit:
            raise ResourceExhausted(
                f"{op}: 가스 한도 초과 (used={self.gas_used}, cost={amount}, "
                f"limit={self.gas_limit})"
            )
        self.gas_used += amount

    def _run(self, op, fn, *args):
        try:
            return fn(*args)
        except (ArithmeticError, AssertionError, TypeError, ValueError, IndexError) as e:
            raise HostPrimitiveFailure(f"{op} 실패: {e}") from e

    # ── G1 ──

    def g1_add(self, p1, p2):
        """G1 점 덧셈: p1 + p2."""
        self._charge(ECADD_GAS, "g1_add")
        return self._run("g1_add", bn128.add, p1, p2)

    def g1_mul(self, point, scalar):
        """G1 스칼라 곱셈: scalar · point. scalar는 int 또는 FR."""
        self._charge(ECMUL_GAS, "g1_mul")
        return self._run("g1_mul", bn128.multiply, point, int(scalar) % CURVE_ORDER)

    def g1_neg(self, point):
        """G1 점의 역원. 프리컴파일 호출이 아니므로 가스를 쓰지 않는다."""
        return self._run("g1_neg", bn128.neg, point)

    # ── G2 ──

    def g2_add(self, p1, p2):
        """G2 점 덧셈: p1 + p2."""
        self._charge(G2ADD_GAS, "g2_add")
        return self._run("g2_add", bn128.add, p1, p2)

    def g2_mul(self, point, scalar):
        """G2 스칼라 곱셈: scalar · point."""
        self._charge(G2MUL_GAS, "g2_mul")
        return self._run("g2_mul", bn128.multiply, point, int(scalar) % CURVE_ORDER)

    def g2_neg(self, point):
        """G2 점의 역원."""
        return self._run("g2_neg", bn128.neg, point)

    # ── 페어링 / 모듈러 거듭제곱 ──

    def pairing_check(self, pairs):
        """Π e(Pᵢ, Qᵢ) == 1 인지 한 번의 호출로 확인한다.

        Args:
            pairs: (G1 점, G2 점) 튜플의 리스트

        Returns:
            bool: 곱이 GT의 항등원이면 True

        Raises:
            ResourceExhausted: 가스 한도 초과
            HostPrimitiveFailure: 백엔드 실패 (예: 곡선 밖의 점)
        """
        pairs = list(pairs)
        self._charge(PAIRING_BASE_GAS + PAIRING_PER_PAIR_GAS * len(pairs), "pairing_check")
        result = self._run("pairing_check", multi_pairing_product, pairs)
        return result == bn128.FQ12.one()

    def mod_exp(self, base, exponent, modulus=CURVE_ORDER):
        """base^exponent mod modulus. 스칼라 필드 위수가 기본값이며 FR로 반환한다."""
        self._charge(MODEXP_GAS, "mod_exp")
        if modulus <= 0:
            raise HostPrimitiveFailure(f"mod_exp 실패: 잘못된 모듈러스 {modulus}")
        value = pow(int(base), int(exponent), modulus)
        if modulus == CURVE_ORDER:
            return FR(value)
        return value
