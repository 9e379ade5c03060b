"""
Tokamak 검증기 기반 모듈: 유한체(Finite Field) 및 곡선 상수
============================================================

검증기 전체에서 사용되는 기본 대수적 도구를 정의한다.

**스칼라 필드 FR**:
  BN254(alt_bn128) 곡선의 스칼라 필드. 모든 챌린지, 평가값, 가중치 연산이
  이 필드 위에서 이루어진다.
  - 위수 R ≈ 2^254, 소수체(prime field)
  - R - 1 = 2^28 × m (m은 홀수) → 최대 2^28차 단위근을 지원

**기저체(Base Field)**:
  곡선 점의 좌표가 속하는 체. 위수 Q ≈ 2^254 이므로 Python 정수 하나로
  좌표를 그대로 표현한다 (상위/하위 limb 분할이 필요 없음).

**곡선 방정식**:
  G1: y² = x³ + 3 (기저체 위), 보조인수(cofactor) 1 → 곡선 위의 점은 곧
  부분군의 원소이다.

사용 예시:
    >>> from tokamak_verifier.field import FR, get_root_of_unity
    >>> FR(3) * FR(7)           # FR(21)
    >>> omega = get_root_of_unity(4)
    >>> omega ** 4 == FR(1)     # True
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import optimized_bn128 as bn128


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """BN254 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, ** 연산을 제공한다.

    주의:
        py_ecc의 나눗셈은 0의 역원을 0으로 돌려준다.
        검증기 코드는 나눗셈 전에 분모를 직접 확인해야 한다
        (queries.safe_div 참고).
    """
    field_modulus = bn128.curve_order


# 스칼라 필드 위수 R
CURVE_ORDER = bn128.curve_order

# 기저체 위수 Q
FIELD_MODULUS = bn128.field_modulus

# 챌린지를 R보다 작게 만드는 마스크 (하위 253비트)
CHALLENGE_MASK = (1 << 253) - 1

# 와이어 워드 크기 (바이트)
WORD_SIZE = 32


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 상수
# ─────────────────────────────────────────────────────────────────────

# G1 / G2 생성자 (사영 좌표)
G1 = bn128.G1
G2 = bn128.G2

# 무한원점 (항등원)
Z1 = bn128.Z1
Z2 = bn128.Z2


def is_inf(point):
    """점이 무한원점인지 확인한다."""
    return bn128.is_inf(point)


def points_equal(p1, p2):
    """사영 좌표 표현과 무관하게 두 점이 같은지 비교한다."""
    return bn128.eq(p1, p2)


def g1_from_affine(x, y):
    """정수 좌표 (x, y)로 G1 점을 만든다. (0, 0)은 무한원점이다.

    곡선 위에 있는지는 확인하지 않는다 (host.is_on_curve_g1 참고).
    """
    if x == 0 and y == 0:
        return Z1
    return (bn128.FQ(x), bn128.FQ(y), bn128.FQ.one())


def g1_to_affine(point):
    """G1 점을 정수 좌표 (x, y)로 변환한다. 무한원점은 (0, 0)."""
    if is_inf(point):
        return (0, 0)
    x, y = bn128.normalize(point)
    return (int(x.n), int(y.n))


def g2_from_affine(x, y):
    """FQ2 좌표 ((x0, x1), (y0, y1))로 G2 점을 만든다.

    값은 x0 + x1·i 형태이며, 모두 0이면 무한원점이다.
    """
    if x == (0, 0) and y == (0, 0):
        return Z2
    return (bn128.FQ2([x[0], x[1]]), bn128.FQ2([y[0], y[1]]), bn128.FQ2.one())


def g2_to_affine(point):
    """G2 점을 ((x0, x1), (y0, y1)) 정수 좌표로 변환한다."""
    if is_inf(point):
        return ((0, 0), (0, 0))
    x, y = bn128.normalize(point)
    return (
        (int(x.coeffs[0]), int(x.coeffs[1])),
        (int(y.coeffs[0]), int(y.coeffs[1])),
    )


# ─────────────────────────────────────────────────────────────────────
# 단위근 (Roots of Unity)
# ─────────────────────────────────────────────────────────────────────

def is_power_of_2(n):
    """n이 1 이상의 2의 거듭제곱인지 확인한다."""
    return isinstance(n, int) and n >= 1 and (n & (n - 1)) == 0


def get_root_of_unity(n):
    """n차 원시 단위근(primitive n-th root of unity) ω를 반환한다.

    생성자 g = FR(5)를 사용하여 ω = g^((R-1)/n)으로 계산한다.

    Args:
        n: 단위근의 차수 (2의 거듭제곱이어야 하며, ≤ 2^28)

    Returns:
        FR: n차 원시 단위근

    Raises:
        ValueError: n이 2의 거듭제곱이 아니거나 2^28을 초과할 때

    예시:
        >>> omega = get_root_of_unity(4)
        >>> omega ** 4 == FR(1)  # True
        >>> omega ** 2 != FR(1)  # True (원시 단위근)
    """
    if not is_power_of_2(n):
        raise ValueError(f"n은 2의 거듭제곱이어야 합니다: {n}")
    if n > (1 << 28):
        raise ValueError(f"n은 2^28 이하여야 합니다: {n}")
    if n == 1:
        return FR(1)

    g = FR(5)
    exponent = (CURVE_ORDER - 1) // n
    return g ** exponent
