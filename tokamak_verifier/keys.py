"""
Tokamak 검증 키 (Verification Key)
====================================

회로마다 한 번 만들어지고 이후 읽기 전용으로만 쓰이는 상수 묶음.

**구성**:
  회로 형태 스칼라:
    n          : 산술 제약의 X축 도메인 크기
    s_max      : Y축(서브서킷 인스턴스) 도메인 크기
    m_i        : 복사 제약(copy constraint)의 X축 도메인 크기
    l          : 공개 입력 수 (공개 입력 도메인 크기)
    omega_l        : l차 원시 단위근
    omega_mi_inv   : m_i차 원시 단위근의 역원
    omega_smax_inv : s_max차 원시 단위근의 역원

  G1 점:
    g1 = [1]₁, x_g1 = [x]₁, y_g1 = [y]₁
    s0_g1 = [s⁽⁰⁾(x,y)]₁, s1_g1 = [s⁽¹⁾(x,y)]₁  (순열 다항식)
    lagrange_g1[j] = [M_j(x)]₁                   (공개 입력 Lagrange 기저)
    o_pub_g1[j]                                  (공개 입력 출력 기저)

  G2 점:
    g2 = [1]₂, [α]₂ ... [α⁴]₂, [γ]₂, [η]₂, [δ]₂, [x]₂, [y]₂

검증 키의 점은 신뢰된 값으로 간주한다. HTTP 등 외부에서 들어온 키는
validate(check_points=True)로 곡선 소속까지 확인한다.
"""

from tokamak_verifier.field import FR, is_power_of_2
from tokamak_verifier.host import is_on_curve_g1, is_on_curve_g2, is_in_subgroup_g2


G1_FIELDS = ("g1", "x_g1", "y_g1", "s0_g1", "s1_g1")

G2_FIELDS = (
    "g2",
    "alpha_g2", "alpha2_g2", "alpha3_g2", "alpha4_g2",
    "gamma_g2", "eta_g2", "delta_g2",
    "x_g2", "y_g2",
)

SHAPE_FIELDS = ("n", "s_max", "m_i", "l")

ROOT_FIELDS = ("omega_l", "omega_mi_inv", "omega_smax_inv")


class VerificationKey:
    """읽기 전용 검증 키.

    생성 후 속성을 바꾸려 하면 AttributeError가 발생한다.
    여러 스레드에서 동시에 공유해도 안전하다.
    """

    def __init__(self, n, s_max, m_i, l, omega_l, omega_mi_inv, omega_smax_inv,
                 g1, x_g1, y_g1, s0_g1, s1_g1, lagrange_g1, o_pub_g1,
                 g2, alpha_g2, alpha2_g2, alpha3_g2, alpha4_g2,
                 gamma_g2, eta_g2, delta_g2, x_g2, y_g2):
        values = dict(
            n=n, s_max=s_max, m_i=m_i, l=l,
            omega_l=FR(omega_l),
            omega_mi_inv=FR(omega_mi_inv),
            omega_smax_inv=FR(omega_smax_inv),
            g1=g1, x_g1=x_g1, y_g1=y_g1, s0_g1=s0_g1, s1_g1=s1_g1,
            lagrange_g1=tuple(lagrange_g1),
            o_pub_g1=tuple(o_pub_g1),
            g2=g2, alpha_g2=alpha_g2, alpha2_g2=alpha2_g2,
            alpha3_g2=alpha3_g2, alpha4_g2=alpha4_g2,
            gamma_g2=gamma_g2, eta_g2=eta_g2, delta_g2=delta_g2,
            x_g2=x_g2, y_g2=y_g2,
        )
        for name, value in values.items():
            object.__setattr__(self, name, value)
        object.__setattr__(self, "_frozen", True)

    def __setattr__(self, name, value):
        if getattr(self, "_frozen", False):
            raise AttributeError(f"VerificationKey는 읽기 전용입니다: {name}")
        object.__setattr__(self, name, value)

    def __delattr__(self, name):
        raise AttributeError(f"VerificationKey는 읽기 전용입니다: {name}")

    def validate(self, check_points=False):
        """키의 형태를 확인한다.

        Args:
            check_points: True면 모든 G1/G2 점의 곡선 소속도 확인한다.

        Returns:
            self (체이닝용)

        Raises:
            ValueError: 도메인 크기, 단위근, 리스트 길이, 점이 잘못되었을 때
        """
        for name in SHAPE_FIELDS:
            value = getattr(self, name)
            if not is_power_of_2(value):
                raise ValueError(f"{name}은 2의 거듭제곱이어야 합니다: {value}")

        if len(self.lagrange_g1) != self.l:
            raise ValueError(
                f"lagrange_g1 길이 {len(self.lagrange_g1)} != l={self.l}"
            )
        if len(self.o_pub_g1) != self.l:
            raise ValueError(f"o_pub_g1 길이 {len(self.o_pub_g1)} != l={self.l}")

        _check_primitive_root("omega_l", self.omega_l, self.l)
        _check_primitive_root("omega_mi_inv", self.omega_mi_inv, self.m_i)
        _check_primitive_root("omega_smax_inv", self.omega_smax_inv, self.s_max)

        if check_points:
            g1_points = [(name, getattr(self, name)) for name in G1_FIELDS]
            g1_points += [(f"lagrange_g1[{j}]", p) for j, p in enumerate(self.lagrange_g1)]
            g1_points += [(f"o_pub_g1[{j}]", p) for j, p in enumerate(self.o_pub_g1)]
            for name, point in g1_points:
                if not is_on_curve_g1(point):
                    raise ValueError(f"검증 키의 {name}이 G1 곡선 위에 있지 않습니다")
            for name in G2_FIELDS:
                point = getattr(self, name)
                if not is_on_curve_g2(point):
                    raise ValueError(f"검증 키의 {name}이 G2 곡선 위에 있지 않습니다")
                if not is_in_subgroup_g2(point):
                    raise ValueError(f"검증 키의 {name}이 G2 부분군에 속하지 않습니다")
        return self

    def __repr__(self):
        return (
            f"VerificationKey(n={self.n}, s_max={self.s_max}, "
            f"m_i={self.m_i}, l={self.l})"
        )


def _check_primitive_root(name, root, order):
    # order가 2의 거듭제곱이므로 root^(order/2) != 1 이면 원시근이다.
    if root ** order != FR(1):
        raise ValueError(f"{name}^{order} != 1")
    if order > 1 and root ** (order // 2) == FR(1):
        raise ValueError(f"{name}은 {order}차 원시 단위근이 아닙니다")
