"""
Tokamak Fiat-Shamir Transcript
================================

비대화식(non-interactive) 변환을 위한 두 상태 워드 기반 해시 트랜스크립트.

**구조**:
  트랜스크립트는 32바이트 상태 워드 두 개(state0, state1)를 가진다.

  absorb(value):
      state0' = H(0x00 ‖ state0 ‖ state1 ‖ value)
      state1' = H(0x01 ‖ state0 ‖ state1 ‖ value)

  squeeze(i):
      c = H(0x02 ‖ state0 ‖ state1 ‖ i)  &  (2^253 - 1)

  - value는 32바이트 빅엔디안, i는 4바이트 빅엔디안이다.
  - squeeze는 상태를 바꾸지 않는다. 같은 라운드에서 인덱스만 바꿔가며
    여러 챌린지를 뽑는다.
  - 마스크가 253비트이므로 챌린지는 항상 R보다 작다.

**순서가 곧 보안이다**:
  Verifier는 Prover가 해당 라운드에 보낸 모든 커밋먼트를 문서화된 순서
  그대로 absorb한 뒤에만 그 라운드의 챌린지를 squeeze해야 한다.
  순서가 하나라도 바뀌면 이후의 모든 챌린지가 달라진다.

사용 예시:
    >>> t = Transcript()
    >>> t.absorb_point(proof.u_comm)
    >>> theta0 = t.squeeze(0)
    >>> theta1 = t.squeeze(1)
"""

import hashlib

from tokamak_verifier.field import FR, CHALLENGE_MASK, WORD_SIZE
from tokamak_verifier.field import g1_to_affine


DST_0 = b"\x00"
DST_1 = b"\x01"
DST_CHALLENGE = b"\x02"


class Transcript:
    """SHA-256 기반 Fiat-Shamir 트랜스크립트.

    속성:
        state0, state1: 32바이트 해시 체인 상태 워드
    """

    def __init__(self):
        self.state0 = b"\x00" * WORD_SIZE
        self.state1 = b"\x00" * WORD_SIZE

    def absorb(self, value):
        """값 하나를 트랜스크립트에 흡수한다.

        Args:
            value: FR 원소 또는 0 ≤ value < 2^256 인 정수
                   (기저체 좌표도 그대로 흡수한다)

        Raises:
            ValueError: 값이 256비트 범위를 벗어날 때
        """
        value = int(value)
        if value < 0 or value >= (1 << (8 * WORD_SIZE)):
            raise ValueError(f"흡수할 값이 256비트 범위를 벗어났습니다: {value}")
        word = value.to_bytes(WORD_SIZE, "big")

        old0 = self.state0
        old1 = self.state1
        self.state0 = hashlib.sha256(DST_0 + old0 + old1 + word).digest()
        self.state1 = hashlib.sha256(DST_1 + old0 + old1 + word).digest()

    def absorb_point(self, point):
        """G1 점을 x, y 순서로 흡수한다. 무한원점은 (0, 0)이다."""
        x, y = g1_to_affine(point)
        self.absorb(x)
        self.absorb(y)

    def absorb_points(self, points):
        for point in points:
            self.absorb_point(point)

    def absorb_scalars(self, scalars):
        for scalar in scalars:
            self.absorb(scalar)

    def squeeze(self, index):
        """현재 상태에서 index번째 챌린지를 생성한다.

        Args:
            index: 챌린지 인덱스 (0 ≤ index < 2^32)

        Returns:
            FR: 253비트로 마스킹된 챌린지
        """
        if index < 0 or index >= (1 << 32):
            raise ValueError(f"챌린지 인덱스가 범위를 벗어났습니다: {index}")
        h = hashlib.sha256(
            DST_CHALLENGE + self.state0 + self.state1 + index.to_bytes(4, "big")
        ).digest()
        return FR(int.from_bytes(h, "big") & CHALLENGE_MASK)

    def squeeze_many(self, count):
        """인덱스 0..count-1 의 챌린지를 차례로 반환한다."""
        return [self.squeeze(i) for i in range(count)]


CHALLENGE_NAMES = (
    "theta0", "theta1", "theta2",
    "kappa0", "kappa1", "kappa2",
    "chi", "zeta",
)


class ChallengeSet:
    """한 번의 검증에서 트랜스크립트가 만든 챌린지 묶음.

    속성:
        theta0, theta1, theta2: 선형화(F, G 구성) 챌린지
        kappa0: 복사 제약 결합 챌린지
        kappa1: 제약 다항식 결합 챌린지
        kappa2: 열기 증명 일괄 결합 챌린지
        chi, zeta: 평가점 (X축, Y축)
    """

    def __init__(self, theta0, theta1, theta2, kappa0, kappa1, kappa2, chi, zeta):
        self.theta0 = FR(theta0)
        self.theta1 = FR(theta1)
        self.theta2 = FR(theta2)
        self.kappa0 = FR(kappa0)
        self.kappa1 = FR(kappa1)
        self.kappa2 = FR(kappa2)
        self.chi = FR(chi)
        self.zeta = FR(zeta)

    def as_dict(self):
        return {name: getattr(self, name) for name in CHALLENGE_NAMES}

    def __eq__(self, other):
        if not isinstance(other, ChallengeSet):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self):
        inner = ", ".join(f"{k}={int(v)}" for k, v in self.as_dict().items())
        return f"ChallengeSet({inner})"
