"""
Tokamak 증명 구조와 와이어 인코딩 (Decoder)
============================================

증명은 32바이트 빅엔디안 워드의 평탄한 나열로 전달된다.
G1 점은 (x, y) 두 워드, 스칼라는 한 워드이며 (0, 0)은 무한원점이다.

**변형(variant)별 레이아웃**:

  TWO_ROUND / THREE_ROUND (38 워드)
  PUBLIC_COMMITMENT       (40 워드, 맨 앞에 [A]₁ 슬롯)

  ┌──────────────────────────────────────────────────────────┐
  │ [A]₁                        (PUBLIC_COMMITMENT 전용)       │
  │ [B]₁, [R]₁                  배치/순열 누적자 커밋먼트        │
  │ [U]₁, [V]₁, [W]₁            와이어 커밋먼트                 │
  │ [O_mid]₁, [O_prv]₁          중간/비공개 출력 커밋먼트         │
  │ [Q_AX]₁, [Q_AY]₁            산술 제약 몫                    │
  │ [Q_CX]₁, [Q_CY]₁            복사 제약 몫                    │
  │ [Π_χ]₁, [Π_ζ]₁              (χ, ζ)에서의 열기 증명           │
  │ [M_χ]₁, [M_ζ]₁              (ω⁻¹χ, ζ)에서의 R 열기 증명     │
  │ [N_χ]₁, [N_ζ]₁              (ω⁻¹χ, ω⁻¹ζ)에서의 R 열기 증명  │
  │ R_xy, R'_xy, R''_xy, V_xy   평가값 (스칼라)                  │
  └──────────────────────────────────────────────────────────┘

**디코딩 규칙**:
  - 워드 수가 레이아웃과 다르면 MalformedProof
  - 좌표가 기저체 범위 밖이거나 곡선 방정식을 만족하지 않으면 PointNotOnCurve
  - 스칼라와 공개 입력은 R로 축소(reduce mod R)하여 읽는다

사용 예시:
    >>> proof = decode_proof(raw_bytes, ProofVariant.THREE_ROUND)
    >>> encode_proof(proof) == words   # 대칭
"""

import enum

from tokamak_verifier.errors import MalformedProof, PointNotOnCurve
from tokamak_verifier.field import FR, FIELD_MODULUS, WORD_SIZE
from tokamak_verifier.field import g1_from_affine, g1_to_affine
from tokamak_verifier.host import is_on_curve_g1


class ProofVariant(enum.Enum):
    """증명 레이아웃/트랜스크립트 변형."""

    TWO_ROUND = "two_round"
    THREE_ROUND = "three_round"
    PUBLIC_COMMITMENT = "public_commitment"

    @classmethod
    def parse(cls, value):
        """문자열 또는 ProofVariant를 ProofVariant로 변환한다."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise MalformedProof(f"알 수 없는 증명 변형: {value!r}") from None


COMMON_POINTS = (
    "b_comm", "r_comm",
    "u_comm", "v_comm", "w_comm",
    "o_mid_comm", "o_prv_comm",
    "q_ax_comm", "q_ay_comm",
    "q_cx_comm", "q_cy_comm",
    "pi_chi_comm", "pi_zeta_comm",
    "m_chi_comm", "m_zeta_comm",
    "n_chi_comm", "n_zeta_comm",
)

SCALARS = ("r_xy", "r_prime_xy", "r_double_prime_xy", "v_xy")

LAYOUTS = {
    ProofVariant.TWO_ROUND: (COMMON_POINTS, SCALARS),
    ProofVariant.THREE_ROUND: (COMMON_POINTS, SCALARS),
    ProofVariant.PUBLIC_COMMITMENT: (("a_comm",) + COMMON_POINTS, SCALARS),
}


def layout_size(variant):
    """변형의 와이어 워드 수."""
    points, scalars = LAYOUTS[variant]
    return 2 * len(points) + len(scalars)


class Proof:
    """Tokamak 증명 데이터 컨테이너.

    속성:
        variant: ProofVariant
        *_comm: G1 점 (레이아웃에 있는 것만 설정됨, 나머지는 None)
        r_xy, r_prime_xy, r_double_prime_xy, v_xy: FR
    """

    def __init__(self, variant, **elements):
        self.variant = ProofVariant.parse(variant)
        self.a_comm = None
        for name in COMMON_POINTS + SCALARS:
            setattr(self, name, None)

        points, scalars = LAYOUTS[self.variant]
        expected = set(points) | set(scalars)
        unknown = set(elements) - expected
        if unknown:
            raise MalformedProof(
                f"{self.variant.value} 증명에 없는 요소: {sorted(unknown)}"
            )
        for name, value in elements.items():
            if name in scalars:
                value = FR(int(value))
            setattr(self, name, value)

    def point_names(self):
        return LAYOUTS[self.variant][0]

    def scalar_names(self):
        return LAYOUTS[self.variant][1]

    def copy(self, **changes):
        """일부 요소만 바꾼 새 증명을 만든다."""
        elements = {name: getattr(self, name) for name in self.point_names()}
        elements.update({name: getattr(self, name) for name in self.scalar_names()})
        elements.update(changes)
        return Proof(self.variant, **elements)


# ─────────────────────────────────────────────────────────────────────
# 워드 변환
# ─────────────────────────────────────────────────────────────────────

def _to_word(value):
    if isinstance(value, FR):
        value = int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text, 16) if text.lower().startswith("0x") else int(text)
        except ValueError:
            raise MalformedProof(f"정수로 해석할 수 없는 워드: {value!r}") from None
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedProof(f"워드는 정수여야 합니다: {value!r}")
    if value < 0 or value >= (1 << (8 * WORD_SIZE)):
        raise MalformedProof(f"워드가 256비트 범위를 벗어났습니다: {value}")
    return value


def to_words(raw):
    """원시 입력을 정수 워드 리스트로 변환한다.

    Args:
        raw: bytes, "0x..." 16진 문자열, 또는 정수/문자열 워드의 리스트

    Raises:
        MalformedProof: 워드 나열이 아니거나, 길이가 32의 배수가 아니거나,
            워드가 범위를 벗어날 때
    """
    if isinstance(raw, str):
        text = raw[2:] if raw.lower().startswith("0x") else raw
        try:
            raw = bytes.fromhex(text)
        except ValueError:
            raise MalformedProof("16진 문자열을 해석할 수 없습니다") from None
    if isinstance(raw, (bytes, bytearray)):
        if len(raw) % WORD_SIZE != 0:
            raise MalformedProof(
                f"바이트 길이 {len(raw)}가 {WORD_SIZE}의 배수가 아닙니다"
            )
        return [
            int.from_bytes(raw[i:i + WORD_SIZE], "big")
            for i in range(0, len(raw), WORD_SIZE)
        ]
    if not isinstance(raw, (list, tuple)):
        try:
            raw = list(raw)
        except TypeError:
            raise MalformedProof(
                f"워드 나열이 아닙니다: {type(raw).__name__}"
            ) from None
    return [_to_word(w) for w in raw]


def words_to_bytes(words):
    return b"".join(int(w).to_bytes(WORD_SIZE, "big") for w in words)


def _load_g1(name, x, y):
    if x >= FIELD_MODULUS or y >= FIELD_MODULUS:
        raise PointNotOnCurve(f"{name}: 좌표가 기저체 범위를 벗어났습니다")
    point = g1_from_affine(x, y)
    if not is_on_curve_g1(point):
        raise PointNotOnCurve(f"{name}: 점이 곡선 y² = x³ + 3 위에 있지 않습니다")
    return point


# ─────────────────────────────────────────────────────────────────────
# 디코딩 / 인코딩
# ─────────────────────────────────────────────────────────────────────

def decode_proof(raw_proof, variant):
    """와이어 인코딩을 Proof로 변환한다.

    Args:
        raw_proof: bytes / 16진 문자열 / 워드 리스트
        variant: ProofVariant 또는 그 값 문자열

    Returns:
        Proof

    Raises:
        MalformedProof: 워드 수가 레이아웃과 다를 때
        PointNotOnCurve: 곡선 밖의 점이 있을 때
    """
    variant = ProofVariant.parse(variant)
    words = to_words(raw_proof)
    expected = layout_size(variant)
    if len(words) != expected:
        raise MalformedProof(
            f"{variant.value} 증명은 {expected}개 워드여야 합니다 (받은 수: {len(words)})"
        )

    points, scalars = LAYOUTS[variant]
    elements = {}
    pos = 0
    for name in points:
        elements[name] = _load_g1(name, words[pos], words[pos + 1])
        pos += 2
    for name in scalars:
        elements[name] = FR(words[pos])
        pos += 1
    return Proof(variant, **elements)


def encode_proof(proof):
    """Proof를 워드 리스트로 변환한다 (decode_proof의 역)."""
    words = []
    for name in proof.point_names():
        words.extend(g1_to_affine(getattr(proof, name)))
    for name in proof.scalar_names():
        words.append(int(getattr(proof, name)))
    return words


def proof_to_bytes(proof):
    return words_to_bytes(encode_proof(proof))


def decode_public_inputs(raw_public_inputs, vk):
    """공개 입력을 FR 리스트로 변환한다.

    Raises:
        MalformedProof: 개수가 vk.l과 다를 때
    """
    words = to_words(raw_public_inputs)
    if len(words) != vk.l:
        raise MalformedProof(
            f"공개 입력은 {vk.l}개여야 합니다 (받은 수: {len(words)})"
        )
    return [FR(w) for w in words]


def decode(raw_public_inputs, raw_proof, vk, variant):
    """(공개 입력, 증명)을 한 번에 디코딩한다.

    이미 Proof 객체가 주어지면 변형이 일치하는지만 확인한다.
    """
    variant = ProofVariant.parse(variant)
    public_inputs = decode_public_inputs(raw_public_inputs, vk)
    if isinstance(raw_proof, Proof):
        if raw_proof.variant is not variant:
            raise MalformedProof(
                f"증명 변형 {raw_proof.variant.value} != 검증기 변형 {variant.value}"
            )
        for name in raw_proof.point_names():
            point = getattr(raw_proof, name)
            if point is None:
                raise MalformedProof(f"{name}이 비어 있습니다")
            if not is_on_curve_g1(point):
                raise PointNotOnCurve(f"{name}: 점이 곡선 y² = x³ + 3 위에 있지 않습니다")
        for name in raw_proof.scalar_names():
            if getattr(raw_proof, name) is None:
                raise MalformedProof(f"{name}이 비어 있습니다")
        proof = raw_proof
    else:
        proof = decode_proof(raw_proof, variant)
    return public_inputs, proof
