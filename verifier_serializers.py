"""
Tokamak 검증기 데이터 직렬화/역직렬화 헬퍼
============================================

TinyDB와 JSON API에 저장/전달 가능한 형태로 객체를 변환한다.
FR, G1, G2, VerificationKey, Proof, ChallengeSet, VerificationResult.
정수는 모두 10진 문자열로 표현한다.
"""

from tokamak_verifier.errors import MalformedProof
from tokamak_verifier.field import FR, FIELD_MODULUS
from tokamak_verifier.field import g1_from_affine, g1_to_affine
from tokamak_verifier.field import g2_from_affine, g2_to_affine
from tokamak_verifier.keys import VerificationKey, G1_FIELDS, G2_FIELDS
from tokamak_verifier.keys import SHAPE_FIELDS, ROOT_FIELDS
from tokamak_verifier.proof import LAYOUTS, ProofVariant, decode_proof


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) → FR"""
    return FR(int(s))


def serialize_fr_list(lst):
    """list[FR] → list[str]"""
    return [str(int(v)) for v in lst]


# ─── G1 point ───

def _coords(pair):
    values = (int(pair[0]), int(pair[1]))
    for v in values:
        if v < 0 or v >= FIELD_MODULUS:
            raise ValueError(f"좌표가 기저체 범위를 벗어났습니다: {v}")
    return values


def serialize_g1(point):
    """G1 point → [str, str] (무한원점은 ["0", "0"])"""
    x, y = g1_to_affine(point)
    return [str(x), str(y)]


def deserialize_g1(data):
    """[str, str] → G1 point"""
    x, y = _coords(data)
    return g1_from_affine(x, y)


# ─── G2 point ───

def serialize_g2(point):
    """G2 point → [[str,str],[str,str]]"""
    (x0, x1), (y0, y1) = g2_to_affine(point)
    return [[str(x0), str(x1)], [str(y0), str(y1)]]


def deserialize_g2(data):
    """[[str,str],[str,str]] → G2 point"""
    return g2_from_affine(_coords(data[0]), _coords(data[1]))


# ─── VerificationKey ───

def serialize_vk(vk):
    """VerificationKey → dict"""
    data = {name: getattr(vk, name) for name in SHAPE_FIELDS}
    data.update({name: serialize_fr(getattr(vk, name)) for name in ROOT_FIELDS})
    data.update({name: serialize_g1(getattr(vk, name)) for name in G1_FIELDS})
    data["lagrange_g1"] = [serialize_g1(p) for p in vk.lagrange_g1]
    data["o_pub_g1"] = [serialize_g1(p) for p in vk.o_pub_g1]
    data.update({name: serialize_g2(getattr(vk, name)) for name in G2_FIELDS})
    return data


def deserialize_vk(data, check_points=False):
    """dict → VerificationKey (형태 검사 포함)

    Raises:
        ValueError: 키가 빠졌거나 형태가 잘못되었을 때
    """
    try:
        kwargs = {name: int(data[name]) for name in SHAPE_FIELDS}
        kwargs.update({name: deserialize_fr(data[name]) for name in ROOT_FIELDS})
        kwargs.update({name: deserialize_g1(data[name]) for name in G1_FIELDS})
        kwargs["lagrange_g1"] = [deserialize_g1(p) for p in data["lagrange_g1"]]
        kwargs["o_pub_g1"] = [deserialize_g1(p) for p in data["o_pub_g1"]]
        kwargs.update({name: deserialize_g2(data[name]) for name in G2_FIELDS})
    except (KeyError, IndexError, TypeError) as e:
        raise ValueError(f"검증 키 형식이 잘못되었습니다: {e!r}") from e
    return VerificationKey(**kwargs).validate(check_points=check_points)


# ─── Proof ───

def serialize_proof(proof):
    """Proof → dict (요소 이름별)"""
    data = {"variant": proof.variant.value}
    for name in proof.point_names():
        data[name] = serialize_g1(getattr(proof, name))
    for name in proof.scalar_names():
        data[name] = serialize_fr(getattr(proof, name))
    return data


def deserialize_proof(data):
    """dict → Proof

    와이어 워드로 펼친 뒤 decode_proof를 거치므로 좌표 범위와 곡선 소속을
    함께 확인한다.

    Raises:
        MalformedProof: 요소가 빠졌을 때
        PointNotOnCurve: 곡선 밖의 점이 있을 때
    """
    variant = ProofVariant.parse(data.get("variant"))
    points, scalars = LAYOUTS[variant]
    words = []
    try:
        for name in points:
            pair = data[name]
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise MalformedProof(f"{name}은 [x, y] 형태여야 합니다")
            words.extend(pair)
        for name in scalars:
            words.append(data[name])
    except KeyError as e:
        raise MalformedProof(f"증명 요소가 빠졌습니다: {e.args[0]}") from None
    return decode_proof(words, variant)


# ─── 결과 ───

def serialize_challenges(challenges):
    """ChallengeSet → dict[str, str]"""
    return {name: serialize_fr(value) for name, value in challenges.as_dict().items()}


def serialize_result(result):
    """VerificationResult → dict"""
    return {
        "accepted": result.accepted,
        "status": result.status.value,
        "variant": result.variant.value,
        "challenges": serialize_challenges(result.challenges),
        "queries": {k: serialize_fr(v) for k, v in result.queries.scalars().items()},
        "gas_used": result.gas_used,
    }


# ─── 표시 헬퍼 ───

def fr_short(val):
    """FR → 축약 문자열 (로그/표시용)"""
    if val is None:
        return "None"
    s = str(int(val))
    if len(s) <= 10:
        return s
    return s[:4] + "..." + s[-4:]
