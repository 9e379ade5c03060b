"""
Tokamak 검증기 Flask Blueprint
================================

검증 키 등록/조회, 증명 검증, 검증 기록 조회 엔드포인트 (JSON).

  POST /verifier/keys              검증 키 등록 {name, vk}
  GET  /verifier/keys/<name>       검증 키 조회
  POST /verifier/verify            증명 검증 {key, variant, public_inputs, proof}
  GET  /verifier/results           검증 기록 (최신순)

검증 결과와 실패 모두 results 테이블에 기록한다.
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from tinydb import Query

from tokamak_verifier.errors import (
    DivisionByZero, HostPrimitiveFailure, MalformedProof, PointNotOnCurve,
    VerifierError,
)
from tokamak_verifier.proof import ProofVariant, decode_public_inputs
from tokamak_verifier.verifier import get_verifier

from verifier_serializers import (
    serialize_vk, deserialize_vk,
    deserialize_proof,
    serialize_fr_list,
    serialize_result,
    fr_short,
)

verifier_bp = Blueprint('verifier', __name__, url_prefix='/verifier')

logger = logging.getLogger(__name__)

DATA = Query()

# DB는 app.py에서 주입
DB = None


def init_verifier_bp(db):
    """app.py에서 DB를 주입받는다."""
    global DB
    DB = db


# 예외 → HTTP 상태 코드
ERROR_STATUS = (
    (MalformedProof, 400),
    (PointNotOnCurve, 400),
    (DivisionByZero, 422),
    (HostPrimitiveFailure, 503),
)


def error_status(exc):
    for exc_type, code in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return code
    return 500


# ─── DB 헬퍼 ───

def keys_table():
    return DB.table("keys")


def results_table():
    return DB.table("results")


def db_get_key(name):
    """DB에서 이름으로 검증 키 dict를 조회한다."""
    result = keys_table().search(DATA.name == name)
    if not result:
        return None
    return result[0].get("vk")


def db_set_key(name, vk_data):
    """DB에 검증 키를 저장한다 (같은 이름이면 덮어쓴다)."""
    keys_table().upsert({"name": name, "vk": vk_data}, DATA.name == name)


def db_log_result(record):
    results_table().insert(record)


def error_response(message, code):
    return jsonify({"error": message}), code


# ──────────────────────────────────────────────────────────────
# 검증 키
# ──────────────────────────────────────────────────────────────

@verifier_bp.route("/keys", methods=["POST"])
def register_key():
    """검증 키를 등록한다. 외부 입력이므로 곡선 소속까지 확인한다."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    name = body.get("name")
    if not name or not isinstance(name, str):
        return error_response("name이 필요합니다", 400)
    if "vk" not in body:
        return error_response("vk가 필요합니다", 400)

    try:
        vk = deserialize_vk(body["vk"], check_points=True)
    except ValueError as e:
        return error_response(str(e), 400)

    db_set_key(name, serialize_vk(vk))
    logger.info("verification key registered: name=%s %r", name, vk)
    return jsonify({"name": name, "n": vk.n, "s_max": vk.s_max,
                    "m_i": vk.m_i, "l": vk.l}), 201


@verifier_bp.route("/keys/<name>")
def get_key(name):
    """등록된 검증 키를 조회한다."""
    vk_data = db_get_key(name)
    if vk_data is None:
        return error_response(f"등록되지 않은 키: {name}", 404)
    return jsonify({"name": name, "vk": vk_data})


# ──────────────────────────────────────────────────────────────
# 검증
# ──────────────────────────────────────────────────────────────

@verifier_bp.route("/verify", methods=["POST"])
def verify_proof():
    """증명을 검증하고 결과를 기록한다."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    key_name = body.get("key")
    vk_data = db_get_key(key_name) if key_name else None
    if vk_data is None:
        return error_response(f"등록되지 않은 키: {key_name}", 404)

    record = {"key": key_name, "variant": body.get("variant")}
    try:
        variant = ProofVariant.parse(body.get("variant", "three_round"))
        record["variant"] = variant.value

        # 저장된 키는 등록 시 이미 검사했다.
        vk = deserialize_vk(vk_data)
        raw_inputs = body.get("public_inputs", [])
        if not isinstance(raw_inputs, (list, str)):
            raise MalformedProof("public_inputs는 리스트 또는 16진 문자열이어야 합니다")
        public_inputs = decode_public_inputs(raw_inputs, vk)
        record["public_inputs"] = serialize_fr_list(public_inputs)

        proof_data = body.get("proof")
        if not isinstance(proof_data, dict):
            raise MalformedProof("proof는 요소 이름별 객체여야 합니다")
        proof = deserialize_proof(dict(proof_data, variant=variant.value))

        verifier = get_verifier(variant, vk, gas_limit=current_app.config.get("GAS_LIMIT"))
        result = verifier.verify_detailed(public_inputs, proof)
    except VerifierError as e:
        code = error_status(e)
        record.update({"status": e.status, "error": str(e)})
        db_log_result(record)
        return jsonify({"accepted": False, "status": e.status, "error": str(e)}), code

    payload = serialize_result(result)
    record.update({
        "status": payload["status"],
        "accepted": payload["accepted"],
        "gas_used": payload["gas_used"],
        "chi": fr_short(result.challenges.chi),
        "zeta": fr_short(result.challenges.zeta),
    })
    db_log_result(record)
    return jsonify(payload), 200


@verifier_bp.route("/results")
def list_results():
    """검증 기록을 최신순으로 반환한다. ?limit=N 으로 개수를 제한한다."""
    limit = request.args.get("limit", default=50, type=int)
    rows = [dict(row, id=row.doc_id) for row in results_table().all()]
    rows.sort(key=lambda r: r["id"], reverse=True)
    return jsonify({"results": rows[:max(0, limit)]})
