"""
검증기 예외 분류
================

검증 호출이 실패하는 경로를 호출자가 구분할 수 있도록 예외를 나눈다.

  - MalformedProof:       워드 수/바이트 길이/공개 입력 수가 스키마와 다름
  - PointNotOnCurve:      증명의 G1 점이 곡선 방정식을 만족하지 않음
  - DivisionByZero:       챌린지 충돌로 분모가 0이 됨 (무시할 만한 확률)
  - HostPrimitiveFailure: 곡선 연산 서비스 자체의 실패
  - ResourceExhausted:    가스(자원) 한도 초과
  - ProofRejected:        페어링 검사가 정상적으로 False를 반환함

ProofRejected는 assert_valid()에서만 발생한다. verify()는 거부를 예외가 아닌
False로 돌려준다. 모든 실패는 재시도 없이 즉시 호출자에게 전파된다.
"""


class VerifierError(Exception):
    """검증기 예외의 공통 부모 클래스."""

    status = "error"


class MalformedProof(VerifierError, ValueError):
    """증명 또는 공개 입력의 형식이 프로토콜 스키마와 맞지 않는다."""

    status = "malformed_proof"


class PointNotOnCurve(VerifierError, ValueError):
    """신뢰할 수 없는 입력의 점이 곡선 위에 있지 않다."""

    status = "point_not_on_curve"


class DivisionByZero(VerifierError, ZeroDivisionError):
    """검증 중 분모가 0이 되었다 (예: χ = 1)."""

    status = "division_by_zero"


class HostPrimitiveFailure(VerifierError):
    """곡선 연산/페어링 서비스가 실패했다. 증명의 유효성과는 무관하다."""

    status = "host_failure"


class ResourceExhausted(HostPrimitiveFailure):
    """가스 한도를 초과하여 검증이 중단되었다."""

    status = "resource_exhausted"


class ProofRejected(VerifierError):
    """형식은 올바르지만 페어링 검사에서 거부된 증명."""

    status = "rejected"
