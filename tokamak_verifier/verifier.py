"""
Tokamak Verifier
==================

Tokamak zk-SNARK 증명을 검증한다.

**검증 과정** (엄격한 순차 실행, 각 단계는 이전 단계의 출력만 사용):
  1. 디코딩: 와이어 인코딩 → 공개 입력(FR) + Proof, 곡선 소속 검사
  2. 트랜스크립트 재생: θ₀, θ₁, θ₂, κ₀, χ, ζ, κ₁, κ₂
  3. 질의 준비: t_n(χ), t_smax(ζ), t_mI(χ), K0(χ), A_pub, [F], [G], [O_pub], [A]
  4. 집계: LHS, AUX, RHS1, RHS2
  5. 페어링 검사: 10쌍의 페어링 곱 == 1

**변형별 트랜스크립트 라운드**:

  TWO_ROUND
    R1: U,V,W,O_mid,O_prv,B,R,Q_AX,Q_AY,Q_CX,Q_CY → θ₀,θ₁,θ₂,κ₀,χ,ζ
    R2: R_xy,R'_xy,R''_xy,V_xy,M_χ,M_ζ,N_χ,N_ζ     → κ₁,κ₂

  THREE_ROUND (공개 입력 해싱)
    R1: a_0..a_{l-1}, U,V,W,O_mid,O_prv,B          → θ₀,θ₁,θ₂
    R2: R,Q_AX,Q_AY,Q_CX,Q_CY                      → κ₀,χ,ζ
    R3: R_xy,R'_xy,R''_xy,V_xy,M_χ,M_ζ,N_χ,N_ζ     → κ₁,κ₂

  PUBLIC_COMMITMENT ([A]₁ 슬롯)
    THREE_ROUND과 같되 R1에서 공개 입력 대신 [A]₁을 흡수한다.

  마지막 열기 증명 Π_χ, Π_ζ 뒤에는 챌린지가 없으므로 흡수하지 않는다.

**결과 구분**:
  - 페어링 검사가 False → verify()는 False (거부, 예외 아님)
  - 형식 오류/곡선 밖의 점/0 나눗셈/곡선 서비스 실패 → 각 예외를 전파

사용 예시:
    >>> from tokamak_verifier.verifier import verify
    >>> verify(proof_bytes, public_inputs, vk, variant="three_round")  # True/False
"""

import enum
import logging

from tokamak_verifier.aggregation import build_aggregate
from tokamak_verifier.errors import ProofRejected, VerifierError
from tokamak_verifier.host import CurveService
from tokamak_verifier.pairing import check_pairing
from tokamak_verifier.proof import ProofVariant, decode
from tokamak_verifier.queries import prepare_queries
from tokamak_verifier.transcript import ChallengeSet, Transcript


logger = logging.getLogger(__name__)


class VerificationStatus(enum.Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class VerificationResult:
    """한 번의 검증 결과.

    속성:
        accepted: bool
        status: VerificationStatus
        variant: ProofVariant
        challenges: ChallengeSet (디버깅/테스트용)
        queries: Queries
        gas_used: 곡선 서비스가 소비한 가스
    """

    def __init__(self, accepted, variant, challenges, queries, gas_used):
        self.accepted = accepted
        self.status = VerificationStatus.ACCEPTED if accepted else VerificationStatus.REJECTED
        self.variant = variant
        self.challenges = challenges
        self.queries = queries
        self.gas_used = gas_used

    def __bool__(self):
        return self.accepted

    def __repr__(self):
        return (
            f"VerificationResult(status={self.status.value}, "
            f"variant={self.variant.value}, gas_used={self.gas_used})"
        )


class Verifier:
    """변형 공통 검증 파이프라인.

    하위 클래스는 absorb_rounds()로 트랜스크립트 라운드 구조를,
    public_commitment()로 [A]의 출처를 정의한다.

    속성:
        vk: VerificationKey (여러 호출/스레드에서 공유)
        gas_limit: 호출당 가스 한도 (None이면 무제한)
    """

    variant = None

    def __init__(self, vk, gas_limit=None):
        self.vk = vk
        self.gas_limit = gas_limit

    # ── 1. 디코딩 ──

    def decode(self, raw_public_inputs, raw_proof):
        return decode(raw_public_inputs, raw_proof, self.vk, self.variant)

    # ── 2. 트랜스크립트 ──

    def absorb_rounds(self, transcript, public_inputs, proof):
        """라운드별 흡수와 챌린지 생성을 수행하고 ChallengeSet을 반환한다."""
        raise NotImplementedError

    def derive_challenges(self, public_inputs, proof):
        """새 트랜스크립트로 이 증명의 챌린지를 재생한다."""
        return self.absorb_rounds(Transcript(), public_inputs, proof)

    @staticmethod
    def absorb_openings(transcript, proof):
        """마지막 라운드: 평가값과 R의 이동된 열기 증명 → κ₁, κ₂."""
        transcript.absorb_scalars([
            proof.r_xy, proof.r_prime_xy, proof.r_double_prime_xy, proof.v_xy,
        ])
        transcript.absorb_points([
            proof.m_chi_comm, proof.m_zeta_comm, proof.n_chi_comm, proof.n_zeta_comm,
        ])
        return transcript.squeeze(0), transcript.squeeze(1)

    # ── 3. [A]의 출처 ──

    def public_commitment(self, public_inputs, proof):
        """[A]₁. None이면 질의 준비 단계가 lagrange_g1로부터 계산한다."""
        return None

    # ── 전체 파이프라인 ──

    def verify_detailed(self, public_inputs, proof):
        """검증을 수행하고 VerificationResult를 반환한다.

        Raises:
            MalformedProof, PointNotOnCurve, DivisionByZero,
            HostPrimitiveFailure (ResourceExhausted 포함)
        """
        curve = CurveService(gas_limit=self.gas_limit)
        try:
            public_inputs, proof = self.decode(public_inputs, proof)
            challenges = self.derive_challenges(public_inputs, proof)
            logger.debug("variant=%s challenges=%r", self.variant.value, challenges)

            queries = prepare_queries(
                curve, challenges, proof, public_inputs, self.vk,
                a_comm=self.public_commitment(public_inputs, proof),
            )
            logger.debug(
                "queries: %s",
                {k: int(v) for k, v in queries.scalars().items()},
            )

            aggregate = build_aggregate(curve, challenges, queries, proof, self.vk)
            accepted = check_pairing(curve, aggregate, queries, proof, self.vk)
        except VerifierError as e:
            logger.warning(
                "verification aborted: variant=%s error=%s status=%s: %s",
                self.variant.value, type(e).__name__, e.status, e,
            )
            raise

        result = VerificationResult(
            accepted=accepted,
            variant=self.variant,
            challenges=challenges,
            queries=queries,
            gas_used=curve.gas_used,
        )
        logger.info(
            "verification finished: variant=%s status=%s gas_used=%d",
            self.variant.value, result.status.value, result.gas_used,
        )
        return result

    def verify(self, public_inputs, proof):
        """증명이 유효하면 True, 페어링 검사에서 거부되면 False."""
        return self.verify_detailed(public_inputs, proof).accepted

    def assert_valid(self, public_inputs, proof):
        """거부도 예외(ProofRejected)로 알리는 엄격한 버전."""
        result = self.verify_detailed(public_inputs, proof)
        if not result.accepted:
            raise ProofRejected(f"{self.variant.value} 증명이 페어링 검사에서 거부되었습니다")
        return result


class TwoRoundVerifier(Verifier):
    """2라운드 트랜스크립트. 공개 입력은 [A], [O_pub]를 통해서만 결합된다."""

    variant = ProofVariant.TWO_ROUND

    def absorb_rounds(self, transcript, public_inputs, proof):
        transcript.absorb_points([
            proof.u_comm, proof.v_comm, proof.w_comm,
            proof.o_mid_comm, proof.o_prv_comm,
            proof.b_comm, proof.r_comm,
            proof.q_ax_comm, proof.q_ay_comm,
            proof.q_cx_comm, proof.q_cy_comm,
        ])
        theta0, theta1, theta2, kappa0, chi, zeta = transcript.squeeze_many(6)

        kappa1, kappa2 = self.absorb_openings(transcript, proof)
        return ChallengeSet(theta0, theta1, theta2, kappa0, kappa1, kappa2, chi, zeta)


class ThreeRoundVerifier(Verifier):
    """3라운드 트랜스크립트. 첫 라운드에서 공개 입력을 해싱한다."""

    variant = ProofVariant.THREE_ROUND

    def absorb_first_round_binding(self, transcript, public_inputs, proof):
        transcript.absorb_scalars(public_inputs)

    def absorb_rounds(self, transcript, public_inputs, proof):
        # Round 1: 공개 입력 결합 + 와이어/출력 커밋먼트
        self.absorb_first_round_binding(transcript, public_inputs, proof)
        transcript.absorb_points([
            proof.u_comm, proof.v_comm, proof.w_comm,
            proof.o_mid_comm, proof.o_prv_comm, proof.b_comm,
        ])
        theta0, theta1, theta2 = transcript.squeeze_many(3)

        # Round 2: 누적자와 몫 커밋먼트
        transcript.absorb_points([
            proof.r_comm,
            proof.q_ax_comm, proof.q_ay_comm,
            proof.q_cx_comm, proof.q_cy_comm,
        ])
        kappa0, chi, zeta = transcript.squeeze_many(3)

        # Round 3: 평가값과 이동된 열기 증명
        kappa1, kappa2 = self.absorb_openings(transcript, proof)
        return ChallengeSet(theta0, theta1, theta2, kappa0, kappa1, kappa2, chi, zeta)


class PublicCommitmentVerifier(ThreeRoundVerifier):
    """증명에 공개 입력 커밋먼트 [A]₁ 슬롯이 있는 변형."""

    variant = ProofVariant.PUBLIC_COMMITMENT

    def absorb_first_round_binding(self, transcript, public_inputs, proof):
        transcript.absorb_point(proof.a_comm)

    def public_commitment(self, public_inputs, proof):
        return proof.a_comm


VERIFIERS = {
    ProofVariant.TWO_ROUND: TwoRoundVerifier,
    ProofVariant.THREE_ROUND: ThreeRoundVerifier,
    ProofVariant.PUBLIC_COMMITMENT: PublicCommitmentVerifier,
}


def get_verifier(variant, vk, gas_limit=None):
    """변형에 맞는 Verifier 인스턴스를 반환한다."""
    return VERIFIERS[ProofVariant.parse(variant)](vk, gas_limit=gas_limit)


def verify(proof, public_inputs, vk, variant=ProofVariant.THREE_ROUND, gas_limit=None):
    """Tokamak 증명을 검증한다.

    Args:
        proof: Proof 객체 또는 와이어 인코딩 (bytes / 16진 문자열 / 워드 리스트)
        public_inputs: 공개 입력 리스트 (정수, FR, 또는 16진 문자열)
        vk: VerificationKey
        variant: ProofVariant 또는 그 값 문자열
        gas_limit: 가스 한도 (None이면 무제한)

    Returns:
        bool: 검증 성공 여부
    """
    return get_verifier(variant, vk, gas_limit=gas_limit).verify(public_inputs, proof)
