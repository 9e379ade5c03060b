"""
여러 증명의 동시 검증
=====================

서로 독립적인 검증 호출을 스레드 풀에서 실행한다. 각 호출은 자신만의
트랜스크립트와 곡선 서비스(가스 계량기)를 사용하고, 검증 키는 읽기 전용으로
공유한다. 결과는 입력 순서를 유지한다.

사용 예시:
    >>> results = verify_batch([(pub1, proof1), (pub2, proof2)], vk, "three_round")
    >>> [bool(r) for r in results]
"""

import logging
from concurrent.futures import ThreadPoolExecutor

from tokamak_verifier.errors import VerifierError
from tokamak_verifier.verifier import get_verifier


logger = logging.getLogger(__name__)


def _verify_one(verifier, public_inputs, proof):
    try:
        return verifier.verify_detailed(public_inputs, proof)
    except VerifierError as e:
        return e


def verify_batch(jobs, vk, variant, max_workers=4, gas_limit=None):
    """(공개 입력, 증명) 쌍들을 동시에 검증한다.

    Args:
        jobs: (public_inputs, proof) 튜플의 리스트
        vk: VerificationKey
        variant: ProofVariant 또는 그 값 문자열
        max_workers: 스레드 수
        gas_limit: 호출당 가스 한도

    Returns:
        list: 각 항목은 VerificationResult 또는 발생한 VerifierError
    """
    verifier = get_verifier(variant, vk, gas_limit=gas_limit)
    jobs = list(jobs)
    with ThreadPoolExecutor(max_workers=max(1, int(max_workers))) as executor:
        futures = [
            executor.submit(_verify_one, verifier, public_inputs, proof)
            for public_inputs, proof in jobs
        ]
        results = [f.result() for f in futures]

    accepted = sum(1 for r in results if not isinstance(r, VerifierError) and r.accepted)
    logger.info("batch finished: jobs=%d accepted=%d", len(jobs), accepted)
    return results
