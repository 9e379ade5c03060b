import os
import random
import sys

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from tokamak_verifier.aggregation import build_aggregate
from tokamak_verifier.field import FR, G1, Z1, CURVE_ORDER
from tokamak_verifier.host import CurveService
from tokamak_verifier.proof import LAYOUTS, Proof, ProofVariant
from tokamak_verifier.queries import linear_combination, prepare_queries
from tokamak_verifier.trusted_setup import generate_setup
from tokamak_verifier.verifier import get_verifier


# ── 테스트 상수 ──
SETUP_SEED = 1234

# 장난감 회로: n=4, s_max=4, m_I=2, 공개 입력 1개
TOY_SHAPE = {"n": 4, "s_max": 4, "m_i": 2, "l": 1}
TOY_PUBLIC_INPUTS = [35]

# 공개 입력 2개 회로 (ω_l = -1)
PAIR_SHAPE = {"n": 8, "s_max": 2, "m_i": 4, "l": 2}
PAIR_PUBLIC_INPUTS = [3, 35]


def simulate_proof(vk, toxic, variant, public_inputs, seed=0):
    """toxic waste로 검증을 통과하는 증명을 만든다 (트랩도어 시뮬레이터).

    Π_χ, Π_ζ는 트랜스크립트에 흡수되지 않는다. 나머지 요소를 무작위로 정해
    챌린지를 고정한 뒤, 페어링 등식을 G1 위의 등식

        LHS + AUX + α⁴B - αU - α²V - α³W - γO_pub - ηO_mid - δO_prv
            - x·RHS1 - y·RHS2 = 0

    으로 바꾸어 Π_ζ를 무작위로 고르고 Π_χ를 푼다.
    """
    rng = random.Random(seed)
    curve = CurveService()
    variant = ProofVariant.parse(variant)
    public_inputs = [FR(a) for a in public_inputs]
    points, scalars = LAYOUTS[variant]

    def rand_scalar():
        return FR(rng.randrange(1, CURVE_ORDER))

    elements = {}
    for name in points:
        elements[name] = curve.g1_mul(G1, rand_scalar())
    for name in scalars:
        elements[name] = rand_scalar()
    elements["pi_chi_comm"] = Z1
    elements["pi_zeta_comm"] = Z1
    if variant is ProofVariant.PUBLIC_COMMITMENT:
        elements["a_comm"] = linear_combination(curve, zip(vk.lagrange_g1, public_inputs))
    proof = Proof(variant, **elements)

    verifier = get_verifier(variant, vk)
    challenges = verifier.derive_challenges(public_inputs, proof)
    queries = prepare_queries(
        curve, challenges, proof, public_inputs, vk,
        a_comm=verifier.public_commitment(public_inputs, proof),
    )
    aggregate = build_aggregate(curve, challenges, queries, proof, vk)

    alpha = toxic.alpha
    alpha2 = alpha * alpha
    residue = linear_combination(curve, [
        (aggregate.lhs, FR(1)),
        (aggregate.aux, FR(1)),
        (proof.b_comm, alpha2 * alpha2),
        (proof.u_comm, -alpha),
        (proof.v_comm, -alpha2),
        (proof.w_comm, -(alpha2 * alpha)),
        (queries.o_pub_comm, -toxic.gamma),
        (proof.o_mid_comm, -toxic.eta),
        (proof.o_prv_comm, -toxic.delta),
        (aggregate.rhs1, -toxic.x),
        (aggregate.rhs2, -toxic.y),
    ])

    # residue + κ2(χ - x)Π_χ + κ2(ζ - y)Π_ζ = 0
    kappa2 = challenges.kappa2
    pi_zeta = curve.g1_mul(G1, rand_scalar())
    pi_chi = curve.g1_mul(
        curve.g1_add(residue, curve.g1_mul(pi_zeta, kappa2 * (challenges.zeta - toxic.y))),
        FR(1) / (kappa2 * (toxic.x - challenges.chi)),
    )
    return proof.copy(pi_chi_comm=pi_chi, pi_zeta_comm=pi_zeta)


@pytest.fixture(scope="session")
def toy_setup():
    """장난감 회로의 (검증 키, toxic waste)."""
    return generate_setup(seed=SETUP_SEED, **TOY_SHAPE)


@pytest.fixture(scope="session")
def toy_vk(toy_setup):
    return toy_setup[0]


@pytest.fixture(scope="session")
def toxic(toy_setup):
    return toy_setup[1]


@pytest.fixture(scope="session")
def pair_setup():
    """공개 입력 2개 회로의 (검증 키, toxic waste)."""
    return generate_setup(seed=SETUP_SEED + 1, **PAIR_SHAPE)


@pytest.fixture(scope="session")
def simulated_proofs(toy_vk, toxic):
    """변형별로 검증을 통과하는 증명."""
    return {
        variant: simulate_proof(toy_vk, toxic, variant, TOY_PUBLIC_INPUTS, seed=i)
        for i, variant in enumerate(ProofVariant)
    }


@pytest.fixture(scope="session")
def simulate():
    return simulate_proof
