"""
Tokamak 페어링 검사 (Pairing Checker)
=======================================

검증 등식

    e(LHS+AUX, [1]₂) · e(B, [α⁴]₂)
    ─────────────────────────────────────────────  =  e(O_pub,[γ]₂)·e(O_mid,[η]₂)·e(O_prv,[δ]₂)
    e(U, [α]₂) · e(V, [α²]₂) · e(W, [α³]₂)            · e(RHS1,[x]₂)·e(RHS2,[y]₂)

의 분모와 우변 G2 점을 부호 반전하여 "페어링 곱 == 1" 한 번의 호출로 접는다.

    e(LHS+AUX,[1]₂)·e(B,[α⁴]₂)·e(U,-[α]₂)·e(V,-[α²]₂)·e(W,-[α³]₂)
    ·e(O_pub,-[γ]₂)·e(O_mid,-[η]₂)·e(O_prv,-[δ]₂)·e(RHS1,-[x]₂)·e(RHS2,-[y]₂) == 1
"""


def pairing_pairs(curve, aggregate, queries, proof, vk):
    """페어링 곱 검사에 넘길 (G1, G2) 쌍 리스트를 만든다."""
    lhs_total = curve.g1_add(aggregate.lhs, aggregate.aux)
    return [
        (lhs_total, vk.g2),
        (proof.b_comm, vk.alpha4_g2),
        (proof.u_comm, curve.g2_neg(vk.alpha_g2)),
        (proof.v_comm, curve.g2_neg(vk.alpha2_g2)),
        (proof.w_comm, curve.g2_neg(vk.alpha3_g2)),
        (queries.o_pub_comm, curve.g2_neg(vk.gamma_g2)),
        (proof.o_mid_comm, curve.g2_neg(vk.eta_g2)),
        (proof.o_prv_comm, curve.g2_neg(vk.delta_g2)),
        (aggregate.rhs1, curve.g2_neg(vk.x_g2)),
        (aggregate.rhs2, curve.g2_neg(vk.y_g2)),
    ]


def check_pairing(curve, aggregate, queries, proof, vk):
    """최종 페어링 검사.

    Returns:
        bool: 페어링 곱이 GT의 항등원이면 True

    Raises:
        HostPrimitiveFailure: 페어링 서비스 실패 (ResourceExhausted 포함).
            거부(False)와는 구분된다.
    """
    return curve.pairing_check(pairing_pairs(curve, aggregate, queries, proof, vk)) is True
