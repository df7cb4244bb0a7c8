"""
ISEP Verifier: 증명 검증
=========================

Prover의 트랜스크립트 순서를 그대로 재현하여 β, γ, δ, ε, ζ를 다시 만든 뒤
세 가지 검사를 정해진 순서로 수행한다. 처음 실패한 검사가 거부 사유가 된다.

  1. 몫 관계 + δ에서의 일괄 열기 (Pairing1Failed)
       Ql(δ) == [L(δ)·(β + LV(δ) + γ·PM(δ)) - PL(δ)] / (δ^{N_L} - 1)
       Qr(δ) == [R(δ)·(β + RV(δ) + γ·δ)     - PR(δ)] / (δ^{N_R} - 1)
       e(Σεᵏ·Cₖ - [Σεᵏ·yₖ]·G1 + δ·Π, G2) == e(Π, τ·G2)
  2. 0에서의 일괄 열기 (Pairing2Failed)
       e(C_L + ζ·C_R - [L(0) + ζ·R(0)]·G1, G2) == e(Π₀, τ·G2)
  3. Grand-sum 동등성 (EqualityCheckFailed)
       L(0)·N_L == R(0)·N_R

사용 예시:
    >>> verify(pp, statement, proof)  # True 또는 VerificationError
"""

import logging

from zkp.isep.errors import EqualityCheckFailed, Pairing1Failed, Pairing2Failed
from zkp.isep.kzg import verify_batch_opening
from zkp.isep.transcript import Label, Transcript
from zkp.isep.utils import batch_inverse

logger = logging.getLogger(__name__)


def verify(pp, statement, proof):
    """ISEP 증명을 검증한다.

    Returns:
        True: 모든 검사 통과

    Raises:
        Pairing1Failed, Pairing2Failed, EqualityCheckFailed: 검증 실패
        FailedToInverseFieldElement: δ^N - 1 = 0 (δ가 도메인 원소인 경우)
    """
    backend = pp.backend
    Fr = backend.Fr
    srs = pp.srs

    # ── 챌린지 재현 ──
    transcript = Transcript(backend)
    transcript.append_elements([
        (Label.PUBLIC_PARAMETERS_HASH, pp.hash_representation),
        (Label.STATEMENT_HASH, statement.hash_representation),
    ])
    beta = transcript.squeeze_challenge(Label.BETA)
    gamma = transcript.squeeze_challenge(Label.GAMMA)

    transcript.append_elements([
        (Label.L_COMMITMENT, proof.l_commitment),
        (Label.R_COMMITMENT, proof.r_commitment),
        (Label.QL_COMMITMENT, proof.ql_commitment),
        (Label.QR_COMMITMENT, proof.qr_commitment),
    ])
    delta = transcript.squeeze_challenge(Label.DELTA)
    epsilon = transcript.squeeze_challenge(Label.EPSILON)

    transcript.append_element(Label.BATCH_PROOF_AT_DELTA, proof.batch_proof_at_delta)
    transcript.append_elements([
        (Label.L_AT_DELTA, proof.l_at_delta),
        (Label.R_AT_DELTA, proof.r_at_delta),
        (Label.QL_AT_DELTA, proof.ql_at_delta),
        (Label.QR_AT_DELTA, proof.qr_at_delta),
        (Label.LV_AT_DELTA, proof.lv_at_delta),
        (Label.RV_AT_DELTA, proof.rv_at_delta),
        (Label.PL_AT_DELTA, proof.pl_at_delta),
        (Label.PR_AT_DELTA, proof.pr_at_delta),
        (Label.PM_AT_DELTA, proof.pm_at_delta),
    ])
    zeta = transcript.squeeze_challenge(Label.ZETA)

    # ── 검사 1: 몫 관계 + δ에서의 일괄 열기 ──
    inv_vanishing_l, inv_vanishing_r = batch_inverse(
        [
            pp.domain_l.evaluate_vanishing_polynomial(delta),
            pp.domain_r.evaluate_vanishing_polynomial(delta),
        ],
        Fr,
        context="δ에서의 소거 다항식 값",
    )
    ql_expected = (
        proof.l_at_delta * (beta + proof.lv_at_delta + gamma * proof.pm_at_delta)
        - proof.pl_at_delta
    ) * inv_vanishing_l
    qr_expected = (
        proof.r_at_delta * (beta + proof.rv_at_delta + gamma * delta)
        - proof.pr_at_delta
    ) * inv_vanishing_r
    if ql_expected != proof.ql_at_delta or qr_expected != proof.qr_at_delta:
        logger.warning("검증 실패: δ에서의 몫 관계 불일치")
        raise Pairing1Failed("δ에서의 몫 관계가 성립하지 않습니다")

    commitments_at_delta = [
        proof.l_commitment,
        proof.r_commitment,
        proof.ql_commitment,
        proof.qr_commitment,
        statement.left_commitment,
        statement.right_commitment,
        pp.positions_left_commitment,
        pp.positions_right_commitment,
        pp.position_mappings_commitment,
    ]
    if not verify_batch_opening(
        commitments_at_delta, proof.batch_proof_at_delta, delta,
        proof.evaluations_at_delta(), epsilon, srs,
    ):
        logger.warning("검증 실패: δ에서의 일괄 열기 페어링")
        raise Pairing1Failed("δ에서의 일괄 열기 페어링 검사에 실패했습니다")

    # ── 검사 2: 0에서의 일괄 열기 ──
    if not verify_batch_opening(
        [proof.l_commitment, proof.r_commitment], proof.batch_proof_at_zero, Fr(0),
        [proof.l_at_zero, proof.r_at_zero], zeta, srs,
    ):
        logger.warning("검증 실패: 0에서의 일괄 열기 페어링")
        raise Pairing2Failed("0에서의 일괄 열기 페어링 검사에 실패했습니다")

    # ── 검사 3: grand-sum ──
    if proof.l_at_zero * pp.size_left_values != proof.r_at_zero * pp.size_right_values:
        logger.warning("검증 실패: L(0)·N_L ≠ R(0)·N_R")
        raise EqualityCheckFailed("L(0)·N_L과 R(0)·N_R이 다릅니다")

    logger.debug("검증 성공")
    return True
