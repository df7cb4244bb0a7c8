"""
ISEP Prover: 증명 생성
=======================

"left[i] == right[mapping(i)] (i ∈ positions_left)"를 배열을 드러내지 않고 증명한다.

**아이디어 (rational sumcheck / grand-sum)**:
  왼쪽 위치 i를 태그 ω_R^{mapping(i)}로, 오른쪽 위치 j를 태그 ω_Rʲ로 표시하면
  주장은 두 멀티셋 {(LVᵢ, tagᵢ)}와 {(RVⱼ, tagⱼ)}의 동등성이 된다.
  랜덤 β, γ에 대해

      Σᵢ 1/(β + LVᵢ + γ·tagᵢ) == Σⱼ 1/(β + RVⱼ + γ·tagⱼ)

  를 보이면 충분하다. 역수 값들을 보간한 L(x)의 상수항은 (1/N_L)·Σ이므로
  Verifier는 L(0)·N_L == R(0)·N_R만 확인하면 된다.

**L이 올바르게 만들어졌음을 보이는 몫**:
  도메인 위에서 L·(β + LV + γ·PM) - PL = 0  ⇔  Ql = (L·(β + LV + γ·PM) - PL) / Z_L
  (오른쪽은 태그 다항식으로 X 자체를 사용한다)

  ┌─────────────────────────────────────────────────────┐
  │  1단계: PP 해시, Statement 해시 흡수 → β, γ        │
  ├─────────────────────────────────────────────────────┤
  │  2-4단계: L, Ql, R, Qr 계산 및 커밋                 │
  │  5단계: [L]₁, [R]₁, [Ql]₁, [Qr]₁ 흡수 → δ, ε      │
  ├─────────────────────────────────────────────────────┤
  │  6단계: 9개 다항식을 δ에서 평가, ε로 일괄 열기      │
  │  7단계: 일괄 증명과 평가값 흡수 → ζ                │
  ├─────────────────────────────────────────────────────┤
  │  8단계: L, R을 0에서 평가, ζ로 일괄 열기            │
  └─────────────────────────────────────────────────────┘

사용 예시:
    >>> proof = prove(pp, witness, statement)
"""

import logging

from zkp.isep.kzg import batch_open, commit
from zkp.isep.polynomial import Polynomial
from zkp.isep.serialization import ByteReader, encode_fr, encode_g1
from zkp.isep.transcript import Label, Transcript
from zkp.isep.utils import batch_inverse

logger = logging.getLogger(__name__)


class Proof:
    """ISEP 증명 데이터 컨테이너.

    커밋먼트:
        l_commitment, r_commitment, ql_commitment, qr_commitment: G1 점

    δ에서의 평가값 (이 순서로 일괄 열기에 들어간다):
        l_at_delta, r_at_delta, ql_at_delta, qr_at_delta,
        lv_at_delta, rv_at_delta, pl_at_delta, pr_at_delta, pm_at_delta

    0에서의 평가값:
        l_at_zero, r_at_zero

    열기 증명:
        batch_proof_at_delta: 9개 다항식의 δ에서의 일괄 열기 증명
        batch_proof_at_zero: L, R의 0에서의 일괄 열기 증명
    """

    COMMITMENT_FIELDS = (
        "l_commitment", "r_commitment", "ql_commitment", "qr_commitment",
        "batch_proof_at_delta", "batch_proof_at_zero",
    )
    DELTA_FIELDS = (
        "l_at_delta", "r_at_delta", "ql_at_delta", "qr_at_delta",
        "lv_at_delta", "rv_at_delta", "pl_at_delta", "pr_at_delta", "pm_at_delta",
    )
    ZERO_FIELDS = ("l_at_zero", "r_at_zero")

    def __init__(self, backend):
        self.backend = backend
        for name in self.COMMITMENT_FIELDS + self.DELTA_FIELDS + self.ZERO_FIELDS:
            setattr(self, name, None)

    def evaluations_at_delta(self):
        return [getattr(self, name) for name in self.DELTA_FIELDS]

    def to_bytes(self):
        """6개의 G1 점, 9개의 δ 평가값, 2개의 0 평가값을 순서대로 이어 붙인다."""
        parts = [encode_g1(getattr(self, name), self.backend) for name in self.COMMITMENT_FIELDS]
        parts.extend(
            encode_fr(getattr(self, name), self.backend)
            for name in self.DELTA_FIELDS + self.ZERO_FIELDS
        )
        return b"".join(parts)

    @classmethod
    def from_bytes(cls, data, backend):
        """
        Raises:
            FailedToSerializeElement: 길이, 범위, 곡선 검사 실패
        """
        proof = cls(backend)
        reader = ByteReader(data, backend)
        for name in cls.COMMITMENT_FIELDS:
            setattr(proof, name, reader.read_g1())
        for name in cls.DELTA_FIELDS + cls.ZERO_FIELDS:
            setattr(proof, name, reader.read_fr())
        reader.finish()
        return proof

    def __eq__(self, other):
        if not isinstance(other, Proof):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()


# ─────────────────────────────────────────────────────────────────────
# 한쪽 배열에 대한 역수 다항식과 몫 다항식
# ─────────────────────────────────────────────────────────────────────

def compute_rational_polynomial(domain, positions, values, tags, beta, gamma, context):
    """위치 i에서 1/(β + valuesᵢ + γ·tagᵢ), 그 외 0인 벡터를 보간한다.

    Raises:
        FailedToInverseFieldElement: 분모가 0일 때
    """
    Fr = domain.backend.Fr
    denominators = [beta + values[i] + gamma * tags[i] for i in positions]
    inverses = batch_inverse(denominators, Fr, context=context)
    evals = [Fr(0)] * domain.size
    for i, inv in zip(positions, inverses):
        evals[i] = inv
    return Polynomial.from_evaluations(evals, domain)


def compute_quotient_polynomial(domain, rational, values, tag, indicator, beta, gamma):
    """Q = (rational·(β + values + γ·tag) - indicator) / Z_H.

    분자의 차수가 최대 2N - 2이므로 크기 2N 확장 도메인의 코셋에서 계산한다.
    """
    Fr = domain.backend.Fr
    coset = domain.extended(2).coset()
    rational_evals = coset.fft(rational.coeffs)
    value_evals = coset.fft(values.coeffs)
    tag_evals = coset.fft(tag.coeffs)
    indicator_evals = coset.fft(indicator.coeffs)

    numerator = [
        r * (beta + v + gamma * t) - p
        for r, v, t, p in zip(rational_evals, value_evals, tag_evals, indicator_evals)
    ]
    quotient_evals = domain.divide_by_vanishing_on_coset(numerator, coset)
    return Polynomial(coset.ifft(quotient_evals), Fr)


# ─────────────────────────────────────────────────────────────────────
# 증명 생성
# ─────────────────────────────────────────────────────────────────────

def prove(pp, witness, statement):
    """ISEP 증명을 생성한다.

    Args:
        pp: PublicParameters
        witness: Witness
        statement: derive_statement(pp, witness)의 결과

    Returns:
        Proof

    Raises:
        FailedToInverseFieldElement: β + value + γ·tag = 0 (무시할 수 있는 확률)
    """
    backend = pp.backend
    Fr = backend.Fr
    srs = pp.srs
    workers = pp.workers
    proof = Proof(backend)

    # ── 1단계: 바인딩 해시 흡수 → β, γ ──
    transcript = Transcript(backend)
    transcript.append_elements([
        (Label.PUBLIC_PARAMETERS_HASH, pp.hash_representation),
        (Label.STATEMENT_HASH, statement.hash_representation),
    ])
    beta = transcript.squeeze_challenge(Label.BETA)
    gamma = transcript.squeeze_challenge(Label.GAMMA)
    logger.debug("β, γ 생성")

    # ── 2-3단계: 왼쪽 (태그 = PM) ──
    poly_l = compute_rational_polynomial(
        pp.domain_l, pp.positions_left, witness.left_values, pp.position_tags,
        beta, gamma, context="왼쪽 역수 분모",
    )
    poly_ql = compute_quotient_polynomial(
        pp.domain_l, poly_l, witness.poly_left_values, pp.poly_position_mappings,
        pp.poly_positions_left, beta, gamma,
    )
    proof.l_commitment = commit(poly_l, srs, workers=workers)
    proof.ql_commitment = commit(poly_ql, srs, workers=workers)
    logger.debug("L, Ql 커밋 완료 (deg L=%d, deg Ql=%d)", poly_l.degree, poly_ql.degree)

    # ── 4단계: 오른쪽 (태그 = X) ──
    right_tags = {j: pp.domain_r.element(j) for j in pp.positions_right}
    poly_x = Polynomial([Fr(0), Fr(1)], Fr)
    poly_r = compute_rational_polynomial(
        pp.domain_r, pp.positions_right, witness.right_values, right_tags,
        beta, gamma, context="오른쪽 역수 분모",
    )
    poly_qr = compute_quotient_polynomial(
        pp.domain_r, poly_r, witness.poly_right_values, poly_x,
        pp.poly_positions_right, beta, gamma,
    )
    proof.r_commitment = commit(poly_r, srs, workers=workers)
    proof.qr_commitment = commit(poly_qr, srs, workers=workers)
    logger.debug("R, Qr 커밋 완료 (deg R=%d, deg Qr=%d)", poly_r.degree, poly_qr.degree)

    # ── 5단계: 커밋먼트 흡수 → δ, ε ──
    transcript.append_elements([
        (Label.L_COMMITMENT, proof.l_commitment),
        (Label.R_COMMITMENT, proof.r_commitment),
        (Label.QL_COMMITMENT, proof.ql_commitment),
        (Label.QR_COMMITMENT, proof.qr_commitment),
    ])
    delta = transcript.squeeze_challenge(Label.DELTA)
    epsilon = transcript.squeeze_challenge(Label.EPSILON)
    logger.debug("δ, ε 생성")

    # ── 6단계: δ에서 평가 + 일괄 열기 ──
    polys_at_delta = [
        poly_l, poly_r, poly_ql, poly_qr,
        witness.poly_left_values, witness.poly_right_values,
        pp.poly_positions_left, pp.poly_positions_right, pp.poly_position_mappings,
    ]
    for name, poly in zip(Proof.DELTA_FIELDS, polys_at_delta):
        setattr(proof, name, poly.evaluate(delta))
    proof.batch_proof_at_delta = batch_open(polys_at_delta, delta, epsilon, srs, workers=workers)

    # ── 7단계: 일괄 증명과 평가값 흡수 → ζ ──
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
    logger.debug("ζ 생성")

    # ── 8단계: 0에서 평가 + 일괄 열기 ──
    proof.l_at_zero = poly_l.coeffs[0]
    proof.r_at_zero = poly_r.coeffs[0]
    proof.batch_proof_at_zero = batch_open([poly_l, poly_r], Fr(0), zeta, srs, workers=workers)
    logger.debug("증명 생성 완료")

    return proof
