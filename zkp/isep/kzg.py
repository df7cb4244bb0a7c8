"""
KZG 다항식 커밋먼트 스킴
=========================

Kate-Zaverucha-Goldberg (KZG) 커밋먼트는 ISEP의 핵심 빌딩 블록이다.

  - 커밋먼트: C = p(τ)·G1 = Σᵢ cᵢ · [τⁱ]₁  (MSM)
  - 열기 증명: q(x) = (p(x) - y) / (x - z),  π = [q(τ)]₁
  - 검증: e(C - y·G1 + z·π, G2) == e(π, τ·G2)
    (e(C - y·G1, G2) == e(π, [τ - z]₂)를 G2 쪽 연산 없이 정리한 형태)

**일괄 열기 (Batch Opening)**:
  같은 점 z에서 여러 다항식 p₀, p₁, ...을 하나의 증명으로 연다.
  분리 챌린지 ρ로 결합한 p(x) = Σ ρᵏ·pₖ(x)의 열기 증명을 만든다.

  ρ는 반드시 모든 pₖ의 커밋먼트가 트랜스크립트에 들어간 **뒤에**
  도출되어야 한다. 그렇지 않으면 Prover가 오류가 상쇄되도록 다항식을
  골라낼 수 있다.

사용 예시:
    >>> C = commit(poly, srs)
    >>> y, proof = open_at(poly, z, srs)
    >>> verify_opening(C, proof, z, y, srs)  # True
"""

from zkp.isep.errors import SRSTooSmall
from zkp.isep.polynomial import Polynomial, divide_by_linear
from zkp.isep.utils import linear_combination, powers_of


def commit(poly, srs, workers=1):
    """다항식을 KZG 커밋한다: C = Σᵢ cᵢ · [τⁱ]₁.

    Raises:
        SRSTooSmall: 다항식 차수가 SRS 최대 차수를 초과할 때 (내부 크기 계산 버그)
    """
    if poly.degree > srs.max_degree:
        raise SRSTooSmall(poly.degree, srs.max_degree)
    return srs.backend.msm(srs.g1_powers, poly.coeffs, workers=workers)


def open_at(poly, point, srs, workers=1):
    """열기 증명(opening proof)을 생성한다.

    Returns:
        tuple: (p(z), π = [(p(τ) - p(z)) / (τ - z)]₁)
    """
    point = srs.backend.fr(point)
    quotient, evaluation = divide_by_linear(poly, point)
    return evaluation, commit(quotient, srs, workers=workers)


def batch_open(polys, point, separation, srs, workers=1):
    """여러 다항식을 같은 점 z에서 하나의 증명으로 연다.

    p(x) = Σ ρᵏ·pₖ(x) (k = 0, 1, ...)의 몫 (p(x) - p(z)) / (x - z)를 커밋한다.

    Args:
        polys: 다항식 리스트
        point: 열기 점 z
        separation: 분리 챌린지 ρ
        srs: SRS

    Returns:
        G1 점: 일괄 열기 증명 π
    """
    Fr = srs.backend.Fr
    point = srs.backend.fr(point)
    separation = srs.backend.fr(separation)
    batched = Polynomial.zero(Fr)
    for poly, sep_power in zip(polys, powers_of(separation, len(polys), Fr)):
        batched = batched + poly * sep_power
    quotient, _ = divide_by_linear(batched, point)
    return commit(quotient, srs, workers=workers)


def verify_opening(commitment, proof, point, evaluation, srs):
    """단일 KZG 열기 증명을 검증한다."""
    return verify_batch_opening([commitment], proof, point, [evaluation], 1, srs)


def verify_batch_opening(commitments, proof, point, evaluations, separation, srs):
    """일괄 열기 증명을 검증한다.

    검증 방정식:
        e(Σρᵏ·Cₖ - [Σρᵏ·yₖ]·G1 + z·π, G2) == e(π, τ·G2)

    Args:
        commitments: [C₀, C₁, ...]
        proof: 일괄 열기 증명 π
        point: 열기 점 z
        evaluations: 주장하는 평가값 [y₀, y₁, ...]
        separation: 분리 챌린지 ρ
        srs: SRS

    Returns:
        bool: 검증 성공 여부
    """
    backend = srs.backend
    Fr = backend.Fr
    point = backend.fr(point)
    separation = backend.fr(separation)

    sep_powers = powers_of(separation, len(commitments), Fr)
    combined_commitment = backend.msm(list(commitments), sep_powers)
    combined_evaluation = linear_combination(
        [backend.fr(y) for y in evaluations], separation, Fr
    )

    lhs_g1 = backend.ec_add(
        combined_commitment, backend.ec_neg(backend.ec_mul(backend.G1, combined_evaluation))
    )
    lhs_g1 = backend.ec_add(lhs_g1, backend.ec_mul(proof, point))

    lhs = backend.ec_pairing(srs.g2_powers[0], lhs_g1)
    rhs = backend.ec_pairing(srs.g2_powers[1], proof)
    return lhs == rhs
