"""
ISEP 공개 파라미터 (전처리)
============================

배열 크기와 위치 매핑이 정해지면 Prover와 Verifier가 공유하는 공개 파라미터를
한 번만 계산한다. 같은 형태(shape)의 모든 증명/검증에서 읽기 전용으로 재사용된다.

**전처리 출력물**:
  - SRS: 최대 차수 max(N_L, N_R)
  - 도메인: domain_l (크기 N_L), domain_r (크기 N_R)
  - 위치 지시 다항식: PL(ωᵢ) = 1 (i ∈ positions_left), 그 외 0.  PR도 동일
  - 매핑 다항식: PM(ω_Lᵢ) = ω_R^{mapping(i)} (i ∈ positions_left), 그 외 0
  - 커밋먼트: [PL]₁, [PR]₁, [PM]₁, [Z_L]₁, [Z_R]₁
  - hash_representation: 위 모든 것의 Blake2b-512 해시 (트랜스크립트의 첫 원소)

**위치 태그**:
  왼쪽 위치 i는 ω_R^{mapping(i)}로, 오른쪽 위치 j는 ω_Rʲ로 태그된다.
  두 태그가 같아야 (값, 태그) 멀티셋이 일치할 수 있으므로
  "left[i] == right[mapping(i)]"라는 주장이 멀티셋 동등성으로 바뀐다.

사용 예시:
    >>> config = PublicParametersConfig(
    ...     size_left_values=8, size_right_values=16,
    ...     positions_left=[0, 2, 4, 6], positions_right=[0, 4, 8, 12],
    ...     position_mappings={0: 0, 2: 4, 4: 8, 6: 12},
    ... )
    >>> pp = build_public_parameters(config)
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Sequence

from zkp.isep.backend import get_backend
from zkp.isep.domain import EvaluationDomain
from zkp.isep.errors import (
    IndexMappingCannotBeNone,
    InputShouldBePowerOfTwo,
    InvalidPosition,
    InvalidPositionMapping,
    LeftIndicesCannotBeNone,
    MissingParameter,
    PositionsLengthMismatch,
    RightIndicesCannotBeNone,
)
from zkp.isep.kzg import commit
from zkp.isep.polynomial import Polynomial
from zkp.isep.serialization import (
    blake2b_512,
    encode_domain,
    encode_fr,
    encode_g1,
    encode_g2,
    encode_usize,
)
from zkp.isep.srs import SRS
from zkp.isep.utils import is_power_of_two

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# 설정
# ─────────────────────────────────────────────────────────────────────

@dataclass
class PublicParametersConfig:
    """공개 파라미터 생성 설정.

    필수 필드 (None이면 각각의 오류):
        size_left_values, size_right_values  → MissingParameter
        positions_left                       → LeftIndicesCannotBeNone
        positions_right                      → RightIndicesCannotBeNone
        position_mappings                    → IndexMappingCannotBeNone

    기본값이 있는 필드:
        domain_generator_l, domain_generator_r: 명시적 단위근 (None이면 표준 단위근)
        tau: 테스트 전용 고정 τ (None이면 무작위)
        curve: "bn128" 또는 "bls12_381"
        workers: MSM 프로세스 수
    """

    size_left_values: Optional[int] = None
    size_right_values: Optional[int] = None
    positions_left: Optional[Sequence[int]] = None
    positions_right: Optional[Sequence[int]] = None
    position_mappings: Optional[Mapping[int, int]] = None
    domain_generator_l: Optional[int] = None
    domain_generator_r: Optional[int] = None
    tau: Optional[int] = None
    curve: str = "bn128"
    workers: int = 1

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PublicParametersConfig":
        """평범한 dict(예: 파싱된 JSON)에서 설정을 만든다.

        JSON 객체의 키는 문자열이므로 position_mappings의 키와 값은 정수로 변환한다.

        Raises:
            ValueError: 알 수 없는 키가 있을 때
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"알 수 없는 설정 키: {', '.join(unknown)}")
        values = dict(data)
        mappings = values.get("position_mappings")
        if mappings is not None:
            values["position_mappings"] = {int(k): int(v) for k, v in mappings.items()}
        for key in ("positions_left", "positions_right"):
            if values.get(key) is not None:
                values[key] = [int(p) for p in values[key]]
        return cls(**values)


# ─────────────────────────────────────────────────────────────────────
# 공개 파라미터
# ─────────────────────────────────────────────────────────────────────

class PublicParameters:
    """전처리된 공개 파라미터 (읽기 전용으로 취급).

    속성 (형태):
        size_left_values, size_right_values: N_L, N_R
        backend: 대수 백엔드
        srs: SRS
        domain_l, domain_r: 평가 도메인

    속성 (위치):
        positions_left, positions_right: 정렬된 위치 튜플
        position_mappings: {왼쪽 인덱스: 오른쪽 인덱스}
        position_tags: {왼쪽 인덱스: ω_R^{mapping(i)}}

    속성 (다항식 + 커밋먼트):
        poly_positions_left, poly_positions_right, poly_position_mappings: PL, PR, PM
        positions_left_commitment, positions_right_commitment,
        position_mappings_commitment: [PL]₁, [PR]₁, [PM]₁
        vanishing_l_commitment, vanishing_r_commitment: [Z_L]₁, [Z_R]₁
            외부 검증자용으로만 공개한다. verify는 Z(δ) = δ^N - 1을
            스칼라로 직접 계산하므로 이 값을 읽지 않는다.

    속성 (바인딩):
        hash_representation: Blake2b-512 (64바이트)

    직접 생성하지 말고 build_public_parameters 또는 builder()를 사용한다.
    """

    @staticmethod
    def builder():
        return PublicParametersBuilder()

    def __repr__(self):
        return (
            f"PublicParameters(curve={self.backend.name}, "
            f"N_L={self.size_left_values}, N_R={self.size_right_values}, "
            f"positions={len(self.positions_left)})"
        )


class PublicParametersBuilder:
    """PublicParametersConfig를 체이닝 방식으로 채우는 빌더.

    예시:
        >>> pp = (PublicParameters.builder()
        ...       .size_left_values(2).size_right_values(2)
        ...       .positions_left([0, 1]).positions_right([0, 1])
        ...       .position_mappings({0: 0, 1: 1})
        ...       .build())
    """

    def __init__(self):
        self._config = PublicParametersConfig()

    def _set(self, name, value):
        setattr(self._config, name, value)
        return self

    def size_left_values(self, size):
        return self._set("size_left_values", size)

    def size_right_values(self, size):
        return self._set("size_right_values", size)

    def positions_left(self, positions):
        return self._set("positions_left", list(positions))

    def positions_right(self, positions):
        return self._set("positions_right", list(positions))

    def position_mappings(self, mappings):
        return self._set("position_mappings", dict(mappings))

    def domain_generator_l(self, generator):
        return self._set("domain_generator_l", generator)

    def domain_generator_r(self, generator):
        return self._set("domain_generator_r", generator)

    def tau(self, tau):
        return self._set("tau", tau)

    def curve(self, name):
        return self._set("curve", name)

    def workers(self, workers):
        return self._set("workers", workers)

    def build(self, rng=None):
        return build_public_parameters(self._config, rng=rng)


# ─────────────────────────────────────────────────────────────────────
# 입력 검증
# ─────────────────────────────────────────────────────────────────────

def _validate_size(name, size):
    if size is None:
        raise MissingParameter(name)
    if not is_power_of_two(size):
        raise InputShouldBePowerOfTwo(size)
    return size


def _validate_positions(name, positions, size):
    positions = [int(p) for p in positions]
    for p in positions:
        if not 0 <= p < size:
            raise InvalidPosition(f"{name}의 위치 {p}가 범위 [0, {size})를 벗어납니다")
    if len(set(positions)) != len(positions):
        raise InvalidPosition(f"{name}에 중복된 위치가 있습니다")
    return tuple(sorted(positions))


def _validate_mapping(mappings, positions_left, positions_right):
    mappings = {int(k): int(v) for k, v in mappings.items()}
    if set(mappings) != set(positions_left):
        raise InvalidPositionMapping(
            "position_mappings의 키는 positions_left와 정확히 같아야 합니다"
        )
    targets = list(mappings.values())
    if len(set(targets)) != len(targets):
        raise InvalidPositionMapping("두 왼쪽 위치가 같은 오른쪽 위치로 매핑됩니다")
    if set(targets) != set(positions_right):
        raise InvalidPositionMapping(
            "position_mappings의 값은 positions_right와 정확히 같아야 합니다"
        )
    return dict(sorted(mappings.items()))


# ─────────────────────────────────────────────────────────────────────
# 생성
# ─────────────────────────────────────────────────────────────────────

def build_public_parameters(config, rng=None):
    """설정을 검증하고 공개 파라미터를 생성한다.

    단계:
    1. 크기, 위치, 매핑 검증
    2. SRS (최대 차수 max(N_L, N_R))
    3. domain_l, domain_r
    4. PL, PR = 0/1 지시 벡터의 IFFT
    5. PM = domain_l 위의 (i ∈ positions_left이면 ω_R^{mapping(i)}, 아니면 0)의 IFFT
    6. PL, PR, PM과 두 소거 다항식 커밋
    7. hash_representation 계산

    Args:
        config: PublicParametersConfig
        rng: SRS τ를 뽑을 난수 생성기 (config.tau가 있으면 무시)

    Returns:
        PublicParameters

    Raises:
        ShapeError 계열: 입력이 불완전하거나 형태가 맞지 않을 때
    """
    # ── 1단계: 입력 검증 ──
    size_left = _validate_size("size_left_values", config.size_left_values)
    size_right = _validate_size("size_right_values", config.size_right_values)
    if config.positions_left is None:
        raise LeftIndicesCannotBeNone()
    if config.positions_right is None:
        raise RightIndicesCannotBeNone()
    if config.position_mappings is None:
        raise IndexMappingCannotBeNone()
    if len(config.positions_left) != len(config.positions_right):
        raise PositionsLengthMismatch(len(config.positions_left), len(config.positions_right))
    positions_left = _validate_positions("positions_left", config.positions_left, size_left)
    positions_right = _validate_positions("positions_right", config.positions_right, size_right)
    mappings = _validate_mapping(config.position_mappings, positions_left, positions_right)

    backend = get_backend(config.curve)
    Fr = backend.Fr
    workers = config.workers

    # ── 2단계: 도메인 (SRS보다 먼저 만들어 크기 오류를 일찍 보고한다) ──
    domain_l = EvaluationDomain.create(size_left, backend, config.domain_generator_l)
    domain_r = EvaluationDomain.create(size_right, backend, config.domain_generator_r)

    # ── 3단계: SRS ──
    max_degree = max(size_left, size_right)
    if config.tau is not None:
        srs = SRS.unsafe_setup_from_tau(max_degree, config.tau, backend, workers=workers)
    else:
        srs = SRS.setup(max_degree, backend, rng=rng, workers=workers)

    # ── 4단계: 위치 지시 다항식 ──
    pl_evals = [Fr(0)] * size_left
    for i in positions_left:
        pl_evals[i] = Fr(1)
    pr_evals = [Fr(0)] * size_right
    for j in positions_right:
        pr_evals[j] = Fr(1)
    poly_positions_left = Polynomial.from_evaluations(pl_evals, domain_l)
    poly_positions_right = Polynomial.from_evaluations(pr_evals, domain_r)

    # ── 5단계: 매핑 다항식 ──
    position_tags = {i: domain_r.element(j) for i, j in mappings.items()}
    pm_evals = [Fr(0)] * size_left
    for i, tag in position_tags.items():
        pm_evals[i] = tag
    poly_position_mappings = Polynomial.from_evaluations(pm_evals, domain_l)

    # ── 6단계: 커밋 ──
    pp = PublicParameters()
    pp.size_left_values = size_left
    pp.size_right_values = size_right
    pp.backend = backend
    pp.srs = srs
    pp.domain_l = domain_l
    pp.domain_r = domain_r
    pp.positions_left = positions_left
    pp.positions_right = positions_right
    pp.position_mappings = mappings
    pp.position_tags = position_tags
    pp.poly_positions_left = poly_positions_left
    pp.poly_positions_right = poly_positions_right
    pp.poly_position_mappings = poly_position_mappings
    pp.positions_left_commitment = commit(poly_positions_left, srs, workers=workers)
    pp.positions_right_commitment = commit(poly_positions_right, srs, workers=workers)
    pp.position_mappings_commitment = commit(poly_position_mappings, srs, workers=workers)
    pp.vanishing_l_commitment = domain_l.vanishing_polynomial_commitment(srs, workers=workers)
    pp.vanishing_r_commitment = domain_r.vanishing_polynomial_commitment(srs, workers=workers)
    pp.workers = workers

    # ── 7단계: 해시 표현 ──
    pp.hash_representation = _hash_representation(pp)

    logger.info(
        "공개 파라미터 생성 완료: curve=%s N_L=%d N_R=%d positions=%d",
        backend.name, size_left, size_right, len(positions_left),
    )
    return pp


def _hash_representation(pp):
    """크기, 도메인, 커밋먼트, SRS, 위치, 매핑, 다항식 계수를 순서대로 해싱한다."""
    backend = pp.backend
    chunks = [
        encode_usize(pp.size_left_values),
        encode_usize(pp.size_right_values),
        encode_domain(pp.domain_l),
        encode_domain(pp.domain_r),
        encode_domain(pp.domain_l.coset()),
        encode_domain(pp.domain_r.coset()),
        encode_g1(pp.positions_left_commitment, backend),
        encode_g1(pp.positions_right_commitment, backend),
        encode_g1(pp.position_mappings_commitment, backend),
    ]
    chunks.append(encode_usize(len(pp.srs.g1_powers)))
    chunks.extend(encode_g1(p, backend) for p in pp.srs.g1_powers)
    chunks.append(encode_usize(len(pp.srs.g2_powers)))
    chunks.extend(encode_g2(p, backend) for p in pp.srs.g2_powers)
    for positions in (pp.positions_left, pp.positions_right):
        chunks.append(encode_usize(len(positions)))
        chunks.extend(encode_usize(p) for p in positions)
    chunks.append(encode_usize(len(pp.position_mappings)))
    for i, j in pp.position_mappings.items():
        chunks.append(encode_usize(i) + encode_usize(j))
    for poly in (pp.poly_positions_left, pp.poly_positions_right, pp.poly_position_mappings):
        chunks.append(encode_usize(len(poly.coeffs)))
        chunks.extend(encode_fr(c, backend) for c in poly.coeffs)
    return blake2b_512(*chunks)
