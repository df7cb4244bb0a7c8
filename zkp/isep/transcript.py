"""
ISEP Fiat-Shamir Transcript
=============================

비대화식(non-interactive) 변환을 위한 레이블 기반 Fiat-Shamir 트랜스크립트.

**ISEP의 5개 챌린지**:
  1단계 → β, γ   (PP 해시와 Statement 해시를 흡수한 뒤)
  2단계 → δ, ε   (L, R, Ql, Qr 커밋먼트를 흡수한 뒤)
  3단계 → ζ      (δ에서의 일괄 열기 증명과 9개의 평가값을 흡수한 뒤)

**흡수 형식**:
  각 원소는 label || len(bytes) (u64 LE) || bytes 로 상태에 추가된다.
  바이트 인코딩은 serialization 모듈의 정규 인코딩을 따른다.

**챌린지 생성**:
  Blake2b-512(state || label)의 64바이트를 리틀엔디안 정수로 읽어 r로 축소한다.
  512비트를 축소하므로 Fr 위의 분포가 거의 균등하다.
  생성된 챌린지는 같은 레이블로 즉시 다시 흡수된다 (체이닝).

사용 예시:
    >>> t = Transcript(BN128)
    >>> t.append_element(Label.L_COMMITMENT, commitment)
    >>> delta = t.squeeze_challenge(Label.DELTA)
"""

from enum import Enum

from zkp.isep.serialization import (
    blake2b_512,
    encode_fr,
    encode_g1,
    encode_g2,
    encode_usize,
)


class Label(Enum):
    """트랜스크립트 메시지/챌린지별 고정 레이블."""

    PUBLIC_PARAMETERS_HASH = b"public_parameters_hash"
    STATEMENT_HASH = b"statement_hash"
    BETA = b"beta"
    GAMMA = b"gamma"
    L_COMMITMENT = b"l_commitment"
    R_COMMITMENT = b"r_commitment"
    QL_COMMITMENT = b"ql_commitment"
    QR_COMMITMENT = b"qr_commitment"
    DELTA = b"delta"
    EPSILON = b"epsilon"
    BATCH_PROOF_AT_DELTA = b"batch_proof_at_delta"
    L_AT_DELTA = b"l_at_delta"
    R_AT_DELTA = b"r_at_delta"
    QL_AT_DELTA = b"ql_at_delta"
    QR_AT_DELTA = b"qr_at_delta"
    LV_AT_DELTA = b"lv_at_delta"
    RV_AT_DELTA = b"rv_at_delta"
    PL_AT_DELTA = b"pl_at_delta"
    PR_AT_DELTA = b"pr_at_delta"
    PM_AT_DELTA = b"pm_at_delta"
    ZETA = b"zeta"


class Transcript:
    """Blake2b-512 기반 Fiat-Shamir 트랜스크립트.

    속성:
        state: 지금까지 흡수한 바이트열
        backend: 챌린지를 축소할 스칼라체를 제공하는 백엔드

    보안 주의:
        - 모든 데이터는 레이블과 함께 추가하여 도메인 분리를 보장한다
        - Prover와 Verifier는 반드시 같은 순서로 흡수/생성해야 한다
    """

    def __init__(self, backend, label=b"Init ISEP Transcript"):
        self.backend = backend
        self.state = bytearray()
        self.state.extend(label)

    def _encode(self, element):
        """bytes / Fr / G1 / G2를 정규 인코딩으로 변환한다."""
        backend = self.backend
        if isinstance(element, (bytes, bytearray)):
            return bytes(element)
        if isinstance(element, backend.Fr):
            return encode_fr(element, backend)
        if isinstance(element, tuple) and len(element) == 3:
            if isinstance(element[0], backend.FQ):
                return encode_g1(element, backend)
            if isinstance(element[0], backend.FQ2):
                return encode_g2(element, backend)
        raise TypeError(f"트랜스크립트에 추가할 수 없는 원소입니다: {type(element).__name__}")

    def append_element(self, label, element):
        """label || len || bytes 를 상태에 추가한다."""
        data = self._encode(element)
        self.state.extend(label.value)
        self.state.extend(encode_usize(len(data)))
        self.state.extend(data)

    def append_elements(self, items):
        """[(label, element), ...]를 순서대로 추가한다."""
        for label, element in items:
            self.append_element(label, element)

    def squeeze_challenge(self, label):
        """현재 상태에서 챌린지 Fr 원소를 생성하고 다시 흡수한다.

        예시:
            >>> beta = t.squeeze_challenge(Label.BETA)
            >>> gamma = t.squeeze_challenge(Label.GAMMA)
            # beta와 gamma는 서로 다른 값 (상태가 갱신되므로)
        """
        digest = blake2b_512(bytes(self.state), label.value)
        challenge = self.backend.Fr(int.from_bytes(digest, "little") % self.backend.curve_order)
        self.append_element(label, challenge)
        return challenge
