"""
ISEP Statement (공개 진술)
===========================

두 비공개 배열에 대한 KZG 커밋먼트 쌍. Verifier가 보는 것은 이것뿐이다.

  left_commitment  = [LV(τ)]₁
  right_commitment = [RV(τ)]₁
  hash_representation = Blake2b-512(enc(left_commitment) || enc(right_commitment))

hash_representation은 PP 해시 다음으로 트랜스크립트에 들어가는 두 번째 원소이며,
증명을 이 커밋먼트 쌍에 묶는다.
"""

import logging

from zkp.isep.kzg import commit
from zkp.isep.serialization import ByteReader, blake2b_512, encode_g1

logger = logging.getLogger(__name__)


class Statement:
    """공개 진술: 두 배열의 커밋먼트와 그 해시."""

    def __init__(self, left_commitment, right_commitment, backend):
        self.left_commitment = left_commitment
        self.right_commitment = right_commitment
        self.backend = backend
        self.hash_representation = blake2b_512(
            encode_g1(left_commitment, backend),
            encode_g1(right_commitment, backend),
        )

    def to_bytes(self):
        """enc(left_commitment) || enc(right_commitment)"""
        return (encode_g1(self.left_commitment, self.backend)
                + encode_g1(self.right_commitment, self.backend))

    @classmethod
    def from_bytes(cls, data, backend):
        """
        Raises:
            FailedToSerializeElement: 길이가 맞지 않거나 점이 유효하지 않을 때
        """
        reader = ByteReader(data, backend)
        left = reader.read_g1()
        right = reader.read_g1()
        reader.finish()
        return cls(left, right, backend)

    def __eq__(self, other):
        if not isinstance(other, Statement):
            return NotImplemented
        return self.hash_representation == other.hash_representation

    def __repr__(self):
        return f"Statement({self.hash_representation[:8].hex()}...)"


def derive_statement(pp, witness):
    """Witness의 LV, RV를 커밋하여 Statement를 만든다."""
    left = commit(witness.poly_left_values, pp.srs, workers=pp.workers)
    right = commit(witness.poly_right_values, pp.srs, workers=pp.workers)
    logger.debug("Statement 생성: LV, RV 커밋 완료")
    return Statement(left, right, pp.backend)
