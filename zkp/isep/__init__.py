"""
ISEP: Index-Selected Equality Proof
=====================================

크기가 다른 두 배열을 각각 KZG로 커밋한 뒤, 공개된 위치 매핑에 대해
left[i] == right[mapping(i)]임을 배열을 드러내지 않고 증명한다.

외부 인터페이스:
    build_public_parameters(config, rng=None) -> PublicParameters
    build_witness(pp, left_values, right_values) -> Witness
    derive_statement(pp, witness) -> Statement
    prove(pp, witness, statement) -> Proof
    verify(pp, statement, proof) -> True (실패 시 VerificationError)
"""

from zkp.isep.prover import Proof, prove
from zkp.isep.public_parameters import (
    PublicParameters,
    PublicParametersConfig,
    build_public_parameters,
)
from zkp.isep.statement import Statement, derive_statement
from zkp.isep.verifier import verify
from zkp.isep.witness import Witness, build_witness

__all__ = [
    "Proof",
    "PublicParameters",
    "PublicParametersConfig",
    "Statement",
    "Witness",
    "build_public_parameters",
    "build_witness",
    "derive_statement",
    "prove",
    "verify",
]
