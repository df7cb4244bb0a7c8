"""
Tests for ISEP preprocessing: PublicParametersConfig, build_public_parameters, builder.

Covers:
- Shape errors for every missing or malformed input
- PL / PR / PM interpolate the indicator and tag vectors
- Commitments and the binding hash
- Config loading from plain dictionaries
- Witness length checks and statement hashing
"""

import random

import pytest

from zkp.isep.backend import BN128
from zkp.isep.errors import (
    IndexMappingCannotBeNone,
    InputShouldBePowerOfTwo,
    InvalidDomainGenerator,
    InvalidPosition,
    InvalidPositionMapping,
    LeftIndicesCannotBeNone,
    MissingParameter,
    PositionsLengthMismatch,
    RightIndicesCannotBeNone,
    ShapeError,
    UnsupportedCurve,
    WrongNumberOfLeftValues,
    WrongNumberOfRightValues,
)
from zkp.isep.kzg import commit, open_at, verify_opening
from zkp.isep.public_parameters import (
    PublicParameters,
    PublicParametersConfig,
    build_public_parameters,
)
from zkp.isep.serialization import blake2b_512, encode_g1
from zkp.isep.statement import derive_statement
from zkp.isep.witness import Witness, build_witness

Fr = BN128.Fr
TAU = 987654321


def _config(**overrides):
    """N_L=8, N_R=16 scenario config with a fixed tau."""
    values = dict(
        size_left_values=8,
        size_right_values=16,
        positions_left=[0, 2, 4, 6],
        positions_right=[0, 4, 8, 12],
        position_mappings={0: 0, 2: 4, 4: 8, 6: 12},
        tau=TAU,
    )
    values.update(overrides)
    return PublicParametersConfig(**values)


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def pp():
    return build_public_parameters(_config())


# ─────────────────────────────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────────────────────────────

class TestValidation:
    """입력 검증 테스트 (SRS 생성 전에 실패해야 한다)."""

    @pytest.mark.parametrize("field", ["size_left_values", "size_right_values"])
    def test_missing_size(self, field):
        with pytest.raises(MissingParameter) as exc_info:
            build_public_parameters(_config(**{field: None}))
        assert exc_info.value.name == field

    @pytest.mark.parametrize("size", [0, 3, 10])
    def test_size_not_power_of_two(self, size):
        with pytest.raises(InputShouldBePowerOfTwo):
            build_public_parameters(_config(size_left_values=size))

    def test_missing_positions_left(self):
        with pytest.raises(LeftIndicesCannotBeNone):
            build_public_parameters(_config(positions_left=None))

    def test_missing_positions_right(self):
        with pytest.raises(RightIndicesCannotBeNone):
            build_public_parameters(_config(positions_right=None))

    def test_missing_mapping(self):
        with pytest.raises(IndexMappingCannotBeNone):
            build_public_parameters(_config(position_mappings=None))

    def test_positions_length_mismatch(self):
        with pytest.raises(PositionsLengthMismatch):
            build_public_parameters(_config(positions_right=[0, 4, 8]))

    def test_position_out_of_range(self):
        with pytest.raises(InvalidPosition):
            build_public_parameters(_config(
                positions_left=[0, 2, 4, 8],
                position_mappings={0: 0, 2: 4, 4: 8, 8: 12},
            ))

    def test_duplicate_position(self):
        with pytest.raises(InvalidPosition):
            build_public_parameters(_config(positions_right=[0, 4, 4, 12]))

    def test_mapping_not_total(self):
        with pytest.raises(InvalidPositionMapping):
            build_public_parameters(_config(position_mappings={0: 0, 2: 4, 4: 8}))

    def test_mapping_not_injective(self):
        with pytest.raises(InvalidPositionMapping):
            build_public_parameters(_config(position_mappings={0: 0, 2: 0, 4: 8, 6: 12}))

    def test_mapping_not_onto_positions_right(self):
        with pytest.raises(InvalidPositionMapping):
            build_public_parameters(_config(position_mappings={0: 0, 2: 4, 4: 8, 6: 13}))

    def test_invalid_domain_generator(self):
        with pytest.raises(InvalidDomainGenerator):
            build_public_parameters(_config(domain_generator_l=2))

    def test_unsupported_curve(self):
        with pytest.raises(UnsupportedCurve):
            build_public_parameters(_config(curve="ed25519"))

    def test_shape_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            build_public_parameters(_config(size_right_values=None))
        assert issubclass(InvalidPositionMapping, ShapeError)


# ─────────────────────────────────────────────────────────────────────
# Preprocessing output
# ─────────────────────────────────────────────────────────────────────

class TestPublicParameters:
    """전처리 결과 테스트."""

    def test_sizes_and_srs(self, pp):
        assert pp.size_left_values == 8
        assert pp.size_right_values == 16
        assert len(pp.srs.g1_powers) == 17
        assert len(pp.srs.g2_powers) == 2

    def test_domains(self, pp):
        assert pp.domain_l.size == 8
        assert pp.domain_r.size == 16

    def test_positions_sorted_tuples(self, pp):
        assert pp.positions_left == (0, 2, 4, 6)
        assert pp.positions_right == (0, 4, 8, 12)

    def test_indicator_polynomials(self, pp):
        """PL(ωⁱ) = 1 iff i ∈ positions_left."""
        for i, x in enumerate(pp.domain_l.elements()):
            expected = Fr(1) if i in pp.positions_left else Fr(0)
            assert pp.poly_positions_left.evaluate(x) == expected
        for j, x in enumerate(pp.domain_r.elements()):
            expected = Fr(1) if j in pp.positions_right else Fr(0)
            assert pp.poly_positions_right.evaluate(x) == expected

    def test_mapping_polynomial_carries_tags(self, pp):
        """PM(ω_Lⁱ) = ω_R^{mapping(i)}, 0 elsewhere."""
        for i, x in enumerate(pp.domain_l.elements()):
            if i in pp.position_mappings:
                expected = pp.domain_r.generator ** pp.position_mappings[i]
                assert pp.position_tags[i] == expected
            else:
                expected = Fr(0)
            assert pp.poly_position_mappings.evaluate(x) == expected

    def test_commitments(self, pp):
        assert BN128.ec_eq(pp.positions_left_commitment, commit(pp.poly_positions_left, pp.srs))
        assert BN128.ec_eq(
            pp.position_mappings_commitment, commit(pp.poly_position_mappings, pp.srs)
        )
        assert BN128.ec_eq(
            pp.vanishing_l_commitment, commit(pp.domain_l.vanishing_polynomial(), pp.srs)
        )

    def test_vanishing_commitment_opens_to_scalar(self, pp):
        """[Z_R]₁은 verify가 직접 계산하는 δ^N - 1로 열린다."""
        delta = Fr(123456789)
        z_r = pp.domain_r.vanishing_polynomial()
        y, proof = open_at(z_r, delta, pp.srs)
        assert y == pp.domain_r.evaluate_vanishing_polynomial(delta)
        assert y == delta ** pp.size_right_values - 1
        assert verify_opening(pp.vanishing_r_commitment, proof, delta, y, pp.srs)

    def test_hash_representation(self, pp):
        assert len(pp.hash_representation) == 64

    def test_hash_is_deterministic(self, pp):
        again = build_public_parameters(_config())
        assert again.hash_representation == pp.hash_representation

    def test_hash_binds_mapping(self, pp):
        other = build_public_parameters(_config(position_mappings={0: 4, 2: 0, 4: 8, 6: 12}))
        assert other.hash_representation != pp.hash_representation

    def test_hash_binds_srs(self, pp):
        other = build_public_parameters(_config(tau=TAU + 1))
        assert other.hash_representation != pp.hash_representation

    def test_random_setup_with_rng(self):
        a = build_public_parameters(_config(tau=None), rng=random.Random(3))
        b = build_public_parameters(_config(tau=None), rng=random.Random(3))
        assert a.hash_representation == b.hash_representation


class TestBuilderAndConfig:
    """빌더와 dict 설정 로딩 테스트."""

    def test_builder_matches_config(self, pp):
        built = (
            PublicParameters.builder()
            .size_left_values(8)
            .size_right_values(16)
            .positions_left([0, 2, 4, 6])
            .positions_right([0, 4, 8, 12])
            .position_mappings({0: 0, 2: 4, 4: 8, 6: 12})
            .tau(TAU)
            .build()
        )
        assert built.hash_representation == pp.hash_representation

    def test_builder_missing_mapping(self):
        builder = (
            PublicParameters.builder()
            .size_left_values(2)
            .size_right_values(2)
            .positions_left([0])
            .positions_right([1])
        )
        with pytest.raises(IndexMappingCannotBeNone):
            builder.build()

    def test_from_mapping_converts_json_keys(self):
        config = PublicParametersConfig.from_mapping({
            "size_left_values": 2,
            "size_right_values": 2,
            "positions_left": [0, 1],
            "positions_right": [1, 0],
            "position_mappings": {"0": 1, "1": "0"},
        })
        assert config.position_mappings == {0: 1, 1: 0}
        assert config.curve == "bn128"
        assert config.workers == 1

    def test_from_mapping_rejects_unknown_keys(self):
        with pytest.raises(ValueError):
            PublicParametersConfig.from_mapping({"size_left": 2})


# ─────────────────────────────────────────────────────────────────────
# Witness & Statement
# ─────────────────────────────────────────────────────────────────────

class TestWitnessAndStatement:
    """Witness.new / derive_statement 테스트."""

    def test_wrong_number_of_left_values(self, pp):
        with pytest.raises(WrongNumberOfLeftValues):
            Witness.new(pp, [1] * 7, [1] * 16)

    def test_wrong_number_of_right_values(self, pp):
        with pytest.raises(WrongNumberOfRightValues):
            build_witness(pp, [1] * 8, [1] * 17)

    def test_witness_interpolates_values(self, pp):
        left = list(range(8))
        right = list(range(100, 116))
        w = build_witness(pp, left, right)
        assert w.poly_left_values.evaluate(pp.domain_l.element(3)) == Fr(3)
        assert w.poly_right_values.evaluate(pp.domain_r.element(15)) == Fr(115)

    def test_statement_hash(self, pp):
        w = build_witness(pp, list(range(8)), list(range(16)))
        st = derive_statement(pp, w)
        expected = blake2b_512(
            encode_g1(st.left_commitment, BN128), encode_g1(st.right_commitment, BN128)
        )
        assert st.hash_representation == expected
        assert st == w.generate_statement(pp)

    def test_statement_commits_to_values(self, pp):
        w = build_witness(pp, list(range(8)), list(range(16)))
        st = derive_statement(pp, w)
        assert BN128.ec_eq(st.left_commitment, commit(w.poly_left_values, pp.srs))
