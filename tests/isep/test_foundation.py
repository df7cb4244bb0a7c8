"""
Tests for ISEP foundation modules: backend, polynomial, evaluation domain, utils.

Covers:
- Backend: scalar field, two-adicity, group ops, MSM (sequential and pooled)
- Polynomial: arithmetic, evaluation, synthetic division
- EvaluationDomain: creation errors, FFT/IFFT round trip, cosets, vanishing polynomial
- Utils: batch inversion, powers, linear combination
"""

import pytest

from zkp.isep.backend import BLS12_381, BN128, get_backend
from zkp.isep.domain import EvaluationDomain
from zkp.isep.errors import (
    FailedToInverseFieldElement,
    InvalidDomainGenerator,
    InvalidEvaluationDomainSize,
    UnsupportedCurve,
)
from zkp.isep.polynomial import Polynomial, divide_by_linear
from zkp.isep.utils import (
    batch_inverse,
    is_power_of_two,
    linear_combination,
    powers_of,
)

Fr = BN128.Fr


# ─────────────────────────────────────────────────────────────────────
# Backend
# ─────────────────────────────────────────────────────────────────────

class TestBackend:
    """대수 백엔드 테스트."""

    def test_two_adicity(self):
        """bn128 r-1 = 2^28·m, bls12_381 r-1 = 2^32·m."""
        assert BN128.two_adicity == 28
        assert BLS12_381.two_adicity == 32

    def test_generator_is_not_a_square(self):
        """Fr*의 생성자는 이차 비잉여: g^((r-1)/2) = -1."""
        for backend in (BN128, BLS12_381):
            g = backend.generator
            assert g ** ((backend.curve_order - 1) // 2) == backend.Fr(-1)

    def test_fr_reduces_integers(self):
        assert BN128.fr(-1) == Fr(BN128.curve_order - 1)
        assert BN128.fr(BN128.curve_order + 5) == Fr(5)

    def test_ec_mul_distributes(self):
        """(a+b)·G1 == a·G1 + b·G1."""
        lhs = BN128.ec_mul(BN128.G1, 12)
        rhs = BN128.ec_add(BN128.ec_mul(BN128.G1, 5), BN128.ec_mul(BN128.G1, 7))
        assert BN128.ec_eq(lhs, rhs)

    def test_ec_neg_sums_to_infinity(self):
        p = BN128.ec_mul(BN128.G1, 9)
        assert BN128.is_inf(BN128.ec_add(p, BN128.ec_neg(p)))

    def test_mul_by_order_is_infinity(self):
        assert BN128.is_inf(BN128.ec_mul(BN128.G1, BN128.curve_order))
        assert BN128.in_subgroup(BN128.G1)

    def test_msm_matches_naive_sum(self):
        points = [BN128.ec_mul(BN128.G1, k) for k in (1, 2, 3)]
        result = BN128.msm(points, [Fr(4), Fr(0), Fr(6)])
        assert BN128.ec_eq(result, BN128.ec_mul(BN128.G1, 4 * 1 + 6 * 3))

    def test_msm_all_zero_scalars(self):
        assert BN128.is_inf(BN128.msm([BN128.G1, BN128.G1], [0, 0]))
        assert BN128.msm([BN128.G2], [0]) == BN128.Z2

    def test_msm_with_worker_pool(self):
        """workers > 1 gives the same result as the sequential path."""
        points = [BN128.ec_mul(BN128.G1, k + 1) for k in range(6)]
        scalars = [Fr(k * 11 + 3) for k in range(6)]
        sequential = BN128.msm(points, scalars)
        pooled = BN128.msm(points, scalars, workers=2)
        assert BN128.ec_eq(sequential, pooled)

    def test_pairing_bilinearity(self):
        """e(a·G1, G2) == e(G1, a·G2)."""
        lhs = BN128.ec_pairing(BN128.G2, BN128.ec_mul(BN128.G1, 6))
        rhs = BN128.ec_pairing(BN128.ec_mul(BN128.G2, 6), BN128.G1)
        assert lhs == rhs

    def test_g1_from_affine_rejects_off_curve(self):
        x, y = BN128.normalize(BN128.G1)
        assert BN128.g1_from_affine(int(x), int(y)) is not None
        assert BN128.g1_from_affine(int(x), int(y) + 1) is None

    def test_get_backend_aliases(self):
        assert get_backend("bn254") is BN128
        assert get_backend("BLS12_381") is BLS12_381

    def test_get_backend_unknown(self):
        with pytest.raises(UnsupportedCurve):
            get_backend("secp256k1")


# ─────────────────────────────────────────────────────────────────────
# Polynomial
# ─────────────────────────────────────────────────────────────────────

class TestPolynomial:
    """Polynomial 클래스 테스트."""

    def test_trims_leading_zeros(self):
        p = Polynomial([1, 2, 0, 0], Fr)
        assert p.degree == 1
        assert len(p) == 2

    def test_zero_polynomial(self):
        z = Polynomial.zero(Fr)
        assert z.is_zero()
        assert z.degree == 0

    def test_evaluate(self):
        """1 + 2x + 3x² at x=2 → 17."""
        assert Polynomial([1, 2, 3], Fr).evaluate(2) == Fr(17)

    def test_add_sub(self):
        a = Polynomial([1, 2], Fr)
        b = Polynomial([3, 0, 4], Fr)
        assert a + b == Polynomial([4, 2, 4], Fr)
        assert (a + b) - b == a

    def test_mul(self):
        """(1 + x)(1 - x) = 1 - x²."""
        a = Polynomial([1, 1], Fr)
        b = Polynomial([1, -1], Fr)
        assert a * b == Polynomial([1, 0, -1], Fr)

    def test_scalar_mul(self):
        assert Polynomial([1, 2], Fr) * 3 == Polynomial([3, 6], Fr)

    def test_divide_by_linear(self):
        """p(x) - p(z) == (x - z)·q(x)."""
        p = Polynomial([5, 0, 3, 7], Fr)
        z = Fr(11)
        q, y = divide_by_linear(p, z)
        assert y == p.evaluate(z)
        assert q * Polynomial([-z, Fr(1)], Fr) == p - y


# ─────────────────────────────────────────────────────────────────────
# Evaluation domain
# ─────────────────────────────────────────────────────────────────────

class TestEvaluationDomain:
    """EvaluationDomain 테스트."""

    def test_generator_is_primitive_root(self):
        d = EvaluationDomain.create(8, BN128)
        assert d.generator ** 8 == Fr(1)
        for k in range(1, 8):
            assert d.generator ** k != Fr(1)

    def test_derived_inverses(self):
        d = EvaluationDomain.create(16, BN128)
        assert d.size_inv * 16 == Fr(1)
        assert d.generator_inv * d.generator == Fr(1)

    @pytest.mark.parametrize("size", [0, 3, 6, 12])
    def test_non_power_of_two_rejected(self, size):
        with pytest.raises(InvalidEvaluationDomainSize):
            EvaluationDomain.create(size, BN128)

    def test_size_beyond_two_adicity_rejected(self):
        with pytest.raises(InvalidEvaluationDomainSize):
            EvaluationDomain.create(2 ** 29, BN128)

    def test_explicit_generator(self):
        default = EvaluationDomain.create(8, BN128)
        other = default.generator ** 3  # 3과 8은 서로소 → 원시근
        d = EvaluationDomain.create(8, BN128, generator=other)
        assert d.generator == other

    def test_explicit_generator_not_primitive(self):
        d = EvaluationDomain.create(8, BN128)
        with pytest.raises(InvalidDomainGenerator):
            EvaluationDomain.create(8, BN128, generator=d.generator ** 2)
        with pytest.raises(InvalidDomainGenerator):
            EvaluationDomain.create(8, BN128, generator=Fr(2))

    def test_fft_ifft_round_trip(self):
        d = EvaluationDomain.create(8, BN128)
        coeffs = [Fr(c) for c in (3, 1, 4, 1, 5, 9, 2, 6)]
        assert d.ifft(d.fft(coeffs)) == coeffs

    def test_fft_matches_evaluation(self):
        """fft(c)[i] == p(ωⁱ)."""
        d = EvaluationDomain.create(4, BN128)
        p = Polynomial([7, 0, 2], Fr)
        evals = d.fft(p.coeffs)
        for i, x in enumerate(d.elements()):
            assert evals[i] == p.evaluate(x)

    def test_interpolation_reproduces_values(self):
        d = EvaluationDomain.create(8, BN128)
        values = [Fr(v) for v in (10, 20, 30, 40, 50, 60, 70, 80)]
        p = Polynomial.from_evaluations(values, d)
        assert [p.evaluate(x) for x in d.elements()] == values

    def test_fft_pads_short_input(self):
        d = EvaluationDomain.create(4, BN128)
        assert d.fft([Fr(5)]) == [Fr(5)] * 4

    def test_fft_rejects_long_input(self):
        d = EvaluationDomain.create(2, BN128)
        with pytest.raises(ValueError):
            d.fft([1, 2, 3])

    def test_coset_round_trip(self):
        coset = EvaluationDomain.create(4, BN128).coset()
        assert coset.is_coset
        p = Polynomial([1, 2, 3, 4], Fr)
        evals = coset.fft(p.coeffs)
        assert evals[1] == p.evaluate(coset.element(1))
        assert coset.ifft(evals) == p.coeffs

    def test_vanishing_polynomial_zero_on_domain(self):
        d = EvaluationDomain.create(8, BN128)
        z = d.vanishing_polynomial()
        for x in d.elements():
            assert z.evaluate(x) == Fr(0)
            assert d.evaluate_vanishing_polynomial(x) == Fr(0)

    def test_divide_by_vanishing_on_coset(self):
        d = EvaluationDomain.create(4, BN128)
        coset = d.coset()
        # p = Z_H · (x + 2)
        q = Polynomial([2, 1], Fr)
        p = d.vanishing_polynomial() * q
        ext = d.extended(2).coset()
        evals = ext.fft(p.coeffs)
        quotient = Polynomial(ext.ifft(d.divide_by_vanishing_on_coset(evals, ext)), Fr)
        assert quotient == q
        # same-size coset: a single vanishing value g^N - 1
        ones = d.divide_by_vanishing_on_coset([Fr(1)] * 4, coset)
        expected = Fr(1) / (BN128.generator ** 4 - 1)
        assert ones == [expected] * 4

    def test_divide_by_vanishing_on_plain_domain_fails(self):
        """코셋이 아닌 도메인 자체에서는 Z_H = 0이므로 역원이 없다."""
        d = EvaluationDomain.create(4, BN128)
        with pytest.raises(FailedToInverseFieldElement):
            d.divide_by_vanishing_on_coset([Fr(1)] * 4, d)

    def test_extended_domain(self):
        d = EvaluationDomain.create(4, BN128)
        ext = d.extended(2)
        assert ext.size == 8
        assert ext.generator ** 2 == d.generator


# ─────────────────────────────────────────────────────────────────────
# Utils
# ─────────────────────────────────────────────────────────────────────

class TestUtils:
    """공유 유틸리티 테스트."""

    def test_is_power_of_two(self):
        assert is_power_of_two(1)
        assert is_power_of_two(16)
        assert not is_power_of_two(0)
        assert not is_power_of_two(12)

    def test_powers_of(self):
        assert powers_of(Fr(3), 4, Fr) == [Fr(1), Fr(3), Fr(9), Fr(27)]

    def test_batch_inverse(self):
        values = [Fr(v) for v in (2, 3, 7, 1000)]
        inverses = batch_inverse(values, Fr)
        for v, inv in zip(values, inverses):
            assert v * inv == Fr(1)

    def test_batch_inverse_zero(self):
        with pytest.raises(FailedToInverseFieldElement):
            batch_inverse([Fr(2), Fr(0), Fr(5)], Fr)

    def test_batch_inverse_empty(self):
        assert batch_inverse([], Fr) == []

    def test_linear_combination(self):
        """1·4 + 2·5 + 4·6 = 38 (ρ = 2)."""
        assert linear_combination([Fr(4), Fr(5), Fr(6)], Fr(2), Fr) == Fr(38)
