"""
ISEP 평가 도메인 (Evaluation Domain)
=====================================

크기 N(2의 거듭제곱)의 곱셈 부분군 H = {1, ω, ω², ..., ω^(N-1)}과
그 코셋 g·H를 다룬다.

**FFT/IFFT (Number Theoretic Transform)**:
  - FFT: 계수 → N개의 도메인 점에서의 평가값
  - IFFT: 평가값 → 계수 (보간)
  재귀적 Cooley-Tukey radix-2 알고리즘을 사용한다.

**코셋(Coset)**:
  g·H = {g, g·ω, g·ω², ...} (g = 체의 생성자, g ∉ H).
  H 위에서 Z_H(x) = x^N - 1 = 0이므로 몫 t(x) = C(x) / Z_H(x)를 H에서
  직접 계산할 수 없다. 코셋에서 평가하면 Z_H(g·ωⁱ) ≠ 0이 되어
  평가값끼리 나눌 수 있다.

  C(x)의 차수가 N 이상이면 크기 N의 코셋으로는 표현이 부족하므로
  크기 k·N의 확장 도메인(extended)의 코셋에서 평가한다.
  이때 Z_H(g·ω_extⁱ) = g^N·(ω_ext^N)ⁱ - 1 은 주기 k로 반복된다.

사용 예시:
    >>> from zkp.isep.backend import BN128
    >>> domain = EvaluationDomain.create(4, BN128)
    >>> evals = domain.fft([1, 2, 3, 0])
    >>> domain.ifft(evals)  # [1, 2, 3, 0]
"""

from zkp.isep.errors import (
    InvalidDomainGenerator,
    InvalidEvaluationDomainSize,
)
from zkp.isep.kzg import commit
from zkp.isep.polynomial import Polynomial
from zkp.isep.utils import batch_inverse, is_power_of_two


class EvaluationDomain:
    """radix-2 평가 도메인 (또는 그 코셋).

    속성:
        size: N
        log_size: log₂ N
        generator: N차 원시 단위근 ω
        generator_inv: ω⁻¹
        size_as_field: N (Fr 원소)
        size_inv: N⁻¹
        offset: 코셋 이동값 g (일반 도메인은 1)
        offset_inv: g⁻¹
        offset_pow_size: g^N
    """

    def __init__(self, size, generator, backend, offset=None):
        Fr = backend.Fr
        self.backend = backend
        self.size = size
        self.log_size = size.bit_length() - 1
        self.generator = generator
        self.generator_inv = Fr(1) / generator
        self.size_as_field = Fr(size)
        self.size_inv = Fr(1) / self.size_as_field
        self.offset = Fr(1) if offset is None else offset
        self.offset_inv = Fr(1) / self.offset
        self.offset_pow_size = self.offset ** size

    @classmethod
    def create(cls, size, backend, generator=None):
        """평가 도메인을 생성한다.

        Args:
            size: 도메인 크기 (2의 거듭제곱, ≤ 2^two_adicity)
            backend: 대수 백엔드
            generator: 명시적 단위근 (생략 시 g^((r-1)/N))

        Raises:
            InvalidEvaluationDomainSize: 크기가 2의 거듭제곱이 아니거나 너무 큰 경우
            InvalidDomainGenerator: generator가 size차 원시 단위근이 아닌 경우
        """
        if not is_power_of_two(size):
            raise InvalidEvaluationDomainSize(size)
        if size.bit_length() - 1 > backend.two_adicity:
            raise InvalidEvaluationDomainSize(size)

        Fr = backend.Fr
        if generator is None:
            # ω = g^((r-1)/N)이면 ω^N = g^(r-1) = 1 (페르마 소정리)
            generator = backend.generator ** ((backend.curve_order - 1) // size)
        else:
            generator = backend.fr(generator)
            if generator ** size != Fr(1):
                raise InvalidDomainGenerator(size)
            if size > 1 and generator ** (size // 2) == Fr(1):
                raise InvalidDomainGenerator(size)
        return cls(size, generator, backend)

    def __repr__(self):
        return f"EvaluationDomain(size={self.size}, offset={int(self.offset)})"

    @property
    def is_coset(self):
        return self.offset != 1

    def coset(self):
        """체의 생성자만큼 이동한 코셋 g·H."""
        return EvaluationDomain(self.size, self.generator, self.backend, offset=self.backend.generator)

    def extended(self, factor):
        """크기 factor·N의 도메인 (같은 이동값)."""
        ext = EvaluationDomain.create(self.size * factor, self.backend)
        if self.is_coset:
            return ext.coset()
        return ext

    def element(self, i):
        """i번째 원소 g·ωⁱ."""
        return self.offset * self.generator ** i

    def elements(self):
        """[g, g·ω, g·ω², ..., g·ω^(N-1)]"""
        result = []
        current = self.offset
        for _ in range(self.size):
            result.append(current)
            current = current * self.generator
        return result

    # ── FFT / IFFT ──

    def _pad(self, values):
        Fr = self.backend.Fr
        if len(values) > self.size:
            raise ValueError(f"입력 길이 {len(values)}가 도메인 크기 {self.size}를 초과합니다")
        values = [v if isinstance(v, Fr) else Fr(int(v)) for v in values]
        return values + [Fr(0)] * (self.size - len(values))

    def fft(self, coeffs):
        """계수 → 도메인(또는 코셋) 위의 평가값.

        코셋에서는 계수 [c₀, c₁, ...]를 [c₀, g·c₁, g²·c₂, ...]로 바꾼 뒤
        FFT한다. 이는 p(g·x)를 H에서 평가하는 것과 같다.
        """
        coeffs = self._pad(coeffs)
        if self.is_coset:
            coeffs = _scale(coeffs, self.offset)
        return _fft(coeffs, self.generator)

    def ifft(self, evals):
        """평가값 → 계수.

        역 단위근 ω⁻¹로 FFT한 뒤 N으로 나눈다. 코셋이면 계수에서 gⁱ를 제거한다.
        """
        evals = self._pad(evals)
        coeffs = [c * self.size_inv for c in _fft(evals, self.generator_inv)]
        if self.is_coset:
            coeffs = _scale(coeffs, self.offset_inv)
        return coeffs

    # ── 소거 다항식 ──

    def evaluate_vanishing_polynomial(self, point):
        """Z(x) = x^N - g^N 를 평가한다 (일반 도메인은 x^N - 1)."""
        return point ** self.size - self.offset_pow_size

    def vanishing_polynomial(self):
        """Z(x) = x^N - g^N."""
        Fr = self.backend.Fr
        coeffs = [Fr(0)] * (self.size + 1)
        coeffs[0] = -self.offset_pow_size
        coeffs[self.size] = Fr(1)
        return Polynomial(coeffs, Fr)

    def vanishing_polynomial_commitment(self, srs, workers=1):
        """[Z(τ)]₁. 전처리에서 한 번 계산해 재사용한다."""
        return commit(self.vanishing_polynomial(), srs, workers=workers)

    def divide_by_vanishing_on_coset(self, evals, coset=None):
        """코셋 위의 평가값을 이 도메인의 소거 다항식 값으로 나눈다.

        Args:
            evals: coset 위의 평가값 (길이 coset.size)
            coset: 평가에 사용한 코셋 (생략 시 self.coset()).
                   크기는 self.size의 배수여야 한다.

        Returns:
            list: evals[i] / Z_H(coset.element(i))

        Raises:
            FailedToInverseFieldElement: 소거 다항식 값이 0인 경우
                (올바른 코셋에서는 발생하지 않는다)
        """
        if coset is None:
            coset = self.coset()
        if coset.size % self.size != 0:
            raise ValueError(f"코셋 크기 {coset.size}가 {self.size}의 배수가 아닙니다")
        period = coset.size // self.size
        # Z_H(g·ω_extⁱ)는 주기 period로 반복된다
        vanishing_values = [
            self.evaluate_vanishing_polynomial(coset.element(i)) for i in range(period)
        ]
        inverses = batch_inverse(
            vanishing_values, self.backend.Fr, context="coset의 소거 다항식 값"
        )
        return [e * inverses[i % period] for i, e in enumerate(evals)]


def _scale(values, factor):
    """[v₀, factor·v₁, factor²·v₂, ...]"""
    result = []
    power = type(factor)(1)
    for v in values:
        result.append(v * power)
        power = power * factor
    return result


def _fft(values, omega):
    """재귀적 Cooley-Tukey radix-2 FFT.

    버터플라이 결합: y[k] = even[k] + ω^k · odd[k]
                    y[k+n/2] = even[k] - ω^k · odd[k]
    """
    n = len(values)
    if n == 1:
        return list(values)

    omega_sq = omega * omega
    even_vals = _fft(values[0::2], omega_sq)
    odd_vals = _fft(values[1::2], omega_sq)

    result = [None] * n
    omega_k = type(omega)(1)
    half = n // 2
    for k in range(half):
        t = omega_k * odd_vals[k]
        result[k] = even_vals[k] + t
        result[k + half] = even_vals[k] - t
        omega_k = omega_k * omega
    return result

