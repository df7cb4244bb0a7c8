"""
ISEP 기반 모듈: 다항식(Polynomial) 클래스
==========================================

계수(coefficient) 표현 기반 다항식. p(x) = c₀ + c₁·x + c₂·x² + ...

계수는 백엔드의 스칼라체 Fr 원소이며, 다항식은 자신의 체(field)를 기억한다.
덕분에 같은 코드가 bn128과 bls12_381 모두에서 동작한다.

**다항식 나눗셈**:
  divide_by_linear: (x - z)로의 조립제법(synthetic division).
  KZG 열기 증명 q(x) = (p(x) - p(z)) / (x - z) 계산에 사용한다.

사용 예시:
    >>> from zkp.isep.backend import BN128
    >>> p = Polynomial([1, 2, 3], BN128.Fr)  # 1 + 2x + 3x²
    >>> p.evaluate(2)  # 1 + 4 + 12 = 17
"""


class Polynomial:
    """유한체 Fr 위의 다항식.

    계수 리스트로 표현: coeffs = [c₀, c₁, c₂, ...] → c₀ + c₁x + c₂x² + ...
    최고차 계수가 0인 항은 제거되어 정규화된다.

    ISEP에서의 역할:
    - LV(x), RV(x): 비공개 배열의 보간 다항식
    - PL(x), PR(x), PM(x): 위치 지시/매핑 다항식
    - L(x), R(x): 역수(rational) 다항식
    - Ql(x), Qr(x): 몫 다항식
    """

    def __init__(self, coeffs=None, field=None):
        """다항식 생성.

        Args:
            coeffs: 계수 리스트 [c₀, c₁, ...] (Fr 원소 또는 정수).
                    None 또는 빈 리스트이면 영 다항식.
            field: Fr 클래스. 생략하면 첫 계수의 타입을 사용한다.
        """
        if field is None:
            if not coeffs:
                raise ValueError("영 다항식을 만들려면 field가 필요합니다")
            field = type(coeffs[0])
        self.field = field
        if not coeffs:
            self.coeffs = [field(0)]
        else:
            self.coeffs = [c if isinstance(c, field) else field(int(c)) for c in coeffs]
        self._trim()

    def _trim(self):
        """최고차 계수가 0인 항을 제거한다. 예: [1, 2, 0, 0] → [1, 2]"""
        while len(self.coeffs) > 1 and self.coeffs[-1] == 0:
            self.coeffs.pop()

    @property
    def degree(self):
        """다항식의 차수. 영 다항식의 차수는 0으로 정의한다."""
        return len(self.coeffs) - 1

    def is_zero(self):
        return len(self.coeffs) == 1 and self.coeffs[0] == 0

    def evaluate(self, point):
        """Horner's method로 p(point)를 계산한다."""
        if not isinstance(point, self.field):
            point = self.field(int(point))
        result = self.field(0)
        for coeff in reversed(self.coeffs):
            result = result * point + coeff
        return result

    def _coerce(self, other):
        if isinstance(other, Polynomial):
            return other
        return Polynomial([other], self.field)

    def __add__(self, other):
        other = self._coerce(other)
        a, b = self.coeffs, other.coeffs
        if len(a) < len(b):
            a, b = b, a
        result = list(a)
        for i, c in enumerate(b):
            result[i] = result[i] + c
        return Polynomial(result, self.field)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        return self + (-self._coerce(other))

    def __rsub__(self, other):
        return self._coerce(other) - self

    def __neg__(self):
        return Polynomial([-c for c in self.coeffs], self.field)

    def __mul__(self, other):
        """다항식 곱셈 또는 스칼라곱.

        다항식 × 다항식은 O(n²) 나이브 곱셈이다. 큰 곱은 코셋 FFT를 사용한다.
        """
        if not isinstance(other, Polynomial):
            if not isinstance(other, self.field):
                other = self.field(int(other))
            return Polynomial([c * other for c in self.coeffs], self.field)
        result = [self.field(0)] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            if a == 0:
                continue
            for j, b in enumerate(other.coeffs):
                result[i + j] = result[i + j] + a * b
        return Polynomial(result, self.field)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __eq__(self, other):
        if not isinstance(other, Polynomial):
            other = Polynomial([other], self.field)
        return self.coeffs == other.coeffs

    def __repr__(self):
        terms = []
        for i, c in enumerate(self.coeffs):
            if c == 0:
                continue
            if i == 0:
                terms.append(str(int(c)))
            elif i == 1:
                terms.append(f"{int(c)}*x")
            else:
                terms.append(f"{int(c)}*x^{i}")
        return "Poly(" + " + ".join(terms) + ")" if terms else "Poly(0)"

    def __len__(self):
        """계수 개수 반환 (차수 + 1)."""
        return len(self.coeffs)

    @classmethod
    def zero(cls, field):
        return cls([field(0)], field)

    @classmethod
    def from_evaluations(cls, evals, domain):
        """도메인 위의 평가값을 보간하는 유일한 (n-1)차 이하 다항식 (IFFT)."""
        return cls(domain.ifft(evals), domain.backend.Fr)


# ─────────────────────────────────────────────────────────────────────
# 다항식 나눗셈
# ─────────────────────────────────────────────────────────────────────

def divide_by_linear(poly, point):
    """조립제법으로 p(x) / (x - z)를 계산한다.

    몫 q(x)와 나머지 p(z)를 함께 돌려준다. p(x) - p(z) = (x - z)·q(x).

    Args:
        poly: 피제수 p(x)
        point: z (Fr 원소)

    Returns:
        tuple: (q(x), p(z))
    """
    field = poly.field
    coeffs = poly.coeffs
    if len(coeffs) == 1:
        return Polynomial.zero(field), coeffs[0]
    quotient = [field(0)] * (len(coeffs) - 1)
    carry = coeffs[-1]
    for i in range(len(coeffs) - 2, -1, -1):
        quotient[i] = carry
        carry = coeffs[i] + carry * point
    return Polynomial(quotient, field), carry
