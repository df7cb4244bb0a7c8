"""
ISEP 대수 백엔드: 스칼라체(Fr), 타원곡선 그룹 및 페어링
=========================================================

이 모듈은 프로토콜 전체에서 사용되는 대수적 도구를 하나의 "능력 집합
(capability set)"으로 묶는다. 프로토콜 코드는 이 집합에만 의존하므로
곡선을 바꿔도 증명/검증 로직은 한 번만 작성하면 된다.

**스칼라체 Fr**:
  곡선의 스칼라 필드. 모든 다항식 연산과 챌린지가 이 체 위에서 이루어진다.
  - bn128:     r ≈ 2^254, r - 1 = 2^28 × m  → 2-adicity 28, 생성자 5
  - bls12_381: r ≈ 2^255, r - 1 = 2^32 × m  → 2-adicity 32, 생성자 7

**그룹 연산**:
  py_ecc의 optimized 구현 (사영 좌표)을 사용한다.
  G1, G2 점은 (x, y, z) 튜플이며 z = 0이면 무한원점이다.

**MSM (Multi-Scalar Multiplication)**:
  KZG 커밋먼트의 핵심 비용. Σ sᵢ · Pᵢ 를 계산한다.
  workers > 1이면 각 sᵢ · Pᵢ를 프로세스 풀에서 독립적으로 계산한 뒤
  인덱스 순서대로 더한다.

사용 예시:
    >>> from zkp.isep.backend import BN128
    >>> a = BN128.Fr(3)
    >>> P = BN128.ec_mul(BN128.G1, 5)   # 5·G1
"""

import logging
import multiprocessing

from py_ecc import optimized_bn128, optimized_bls12_381
from py_ecc.fields import bn128_FQ, bls12_381_FQ

from zkp.isep.errors import UnsupportedCurve

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# 스칼라체(Scalar Field) 원소
# ─────────────────────────────────────────────────────────────────────

class BN128FR(bn128_FQ):
    """bn128 스칼라 필드 위의 원소.

    py_ecc의 FQ를 상속하여 +, -, *, /, ** 연산을 제공한다.

    주의:
        FQ의 나눗셈은 0의 역원을 0으로 돌려준다. 역원이 반드시 존재해야
        하는 곳에서는 호출자가 먼저 0인지 확인해야 한다.
    """
    field_modulus = optimized_bn128.curve_order


class BLS12381FR(bls12_381_FQ):
    """bls12_381 스칼라 필드 위의 원소."""
    field_modulus = optimized_bls12_381.curve_order


def _two_adicity(order):
    """r - 1 = 2^s × m (m 홀수)에서 s를 구한다."""
    s = 0
    m = order - 1
    while m % 2 == 0:
        m //= 2
        s += 1
    return s


# ─────────────────────────────────────────────────────────────────────
# 백엔드 (능력 집합)
# ─────────────────────────────────────────────────────────────────────

class Backend:
    """하나의 페어링 곡선에 대한 대수 연산 집합.

    속성:
        name: 곡선 이름 ("bn128", "bls12_381")
        Fr: 스칼라체 원소 클래스
        curve_order: 스칼라체 위수 r
        two_adicity: r - 1을 나누는 2의 최대 지수
        generator: Fr*의 생성자 (코셋 이동값으로도 사용)
        G1, G2: 그룹 생성자
        Z1, Z2: 무한원점
        fq_bytes: 기저체 원소 하나의 정규 인코딩 길이
    """

    def __init__(self, name, curve, fr_class, generator, fq_bytes):
        self.name = name
        self._curve = curve
        self.Fr = fr_class
        self.curve_order = curve.curve_order
        self.field_modulus = curve.FQ.field_modulus
        self.two_adicity = _two_adicity(curve.curve_order)
        self.generator = fr_class(generator)
        self.G1 = curve.G1
        self.G2 = curve.G2
        self.Z1 = curve.Z1
        self.Z2 = curve.Z2
        self.FQ = curve.FQ
        self.FQ2 = curve.FQ2
        self.fq_bytes = fq_bytes
        self.fr_bytes = 32

    def __repr__(self):
        return f"Backend({self.name})"

    # ── 스칼라 ──

    def fr(self, value):
        """정수 또는 Fr 원소를 이 백엔드의 Fr로 변환한다."""
        if isinstance(value, self.Fr):
            return value
        return self.Fr(int(value) % self.curve_order)

    # ── 그룹 연산 ──

    def ec_mul(self, point, scalar):
        """스칼라 곱셈: scalar · point (G1, G2 공통)."""
        return self._curve.multiply(point, int(scalar) % self.curve_order)

    def ec_add(self, p1, p2):
        """점 덧셈: p1 + p2."""
        return self._curve.add(p1, p2)

    def ec_neg(self, point):
        """점의 역원: -point."""
        return self._curve.neg(point)

    def ec_eq(self, p1, p2):
        """사영 좌표를 고려한 점 동등 비교."""
        return self._curve.eq(p1, p2)

    def ec_pairing(self, g2_point, g1_point):
        """페어링 e(G1, G2) → GT.

        주의:
            py_ecc의 pairing 인자 순서는 (G2, G1)이다.
        """
        return self._curve.pairing(g2_point, g1_point)

    def is_inf(self, point):
        """무한원점 여부 (z 좌표가 0)."""
        z = point[2]
        return z == z.zero()

    def in_subgroup(self, point):
        """r · point == O 인지 확인한다 (소수 위수 부분군 검사)."""
        return self.is_inf(self._curve.multiply(point, self.curve_order))

    def normalize(self, point):
        """사영 좌표 (x, y, z)를 아핀 좌표 (x, y)로 변환한다."""
        return self._curve.normalize(point)

    def g1_from_affine(self, x, y):
        """아핀 좌표에서 G1 점을 만든다. 곡선 위에 없으면 None."""
        point = (self.FQ(x), self.FQ(y), self.FQ.one())
        if not self._curve.is_on_curve(point, self._curve.b):
            return None
        return point

    def g2_from_affine(self, x, y):
        """아핀 좌표 ((x0, x1), (y0, y1))에서 G2 점을 만든다."""
        point = (self.FQ2(list(x)), self.FQ2(list(y)), self.FQ2.one())
        if not self._curve.is_on_curve(point, self._curve.b2):
            return None
        return point

    # ── MSM ──

    def msm(self, points, scalars, workers=1):
        """Multi-Scalar Multiplication: Σ sᵢ · Pᵢ.

        0인 스칼라는 건너뛴다. workers > 1이면 스칼라 곱을 프로세스 풀에서
        병렬로 계산하되, 덧셈은 인덱스 순서대로 수행한다.

        Args:
            points: 점 리스트
            scalars: Fr 원소 또는 정수 리스트 (len(scalars) ≤ len(points))
            workers: 프로세스 수 (1이면 순차 실행)

        Returns:
            Σ sᵢ · Pᵢ (scalars가 모두 0이면 무한원점)
        """
        terms = [(p, int(s) % self.curve_order)
                 for p, s in zip(points, scalars) if int(s) % self.curve_order]
        if not terms:
            if points and not isinstance(points[0][0], self.FQ):
                return self.Z2
            return self.Z1
        products = self.ec_mul_many([p for p, _ in terms], [s for _, s in terms], workers)
        result = products[0]
        for term in products[1:]:
            result = self.ec_add(result, term)
        return result

    def ec_mul_many(self, points, scalars, workers=1):
        """독립적인 스칼라 곱 [sᵢ · Pᵢ]를 계산한다 (순서 보존)."""
        if workers <= 1 or len(points) < 2 * workers:
            return [self.ec_mul(p, s) for p, s in zip(points, scalars)]
        logger.debug("%s: %d개의 스칼라 곱을 %d개 프로세스로 계산", self.name, len(points), workers)
        with multiprocessing.Pool(workers) as pool:
            return pool.starmap(_mul_worker, [(self.name, p, int(s)) for p, s in zip(points, scalars)])


def _mul_worker(name, point, scalar):
    return get_backend(name).ec_mul(point, scalar)


# ─────────────────────────────────────────────────────────────────────
# 백엔드 인스턴스
# ─────────────────────────────────────────────────────────────────────

BN128 = Backend("bn128", optimized_bn128, BN128FR, generator=5, fq_bytes=32)
BLS12_381 = Backend("bls12_381", optimized_bls12_381, BLS12381FR, generator=7, fq_bytes=48)

_BACKENDS = {
    "bn128": BN128,
    "bn254": BN128,
    "bls12_381": BLS12_381,
}


def get_backend(name):
    """이름으로 백엔드를 찾는다.

    Raises:
        UnsupportedCurve: 알 수 없는 곡선 이름
    """
    try:
        return _BACKENDS[name.lower()]
    except (KeyError, AttributeError):
        raise UnsupportedCurve(name) from None
