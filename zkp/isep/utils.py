"""
ISEP 공유 유틸리티
===================

**주요 기능**:
  - is_power_of_two: 도메인 크기 검사
  - powers_of: [1, x, x², ..., x^{n-1}]
  - batch_inverse: Montgomery 일괄 역원 (n번의 역원 → 1번의 역원 + 3(n-1)번의 곱셈)
  - linear_combination: Σ ρᵏ·vₖ (일괄 열기의 평가값 결합)
"""

from zkp.isep.errors import FailedToInverseFieldElement


def is_power_of_two(n):
    return isinstance(n, int) and n > 0 and (n & (n - 1)) == 0


def powers_of(x, n, field):
    """[x⁰, x¹, ..., x^{n-1}]를 반환한다."""
    result = []
    current = field(1)
    for _ in range(n):
        result.append(current)
        current = current * x
    return result


def batch_inverse(values, field, context="batch inverse"):
    """Montgomery 트릭으로 모든 원소의 역원을 계산한다.

    Args:
        values: Fr 원소 리스트
        field: Fr 클래스
        context: 실패 시 오류 메시지에 넣을 설명

    Returns:
        list: [1/v for v in values]

    Raises:
        FailedToInverseFieldElement: 원소 중 하나라도 0인 경우
    """
    if not values:
        return []
    # prefix[i] = v₀·v₁·…·v_{i-1}
    prefix = [field(1)]
    for v in values:
        if v == 0:
            raise FailedToInverseFieldElement(context)
        prefix.append(prefix[-1] * v)

    inv = field(1) / prefix[-1]
    result = [None] * len(values)
    for i in range(len(values) - 1, -1, -1):
        result[i] = inv * prefix[i]
        inv = inv * values[i]
    return result


def linear_combination(values, separation, field):
    """Σ ρᵏ·vₖ (k = 0, 1, ...)."""
    result = field(0)
    power = field(1)
    for v in values:
        result = result + power * v
        power = power * separation
    return result
