"""
ISEP 오류 분류
===============

  - ShapeError:         입력 형태 오류 (크기, 누락된 파라미터, 길이 불일치).
                        호출 지점에서 즉시 발생하며 보정하지 않는다.
  - AlgebraicError:     역원이 있어야 할 원소가 0인 경우.
                        정직한 랜덤 챌린지에서는 무시할 수 있는 확률로만 발생하므로
                        충돌 입력이나 구현 버그를 의미한다.
  - VerificationError:  검증 실패. 결함이 아니라 정상적인 거부 결과이다.
  - SerializationError: 인코딩/디코딩 실패.

SRSTooSmall은 신뢰할 수 없는 입력으로는 도달할 수 없는 내부 불변식 위반이므로
IsepError가 아닌 AssertionError 계열이다.
"""


class IsepError(Exception):
    """모든 ISEP 오류의 기반 클래스."""


# ─────────────────────────────────────────────────────────────────────
# 형태 오류
# ─────────────────────────────────────────────────────────────────────

class ShapeError(IsepError, ValueError):
    pass


class MissingParameter(ShapeError):
    def __init__(self, name):
        super().__init__(f"필수 파라미터가 없습니다: {name}")
        self.name = name


class InvalidEvaluationDomainSize(ShapeError):
    def __init__(self, size):
        super().__init__(f"평가 도메인 크기가 올바르지 않습니다: {size}")
        self.size = size


class InvalidDomainGenerator(ShapeError):
    def __init__(self, size):
        super().__init__(f"도메인 생성자가 {size}차 원시 단위근이 아닙니다")
        self.size = size


class InputShouldBePowerOfTwo(ShapeError):
    def __init__(self, value):
        super().__init__(f"입력은 2의 거듭제곱이어야 합니다: {value}")
        self.value = value


class LeftIndicesCannotBeNone(ShapeError):
    def __init__(self):
        super().__init__("positions_left가 없습니다")


class RightIndicesCannotBeNone(ShapeError):
    def __init__(self):
        super().__init__("positions_right가 없습니다")


class IndexMappingCannotBeNone(ShapeError):
    def __init__(self):
        super().__init__("position_mappings가 없습니다")


class PositionsLengthMismatch(ShapeError):
    def __init__(self, num_left, num_right):
        super().__init__(
            f"positions_left({num_left})와 positions_right({num_right})의 길이가 다릅니다"
        )


class InvalidPosition(ShapeError):
    """범위를 벗어나거나 중복된 위치."""


class InvalidPositionMapping(ShapeError):
    """positions_left → positions_right 전단사가 아닌 매핑."""


class WrongNumberOfLeftValues(ShapeError):
    def __init__(self, actual, expected):
        super().__init__(f"왼쪽 값의 개수가 {expected}가 아닙니다: {actual}")
        self.actual = actual


class WrongNumberOfRightValues(ShapeError):
    def __init__(self, actual, expected):
        super().__init__(f"오른쪽 값의 개수가 {expected}가 아닙니다: {actual}")
        self.actual = actual


class UnsupportedCurve(ShapeError):
    def __init__(self, name):
        super().__init__(f"지원하지 않는 곡선입니다: {name}")


# ─────────────────────────────────────────────────────────────────────
# 대수적 실패
# ─────────────────────────────────────────────────────────────────────

class AlgebraicError(IsepError, ArithmeticError):
    pass


class FailedToInverseFieldElement(AlgebraicError):
    def __init__(self, context="field element"):
        super().__init__(f"0의 역원을 구할 수 없습니다 ({context})")


# ─────────────────────────────────────────────────────────────────────
# 검증 실패
# ─────────────────────────────────────────────────────────────────────

class VerificationError(IsepError):
    pass


class Pairing1Failed(VerificationError):
    """몫 관계 또는 δ에서의 일괄 열기 페어링 실패."""


class Pairing2Failed(VerificationError):
    """0에서의 일괄 열기 페어링 실패."""


class EqualityCheckFailed(VerificationError):
    """L(0)·N_L ≠ R(0)·N_R (grand-sum 불일치)."""


# ─────────────────────────────────────────────────────────────────────
# 직렬화 실패
# ─────────────────────────────────────────────────────────────────────

class SerializationError(IsepError, ValueError):
    pass


class FailedToSerializeElement(SerializationError):
    pass


# ─────────────────────────────────────────────────────────────────────
# 내부 불변식
# ─────────────────────────────────────────────────────────────────────

class SRSTooSmall(AssertionError):
    def __init__(self, degree, max_degree):
        super().__init__(
            f"다항식 차수 {degree}가 SRS 최대 차수 {max_degree}를 초과합니다"
        )
