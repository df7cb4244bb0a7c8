"""
ISEP Witness (비공개 입력)
===========================

두 비공개 배열과 그 보간 다항식.

  left_values  (길이 N_L) → LV(x) = IFFT_L(left_values)
  right_values (길이 N_R) → RV(x) = IFFT_R(right_values)

Witness는 직렬화하지 않는다.

사용 예시:
    >>> witness = Witness.new(pp, left_values, right_values)
    >>> statement = witness.generate_statement(pp)
"""

from zkp.isep.errors import WrongNumberOfLeftValues, WrongNumberOfRightValues
from zkp.isep.polynomial import Polynomial
from zkp.isep.statement import derive_statement


class Witness:
    """비공개 배열 쌍.

    속성:
        left_values, right_values: Fr 원소 리스트
        poly_left_values, poly_right_values: LV(x), RV(x)
    """

    def __init__(self, left_values, right_values, poly_left_values, poly_right_values):
        self.left_values = left_values
        self.right_values = right_values
        self.poly_left_values = poly_left_values
        self.poly_right_values = poly_right_values

    @classmethod
    def new(cls, pp, left_values, right_values):
        """길이를 검사하고 두 배열을 보간한다.

        Args:
            pp: PublicParameters
            left_values: 길이 N_L의 정수 또는 Fr 리스트
            right_values: 길이 N_R의 정수 또는 Fr 리스트

        Raises:
            WrongNumberOfLeftValues / WrongNumberOfRightValues: 길이가 다를 때
        """
        if len(left_values) != pp.size_left_values:
            raise WrongNumberOfLeftValues(len(left_values), pp.size_left_values)
        if len(right_values) != pp.size_right_values:
            raise WrongNumberOfRightValues(len(right_values), pp.size_right_values)

        left = [pp.backend.fr(v) for v in left_values]
        right = [pp.backend.fr(v) for v in right_values]
        return cls(
            left,
            right,
            Polynomial.from_evaluations(left, pp.domain_l),
            Polynomial.from_evaluations(right, pp.domain_r),
        )

    def generate_statement(self, pp):
        return derive_statement(pp, self)

    def __repr__(self):
        return f"Witness(N_L={len(self.left_values)}, N_R={len(self.right_values)})"


build_witness = Witness.new
