"""
ISEP Structured Reference String (SRS)
=======================================

KZG 다항식 커밋먼트에 필요한 공개 파라미터를 생성한다.

  SRS = {
      G1 powers: [G1, τ·G1, τ²·G1, ..., τ^d·G1]
      G2 powers: [G2, τ·G2]
  }

**보안**:
  τ ("toxic waste")를 아는 사람은 임의의 거짓 증명을 만들 수 있다.
  τ는 setup 호출의 지역 변수로만 존재하며 SRS 객체에 저장되지 않는다.
  검증 방정식은 [1]₂와 [τ]₂만 사용하므로 G2 powers는 두 개로 충분하다.

**두 가지 생성 경로**:
  - SRS.setup: 운영용. τ를 rng(또는 secrets)에서 뽑는다.
  - SRS.unsafe_setup_from_tau: 테스트용. 명시적 τ로 결정론적 SRS를 만든다.

사용 예시:
    >>> from zkp.isep.backend import BN128
    >>> srs = SRS.setup(max_degree=16, backend=BN128)
    >>> len(srs.g1_powers)  # 17 (0차부터 16차까지)
"""

import logging
import secrets

from zkp.isep.utils import powers_of

logger = logging.getLogger(__name__)


class SRS:
    """Structured Reference String: KZG 커밋먼트용 공개 파라미터.

    속성:
        g1_powers: [G1, τ·G1, τ²·G1, ..., τ^d·G1]
        g2_powers: [G2, τ·G2]
        max_degree: 지원하는 최대 다항식 차수 d
        backend: 대수 백엔드
    """

    def __init__(self, g1_powers, g2_powers, max_degree, backend):
        self.g1_powers = tuple(g1_powers)
        self.g2_powers = tuple(g2_powers)
        self.max_degree = max_degree
        self.backend = backend

    @classmethod
    def setup(cls, max_degree, backend, rng=None, workers=1):
        """랜덤 τ로 SRS를 생성한다.

        Args:
            max_degree: 지원할 최대 다항식 차수
            backend: 대수 백엔드
            rng: randrange(a, b)를 제공하는 난수 생성기 (예: random.Random).
                 생략하면 secrets 모듈을 사용한다.
            workers: G1 스칼라 곱에 사용할 프로세스 수

        Returns:
            SRS
        """
        if rng is None:
            tau = secrets.randbelow(backend.curve_order - 1) + 1
        else:
            tau = rng.randrange(1, backend.curve_order)
        srs = cls.unsafe_setup_from_tau(max_degree, tau, backend, workers=workers)
        del tau
        return srs

    @classmethod
    def unsafe_setup_from_tau(cls, max_degree, tau, backend, workers=1):
        """명시적 τ로 SRS를 생성한다 (결정론적 테스트 전용).

        예시:
            >>> srs = SRS.unsafe_setup_from_tau(8, 1234, BN128)
            >>> srs.g1_powers[1] == BN128.ec_mul(BN128.G1, 1234)
        """
        tau = backend.fr(tau)
        tau_powers = powers_of(tau, max_degree + 1, backend.Fr)
        g1_powers = backend.ec_mul_many([backend.G1] * len(tau_powers), tau_powers, workers)
        g2_powers = [backend.G2, backend.ec_mul(backend.G2, tau)]
        logger.debug("%s SRS 생성: max_degree=%d", backend.name, max_degree)
        return cls(g1_powers, g2_powers, max_degree, backend)
