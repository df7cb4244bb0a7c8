"""
ISEP E2E 데모 및 시간 측정
===========================

N_L 크기 왼쪽 배열의 짝수 위치 절반을 N_R 크기 오른쪽 배열의 위치에
매핑하여 설정, 증명, 검증에 걸린 시간(ms)을 출력한다.

실행:
    python -m zkp.isep.example
    python -m zkp.isep.example --left 8 --right 16 --curve bls12_381 -v

흐름:
    1. 공개 파라미터 생성 (SRS + 전처리)
    2. Witness / Statement 생성
    3. 증명 생성
    4. 증명 검증
    5. (선택) 값을 바꾼 배열로 증명이 거부되는지 확인
"""

import argparse
import logging
import random
import time

from zkp.isep import (
    PublicParametersConfig,
    build_public_parameters,
    build_witness,
    derive_statement,
    prove,
    verify,
)
from zkp.isep.errors import VerificationError
from zkp.isep.utils import is_power_of_two


def sample_instance(size_left, size_right, rng):
    """왼쪽 짝수 위치 ↔ 오른쪽 위치를 연결하는 매핑과 일치하는 배열 쌍을 만든다."""
    count = min(size_left // 2, size_right) or 1
    positions_left = list(range(0, 2 * count, 2))
    stride = max(size_right // count, 1)
    positions_right = [j * stride for j in range(count)]
    mappings = dict(zip(positions_left, positions_right))

    left_values = [rng.randrange(1 << 64) for _ in range(size_left)]
    right_values = [rng.randrange(1 << 64) for _ in range(size_right)]
    for i, j in mappings.items():
        right_values[j] = left_values[i]
    return positions_left, positions_right, mappings, left_values, right_values


def power_of_two(text):
    """argparse 타입: 2의 거듭제곱인 양의 정수."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"정수가 아닙니다: {text!r}")
    if not is_power_of_two(value):
        raise argparse.ArgumentTypeError(f"2의 거듭제곱이 아닙니다: {value}")
    return value


def _elapsed_ms(start):
    return (time.perf_counter() - start) * 1000


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="ISEP 설정/증명/검증 시간 측정",
    )
    parser.add_argument("--left", type=power_of_two, default=8, help="왼쪽 배열 크기 N_L (2의 거듭제곱)")
    parser.add_argument("--right", type=power_of_two, default=16, help="오른쪽 배열 크기 N_R (2의 거듭제곱)")
    parser.add_argument("--curve", default="bn128", choices=["bn128", "bls12_381"])
    parser.add_argument("--workers", type=int, default=1, help="MSM 프로세스 수")
    parser.add_argument("--seed", type=int, default=None, help="재현 가능한 실행을 위한 시드")
    parser.add_argument("--tamper", action="store_true", help="값을 바꾼 배열이 거부되는지도 확인")
    parser.add_argument("-v", "--verbose", action="store_true", help="DEBUG 로그 출력")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    rng = random.Random(args.seed)

    print("=" * 60)
    print("  ISEP (Index-Selected Equality Proof) Demo")
    print(f"  curve={args.curve}  N_L={args.left}  N_R={args.right}")
    print("=" * 60)

    positions_left, positions_right, mappings, left_values, right_values = (
        sample_instance(args.left, args.right, rng)
    )
    print(f"\n    매핑: {mappings}")

    # ── 1. 공개 파라미터 ──
    start = time.perf_counter()
    config = PublicParametersConfig(
        size_left_values=args.left,
        size_right_values=args.right,
        positions_left=positions_left,
        positions_right=positions_right,
        position_mappings=mappings,
        curve=args.curve,
        workers=args.workers,
    )
    pp = build_public_parameters(config, rng=rng)
    print(f"\n[1] 설정: {_elapsed_ms(start):.1f} ms")

    # ── 2. Witness / Statement ──
    start = time.perf_counter()
    witness = build_witness(pp, left_values, right_values)
    statement = derive_statement(pp, witness)
    print(f"[2] Witness/Statement: {_elapsed_ms(start):.1f} ms")

    # ── 3. 증명 ──
    start = time.perf_counter()
    proof = prove(pp, witness, statement)
    print(f"[3] 증명 생성: {_elapsed_ms(start):.1f} ms")
    print(f"    증명 크기: {len(proof.to_bytes())} bytes")

    # ── 4. 검증 ──
    start = time.perf_counter()
    verify(pp, statement, proof)
    print(f"[4] 검증: {_elapsed_ms(start):.1f} ms  ✓")

    # ── 5. 변조 ──
    if args.tamper:
        bad_left = list(left_values)
        bad_left[positions_left[0]] += 1
        bad_witness = build_witness(pp, bad_left, right_values)
        bad_statement = derive_statement(pp, bad_witness)
        bad_proof = prove(pp, bad_witness, bad_statement)
        try:
            verify(pp, bad_statement, bad_proof)
        except VerificationError as e:
            print(f"[5] 변조된 배열 거부: {type(e).__name__}  ✓")
        else:
            print("[5] 변조된 배열이 통과했습니다  ✗")


if __name__ == "__main__":
    main()
