"""
ISEP 정규 바이트 인코딩
========================

트랜스크립트, 해시 표현, Statement/Proof 직렬화가 모두 같은 인코딩을 사용한다.
Prover와 Verifier가 같은 바이트를 만들어야 챌린지가 일치하므로 형식은 고정이다.

  - Fr:    32바이트 리틀엔디안
  - G1:    아핀 x || y (각각 기저체 크기의 리틀엔디안), 무한원점은 전부 0
  - G2:    x.c0 || x.c1 || y.c0 || y.c1
  - usize: u64 리틀엔디안

디코딩은 길이, 값의 범위, 곡선 위 여부, 부분군 소속을 검사하며
실패하면 FailedToSerializeElement를 발생시킨다.
"""

import hashlib

from zkp.isep.errors import FailedToSerializeElement


def blake2b_512(*chunks):
    """Blake2b-512(chunk₀ || chunk₁ || ...)"""
    h = hashlib.blake2b(digest_size=64)
    for chunk in chunks:
        h.update(chunk)
    return h.digest()


# ─── usize ───

def encode_usize(value):
    return int(value).to_bytes(8, "little")


# ─── Fr ───

def encode_fr(value, backend):
    """Fr → 32바이트 리틀엔디안"""
    return (int(value) % backend.curve_order).to_bytes(backend.fr_bytes, "little")


def decode_fr(data, backend):
    if len(data) != backend.fr_bytes:
        raise FailedToSerializeElement(f"Fr 인코딩 길이가 {len(data)}입니다")
    value = int.from_bytes(data, "little")
    if value >= backend.curve_order:
        raise FailedToSerializeElement("Fr 값이 스칼라체 위수 이상입니다")
    return backend.Fr(value)


# ─── G1 point ───

def encode_g1(point, backend):
    """G1 점 → x || y (무한원점은 0으로 채움)"""
    size = backend.fq_bytes
    if backend.is_inf(point):
        return b"\x00" * (2 * size)
    x, y = backend.normalize(point)
    return int(x).to_bytes(size, "little") + int(y).to_bytes(size, "little")


def decode_g1(data, backend):
    size = backend.fq_bytes
    if len(data) != 2 * size:
        raise FailedToSerializeElement(f"G1 인코딩 길이가 {len(data)}입니다")
    if not any(data):
        return backend.Z1
    x = _decode_fq(data[:size], backend)
    y = _decode_fq(data[size:], backend)
    point = backend.g1_from_affine(x, y)
    if point is None:
        raise FailedToSerializeElement("G1 점이 곡선 위에 있지 않습니다")
    if not backend.in_subgroup(point):
        raise FailedToSerializeElement("G1 점이 소수 위수 부분군에 속하지 않습니다")
    return point


# ─── G2 point ───

def encode_g2(point, backend):
    """G2 점 → x.c0 || x.c1 || y.c0 || y.c1"""
    size = backend.fq_bytes
    if backend.is_inf(point):
        return b"\x00" * (4 * size)
    x, y = backend.normalize(point)
    return b"".join(
        int(c).to_bytes(size, "little")
        for c in (x.coeffs[0], x.coeffs[1], y.coeffs[0], y.coeffs[1])
    )


def decode_g2(data, backend):
    size = backend.fq_bytes
    if len(data) != 4 * size:
        raise FailedToSerializeElement(f"G2 인코딩 길이가 {len(data)}입니다")
    if not any(data):
        return backend.Z2
    c = [_decode_fq(data[i * size:(i + 1) * size], backend) for i in range(4)]
    point = backend.g2_from_affine((c[0], c[1]), (c[2], c[3]))
    if point is None:
        raise FailedToSerializeElement("G2 점이 곡선 위에 있지 않습니다")
    if not backend.in_subgroup(point):
        raise FailedToSerializeElement("G2 점이 소수 위수 부분군에 속하지 않습니다")
    return point


def _decode_fq(data, backend):
    value = int.from_bytes(data, "little")
    if value >= backend.field_modulus:
        raise FailedToSerializeElement("좌표가 기저체 위수 이상입니다")
    return value


# ─── Evaluation domain ───

def encode_domain(domain):
    """도메인 파라미터: size, log_size, N, N⁻¹, ω, ω⁻¹, g, g⁻¹"""
    backend = domain.backend
    return b"".join([
        encode_usize(domain.size),
        encode_usize(domain.log_size),
        encode_fr(domain.size_as_field, backend),
        encode_fr(domain.size_inv, backend),
        encode_fr(domain.generator, backend),
        encode_fr(domain.generator_inv, backend),
        encode_fr(domain.offset, backend),
        encode_fr(domain.offset_inv, backend),
    ])


# ─── 디코딩 커서 ───

class ByteReader:
    """바이트열을 앞에서부터 차례로 읽는 커서.

    예시:
        >>> reader = ByteReader(data, BN128)
        >>> commitment = reader.read_g1()
        >>> reader.finish()  # 남은 바이트가 있으면 오류
    """

    def __init__(self, data, backend):
        self.data = bytes(data)
        self.backend = backend
        self.offset = 0

    def _take(self, n):
        if self.offset + n > len(self.data):
            raise FailedToSerializeElement(
                f"입력이 너무 짧습니다: {len(self.data)}바이트"
            )
        chunk = self.data[self.offset:self.offset + n]
        self.offset += n
        return chunk

    def read_fr(self):
        return decode_fr(self._take(self.backend.fr_bytes), self.backend)

    def read_g1(self):
        return decode_g1(self._take(2 * self.backend.fq_bytes), self.backend)

    def read_g2(self):
        return decode_g2(self._take(4 * self.backend.fq_bytes), self.backend)

    def read_bytes(self, n):
        return self._take(n)

    def finish(self):
        if self.offset != len(self.data):
            raise FailedToSerializeElement(
                f"입력 끝에 {len(self.data) - self.offset}바이트가 남았습니다"
            )
