"""
Hash function wrappers
Every hash family exposes the same write / sum / reset interface so the
collision and throughput benchmarks can drive them through one code path.
"""

import hashlib

import xxhash


class Hasher:
    """Base class for a stateful hash function.

    write() absorbs bytes, sum() returns the digest of everything absorbed
    so far appended to an optional prefix, reset() clears the state.
    """
    name = None
    size = 0

    def write(self, data):
        raise NotImplementedError

    def sum(self, b=b""):
        raise NotImplementedError

    def reset(self):
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class FNV(Hasher):
    """FNV-1 / FNV-1a in 32, 64 or 128 bits"""

    PARAMS = {
        32: (0x811C9DC5, 0x01000193),
        64: (0xCBF29CE484222325, 0x100000001B3),
        128: (0x6C62272E07BB014262B821756295C58D,
              0x0000000001000000000000000000013B),
    }

    def __init__(self, bits, alternate=False):
        if bits not in self.PARAMS:
            raise ValueError(f"unsupported FNV width: {bits}")
        self.offset, self.prime = self.PARAMS[bits]
        self.mask = (1 << bits) - 1
        self.size = bits // 8
        self.alternate = alternate
        self.name = f"fnv1{'a' if alternate else ''}-{bits}"
        self.state = self.offset

    def write(self, data):
        h = self.state
        prime, mask = self.prime, self.mask
        if self.alternate:
            for byte in data:
                h ^= byte
                h = (h * prime) & mask
        else:
            for byte in data:
                h = (h * prime) & mask
                h ^= byte
        self.state = h
        return len(data)

    def sum(self, b=b""):
        return bytes(b) + self.state.to_bytes(self.size, "big")

    def reset(self):
        self.state = self.offset


class XXH3(Hasher):
    """One-shot xxh3: write() replaces the stored result, reset() does nothing."""
    name = "xxh3-64"
    size = 8

    def __init__(self):
        self.res = xxhash.xxh3_64(b"").digest()

    def write(self, data):
        self.res = xxhash.xxh3_64(data).digest()
        return len(data)

    def sum(self, b=b""):
        return bytes(b) + self.res

    def reset(self):
        pass


class XXH3128(XXH3):
    name = "xxh3-128"
    size = 16

    def __init__(self):
        self.res = xxhash.xxh3_128(b"").digest()

    def write(self, data):
        self.res = xxhash.xxh3_128(data).digest()
        return len(data)


class HashlibHasher(Hasher):
    """Streaming wrapper around a hashlib constructor"""

    def __init__(self, name, algorithm):
        self.name = name
        self.algorithm = algorithm
        self.h = hashlib.new(algorithm)
        self.size = self.h.digest_size

    def write(self, data):
        self.h.update(data)
        return len(data)

    def sum(self, b=b""):
        # digest() does not finalize a hashlib object, the state is kept
        return bytes(b) + self.h.digest()

    def reset(self):
        self.h = hashlib.new(self.algorithm)


HASH_METHODS = {
    "fnv1-32": lambda: FNV(32),
    "fnv1a-32": lambda: FNV(32, alternate=True),
    "fnv1-64": lambda: FNV(64),
    "fnv1a-64": lambda: FNV(64, alternate=True),
    "fnv1-128": lambda: FNV(128),
    "fnv1a-128": lambda: FNV(128, alternate=True),
    "xxh3-64": XXH3,
    "xxh3-128": XXH3128,
    "md5": lambda: HashlibHasher("md5", "md5"),
    "sha-1": lambda: HashlibHasher("sha-1", "sha1"),
    "sha-256": lambda: HashlibHasher("sha-256", "sha256"),
    "sha-512": lambda: HashlibHasher("sha-512", "sha512"),
    "sha3-256": lambda: HashlibHasher("sha3-256", "sha3_256"),
    "sha3-512": lambda: HashlibHasher("sha3-512", "sha3_512"),
}


def new(name):
    """Create a fresh hasher by registry name; raises KeyError if unknown."""
    try:
        factory = HASH_METHODS[name]
    except KeyError:
        raise KeyError(f"unknown hash method: {name}") from None
    return factory()
