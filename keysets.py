"""
Key-set generators for the collision benchmark
Random strings, random UUIDs and word lists, each guaranteed free of duplicates.
"""

import random
import string
import uuid

LETTERS = string.ascii_lowercase + string.ascii_uppercase + string.digits


class KeySetError(Exception):
    """A key set could not be produced"""


class WordListError(KeySetError):
    """The word list could not be read"""


class DuplicateKeyError(KeySetError):
    """The word list contains the same line twice"""

    def __init__(self, key, lineno):
        super().__init__(f"duplicate word {key!r} on line {lineno}")
        self.key = key
        self.lineno = lineno


def rand_string(n, rng):
    """Random string of n characters drawn from LETTERS."""
    return ''.join(rng.choices(LETTERS, k=n))


def _unique(n, candidate):
    # Retry until n distinct candidates have been produced
    seen = set()
    keys = []
    while len(keys) < n:
        k = candidate()
        if k in seen:
            continue
        seen.add(k)
        keys.append(k)
    return keys


def _check_count(n, capacity):
    if n < 0:
        raise ValueError(f"key count must not be negative: {n}")
    if n > capacity:
        raise ValueError(f"cannot generate {n} unique keys, only {capacity} exist")


def get_random(n, strlen, rng=None):
    """n unique random strings of exactly strlen characters"""
    if strlen <= 0:
        raise ValueError(f"string length must be positive: {strlen}")
    _check_count(n, len(LETTERS) ** strlen)
    rng = rng or random.Random()
    return _unique(n, lambda: rand_string(strlen, rng))


def get_random_var_len(n, minlen, maxlen, rng=None):
    """n unique random strings with lengths drawn uniformly from [minlen, maxlen]"""
    if minlen <= 0 or minlen > maxlen:
        raise ValueError(f"invalid length range: [{minlen}, {maxlen}]")
    _check_count(n, sum(len(LETTERS) ** l for l in range(minlen, maxlen + 1)))
    rng = rng or random.Random()
    return _unique(n, lambda: rand_string(rng.randint(minlen, maxlen), rng))


def get_uuids(n, rng=None):
    """n unique random version 4 UUIDs in canonical text form"""
    _check_count(n, 1 << 122)
    rng = rng or random.Random()
    return _unique(n, lambda: str(uuid.UUID(int=rng.getrandbits(128), version=4)))


def get_words(path="words.txt"):
    """Read one key per line from a UTF-8 word list.

    Raises WordListError if the file cannot be opened or decoded, and
    DuplicateKeyError as soon as a line repeats an earlier one.
    """
    try:
        # Split on "\n" only; a lone "\r" belongs to the word
        f = open(path, encoding="utf-8", newline="\n")
    except OSError as e:
        raise WordListError(f"cannot open word list {path}: {e}") from e

    seen = set()
    keys = []
    with f:
        try:
            for lineno, line in enumerate(f, 1):
                k = line[:-1] if line.endswith("\n") else line
                if k.endswith("\r"):
                    k = k[:-1]
                if k in seen:
                    raise DuplicateKeyError(k, lineno)
                seen.add(k)
                keys.append(k)
        except UnicodeDecodeError as e:
            raise WordListError(f"cannot decode word list {path}: {e}") from e
    return keys
