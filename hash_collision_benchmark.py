#!/usr/bin/env python3
"""
Truncated Hash Collision Benchmark
Counts how many keys collide when hash digests are cut down to a few bytes
"""

import argparse
import random
import sys
from collections import namedtuple

import hashers
import keysets

# --- Benchmark Configuration ---
MAXLEN = 8
WORDS_PATH = "words.txt"
DEFAULT_DATASETS = ["EngWords", "Rand,100K,8-32B", "Rand,1M,8-32B"]
DEFAULT_METHODS = [
    "fnv1a-32", "fnv1a-64", "fnv1a-128",
    "sha-1", "sha-256", "md5",
    "xxh3-64", "xxh3-128",
]

Dataset = namedtuple("Dataset", ["name", "get_keys"])
Method = namedtuple("Method", ["name", "hasher"])


def build_datasets(words_path=WORDS_PATH, rng=None):
    """All known datasets by name; nothing is generated until get_keys() is called."""
    rng = rng or random.Random()
    datasets = [
        Dataset("EngWords", lambda: keysets.get_words(words_path)),
        Dataset("Rand,100K,8-32B", lambda: keysets.get_random_var_len(int(1e5), 8, 32, rng)),
        Dataset("Rand,1M,8-32B", lambda: keysets.get_random_var_len(int(1e6), 8, 32, rng)),
        Dataset("Rand,10M,8-32B", lambda: keysets.get_random_var_len(int(1e7), 8, 32, rng)),
        Dataset("Rand,100M,8-32B", lambda: keysets.get_random_var_len(int(1e8), 8, 32, rng)),
        Dataset("Rand,10M,32B", lambda: keysets.get_random(int(1e7), 32, rng)),
        Dataset("Rand,100M,32B", lambda: keysets.get_random(int(1e8), 32, rng)),
        Dataset("UUID,5M,32B", lambda: keysets.get_uuids(int(5e6), rng)),
    ]
    return {d.name: d for d in datasets}


def count_collisions(keys, h, maxlen):
    """Number of keys whose digest, cut to maxlen bytes, was already seen.

    Digests shorter than maxlen are compared in full. The hasher is reset
    after every key so each digest covers that key alone.
    """
    if maxlen <= 0:
        raise ValueError(f"maxlen must be positive: {maxlen}")

    seen = set()
    ncollisions = 0
    for k in keys:
        h.write(k.encode())
        hash_key = h.sum()[:maxlen]
        if hash_key in seen:
            ncollisions += 1
        else:
            seen.add(hash_key)
        h.reset()
    return ncollisions


def expected_collisions(nkeys, nbits):
    """Birthday-bound estimate of colliding pairs among nkeys random nbits-bit values"""
    return nkeys ** 2 / (2 * 2 ** nbits)


def format_table(rows):
    """Left-align columns, one space of padding, last column unpadded."""
    widths = {}
    for row in rows:
        for i, cell in enumerate(row[:-1]):
            widths[i] = max(widths.get(i, 0), len(cell))
    lines = []
    for row in rows:
        cells = [cell.ljust(widths[i] + 1) for i, cell in enumerate(row[:-1])]
        lines.append("".join(cells) + row[-1])
    return "\n".join(lines)


def run_report(datasets, methods, maxlen, out=None, err=None):
    """Run every (dataset, method) pair and print the collision table.

    All rows are computed before anything is written to out, so a failing
    dataset leaves no partial report behind.
    """
    out = sys.stdout if out is None else out
    err = sys.stderr if err is None else err

    results = {}
    sizes = {}
    for dataset in datasets:
        print(f"creating dataset {dataset.name}", file=err)
        keys = dataset.get_keys()
        sizes[dataset.name] = len(keys)
        print("done!", file=err)
        row = {}
        for method in methods:
            print(f"running method {method.name}", file=err)
            method.hasher.reset()
            row[method.name] = count_collisions(keys, method.hasher, maxlen)
            print("done!", file=err)
        results[dataset.name] = row
        del keys

    # One estimate per effective width; short digests are compared in full
    widths = []
    for method in methods:
        width = min(maxlen, method.hasher.size)
        if width not in widths:
            widths.append(width)

    table = [["\\"] + [m.name for m in methods] + [f"expected[:{w}]" for w in widths]]
    for name, row in results.items():
        expected = [f"{expected_collisions(sizes[name], w * 8):.3g}" for w in widths]
        table.append([name] + [str(row[m.name]) for m in methods] + expected)

    print("=" * 49, file=out)
    print(f"Collisions when k := hash[:{maxlen}]", file=out)
    print("-" * 49, file=out)
    print(format_table(table), file=out)
    print("=" * 49, file=out)
    return results


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Count collisions of truncated hash digests over generated key sets")
    parser.add_argument("--maxlen", type=int, default=MAXLEN,
                        help="bytes of each digest to compare (default: %(default)s)")
    parser.add_argument("--words", default=WORDS_PATH,
                        help="word list for the EngWords dataset (default: %(default)s)")
    parser.add_argument("--datasets", nargs="+", default=DEFAULT_DATASETS,
                        choices=list(build_datasets()), metavar="NAME")
    parser.add_argument("--methods", nargs="+", default=DEFAULT_METHODS,
                        choices=list(hashers.HASH_METHODS), metavar="NAME")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the random key generators")
    parser.add_argument("--list", action="store_true",
                        help="list datasets and hash methods, then exit")
    args = parser.parse_args(argv)
    if args.maxlen <= 0:
        parser.error("--maxlen must be positive")
    return args


def main(argv=None):
    args = parse_args(argv)
    available = build_datasets(args.words, random.Random(args.seed))

    if args.list:
        print("Datasets:")
        for name in available:
            print(f"  {name}")
        print("Hash methods:")
        for name in hashers.HASH_METHODS:
            print(f"  {name}")
        return 0

    datasets = [available[name] for name in args.datasets]
    methods = [Method(name, hashers.new(name)) for name in args.methods]
    try:
        run_report(datasets, methods, args.maxlen)
    except keysets.KeySetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
