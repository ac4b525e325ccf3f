#!/usr/bin/env python3
"""
Hash Throughput Benchmark
Times every registered hash function on small random buffers
"""

import argparse
import gc
import random
import statistics
import sys
import time

import hashers


class HashBenchmark:
    def __init__(self, iterations=100_000, buflen=24, seed=None):
        if iterations <= 0:
            raise ValueError(f"iterations must be positive: {iterations}")
        if buflen < 0:
            raise ValueError(f"buffer length must not be negative: {buflen}")
        self.iterations = iterations
        self.buflen = buflen
        self.rng = random.Random(seed)
        self.results = {}

    def time_hash(self, h, data):
        """Time one write/sum/reset cycle on a prepared buffer"""
        start = time.perf_counter()
        h.write(data)
        result = h.sum()
        h.reset()
        end = time.perf_counter()
        return end - start, result

    def benchmark_method(self, name, h):
        """Benchmark a single hash method"""
        times = []
        gc.collect()  # Clean up before timing
        for _ in range(self.iterations):
            # Buffer generation stays outside the timed region
            data = self.rng.randbytes(self.buflen)
            t, _ = self.time_hash(h, data)
            times.append(t)

        mean = statistics.mean(times)
        self.results[name] = mean
        mbps = self.buflen / mean / 1e6 if mean > 0 else float("inf")
        print(f"{name:<12} {mean*1e9:10.1f} ns/op {mbps:10.2f} MB/s")
        return mean

    def run_all_benchmarks(self, names=None):
        """Run the benchmark for every named hash method"""
        names = list(hashers.HASH_METHODS) if names is None else names
        self.results = {}
        print("Hash Throughput Benchmark")
        print("=" * 50)
        print(f"Python version: {sys.version}")
        print(f"Iterations per hash: {self.iterations}")
        print(f"Buffer length: {self.buflen} bytes")
        print(f"Platform: {sys.platform}")
        print()

        for name in names:
            self.benchmark_method(name, hashers.new(name))

        print("\n" + "=" * 50)
        print("Benchmark Summary")
        print("=" * 50)

        if not self.results:
            print("No hash methods benchmarked")
            return self.results

        sorted_results = sorted(self.results.items(), key=lambda x: x[1])
        print(f"Fastest hash: {sorted_results[0][0]} ({sorted_results[0][1]*1e9:.1f} ns/op)")
        print(f"Slowest hash: {sorted_results[-1][0]} ({sorted_results[-1][1]*1e9:.1f} ns/op)")

        return self.results


def save_results(results, path, buflen):
    with open(path, 'w') as f:
        f.write("Hash Throughput Benchmark Results\n")
        f.write("=" * 50 + "\n")
        f.write(f"Python version: {sys.version}\n")
        f.write(f"Platform: {sys.platform}\n")
        f.write(f"Buffer length: {buflen} bytes\n\n")

        for name, time_taken in sorted(results.items(), key=lambda x: x[1]):
            f.write(f"{name}: {time_taken*1e9:.1f} ns/op\n")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Benchmark hash function throughput")
    parser.add_argument("--iterations", type=int, default=100_000)
    parser.add_argument("--buflen", type=int, default=24,
                        help="bytes hashed per iteration (default: %(default)s)")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--methods", nargs="+", default=None,
                        choices=list(hashers.HASH_METHODS), metavar="NAME")
    parser.add_argument("--output", default=None,
                        help="also write the results to this file")
    args = parser.parse_args(argv)
    if args.iterations <= 0:
        parser.error("--iterations must be positive")
    if args.buflen < 0:
        parser.error("--buflen must not be negative")
    return args


def main(argv=None):
    """Main function to run benchmarks"""
    args = parse_args(argv)
    benchmark = HashBenchmark(iterations=args.iterations, buflen=args.buflen, seed=args.seed)
    results = benchmark.run_all_benchmarks(args.methods)

    if args.output:
        save_results(results, args.output, args.buflen)
        print(f"\nResults saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
