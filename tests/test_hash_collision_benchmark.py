"""
Tests for the truncated hash collision benchmark
"""

import io
import random

import pytest

import hashers
import keysets
from hash_collision_benchmark import (
    Dataset,
    Method,
    build_datasets,
    count_collisions,
    expected_collisions,
    format_table,
    main,
    run_report,
)


class PaddedIdentity(hashers.Hasher):
    """Digest is the key itself, zero padded to 4 bytes"""
    name = "identity"
    size = 4

    def __init__(self):
        self.buf = b""

    def write(self, data):
        self.buf += data
        return len(data)

    def sum(self, b=b""):
        return bytes(b) + self.buf.ljust(4, b"\x00")

    def reset(self):
        self.buf = b""


class TestCountCollisions:
    def test_distinct_first_bytes(self):
        assert count_collisions(["a", "b", "c"], PaddedIdentity(), 1) == 0

    def test_shared_first_byte(self):
        assert count_collisions(["apple", "ant"], PaddedIdentity(), 1) == 1

    def test_full_length_separates_keys(self):
        assert count_collisions(["apple", "ant"], PaddedIdentity(), 3) == 0

    def test_short_digest_used_in_full(self):
        keys = keysets.get_random(500, 8, random.Random(2))
        h = hashers.new("fnv1a-32")
        assert count_collisions(keys, h, 4) == count_collisions(keys, h, 64)

    def test_hasher_reset_between_keys(self):
        # Without a reset, the second "a" would hash "aa" and not collide
        assert count_collisions(["a", "a"], PaddedIdentity(), 4) == 1
        h = hashers.new("sha-256")
        assert count_collisions(["x", "x"], h, 32) == 1

    def test_every_repeat_counts(self):
        assert count_collisions(["ab", "ac", "ad", "b"], PaddedIdentity(), 1) == 2

    def test_deterministic(self):
        keys = keysets.get_random_var_len(3000, 8, 32, random.Random(11))
        for name in hashers.HASH_METHODS:
            h = hashers.new(name)
            assert count_collisions(keys, h, 2) == count_collisions(keys, h, 2)

    def test_monotonic_in_maxlen(self):
        keys = keysets.get_random_var_len(5000, 8, 32, random.Random(4))
        for name in ["fnv1a-32", "fnv1-64", "xxh3-64", "md5", "sha-1"]:
            h = hashers.new(name)
            counts = [count_collisions(keys, h, n) for n in range(1, h.size + 2)]
            assert counts == sorted(counts, reverse=True)
            # 5000 keys in 256 buckets must collide
            assert counts[0] >= 5000 - 256

    def test_empty_keys(self):
        assert count_collisions([], hashers.new("md5"), 8) == 0

    def test_invalid_maxlen(self):
        with pytest.raises(ValueError):
            count_collisions(["a"], hashers.new("md5"), 0)


class TestExpectedCollisions:
    def test_birthday_bound(self):
        assert expected_collisions(2 ** 16, 32) == pytest.approx(0.5)
        assert expected_collisions(0, 8) == 0
        assert expected_collisions(10 ** 6, 64) < 1e-6


class TestFormatTable:
    def test_columns_padded_last_unpadded(self):
        table = format_table([["\\", "fnv", "expected"], ["EngWords", "12", "0.1"]])
        assert table.splitlines() == [
            "\\        fnv expected",
            "EngWords 12  0.1",
        ]


class TestRunReport:
    def test_table_and_progress(self):
        datasets = [
            Dataset("letters", lambda: ["a", "b", "c"]),
            Dataset("fruit", lambda: ["apple", "ant"]),
        ]
        methods = [Method("identity", PaddedIdentity()), Method("md5", hashers.new("md5"))]
        out, err = io.StringIO(), io.StringIO()

        results = run_report(datasets, methods, 1, out=out, err=err)

        assert list(results) == ["letters", "fruit"]
        assert results["letters"]["identity"] == 0
        assert results["fruit"]["identity"] == 1
        assert set(results["fruit"]) == {"identity", "md5"}
        lines = out.getvalue().splitlines()
        assert lines[0] == "=" * 49
        assert lines[1] == "Collisions when k := hash[:1]"
        assert lines[3].split() == ["\\", "identity", "md5", "expected[:1]"]
        assert lines[4].split()[:2] == ["letters", "0"]
        assert lines[5].split()[:2] == ["fruit", "1"]
        assert lines[-1] == "=" * 49
        assert err.getvalue().splitlines() == [
            "creating dataset letters", "done!",
            "running method identity", "done!",
            "running method md5", "done!",
            "creating dataset fruit", "done!",
            "running method identity", "done!",
            "running method md5", "done!",
        ]

    def test_expected_uses_effective_width(self):
        keys = [str(i) for i in range(1000)]
        methods = [
            Method("fnv1a-32", hashers.new("fnv1a-32")),
            Method("md5", hashers.new("md5")),
            Method("identity", PaddedIdentity()),
        ]
        out = io.StringIO()

        run_report([Dataset("nums", lambda: keys)], methods, 8, out=out, err=io.StringIO())

        lines = out.getvalue().splitlines()
        assert lines[3].split() == ["\\", "fnv1a-32", "md5", "identity", "expected[:4]", "expected[:8]"]
        row = lines[4].split()
        assert row[0] == "nums"
        assert row[-2] == f"{expected_collisions(1000, 32):.3g}"
        assert row[-1] == f"{expected_collisions(1000, 64):.3g}"

    def test_failure_leaves_no_partial_report(self):
        def broken():
            raise keysets.DuplicateKeyError("apple", 3)

        datasets = [Dataset("ok", lambda: ["a"]), Dataset("broken", broken)]
        out, err = io.StringIO(), io.StringIO()
        with pytest.raises(keysets.DuplicateKeyError):
            run_report(datasets, [Method("md5", hashers.new("md5"))], 8, out=out, err=err)
        assert out.getvalue() == ""


class TestBuildDatasets:
    def test_known_names(self):
        names = list(build_datasets())
        assert names == [
            "EngWords", "Rand,100K,8-32B", "Rand,1M,8-32B", "Rand,10M,8-32B",
            "Rand,100M,8-32B", "Rand,10M,32B", "Rand,100M,32B", "UUID,5M,32B",
        ]

    def test_words_dataset_reads_path(self, tmp_path):
        path = tmp_path / "words.txt"
        path.write_text("x\ny\n", encoding="utf-8")
        assert build_datasets(str(path))["EngWords"].get_keys() == ["x", "y"]


class TestMain:
    def test_words_report(self, tmp_path, capsys):
        path = tmp_path / "words.txt"
        path.write_text("apple\nant\nbanana\n", encoding="utf-8")

        code = main(["--words", str(path), "--datasets", "EngWords",
                     "--methods", "fnv1a-32", "md5", "--maxlen", "4"])

        assert code == 0
        captured = capsys.readouterr()
        assert "Collisions when k := hash[:4]" in captured.out
        assert "EngWords" in captured.out
        assert "creating dataset EngWords" in captured.err

    def test_duplicate_word_exits_nonzero(self, tmp_path, capsys):
        path = tmp_path / "words.txt"
        path.write_text("apple\napple\n", encoding="utf-8")

        code = main(["--words", str(path), "--datasets", "EngWords"])

        assert code == 1
        captured = capsys.readouterr()
        assert "Error: duplicate word 'apple'" in captured.err
        assert "Collisions" not in captured.out

    def test_missing_word_list_exits_nonzero(self, tmp_path, capsys):
        code = main(["--words", str(tmp_path / "nope.txt"), "--datasets", "EngWords"])
        assert code == 1
        assert "Error: cannot open word list" in capsys.readouterr().err

    def test_unknown_method(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["--methods", "crc32"])
        assert excinfo.value.code == 2

    def test_invalid_maxlen(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["--maxlen", "0"])
        assert excinfo.value.code == 2

    def test_list(self, capsys):
        assert main(["--list"]) == 0
        out = capsys.readouterr().out
        assert "UUID,5M,32B" in out
        assert "sha3-512" in out
