# 09.10.26

import io
import os
import sys

import pytest

from FragmentMux.core.processors import concat
from FragmentMux.core.processors import combine_files, partial_combine, get_batch_size
from FragmentMux.core.processors import MissingInputError, IOFailureError


def make_fragments(folder, count, prefix="seg_"):
    paths = []
    for i in range(count):
        path = folder / f"{prefix}{i:05d}.ts"
        path.write_bytes(f"<{i}>".encode() * (i % 3 + 1))
        paths.append(str(path))
    return paths


def read_all(paths):
    data = b""
    for path in paths:
        with open(path, 'rb') as f:
            data += f.read()
    return data


def test_combine_keeps_list_order(tmp_path):
    fragments = make_fragments(tmp_path, 5)
    ordered = list(reversed(fragments))
    output = tmp_path / "out.ts"

    combine_files(ordered, str(output))

    assert output.read_bytes() == read_all(ordered)


def test_combine_creates_parent_folders(tmp_path):
    fragments = make_fragments(tmp_path, 3)
    output = tmp_path / "a" / "b" / "out.ts"

    combine_files(fragments, output)

    assert output.read_bytes() == read_all(fragments)


def test_combine_into_caller_stream_leaves_it_open(tmp_path):
    fragments = make_fragments(tmp_path, 3)
    buffer = io.BytesIO()

    combine_files(fragments, buffer)

    assert not buffer.closed
    assert buffer.getvalue() == read_all(fragments)


def test_combine_defaults_to_stdout(tmp_path, monkeypatch):
    fragments = make_fragments(tmp_path, 2)

    class FakeStdout:
        buffer = io.BytesIO()

    monkeypatch.setattr(sys, "stdout", FakeStdout())
    combine_files(fragments)

    assert not FakeStdout.buffer.closed
    assert FakeStdout.buffer.getvalue() == read_all(fragments)


def test_combine_empty_list_is_noop(tmp_path):
    output = tmp_path / "out.ts"

    combine_files([], str(output))
    combine_files(None, str(output))

    assert not output.exists()


def test_combine_skips_empty_entries(tmp_path):
    fragments = make_fragments(tmp_path, 2)
    output = tmp_path / "out.ts"

    combine_files([fragments[0], "", None, fragments[1]], str(output))

    assert output.read_bytes() == read_all(fragments)


def test_combine_missing_fragment_aborts(tmp_path):
    fragments = make_fragments(tmp_path, 3)
    missing = str(tmp_path / "seg_missing.ts")
    output = tmp_path / "out.ts"

    with pytest.raises(MissingInputError) as excinfo:
        combine_files([fragments[0], missing, fragments[1]], str(output))

    assert excinfo.value.path == missing
    # Partial destination is left as is, without the fragments after the failure
    assert output.read_bytes() == read_all([fragments[0]])


def test_combine_unreadable_input_raises_io_failure(tmp_path):
    fragments = make_fragments(tmp_path, 1)
    folder = tmp_path / "not_a_file"
    folder.mkdir()

    with pytest.raises(IOFailureError):
        combine_files([fragments[0], str(folder)], str(tmp_path / "out.ts"))


@pytest.mark.parametrize("count, expected", [
    (1, 100),
    (89999, 100),
    (90000, 100),
    (90001, 200),
    (500000, 200),
])
def test_batch_size_threshold(count, expected):
    assert get_batch_size(count) == expected


def test_partial_combine_250_fragments(tmp_path):
    fragments = make_fragments(tmp_path, 250)
    original = read_all(fragments)

    intermediates = partial_combine(fragments)

    assert intermediates == [str(tmp_path / f"T{i:04d}.ts") for i in range(3)]
    assert [os.path.getsize(p) for p in intermediates] == [
        fragment_bytes(0, 100),
        fragment_bytes(100, 200),
        fragment_bytes(200, 250),
    ]
    assert all(not os.path.exists(f) for f in fragments)

    final = tmp_path / "final.ts"
    combine_files(intermediates, str(final))
    assert final.read_bytes() == original


def fragment_bytes(start, end):
    # Size of fragments start..end-1 as written by make_fragments
    return sum(len(f"<{i}>") * (i % 3 + 1) for i in range(start, end))


def test_partial_combine_failure_keeps_failing_batch(tmp_path):
    fragments = make_fragments(tmp_path, 250)
    os.remove(fragments[150])

    with pytest.raises(MissingInputError):
        partial_combine(fragments)

    # First batch completed and consumed
    assert (tmp_path / "T0000.ts").exists()
    assert all(not os.path.exists(f) for f in fragments[:100])

    # Failing batch and later ones untouched
    assert all(os.path.exists(f) for f in fragments[100:150])
    assert all(os.path.exists(f) for f in fragments[151:])
    assert not (tmp_path / "T0002.ts").exists()


def test_partial_combine_empty():
    assert partial_combine([]) == []


def test_partial_combine_large_set_uses_large_batches(tmp_path, monkeypatch):
    monkeypatch.setattr(concat, "PARTIAL_THRESHOLD", 10)
    monkeypatch.setattr(concat, "LARGE_BATCH_SIZE", 20)
    fragments = make_fragments(tmp_path, 45)
    original = read_all(fragments)

    intermediates = partial_combine(fragments)

    assert len(intermediates) == 3
    assert read_all(intermediates) == original


def test_partial_combine_repeated_fragment_in_batch(tmp_path):
    a = tmp_path / "a.ts"
    b = tmp_path / "b.ts"
    a.write_bytes(b"A")
    b.write_bytes(b"B")

    intermediates = partial_combine([str(a), str(b), str(a)])

    assert intermediates == [str(tmp_path / "T0000.ts")]
    assert (tmp_path / "T0000.ts").read_bytes() == b"ABA"
    assert not a.exists()
    assert not b.exists()


def test_partial_combine_skips_empty_entries(tmp_path, monkeypatch):
    fragments_dir = tmp_path / "fragments"
    cwd = tmp_path / "cwd"
    fragments_dir.mkdir()
    cwd.mkdir()
    frag = fragments_dir / "a.ts"
    frag.write_bytes(b"A")
    monkeypatch.chdir(cwd)

    intermediates = partial_combine(["", str(frag)])

    assert intermediates == [str(fragments_dir / "T0000.ts")]
    assert (fragments_dir / "T0000.ts").read_bytes() == b"A"
    assert not (cwd / "T0000.ts").exists()
