from __future__ import annotations

import os
import threading
from concurrent.futures import Future
from pathlib import Path

import pytest

from md5folder.core.cancel import CancellationSignal
from md5folder.core.channel import ResultChannel
from md5folder.core.errors import TraversalAccessError, WalkCanceledError
from md5folder.core.walker import TreeWalker, _TaskGroup


class FakeExecutor:
    """Records submitted workers without running them."""
    def __init__(self):
        self.submitted = []
        self.shutdown_calls = 0

    def submit(self, fn):
        self.submitted.append(fn)
        f: Future = Future()
        f.set_result(False)
        return f

    def shutdown(self, wait=True, *, cancel_futures=False):
        self.shutdown_calls += 1


class ClosedExecutor(FakeExecutor):
    """Refuses work the way a shut-down ThreadPoolExecutor does."""
    def __init__(self, before_raise=None):
        super().__init__()
        self.before_raise = before_raise

    def submit(self, fn):
        if self.before_raise is not None:
            self.before_raise()
        raise RuntimeError("cannot schedule new futures after shutdown")


def _touch(root: Path, rel: str, data: bytes = b"x") -> None:
    p = root / rel
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)


def _run(root, *, cancel=None, executor=None):
    ex = executor or FakeExecutor()
    ch = ResultChannel(poll_s=0.01)
    outcome: Future = Future()
    w = TreeWalker(root, results=ch, outcome=outcome, cancel=cancel or CancellationSignal(), executor=ex)
    w.run()  # synchronous; the thread itself is exercised by pipeline tests
    return w, ex, ch, outcome


def test_walk_is_depth_first_in_name_order(tmp_path: Path):
    for rel in ("e/f.txt", "b.txt", "a/z.txt", "a/c/d.txt"):
        _touch(tmp_path, rel)

    w, ex, ch, outcome = _run(str(tmp_path))

    assert outcome.result() is None
    got = [os.path.relpath(job.path, tmp_path) for job in ex.submitted]
    assert got == [
        os.path.join("a", "c", "d.txt"),
        os.path.join("a", "z.txt"),
        "b.txt",
        os.path.join("e", "f.txt"),
    ]
    assert w.files_found == 4
    assert w.dirs_visited == 4
    assert list(ch) == []  # closed, no worker ran
    assert ex.shutdown_calls == 1


def test_walk_from_dot_yields_clean_relative_paths(tmp_path: Path, monkeypatch):
    _touch(tmp_path, "sub/b.txt")
    _touch(tmp_path, "a.txt")
    monkeypatch.chdir(tmp_path)

    _, ex, _, _ = _run(".")

    assert [job.path for job in ex.submitted] == ["a.txt", os.path.join("sub", "b.txt")]


def test_root_file_is_reported_as_given(tmp_path: Path):
    _touch(tmp_path, "only.txt")
    root = str(tmp_path / "only.txt")

    _, ex, _, outcome = _run(root)

    assert outcome.result() is None
    assert [job.path for job in ex.submitted] == [root]


def test_missing_root_is_access_error(tmp_path: Path):
    _, ex, ch, outcome = _run(str(tmp_path / "nope"))

    with pytest.raises(TraversalAccessError) as ei:
        outcome.result()
    assert ei.value.details["path"] == str(tmp_path / "nope")
    assert isinstance(ei.value.__cause__, FileNotFoundError)
    assert ex.submitted == []
    assert list(ch) == []


def test_listdir_failure_aborts_walk(tmp_path: Path, monkeypatch):
    _touch(tmp_path, "a/one.txt")
    _touch(tmp_path, "b/two.txt")
    bad = os.path.join(str(tmp_path), "b")
    real_listdir = os.listdir

    def fake_listdir(path):
        if os.fspath(path) == bad:
            raise PermissionError(13, "Permission denied", path)
        return real_listdir(path)

    monkeypatch.setattr("md5folder.core.walker.os.listdir", fake_listdir)

    _, ex, _, outcome = _run(str(tmp_path))

    with pytest.raises(TraversalAccessError):
        outcome.result()
    # a/ was finished before b/ failed
    assert [os.path.relpath(j.path, tmp_path) for j in ex.submitted] == [os.path.join("a", "one.txt")]


def test_cancelled_walk_reports_sentinel(tmp_path: Path):
    _touch(tmp_path, "a.txt")
    sig = CancellationSignal()
    sig.cancel()

    _, ex, _, outcome = _run(str(tmp_path), cancel=sig)

    with pytest.raises(WalkCanceledError):
        outcome.result()
    assert ex.submitted == []


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="no symlink support")
def test_symlinks_are_not_followed(tmp_path: Path):
    _touch(tmp_path, "real/file.txt")
    try:
        os.symlink(tmp_path / "real" / "file.txt", tmp_path / "link.txt")
        os.symlink(tmp_path / "real", tmp_path / "linkdir", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not permitted here")

    _, ex, _, _ = _run(str(tmp_path))

    assert [os.path.relpath(j.path, tmp_path) for j in ex.submitted] == [os.path.join("real", "file.txt")]


def test_task_group_releases_on_cancelled_futures():
    group = _TaskGroup()
    done: Future = Future()
    dropped: Future = Future()
    group.add(done)
    group.add(dropped)

    waiter = threading.Thread(target=group.wait)
    waiter.start()

    done.set_result(True)
    dropped.cancel()  # as executor.shutdown(cancel_futures=True) does
    waiter.join(timeout=1.0)

    assert not waiter.is_alive()


def test_submit_after_cancel_shutdown_is_walk_canceled(tmp_path: Path):
    _touch(tmp_path, "a.txt")
    _touch(tmp_path, "b.txt")
    sig = CancellationSignal()
    ex = ClosedExecutor(before_raise=sig.cancel)

    w, _, ch, outcome = _run(str(tmp_path), cancel=sig, executor=ex)

    with pytest.raises(WalkCanceledError):
        outcome.result()
    assert outcome.exception().__cause__ is None
    assert w.files_found == 0
    assert ex.shutdown_calls == 1
    # close gave up on the cancelled channel instead of blocking
    assert ch.close(sig) is False


def test_submit_failure_without_cancel_is_propagated(tmp_path: Path):
    _touch(tmp_path, "a.txt")
    sig = CancellationSignal()
    ex = ClosedExecutor()

    w, _, ch, outcome = _run(str(tmp_path), cancel=sig, executor=ex)

    with pytest.raises(RuntimeError, match="after shutdown"):
        outcome.result()
    assert not isinstance(outcome.exception(), WalkCanceledError)
    assert not sig.cancelled
    assert w.files_found == 0
    assert list(ch) == []
