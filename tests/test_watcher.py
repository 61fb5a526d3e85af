import asyncio
import os
from pathlib import Path

from src.search.watcher import StalenessChecker


def _write(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _touch_later(path: Path) -> None:
    stat = path.stat()
    later = stat.st_mtime_ns + 5_000_000_000
    os.utime(path, ns=(later, later))


def test_check_detects_edits_additions_and_deletions(tmp_path):
    page = _write(tmp_path, "guide/page.md", "one")
    checker = StalenessChecker(tmp_path, rebuild=lambda: None)

    assert checker.check() is False

    _touch_later(page)
    assert checker.check() is True
    assert checker.check() is False

    extra = _write(tmp_path, "new.md", "two")
    assert checker.check() is True

    extra.unlink()
    assert checker.check() is True

    _write(tmp_path, "notes.txt", "ignored")
    assert checker.check() is False


def test_poll_once_debounces_bursts_into_one_rebuild(tmp_path):
    page = _write(tmp_path, "page.md", "one")
    calls: list[int] = []
    checker = StalenessChecker(tmp_path, rebuild=lambda: calls.append(1), debounce_seconds=0.5)

    _touch_later(page)
    assert checker.poll_once(now=0.0) is False
    _write(tmp_path, "other.md", "burst")
    assert checker.poll_once(now=0.2) is False
    assert checker.poll_once(now=0.4) is False
    assert calls == []

    assert checker.poll_once(now=1.0) is True
    assert calls == [1]
    assert checker.poll_once(now=5.0) is False
    assert calls == [1]


def test_background_task_triggers_rebuild(tmp_path):
    page = _write(tmp_path, "page.md", "one")
    calls: list[int] = []
    checker = StalenessChecker(
        tmp_path,
        rebuild=lambda: calls.append(1),
        poll_interval=0.01,
        debounce_seconds=0.0,
    )

    async def scenario() -> None:
        checker.start()
        _touch_later(page)
        for _ in range(200):
            if calls:
                break
            await asyncio.sleep(0.01)
        await checker.stop()

    asyncio.run(scenario())

    assert calls == [1]
