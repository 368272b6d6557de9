"""Shared fixtures for chordpro-engine tests."""

from __future__ import annotations

import pytest

from chordpro_engine.editing import CommandHistory, EditorSession, HistoryConfig

AMAZING_GRACE = "{title: Amazing Grace}\n{key: G}\n\n[Verse]\n[G]Amazing [D]grace"

FULL_SONG = """{title: Demo Song}
{artist: Somebody}
{key: F}
# arranged for capo 1

{start_of_verse: Verse 1}
[F]Sing a [Bb]song of [C7]sixpence
[Dm]Pocket full of [F/A]rye
{end_of_verse}

{soc}
[Bb]Four and [F]twenty
[C]blackbirds
{eoc}

[Bridge]
{c: slowly}
[Gm7]Baked in a [C]pie
"""


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def history(clock: FakeClock) -> CommandHistory:
    return CommandHistory(HistoryConfig(), clock=clock)


@pytest.fixture
def session(clock: FakeClock) -> EditorSession:
    return EditorSession(clock=clock)


@pytest.fixture
def amazing_grace() -> str:
    return AMAZING_GRACE


@pytest.fixture
def full_song() -> str:
    return FULL_SONG
