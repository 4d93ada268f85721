import io

import pytest
from rich.console import Console
from rich.panel import Panel

from subcrack.models.frequency import LANGUAGES
from subcrack.state_queue import SingleSlotQueue
from subcrack.state_snapshot import SearchSnapshot
from subcrack.ui import COLORS, MAX_ROWS, decoded_to_string, languages_table, render, ui_loop, word_state


def snapshot(**overrides) -> SearchSnapshot:
    values = dict(
        state_version=3,
        complete=False,
        steps=42,
        word_index=1,
        word_count=3,
        skips_used=1,
        skip_budget=1,
        key="." * 26,
        cipher_words=("fng", "gur", "png"),
        decoded_words=("sat", "t..", "..t"),
        skipped_words=("png",),
    )
    values.update(overrides)
    return SearchSnapshot(**values)


def to_text(renderable) -> str:
    console = Console(file=io.StringIO(), width=120, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


class TestWordState:
    """Test suite for word_state"""

    def test_states(self):
        """Test solved, current and skipped words"""
        state = snapshot()
        assert word_state(state, 0) == "solved"
        assert word_state(state, 1) == "current"
        assert word_state(state, 2) == "skipped"

    def test_pending(self):
        """Test words after the current one"""
        state = snapshot(word_index=0, skipped_words=())
        assert word_state(state, 2) == "pending"

    def test_complete(self):
        """Test that every word not skipped is solved once the search is done"""
        state = snapshot(complete=True, word_index=3, skipped_words=())
        assert [word_state(state, i) for i in range(3)] == ["solved"] * 3


class TestRender:
    """Test suite for render"""

    def test_waiting_panel(self):
        """Test the placeholder before the first snapshot"""
        assert isinstance(render(None), Panel)

    def test_table(self):
        """Test the progress table"""
        table = render(snapshot())
        assert table.title == "word 2 / 3  |  skips 1 / 1  |  steps 42  |  v3"
        assert table.caption == "key " + "." * 26
        text = to_text(table)
        assert "fng" in text and "sat" in text
        assert "skipped" in text

    def test_done_title(self):
        """Test the title of a finished search"""
        assert render(snapshot(complete=True, word_index=3)).title.startswith("done  |")

    def test_long_plans_are_windowed(self):
        """Test that only MAX_ROWS words are shown around the current one"""
        words = tuple(f"w{i:03d}" for i in range(100))
        state = snapshot(word_index=50, word_count=100, cipher_words=words, decoded_words=words, skipped_words=())
        table = render(state)
        assert table.row_count == MAX_ROWS
        text = to_text(table)
        assert "w050" in text
        assert "w000" not in text

    def test_mismatched_words(self):
        """Test that cipher and decoded words must line up"""
        with pytest.raises(ValueError):
            render(snapshot(decoded_words=("sat",)))

    def test_decoded_to_string(self):
        """Test markup for known and unknown letters"""
        markup = decoded_to_string("t.", "solved")
        assert f"[{COLORS['solved']}]t[/{COLORS['solved']}]" in markup
        assert f"[{COLORS['unknown']}].[/{COLORS['unknown']}]" in markup


class TestUiLoop:
    """Test suite for ui_loop and languages_table"""

    def test_ui_loop_ends_when_queue_closes(self):
        """Test that the live view consumes snapshots until close"""
        queue = SingleSlotQueue()
        queue.publish(snapshot(complete=True, word_index=3))
        queue.close()
        ui_loop(queue, Console(file=io.StringIO()))

    def test_languages_table(self):
        """Test the table of frequency models"""
        text = to_text(languages_table(LANGUAGES.values()))
        for model in LANGUAGES.values():
            assert model.language in text
            assert model.order in text
