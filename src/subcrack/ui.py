from typing import Iterable, Literal, Optional

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from subcrack.models.frequency import FrequencyModel
from subcrack.state_queue import SingleSlotQueue
from subcrack.state_snapshot import SearchSnapshot

# Rows beyond this are summarised so the live view fits a terminal.
MAX_ROWS = 20

COLORS = {
    "current": "bold yellow on black",
    "solved": "spring_green2",
    "pending": "dim",
    "skipped": "dark_red",
    "unknown": "cyan",
}

type WordState = Literal["solved", "current", "pending", "skipped"]


def word_state(state: SearchSnapshot, index: int) -> WordState:
    if state.cipher_words[index] in state.skipped_words:
        return "skipped"
    if state.complete or index < state.word_index:
        return "solved"
    if index == state.word_index:
        return "current"
    return "pending"


def decoded_to_string(decoded: str, state_name: WordState) -> str:
    """Color a partially decoded word; unassigned letters show as '.'."""
    if state_name == "current":
        return f"[{COLORS['current']}]{decoded}[/{COLORS['current']}]"
    style = COLORS[state_name]
    unknown = COLORS["unknown"]
    return "".join(
        f"[{unknown}].[/{unknown}]" if c == "." else f"[{style}]{c}[/{style}]" for c in decoded
    )


def render(state: Optional[SearchSnapshot]):
    """Render the search state snapshot."""
    if state is None:
        return Panel("Waiting for first update…", title="Key search", border_style="dim")

    if len(state.cipher_words) != len(state.decoded_words):
        raise ValueError("Cipher and decoded words must have the same length")

    status = "done" if state.complete else f"word {min(state.word_index + 1, state.word_count)} / {state.word_count}"
    ui_table = Table(
        title=f"{status}  |  skips {state.skips_used} / {state.skip_budget}  |  steps {state.steps}  |  v{state.state_version}"
    )
    ui_table.add_column("#", justify="right")
    ui_table.add_column("Cipher")
    ui_table.add_column("Decoded")
    ui_table.add_column("State")

    start = max(0, min(state.word_index - MAX_ROWS // 2, len(state.cipher_words) - MAX_ROWS))
    for index in range(start, min(start + MAX_ROWS, len(state.cipher_words))):
        current_state = word_state(state, index)
        ui_table.add_row(
            str(index),
            state.cipher_words[index],
            decoded_to_string(state.decoded_words[index], current_state),
            current_state,
        )

    ui_table.caption = f"key {state.key}"
    return ui_table


def ui_loop(state_queue: SingleSlotQueue[SearchSnapshot], console: Optional[Console] = None) -> None:
    """Loop the UI until the search closes the queue."""
    console = console or Console(stderr=True)
    with Live(render(None), console=console, refresh_per_second=15, transient=True) as live:
        for state in state_queue:
            live.update(render(state))


def languages_table(models: Iterable[FrequencyModel]) -> Table:
    table = Table(title="Frequency models")
    table.add_column("Language")
    table.add_column("Most to least frequent")
    for model in models:
        table.add_row(model.language, model.order)
    return table
