from concurrent.futures import ThreadPoolExecutor
from typing import List, Mapping, Optional

import click
import structlog
from pydantic import ValidationError
from rich.console import Console

from subcrack.algorithm.planner import SKIP_FRACTION, TARGET_DISTINCT
from subcrack.config import DecryptConfig
from subcrack.errors import SubcrackError
from subcrack.log import configure_logging
from subcrack.models.frequency import LANGUAGES, FrequencyModel, get_language
from subcrack.models.key import Key
from subcrack.models.report import DecryptReport
from subcrack.solver import Solution, encrypt as encrypt_text, solve_ciphertext
from subcrack.state_queue import SingleSlotQueue
from subcrack.state_snapshot import SearchSnapshot
from subcrack.ui import languages_table, ui_loop
from subcrack.utils import fetch_wordlist, parse_hint, read_text, read_wordlist, write_text

log = structlog.get_logger()


@click.group()
@click.option("--verbose", "-v", count=True, help="Log more; repeat for debug output.")
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default="console",
    help="Rendering of log lines on stderr.",
)
def cli(verbose: int, log_format: str):
    """Encipher text or break a monoalphabetic substitution cipher with a word list."""
    configure_logging(verbose, log_format)


def solver(
    ciphertext: str,
    words: List[str],
    language: FrequencyModel,
    config: DecryptConfig,
    hints: Mapping[str, str],
    show_progress: bool,
) -> Solution:
    """Run the key search, with a live view of its progress on stderr when asked."""
    if not show_progress:
        return solve_ciphertext(ciphertext, words, language, config=config, hints=hints)

    state_queue: SingleSlotQueue[SearchSnapshot] = SingleSlotQueue()

    with ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(
            solve_ciphertext,
            ciphertext,
            words,
            language,
            config=config,
            hints=hints,
            state_queue=state_queue,
        )

        try:
            ui_loop(state_queue)
        except KeyboardInterrupt:
            # The search polls the queue and aborts once it is closed.
            state_queue.close()

        return future.result()


def echo_text(text: str, output_path: Optional[str] = None) -> None:
    if output_path:
        write_text(output_path, text)
        return
    click.echo(text, nl=not text.endswith("\n"))


output_option = click.option(
    "--output", "-o", "output_path",
    type=click.Path(dir_okay=False, writable=True),
    help="Write the result to this file instead of stdout.",
)


@cli.command()
@click.option(
    "--key",
    "-k",
    "cipher_alphabet",
    help="Cipher letter for each of a..z, in order ('.' leaves a letter as is). Random when omitted.",
)
@click.option("--input", "-i", "input_path", type=click.Path(exists=True, dir_okay=False))
@output_option
def encrypt(cipher_alphabet: Optional[str], input_path: Optional[str], output_path: Optional[str]):
    """Encipher plaintext from stdin with a substitution key."""
    if cipher_alphabet:
        try:
            key = Key.from_cipher_alphabet(cipher_alphabet)
            # A partial key must still encipher one to one.
            key.encipher_table()
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--key")
    else:
        key = Key.random()
        click.echo(f"key: {key.cipher_alphabet()}", err=True)

    try:
        plaintext = read_text(input_path, click.get_text_stream("stdin"))
        echo_text(encrypt_text(plaintext, key), output_path)
    except SubcrackError as e:
        raise click.ClickException(str(e))


@cli.command()
@click.option(
    "--dictionary", "-d", "dictionary_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Word list file of the plaintext language.",
)
@click.option("--dictionary-url", help="Download the word list from this URL instead.")
@click.option("--language", "-l", type=click.Choice(sorted(LANGUAGES)), default="english", show_default=True)
@click.option(
    "--skip-fraction", "-s",
    type=click.FloatRange(0.0, 1.0),
    default=SKIP_FRACTION,
    show_default=True,
    help="Share of distinct words that may stay unresolved.",
)
@click.option("--target-distinct", type=click.IntRange(min=1), default=TARGET_DISTINCT, show_default=True)
@click.option("--guess-order", type=click.Choice(["aligned", "frequency"]), default="aligned", show_default=True)
@click.option("--escalate-skips", is_flag=True, help="Try skip budgets 0, 1, ... in turn.")
@click.option("--max-steps", type=click.IntRange(min=1), help="Give up after this many search steps.")
@click.option("--time-limit", type=click.FloatRange(min=0.0, min_open=True), help="Give up after this many seconds.")
@click.option("--unknown-marker", help="Character shown for cipher letters left unresolved.")
@click.option("--hint", "hint_values", multiple=True, help="Known decoding as 'cipher=plain', e.g. 'q=e'.")
@click.option("--progress/--no-progress", default=None, help="Live view of the search. Default: when stderr is a terminal.")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON report instead of the plaintext.")
@click.option("--input", "-i", "input_path", type=click.Path(exists=True, dir_okay=False))
@output_option
def decrypt(
    dictionary_path: Optional[str],
    dictionary_url: Optional[str],
    language: str,
    skip_fraction: float,
    target_distinct: int,
    guess_order: str,
    escalate_skips: bool,
    max_steps: Optional[int],
    time_limit: Optional[float],
    unknown_marker: Optional[str],
    hint_values: tuple,
    progress: Optional[bool],
    as_json: bool,
    input_path: Optional[str],
    output_path: Optional[str],
):
    """Break the substitution cipher read from stdin."""
    if bool(dictionary_path) == bool(dictionary_url):
        raise click.UsageError("Give exactly one of --dictionary or --dictionary-url")

    try:
        config = DecryptConfig(
            skip_fraction=skip_fraction,
            target_distinct=target_distinct,
            guess_order=guess_order,
            escalate_skips=escalate_skips,
            max_steps=max_steps,
            time_limit=time_limit,
            unknown_marker=unknown_marker,
        )
    except ValidationError as e:
        raise click.BadParameter(str(e))

    try:
        hints = dict(parse_hint(value) for value in hint_values)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--hint")

    if progress is None:
        progress = click.get_text_stream("stderr").isatty()

    model = get_language(language)

    try:
        ciphertext = read_text(input_path, click.get_text_stream("stdin"))
        if dictionary_path:
            words = read_wordlist(dictionary_path, model.alphabet)
        else:
            words = fetch_wordlist(dictionary_url, model.alphabet)
        solution = solver(ciphertext, words, model, config, hints, progress)
    except SubcrackError as e:
        log.error("decryption failed", error=str(e))
        raise click.ClickException(str(e))

    if as_json:
        report = DecryptReport(
            plaintext=solution.plaintext,
            key=solution.key.cipher_alphabet(),
            language=solution.language,
            skipped_words=list(solution.skipped),
            word_count=solution.word_count,
            skip_budget=solution.skip_budget,
            steps=solution.steps,
        )
        result = report.model_dump_json(indent=2) + "\n"
    else:
        if solution.skipped:
            click.echo(f"unresolved: {' '.join(solution.skipped)}", err=True)
        result = solution.plaintext

    try:
        echo_text(result, output_path)
    except SubcrackError as e:
        raise click.ClickException(str(e))


@cli.command()
def languages():
    """List the letter frequency models."""
    Console().print(languages_table(LANGUAGES.values()))


if __name__ == "__main__":
    cli()
