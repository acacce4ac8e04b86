"""Command-line front end: single-shot advice, interactive hands, audit history."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from .action import ActionType, Decision
from .advisor import recommend
from .calculator import calculate_equity, equity_oracle
from .card import Card, Suit
from .config import get_config
from .errors import InputError
from .history import JsonFileAuditLog, Step
from .inputs import DEFAULT_BANKROLL, parse_hand, parse_num_players, parse_street_input
from .notation import parse_amount, parse_cards
from .policy import PolicyConfig, StdlibRandom, Street
from .session import HandSession

app = typer.Typer(help="Betting advisor for Texas Hold'em")
console = Console()


@app.callback()
def _setup(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def format_card(c: Card) -> str:
    """Format a card with color based on suit."""
    if c.suit in (Suit.HEARTS, Suit.DIAMONDS):
        return f"[red]{c.pretty}[/red]"
    return f"[white]{c.pretty}[/white]"


def format_cards(cards: list[Card] | tuple[Card, ...]) -> str:
    """Format multiple cards."""
    return " ".join(format_card(c) for c in cards)


def _policy(
    aggressiveness: float | None,
    bluff: bool | None,
    bluff_frequency: float | None,
) -> PolicyConfig:
    defaults = get_config().policy
    return PolicyConfig(
        aggressiveness=defaults.aggressiveness if aggressiveness is None else aggressiveness,
        bluffing_enabled=defaults.bluffing_enabled if bluff is None else bluff,
        bluff_frequency=defaults.bluff_frequency if bluff_frequency is None else bluff_frequency,
    )


def _display_decision(decision: Decision, title: str = "Advice") -> None:
    """Display a recommendation with Rich formatting."""
    color = {
        ActionType.FOLD: "red",
        ActionType.CHECK: "yellow",
        ActionType.CALL: "yellow",
        ActionType.RAISE: "green",
        ActionType.RAISE_BLUFF: "magenta",
        ActionType.BET_BLUFF: "magenta",
    }[decision.action]

    console.print(
        Panel(
            f"[bold {color}]{decision}[/bold {color}]\n"
            f"[dim]{decision.reason}[/dim]\n"
            f"Win probability: {decision.win_probability * 100:.1f}%",
            title=f"[bold magenta]{title}[/bold magenta]",
            expand=False,
        )
    )


@app.command()
def decide(
    hand: str = typer.Argument(..., help="Your hole cards (e.g., 'As Kh' or '13pi 2co')"),
    board: str | None = typer.Option(None, "--board", "-b", help="Community cards"),
    pot: str | None = typer.Option(None, "--pot", help="Pot size (2k = 2000)"),
    min_bet: str | None = typer.Option(None, "--min-bet", help="Bet to call, 0 if unopened"),
    players: str | None = typer.Option(None, "--players", "-p", help="Players in the hand, including you"),
    bankroll: str | None = typer.Option(None, "--bankroll", help="Your stack"),
    aggressiveness: float | None = typer.Option(None, "--aggressiveness", "-a", help="0.5 cautious, 1 normal, 1.5 aggressive"),
    bluff: bool | None = typer.Option(None, "--bluff/--no-bluff", help="Allow bluffs"),
    bluff_frequency: float | None = typer.Option(None, "--bluff-frequency", help="Bluff chance (0-1)"),
    sims: int | None = typer.Option(None, "--sims", "-n", help="Number of simulations"),
    seed: int | None = typer.Option(None, "--seed", help="Seed for reproducible advice"),
):
    """Recommend an action for a single table state."""
    config = get_config()
    try:
        policy = _policy(aggressiveness, bluff, bluff_frequency)
        data = parse_street_input(
            {
                "hand": hand,
                "community": board,
                "pot": pot,
                "minBet": min_bet,
                "numPlayers": players,
                "bankroll": bankroll,
            },
            need_hand=True,
        )
        hand_cards = data.hand or ()
        stack = DEFAULT_BANKROLL if data.bankroll is None else data.bankroll
        seed = config.simulation.seed if seed is None else seed

        console.print(f"\n[bold]Hand:[/bold]     {format_cards(hand_cards)}")
        if data.community:
            console.print(f"[bold]Board:[/bold]    {format_cards(data.community)}")
        console.print(
            f"[bold]Pot:[/bold]      {data.pot}  |  To call: {data.min_bet}  |  "
            f"Players: {data.num_players}  |  Bankroll: {stack}"
        )
        console.print(f"[dim]Style: {policy.style_label}[/dim]\n")

        decision = recommend(
            hand_cards,
            data.community,
            data.pot,
            data.min_bet,
            data.num_players,
            stack,
            policy,
            oracle=equity_oracle(sims or config.simulation.trials, seed),
            rng=StdlibRandom(seed),
        )
        _display_decision(decision)

    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def equity(
    hero: str = typer.Argument(..., help="Your hole cards (e.g., 'As Kh')"),
    board: str | None = typer.Option(None, "--board", "-b", help="Community cards"),
    players: int = typer.Option(2, "--players", "-p", help="Number of players"),
    sims: int | None = typer.Option(None, "--sims", "-n", help="Number of simulations"),
):
    """Estimate win equity against random opponents."""
    config = get_config()
    if sims is None:
        sims = config.simulation.trials
    try:
        hero_cards = parse_hand(hero)
        community = parse_cards(board) if board else []

        console.print(f"\n[bold]Your hand:[/bold] {format_cards(hero_cards)}")
        console.print(f"[bold]Opponents:[/bold] {players - 1} random")
        if community:
            console.print(f"[bold]Board:[/bold]     {format_cards(community)}")
        console.print(f"\n[dim]Running {sims:,} simulations...[/dim]")

        result = calculate_equity(hero_cards, community, players, sims)

        table = Table(title="Equity Results")
        table.add_column("Outcome", style="cyan")
        table.add_column("Probability", justify="right")
        table.add_row("Win", f"[green]{result.win_percent:.1f}%[/green]")
        table.add_row("Tie", f"[yellow]{result.tie_rate * 100:.1f}%[/yellow]")
        table.add_row("Lose", f"[red]{result.lose_rate * 100:.1f}%[/red]")
        table.add_row("", "")
        table.add_row("[bold]Total Equity[/bold]", f"[bold]{result.equity:.1f}%[/bold]")
        console.print(table)

        dist_table = Table(title="Hand Distribution (Your Hands)")
        dist_table.add_column("Hand", style="cyan")
        dist_table.add_column("Frequency", justify="right")
        for name, count in sorted(result.hand_distribution.items(), key=lambda x: -x[1]):
            dist_table.add_row(name, f"{count / result.simulations * 100:.1f}%")
        console.print(dist_table)

    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


# ── Interactive session ──────────────────────────────────────


class _Quit(Exception):
    """User typed 'quit' at a prompt."""


def _ask(prompt_text: str, default: str | None = None) -> str:
    if default is not None:
        response = Prompt.ask(prompt_text, default=default)
    else:
        response = Prompt.ask(prompt_text)
    if response.strip().lower() == "quit":
        raise _Quit
    return response


def _prompt_amount(prompt_text: str, default: str = "0") -> int:
    """Prompt until a valid chip amount is entered."""
    while True:
        try:
            value = parse_amount(_ask(prompt_text, default))
            return 0 if value is None else value
        except InputError as e:
            console.print(f"[red]{e}[/red]")


def _prompt_players(prompt_text: str, default: str = "2") -> int:
    while True:
        try:
            value = parse_num_players(_ask(prompt_text, default))
            return 2 if value is None else value
        except InputError as e:
            console.print(f"[red]{e}[/red]")


def _street_input(street: Street) -> dict[str, object]:
    raw: dict[str, object] = {}
    if street is Street.PREFLOP:
        raw["bankroll"] = _ask("[bold]Your current bankroll[/bold]", "0")
        raw["hand"] = _ask("[bold]Your hand[/bold] (e.g. 'Ah Ks' or '13pi 2co')")
    else:
        n = street.new_cards
        raw["community"] = _ask(f"[bold]{street.value.capitalize()} card{'s' if n > 1 else ''}[/bold]")
    raw["pot"] = _ask("[bold]Current pot size[/bold]", "0")
    raw["numPlayers"] = _ask("[bold]Players in the hand[/bold] (including you)", "2")
    raw["minBet"] = _ask("[bold]Minimum bet to call/raise[/bold]", "0")
    return raw


def _play_street(session: HandSession, street: Street) -> Step:
    while True:
        try:
            return session.advance_street(street, _street_input(street))
        except InputError as e:
            console.print(f"[red]Invalid input: {e}[/red]")


@app.command()
def play(
    aggressiveness: float | None = typer.Option(None, "--aggressiveness", "-a", help="0.5 cautious, 1 normal, 1.5 aggressive"),
    bluff: bool | None = typer.Option(None, "--bluff/--no-bluff", help="Allow bluffs"),
    bluff_frequency: float | None = typer.Option(None, "--bluff-frequency", help="Bluff chance (0-1)"),
    history_path: Path | None = typer.Option(None, "--history", help="Audit log file"),
):
    """Interactive mode - get advice street by street as a hand develops."""
    config = get_config()
    try:
        policy = _policy(aggressiveness, bluff, bluff_frequency)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(Panel(f"[bold]Poker Advisor - Style: {policy.style_label}[/bold]"))
    console.print("[dim]Card format: As Kh Td 9c 2s, or 1-13 with co/ca/tr/pi[/dim]")
    console.print("[dim]Type 'quit' to exit[/dim]\n")

    session = HandSession(
        policy,
        oracle=equity_oracle(config.simulation.trials, config.simulation.seed),
        audit_log=JsonFileAuditLog(history_path or config.history.path),
        rng=StdlibRandom(config.simulation.seed),
    )
    console.print(f"[dim]Session {session.id}[/dim]\n")

    try:
        for street in Street:
            console.print(f"[bold cyan]── {street.value.capitalize()} ──[/bold cyan]")
            step = _play_street(session, street)
            if session.community:
                console.print(f"  → Board: {format_cards(session.community)}")
            _display_decision(step.decision)

            if street is not Street.PREFLOP and Confirm.ask(
                f"Did someone raise on the {street.value}?", default=False
            ):
                new_min_bet = _prompt_amount("[bold]New minimum bet to call/raise[/bold]")
                players = _prompt_players("[bold]Players who called the raise[/bold] (including you)")
                step = session.report_raise(street, new_min_bet, players)
                _display_decision(step.decision, title="Advice after raise")

            if (
                step.decision.action is ActionType.FOLD
                and street is not Street.RIVER
                and not Confirm.ask("Advice is to fold. Keep tracking the hand?", default=False)
            ):
                break
            console.print()
    except (_Quit, KeyboardInterrupt):
        console.print("\n[dim]Exiting...[/dim]")
    finally:
        session.close()


# ── History ──────────────────────────────────────────────────


@app.command()
def history(
    session_id: str | None = typer.Option(None, "--session", "-s", help="Show one session's steps"),
    history_path: Path | None = typer.Option(None, "--history", help="Audit log file"),
):
    """Show recorded sessions."""
    log = JsonFileAuditLog(history_path or get_config().history.path)

    if session_id is None:
        records = log.sessions()
        if not records:
            console.print("[dim]No sessions recorded.[/dim]")
            return
        table = Table(title="Sessions")
        table.add_column("Session", style="cyan")
        table.add_column("Started")
        table.add_column("Steps", justify="right")
        table.add_column("Last advice")
        for r in records:
            last = str(r.steps[-1].decision) if r.steps else "-"
            table.add_row(r.id, r.created_at.strftime("%Y-%m-%d %H:%M:%S"), str(len(r.steps)), last)
        console.print(table)
        return

    record = log.get(session_id)
    if record is None:
        console.print(f"[red]Error: unknown session {session_id}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Session {record.id}")
    table.add_column("Street", style="cyan")
    table.add_column("Hand")
    table.add_column("Board")
    table.add_column("Pot", justify="right")
    table.add_column("To call", justify="right")
    table.add_column("Players", justify="right")
    table.add_column("Bankroll", justify="right")
    table.add_column("Win %", justify="right")
    table.add_column("Advice")
    for s in record.steps:
        table.add_row(
            s.street,
            " ".join(s.hand),
            " ".join(s.community) or "-",
            str(s.pot),
            str(s.min_bet),
            str(s.num_players),
            str(s.bankroll),
            f"{s.decision.win_probability * 100:.1f}",
            str(s.decision),
        )
    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Port"),
):
    """Run the HTTP API."""
    import uvicorn

    from .web import create_app

    uvicorn.run(create_app(), host=host, port=port)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
