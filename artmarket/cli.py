"""Command line helpers for ArtMarket."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from random import Random

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import ArtMarketConfig, RulesConfig
from .diagnostics.checklist import run_checklist as checklist_run
from .diagnostics.simulator import GameSimulator
from .loaders import load_rules_from_json, validate_rules_file
from .validators import validate_rules

console = Console()


def run_simulator() -> None:
    parser = argparse.ArgumentParser(description="ArtMarket game simulator")
    parser.add_argument("--players", type=int, default=4, help="Number of simulated players")
    parser.add_argument("--games", type=int, default=1, help="Number of games to play")
    parser.add_argument("--rules", help="Path to rules JSON file")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args()

    rules = _load_rules(args.rules)
    rng = Random(args.seed)
    simulator = GameSimulator(rules, rng=rng)

    wins: dict[str, int] = {}
    for index in range(args.games):
        result = asyncio.run(simulator.simulate(players=args.players))
        if result.winner:
            wins[result.winner] = wins.get(result.winner, 0) + 1

        table = Table(title=f"Game {index + 1}: {result.rounds} rounds, {result.auctions} auctions")
        table.add_column("Player")
        table.add_column("Money", justify="right")
        for uid, money in result.money.items():
            table.add_row(uid, str(money))
        console.print(table)
        console.print(f"Voided auctions: {result.voided}, sealed ties: {result.ties}")
        for round_no, values in enumerate(result.artist_values, start=1):
            pretty = ", ".join(f"{artist}={value}" for artist, value in values.items())
            console.print(f"  Round {round_no}: {pretty or 'no sales'}")

    if args.games > 1:
        summary = Table(title="Wins")
        summary.add_column("Player")
        summary.add_column("Wins", justify="right")
        for uid, count in sorted(wins.items(), key=lambda item: -item[1]):
            summary.add_row(uid, str(count))
        console.print(summary)


def run_checklist() -> None:
    parser = argparse.ArgumentParser(description="ArtMarket rules sanity checks")
    parser.add_argument("--rules", help="Path to rules JSON file")
    args = parser.parse_args()

    issues = checklist_run(_load_rules(args.rules))
    if not issues:
        console.print("[bold green]No issues found[/bold green]")
        return
    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        label = escape(f"[{issue.severity.upper()}]")
        console.print(f"[{colour}]{label}[/{colour}] {escape(issue.message)}")
    sys.exit(1)


def run_validate() -> None:
    parser = argparse.ArgumentParser(description="ArtMarket rules validator")
    parser.add_argument("--rules", help="Path to rules JSON file; environment rules otherwise")
    args = parser.parse_args()

    if args.rules:
        errors = validate_rules_file(Path(args.rules))
    else:
        errors = validate_rules(ArtMarketConfig.from_env().rules)
    if errors:
        console.print("[red]Rules are invalid:[/red]")
        for err in errors:
            console.print(f"- {escape(err)}")
        sys.exit(1)
    console.print("[bold green]Rules are valid[/bold green]")


def _load_rules(path: str | None) -> RulesConfig:
    try:
        if path:
            return load_rules_from_json(Path(path))
        return ArtMarketConfig.from_env().rules
    except ValueError as exc:
        console.print(f"[red]Cannot load rules:[/red] {escape(str(exc))}")
        sys.exit(1)
