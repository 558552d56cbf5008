#!/usr/bin/env python3
"""
diffvalue Performance Benchmarks

This script measures the throughput of the diffvalue container and prints the
results as rich tables.

Usage:
    python scripts/benchmark.py             # Run all benchmarks
    python scripts/benchmark.py --config    # Show current benchmark configuration

Configuration:
    Adjust the constants at the top of the file to change benchmark parameters.
"""

import argparse
import threading
import time
from typing import Any, Callable, Dict

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from diffvalue import DiffArraySubject, DiffValueSubject

# Configuration constants - adjust these to change benchmark behavior
UPDATE_COUNT = 20000  # Mutations per single-thread benchmark
FANOUT_SUBSCRIBERS = 100  # Subscribers attached in the fan-out benchmark
FANOUT_UPDATES = 2000  # Mutations in the fan-out benchmark
THREAD_COUNT = 8  # Writer threads in the contention benchmark
UPDATES_PER_THREAD = 2500  # Mutations per writer thread
LIST_SIZE = 1000  # Initial list length for the sequence benchmark


def _increment(draft) -> int:
    draft.value += 1
    return 1


def _timed(fn: Callable[[], int]) -> Dict[str, Any]:
    start = time.perf_counter()
    operations = fn()
    elapsed = time.perf_counter() - start
    return {
        "operations": operations,
        "elapsed": elapsed,
        "operations_per_second": operations / elapsed if elapsed > 0 else 0.0,
    }


def bench_updates() -> int:
    """Uncontended updates with a single subscriber."""
    subject = DiffValueSubject(0)
    subject.subscribe(lambda update: None)
    for _ in range(UPDATE_COUNT):
        subject.update(_increment)
    return UPDATE_COUNT


def bench_fanout() -> int:
    """Every update delivered to many subscribers; counts deliveries."""
    subject = DiffValueSubject(0)
    for _ in range(FANOUT_SUBSCRIBERS):
        subject.subscribe(lambda update: None)
    for _ in range(FANOUT_UPDATES):
        subject.update(_increment)
    return FANOUT_UPDATES * FANOUT_SUBSCRIBERS


def bench_contention() -> int:
    """Several threads mutating one subject."""
    subject = DiffValueSubject(0)
    subject.subscribe(lambda update: None)

    def worker():
        for _ in range(UPDATES_PER_THREAD):
            subject.update(_increment)

    threads = [threading.Thread(target=worker) for _ in range(THREAD_COUNT)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    expected = THREAD_COUNT * UPDATES_PER_THREAD
    if subject.current_value != expected:
        raise RuntimeError(f"Lost updates: {subject.current_value} != {expected}")
    return expected


def bench_sequence() -> int:
    """List helpers on a list that is copied for every mutation."""
    subject = DiffArraySubject(list(range(LIST_SIZE)))
    subject.subscribe(lambda update: None)
    for i in range(LIST_SIZE):
        subject.move(0, LIST_SIZE - 1)
        subject.replace_at(i, -i)
    return LIST_SIZE * 2


BENCHMARKS = [
    ("Single-subscriber updates", bench_updates),
    ("Subscriber fan-out", bench_fanout),
    ("Contended updates", bench_contention),
    ("List move/replace", bench_sequence),
]


class DiffValueBenchmark:
    """Rich-formatted display for diffvalue benchmarks."""

    def __init__(self):
        self.console = Console()
        self.results = {}

    def run_benchmarks(self):
        start_time = time.time()
        self._display_header()

        for name, fn in BENCHMARKS:
            self.console.print(f"[yellow]Running {name}...[/yellow]")
            result = _timed(fn)
            self.results[name] = result
            self.console.print(
                f"[green]✓[/green] {name}: {result['operations_per_second']:,.0f} ops/sec"
            )

        self._display_final_results(start_time)

    def _display_header(self):
        header = Panel(
            Align.center("diffvalue Performance Benchmark Suite"),
            title="diffvalue Benchmarks",
            border_style="blue",
        )
        self.console.print(header)
        self.console.print()

    def _display_final_results(self, start_time: float):
        elapsed = time.time() - start_time

        table = Table(title="Final Benchmark Results")
        table.add_column("Benchmark", style="cyan", no_wrap=True)
        table.add_column("Operations", style="magenta", justify="right")
        table.add_column("Time", justify="right")
        table.add_column("Throughput", style="green", justify="right")

        for name, result in self.results.items():
            table.add_row(
                name,
                f"{result['operations']:,}",
                f"{result['elapsed'] * 1000:.1f} ms",
                f"{result['operations_per_second'] / 1000:.1f}K ops/sec",
            )

        self.console.print()
        self.console.print(table)
        self.console.print()
        self.console.print(f"[dim]Benchmark completed in {elapsed:.2f} seconds[/dim]")


def show_config(console: Console):
    table = Table(title="Benchmark Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta", justify="right")
    for setting in (
        "UPDATE_COUNT",
        "FANOUT_SUBSCRIBERS",
        "FANOUT_UPDATES",
        "THREAD_COUNT",
        "UPDATES_PER_THREAD",
        "LIST_SIZE",
    ):
        table.add_row(setting, str(globals()[setting]))
    console.print(table)


def main():
    parser = argparse.ArgumentParser(description="diffvalue performance benchmarks")
    parser.add_argument(
        "--config", action="store_true", help="Show benchmark configuration and exit"
    )
    args = parser.parse_args()

    if args.config:
        show_config(Console())
        return

    DiffValueBenchmark().run_benchmarks()


if __name__ == "__main__":
    main()
