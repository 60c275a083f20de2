from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd


def describe(path: Path) -> None:
    if not path.exists():
        print(f"warning: {path} not found")
        return
    df = pd.read_json(path, lines=True)
    if df.empty:
        print(f"warning: {path} has no rows")
        return

    print(f"\n--- {path.name}: {len(df)} decisions, {df['game'].nunique()} game(s) ---")
    print(df[["best_score", "legal_moves", "elapsed_ms"]].describe())

    print("\nmove distribution:")
    print(df["move"].value_counts(normalize=True).round(3))

    forced = int((df["legal_moves"] == 0).sum())
    searched = int(df["searched"].sum())
    print(f"\nforced (no legal move): {forced} ({100.0 * forced / len(df):.2f}%)")
    print(f"space search ran: {searched} ({100.0 * searched / len(df):.2f}%)")
    print(f"slowest decision: {df['elapsed_ms'].max():.2f} ms")


def main() -> None:
    parser = argparse.ArgumentParser(description="Describe JSONL decision logs written by `snakebrain decide --log-jsonl`")
    parser.add_argument(
        "logs",
        type=Path,
        nargs="*",
        default=[Path("runs/decisions.jsonl")],
        help="Decision logs to summarize",
    )
    args = parser.parse_args()

    for path in args.logs:
        describe(path)


if __name__ == "__main__":
    main()
