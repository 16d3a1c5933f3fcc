#!/usr/bin/env python3
"""
Score matchups from the command line.

Input is either a JSON file holding {"home": {...}, "away": {...}} team stats
(or a list of them), or a CSV file with one matchup per row and columns
prefixed `home_` / `away_` (e.g. home_team_id, home_rating, away_wins).
Every matchup in a run shares one weight set.

    python -m statmind.scripts.predict_matchup week7.json --no-provider
    python -m statmind.scripts.predict_matchup week7.csv --weights '{"rating_differential": 1, ...}'
"""

import json
import argparse
import sys
from typing import Dict, List, Tuple

import pandas as pd
from tabulate import tabulate

from statmind.config import settings
from statmind.errors import StatMindError
from statmind.models.engine import PredictionEngine
from statmind.schemas.stats import TeamStats
from statmind.app_logging import setup_logging


def _split_row(row: Dict) -> Dict[str, Dict]:
    sides = {"home": {}, "away": {}}
    for column, value in row.items():
        side, _, field = column.partition("_")
        if side in sides and field:
            sides[side][field] = value
    return sides


def load_matchups(path: str) -> List[Tuple[TeamStats, TeamStats]]:
    if path.endswith(".csv"):
        df = pd.read_csv(path)
        # Empty cells become missing stats
        df = df.astype(object).where(pd.notna(df), None)
        data = [_split_row(row) for row in df.to_dict(orient="records")]
    else:
        with open(path) as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = [data]
    return [
        (TeamStats.model_validate(item["home"]), TeamStats.model_validate(item["away"]))
        for item in data
    ]


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Score NFL matchups from team statistics')
    parser.add_argument('input', help='JSON or CSV file with home/away team stats')
    parser.add_argument('--weights', type=str, help='JSON object overriding the component weights')
    parser.add_argument('--no-provider', action='store_true', help='Skip the text provider, use template reasoning')
    parser.add_argument('--json', action='store_true', help='Print predictions as JSON')

    args = parser.parse_args(argv)
    # Logs go to stderr so --json output stays parseable
    setup_logging(stream=sys.stderr, fmt="text")

    try:
        engine = PredictionEngine.from_settings(settings)
        weights = json.loads(args.weights) if args.weights else None
        matchups = load_matchups(args.input)
        predictions = engine.predict_many(matchups, weights=weights, use_provider=not args.no_provider)
    except (StatMindError, ValueError, KeyError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([p.model_dump(mode='json') for p in predictions], indent=2))
        return 0

    rows = [
        [
            f"{p.away_team_id} @ {p.home_team_id}",
            p.predicted_winner,
            f"{p.home_win_probability:.1%}",
            p.confidence,
            p.reasoning,
        ]
        for p in predictions
    ]
    print(tabulate(rows, headers=["Matchup", "Pick", "Home Win %", "Confidence", "Reasoning"],
                   tablefmt="grid", maxcolwidths=[None, None, None, None, 60]))
    return 0


# Command-line interface
if __name__ == "__main__":
    sys.exit(main())
