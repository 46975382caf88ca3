#!/usr/bin/env python3
"""
Vertical slice: Create league + season → Auto-generate fixtures → Enter scores → Team records.
Run from project root: python3 scripts/vertical_slice.py
"""
from __future__ import annotations

import logging
import sys
from datetime import date
from pathlib import Path

# Ensure project root on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from gameday.logging_config import setup_logging
from gameday.persistence import init_db, get_connection, GameRepository, SeasonRepository, TeamRepository
from gameday.persistence.db import set_db_path
from gameday.services import FixtureEngine, FixtureError, SecureRNG

LEAGUE = "Slice League"
TEAMS = [("Harbour FC", "Harbour Park"), ("Millers", "Mill Lane"), ("Rovers", "Rover Ground"), ("Wanderers", None)]


def main() -> None:
    setup_logging()
    log = logging.getLogger("vertical_slice")
    # Use data/vertical_slice.db for demo (distinct from gameday.db)
    db_path = PROJECT_ROOT / "data" / "vertical_slice.db"
    if db_path.exists():
        db_path.unlink()
    set_db_path(db_path)
    init_db(db_path=db_path)

    conn = get_connection()
    try:
        team_repo = TeamRepository(conn)
        season_repo = SeasonRepository(conn)
        game_repo = GameRepository(conn)
        engine = FixtureEngine(game_repo, season_repo, team_repo, rng=SecureRNG())

        # 1. Roster and season
        for name, field in TEAMS:
            team_repo.create(name, LEAGUE, field=field)
        season = season_repo.create(LEAGUE, date(2024, 3, 1), date(2024, 10, 31), games_num=8)
        print(f"Created season {season.id} ({season.duration}), {season.games_num} games required")

        # 2. Fill the season with random fixtures
        try:
            games = engine.auto_generate(season.id)
        except FixtureError as e:
            log.error("Generation failed: %s", e)
            return
        print(f"Generated {len(games)} fixtures")

        # 3. Enter a score for every fixture (home scores more on even rows)
        for i, g in enumerate(games):
            g.home_score = 2 if i % 2 == 0 else 1
            g.visiting_score = 1 if i % 3 else 1 + (i % 2)
            engine.save_game(g)
            print(f"  {g.game_date} {g.home_team_name} {g.home_score:g}-{g.visiting_score:g} {g.visiting_team_name} → {g.game_result}")

        # 4. Records per team
        for name, _ in TEAMS:
            for r in engine.team_records(name):
                print(
                    f"{name}: played={r.games_played} won={r.wins} lost={r.losses} "
                    f"for={r.sum_scores:g} against={r.sum_opponent_scores:g}"
                )

        print("\nVertical slice complete.")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
