"""
Repository implementations for scheduling data.
No business logic; only read/write operations.

Each repository is bound to one open connection, so the fixture engine can hold it
as a collaborator for the duration of a request.
"""
from __future__ import annotations

import sqlite3
import uuid
from datetime import date, datetime
from typing import Iterable

from gameday.models import Game, Season, Team

_GAME_COLS = (
    "id, season_id, home_team_name, visiting_team_name, game_date, location, "
    "home_score, visiting_score, game_result"
)


def _row_to_game(r: sqlite3.Row) -> Game:
    return Game(
        id=r["id"],
        season_id=r["season_id"],
        home_team_name=r["home_team_name"],
        visiting_team_name=r["visiting_team_name"],
        game_date=date.fromisoformat(r["game_date"]),
        location=r["location"],
        home_score=r["home_score"],
        visiting_score=r["visiting_score"],
        game_result=r["game_result"],
    )


# ---------- GameRepository ----------


class GameRepository:
    """Record store for games. Lookup by pair, season, date+pair, team; save / bulk save / delete."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get(self, game_id: str) -> Game | None:
        row = self._conn.execute(
            f"SELECT {_GAME_COLS} FROM games WHERE id = ?", (game_id,)
        ).fetchone()
        return _row_to_game(row) if row is not None else None

    def find_by_team_pair(self, home_team_name: str, visiting_team_name: str) -> list[Game]:
        rows = self._conn.execute(
            f"SELECT {_GAME_COLS} FROM games WHERE home_team_name = ? AND visiting_team_name = ? ORDER BY game_date, id",
            (home_team_name, visiting_team_name),
        ).fetchall()
        return [_row_to_game(r) for r in rows]

    def find_by_season(self, season_id: str) -> list[Game]:
        rows = self._conn.execute(
            f"SELECT {_GAME_COLS} FROM games WHERE season_id = ? ORDER BY game_date, id",
            (season_id,),
        ).fetchall()
        return [_row_to_game(r) for r in rows]

    def find_by_date_and_team_pair(
        self, game_date: date, home_team_name: str, visiting_team_name: str
    ) -> list[Game]:
        rows = self._conn.execute(
            f"SELECT {_GAME_COLS} FROM games WHERE game_date = ? AND home_team_name = ? AND visiting_team_name = ?",
            (game_date.isoformat(), home_team_name, visiting_team_name),
        ).fetchall()
        return [_row_to_game(r) for r in rows]

    def find_by_team(self, team_name: str) -> list[Game]:
        """Games where the team is either side."""
        rows = self._conn.execute(
            f"SELECT {_GAME_COLS} FROM games WHERE home_team_name = ? OR visiting_team_name = ? ORDER BY game_date, id",
            (team_name, team_name),
        ).fetchall()
        return [_row_to_game(r) for r in rows]

    def save(self, game: Game) -> Game:
        """Insert when the game has no id or an unknown id; otherwise update in place."""
        self._write(game)
        self._conn.commit()
        return game

    def save_all(self, games: Iterable[Game]) -> list[Game]:
        """Write all games in one transaction."""
        saved: list[Game] = []
        try:
            for game in games:
                self._write(game)
                saved.append(game)
        except sqlite3.Error:
            self._conn.rollback()
            raise
        self._conn.commit()
        return saved

    def delete(self, game: Game) -> None:
        self._conn.execute("DELETE FROM games WHERE id = ?", (game.id,))
        self._conn.commit()

    def _write(self, game: Game) -> None:
        if game.id is not None and self._exists(game.id):
            self._conn.execute(
                "UPDATE games SET season_id = ?, home_team_name = ?, visiting_team_name = ?, game_date = ?, "
                "location = ?, home_score = ?, visiting_score = ?, game_result = ? WHERE id = ?",
                (
                    game.season_id, game.home_team_name, game.visiting_team_name,
                    game.game_date.isoformat(), game.location,
                    game.home_score, game.visiting_score, game.game_result, game.id,
                ),
            )
            return
        if game.id is None:
            game.id = str(uuid.uuid4())
        now = datetime.utcnow().isoformat()
        self._conn.execute(
            f"INSERT INTO games ({_GAME_COLS}, created_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                game.id, game.season_id, game.home_team_name, game.visiting_team_name,
                game.game_date.isoformat(), game.location,
                game.home_score, game.visiting_score, game.game_result, now,
            ),
        )

    def _exists(self, game_id: str) -> bool:
        row = self._conn.execute("SELECT 1 FROM games WHERE id = ?", (game_id,)).fetchone()
        return row is not None


# ---------- SeasonRepository ----------


class SeasonRepository:
    """Season directory: resolve a season id to its league, date range and game count."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def create(
        self,
        league_name: str,
        start_date: date,
        end_date: date,
        games_num: int,
        id: str | None = None,
    ) -> Season:
        sid = id or str(uuid.uuid4())
        now = datetime.utcnow().isoformat()
        self._conn.execute(
            "INSERT INTO seasons (id, league_name, start_date, end_date, games_num, created_at) VALUES (?, ?, ?, ?, ?, ?)",
            (sid, league_name, start_date.isoformat(), end_date.isoformat(), games_num, now),
        )
        self._conn.commit()
        return Season(
            id=sid, league_name=league_name, start_date=start_date,
            end_date=end_date, games_num=games_num,
        )

    def resolve_season(self, season_id: str) -> Season | None:
        row = self._conn.execute(
            "SELECT id, league_name, start_date, end_date, games_num FROM seasons WHERE id = ?",
            (season_id,),
        ).fetchone()
        if row is None:
            return None
        return Season(
            id=row["id"],
            league_name=row["league_name"],
            start_date=date.fromisoformat(row["start_date"]),
            end_date=date.fromisoformat(row["end_date"]),
            games_num=row["games_num"],
        )


# ---------- TeamRepository ----------


class TeamRepository:
    """Team directory: league roster names and each team's home field."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def create(self, name: str, league_name: str, field: str | None = None) -> Team:
        now = datetime.utcnow().isoformat()
        self._conn.execute(
            "INSERT INTO teams (name, league_name, field, created_at) VALUES (?, ?, ?, ?)",
            (name, league_name, field, now),
        )
        self._conn.commit()
        return Team(name=name, league_name=league_name, field=field)

    def list_by_league(self, league_name: str) -> list[Team]:
        rows = self._conn.execute(
            "SELECT name, league_name, field FROM teams WHERE league_name = ? ORDER BY name",
            (league_name,),
        ).fetchall()
        return [Team(name=r["name"], league_name=r["league_name"], field=r["field"]) for r in rows]

    def teams_in_league(self, league_name: str) -> list[str]:
        return [t.name for t in self.list_by_league(league_name)]

    def field_of_team(self, team_name: str) -> str | None:
        row = self._conn.execute(
            "SELECT field FROM teams WHERE name = ?", (team_name,)
        ).fetchone()
        return row["field"] if row is not None else None
