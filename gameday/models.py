"""
Data models for the season scheduler.
Domain objects only: no persistence or API logic.

Seasons belong to a league by name; teams belong to a league and own a home field;
games reference a season and name both sides directly.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any


# ---------- Game result ----------
class GameResult(str, Enum):
    """Non-team result value. A won game stores the winning team's name instead."""
    DRAWN = "DRAWN"


def derive_result(
    home_team_name: str,
    visiting_team_name: str,
    home_score: float | None,
    visiting_score: float | None,
) -> str | None:
    """
    Result from scores: home name if home scored more, visiting name if visiting did,
    DRAWN if level. None until both scores are known.
    """
    if home_score is None or visiting_score is None:
        return None
    if home_score > visiting_score:
        return home_team_name
    if home_score < visiting_score:
        return visiting_team_name
    return GameResult.DRAWN.value


# ---------- Season ----------
@dataclass
class Season:
    """
    A bounded date range in which a league must play games_num games.
    Read-only input to scheduling.
    """
    id: str
    league_name: str
    start_date: date
    end_date: date
    games_num: int

    @property
    def duration(self) -> str:
        """Display form: 20220101~20221231."""
        return f"{self.start_date.strftime('%Y%m%d')}~{self.end_date.strftime('%Y%m%d')}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "league_name": self.league_name,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "games_num": self.games_num,
        }


# ---------- Team ----------
@dataclass
class Team:
    """A team in a league. field is its home ground, used as the location of home games."""
    name: str
    league_name: str
    field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "league_name": self.league_name,
            "field": self.field,
        }


# ---------- Game (fixture) ----------
@dataclass
class Game:
    """
    A fixture between two teams on a date within a season.
    id is None until persisted. game_result is derived from the scores on save.
    """
    season_id: str
    home_team_name: str
    visiting_team_name: str
    game_date: date
    location: str | None = None
    home_score: float | None = None
    visiting_score: float | None = None
    game_result: str | None = None
    id: str | None = None

    @property
    def conflict_key(self) -> tuple[date, str, str]:
        return (self.game_date, self.home_team_name, self.visiting_team_name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "season_id": self.season_id,
            "home_team_name": self.home_team_name,
            "visiting_team_name": self.visiting_team_name,
            "game_date": self.game_date.isoformat(),
            "location": self.location,
            "home_score": self.home_score,
            "visiting_score": self.visiting_score,
            "game_result": self.game_result,
        }


# ---------- TeamGameRecord (computed, not persisted) ----------
@dataclass
class TeamGameRecord:
    """One team's performance within one season."""
    season_id: str
    season_duration: str
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    sum_scores: float = 0.0
    sum_opponent_scores: float = 0.0
    sum_total_scores: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "season_id": self.season_id,
            "season_duration": self.season_duration,
            "games_played": self.games_played,
            "wins": self.wins,
            "losses": self.losses,
            "sum_scores": self.sum_scores,
            "sum_opponent_scores": self.sum_opponent_scores,
            "sum_total_scores": self.sum_total_scores,
        }
