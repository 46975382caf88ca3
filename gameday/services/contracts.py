"""
Collaborator contracts for the fixture engine.
The SQLite repositories satisfy these; tests substitute in-memory fakes.
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, Protocol

from gameday.models import Game, Season


class GameStore(Protocol):
    def get(self, game_id: str) -> Game | None: ...

    def find_by_team_pair(self, home_team_name: str, visiting_team_name: str) -> list[Game]: ...

    def find_by_season(self, season_id: str) -> list[Game]: ...

    def find_by_date_and_team_pair(
        self, game_date: date, home_team_name: str, visiting_team_name: str
    ) -> list[Game]: ...

    def find_by_team(self, team_name: str) -> list[Game]: ...

    def save(self, game: Game) -> Game: ...

    def save_all(self, games: Iterable[Game]) -> list[Game]: ...

    def delete(self, game: Game) -> None: ...


class SeasonDirectory(Protocol):
    def resolve_season(self, season_id: str) -> Season | None: ...


class TeamDirectory(Protocol):
    def teams_in_league(self, league_name: str) -> list[str]: ...

    def field_of_team(self, team_name: str) -> str | None: ...


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...
