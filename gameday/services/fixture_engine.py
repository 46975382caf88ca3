"""
Fixture engine: manual game saves, random season generation, per-team records.
Conflict key is (game_date, home_team_name, visiting_team_name); all writes go through it.
Check-then-act against the store with no locking: concurrent generators for one season can race.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import timedelta

from gameday.models import Game, GameResult, Season, TeamGameRecord, derive_result
from gameday.services.contracts import GameStore, RandomSource, SeasonDirectory, TeamDirectory
from gameday.services.rng import SecureRNG

logger = logging.getLogger(__name__)

# ---------- Exceptions ----------


class FixtureError(ValueError):
    """Base for scheduling failures surfaced to the caller."""


class SeasonNotFoundError(FixtureError, LookupError):
    """Season id does not resolve."""


class DuplicateGameError(FixtureError):
    """Another game already has this date, home team and visiting team."""


class SeasonFullError(FixtureError):
    """Season already holds its required number of games; only updates are allowed."""


class NoTeamsAvailableError(FixtureError):
    """League roster is empty; nothing to generate from."""


class InsufficientTeamsError(NoTeamsAvailableError):
    """League roster has a single team; home and visiting sides cannot differ."""


class GenerationConflictError(FixtureError):
    """A generated fixture collided with an existing one. The whole batch was discarded."""


class InvalidSeasonError(FixtureError):
    """Season date range leaves no day to place a game on."""


# ---------- FixtureEngine ----------


class FixtureEngine:
    """
    Scheduling rules over injected collaborators.
    Persistence and roster/season lookups are delegated; the RNG is owned by the instance.
    """

    def __init__(
        self,
        games: GameStore,
        seasons: SeasonDirectory,
        teams: TeamDirectory,
        rng: RandomSource | None = None,
    ) -> None:
        self._games = games
        self._seasons = seasons
        self._teams = teams
        self._rng = rng if rng is not None else SecureRNG()

    # ---------- Queries ----------

    def find_games(self, home_team_name: str, visiting_team_name: str) -> list[Game]:
        return self._games.find_by_team_pair(home_team_name, visiting_team_name)

    def find_games_by_season(self, season_id: str) -> list[Game]:
        return self._games.find_by_season(season_id)

    def has_conflict(self, game: Game) -> bool:
        """
        True if a stored game other than this one shares its date, home team and visiting team.
        A game without an id conflicts with any match.
        """
        matches = self._games.find_by_date_and_team_pair(
            game.game_date, game.home_team_name, game.visiting_team_name
        )
        return any(g.id != game.id for g in matches)

    # ---------- Manual save ----------

    def save_game(self, game: Game) -> Game:
        """
        Validate and persist a manually entered game.
        New games need room in the season; updates (id of a stored game) are always accepted.
        An id the store does not know counts as a new game.
        Result is derived from the scores and overwrites whatever the caller set.
        """
        season = self._resolve_season(game.season_id)
        if self.has_conflict(game):
            logger.warning(
                "Rejected game %s vs %s on %s: conflict",
                game.home_team_name, game.visiting_team_name, game.game_date,
            )
            raise DuplicateGameError(
                f"Game conflict: {game.home_team_name} vs {game.visiting_team_name} "
                f"on {game.game_date.isoformat()} already exists"
            )
        existing = self._games.find_by_season(season.id)
        is_update = game.id is not None and self._games.get(game.id) is not None
        if not is_update and len(existing) >= season.games_num:
            logger.warning("Rejected new game for season %s: %d/%d games", season.id, len(existing), season.games_num)
            raise SeasonFullError(
                f"Games in season {season.id} are already full ({season.games_num})"
            )
        game.game_result = derive_result(
            game.home_team_name, game.visiting_team_name, game.home_score, game.visiting_score
        )
        return self._games.save(game)

    # ---------- Auto generation ----------

    def auto_generate(self, season_id: str) -> list[Game]:
        """
        Top the season up to games_num with random fixtures.
        Home and visiting teams are distinct; location is the home team's field;
        date is uniform in [start_date, end_date). Any conflict, with stored games or
        with an earlier fixture in this batch, discards the whole batch.
        """
        season = self._resolve_season(season_id)
        team_names = self._teams.teams_in_league(season.league_name)
        if not team_names:
            raise NoTeamsAvailableError(f"No teams in league {season.league_name!r}")
        if len(team_names) < 2:
            raise InsufficientTeamsError(
                f"League {season.league_name!r} has one team; need at least 2 to schedule games"
            )
        needed = season.games_num - len(self._games.find_by_season(season.id))
        if needed <= 0:
            return []
        span = (season.end_date - season.start_date).days
        if span <= 0:
            raise InvalidSeasonError(
                f"Season {season.id} runs {season.duration}; no dates available"
            )

        batch: list[Game] = []
        batch_keys: set[tuple] = set()
        n = len(team_names)
        for _ in range(needed):
            home_idx = self._rng.randrange(n)
            visiting_idx = self._rng.randrange(n)
            while visiting_idx == home_idx:
                visiting_idx = self._rng.randrange(n)
            home = team_names[home_idx]
            game = Game(
                season_id=season.id,
                home_team_name=home,
                visiting_team_name=team_names[visiting_idx],
                game_date=season.start_date + timedelta(days=self._rng.randrange(span)),
                location=self._teams.field_of_team(home),
            )
            if game.conflict_key in batch_keys or self.has_conflict(game):
                logger.warning(
                    "Auto-generation for season %s aborted: %s vs %s on %s conflicts (%d generated, none saved)",
                    season.id, game.home_team_name, game.visiting_team_name, game.game_date, len(batch),
                )
                raise GenerationConflictError(
                    f"Auto-generated game conflict: {game.home_team_name} vs "
                    f"{game.visiting_team_name} on {game.game_date.isoformat()}"
                )
            logger.debug("Generated %s vs %s on %s", game.home_team_name, game.visiting_team_name, game.game_date)
            batch_keys.add(game.conflict_key)
            batch.append(game)
        saved = self._games.save_all(batch)
        logger.info("Auto-generated %d games for season %s", len(saved), season.id)
        return saved

    # ---------- Removal ----------

    def remove_game(self, game: Game | None) -> None:
        """Delete by id. No-op for None or an unsaved game."""
        if game is None or game.id is None:
            return
        self._games.delete(game)

    # ---------- Team records ----------

    def team_records(self, team_name: str) -> list[TeamGameRecord]:
        """
        One record per season the team played in.
        wins: result is the team. losses: result is the other team (not the team, not DRAWN).
        Scores are taken from the team's own side of each game; a missing score counts as 0.
        """
        games = self._games.find_by_team(team_name)
        if not games:
            return []
        by_season: dict[str, list[Game]] = defaultdict(list)
        for g in games:
            by_season[g.season_id].append(g)

        records: list[TeamGameRecord] = []
        for season_id, season_games in by_season.items():
            season = self._resolve_season(season_id)
            record = TeamGameRecord(
                season_id=season_id,
                season_duration=season.duration,
                games_played=len(season_games),
            )
            for g in season_games:
                if g.game_result == team_name:
                    record.wins += 1
                elif g.game_result is not None and g.game_result != GameResult.DRAWN.value:
                    record.losses += 1
                if g.home_team_name == team_name:
                    own, opponent = g.home_score, g.visiting_score
                else:
                    own, opponent = g.visiting_score, g.home_score
                record.sum_scores += own or 0.0
                record.sum_opponent_scores += opponent or 0.0
            record.sum_total_scores = record.sum_scores + record.sum_opponent_scores
            records.append(record)
        return records

    def _resolve_season(self, season_id: str) -> Season:
        season = self._seasons.resolve_season(season_id)
        if season is None:
            raise SeasonNotFoundError(f"Season not found: {season_id}")
        return season
