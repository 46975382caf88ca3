"""
Tests for the fixture engine: conflict detection, manual saves, auto generation,
removal, team records. Collaborators are in-memory fakes; RNG is scripted where
outcomes must be exact.
"""
from __future__ import annotations

import uuid
from datetime import date, timedelta
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from gameday.models import Game, GameResult, Season, derive_result
from gameday.services.fixture_engine import (
    FixtureEngine,
    DuplicateGameError,
    SeasonFullError,
    NoTeamsAvailableError,
    InsufficientTeamsError,
    GenerationConflictError,
    InvalidSeasonError,
    SeasonNotFoundError,
)
from gameday.services.rng import SecureRNG

START = date(2022, 1, 1)
END = date(2022, 12, 31)


# ---------- Fakes ----------


class FakeGameStore:
    def __init__(self) -> None:
        self.games: dict[str, Game] = {}
        self.save_all_calls = 0

    def get(self, game_id):
        return self.games.get(game_id)

    def find_by_team_pair(self, home, visiting):
        return [g for g in self.games.values() if g.home_team_name == home and g.visiting_team_name == visiting]

    def find_by_season(self, season_id):
        return [g for g in self.games.values() if g.season_id == season_id]

    def find_by_date_and_team_pair(self, game_date, home, visiting):
        return [
            g for g in self.games.values()
            if g.game_date == game_date and g.home_team_name == home and g.visiting_team_name == visiting
        ]

    def find_by_team(self, team_name):
        return [g for g in self.games.values() if team_name in (g.home_team_name, g.visiting_team_name)]

    def save(self, game):
        if game.id is None:
            game.id = str(uuid.uuid4())
        self.games[game.id] = game
        return game

    def save_all(self, games):
        self.save_all_calls += 1
        return [self.save(g) for g in games]

    def delete(self, game):
        self.games.pop(game.id, None)


class FakeSeasons:
    def __init__(self, *seasons: Season) -> None:
        self._by_id = {s.id: s for s in seasons}

    def resolve_season(self, season_id):
        return self._by_id.get(season_id)


class FakeTeams:
    def __init__(self, rosters: dict[str, list[str]], fields: dict[str, str] | None = None) -> None:
        self._rosters = rosters
        self._fields = fields or {}

    def teams_in_league(self, league_name):
        return list(self._rosters.get(league_name, []))

    def field_of_team(self, team_name):
        return self._fields.get(team_name)


class ScriptedRNG:
    """Returns scripted values in order; records each stop argument."""

    def __init__(self, values: list[int]) -> None:
        self._values = list(values)
        self.stops: list[int] = []

    def randrange(self, stop: int) -> int:
        self.stops.append(stop)
        v = self._values.pop(0)
        assert 0 <= v < stop
        return v


# ---------- Fixtures ----------


TEAMS = ["Ants", "Bees", "Cats", "Dogs"]
FIELDS = {"Ants": "Anthill Park", "Bees": "Hive Ground", "Cats": "Cattery Oval", "Dogs": "Kennel Field"}


@pytest.fixture
def store():
    return FakeGameStore()


@pytest.fixture
def season():
    return Season(id="s1", league_name="Metro", start_date=START, end_date=END, games_num=10)


def make_engine(store, *seasons, rosters=None, rng=None):
    teams = FakeTeams(rosters if rosters is not None else {"Metro": TEAMS}, FIELDS)
    return FixtureEngine(store, FakeSeasons(*seasons), teams, rng=rng or SecureRNG())


def new_game(season_id="s1", home="Ants", visiting="Bees", day=0, **kwargs) -> Game:
    return Game(
        season_id=season_id,
        home_team_name=home,
        visiting_team_name=visiting,
        game_date=START + timedelta(days=day),
        **kwargs,
    )


# ---------- Result derivation ----------


@pytest.mark.parametrize(
    "home_score, visiting_score, expected",
    [
        (3, 1, "Ants"),
        (1, 3, "Bees"),
        (2, 2, "DRAWN"),
        (None, 1, None),
        (1, None, None),
        (None, None, None),
    ],
)
def test_derive_result(home_score, visiting_score, expected):
    assert derive_result("Ants", "Bees", home_score, visiting_score) == expected


def test_save_game_sets_derived_result(store, season):
    engine = make_engine(store, season)
    saved = engine.save_game(new_game(home_score=3, visiting_score=1, game_result="Bees"))
    assert saved.game_result == "Ants"
    draw = engine.save_game(new_game(day=1, home_score=2, visiting_score=2))
    assert draw.game_result == GameResult.DRAWN.value
    pending = engine.save_game(new_game(day=2, home_score=2))
    assert pending.game_result is None


# ---------- Conflict detection ----------


def test_duplicate_new_game_rejected(store, season):
    engine = make_engine(store, season)
    engine.save_game(new_game())
    with pytest.raises(DuplicateGameError):
        engine.save_game(new_game())
    assert len(store.games) == 1


def test_duplicate_with_different_id_rejected(store, season):
    engine = make_engine(store, season)
    engine.save_game(new_game())
    with pytest.raises(DuplicateGameError):
        engine.save_game(new_game(id="another-id"))


def test_resaving_same_game_is_not_a_conflict(store, season):
    engine = make_engine(store, season)
    g = engine.save_game(new_game())
    assert engine.has_conflict(g) is False
    again = engine.save_game(new_game(id=g.id, home_score=1, visiting_score=0))
    assert again.id == g.id
    assert store.games[g.id].game_result == "Ants"
    assert len(store.games) == 1


def test_reversed_pair_same_day_is_not_a_conflict(store, season):
    engine = make_engine(store, season)
    engine.save_game(new_game(home="Ants", visiting="Bees"))
    engine.save_game(new_game(home="Bees", visiting="Ants"))
    assert len(store.games) == 2


# ---------- Season fullness ----------


def test_season_full_rejects_new_game_but_allows_updates(store):
    season = Season(id="s2", league_name="Metro", start_date=START, end_date=END, games_num=2)
    engine = make_engine(store, season)
    first = engine.save_game(new_game(season_id="s2", day=0))
    engine.save_game(new_game(season_id="s2", day=1))
    with pytest.raises(SeasonFullError):
        engine.save_game(new_game(season_id="s2", day=2))
    assert len(store.games) == 2
    updated = engine.save_game(
        new_game(season_id="s2", day=0, id=first.id, home_score=0, visiting_score=4)
    )
    assert updated.game_result == "Bees"


def test_season_full_rejects_unknown_id(store):
    """An id that no stored game has is a new game, not an update."""
    season = Season(id="s5", league_name="Metro", start_date=START, end_date=END, games_num=1)
    engine = make_engine(store, season)
    engine.save_game(new_game(season_id="s5", day=0))
    with pytest.raises(SeasonFullError):
        engine.save_game(new_game(season_id="s5", day=2, id="made-up"))
    assert len(store.find_by_season("s5")) == 1


def test_save_game_unknown_season(store, season):
    engine = make_engine(store, season)
    with pytest.raises(SeasonNotFoundError):
        engine.save_game(new_game(season_id="missing"))


# ---------- Auto generation ----------


def test_auto_generate_tops_up_to_required(store, season):
    """required=10 with 4 stored: exactly 6 generated, distinct sides, dates in [start, end)."""
    engine = make_engine(store, season)
    for i in range(4):
        engine.save_game(new_game(day=300 + i))
    span = (END - START).days
    # (home, visiting..., day offset) per game; game 2 first draws visiting == home
    script = [
        0, 1, 0,
        1, 1, 2, 10,
        2, 3, 20,
        3, 0, 30,
        0, 2, 40,
        1, 3, span - 1,
    ]
    rng = ScriptedRNG(script)
    engine = make_engine(store, season, rng=rng)
    generated = engine.auto_generate("s1")
    assert len(generated) == 6
    assert len(store.find_by_season("s1")) == 10
    assert rng.stops.count(span) == 6
    for g in generated:
        assert g.id is not None
        assert g.home_team_name != g.visiting_team_name
        assert START <= g.game_date < END
        assert g.location == FIELDS[g.home_team_name]
        assert g.game_result is None
    assert (generated[1].home_team_name, generated[1].visiting_team_name) == ("Bees", "Cats")
    assert generated[-1].game_date == END - timedelta(days=1)


def test_auto_generate_with_secure_rng(store, season):
    teams = [f"Team {i}" for i in range(20)]
    engine = make_engine(store, season, rosters={"Metro": teams})
    generated = engine.auto_generate("s1")
    assert len(generated) == 10
    for g in generated:
        assert g.home_team_name != g.visiting_team_name
        assert START <= g.game_date < END


def test_auto_generate_full_season_generates_nothing(store):
    season = Season(id="s3", league_name="Metro", start_date=START, end_date=END, games_num=1)
    engine = make_engine(store, season)
    engine.save_game(new_game(season_id="s3"))
    assert engine.auto_generate("s3") == []
    assert store.save_all_calls == 0


def test_auto_generate_no_teams(store, season):
    engine = make_engine(store, season, rosters={})
    with pytest.raises(NoTeamsAvailableError):
        engine.auto_generate("s1")
    assert store.games == {}


def test_auto_generate_single_team_fails_fast(store, season):
    engine = make_engine(store, season, rosters={"Metro": ["Ants"]}, rng=ScriptedRNG([]))
    with pytest.raises(InsufficientTeamsError):
        engine.auto_generate("s1")
    assert store.games == {}


def test_auto_generate_conflict_with_stored_game_discards_batch(store, season):
    engine = make_engine(store, season)
    engine.save_game(new_game(home="Bees", visiting="Cats", day=5))
    # First fixture is fine, second collides with the stored Bees v Cats
    rng = ScriptedRNG([0, 1, 0, 1, 2, 5])
    engine = make_engine(store, season, rng=rng)
    with pytest.raises(GenerationConflictError):
        engine.auto_generate("s1")
    assert len(store.games) == 1
    assert store.save_all_calls == 0


def test_auto_generate_conflict_within_batch(store, season):
    rng = ScriptedRNG([0, 1, 7, 0, 1, 7])
    engine = make_engine(store, season, rng=rng)
    with pytest.raises(GenerationConflictError):
        engine.auto_generate("s1")
    assert store.games == {}


def test_auto_generate_single_day_season(store):
    season = Season(id="s4", league_name="Metro", start_date=START, end_date=START, games_num=2)
    engine = make_engine(store, season)
    with pytest.raises(InvalidSeasonError):
        engine.auto_generate("s4")


# ---------- Removal ----------


def test_remove_game(store, season):
    engine = make_engine(store, season)
    g = engine.save_game(new_game())
    engine.remove_game(g)
    assert store.games == {}


def test_remove_game_noop_without_id(store, season):
    engine = make_engine(store, season)
    engine.save_game(new_game())
    engine.remove_game(None)
    engine.remove_game(new_game())
    assert len(store.games) == 1


# ---------- Team records ----------


def test_team_records_empty(store, season):
    engine = make_engine(store, season)
    assert engine.team_records("Ants") == []


def test_team_records_per_season(store, season):
    other = Season(id="s9", league_name="Metro", start_date=date(2023, 3, 1), end_date=date(2023, 9, 30), games_num=5)
    engine = make_engine(store, season, other)
    engine.save_game(new_game(home="Ants", visiting="Bees", day=0, home_score=3, visiting_score=1))  # win
    engine.save_game(new_game(home="Cats", visiting="Ants", day=1, home_score=4, visiting_score=2))  # loss
    engine.save_game(new_game(home="Ants", visiting="Dogs", day=2, home_score=1, visiting_score=1))  # draw
    engine.save_game(new_game(home="Bees", visiting="Ants", day=3))  # unplayed
    engine.save_game(new_game(home="Bees", visiting="Cats", day=4, home_score=9, visiting_score=0))  # not Ants
    engine.save_game(Game(
        season_id="s9", home_team_name="Dogs", visiting_team_name="Ants",
        game_date=date(2023, 4, 1), home_score=0, visiting_score=5,
    ))

    records = {r.season_id: r for r in engine.team_records("Ants")}
    assert set(records) == {"s1", "s9"}

    r1 = records["s1"]
    assert r1.season_duration == "20220101~20221231"
    assert r1.games_played == 4
    assert r1.wins == 1
    assert r1.losses == 1
    assert r1.sum_scores == 3 + 2 + 1
    assert r1.sum_opponent_scores == 1 + 4 + 1
    assert r1.sum_total_scores == r1.sum_scores + r1.sum_opponent_scores

    r9 = records["s9"]
    assert r9.season_duration == "20230301~20230930"
    assert (r9.games_played, r9.wins, r9.losses) == (1, 1, 0)
    assert r9.sum_scores == 5
    assert r9.sum_opponent_scores == 0


def test_find_games_pass_through(store, season):
    engine = make_engine(store, season)
    engine.save_game(new_game(home="Ants", visiting="Bees", day=0))
    engine.save_game(new_game(home="Ants", visiting="Bees", day=1))
    engine.save_game(new_game(home="Bees", visiting="Ants", day=2))
    assert len(engine.find_games("Ants", "Bees")) == 2
    assert len(engine.find_games_by_season("s1")) == 3
