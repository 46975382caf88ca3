"""
REST API for the season scheduler.
Thin wrappers around the fixture engine and repositories.
"""
from __future__ import annotations

import logging
import sqlite3
from contextlib import asynccontextmanager, contextmanager
from datetime import date
from typing import Any, AsyncGenerator, Generator, NoReturn

from fastapi import FastAPI, HTTPException, Query, Response
from pydantic import BaseModel, Field

from gameday.logging_config import setup_logging
from gameday.models import Game
from gameday.persistence import (
    get_connection,
    get_db_path,
    init_db,
    GameRepository,
    SeasonRepository,
    TeamRepository,
)
from gameday.services import (
    FixtureEngine,
    FixtureError,
    SeasonNotFoundError,
    DuplicateGameError,
    SeasonFullError,
    GenerationConflictError,
    SecureRNG,
)

logger = logging.getLogger(__name__)

# One strong RNG per process. Failure here is fatal at import/startup.
_rng = SecureRNG()


@contextmanager
def db_conn() -> Generator:
    """Yield a DB connection, ensure close on exit."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


def _engine(conn: sqlite3.Connection) -> FixtureEngine:
    return FixtureEngine(
        GameRepository(conn),
        SeasonRepository(conn),
        TeamRepository(conn),
        rng=_rng,
    )


def _raise_http(e: FixtureError) -> NoReturn:
    """Map fixture errors to HTTP status codes."""
    if isinstance(e, SeasonNotFoundError):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (DuplicateGameError, SeasonFullError, GenerationConflictError)):
        raise HTTPException(status_code=409, detail=str(e))
    raise HTTPException(status_code=400, detail=str(e))


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    init_db(db_path=get_db_path())
    logger.info("Database ready at %s", get_db_path())
    yield


# ---------- FastAPI app ----------
app = FastAPI(
    title="Gameday Scheduler API",
    description="Season fixtures: manual results, random generation, team records",
    version="0.1.0",
    lifespan=lifespan,
)


# ---------- Request models ----------


class CreateSeasonRequest(BaseModel):
    league_name: str = Field(..., min_length=1, max_length=200)
    start_date: date
    end_date: date
    games_num: int = Field(..., ge=0, description="Required number of games in the season")


class CreateTeamRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    league_name: str = Field(..., min_length=1, max_length=200)
    field: str | None = Field(None, description="Home ground; used as location of home games")


class SaveGameRequest(BaseModel):
    id: str | None = Field(None, description="Set to update an existing game")
    season_id: str
    home_team_name: str = Field(..., min_length=1)
    visiting_team_name: str = Field(..., min_length=1)
    game_date: date
    location: str | None = None
    home_score: float | None = None
    visiting_score: float | None = None


# ---------- Seasons & teams ----------


@app.post("/seasons")
def create_season(req: CreateSeasonRequest) -> dict[str, Any]:
    if req.end_date < req.start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    with db_conn() as conn:
        season = SeasonRepository(conn).create(
            req.league_name, req.start_date, req.end_date, req.games_num
        )
        return season.to_dict()


@app.get("/seasons/{season_id}")
def get_season(season_id: str) -> dict[str, Any]:
    with db_conn() as conn:
        season = SeasonRepository(conn).resolve_season(season_id)
        if season is None:
            raise HTTPException(status_code=404, detail="Season not found")
        return season.to_dict()


@app.post("/teams")
def create_team(req: CreateTeamRequest) -> dict[str, Any]:
    with db_conn() as conn:
        try:
            team = TeamRepository(conn).create(req.name, req.league_name, req.field)
        except sqlite3.IntegrityError:
            raise HTTPException(status_code=400, detail=f"Team already exists: {req.name}")
        return team.to_dict()


@app.get("/leagues/{league_name}/teams")
def list_league_teams(league_name: str) -> dict[str, Any]:
    with db_conn() as conn:
        teams = TeamRepository(conn).list_by_league(league_name)
        return {"league_name": league_name, "teams": [t.to_dict() for t in teams]}


# ---------- Games ----------


@app.post("/games")
def save_game(req: SaveGameRequest) -> dict[str, Any]:
    """Create or update a game. Result is derived from the scores."""
    game = Game(
        id=req.id,
        season_id=req.season_id,
        home_team_name=req.home_team_name,
        visiting_team_name=req.visiting_team_name,
        game_date=req.game_date,
        location=req.location,
        home_score=req.home_score,
        visiting_score=req.visiting_score,
    )
    with db_conn() as conn:
        try:
            saved = _engine(conn).save_game(game)
        except FixtureError as e:
            _raise_http(e)
        return saved.to_dict()


@app.get("/games")
def find_games(
    home_team: str = Query(..., min_length=1),
    visiting_team: str = Query(..., min_length=1),
) -> dict[str, Any]:
    with db_conn() as conn:
        games = _engine(conn).find_games(home_team, visiting_team)
        return {"games": [g.to_dict() for g in games]}


@app.get("/seasons/{season_id}/games")
def list_season_games(season_id: str) -> dict[str, Any]:
    with db_conn() as conn:
        games = _engine(conn).find_games_by_season(season_id)
        return {"season_id": season_id, "games": [g.to_dict() for g in games]}


@app.post("/seasons/{season_id}/auto-generate")
def auto_generate(season_id: str) -> dict[str, Any]:
    """Fill the season up to its required game count with random fixtures."""
    with db_conn() as conn:
        try:
            games = _engine(conn).auto_generate(season_id)
        except FixtureError as e:
            _raise_http(e)
        return {"season_id": season_id, "generated": len(games), "games": [g.to_dict() for g in games]}


@app.delete("/games/{game_id}", status_code=204)
def remove_game(game_id: str) -> Response:
    """Delete a game. Unknown ids are ignored."""
    with db_conn() as conn:
        game = GameRepository(conn).get(game_id)
        _engine(conn).remove_game(game)
    return Response(status_code=204)


@app.get("/teams/{team_name}/records")
def team_records(team_name: str) -> dict[str, Any]:
    """Per-season win/loss and score totals for a team."""
    with db_conn() as conn:
        try:
            records = _engine(conn).team_records(team_name)
        except FixtureError as e:
            _raise_http(e)
        return {"team_name": team_name, "records": [r.to_dict() for r in records]}
