"""
SQLite schema for scheduling entities.
Migration-friendly: each table created with IF NOT EXISTS.
Dates are stored as ISO strings (YYYY-MM-DD).
"""
from __future__ import annotations


def seasons_schema() -> str:
    """A league's season: date range and required number of games."""
    return """
    CREATE TABLE IF NOT EXISTS seasons (
        id TEXT PRIMARY KEY,
        league_name TEXT NOT NULL,
        start_date TEXT NOT NULL,
        end_date TEXT NOT NULL,
        games_num INTEGER NOT NULL,
        created_at TEXT NOT NULL
    );
    CREATE INDEX IF NOT EXISTS ix_seasons_league ON seasons(league_name);
    """


def teams_schema() -> str:
    """Team roster by league name. field = home ground."""
    return """
    CREATE TABLE IF NOT EXISTS teams (
        name TEXT PRIMARY KEY,
        league_name TEXT NOT NULL,
        field TEXT,
        created_at TEXT NOT NULL
    );
    CREATE INDEX IF NOT EXISTS ix_teams_league ON teams(league_name);
    """


def games_schema() -> str:
    """
    Fixtures. No unique index on (game_date, home_team_name, visiting_team_name):
    conflicts are detected by the fixture engine before writing.
    """
    return """
    CREATE TABLE IF NOT EXISTS games (
        id TEXT PRIMARY KEY,
        season_id TEXT NOT NULL,
        home_team_name TEXT NOT NULL,
        visiting_team_name TEXT NOT NULL,
        game_date TEXT NOT NULL,
        location TEXT,
        home_score REAL,
        visiting_score REAL,
        game_result TEXT,
        created_at TEXT NOT NULL,
        FOREIGN KEY (season_id) REFERENCES seasons(id)
    );
    CREATE INDEX IF NOT EXISTS ix_games_season ON games(season_id);
    CREATE INDEX IF NOT EXISTS ix_games_pair ON games(home_team_name, visiting_team_name);
    CREATE INDEX IF NOT EXISTS ix_games_date_pair ON games(game_date, home_team_name, visiting_team_name);
    """


def all_schema_sql() -> str:
    """Full schema for scheduling tables (order respects FKs)."""
    return (
        seasons_schema()
        + teams_schema()
        + games_schema()
    )
