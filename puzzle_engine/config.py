"""
Configuration settings for the Puzzle Engine.
Reads application settings from the environment (and a .env file).
"""

import os
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


# Application settings
APP_HOST = os.getenv("APP_HOST", "127.0.0.1")
APP_PORT = int(os.getenv("APP_PORT", "8008"))

# Logging
LOG_FILE = os.getenv("LOG_FILE", "puzzle_engine.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Fixed seed for reproducible generation (unset = fresh randomness per request)
PUZZLE_SEED: Optional[int] = _optional_int("PUZZLE_SEED")

# Node budget for solves requested over HTTP (unset = unlimited)
SOLVER_MAX_NODES: Optional[int] = _optional_int("SOLVER_MAX_NODES")

# Largest KenKen accepted by the HTTP API and the CLI
KENKEN_MAX_SIZE = int(os.getenv("KENKEN_MAX_SIZE", "9"))

CORS_ORIGINS: List[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


def is_seeded() -> bool:
    """Check if generation runs with a fixed seed."""
    return PUZZLE_SEED is not None


def is_solver_bounded() -> bool:
    """Check if HTTP solves run with a node budget."""
    return SOLVER_MAX_NODES is not None
