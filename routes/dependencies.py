"""
Shared FastAPI dependencies for the puzzle routes.
"""

import logging
from typing import Optional

from fastapi import HTTPException, status

from puzzle_engine.random_source import RandomSource
import puzzle_engine.config as config

logger = logging.getLogger("puzzle_routes")


def get_rng() -> RandomSource:
    """Random source for one request; seeded when PUZZLE_SEED is set."""
    return RandomSource(config.PUZZLE_SEED)


def get_max_nodes() -> Optional[int]:
    return config.SOLVER_MAX_NODES


def bad_request(error: Exception) -> HTTPException:
    logger.info(f"Rejected request: {error}")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


def search_aborted(error: Exception) -> HTTPException:
    logger.warning(f"Solver gave up: {error}")
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(error))


def solve_response(solution):
    """Unsatisfiable is an ordinary answer, not an error."""
    if solution is None:
        return {"status": "unsatisfiable", "solution": None}
    return {"status": "solved", "solution": solution}
