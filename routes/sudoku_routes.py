"""
Sudoku routes: generate, solve and validate 9x9 grids.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import List, Optional
import datetime
import uuid

from puzzle_engine.grid import InvalidInputError, SearchLimitExceeded
from puzzle_engine.random_source import RandomSource
from puzzle_engine.sudoku import DEFAULT_DIFFICULTY, generate_sudoku, solve_sudoku, validate_sudoku
from routes.dependencies import bad_request, get_max_nodes, get_rng, search_aborted, solve_response

router = APIRouter(prefix="/sudoku", tags=["sudoku"])


class SolveRequest(BaseModel):
    grid: Optional[List[int]] = None


class ValidateRequest(BaseModel):
    grid: List[int]
    solution: Optional[List[int]] = None


@router.get("/generate")
def generate(difficulty: str = DEFAULT_DIFFICULTY, rng: RandomSource = Depends(get_rng)):
    """New puzzle plus the solution it was carved from. Uniqueness is not guaranteed."""
    result = generate_sudoku(difficulty, rng)
    data = result.to_dict()
    data["id"] = str(uuid.uuid4())
    data["timestamp"] = datetime.datetime.now().isoformat()
    return data


@router.post("/solve")
def solve(request: SolveRequest, max_nodes: Optional[int] = Depends(get_max_nodes)):
    try:
        solution = solve_sudoku(request.grid, max_nodes=max_nodes)
    except InvalidInputError as e:
        raise bad_request(e)
    except SearchLimitExceeded as e:
        raise search_aborted(e)
    return solve_response(solution)


@router.post("/validate")
def validate(request: ValidateRequest):
    try:
        report = validate_sudoku(request.grid, request.solution)
    except InvalidInputError as e:
        raise bad_request(e)
    return report.to_dict()
