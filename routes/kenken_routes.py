"""
KenKen routes: generate, solve and validate n x n cage puzzles.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import List, Optional
import datetime
import uuid

from puzzle_engine.cages import Cage, Operator, evaluate_cage
from puzzle_engine.grid import InvalidInputError, SearchLimitExceeded
from puzzle_engine.kenken import generate_kenken, solve_kenken, validate_kenken
from puzzle_engine.random_source import RandomSource
from routes.dependencies import bad_request, get_max_nodes, get_rng, search_aborted, solve_response
import puzzle_engine.config as config

router = APIRouter(prefix="/kenken", tags=["kenken"])


class CageModel(BaseModel):
    id: int
    cells: List[int]
    operator: Operator
    target: int
    anchor: Optional[int] = None  # derived, accepted for round-tripping


class SolveRequest(BaseModel):
    size: int
    cages: List[CageModel]


class ValidateRequest(BaseModel):
    size: int
    grid: List[int]
    cages: List[CageModel]
    solution: Optional[List[int]] = None


class EvaluateRequest(BaseModel):
    cage: CageModel
    values: List[int]
    complete: bool


def _to_cages(models: List[CageModel]) -> List[Cage]:
    return [Cage.from_dict(m.model_dump()) for m in models]


def _check_max_size(size: int):
    if size > config.KENKEN_MAX_SIZE:
        raise bad_request(InvalidInputError(
            f"size {size} exceeds the maximum of {config.KENKEN_MAX_SIZE}"
        ))


@router.get("/generate")
def generate(size: int = 4, rng: RandomSource = Depends(get_rng)):
    """New cage layout and its solution. Uniqueness is not guaranteed."""
    _check_max_size(size)
    try:
        result = generate_kenken(size, rng)
    except InvalidInputError as e:
        raise bad_request(e)
    data = result.to_dict()
    data["id"] = str(uuid.uuid4())
    data["timestamp"] = datetime.datetime.now().isoformat()
    return data


@router.post("/solve")
def solve(request: SolveRequest, max_nodes: Optional[int] = Depends(get_max_nodes)):
    _check_max_size(request.size)
    try:
        solution = solve_kenken(request.size, _to_cages(request.cages), max_nodes=max_nodes)
    except InvalidInputError as e:
        raise bad_request(e)
    except SearchLimitExceeded as e:
        raise search_aborted(e)
    return solve_response(solution)


@router.post("/validate")
def validate(request: ValidateRequest):
    _check_max_size(request.size)
    try:
        report = validate_kenken(request.size, request.grid, _to_cages(request.cages), request.solution)
    except InvalidInputError as e:
        raise bad_request(e)
    return report.to_dict()


@router.post("/evaluate")
def evaluate(request: EvaluateRequest):
    """Live check of one cage against the values entered so far."""
    cage = Cage.from_dict(request.cage.model_dump())
    return {"valid": evaluate_cage(cage, request.values, request.complete)}
