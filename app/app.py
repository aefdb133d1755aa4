"""
FastAPI application: JSON view of the elective cutoff dataset.

Run as a script (builds nothing, just serves data/electives.json):
    python app/app.py

Or as a module:
    uvicorn app.app:app --reload

The dataset is loaded once at startup and kept on app.state; every endpoint
is a read-only query over it.

Endpoints:
    GET /electives?type=all&department=all&q=&sort=cutoff&order=asc
        returns: {"count": int, "electives": [...]}
    GET /departments   → {"departments": [...]}
    GET /stats         → {"totalElectives": ..., "highestCutoff": ...}
    GET /difficulty?cgpa=8.2 → {"level": ..., "tier": ..., "color": ...}
    GET /faq           → {"faqs": [...]}

Logs each query and wall-clock response time to stdout and logs/app.log
(rotating, 5 MB max, 3 backups).
"""

import logging
import logging.handlers
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from pydantic import BaseModel

# Ensure project root is on sys.path when running as a script (python app/app.py)
sys.path.insert(0, str(Path(__file__).parent.parent))

from electives.config import API_HOST, API_PORT, DATA_FILE, LOG_DIR
from electives.dataset import CourseType, Elective, load_dataset
from electives.faq import FAQS
from electives.query import (
    ALL,
    SortKey,
    SortOrder,
    filter_electives,
    get_departments,
    get_difficulty_level,
    get_stats,
)

LOG_FILE = LOG_DIR / "app.log"

def _setup_logging() -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    fmt = logging.Formatter("%(asctime)s  %(levelname)s  %(message)s")

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)

    # Rotate at 5 MB, keep 3 backups
    rotating = logging.handlers.RotatingFileHandler(
        LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    rotating.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(stream)
    root.addHandler(rotating)

_setup_logging()
log = logging.getLogger("api")


# ---------------------------------------------------------------------------
# App + lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("Loading elective dataset from %s…", DATA_FILE)
    app.state.dataset = load_dataset(DATA_FILE)
    log.info("  %d electives loaded.", len(app.state.dataset))

    yield  # server runs here


app = FastAPI(title="Elective Cutoff Analysis", lifespan=lifespan)


def get_dataset(request: Request) -> tuple[Elective, ...]:
    dataset = getattr(request.app.state, "dataset", None)
    if dataset is None:
        raise HTTPException(status_code=503, detail="Dataset not loaded.")
    return dataset


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class DifficultyResult(BaseModel):
    level: str
    tier: int
    color: str


class ElectiveResult(BaseModel):
    code: str
    name: str
    type: CourseType
    department: str
    lowestCGPA: float
    highestCGPA: float
    students: int
    difficulty: DifficultyResult


class ElectivesResponse(BaseModel):
    count: int
    electives: list[ElectiveResult]


class DepartmentsResponse(BaseModel):
    departments: list[str]


class StatsResponse(BaseModel):
    totalElectives: int
    oeCount: int
    pe1Count: int
    pe2Count: int
    departments: int
    lowestCutoff: float
    highestCutoff: float


class FaqEntry(BaseModel):
    id: str
    question: str
    answer: str


class FaqResponse(BaseModel):
    faqs: list[FaqEntry]


# "all" or one of the CourseType values; anything else is a 422
TYPE_PATTERN = "^(" + "|".join([ALL, *(t.value for t in CourseType)]) + ")$"


def _to_result(elective: Elective) -> ElectiveResult:
    difficulty = get_difficulty_level(elective.lowest_cgpa)
    return ElectiveResult(
        **elective.to_dict(),
        difficulty=DifficultyResult(
            level=difficulty.level, tier=difficulty.tier, color=difficulty.color
        ),
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/electives", response_model=ElectivesResponse)
def list_electives(
    type: str = Query(ALL, pattern=TYPE_PATTERN),
    department: str = Query(ALL),
    q: str = Query(""),
    sort: SortKey = Query(SortKey.CUTOFF),
    order: SortOrder = Query(SortOrder.ASC),
    dataset: tuple[Elective, ...] = Depends(get_dataset),
) -> ElectivesResponse:
    t0 = time.perf_counter()

    results = filter_electives(dataset, type, department, q, sort, order)

    elapsed = time.perf_counter() - t0
    log.info("type=%r  dept=%r  q=%r  sort=%s/%s  hits=%d  %.4fs",
             type, department, q, sort.value, order.value, len(results), elapsed)

    return ElectivesResponse(
        count=len(results),
        electives=[_to_result(e) for e in results],
    )


@app.get("/departments", response_model=DepartmentsResponse)
def list_departments(dataset: tuple[Elective, ...] = Depends(get_dataset)) -> DepartmentsResponse:
    return DepartmentsResponse(departments=get_departments(dataset))


@app.get("/stats", response_model=StatsResponse)
def read_stats(dataset: tuple[Elective, ...] = Depends(get_dataset)) -> StatsResponse:
    return StatsResponse(**get_stats(dataset).to_dict())


@app.get("/difficulty", response_model=DifficultyResult)
def read_difficulty(cgpa: float = Query(..., ge=0.0, le=10.0)) -> DifficultyResult:
    d = get_difficulty_level(cgpa)
    return DifficultyResult(level=d.level, tier=d.tier, color=d.color)


@app.get("/faq", response_model=FaqResponse)
def read_faq() -> FaqResponse:
    return FaqResponse(faqs=[FaqEntry(**entry) for entry in FAQS])


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    log.info("=== Elective Cutoff Analysis: serving on http://%s:%d ===", API_HOST, API_PORT)
    uvicorn.run(app, host=API_HOST, port=API_PORT, reload=False)
