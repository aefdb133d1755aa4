"""
Query engine over the elective dataset.

Everything here is a pure function of the dataset and its arguments; the
dataset is never reordered or filtered in place. Each call is a linear scan
(plus one sort), cheap enough to rerun on every keystroke.

Public API:
    filter_electives(electives, course_type, department, search, sort_by, order) → list[Elective]
    ElectiveQuery(...).apply(electives)                                          → list[Elective]
    get_departments(electives)                                                   → list[str]
    get_stats(electives)                                                         → Stats
    get_difficulty_level(cgpa)                                                   → Difficulty
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Iterable, Sequence

from electives.dataset import CourseType, Elective

# Sentinel that disables the type or department filter.
ALL = "all"


class SortKey(str, Enum):
    NAME     = "name"
    CUTOFF   = "cutoff"
    STUDENTS = "students"


class SortOrder(str, Enum):
    ASC  = "asc"
    DESC = "desc"

    def flipped(self) -> "SortOrder":
        return SortOrder.DESC if self is SortOrder.ASC else SortOrder.ASC


_SORT_KEYS: dict[SortKey, Callable[[Elective], Any]] = {
    SortKey.NAME:     lambda e: e.name.lower(),
    SortKey.CUTOFF:   lambda e: e.lowest_cgpa,
    SortKey.STUDENTS: lambda e: e.students,
}


def _matches_search(elective: Elective, needle: str) -> bool:
    return any(
        needle in field.lower()
        for field in (elective.name, elective.code, elective.department)
    )


def filter_electives(
    electives: Sequence[Elective],
    course_type: CourseType | str = ALL,
    department: str = ALL,
    search: str = "",
    sort_by: SortKey | str = SortKey.CUTOFF,
    order: SortOrder | str = SortOrder.ASC,
) -> list[Elective]:
    """
    Filter then sort the dataset.

    Args:
        electives:   the full dataset
        course_type: exact course type, or "all"
        department:  exact department, or "all"
        search:      case-insensitive substring of name, code or department;
                     blank matches everything
        sort_by:     "name" (case-insensitive), "cutoff" (lowest CGPA) or "students"
        order:       "asc" or "desc"

    Returns:
        a new list. Ties keep their dataset order in both directions because
        sorted() is stable, including with reverse=True.
    """
    key   = _SORT_KEYS[SortKey(sort_by)]
    order = SortOrder(order)
    if course_type != ALL:
        course_type = CourseType(course_type)
    needle = search.strip().lower()

    matched = [
        e for e in electives
        if (course_type == ALL or e.type == course_type)
        and (department == ALL or e.department == department)
        and (not needle or _matches_search(e, needle))
    ]
    return sorted(matched, key=key, reverse=order is SortOrder.DESC)


@dataclass(frozen=True)
class ElectiveQuery:
    """The dashboard's filter and sort selections as one immutable value."""

    course_type: CourseType | str = ALL
    department: str = ALL
    search: str = ""
    sort_by: SortKey = SortKey.CUTOFF
    order: SortOrder = SortOrder.ASC

    @property
    def is_filtered(self) -> bool:
        return bool(self.search.strip()) or self.course_type != ALL or self.department != ALL

    def apply(self, electives: Sequence[Elective]) -> list[Elective]:
        return filter_electives(
            electives, self.course_type, self.department, self.search, self.sort_by, self.order
        )

    def toggle_sort(self, sort_by: SortKey | str) -> "ElectiveQuery":
        """Same key flips the direction; a different key starts ascending."""
        sort_by = SortKey(sort_by)
        if sort_by == self.sort_by:
            return replace(self, order=SortOrder(self.order).flipped())
        return replace(self, sort_by=sort_by, order=SortOrder.ASC)

    def cleared(self) -> "ElectiveQuery":
        """Drop search, type and department filters; keep the sort."""
        return replace(self, course_type=ALL, department=ALL, search="")


def get_departments(electives: Iterable[Elective]) -> list[str]:
    """Distinct departments, alphabetical."""
    return sorted({e.department for e in electives})


@dataclass(frozen=True)
class Stats:
    total_electives: int
    oe_count: int
    pe1_count: int
    pe2_count: int
    departments: int
    lowest_cutoff: float
    highest_cutoff: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalElectives": self.total_electives,
            "oeCount":        self.oe_count,
            "pe1Count":       self.pe1_count,
            "pe2Count":       self.pe2_count,
            "departments":    self.departments,
            "lowestCutoff":   self.lowest_cutoff,
            "highestCutoff":  self.highest_cutoff,
        }


def get_stats(electives: Sequence[Elective]) -> Stats:
    """
    Summary over the whole dataset, never a filtered view.

    highest_cutoff is the maximum *lowest* CGPA, i.e. the most competitive
    entry cutoff, not the maximum of highest_cgpa. An empty dataset reports
    0.0 for both cutoffs.
    """
    counts = {t: 0 for t in CourseType}
    for e in electives:
        counts[e.type] += 1

    cutoffs = [e.lowest_cgpa for e in electives]
    return Stats(
        total_electives=len(electives),
        oe_count=counts[CourseType.OE],
        pe1_count=counts[CourseType.PE_I],
        pe2_count=counts[CourseType.PE_II],
        departments=len(get_departments(electives)),
        lowest_cutoff=min(cutoffs, default=0.0),
        highest_cutoff=max(cutoffs, default=0.0),
    )


@dataclass(frozen=True)
class Difficulty:
    level: str
    tier: int    # 1 (easiest) … 4 (most competitive)
    color: str


# (lower bound inclusive, difficulty), highest band first
DIFFICULTY_BANDS: tuple[tuple[float, Difficulty], ...] = (
    (9.0, Difficulty("Very High", 4, "red")),
    (8.0, Difficulty("High",      3, "orange")),
    (7.0, Difficulty("Moderate",  2, "yellow")),
)
LOWEST_DIFFICULTY = Difficulty("Low", 1, "emerald")


def get_difficulty_level(cgpa: float) -> Difficulty:
    """Allocation difficulty for a cutoff; a threshold value belongs to the upper band."""
    for threshold, difficulty in DIFFICULTY_BANDS:
        if cgpa >= threshold:
            return difficulty
    return LOWEST_DIFFICULTY
