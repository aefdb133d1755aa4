"""
Elective dataset.

The dataset is a static JSON array baked at build time (see etl/pipeline.py)
with one flat object per elective:

    {"code": "CSE4051", "name": "...", "type": "PE I", "department": "CSE",
     "lowestCGPA": 8.12, "highestCGPA": 9.64, "students": 62}

It is loaded once at startup into a tuple of frozen Elective records and is
never mutated afterwards.

Public API:
    CourseType                 closed set of course categories
    Elective                   immutable record
    load_dataset(path)       → tuple[Elective, ...]
"""

import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

CGPA_MIN = 0.0
CGPA_MAX = 10.0

FIELDS = ("code", "name", "type", "department", "lowestCGPA", "highestCGPA", "students")


class DatasetError(ValueError):
    """A record in the dataset file cannot be turned into an Elective."""


class CourseType(str, Enum):
    OE    = "OE"
    PE_I  = "PE I"
    PE_II = "PE II"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    CourseType.OE:    "Open Elective",
    CourseType.PE_I:  "Program Elective I",
    CourseType.PE_II: "Program Elective II",
}


@dataclass(frozen=True)
class Elective:
    code: str
    name: str
    type: CourseType
    department: str
    lowest_cgpa: float
    highest_cgpa: float
    students: int

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "Elective":
        """Build an Elective from its flat JSON form; raises DatasetError."""
        missing = [f for f in FIELDS if f not in record]
        if missing:
            raise DatasetError(f"missing field(s): {', '.join(missing)}")

        try:
            course_type = CourseType(record["type"])
        except ValueError:
            raise DatasetError(f"unknown course type {record['type']!r}") from None

        try:
            lowest  = float(record["lowestCGPA"])
            highest = float(record["highestCGPA"])
            students = int(record["students"])
        except (TypeError, ValueError) as exc:
            raise DatasetError(f"bad numeric field: {exc}") from None

        if students < 0:
            raise DatasetError(f"negative student count {students}")

        return cls(
            code=str(record["code"]),
            name=str(record["name"]),
            type=course_type,
            department=str(record["department"]),
            lowest_cgpa=lowest,
            highest_cgpa=highest,
            students=students,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "code":        self.code,
            "name":        self.name,
            "type":        self.type.value,
            "department":  self.department,
            "lowestCGPA":  self.lowest_cgpa,
            "highestCGPA": self.highest_cgpa,
            "students":    self.students,
        }

    def quality_issues(self) -> list[str]:
        """Data-quality problems that do not prevent the record from loading."""
        issues = []
        for name, value in (("lowestCGPA", self.lowest_cgpa), ("highestCGPA", self.highest_cgpa)):
            if math.isnan(value) or not CGPA_MIN <= value <= CGPA_MAX:
                issues.append(f"{name}={value} outside [{CGPA_MIN:g}, {CGPA_MAX:g}]")
        if self.lowest_cgpa > self.highest_cgpa:
            issues.append(f"lowestCGPA {self.lowest_cgpa} > highestCGPA {self.highest_cgpa}")
        return issues


def parse_records(records: list[dict[str, Any]]) -> tuple[Elective, ...]:
    """
    Convert raw JSON records into Electives.

    Structural problems raise DatasetError with the record index. Inconsistent
    CGPA bounds are logged and the record is kept unchanged.
    """
    electives = []
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise DatasetError(f"record {i}: expected an object, got {type(record).__name__}")
        try:
            elective = Elective.from_dict(record)
        except DatasetError as exc:
            raise DatasetError(f"record {i}: {exc}") from None

        for issue in elective.quality_issues():
            log.warning("record %d (%s, %s): %s", i, elective.code, elective.type.value, issue)
        electives.append(elective)
    return tuple(electives)


def load_dataset(path: Path) -> tuple[Elective, ...]:
    if not path.exists():
        raise FileNotFoundError(
            f"{path.name} not found at {path}. Run the ETL pipeline first: python -m etl.pipeline RAW.csv"
        )
    records = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(records, list):
        raise DatasetError(f"{path.name}: expected a JSON array of electives")

    electives = parse_records(records)
    log.info("Loaded %d electives from %s", len(electives), path.name)
    return electives
