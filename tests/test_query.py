import math

import pytest

from electives.dataset import CourseType, Elective
from electives.query import (
    ALL,
    ElectiveQuery,
    SortKey,
    SortOrder,
    filter_electives,
    get_departments,
    get_difficulty_level,
    get_stats,
)


def _elective(code, type_, dept, low, high, students, name=None):
    return Elective(
        code=code,
        name=name or f"Course {code}",
        type=CourseType(type_),
        department=dept,
        lowest_cgpa=low,
        highest_cgpa=high,
        students=students,
    )


@pytest.fixture
def two_electives():
    """The two-record dataset used as the worked example."""
    return (
        _elective("A", "OE", "CSE", 7.0, 9.0, 30),
        _elective("B", "PE I", "ECE", 8.5, 9.5, 10),
    )


@pytest.fixture
def sample_electives():
    """A mixed dataset with ties on cutoff and students."""
    return (
        _elective("CSE4051", "PE I",  "CSE", 9.12, 9.88, 60, "Deep Learning"),
        _elective("CSE4052", "PE I",  "CSE", 8.47, 9.11, 58, "cloud Computing"),
        _elective("ECE4051", "PE I",  "ECE", 8.47, 9.54, 45, "VLSI Design"),
        _elective("ECE4061", "PE II", "ECE", 7.75, 9.31, 45, "Embedded Systems"),
        _elective("HUM4301", "OE",    "HUM", 7.45, 9.20, 70, "Economics and Public Policy"),
        _elective("CSE4301", "OE",    "CSE", 9.02, 9.91, 70, "Introduction to Machine Learning"),
        _elective("MAT4301", "OE",    "MATH", 5.82, 8.75, 60, "Operations Research"),
        # Same code as above but offered as a program elective
        _elective("MAT4301", "PE II", "MATH", 6.10, 8.20, 20, "Operations Research"),
    )


class TestFilterElectives:
    """Test type, department and text filters."""

    def test_worked_example_sorted_by_cutoff(self, two_electives):
        """Test that all/all/'' sorted by ascending cutoff yields A then B."""
        results = filter_electives(two_electives, "all", "all", "", "cutoff", "asc")
        assert [e.code for e in results] == ["A", "B"]

    def test_search_by_department(self, two_electives):
        """Test that searching 'ECE' returns only record B."""
        results = filter_electives(two_electives, ALL, ALL, "ECE")
        assert [e.code for e in results] == ["B"]

    def test_type_filter_accepts_enum_and_string(self, sample_electives):
        """Test that the type filter works with CourseType and its string value."""
        by_enum = filter_electives(sample_electives, CourseType.OE)
        by_str = filter_electives(sample_electives, "OE")
        assert by_enum == by_str
        assert len(by_enum) == 3
        assert all(e.type is CourseType.OE for e in by_enum)

    def test_department_filter(self, sample_electives):
        """Test exact department match."""
        results = filter_electives(sample_electives, department="ECE")
        assert {e.code for e in results} == {"ECE4051", "ECE4061"}

    def test_unknown_department_is_empty_not_error(self, sample_electives):
        """Test that a department with no records gives an empty list."""
        assert filter_electives(sample_electives, department="NOPE") == []

    def test_filters_combine_with_and(self, sample_electives):
        """Test that type, department and search must all hold."""
        results = filter_electives(sample_electives, "PE I", "CSE", "cloud")
        assert [e.code for e in results] == ["CSE4052"]

    def test_search_is_case_insensitive(self, sample_electives):
        """Test that search ignores case on name, code and department."""
        assert [e.code for e in filter_electives(sample_electives, search="DEEP")] == ["CSE4051"]
        assert [e.code for e in filter_electives(sample_electives, search="hum4301")] == ["HUM4301"]
        assert {e.department for e in filter_electives(sample_electives, search="math")} == {"MATH"}

    def test_blank_search_matches_everything(self, sample_electives):
        """Test that empty and whitespace-only searches are ignored."""
        assert len(filter_electives(sample_electives, search="")) == len(sample_electives)
        assert len(filter_electives(sample_electives, search="   ")) == len(sample_electives)

    def test_no_match_returns_empty(self, sample_electives):
        """Test that an unmatched search gives an empty list."""
        assert filter_electives(sample_electives, search="quantum basket weaving") == []

    def test_results_are_subset_with_predicates(self, sample_electives):
        """Test that every result is a dataset record satisfying the filters."""
        for course_type in [ALL, *CourseType]:
            for dept in [ALL, *get_departments(sample_electives)]:
                for search in ("", "e", "45"):
                    results = filter_electives(sample_electives, course_type, dept, search)
                    for e in results:
                        assert e in sample_electives
                        assert course_type == ALL or e.type == course_type
                        assert dept == ALL or e.department == dept
                        assert search in f"{e.name} {e.code} {e.department}".lower()

    def test_dataset_not_mutated(self, sample_electives):
        """Test that the input sequence is left untouched."""
        data = list(sample_electives)
        before = list(data)
        results = filter_electives(data, sort_by="students", order="desc")
        assert data == before
        assert results is not data

    def test_empty_dataset(self):
        """Test that an empty dataset yields an empty list."""
        assert filter_electives(()) == []

    def test_unknown_sort_key_raises(self, sample_electives):
        """Test that an unknown sort key is rejected."""
        with pytest.raises(ValueError):
            filter_electives(sample_electives, sort_by="popularity")


class TestSorting:
    """Test sort keys, direction and stability."""

    def test_sort_by_cutoff_ascending(self, sample_electives):
        """Test numeric ascending order on lowest CGPA."""
        results = filter_electives(sample_electives, sort_by=SortKey.CUTOFF)
        cutoffs = [e.lowest_cgpa for e in results]
        assert cutoffs == sorted(cutoffs)

    def test_sort_by_students_descending(self, sample_electives):
        """Test numeric descending order on students."""
        results = filter_electives(sample_electives, sort_by="students", order="desc")
        counts = [e.students for e in results]
        assert counts == sorted(counts, reverse=True)

    def test_sort_by_name_case_insensitive(self, sample_electives):
        """Test that lowercase names sort among uppercase ones."""
        results = filter_electives(sample_electives, sort_by="name")
        names = [e.name for e in results]
        assert names == sorted(names, key=str.lower)
        assert names.index("cloud Computing") < names.index("Deep Learning")

    def test_ties_keep_dataset_order_ascending(self, sample_electives):
        """Test that equal cutoffs keep their original relative order."""
        results = filter_electives(sample_electives, sort_by="cutoff", order="asc")
        tied = [e.code for e in results if e.lowest_cgpa == 8.47]
        assert tied == ["CSE4052", "ECE4051"]

    def test_ties_keep_dataset_order_descending(self, sample_electives):
        """Test that reversing the direction does not reorder ties."""
        results = filter_electives(sample_electives, sort_by="students", order="desc")
        tied_70 = [e.code for e in results if e.students == 70]
        tied_45 = [e.code for e in results if e.students == 45]
        assert tied_70 == ["HUM4301", "CSE4301"]
        assert tied_45 == ["ECE4051", "ECE4061"]

    def test_direction_reverses_distinct_keys(self, sample_electives):
        """Test that records with distinct keys swap order when direction flips."""
        asc = filter_electives(sample_electives, sort_by="cutoff", order=SortOrder.ASC)
        desc = filter_electives(sample_electives, sort_by="cutoff", order=SortOrder.DESC)
        for a in asc:
            for b in asc:
                if a.lowest_cgpa < b.lowest_cgpa:
                    assert asc.index(a) < asc.index(b)
                    assert desc.index(a) > desc.index(b)

    def test_repeatable(self, sample_electives):
        """Test that identical arguments yield identical ordering."""
        first = filter_electives(sample_electives, sort_by="students")
        second = filter_electives(sample_electives, sort_by="students")
        assert first == second

    def test_default_is_cutoff_ascending(self, two_electives):
        """Test the default sort matches the dashboard's initial state."""
        assert filter_electives(two_electives) == filter_electives(
            two_electives, sort_by="cutoff", order="asc"
        )


class TestElectiveQuery:
    """Test the immutable query value used by the dashboard."""

    def test_apply_matches_filter_electives(self, sample_electives):
        """Test that apply() forwards every selection."""
        query = ElectiveQuery("OE", ALL, "e", SortKey.STUDENTS, SortOrder.DESC)
        assert query.apply(sample_electives) == filter_electives(
            sample_electives, "OE", ALL, "e", "students", "desc"
        )

    def test_toggle_same_key_flips_order(self):
        """Test that toggling the active key flips the direction."""
        query = ElectiveQuery(sort_by=SortKey.CUTOFF, order=SortOrder.ASC)
        toggled = query.toggle_sort("cutoff")
        assert toggled.sort_by == SortKey.CUTOFF
        assert toggled.order == SortOrder.DESC
        assert toggled.toggle_sort(SortKey.CUTOFF).order == SortOrder.ASC

    def test_toggle_new_key_starts_ascending(self):
        """Test that switching keys resets to ascending."""
        query = ElectiveQuery(sort_by=SortKey.CUTOFF, order=SortOrder.DESC)
        toggled = query.toggle_sort(SortKey.NAME)
        assert toggled.sort_by == SortKey.NAME
        assert toggled.order == SortOrder.ASC

    def test_toggle_returns_new_value(self):
        """Test that the original query is unchanged."""
        query = ElectiveQuery()
        query.toggle_sort(SortKey.NAME)
        assert query == ElectiveQuery()

    def test_is_filtered_and_cleared(self):
        """Test the clear-filters round trip keeps the sort."""
        assert not ElectiveQuery().is_filtered
        assert not ElectiveQuery(search="  ").is_filtered
        query = ElectiveQuery("PE II", "CSE", "ml", SortKey.NAME, SortOrder.DESC)
        assert query.is_filtered
        cleared = query.cleared()
        assert not cleared.is_filtered
        assert (cleared.sort_by, cleared.order) == (SortKey.NAME, SortOrder.DESC)


class TestDepartments:
    """Test distinct department listing."""

    def test_distinct_and_sorted(self, sample_electives):
        """Test that departments are deduplicated and alphabetical."""
        assert get_departments(sample_electives) == ["CSE", "ECE", "HUM", "MATH"]

    def test_empty(self):
        """Test that an empty dataset has no departments."""
        assert get_departments(()) == []


class TestStats:
    """Test aggregate statistics over the full dataset."""

    def test_worked_example(self, two_electives):
        """Test stats for the two-record example."""
        stats = get_stats(two_electives)
        assert stats.total_electives == 2
        assert (stats.oe_count, stats.pe1_count, stats.pe2_count) == (1, 1, 0)
        assert stats.departments == 2
        assert stats.lowest_cutoff == 7.0
        assert stats.highest_cutoff == 8.5

    def test_highest_cutoff_uses_lowest_cgpa(self, two_electives):
        """Test that highest cutoff is max of lowest CGPA, not of highest CGPA."""
        stats = get_stats(two_electives)
        assert stats.highest_cutoff == max(e.lowest_cgpa for e in two_electives)
        assert stats.highest_cutoff != max(e.highest_cgpa for e in two_electives)

    def test_type_counts_sum_to_total(self, sample_electives):
        """Test that per-type counts add up to the total."""
        stats = get_stats(sample_electives)
        assert stats.oe_count + stats.pe1_count + stats.pe2_count == stats.total_electives
        assert stats.total_electives == len(sample_electives)
        assert stats.departments == len(get_departments(sample_electives))

    def test_empty_dataset_falls_back_to_zero(self):
        """Test that an empty dataset reports zero counts and 0.0 cutoffs."""
        stats = get_stats(())
        assert stats.total_electives == 0
        assert stats.departments == 0
        assert stats.lowest_cutoff == 0.0
        assert stats.highest_cutoff == 0.0

    def test_to_dict_field_names(self, two_electives):
        """Test the camelCase JSON form."""
        assert get_stats(two_electives).to_dict() == {
            "totalElectives": 2,
            "oeCount": 1,
            "pe1Count": 1,
            "pe2Count": 0,
            "departments": 2,
            "lowestCutoff": 7.0,
            "highestCutoff": 8.5,
        }


class TestDifficulty:
    """Test the cutoff difficulty bands."""

    @pytest.mark.parametrize("cgpa, level", [
        (10.0, "Very High"),
        (9.0, "Very High"),
        (8.99, "High"),
        (8.0, "High"),
        (7.99, "Moderate"),
        (7.0, "Moderate"),
        (6.99, "Low"),
        (0.0, "Low"),
    ])
    def test_bands_and_boundaries(self, cgpa, level):
        """Test that each threshold value belongs to the upper band."""
        assert get_difficulty_level(cgpa).level == level

    def test_tiers_increase_with_cgpa(self):
        """Test that tiers are ordered from easiest to hardest."""
        tiers = [get_difficulty_level(c).tier for c in (5.0, 7.5, 8.5, 9.5)]
        assert tiers == [1, 2, 3, 4]

    def test_total_over_odd_values(self):
        """Test that out-of-range and NaN inputs still classify."""
        assert get_difficulty_level(-1.0).level == "Low"
        assert get_difficulty_level(11.0).level == "Very High"
        assert get_difficulty_level(math.nan).level == "Low"
