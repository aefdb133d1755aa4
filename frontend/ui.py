"""
Streamlit dashboard for Elective Cutoff Analysis.

Runs the query engine in-process against data/electives.json: stats cards,
search box, type / department filters, sort toggles, one card per elective,
and the FAQ.

    streamlit run frontend/ui.py
"""

import logging
import sys
from pathlib import Path

import streamlit as st

# Ensure project root is on sys.path when launched with `streamlit run`
sys.path.insert(0, str(Path(__file__).parent.parent))

from electives.config import DATA_FILE
from electives.dataset import CourseType, Elective, load_dataset
from electives.faq import FAQS
from electives.query import (
    ALL,
    ElectiveQuery,
    SortKey,
    SortOrder,
    get_departments,
    get_difficulty_level,
    get_stats,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s  %(message)s")

st.set_page_config(page_title="Elective Cutoff Analysis", layout="wide")

SORT_LABELS = {SortKey.CUTOFF: "Cutoff", SortKey.STUDENTS: "Students", SortKey.NAME: "Name"}
TYPE_LABELS = {ALL: "All Types", **{t.value: t.label for t in CourseType}}
# Streamlit markdown palette per difficulty tier
TIER_COLORS = {1: "green", 2: "blue", 3: "orange", 4: "red"}


@st.cache_resource
def _load_dataset() -> tuple[Elective, ...]:
    return load_dataset(DATA_FILE)


def _query() -> ElectiveQuery:
    if "query" not in st.session_state:
        st.session_state.query = ElectiveQuery()
    return st.session_state.query


def _set_query(query: ElectiveQuery) -> None:
    st.session_state.query = query


def _render_card(elective: Elective) -> None:
    difficulty = get_difficulty_level(elective.lowest_cgpa)
    with st.container(border=True):
        st.caption(f"{elective.type.value} · {elective.code}")
        st.markdown(f"**{elective.name}**")
        st.caption(f"Department: {elective.department}")

        c1, c2, c3 = st.columns(3)
        c1.metric("Min CGPA", f"{elective.lowest_cgpa:.2f}")
        c2.metric("Max CGPA", f"{elective.highest_cgpa:.2f}")
        c3.metric("Students", elective.students)

        st.markdown(f"Difficulty: :{TIER_COLORS[difficulty.tier]}[**{difficulty.level}**]")
        # CGPA range bar over the 0-10 scale
        left  = max(0.0, min(elective.lowest_cgpa, 10.0)) * 10
        width = max(0.0, elective.highest_cgpa - elective.lowest_cgpa) * 10
        st.markdown(
            f"<div style='height:8px;background:#262626;border-radius:4px'>"
            f"<div style='margin-left:{left:.1f}%;width:{width:.1f}%;height:8px;"
            f"border-radius:4px;background:linear-gradient(90deg,#10b981,#eab308,#ef4444)'>"
            f"</div></div>",
            unsafe_allow_html=True,
        )


dataset = _load_dataset()
stats = get_stats(dataset)
departments = get_departments(dataset)

st.title("Elective Cutoff Analysis")
st.markdown(
    "Explore CGPA cutoffs for Open Electives (OE) and Program Electives (PE I & PE II) "
    "to make informed course selection decisions."
)

# Stats over the whole dataset, independent of the filters below
s1, s2, s3, s4 = st.columns(4)
s1.metric("Total Electives", stats.total_electives,
          help=f"{stats.oe_count} OE • {stats.pe1_count} PE I • {stats.pe2_count} PE II")
s2.metric("Departments", stats.departments, help="Offering electives")
s3.metric("Lowest Cutoff", f"{stats.lowest_cutoff:.2f}", help="Easiest to get")
s4.metric("Highest Cutoff", f"{stats.highest_cutoff:.2f}", help="Most competitive")

# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

query = _query()

f1, f2, f3 = st.columns([3, 1, 1])
search = f1.text_input(
    "Search", value=query.search,
    placeholder="Search electives by name, code, or department...",
)
type_options = list(TYPE_LABELS)
course_type = f2.selectbox(
    "Type", type_options,
    index=type_options.index(query.course_type),
    format_func=TYPE_LABELS.get,
)
dept_options = [ALL] + departments
department = f3.selectbox(
    "Department", dept_options,
    index=dept_options.index(query.department) if query.department in dept_options else 0,
    format_func=lambda d: "All Depts" if d == ALL else d,
)

query = ElectiveQuery(course_type, department, search, query.sort_by, query.order)
_set_query(query)

sort_cols = st.columns(len(SORT_LABELS))
for col, (key, label) in zip(sort_cols, SORT_LABELS.items()):
    arrow = ""
    if key == query.sort_by:
        arrow = " ▲" if query.order == SortOrder.ASC else " ▼"
    if col.button(label + arrow, key=f"sort-{key.value}", use_container_width=True):
        _set_query(query.toggle_sort(key))
        st.rerun()

# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

results = query.apply(dataset)

h1, h2 = st.columns([4, 1])
h1.subheader(f"{len(results)} Elective{'' if len(results) == 1 else 's'} Found")
if query.is_filtered and h2.button("Clear Filters"):
    _set_query(query.cleared())
    st.rerun()

if results:
    grid = st.columns(3)
    for i, elective in enumerate(results):
        with grid[i % 3]:
            _render_card(elective)
else:
    st.info("No electives found. Try adjusting your search or filters.")

st.divider()
st.caption("Data based on actual student allocations. Cutoffs may vary each semester.")
st.caption("Use this as a reference, not a guarantee.")

# ---------------------------------------------------------------------------
# FAQ
# ---------------------------------------------------------------------------

st.subheader("FAQ")
for entry in FAQS:
    with st.expander(entry["question"]):
        st.write(entry["answer"])
