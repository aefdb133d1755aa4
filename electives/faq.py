"""Static FAQ copy shown under the dashboard and served at GET /faq."""

FAQS: list[dict[str, str]] = [
    {
        "id": "difficulty",
        "question": "What does 'Allocation Difficulty' mean?",
        "answer": (
            "The allocation difficulty rating indicates how competitive it is to get "
            "allocated into a subject based on historical allocation data. It reflects the "
            "allocation process itself, not the academic difficulty of the subject material. "
            "A higher allocation difficulty means fewer students typically get into the course "
            "relative to demand."
        ),
    },
    {
        "id": "allocation",
        "question": "How does the allocation process work?",
        "answer": (
            "Students submit their subject preferences in a ranked order. Preferences are "
            "allocated by 4th semester CGPA, and class capacity caps how many students each "
            "class can take. Students are allocated starting from their highest-ranked "
            "preference, with higher CGPA students getting priority. If a student's top "
            "preference is full, they move on to their second preference, and so on."
        ),
    },
    {
        "id": "cutoff",
        "question": "What is the cutoff of an elective?",
        "answer": (
            "The cutoff is the lowest CGPA among the students who were allocated the elective. "
            "The dashboard's 'Highest Cutoff' is the largest of these cutoffs, i.e. the most "
            "competitive elective to get into. Cutoffs may vary each semester, so use them as "
            "a reference, not a guarantee."
        ),
    },
]
