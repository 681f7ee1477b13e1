"""Programme constants and grading policy.

Note: the point split is fixed by policy and is not configurable.
"""

MAX_WEEKS = 24
WORKING_DAYS_PER_WEEK = 6
MAX_EXPECTED_ATTENDANCE_DAYS = MAX_WEEKS * WORKING_DAYS_PER_WEEK  # 144

MAX_ATTENDANCE_SCORE = 10
MAX_WEEKLY_REPORTS_SCORE = 15
MAX_SUPERVISOR_APPROVAL_SCORE = 5
MAX_TOTAL_SCORE = 30

MIN_WEEK_SCORE = 0
MAX_WEEK_SCORE = 100

# (threshold, letter), checked in order
GRADE_THRESHOLDS = (
    (25, "A"),
    (20, "B"),
    (15, "C"),
    (12, "D"),
)
FAILING_GRADE = "F"
