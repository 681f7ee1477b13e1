from __future__ import annotations

from ..core.exceptions import LockedError, NotFoundError
from ..students.model import Student
from ..students.repository import StudentRepository


class LockingGate:
    """Write guard for graded students.

    The lock itself is set by the grading repository, in the same
    transaction as the grade. There is no unlock.
    """

    def __init__(self, students: StudentRepository):
        self._students = students

    def ensure_unlocked(self, student: Student) -> None:
        if student.siwes_locked:
            raise LockedError("Your SIWES has been completed and graded. No further changes are allowed.")

    def is_locked(self, student_id: int) -> bool:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student.siwes_locked
