import pytest

from siwes_logbook.assignments.resolver import AssignmentResolver
from siwes_logbook.core.enums import Role, SupervisorType
from siwes_logbook.core.exceptions import AuthorizationError
from siwes_logbook.core.principal import Principal
from tests.fakes import FakeAssignmentRepo, make_supervisor


@pytest.fixture()
def repo():
    r = FakeAssignmentRepo()
    r.add_supervisor(make_supervisor(1, 200, SupervisorType.SCHOOL))
    r.add_supervisor(make_supervisor(2, 300, SupervisorType.INDUSTRY))
    return r


def test_supervisor_for_user_filters_by_type(repo):
    resolver = AssignmentResolver(repo)

    assert resolver.supervisor_for_user(200).supervisor_id == 1
    assert resolver.supervisor_for_user(200, SupervisorType.SCHOOL).supervisor_id == 1
    assert resolver.supervisor_for_user(200, SupervisorType.INDUSTRY) is None
    assert resolver.supervisor_for_user(999) is None


def test_inactive_supervisor_is_ignored(repo):
    repo.add_supervisor(make_supervisor(1, 200, SupervisorType.SCHOOL, is_active=False))
    resolver = AssignmentResolver(repo)

    assert resolver.supervisor_for_user(200) is None
    with pytest.raises(AuthorizationError):
        resolver.require_supervisor(Principal(200, Role.SCHOOL_SUPERVISOR))


def test_require_supervisor_names_the_missing_type(repo):
    resolver = AssignmentResolver(repo)

    with pytest.raises(AuthorizationError, match="school supervisor"):
        resolver.require_supervisor(Principal(300, Role.INDUSTRY_SUPERVISOR), SupervisorType.SCHOOL)


def test_require_assignment_checks_type(repo):
    school = repo.get_supervisor_by_id(1)
    repo.assign(school, 10)
    resolver = AssignmentResolver(repo)

    assert resolver.require_assignment(school, 10, SupervisorType.SCHOOL).student_id == 10
    with pytest.raises(AuthorizationError, match="not assigned"):
        resolver.require_assignment(school, 10, SupervisorType.INDUSTRY)
    with pytest.raises(AuthorizationError):
        resolver.require_assignment(school, 11, SupervisorType.SCHOOL)


def test_inactive_assignment_does_not_count(repo):
    school = repo.get_supervisor_by_id(1)
    repo.assign(school, 10, is_active=False)

    with pytest.raises(AuthorizationError):
        AssignmentResolver(repo).require_assignment(school, 10, SupervisorType.SCHOOL)


def test_configured_session_scopes_assignments(repo):
    school = repo.get_supervisor_by_id(1)
    repo.assign(school, 10, session_id=1)
    repo.assign(school, 11, session_id=2)
    resolver = AssignmentResolver(repo, current_session_id=2)

    assert resolver.assigned_student_ids(school) == [11]
    with pytest.raises(AuthorizationError):
        resolver.require_assignment(school, 10, SupervisorType.SCHOOL)


def test_flagged_session_used_when_none_configured(repo):
    school = repo.get_supervisor_by_id(1)
    repo.assign(school, 10, session_id=1)
    repo.assign(school, 11, session_id=2)
    repo.flagged_session_id = 1

    assert AssignmentResolver(repo).assigned_student_ids(school) == [10]


def test_without_any_session_every_active_assignment_counts(repo):
    school = repo.get_supervisor_by_id(1)
    repo.assign(school, 10, session_id=1)
    repo.assign(school, 11, session_id=2)

    assert AssignmentResolver(repo).assigned_student_ids(school) == [10, 11]


def test_assigned_student_ids_are_unique(repo):
    school = repo.get_supervisor_by_id(1)
    repo.assign(school, 10, SupervisorType.SCHOOL)
    repo.assign(school, 10, SupervisorType.INDUSTRY)
    repo.assign(school, 12)

    assert AssignmentResolver(repo).assigned_student_ids(school) == [10, 12]


def test_supervisors_for_student(repo):
    repo.assign(repo.get_supervisor_by_id(1), 10)
    repo.assign(repo.get_supervisor_by_id(2), 10)

    pair = AssignmentResolver(repo).supervisors_for_student(10)

    assert pair.school.supervisor_id == 1
    assert pair.industry.supervisor_id == 2


def test_supervisors_for_student_skips_inactive_supervisors(repo):
    repo.assign(repo.get_supervisor_by_id(2), 10)
    repo.add_supervisor(make_supervisor(2, 300, SupervisorType.INDUSTRY, is_active=False))

    pair = AssignmentResolver(repo).supervisors_for_student(10)

    assert pair.industry is None
    assert pair.school is None
