"""
Unit tests for the SQLAlchemy submission store
"""
from datetime import datetime, timezone

import pytest

from domain.errors import ConflictError
from domain.models import SubmissionStatus
from domain.schemas import AssignmentCreate, AssignmentUpdate, TestCaseIn


class TestSubmissions:

    def test_insert_defaults_to_pending(self, store, double_assignment):
        submission = store.insert(double_assignment.id, "return 1", "user-1")
        assert submission.id is not None
        assert submission.status == SubmissionStatus.PENDING
        assert submission.grader_feedback is None
        assert submission.correct is None
        assert submission.last_updated is not None

    def test_last_updated_is_naive_utc(self, store, double_assignment):
        before = datetime.now(timezone.utc).replace(tzinfo=None)
        submission = store.insert(double_assignment.id, "return 1", "user-1")
        after = datetime.now(timezone.utc).replace(tzinfo=None)

        assert submission.last_updated.tzinfo is None
        assert before <= submission.last_updated <= after

    def test_find_pending(self, store, double_assignment):
        assert store.find_pending("user-1") is False
        submission = store.insert(double_assignment.id, "return 1", "user-1")
        assert store.find_pending("user-1") is True
        assert store.find_pending("user-2") is False

        store.update(submission.id, SubmissionStatus.PROCESSED, "ok", True)
        assert store.find_pending("user-1") is False

    def test_update_sets_result_and_timestamp(self, store, double_assignment):
        submission = store.insert(double_assignment.id, "return 1", "user-1")
        updated = store.update(submission.id, SubmissionStatus.PROCESSED, "feedback", False)

        assert updated.status == SubmissionStatus.PROCESSED
        assert updated.grader_feedback == "feedback"
        assert updated.correct is False
        assert updated.last_updated >= submission.last_updated

    def test_terminal_submission_is_not_updated_again(self, store, double_assignment):
        submission = store.insert(double_assignment.id, "return 1", "user-1")
        store.update(submission.id, SubmissionStatus.ERROR, "Grading failed: boom", False)

        assert store.update(submission.id, SubmissionStatus.PROCESSED, "late", True) is None
        assert store.get_submission(submission.id).status == SubmissionStatus.ERROR

    def test_update_missing_submission_is_noop(self, store):
        assert store.update(12345, SubmissionStatus.PROCESSED, "x", True) is None

    def test_processed_duplicate_requires_exact_code(self, store, double_assignment):
        submission = store.insert(double_assignment.id, "return input * 2", "user-1")
        assert store.find_processed_duplicate(double_assignment.id, "return input * 2") is None

        store.update(submission.id, SubmissionStatus.PROCESSED, "all good", True)
        duplicate = store.find_processed_duplicate(double_assignment.id, "return input * 2")
        assert duplicate.id == submission.id

        assert store.find_processed_duplicate(double_assignment.id, "return input * 2 ") is None
        assert store.find_processed_duplicate(double_assignment.id + 1, "return input * 2") is None

    def test_errored_submission_is_not_a_duplicate(self, store, double_assignment):
        submission = store.insert(double_assignment.id, "return 1", "user-1")
        store.update(submission.id, SubmissionStatus.ERROR, "Grading failed", False)
        assert store.find_processed_duplicate(double_assignment.id, "return 1") is None

    def test_list_user_submissions_newest_first(self, store, double_assignment):
        first = store.insert(double_assignment.id, "return 1", "user-1")
        second = store.insert(double_assignment.id, "return 2", "user-1")
        store.insert(double_assignment.id, "return 3", "user-2")

        listed = store.list_user_submissions("user-1", double_assignment.id)
        assert [s.id for s in listed] == [second.id, first.id]

    def test_delete_submission(self, store, double_assignment):
        submission = store.insert(double_assignment.id, "return 1", "user-1")
        assert store.delete_submission(submission.id).id == submission.id
        assert store.get_submission(submission.id) is None
        assert store.delete_submission(submission.id) is None

    def test_user_points_count_distinct_solved_assignments(self, store, double_assignment, empty_assignment):
        for code in ("return input * 2", "return input + input"):
            s = store.insert(double_assignment.id, code, "user-1")
            store.update(s.id, SubmissionStatus.PROCESSED, "ok", True)
        wrong = store.insert(empty_assignment.id, "return 0", "user-1")
        store.update(wrong.id, SubmissionStatus.PROCESSED, "nope", False)

        assert store.get_user_points("user-1") == 100
        assert store.get_user_points("nobody") == 0


class TestAssignments:

    def test_test_cases_in_insertion_order(self, store, double_assignment):
        test_cases = store.list_test_cases(double_assignment.id)
        assert [tc.name for tc in test_cases] == ["doubles five", "doubles a list"]
        assert test_cases[0].input == 5
        assert test_cases[1].input == [1, 2]
        assert test_cases[1].expected_output == "[1, 2, 1, 2]"

    def test_list_assignments_by_order(self, store):
        store.add_assignment(AssignmentCreate(title="Second", assignment_order=2))
        store.add_assignment(AssignmentCreate(title="First", assignment_order=1))
        assert [a.title for a in store.list_assignments()] == ["First", "Second"]

    def test_duplicate_order_conflicts(self, store, double_assignment):
        with pytest.raises(ConflictError):
            store.add_assignment(AssignmentCreate(title="Again", assignment_order=double_assignment.assignment_order))

    def test_delete_assignment_removes_submissions(self, store, double_assignment):
        submission = store.insert(double_assignment.id, "return 1", "user-1")
        assert store.delete_assignment(double_assignment.id).id == double_assignment.id
        assert store.get_assignment(double_assignment.id) is None
        assert store.get_submission(submission.id) is None
        assert store.list_test_cases(double_assignment.id) == []

    def test_update_assignment_changes_only_given_fields(self, store, double_assignment):
        updated = store.update_assignment(double_assignment.id, AssignmentUpdate(title="Triple it", handout=None))

        assert updated.title == "Triple it"
        assert updated.assignment_order == double_assignment.assignment_order
        assert updated.handout is None
        assert [tc.name for tc in updated.testcases] == ["doubles five", "doubles a list"]

    def test_update_assignment_replaces_test_cases(self, store, double_assignment):
        updated = store.update_assignment(
            double_assignment.id,
            AssignmentUpdate(test_cases=[TestCaseIn(name="triples two", input=2, expected_output="6")]),
        )
        assert [tc.name for tc in updated.testcases] == ["triples two"]
        assert [tc.name for tc in store.list_test_cases(double_assignment.id)] == ["triples two"]

    def test_update_assignment_order_conflict(self, store, double_assignment, empty_assignment):
        with pytest.raises(ConflictError):
            store.update_assignment(
                empty_assignment.id, AssignmentUpdate(assignment_order=double_assignment.assignment_order)
            )
        assert store.get_assignment(empty_assignment.id).assignment_order == empty_assignment.assignment_order

    def test_update_missing_assignment(self, store):
        assert store.update_assignment(999, AssignmentUpdate(title="Nope")) is None
