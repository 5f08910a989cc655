"""
Lifecycle rules: which operator actions each status admits, and their patches.
"""

import pytest

from features.errors import PreconditionError
from features.queue.lifecycle import (
    Action,
    TRANSITIONS,
    allowed_actions,
    check_deletable,
    check_reorderable,
    plan_transition,
)
from features.queue.models import Feature, FeatureStatus


def _feature(status: FeatureStatus, **kw) -> Feature:
    return Feature(id="f-1", name="F", description="", category="c", priority=1.0, status=status, **kw)


class TestTransitionTable:
    def test_allowed_actions(self):
        assert set(allowed_actions(FeatureStatus.PENDING)) == {Action.SKIP, Action.COMPLETE}
        assert set(allowed_actions(FeatureStatus.FAILED)) == {Action.SKIP, Action.RETRY}
        assert allowed_actions(FeatureStatus.SKIPPED) == [Action.REQUEUE]

    def test_in_progress_and_completed_admit_nothing(self):
        assert allowed_actions(FeatureStatus.IN_PROGRESS) == []
        assert allowed_actions(FeatureStatus.COMPLETED) == []

    def test_no_action_targets_in_progress(self):
        assert FeatureStatus.IN_PROGRESS not in TRANSITIONS.values()


class TestPlanTransition:
    @pytest.mark.parametrize("status", [FeatureStatus.IN_PROGRESS, FeatureStatus.COMPLETED])
    @pytest.mark.parametrize("action", list(Action))
    def test_worker_owned_and_completed_are_refused(self, status, action):
        with pytest.raises(PreconditionError) as exc:
            plan_transition(_feature(status), action)
        assert exc.value.status == status.value
        assert exc.value.action == action.value

    def test_skip_pending(self):
        assert plan_transition(_feature(FeatureStatus.PENDING), Action.SKIP) == {"status": "skipped"}

    def test_complete_sets_completed_at(self):
        patch = plan_transition(_feature(FeatureStatus.PENDING), Action.COMPLETE)
        assert patch["status"] == "completed"
        assert patch["completed_at"]

    @pytest.mark.parametrize("retries", [0, 1, 7])
    def test_retry_resets_error_and_count(self, retries):
        feature = _feature(FeatureStatus.FAILED, error_message="boom", retry_count=retries)
        patch = plan_transition(feature, Action.RETRY)
        assert patch == {"status": "pending", "error_message": None, "retry_count": 0}

    def test_retry_on_pending_is_refused(self):
        with pytest.raises(PreconditionError):
            plan_transition(_feature(FeatureStatus.PENDING), Action.RETRY)

    def test_requeue_clears_error(self):
        patch = plan_transition(_feature(FeatureStatus.SKIPPED, error_message="old"), Action.REQUEUE)
        assert patch == {"status": "pending", "error_message": None}

    def test_requeue_only_from_skipped(self):
        with pytest.raises(PreconditionError):
            plan_transition(_feature(FeatureStatus.FAILED), Action.REQUEUE)


class TestDeleteAndReorderChecks:
    @pytest.mark.parametrize("status", [
        FeatureStatus.PENDING, FeatureStatus.FAILED, FeatureStatus.SKIPPED, FeatureStatus.COMPLETED,
    ])
    def test_deletable(self, status):
        check_deletable(_feature(status))

    def test_in_progress_needs_force(self):
        with pytest.raises(PreconditionError):
            check_deletable(_feature(FeatureStatus.IN_PROGRESS))
        check_deletable(_feature(FeatureStatus.IN_PROGRESS), force=True)

    @pytest.mark.parametrize("status", [s for s in FeatureStatus if s is not FeatureStatus.PENDING])
    def test_only_pending_reorders(self, status):
        with pytest.raises(PreconditionError):
            check_reorderable(_feature(status), "move-top")
