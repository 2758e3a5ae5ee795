from unittest.mock import MagicMock

import pytest
from kubernetes.client.rest import ApiException
from urllib3.exceptions import ProtocolError, ReadTimeoutError

from kubejobs.execution.labels import LabelSelector
from kubejobs.execution.reaper import (
    ResourceReaper,
    is_job_finished,
    is_pod_finished,
)
from tests.conftest import listing, make_job, make_pod


class TestFinishedPredicates:
    """Tests for finished job and pod detection."""

    def test_job_finished_when_succeeded_matches_completions(self):
        assert is_job_finished(make_job("a", completions=3, succeeded=3))

    def test_job_not_finished_when_partial(self):
        assert not is_job_finished(make_job("a", completions=3, succeeded=2))

    def test_job_without_status_counts_as_zero_succeeded(self):
        assert not is_job_finished(make_job("a", completions=1, succeeded=None))

    def test_pod_finished_only_when_succeeded(self):
        assert is_pod_finished(make_pod("a", phase="Succeeded"))
        assert not is_pod_finished(make_pod("b", phase="Running"))
        assert not is_pod_finished(make_pod("c", phase="Failed"))


class TestResourceReaper:
    """Tests for ResourceReaper with mocked K8s."""

    @pytest.fixture
    def reaper(self):
        return ResourceReaper()

    def test_reap_passes_selector(self, reaper):
        list_fn = MagicMock(return_value=listing())

        reaper.reap(list_fn, LabelSelector.jobs(), is_job_finished, MagicMock())

        list_fn.assert_called_once_with(label_selector="managed-job=job")

    def test_reap_finished_jobs_only_deletes_finished(self, reaper, batch_api):
        done = make_job("done", completions=3, succeeded=3, namespace="prod")
        partial = make_job("partial", completions=3, succeeded=2)
        batch_api.list_job_for_all_namespaces.return_value = listing(done, partial)

        result = reaper.reap_finished_jobs(batch_api)

        batch_api.delete_namespaced_job.assert_called_once_with(
            name="done", namespace="prod", propagation_policy="Background"
        )
        assert result.deleted == [done]
        assert result.failures == []

    def test_reap_continues_after_delete_failure(self, reaper, batch_api):
        first = make_job("first", completions=1, succeeded=1)
        second = make_job("second", completions=1, succeeded=1)
        batch_api.list_job_for_all_namespaces.return_value = listing(first, second)

        # First delete fails (external K8s service)
        batch_api.delete_namespaced_job.side_effect = [
            ApiException(status=403, reason="Forbidden"),
            None,
        ]

        result = reaper.reap_finished_jobs(batch_api)

        assert batch_api.delete_namespaced_job.call_count == 2
        assert result.deleted == [second]
        assert len(result.failures) == 1
        assert result.failures[0].resource is first
        assert result.failures[0].name == "first"
        assert result.failures[0].error.status == 403

    def test_reap_continues_after_connection_error(self, reaper, batch_api):
        first = make_job("first", completions=1, succeeded=1)
        second = make_job("second", completions=1, succeeded=1)
        batch_api.list_job_for_all_namespaces.return_value = listing(first, second)

        # Connection dropped mid-delete (external K8s service)
        batch_api.delete_namespaced_job.side_effect = [ProtocolError("reset"), None]

        result = reaper.reap_finished_jobs(batch_api)

        assert batch_api.delete_namespaced_job.call_count == 2
        assert result.deleted == [second]
        assert result.failures[0].resource is first
        assert isinstance(result.failures[0].error, ProtocolError)

    def test_reap_pod_delete_timeout_is_recorded(self, reaper, core_api):
        pod = make_pod("slow", phase="Succeeded")
        core_api.list_pod_for_all_namespaces.return_value = listing(pod)
        core_api.delete_namespaced_pod.side_effect = ReadTimeoutError(
            None, "/api/v1/pods/slow", "Read timed out."
        )

        result = reaper.reap_finished_pods(core_api)

        assert result.deleted == []
        assert result.failures[0].name == "slow"

    def test_reap_already_deleted_is_not_fatal(self, reaper, core_api):
        pod = make_pod("gone", phase="Succeeded")
        core_api.list_pod_for_all_namespaces.return_value = listing(pod)
        core_api.delete_namespaced_pod.side_effect = ApiException(
            status=404, reason="Not Found"
        )

        result = reaper.reap_finished_pods(core_api)

        assert result.deleted == []
        assert result.failures[0].error.status == 404

    def test_reap_finished_pods(self, reaper, core_api):
        succeeded = make_pod("succeeded", phase="Succeeded", namespace="prod")
        running = make_pod("running", phase="Running")
        core_api.list_pod_for_all_namespaces.return_value = listing(succeeded, running)

        result = reaper.reap_finished_pods(core_api)

        core_api.list_pod_for_all_namespaces.assert_called_once_with(
            label_selector="managed-job=pod"
        )
        core_api.delete_namespaced_pod.assert_called_once_with(
            name="succeeded", namespace="prod"
        )
        assert result.deleted == [succeeded]

    def test_list_failure_propagates(self, reaper, batch_api):
        batch_api.list_job_for_all_namespaces.side_effect = ApiException(
            status=500, reason="Internal Server Error"
        )

        with pytest.raises(ApiException):
            reaper.reap_finished_jobs(batch_api)
