from unittest.mock import patch

from kubejobs.execution import factory
from kubejobs.execution.dispatcher import JobDispatcher


def test_get_job_dispatcher_is_singleton():
    with patch.object(factory, "_job_dispatcher", None):
        first = factory.get_job_dispatcher()
        second = factory.get_job_dispatcher()

    assert isinstance(first, JobDispatcher)
    assert first is second
    assert first.settings is factory.settings
