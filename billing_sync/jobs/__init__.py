from billing_sync.jobs.registry import (
    JobConfig,
    dispatch_event,
    get_job_configs,
    get_job_for_event,
)

__all__ = [
    "JobConfig",
    "dispatch_event",
    "get_job_configs",
    "get_job_for_event",
]
