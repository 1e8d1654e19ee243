#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
class SchedulerError(Exception):
    """Base class for the errors reported back to the caller of the scheduler."""


class InvalidRuleError(SchedulerError):
    """The recurrence rule is malformed, out of range or can never occur."""


class InvalidDateError(SchedulerError):
    """A date is not a valid `YYYYMMDD` calendar date."""


class EmptyTitleError(SchedulerError):
    pass


class TaskNotFoundError(SchedulerError):
    pass
