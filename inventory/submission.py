# inventory/submission.py
"""
State shared by the item-creation and enquiry flows:

    idle -> submitting -> success (reverts to idle after 3 seconds)
                       -> failed  (stays until the next submission)
"""
import time

from utils.exceptions import SubmissionInProgress

IDLE = 'idle'
SUBMITTING = 'submitting'
SUCCESS = 'success'
FAILED = 'failed'

CONFIRMATION_SECONDS = 3


class SubmissionFlow:

    def __init__(self, clock=time.monotonic, confirmation_seconds=CONFIRMATION_SECONDS):
        self.clock = clock
        self.confirmation_seconds = confirmation_seconds
        self.error = None
        self._state = IDLE
        self._success_until = None

    @property
    def state(self):
        if self._state == SUCCESS and self.clock() >= self._success_until:
            self._state = IDLE
            self._success_until = None
        return self._state

    @property
    def is_submitting(self):
        return self.state == SUBMITTING

    def begin(self):
        if self.state == SUBMITTING:
            raise SubmissionInProgress()
        self._state = SUBMITTING
        self._success_until = None
        self.error = None

    def succeed(self):
        self._state = SUCCESS
        self._success_until = self.clock() + self.confirmation_seconds

    def fail(self, message):
        self._state = FAILED
        self.error = message

    def as_dict(self):
        return {
            'status': self.state,
            'error': self.error,
            'confirmation_seconds': self.confirmation_seconds,
        }
