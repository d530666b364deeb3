# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import time
from typing import Callable, Optional


NANOS_PER_SECOND = 1_000_000_000


class Timer:

    def __init__(self, nano_clock: Optional[Callable[[], int]] = None):
        """
        Create a Timer and start measuring.

        :param nano_clock: Optional monotonic nanosecond clock. Defaults to time.monotonic_ns
        """
        self.nano_clock = nano_clock if nano_clock is not None else time.monotonic_ns
        self.start_time = self.nano_clock()
        self.stop_time: Optional[int] = None

    def stop(self) -> float:
        """
        Freeze the timer.

        :return: Elapsed time in seconds at the moment of stopping
        """
        if self.stop_time is None:
            self.stop_time = self.nano_clock()
        return self.elapsed_seconds()

    @property
    def stopped(self) -> bool:
        return self.stop_time is not None

    def elapsed_seconds(self) -> float:
        """
        Get elapsed time in seconds, up to now or to the stop point.

        :return: Elapsed time in seconds
        """
        end = self.stop_time if self.stop_time is not None else self.nano_clock()
        return (end - self.start_time) / float(NANOS_PER_SECOND)

    def has_exceeded(self, seconds: Optional[float]) -> bool:
        """
        Check a deadline relative to the start point.

        :param seconds: Deadline in seconds, or None for no deadline
        :return: True if the deadline is set and has passed
        """
        if seconds is None:
            return False
        return self.elapsed_seconds() >= seconds
