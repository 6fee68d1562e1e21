# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.

import enum
import threading

from pyguard.error import ALREADY_SET_MESSAGE, FilterAlreadySetError


class FilterState(enum.Enum):
    UNSET = "UNSET"
    CONFIGURING = "CONFIGURING"
    SET = "SET"
    ALREADY_SET = "ALREADY_SET"
    UNSUPPORTED = "UNSUPPORTED"


class GlobalFilterState:
    """Holds the write-once process-wide filter.

    ``phase`` tracks the lifecycle of the process filter: UNSET, CONFIGURING, then
    SET or UNSUPPORTED. ALREADY_SET is never a phase of the state itself, only the
    outcome of a configuration attempt that lost the race.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._filter = None
        self._enforced = False
        self.phase = FilterState.UNSET

    @property
    def filter(self):
        return self._filter

    @property
    def enforced_process_wide(self) -> bool:
        """True once a process-wide hook checks every unpickler against the filter."""
        return self._enforced

    def begin_configuring(self):
        with self._lock:
            if self.phase in (FilterState.UNSET, FilterState.UNSUPPORTED):
                self.phase = FilterState.CONFIGURING

    def abandon_configuring(self, phase: FilterState = FilterState.UNSET):
        with self._lock:
            if self.phase is FilterState.CONFIGURING:
                self.phase = phase

    def install(self, object_filter, enforce=None):
        """Install ``object_filter`` unless a filter is already installed.

        ``enforce`` is called with this state, at most once per state, to register
        process-wide enforcement.
        """
        if object_filter is None:
            raise TypeError("object_filter must not be None")
        with self._lock:
            if self._filter is not None:
                raise FilterAlreadySetError(ALREADY_SET_MESSAGE)
            if enforce is not None and not self._enforced:
                enforce(self)
                self._enforced = True
            self._filter = object_filter
            self.phase = FilterState.SET

    def default_stream_filter(self):
        """Initial filter of a new filtering unpickler.

        None when a process-wide hook already applies the process filter.
        """
        if self._enforced:
            return None
        return self._filter


PROCESS_FILTER_STATE = GlobalFilterState()
