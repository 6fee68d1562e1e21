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

import threading

import pytest

from pyguard.error import FilterAlreadySetError
from pyguard.filter.api import create_filter
from pyguard.filter.state import FilterState, GlobalFilterState


def test_lifecycle():
    state = GlobalFilterState()
    assert state.phase is FilterState.UNSET
    state.begin_configuring()
    assert state.phase is FilterState.CONFIGURING
    object_filter = create_filter("!*")
    state.install(object_filter)
    assert state.phase is FilterState.SET
    assert state.filter is object_filter
    assert state.default_stream_filter() is object_filter
    state.begin_configuring()
    assert state.phase is FilterState.SET


def test_abandon_configuring():
    state = GlobalFilterState()
    state.begin_configuring()
    state.abandon_configuring(FilterState.UNSUPPORTED)
    assert state.phase is FilterState.UNSUPPORTED
    state.begin_configuring()
    state.abandon_configuring()
    assert state.phase is FilterState.UNSET


def test_install_none():
    with pytest.raises(TypeError):
        GlobalFilterState().install(None)


def test_enforce_called_once():
    state = GlobalFilterState()
    calls = []
    state.install(create_filter("!*"), enforce=calls.append)
    assert calls == [state]
    assert state.enforced_process_wide
    assert state.default_stream_filter() is None


def test_single_installer_wins():
    state = GlobalFilterState()
    results = []
    errors = []
    barrier = threading.Barrier(10)

    def install(thread_id):
        barrier.wait()
        try:
            state.install(create_filter(f"thread{thread_id}.*"))
            results.append(thread_id)
        except FilterAlreadySetError as e:
            errors.append(e)

    threads = [threading.Thread(target=install, args=(i,)) for i in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 1
    assert len(errors) == 9
    assert state.filter.pattern == f"thread{results[0]}.*"
