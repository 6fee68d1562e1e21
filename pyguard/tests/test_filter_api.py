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

import collections
import io
import pickle

import pytest

from pyguard.error import FilterAlreadySetError, InvalidClassError, MalformedPatternError, UnsupportedFilterError
from pyguard.filter.api import (
    AuditHookObjectInputFilterApi,
    FilterInfo,
    FindClassObjectInputFilterApi,
    ObjectInputFilterApiFactory,
    Status,
    create_filter,
    supports_object_input_filter,
)
from pyguard.filter.state import FilterState, GlobalFilterState
from pyguard.filter.stream import FilteringUnpickler


class TestPatternFilter:
    def test_exact(self):
        object_filter = create_filter("collections.OrderedDict")
        assert object_filter.check_input(FilterInfo("collections.OrderedDict")) is Status.ALLOWED
        assert object_filter.check_input(FilterInfo("collections.deque")) is Status.UNDECIDED

    def test_module_wildcard(self):
        object_filter = create_filter("myapp.*")
        assert object_filter.check_input(FilterInfo("myapp.Model")) is Status.ALLOWED
        assert object_filter.check_input(FilterInfo("myapp.sub.Model")) is Status.UNDECIDED
        assert object_filter.check_input(FilterInfo("myapplication.Model")) is Status.UNDECIDED

    def test_package_wildcard(self):
        object_filter = create_filter("myapp.**")
        assert object_filter.check_input(FilterInfo("myapp.Model")) is Status.ALLOWED
        assert object_filter.check_input(FilterInfo("myapp.sub.Model")) is Status.ALLOWED
        assert object_filter.check_input(FilterInfo("myapplication.Model")) is Status.UNDECIDED

    def test_prefix_wildcard(self):
        object_filter = create_filter("myapp*")
        assert object_filter.check_input(FilterInfo("myapplication.Model")) is Status.ALLOWED

    def test_first_match_wins(self):
        object_filter = create_filter("!myapp.Secret;myapp.*;!*")
        assert object_filter.check_input(FilterInfo("myapp.Secret")) is Status.REJECTED
        assert object_filter.check_input(FilterInfo("myapp.Model")) is Status.ALLOWED
        assert object_filter.check_input(FilterInfo("os.system")) is Status.REJECTED

    def test_empty_clauses_ignored(self):
        object_filter = create_filter(";;myapp.Model;;")
        assert object_filter.check_input(FilterInfo("myapp.Model")) is Status.ALLOWED
        assert create_filter("").check_input(FilterInfo("myapp.Model")) is Status.UNDECIDED

    def test_type_and_array_candidates(self):
        object_filter = create_filter("collections.OrderedDict;!*")
        assert object_filter.check_input(FilterInfo(collections.OrderedDict)) is Status.ALLOWED
        assert object_filter.check_input(FilterInfo("collections.OrderedDict[]")) is Status.ALLOWED
        assert object_filter.check_input(FilterInfo("collections.OrderedDict[][]")) is Status.ALLOWED
        assert (
            object_filter.check_input(FilterInfo("builtins.list", component_type=collections.OrderedDict, array_length=2))
            is Status.ALLOWED
        )
        assert object_filter.check_input(FilterInfo()) is Status.UNDECIDED

    @pytest.mark.parametrize("pattern", ["my app.Model", "myapp/Model", "maxdepth=5", "!", "myapp.Model;!", "**", "my*app"])
    def test_malformed(self, pattern):
        with pytest.raises(MalformedPatternError):
            create_filter(pattern)

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            create_filter("a b")

    def test_none_pattern(self):
        with pytest.raises(TypeError):
            create_filter(None)


def test_filter_info_names():
    info = FilterInfo("collections.OrderedDict[]", array_length=3)
    assert info.is_array()
    assert info.element_name() == "collections.OrderedDict"
    assert not FilterInfo(collections.OrderedDict).is_array()
    assert FilterInfo(collections.OrderedDict).class_name == "collections.OrderedDict"
    assert FilterInfo().class_name is None


class TestObjectInputFilterApiFactory:
    def test_prefers_audit_hooks(self):
        factory = ObjectInputFilterApiFactory(GlobalFilterState(), lambda: True, lambda: True)
        assert isinstance(factory.create_object_input_filter_api(), AuditHookObjectInputFilterApi)

    def test_falls_back_to_find_class(self):
        factory = ObjectInputFilterApiFactory(GlobalFilterState(), lambda: False, lambda: True)
        assert isinstance(factory.create_object_input_filter_api(), FindClassObjectInputFilterApi)

    def test_unsupported(self):
        factory = ObjectInputFilterApiFactory(GlobalFilterState(), lambda: False, lambda: False)
        assert not factory.is_supported()
        assert not supports_object_input_filter(factory)
        with pytest.raises(UnsupportedFilterError):
            factory.create_object_input_filter_api()

    def test_probes_evaluated_per_call(self):
        available = [True]
        factory = ObjectInputFilterApiFactory(GlobalFilterState(), lambda: False, lambda: available[0])
        assert factory.create_object_input_filter_api() is not None
        available[0] = False
        with pytest.raises(UnsupportedFilterError):
            factory.create_object_input_filter_api()

    def test_default_interpreter_is_supported(self):
        assert supports_object_input_filter()


class TestFindClassObjectInputFilterApi:
    def test_serial_filter_is_write_once(self):
        state = GlobalFilterState()
        api = FindClassObjectInputFilterApi(state)
        assert api.get_serial_filter() is None
        object_filter = api.create_object_input_filter("!*")
        api.set_serial_filter(object_filter)
        assert api.get_serial_filter() is object_filter
        assert state.phase is FilterState.SET
        with pytest.raises(FilterAlreadySetError, match="can only be set once"):
            api.set_serial_filter(api.create_object_input_filter("*"))
        assert api.get_serial_filter() is object_filter

    def test_stream_filter(self):
        api = FindClassObjectInputFilterApi(GlobalFilterState())
        unpickler = FilteringUnpickler(io.BytesIO(), filter_state=api.state)
        assert api.get_object_input_filter(unpickler) is None
        object_filter = api.create_object_input_filter("!*")
        api.set_object_input_filter(unpickler, object_filter)
        assert api.get_object_input_filter(unpickler) is object_filter

    def test_stream_filter_requires_filtering_unpickler(self):
        api = FindClassObjectInputFilterApi(GlobalFilterState())
        with pytest.raises(TypeError):
            api.set_object_input_filter(pickle.Unpickler(io.BytesIO()), api.create_object_input_filter("!*"))


class TestAuditHookObjectInputFilterApi:
    def test_installs_one_hook_per_state(self):
        hooks = []
        state = GlobalFilterState()
        api = AuditHookObjectInputFilterApi(state, add_audit_hook=hooks.append)
        api.set_serial_filter(api.create_object_input_filter("collections.*;!*"))
        assert len(hooks) == 1
        assert state.enforced_process_wide
        with pytest.raises(FilterAlreadySetError):
            api.set_serial_filter(api.create_object_input_filter("*"))
        assert len(hooks) == 1

    def test_hook_checks_find_class_events(self):
        hooks = []
        api = AuditHookObjectInputFilterApi(GlobalFilterState(), add_audit_hook=hooks.append)
        api.set_serial_filter(api.create_object_input_filter("collections.*;!*"))
        (hook,) = hooks
        hook("pickle.find_class", ("collections", "OrderedDict"))
        hook("open", ("/etc/passwd", "r", 0))
        with pytest.raises(InvalidClassError) as excinfo:
            hook("pickle.find_class", ("os", "system"))
        assert excinfo.value.class_name == "os.system"

    def test_filtering_unpickler_defers_to_hook(self):
        state = GlobalFilterState()
        api = AuditHookObjectInputFilterApi(state, add_audit_hook=lambda hook: None)
        api.set_serial_filter(api.create_object_input_filter("!*"))
        assert FilteringUnpickler(io.BytesIO(), filter_state=state).object_input_filter is None
