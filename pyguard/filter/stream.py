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

import io
import logging
import pickle
from typing import AbstractSet

from pyguard.error import InvalidClassError
from pyguard.filter.api import (
    FilterInfo,
    ObjectInputFilter,
    ObjectInputFilterApi,
    ObjectInputFilterApiFactory,
    Status,
)
from pyguard.filter.pattern import SanctionedSerializablesFilterPattern
from pyguard.filter.proxy import SanctionedClassesFilter
from pyguard.filter.state import PROCESS_FILTER_STATE, GlobalFilterState

logger = logging.getLogger(__name__)


class FilteringUnpickler(pickle.Unpickler):
    """An unpickler that checks every global it resolves against ``object_input_filter``.

    The filter starts out as the process-wide filter of ``filter_state``, unless
    that filter is already enforced for every unpickler by an audit hook.
    """

    def __init__(self, file, *, filter_state: GlobalFilterState = PROCESS_FILTER_STATE, **kwargs):
        super().__init__(file, **kwargs)
        self.object_input_filter = filter_state.default_stream_filter()

    def find_class(self, module, name):
        candidate = f"{module}.{name}"
        object_filter = self.object_input_filter
        if object_filter is not None and object_filter.check_input(FilterInfo(candidate)) is Status.REJECTED:
            raise InvalidClassError(candidate)
        return super().find_class(module, name)


def load(file, *, object_filter: ObjectInputFilter = None, filter_state=PROCESS_FILTER_STATE, **kwargs):
    unpickler = FilteringUnpickler(file, filter_state=filter_state, **kwargs)
    if object_filter is not None:
        unpickler.object_input_filter = object_filter
    return unpickler.load()


def loads(data, *, object_filter: ObjectInputFilter = None, filter_state=PROCESS_FILTER_STATE, **kwargs):
    return load(io.BytesIO(data), object_filter=object_filter, filter_state=filter_state, **kwargs)


class StreamSerialFilter:
    def __init__(self, api: ObjectInputFilterApi, object_filter: ObjectInputFilter):
        self._api = api
        self.object_filter = object_filter

    def set_filter_on(self, unpickler) -> bool:
        self._api.set_object_input_filter(unpickler, self.object_filter)
        return True


class NullStreamSerialFilter:
    def set_filter_on(self, unpickler) -> bool:
        return False


class StreamSerialFilterFactory:
    """Builds the filter attached to individual unpicklers.

    Unlike the process-wide filter, a stream filter can be attached to any
    number of unpicklers.
    """

    def __init__(self, api_factory: ObjectInputFilterApiFactory = None):
        self._api_factory = api_factory or ObjectInputFilterApiFactory()

    def create(self, config, sanctioned_classes: AbstractSet[str]):
        if not config.validate_serializable_objects:
            return NullStreamSerialFilter()
        pattern = SanctionedSerializablesFilterPattern().append(config.serializable_object_filter).pattern()
        api = self._api_factory.create_object_input_filter_api()
        object_filter = SanctionedClassesFilter(api.create_object_input_filter(pattern), sanctioned_classes)
        logger.debug("Created stream serial filter with pattern %s", pattern)
        return StreamSerialFilter(api, object_filter)
