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

import logging
from typing import AbstractSet

from pyguard.filter.api import FilterInfo, ObjectInputFilter, Status

logger = logging.getLogger(__name__)


class SanctionedClassesFilter(ObjectInputFilter):
    """Accepts sanctioned classes outright and defers every other class to ``delegate``.

    Rejections are logged and returned, never raised.
    """

    def __init__(self, delegate: ObjectInputFilter, sanctioned_classes: AbstractSet[str]):
        if delegate is None:
            raise TypeError("delegate must not be None")
        if sanctioned_classes is None:
            raise TypeError("sanctioned_classes must not be None")
        self.delegate = delegate
        self.sanctioned_classes = frozenset(sanctioned_classes)

    def check_input(self, info: FilterInfo) -> Status:
        name = info.element_name()
        if name is not None and name in self.sanctioned_classes:
            return Status.ALLOWED
        status = self.delegate.check_input(info)
        if status is Status.REJECTED:
            logger.critical("Serialization filter is rejecting class %s", name)
        return status

    def __repr__(self):
        return f"SanctionedClassesFilter({self.delegate!r}, {len(self.sanctioned_classes)} sanctioned classes)"
