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

from pyguard.filter.state import PROCESS_FILTER_STATE, FilterState, GlobalFilterState  # noqa: F401
from pyguard.filter.api import (  # noqa: F401
    AuditHookObjectInputFilterApi,
    FilterInfo,
    FindClassObjectInputFilterApi,
    ObjectInputFilter,
    ObjectInputFilterApi,
    ObjectInputFilterApiFactory,
    PatternFilter,
    Status,
    create_filter,
    supports_object_input_filter,
)
from pyguard.filter.pattern import (  # noqa: F401
    DelimitedStringBuilder,
    FilterPattern,
    ManagementFilterPattern,
    SanctionedSerializablesFilterPattern,
)
from pyguard.filter.sanctioned import (  # noqa: F401
    SanctionedSerializablesService,
    load_class_names,
    load_sanctioned_class_names,
    load_sanctioned_serializables_services,
)
from pyguard.filter.proxy import SanctionedClassesFilter  # noqa: F401
from pyguard.filter.stream import (  # noqa: F401
    FilteringUnpickler,
    NullStreamSerialFilter,
    StreamSerialFilter,
    StreamSerialFilterFactory,
    load,
    loads,
)
from pyguard.filter.config import (  # noqa: F401
    EnvironmentSerialFilterConfiguration,
    GlobalSerialFilterConfiguration,
    GlobalSerialFilterConfigurationFactory,
    ManagementSerialFilterConfigurationFactory,
    NullFilterConfiguration,
    PropertiesFilterConfiguration,
    PropertySerialFilterConfiguration,
    SerializableObjectConfig,
)
