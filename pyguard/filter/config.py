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
import os
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Mapping, MutableMapping, Optional

from pyguard.error import FilterAlreadySetError, UnsupportedFilterError
from pyguard.filter.api import ObjectInputFilterApiFactory, supports_object_input_filter
from pyguard.filter.pattern import FilterPattern, ManagementFilterPattern, SanctionedSerializablesFilterPattern
from pyguard.filter.proxy import SanctionedClassesFilter
from pyguard.filter.sanctioned import (
    SanctionedSerializablesService,
    load_sanctioned_class_names,
    load_sanctioned_serializables_services,
)
from pyguard.filter.state import PROCESS_FILTER_STATE, FilterState, GlobalFilterState

logger = logging.getLogger(__name__)

VALIDATE_SERIALIZABLE_OBJECTS = "validate-serializable-objects"
SERIALIZABLE_OBJECT_FILTER = "serializable-object-filter"

# environment variables
SERIAL_FILTER_PROPERTY = "PYGUARD_SERIAL_FILTER"
ENABLE_GLOBAL_SERIAL_FILTER = "PYGUARD_ENABLE_GLOBAL_SERIAL_FILTER"
MANAGEMENT_SERIAL_FILTER_PROPERTY = "PYGUARD_MANAGEMENT_SERIAL_FILTER"


def _to_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("1", "true")


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class SerializableObjectConfig:
    def __init__(self, properties: Mapping[str, object] = None):
        properties = properties or {}
        self._validate = _to_bool(properties.get(VALIDATE_SERIALIZABLE_OBJECTS))
        serial_filter = properties.get(SERIALIZABLE_OBJECT_FILTER)
        self._filter = None if _is_blank(serial_filter) else serial_filter.strip()

    @property
    def validate_serializable_objects(self) -> bool:
        return self._validate

    @validate_serializable_objects.setter
    def validate_serializable_objects(self, value: bool):
        self._validate = bool(value)

    @property
    def serializable_object_filter(self) -> Optional[str]:
        return self._filter

    def serializable_object_filter_if_enabled(self) -> Optional[str]:
        return self._filter if self._validate else None


class FilterConfiguration(ABC):
    outcome = FilterState.UNSET

    @abstractmethod
    def configure(self) -> bool:
        """Apply the configuration, returning True only if this call changed anything."""


class NullFilterConfiguration(FilterConfiguration):
    def configure(self) -> bool:
        return False


class GlobalSerialFilterConfiguration(FilterConfiguration):
    """Installs the process-wide serial filter once.

    Losing the race to another installer or running on an interpreter without a
    guard mechanism is logged and reported as False. Failing contributors and
    malformed patterns propagate.
    """

    def __init__(
        self,
        config: SerializableObjectConfig,
        state: GlobalFilterState = PROCESS_FILTER_STATE,
        services: Iterable[SanctionedSerializablesService] = None,
        api_factory: ObjectInputFilterApiFactory = None,
    ):
        self._config = config
        self._state = state
        self._services = services
        self._api_factory = api_factory or ObjectInputFilterApiFactory(state)
        self.outcome = FilterState.UNSET

    def configure(self) -> bool:
        self._state.begin_configuring()
        try:
            api = self._api_factory.create_object_input_filter_api()
            api.set_serial_filter(self._create_filter(api))
        except FilterAlreadySetError:
            self.outcome = FilterState.ALREADY_SET
            logger.info("Global serial filter is already configured.")
            return False
        except UnsupportedFilterError as e:
            self.outcome = FilterState.UNSUPPORTED
            self._state.abandon_configuring(FilterState.UNSUPPORTED)
            logger.error("Unable to configure a global serial filter: %s", e)
            return False
        except Exception:
            self._state.abandon_configuring()
            raise
        self.outcome = FilterState.SET
        logger.info("Global serial filter is now configured.")
        return True

    def _create_filter(self, api):
        self._config.validate_serializable_objects = True
        pattern = (
            SanctionedSerializablesFilterPattern().append(self._config.serializable_object_filter_if_enabled()).pattern()
        )
        services = self._services
        if services is None:
            services = load_sanctioned_serializables_services()
        sanctioned_classes = load_sanctioned_class_names(services)
        return SanctionedClassesFilter(api.create_object_input_filter(pattern), sanctioned_classes)


class EnvironmentSerialFilterConfiguration(GlobalSerialFilterConfiguration):
    """Installs the pattern of the PYGUARD_SERIAL_FILTER property as the process-wide filter.

    The pattern is enforced as given, without sanctioned classes.
    """

    def __init__(
        self,
        pattern: str,
        state: GlobalFilterState = PROCESS_FILTER_STATE,
        api_factory: ObjectInputFilterApiFactory = None,
    ):
        super().__init__(SerializableObjectConfig(), state=state, services=(), api_factory=api_factory)
        self.pattern = pattern

    def _create_filter(self, api):
        logger.info("Using serial filter pattern from %s.", SERIAL_FILTER_PROPERTY)
        return SanctionedClassesFilter(api.create_object_input_filter(self.pattern), frozenset())


def default_global_filter_precondition(environ: Mapping[str, str] = None) -> bool:
    environ = os.environ if environ is None else environ
    return (
        supports_object_input_filter()
        and _is_blank(environ.get(SERIAL_FILTER_PROPERTY))
        and _to_bool(environ.get(ENABLE_GLOBAL_SERIAL_FILTER, "false"))
    )


class GlobalSerialFilterConfigurationFactory:
    """Chooses the process-wide filter configuration.

    When the precondition fails because PYGUARD_SERIAL_FILTER holds a pattern,
    that pattern becomes the process-wide filter instead.
    """

    def __init__(
        self,
        precondition: Callable[[], bool] = None,
        state: GlobalFilterState = PROCESS_FILTER_STATE,
        api_factory: ObjectInputFilterApiFactory = None,
        environ: Mapping[str, str] = None,
    ):
        self._precondition = precondition or (lambda: default_global_filter_precondition(self._environ))
        self._state = state
        self._api_factory = api_factory
        self._environ = environ

    def create(
        self, config: SerializableObjectConfig, services: Iterable[SanctionedSerializablesService] = None
    ) -> FilterConfiguration:
        if self._precondition():
            return GlobalSerialFilterConfiguration(
                config, state=self._state, services=services, api_factory=self._api_factory
            )
        environ = os.environ if self._environ is None else self._environ
        pattern = environ.get(SERIAL_FILTER_PROPERTY)
        if not _is_blank(pattern):
            return EnvironmentSerialFilterConfiguration(
                pattern.strip(), state=self._state, api_factory=self._api_factory
            )
        return NullFilterConfiguration()


class PropertySerialFilterConfiguration(FilterConfiguration):
    """Publishes a filter pattern in an environment property, unless it already holds one."""

    def __init__(
        self,
        property_name: str,
        filter_pattern: FilterPattern,
        condition: Callable[[], bool] = None,
        environ: MutableMapping[str, str] = None,
    ):
        self._property_name = property_name
        self._filter_pattern = filter_pattern
        self._condition = condition or (lambda: True)
        self._environ = os.environ if environ is None else environ
        self.outcome = FilterState.UNSET

    def configure(self) -> bool:
        if not self._condition():
            return False
        if not _is_blank(self._environ.get(self._property_name)):
            self.outcome = FilterState.ALREADY_SET
            logger.info("System property %s is already configured.", self._property_name)
            return False
        pattern = self._filter_pattern.pattern()
        self._environ[self._property_name] = pattern
        self.outcome = FilterState.SET
        logger.info("System property %s is now configured with '%s'.", self._property_name, pattern)
        return True


class ManagementSerialFilterConfigurationFactory:
    def __init__(self, condition: Callable[[], bool] = None, environ: MutableMapping[str, str] = None):
        self._condition = condition
        self._environ = environ

    def create(self) -> PropertySerialFilterConfiguration:
        return PropertySerialFilterConfiguration(
            MANAGEMENT_SERIAL_FILTER_PROPERTY,
            ManagementFilterPattern(),
            condition=self._condition,
            environ=self._environ,
        )


class PropertiesFilterConfiguration:
    """Configures the process-wide filter from a property mapping in one call."""

    def __init__(self, properties: Mapping[str, object], factory: GlobalSerialFilterConfigurationFactory = None):
        self._properties = properties
        self._factory = factory or GlobalSerialFilterConfigurationFactory()

    def configure_serial_filter(self) -> bool:
        config = SerializableObjectConfig(self._properties)
        return self._factory.create(config).configure()
