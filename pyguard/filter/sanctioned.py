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
from abc import ABC, abstractmethod
from importlib import metadata, resources
from typing import FrozenSet, Iterable, List

from pyguard.error import FilterConfigurationError

try:
    import numpy as np
except ImportError:
    np = None

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "pyguard.sanctioned_serializables"
CORE_RESOURCE = "sanctioned-pyguard-serializables.txt"


class SanctionedSerializablesService(ABC):
    """Contributes the names of classes that are always safe to unpickle."""

    @abstractmethod
    def get_serialization_accept_list(self) -> List[str]:
        """Return the sanctioned class names.

        May raise OSError when the list can't be read.
        """


def load_class_names(package: str, resource_name: str) -> List[str]:
    """Read class names from a text resource of ``package``.

    Each line holds a class name optionally followed by ``,`` and trailing
    fields. Blank lines and lines starting with ``#`` or ``//`` are skipped.
    """
    text = resources.files(package).joinpath(resource_name).read_text(encoding="utf-8")
    names = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or line.startswith("//"):
            continue
        name = line.split(",", 1)[0].strip()
        if name:
            names.append(name.replace("/", "."))
    return names


class CoreSanctionedSerializablesService(SanctionedSerializablesService):
    def get_serialization_accept_list(self) -> List[str]:
        return load_class_names(__package__, CORE_RESOURCE)


class NumpySanctionedSerializablesService(SanctionedSerializablesService):
    def get_serialization_accept_list(self) -> List[str]:
        return [
            "numpy.ndarray",
            "numpy.dtype",
            "numpy.core.multiarray._reconstruct",
            "numpy.core.multiarray.scalar",
            "numpy._core.multiarray._reconstruct",
            "numpy._core.multiarray.scalar",
        ]


def load_sanctioned_class_names(services: Iterable[SanctionedSerializablesService]) -> FrozenSet[str]:
    if services is None:
        raise TypeError("services must not be None")
    names = set()
    for service in services:
        try:
            accept_list = service.get_serialization_accept_list()
        except OSError as e:
            raise FilterConfigurationError(
                f"Unable to load sanctioned serializables from {type(service).__name__}"
            ) from e
        names.update(accept_list)
        logger.info("%s sanctioned %d classes", type(service).__name__, len(accept_list))
    return frozenset(names)


def load_sanctioned_serializables_services() -> List[SanctionedSerializablesService]:
    """Instantiate every registered contributor.

    The core contributor is always included, and the numpy one when numpy is
    installed.
    """
    services = [CoreSanctionedSerializablesService()]
    if np is not None:
        services.append(NumpySanctionedSerializablesService())
    seen = {type(service) for service in services}
    for entry_point in metadata.entry_points(group=ENTRY_POINT_GROUP):
        try:
            service_class = entry_point.load()
            if service_class in seen:
                continue
            service = service_class()
        except Exception as e:
            raise FilterConfigurationError(
                f"Unable to load sanctioned serializables contributor {entry_point.name}"
            ) from e
        seen.add(service_class)
        services.append(service)
    return services
