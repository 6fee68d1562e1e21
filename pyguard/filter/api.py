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

"""Uniform access to the interpreter's deserialization guard.

Two mechanisms can enforce a class filter on :mod:`pickle`:

- ``find_class``: every :class:`~pyguard.filter.stream.FilteringUnpickler`
  consults its filter before resolving a global. The process-wide filter is only
  the initial filter of new filtering unpicklers.
- audit hooks: a hook on the ``pickle.find_class`` event checks every unpickler
  in the process, filtering or not, against the process-wide filter.

:class:`ObjectInputFilterApiFactory` picks the richer mechanism available and
raises :class:`~pyguard.error.UnsupportedFilterError` when there is none.
"""

import dataclasses
import enum
import logging
import pickle
import sys
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple, Union

from pyguard.error import InvalidClassError, MalformedPatternError, UnsupportedFilterError
from pyguard.filter.state import PROCESS_FILTER_STATE, GlobalFilterState

logger = logging.getLogger(__name__)

ARRAY_SUFFIX = "[]"
FIND_CLASS_EVENT = "pickle.find_class"


class Status(enum.Enum):
    UNDECIDED = "UNDECIDED"
    ALLOWED = "ALLOWED"
    REJECTED = "REJECTED"


def qualified_name(cls: Union[type, str]) -> str:
    if isinstance(cls, str):
        return cls
    return f"{cls.__module__}.{cls.__qualname__}"


@dataclasses.dataclass(frozen=True)
class FilterInfo:
    """A candidate for reconstruction.

    ``serial_class`` is a type or its dotted name, or None when the check is not
    about a class. Array-like candidates carry their element in
    ``component_type``, or use a name ending in ``[]``.
    """

    serial_class: Union[type, str, None] = None
    component_type: Union[type, str, None] = None
    array_length: int = -1

    @property
    def class_name(self) -> Optional[str]:
        if self.serial_class is None:
            return None
        return qualified_name(self.serial_class)

    def is_array(self) -> bool:
        name = self.class_name
        return self.component_type is not None or (name is not None and name.endswith(ARRAY_SUFFIX))

    def element_name(self) -> Optional[str]:
        """Name of the class to check: the element type for arrays, else the class itself."""
        if self.component_type is not None:
            name = qualified_name(self.component_type)
        else:
            name = self.class_name
            if name is None:
                return None
        while name.endswith(ARRAY_SUFFIX):
            name = name[: -len(ARRAY_SUFFIX)]
        return name


class ObjectInputFilter(ABC):
    @abstractmethod
    def check_input(self, info: FilterInfo) -> Status:
        pass


_EXACT, _MODULE, _PACKAGE, _PREFIX, _ANY = range(5)


def _parse_clause(clause: str) -> Tuple[bool, int, str]:
    if any(ch.isspace() for ch in clause) or "/" in clause or "=" in clause:
        raise MalformedPatternError(f"Malformed filter clause {clause!r}")
    reject = clause.startswith("!")
    name = clause[1:] if reject else clause
    if not name:
        raise MalformedPatternError(f"Malformed filter clause {clause!r}")
    if name == "*":
        kind, body = _ANY, ""
    elif name.endswith(".**"):
        kind, body = _PACKAGE, name[:-2]
    elif name.endswith(".*"):
        kind, body = _MODULE, name[:-1]
    elif name.endswith("*"):
        kind, body = _PREFIX, name[:-1]
    else:
        kind, body = _EXACT, name
    if "*" in body or "!" in body:
        raise MalformedPatternError(f"Malformed filter clause {clause!r}")
    return reject, kind, body


def _clause_matches(kind: int, body: str, name: str) -> bool:
    if kind == _EXACT:
        return name == body
    if kind == _MODULE:
        return name.startswith(body) and "." not in name[len(body) :]
    if kind == _ANY:
        return True
    # packages and plain prefixes
    return name.startswith(body)


class PatternFilter(ObjectInputFilter):
    """Decides by the first clause of an accept/reject pattern matching the class name.

    Clauses are separated by ``;``:

    - ``pkg.Name`` matches that class only
    - ``pkg.*`` matches classes of module ``pkg``
    - ``pkg.**`` matches classes of ``pkg`` and all of its submodules
    - ``prefix*`` matches names starting with ``prefix``
    - ``*`` matches everything

    A leading ``!`` turns an accepting clause into a rejecting one. A class no
    clause matches is left undecided.
    """

    def __init__(self, pattern: str):
        self.pattern = pattern
        self._clauses: List[Tuple[bool, int, str]] = [
            _parse_clause(clause) for clause in pattern.split(";") if clause.strip()
        ]

    def check_input(self, info: FilterInfo) -> Status:
        name = info.element_name()
        if name is None:
            return Status.UNDECIDED
        for reject, kind, body in self._clauses:
            if _clause_matches(kind, body, name):
                return Status.REJECTED if reject else Status.ALLOWED
        return Status.UNDECIDED

    def __repr__(self):
        return f"PatternFilter({self.pattern!r})"


def create_filter(pattern: str) -> PatternFilter:
    if pattern is None:
        raise TypeError("pattern must not be None")
    return PatternFilter(pattern)


class ObjectInputFilterApi(ABC):
    """Version-agnostic operations on process-wide and per-unpickler filters."""

    def __init__(self, state: GlobalFilterState = PROCESS_FILTER_STATE):
        self.state = state

    def create_object_input_filter(self, pattern: str) -> ObjectInputFilter:
        return create_filter(pattern)

    def get_serial_filter(self) -> Optional[ObjectInputFilter]:
        return self.state.filter

    @abstractmethod
    def set_serial_filter(self, object_filter: ObjectInputFilter):
        """Install the process-wide filter.

        Raises FilterAlreadySetError if one is already installed.
        """

    def get_object_input_filter(self, stream) -> Optional[ObjectInputFilter]:
        return getattr(stream, "object_input_filter", None)

    def set_object_input_filter(self, stream, object_filter: ObjectInputFilter):
        if not hasattr(stream, "object_input_filter"):
            raise TypeError(f"{type(stream).__name__} does not support per-stream filters, use FilteringUnpickler")
        stream.object_input_filter = object_filter


class FindClassObjectInputFilterApi(ObjectInputFilterApi):
    def set_serial_filter(self, object_filter: ObjectInputFilter):
        self.state.install(object_filter)


class AuditHookObjectInputFilterApi(ObjectInputFilterApi):
    def __init__(self, state: GlobalFilterState = PROCESS_FILTER_STATE, add_audit_hook: Callable = None):
        super().__init__(state)
        self._add_audit_hook = add_audit_hook or sys.addaudithook

    def set_serial_filter(self, object_filter: ObjectInputFilter):
        self.state.install(object_filter, enforce=self._enforce)

    def _enforce(self, state: GlobalFilterState):
        # audit hooks can't be removed; the hook reads the filter at call time
        def audit_hook(event, args):
            if event != FIND_CLASS_EVENT:
                return
            object_filter = state.filter
            if object_filter is None:
                return
            module, name = args
            candidate = f"{module}.{name}"
            if object_filter.check_input(FilterInfo(candidate)) is Status.REJECTED:
                raise InvalidClassError(candidate)

        self._add_audit_hook(audit_hook)
        logger.debug("Installed %s audit hook", FIND_CLASS_EVENT)


def _has_audit_hooks() -> bool:
    return hasattr(sys, "addaudithook")


def _has_find_class() -> bool:
    return hasattr(pickle.Unpickler, "find_class")


class ObjectInputFilterApiFactory:
    """Chooses the deserialization guard backing available in this interpreter.

    The probes are evaluated on every call, so tests can substitute them.
    """

    def __init__(
        self,
        state: GlobalFilterState = PROCESS_FILTER_STATE,
        has_audit_hooks: Callable[[], bool] = _has_audit_hooks,
        has_find_class: Callable[[], bool] = _has_find_class,
    ):
        self._state = state
        self._has_audit_hooks = has_audit_hooks
        self._has_find_class = has_find_class

    def is_supported(self) -> bool:
        return self._has_audit_hooks() or self._has_find_class()

    def create_object_input_filter_api(self) -> ObjectInputFilterApi:
        if self._has_audit_hooks():
            return AuditHookObjectInputFilterApi(self._state)
        if self._has_find_class():
            return FindClassObjectInputFilterApi(self._state)
        raise UnsupportedFilterError(
            "No deserialization guard is available: this interpreter supports neither "
            f"{FIND_CLASS_EVENT} audit hooks nor Unpickler.find_class overrides"
        )


def supports_object_input_filter(factory: ObjectInputFilterApiFactory = None) -> bool:
    return (factory or ObjectInputFilterApiFactory()).is_supported()
