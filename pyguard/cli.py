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

"""Command line entry point for pyguard."""

import argparse
import sys
from typing import List, Optional

from pyguard.error import FilterConfigurationError, MalformedPatternError
from pyguard.filter.api import FilterInfo, Status, create_filter
from pyguard.filter.pattern import ManagementFilterPattern, SanctionedSerializablesFilterPattern
from pyguard.filter.proxy import SanctionedClassesFilter
from pyguard.filter.sanctioned import load_sanctioned_class_names, load_sanctioned_serializables_services
from pyguard.redaction import redact


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="pyguard",
        description="Deserialization filter and secret redaction tools",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    redact_parser = subparsers.add_parser(
        "redact",
        help="Redact sensitive option values from text",
    )
    redact_parser.add_argument(
        "text",
        nargs="*",
        metavar="TEXT",
        help="Text to redact, joined with spaces. Lines are read from stdin if omitted",
    )

    pattern_parser = subparsers.add_parser(
        "pattern",
        help="Print the serial filter pattern",
    )
    pattern_parser.add_argument(
        "--extra",
        default=None,
        metavar="PATTERN",
        help="Extra clauses appended before the final reject-all clause",
    )
    pattern_parser.add_argument(
        "--management",
        action="store_true",
        help="Print the management channel pattern instead",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Print the filter decision for a class name",
    )
    check_parser.add_argument(
        "class_name",
        metavar="CLASS_NAME",
        help="Fully qualified class name, e.g. collections.OrderedDict",
    )
    check_parser.add_argument(
        "--pattern",
        default=None,
        metavar="PATTERN",
        help="Extra clauses appended to the sanctioned serializables pattern",
    )

    return parser.parse_args(args)


def cmd_redact(args: argparse.Namespace) -> int:
    if args.text:
        print(redact(args.text))
        return 0
    for line in sys.stdin:
        print(redact(line.rstrip("\n")))
    return 0


def cmd_pattern(args: argparse.Namespace) -> int:
    if args.management:
        print(ManagementFilterPattern().pattern())
    else:
        print(SanctionedSerializablesFilterPattern().append(args.extra).pattern())
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    pattern = SanctionedSerializablesFilterPattern().append(args.pattern).pattern()
    try:
        sanctioned_classes = load_sanctioned_class_names(load_sanctioned_serializables_services())
        object_filter = SanctionedClassesFilter(create_filter(pattern), sanctioned_classes)
    except (MalformedPatternError, FilterConfigurationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    status = object_filter.check_input(FilterInfo(args.class_name))
    print(status.name)
    return 1 if status is Status.REJECTED else 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)

    if parsed.command is None:
        print("Usage: pyguard <command> [options]", file=sys.stderr)
        print("Commands: redact, pattern, check", file=sys.stderr)
        print("Use 'pyguard <command> --help' for more information", file=sys.stderr)
        return 1

    if parsed.command == "redact":
        return cmd_redact(parsed)
    if parsed.command == "pattern":
        return cmd_pattern(parsed)
    if parsed.command == "check":
        return cmd_check(parsed)

    return 0


if __name__ == "__main__":
    sys.exit(main())
