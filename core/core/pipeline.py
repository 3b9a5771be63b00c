"""Pipeline step definitions.

A pipeline is an ordered sequence of steps built once by the driver before
anything runs. There are three kinds of step:

    DirectStep: run one command, streaming its output.
    ConditionalStep: capture a query, parse it, and run a follow-up command
        with the parsed items appended only if the parse found anything.
    BatchStep: capture a "list installed" query and run one update command
        per eligible package.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import ClassVar

from .models import Command, ParsedEntry

ParseRule = Callable[[str], list[str]]
EntryParseRule = Callable[[str], list[ParsedEntry]]
UpdateTemplate = Callable[[str], Command]


@dataclass(frozen=True)
class DirectStep:
    """Run a single command with live output."""

    name: str
    command: Command

    kind: ClassVar[str] = "direct"


@dataclass(frozen=True)
class ConditionalStep:
    """Run ``second_template`` with the items parsed from ``first``'s output.

    Attributes:
        name: Step name shown in summaries.
        first: Query command, run in capture mode.
        parse_rule: Turns the query output into the items to append.
        second_template: Command whose args get the parsed items appended.
    """

    name: str
    first: Command
    parse_rule: ParseRule
    second_template: Command

    kind: ClassVar[str] = "conditional"


@dataclass(frozen=True)
class BatchStep:
    """Expand a "list installed" query into one update command per package.

    Attributes:
        name: Step name shown in summaries.
        list_command: Query command, run in capture mode.
        parse_rule: Turns the query output into parsed entries.
        exclusions: Package names that must never be updated.
        update_template: Builds the update command for one package name.
    """

    name: str
    list_command: Command
    parse_rule: EntryParseRule
    update_template: UpdateTemplate
    exclusions: frozenset[str] = field(default_factory=frozenset)

    kind: ClassVar[str] = "batch"


Step = DirectStep | ConditionalStep | BatchStep
Pipeline = Sequence[Step]


def describe_step(step: Step) -> str:
    """Return a one-line description of what a step will run."""
    if isinstance(step, DirectStep):
        return str(step.command)
    if isinstance(step, ConditionalStep):
        return f"{step.first} | {step.second_template} <items>"
    excluded = ", ".join(sorted(step.exclusions))
    suffix = f" (excluding {excluded})" if excluded else ""
    return f"{step.list_command} | {step.update_template('<name>')}{suffix}"
