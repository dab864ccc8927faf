"""Resolution of symbolic jump targets in XSM assembly."""

from __future__ import annotations

import re
from os import PathLike
from typing import Iterable, Iterator, Mapping

from .disk import XSM_INSTRUCTION_SIZE

_OPERAND_SEPARATORS = re.compile(r"[ ,]+")
_JUMPS = {"JMP", "CALL"}
_CONDITIONAL_JUMPS = {"JNZ", "JZ"}


class LabelError(Exception):
    """A label could not be resolved or a file could not be used."""


def _strip_newline(line: str) -> str:
    return line.split("\n", 1)[0]


def is_label(line: str) -> bool:
    """Return True if the line is a label definition (ends with a colon)."""
    return line.endswith(":")


def label_name(line: str) -> str:
    """Return the name defined by a label line."""
    return next((part for part in line.split(":") if part), "")


def is_charstring(text: str | None) -> bool:
    """Return True if the text holds at least one ASCII letter."""
    if text is None:
        return False
    return any(char.isascii() and char.isalpha() for char in text)


def collect_labels(lines: Iterable[str]) -> dict[str, int]:
    """Map each label to the address of the instruction that follows it.

    Every line that is not a label counts as one instruction. When a label
    is defined twice, the later definition wins.
    """
    labels: dict[str, int] = {}
    address = 0
    for raw in lines:
        line = _strip_newline(raw)
        if is_label(line):
            labels[label_name(line)] = address
        else:
            address += XSM_INSTRUCTION_SIZE
    return labels


def resolve_lines(
    lines: Iterable[str], labels: Mapping[str, int], base_address: int
) -> Iterator[str]:
    """Yield the code lines with label targets of jumps and calls replaced.

    Label definitions and empty lines are dropped. A target that names an
    unknown label raises LabelError; lines already yielded stay valid.
    """
    for raw in lines:
        line = _strip_newline(raw)
        if not line or is_label(line):
            continue
        tokens = [token for token in _OPERAND_SEPARATORS.split(line) if token]
        if not tokens:
            yield line
            continue
        opcode = tokens[0]
        left = tokens[1] if len(tokens) > 1 else None
        right = tokens[2] if len(tokens) > 2 else None
        kind = opcode.upper()
        if kind in _JUMPS:
            right, left, separator = left, "", ""
        elif kind in _CONDITIONAL_JUMPS:
            separator = ", "
        else:
            yield line
            continue
        if not is_charstring(right):
            yield line
            continue
        address = labels.get(right)
        if address is None or address < 0:
            raise LabelError(f'Can not resolve label "{right}".')
        yield f"{opcode} {left or ''}{separator}{address + base_address}"


def resolve_file(
    source: str | PathLike, destination: str | PathLike, base_address: int
) -> None:
    """Write a copy of an assembly file with its labels resolved."""
    try:
        with open(source, encoding="latin-1", newline="\n") as stream:
            lines = stream.readlines()
    except OSError as error:
        raise LabelError("Can't open source file.") from error
    labels = collect_labels(lines)
    try:
        output = open(destination, "w", encoding="latin-1", newline="\n")
    except OSError as error:
        raise LabelError("Can't create temporary file.") from error
    with output:
        for line in resolve_lines(lines, labels, base_address):
            output.write(line + "\n")