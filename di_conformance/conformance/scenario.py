"""Interop matrix scenario groups.

A group holds one column per vendor. Each column has a setup step whose
result is handed to every test case of that column; a case passes unless it
raises a `BaseError`.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, NamedTuple, Optional, Sequence

from ..config.logging import context_vendor
from ..core.error import BaseError

LOGGER = logging.getLogger(__name__)

Setup = Callable[[], Awaitable[Any]]
CaseFunction = Callable[[Any], Any]


class CellResult(NamedTuple):
    """One cell of the interop matrix."""

    column: str
    row: str
    passed: bool
    reason: Optional[str] = None


class ScenarioCase(NamedTuple):
    """A titled test case run against the setup result of a column."""

    title: str
    run: CaseFunction


class VendorColumn:
    """The setup and test cases of one vendor."""

    def __init__(self, name: str, setup: Setup, cases: Sequence[ScenarioCase]):
        """Initialize the column."""
        self.name = name
        self.setup = setup
        self.cases = list(cases)

    async def run(self) -> List[CellResult]:
        """Run the setup, then each case in isolation."""
        try:
            state = await self.setup()
        except BaseError as err:
            LOGGER.error("Setup failed for %s: %s", self.name, err.roll_up)
            return [
                CellResult(self.name, case.title, False, err.roll_up)
                for case in self.cases
            ]

        cells = []
        for case in self.cases:
            try:
                result = case.run(state)
                if inspect.isawaitable(result):
                    await result
            except BaseError as err:
                LOGGER.info("%s failed for %s: %s", case.title, self.name, err.roll_up)
                cells.append(CellResult(self.name, case.title, False, err.roll_up))
            else:
                cells.append(CellResult(self.name, case.title, True))
        return cells


class ScenarioReport:
    """The cells produced by running a scenario group."""

    def __init__(self, group: "ScenarioGroup", cells: Sequence[CellResult] = ()):
        """Initialize the report."""
        self.title = group.title
        self.column_label = group.column_label
        self.row_label = group.row_label
        self.implemented = list(group.implemented)
        self.not_implemented = list(group.not_implemented)
        self.cells = list(cells)

    @property
    def passed(self) -> bool:
        """Whether every cell passed."""
        return all(cell.passed for cell in self.cells)

    def failures(self) -> List[CellResult]:
        """List the failed cells."""
        return [cell for cell in self.cells if not cell.passed]

    def columns(self) -> List[str]:
        """List the vendor columns in run order."""
        return list(dict.fromkeys(cell.column for cell in self.cells))

    def rows(self) -> List[str]:
        """List the test names in first-seen order."""
        return list(dict.fromkeys(cell.row for cell in self.cells))

    def matrix(self) -> Dict[str, Dict[str, CellResult]]:
        """Map each row to its cells by column."""
        matrix = {row: {} for row in self.rows()}
        for cell in self.cells:
            matrix[cell.row][cell.column] = cell
        return matrix

    def render(self) -> str:
        """Render the matrix as plain text."""
        columns = self.columns()
        header = [self.row_label, *columns]
        body = []
        for row, cells in self.matrix().items():
            body.append(
                [
                    row,
                    *(
                        "-"
                        if column not in cells
                        else ("PASS" if cells[column].passed else "FAIL")
                        for column in columns
                    ),
                ]
            )
        widths = [
            max(len(line[idx]) for line in [header, *body])
            for idx in range(len(header))
        ]

        def format_line(line):
            return " | ".join(value.ljust(width) for value, width in zip(line, widths))

        lines = [
            f"{self.title} ({self.column_label})",
            format_line(header),
            "-+-".join("-" * width for width in widths),
            *(format_line(line) for line in body),
        ]
        if self.not_implemented:
            lines.append(f"Not implemented: {', '.join(self.not_implemented)}")
        for cell in self.failures():
            lines.append(f"  {cell.column}: {cell.row} {cell.reason}")
        return "\n".join(lines)

    @property
    def as_dict(self) -> dict:
        """Serializable form of the report."""
        return {
            "title": self.title,
            "columnLabel": self.column_label,
            "rowLabel": self.row_label,
            "implemented": self.implemented,
            "notImplemented": self.not_implemented,
            "cells": [cell._asdict() for cell in self.cells],
        }


class ScenarioGroup:
    """A titled group of vendor columns producing an interop matrix."""

    def __init__(
        self,
        title: str,
        column_label: str,
        row_label: str = "Test Name",
        implemented: Sequence[str] = (),
        not_implemented: Sequence[str] = (),
    ):
        """Initialize the group."""
        self.title = title
        self.column_label = column_label
        self.row_label = row_label
        self.implemented = list(implemented)
        self.not_implemented = list(not_implemented)
        self.columns: List[VendorColumn] = []

    def add_vendor(
        self, name: str, setup: Setup, cases: Sequence[ScenarioCase]
    ) -> VendorColumn:
        """Add the column of a vendor."""
        column = VendorColumn(name, setup, cases)
        self.columns.append(column)
        return column

    async def run(self) -> ScenarioReport:
        """Run the vendor columns sequentially."""
        report = ScenarioReport(self)
        for column in self.columns:
            token = context_vendor.set(column.name)
            try:
                LOGGER.info("Running %s for %s", self.title, column.name)
                report.cells.extend(await column.run())
            finally:
                context_vendor.reset(token)
        return report

    def __repr__(self) -> str:
        """Return a human readable representation of the group."""
        return f"<ScenarioGroup({self.title!r}, columns={len(self.columns)})>"
