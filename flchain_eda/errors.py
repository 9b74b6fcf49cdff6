"""Exceptions raised when the FLC table or a derived table breaks an assumption."""

from typing import Iterable, Optional, Sequence


class FlchainAnalysisError(Exception):
    """Base class for every failure raised by the analysis pipeline."""


class SchemaError(FlchainAnalysisError, ValueError):
    """An expected column is missing, has the wrong type or holds an unknown code."""

    def __init__(self, message: str, columns: Optional[Iterable[str]] = None):
        self.columns = list(columns) if columns is not None else []
        super().__init__(message)


class AssumptionError(FlchainAnalysisError, ValueError):
    """A data assumption the report relies on does not hold."""


class IntegralityError(AssumptionError):
    def __init__(self, column: str, values: Sequence):
        self.column = column
        self.values = list(values)
        preview = ", ".join(repr(v) for v in self.values[:5])
        super().__init__(
            f"Column '{column}' is expected to hold whole numbers but has "
            f"{len(self.values)} non-integral or missing value(s): {preview}"
        )


class UndefinedRatioError(AssumptionError):
    def __init__(self, n_rows: int):
        self.n_rows = n_rows
        super().__init__(f"flc_ratio is undefined for {n_rows} row(s) with lambda == 0")


class DegenerateRegressionError(FlchainAnalysisError, ValueError):
    """The group table cannot support a two-parameter linear fit."""
