"""
resource_usage.report — per-contract resource usage tables.

Pipeline:

    ResultStatistics --load_table_data--> [FuncTableData]   (limit != 0 rows)
                     --build_report-----> ContractReport    (cells classified)
                     --render_report----> rich.table.Table

Every avg / max / min / sum cell is classified against the row's limit with
the configured cursor pair. Rows whose limit is 0 never reach the table.

Layout (six columns, no header)::

    |                  |            | Resource Usage Table |       |     |     |
    | Highlight Color  |            | Warning: 80% - 100%  |       | Error: Over 100% |
    | Contract         |            | C...                 |       |     |     |
    | Function         | swap       |                      | Times | 5   |     |
    | Resource         | Limitation | Avg                  | Max   | Min | Sum |
    | cpu_insns        | 50000000   | 34000000.00          | ...               |
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .classify import DEFAULT_CURSORS, LimitsCursors, Severity, classify
from .config import MetricLimits, ReportConfig
from .metric import METRIC_KEYS
from .statistics import ContractStatistics, MetricStatistics, ResultStatistics

Number = Union[int, float]

TITLE = "Resource Usage Table"

_HEADER_STYLE = "bold cyan"
_SEVERITY_STYLES = {
    Severity.NORMAL: "",
    Severity.DANGER: "bold yellow",
    Severity.ERROR: "bold red",
}

LimitsLike = Union[MetricLimits, Mapping[str, int]]


# ---------------------------------------------------------------------------
# Table data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TableRow:
    key: str
    limit: int
    stats: MetricStatistics


@dataclass(frozen=True)
class FuncTableData:
    func: str
    times: int
    rows: Tuple[TableRow, ...] = ()


def load_table_data(contract_stats: ContractStatistics, limits: LimitsLike) -> List[FuncTableData]:
    """Rows per function, sorted by function name; zero / unknown limits are skipped."""
    out: List[FuncTableData] = []
    for func in sorted(contract_stats):
        data = contract_stats[func]
        rows: List[TableRow] = []
        for key in METRIC_KEYS:
            stat = data.metrics.get(key)
            if stat is None:
                continue
            limit = int(limits.get(key) or 0)
            if limit == 0:
                continue
            rows.append(TableRow(key=key, limit=limit, stats=stat))
        out.append(FuncTableData(func=func, times=data.times, rows=tuple(rows)))
    return out


# ---------------------------------------------------------------------------
# Classified report
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Cell:
    value: Number
    severity: Severity

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "severity": self.severity.value}


@dataclass(frozen=True)
class MetricRow:
    key: str
    limit: int
    avg: Cell
    max: Cell
    min: Cell
    sum: Cell

    def cells(self) -> Tuple[Cell, Cell, Cell, Cell]:
        return (self.avg, self.max, self.min, self.sum)

    @property
    def worst(self) -> Severity:
        sev = {c.severity for c in self.cells()}
        if Severity.ERROR in sev:
            return Severity.ERROR
        if Severity.DANGER in sev:
            return Severity.DANGER
        return Severity.NORMAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "limit": self.limit,
            "avg": self.avg.to_dict(),
            "max": self.max.to_dict(),
            "min": self.min.to_dict(),
            "sum": self.sum.to_dict(),
        }


@dataclass(frozen=True)
class FunctionReport:
    func: str
    times: int
    rows: Tuple[MetricRow, ...] = ()

    def row(self, key: str) -> Optional[MetricRow]:
        for r in self.rows:
            if r.key == key:
                return r
        return None


@dataclass(frozen=True)
class ContractReport:
    contract_id: str
    functions: Tuple[FunctionReport, ...] = field(default_factory=tuple)

    def function(self, name: str) -> Optional[FunctionReport]:
        for f in self.functions:
            if f.func == name:
                return f
        return None

    def has_severity(self, severity: Severity) -> bool:
        return any(
            c.severity is severity for f in self.functions for r in f.rows for c in r.cells()
        )

    @property
    def has_errors(self) -> bool:
        return self.has_severity(Severity.ERROR)


def _metric_row(row: TableRow, cursors: LimitsCursors) -> MetricRow:
    def cell(v: Number) -> Cell:
        return Cell(v, classify(v, row.limit, cursors))

    s = row.stats
    return MetricRow(
        key=row.key,
        limit=row.limit,
        avg=cell(s.avg),
        max=cell(s.max),
        min=cell(s.min),
        sum=cell(s.sum),
    )


def build_report(
    contract_id: str,
    contract_stats: ContractStatistics,
    limits: LimitsLike,
    cursors: LimitsCursors = DEFAULT_CURSORS,
) -> ContractReport:
    functions = tuple(
        FunctionReport(
            func=fd.func,
            times=fd.times,
            rows=tuple(_metric_row(r, cursors) for r in fd.rows),
        )
        for fd in load_table_data(contract_stats, limits)
    )
    return ContractReport(contract_id=contract_id, functions=functions)


def build_reports(statistics: ResultStatistics, config: ReportConfig) -> List[ContractReport]:
    """One report per contract with at least one function, sorted by contract id."""
    return [
        build_report(cid, statistics[cid], config.limits, config.cursors)
        for cid in sorted(statistics)
        if statistics[cid]
    ]


def report_to_dict(report: ContractReport) -> Dict[str, Any]:
    return {
        "contract": report.contract_id,
        "functions": [
            {
                "function": f.func,
                "times": f.times,
                "rows": [r.to_dict() for r in f.rows],
            }
            for f in report.functions
        ],
    }


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _head(s: str) -> Text:
    return Text(s, style=_HEADER_STYLE)


def _fmt(cell: Cell) -> Text:
    v = cell.value
    s = f"{v:.2f}" if isinstance(v, float) else str(v)
    return Text(s, style=_SEVERITY_STYLES[cell.severity])


def render_report(report: ContractReport, cursors: LimitsCursors = DEFAULT_CURSORS) -> Table:
    t = Table(box=box.SQUARE, show_header=False, show_lines=True)
    for _ in range(6):
        t.add_column()

    t.add_row("", "", Text(TITLE, style=_HEADER_STYLE, justify="center"), "", "", "")
    t.add_row(
        _head("Highlight Color"),
        "",
        Text(
            f"Warning: {int(cursors.danger_percent)}% - {int(cursors.error_percent)}%",
            style=_SEVERITY_STYLES[Severity.DANGER],
            justify="center",
        ),
        "",
        Text(
            f"Error: Over {int(cursors.error_percent)}%",
            style=_SEVERITY_STYLES[Severity.ERROR],
            justify="center",
        ),
        "",
    )
    t.add_row(_head("Contract"), "", report.contract_id, "", "", "")

    for f in report.functions:
        t.add_row(_head("Function"), f.func, "", _head("Times"), str(f.times), "")
        t.add_row(*(_head(h) for h in ("Resource", "Limitation", "Avg", "Max", "Min", "Sum")))
        for r in f.rows:
            t.add_row(_head(r.key), str(r.limit), *(_fmt(c) for c in r.cells()))
    return t


def print_report(
    report: ContractReport,
    cursors: LimitsCursors = DEFAULT_CURSORS,
    console: Optional[Console] = None,
) -> None:
    (console or Console()).print(render_report(report, cursors))


def print_reports(
    reports: Sequence[ContractReport],
    cursors: LimitsCursors = DEFAULT_CURSORS,
    console: Optional[Console] = None,
) -> None:
    console = console or Console()
    for r in reports:
        print_report(r, cursors, console)


__all__ = [
    "TITLE",
    "TableRow",
    "FuncTableData",
    "Cell",
    "MetricRow",
    "FunctionReport",
    "ContractReport",
    "load_table_data",
    "build_report",
    "build_reports",
    "report_to_dict",
    "render_report",
    "print_report",
    "print_reports",
]
