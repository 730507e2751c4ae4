from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, List

BrowserKind = Literal["chrome", "firefox", "edge"]
StepStatus = Literal["passed", "failed", "skipped"]


@dataclass(frozen=True)
class Scenario:
    id: str
    name: str
    url: str
    expected_domain: str
    query: str
    price_min: int
    price_max: int
    top_count: int = 5


@dataclass(frozen=True)
class ProductRecord:
    name: str
    price: int


@dataclass
class StepResult:
    name: str
    status: StepStatus
    message: Optional[str] = None
    screenshot: Optional[Path] = None
    output: Any = None

    @property
    def passed(self) -> bool:
        return self.status == "passed"


@dataclass
class RunReport:
    results: List[StepResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return bool(self.results) and all(r.passed for r in self.results)

    @property
    def failed(self) -> List[StepResult]:
        return [r for r in self.results if r.status == "failed"]

    def summary(self) -> str:
        lines = []
        for i, r in enumerate(self.results, start=1):
            line = f"{i}. {r.name}: {r.status.upper()}"
            if r.message:
                line += f" ({r.message})"
            lines.append(line)
        return "\n".join(lines)
