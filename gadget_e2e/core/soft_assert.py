from __future__ import annotations

from typing import List, Tuple

from gadget_e2e.core.exceptions import SoftAssertionFailure


class SoftAssert:
    """
    check() は失敗しても raise しない。最後に assert_all() でまとめて判定する。
    """

    def __init__(self) -> None:
        self._records: List[Tuple[bool, str]] = []

    def check(self, condition: bool, message: str) -> bool:
        ok = bool(condition)
        self._records.append((ok, message))
        return ok

    @property
    def failures(self) -> List[str]:
        return [m for ok, m in self._records if not ok]

    def __len__(self) -> int:
        return len(self._records)

    def assert_all(self) -> None:
        failures = self.failures
        self._records.clear()
        if failures:
            raise SoftAssertionFailure(failures)
