from __future__ import annotations

import enum
from typing import List, Optional


class UnsupportedConfiguration(ValueError):
    """ブラウザ種別やシナリオ設定が不正（実行前に落とす）"""


class ConditionTimeout(Exception):
    """明示的な待機・ポーリングがタイムアウトした"""


class TransientStaleness(Exception):
    """要素参照が DOM の再描画で無効になった（その場でリトライする）"""


class DiagnosticIOFailure(OSError):
    """スクショ保存の失敗。ログに出すだけでシナリオは落とさない"""


class SoftAssertionFailure(AssertionError):
    def __init__(self, failures: List[str]):
        self.failures = list(failures)
        lines = "\n".join(f"  - {m}" for m in self.failures)
        super().__init__(f"{len(self.failures)} soft assertion(s) failed:\n{lines}")


class RecoverableFault(enum.Enum):
    STALE_ELEMENT = "stale_element"


# Playwright のエラー文言で判定する（例外クラスは Error 一本なので）
_FAULT_MARKERS = {
    RecoverableFault.STALE_ELEMENT: (
        "not attached to the dom",
        "element is detached",
        "element handle is detached",
        "execution context was destroyed",
        "stale element",
    ),
}


def classify_fault(exc: BaseException) -> Optional[RecoverableFault]:
    if isinstance(exc, TransientStaleness):
        return RecoverableFault.STALE_ELEMENT
    msg = str(exc).lower()
    for tag, markers in _FAULT_MARKERS.items():
        if any(m in msg for m in markers):
            return tag
    return None
