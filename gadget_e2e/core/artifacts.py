from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from playwright.sync_api import Page

from gadget_e2e.core.exceptions import DiagnosticIOFailure
from gadget_e2e.core.logging_config import get_logger

log = get_logger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d_%H%M%S"


@dataclass
class Artifacts:
    base_dir: Path
    last_path: Optional[Path] = field(default=None, init=False)

    @property
    def out_dir(self) -> Path:
        d = Path(self.base_dir)
        d.mkdir(parents=True, exist_ok=True)
        return d

    def path(self, label: str, ext: str = "png", now: Optional[datetime] = None) -> Path:
        ts = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
        return self.out_dir / f"{label}_{ts}.{ext}"

    def _write(self, dest: Path, data: bytes) -> None:
        try:
            dest.write_bytes(data)
        except OSError as e:
            raise DiagnosticIOFailure(f"cannot write {dest}: {e}") from e

    def screenshot(self, page: Page, label: str) -> Optional[Path]:
        """
        <label>_<yyyy-MM-dd_HHmmss>.png で保存。失敗してもログだけ（シナリオは落とさない）
        """
        try:
            dest = self.path(label)
            self._write(dest, page.screenshot())
        except Exception as e:
            log.error("screenshot '%s' failed: %s", label, e)
            return None
        self.last_path = dest
        log.info("Screenshot saved: %s", dest.resolve())
        return dest

    def save_debug(self, page: Page, label: str) -> Optional[Path]:
        # スクショ
        shot = self.screenshot(page, label)
        # HTML
        try:
            html = page.content()
            self.path(label, ext="html").write_text(html, encoding="utf-8")
        except Exception as e:
            log.error("html dump '%s' failed: %s", label, e)
        return shot
