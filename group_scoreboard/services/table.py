"""Read-only HTML table projection of a scoreboard snapshot."""

from __future__ import annotations

import asyncio
import os
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import TYPE_CHECKING

from group_scoreboard.errors import PersistenceError
from group_scoreboard.services.normalize import now_iso, safe_number

if TYPE_CHECKING:
    from group_scoreboard.services.scoreboard import Snapshot

TITLE = "טבלת משתתפים"
EMPTY_ROW = '<tr><td colspan="7">אין נתונים עדיין</td></tr>'
COLUMNS = ("משתתף", "הושלמו", "טעויות", "זמן אחרון", "הכי מהיר", "משחקון", "עודכן")

_PAGE = """<!doctype html>
<html lang="he" dir="rtl">
<head>
<meta charset="utf-8"/>
<meta name="viewport" content="width=device-width,initial-scale=1"/>
<title>{title}</title>
<style>
body{{font-family:Arial,sans-serif;margin:24px;background:#111;color:#fff}}
h1{{margin:0 0 12px}}
small{{color:#bbb}}
table{{width:100%;border-collapse:collapse;background:#1b1b1b}}
th,td{{border:1px solid #333;padding:10px;text-align:center;white-space:nowrap}}
th{{background:#272727}}
</style>
</head>
<body>
<h1>{title}</h1>
<small>עודכן: {rendered_at}</small>
<table>
<thead>
<tr>
{headers}
</tr>
</thead>
<tbody>{rows}
</tbody>
</table>
</body>
</html>"""


def format_duration(ms: object) -> str:
    value = safe_number(ms)
    if value <= 0:
        return "-"
    return f"{value / 1000:.1f}s"


def format_updated(value: object) -> str:
    if not value:
        return "-"
    try:
        moment = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return "-"
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%d.%m.%Y, %H:%M:%S")


def _row(participant) -> str:
    cells = (
        participant.name,
        safe_number(participant.completed_rounds),
        safe_number(participant.total_mistakes),
        format_duration(participant.last_round_ms),
        format_duration(participant.best_round_ms),
        participant.current_mini_game or "-",
        format_updated(participant.updated_at),
    )
    return "\n      <tr>\n" + "".join(f"        <td>{escape(str(cell))}</td>\n" for cell in cells) + "      </tr>"


def render_table(snapshot: Snapshot, rendered_at: str | None = None) -> str:
    rows = "".join(_row(p) for p in snapshot.participants) or EMPTY_ROW
    return _PAGE.format(
        title=TITLE,
        rendered_at=escape(format_updated(rendered_at or now_iso())),
        headers="\n".join(f"<th>{escape(column)}</th>" for column in COLUMNS),
        rows=rows,
    )


class TableFileWriter:
    def __init__(self, path: str | os.PathLike[str]):
        self.path = Path(path)

    async def write(self, snapshot: Snapshot) -> None:
        await asyncio.to_thread(self._write_sync, render_table(snapshot))

    def _write_sync(self, html: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(html, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc
