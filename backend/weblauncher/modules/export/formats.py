"""导出格式渲染

每个渲染函数接收已经筛选、排序好的 ExportRecord 列表和导出时间，
在内存中生成完整文档并返回 bytes。
"""
import base64
import csv
import html
import io
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape as xml_escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from ...utils.collation import category_sort_key

EXPORT_TITLE = "WebLauncher Export"
EMPTY_NOTICE = "No URLs to export."
UNTITLED = "Untitled"
JSON_EXPORT_VERSION = "1.0"
CSV_HEADER = ["Description", "URL", "Categories", "Pinned", "Created"]
CSV_BOM = "\ufeff"

_PIN_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16" viewBox="0 0 16 16">'
    '<path fill="#d9534f" d="M9.8 1 15 6.2l-1.4 1.4-1-.9-3 3 .3 3.3-1.4 1.4-3-3L1 15l-.1-.1L4.4 '
    '11 1.6 8.1 3 6.7l3.3.3 3-3-.9-1z"/></svg>'
)
PINNED_ICON = "data:image/svg+xml;base64," + base64.b64encode(_PIN_SVG.encode()).decode("ascii")


@dataclass
class ExportRecord:
    """导出用的书签快照（分类名已解析，保持分配顺序）"""
    description: str
    url: str
    categories: List[str] = field(default_factory=list)
    pinned: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_bookmark(cls, bookmark: Any) -> "ExportRecord":
        return cls(
            description=bookmark.description or "",
            url=bookmark.url or "",
            categories=[category.name for category in bookmark.categories],
            pinned=bool(bookmark.pinned),
            created_at=bookmark.created_at,
            updated_at=bookmark.updated_at,
        )

    @property
    def title(self) -> str:
        return self.description or UNTITLED


# ==================== 日期格式 ====================

def format_date(value: Optional[datetime]) -> str:
    """M/D/YYYY"""
    if value is None:
        return ""
    return f"{value.month}/{value.day}/{value.year}"


def format_datetime(value: datetime) -> str:
    """M/D/YYYY, h:mm:ss AM"""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{format_date(value)}, {hour}:{value.minute:02d}:{value.second:02d} {suffix}"


def format_iso(value: Optional[datetime]) -> Optional[str]:
    """UTC ISO-8601，毫秒精度，Z 结尾"""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


def epoch_seconds(value: Optional[datetime]) -> int:
    """存储的是 naive UTC 时间"""
    if value is None:
        return 0
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


# ==================== PDF ====================

_PDF_STYLES = {
    "title": ParagraphStyle("ExportTitle", fontName="Helvetica", fontSize=20, leading=24, alignment=TA_CENTER),
    "subtitle": ParagraphStyle("ExportSubtitle", fontName="Helvetica", fontSize=12, leading=15, alignment=TA_CENTER),
    "empty": ParagraphStyle("ExportEmpty", fontName="Helvetica", fontSize=14, leading=17, alignment=TA_CENTER),
    "heading": ParagraphStyle("BookmarkTitle", fontName="Helvetica-Bold", fontSize=14, leading=17),
    "link": ParagraphStyle("BookmarkUrl", fontName="Helvetica", fontSize=10, leading=13, textColor=colors.blue),
    "categories": ParagraphStyle("BookmarkCategories", fontName="Helvetica", fontSize=9, leading=12, textColor=colors.gray),
    "pinned": ParagraphStyle("BookmarkPinned", fontName="Helvetica", fontSize=9, leading=12, textColor=colors.blue),
    "created": ParagraphStyle("BookmarkCreated", fontName="Helvetica", fontSize=8, leading=11, textColor=colors.gray),
}


def render_pdf(records: List[ExportRecord], exported_at: datetime) -> bytes:
    """PDF：先在内存中完整生成，再交给响应"""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=LETTER,
        leftMargin=50,
        rightMargin=50,
        topMargin=50,
        bottomMargin=50,
        title=EXPORT_TITLE,
    )

    story = [
        Paragraph(EXPORT_TITLE, _PDF_STYLES["title"]),
        Spacer(1, 12),
        Paragraph(f"Exported: {format_datetime(exported_at)}", _PDF_STYLES["subtitle"]),
        Spacer(1, 24),
    ]

    if not records:
        story.append(Paragraph(EMPTY_NOTICE, _PDF_STYLES["empty"]))

    for index, record in enumerate(records):
        if index > 0:
            story.append(Spacer(1, 12))

        href = xml_escape(record.url, {'"': "&quot;"})
        story.append(Paragraph(xml_escape(record.title), _PDF_STYLES["heading"]))
        story.append(Paragraph(
            f'<link href="{href}" color="blue"><u>{xml_escape(record.url)}</u></link>',
            _PDF_STYLES["link"],
        ))
        if record.categories:
            names = xml_escape(", ".join(record.categories))
            story.append(Paragraph(f"Categories: {names}", _PDF_STYLES["categories"]))
        if record.pinned:
            story.append(Paragraph("Pinned", _PDF_STYLES["pinned"]))
        story.append(Paragraph(f"Created: {format_date(record.created_at)}", _PDF_STYLES["created"]))

    doc.build(story)
    return buffer.getvalue()


# ==================== Markdown ====================

def render_markdown(records: List[ExportRecord], exported_at: datetime) -> bytes:
    lines = [
        f"# {EXPORT_TITLE}",
        "",
        f"**Exported:** {format_datetime(exported_at)}",
        "",
        f"**Total URLs:** {len(records)}",
        "",
        "---",
        "",
    ]

    if not records:
        lines += [f"*{EMPTY_NOTICE}*", ""]

    for index, record in enumerate(records, start=1):
        lines += [f"## {index}. {record.title}", "", f"**URL:** [{record.url}]({record.url})", ""]
        if record.categories:
            lines += [f"**Categories:** {', '.join(record.categories)}", ""]
        if record.pinned:
            lines += ["**Status:** 📌 Pinned", ""]
        lines += [f"**Created:** {format_date(record.created_at)}", "", "---", ""]

    return "\n".join(lines).encode("utf-8")


# ==================== CSV ====================

def render_csv(records: List[ExportRecord], exported_at: datetime) -> bytes:
    """所有字段加双引号，内部引号加倍；带 BOM 便于 Excel 打开

    行之间用 \\n 分隔，最后一行后面没有换行。
    """
    buffer = io.StringIO()
    buffer.write(CSV_BOM)
    buffer.write(",".join(CSV_HEADER) + "\n")

    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for record in records:
        writer.writerow([
            record.title,
            record.url,
            "; ".join(record.categories),
            "Yes" if record.pinned else "No",
            format_date(record.created_at),
        ])

    # 末尾字符总是最后一行的 "\n"
    return buffer.getvalue()[:-1].encode("utf-8")


# ==================== JSON ====================

def render_json(records: List[ExportRecord], exported_at: datetime) -> bytes:
    envelope = {
        "version": JSON_EXPORT_VERSION,
        "exportedAt": format_iso(exported_at),
        "total": len(records),
        "bookmarks": [
            {
                "description": record.description,
                "url": record.url,
                "categories": list(record.categories),
                "pinned": record.pinned,
                "createdAt": format_iso(record.created_at),
                "updatedAt": format_iso(record.updated_at),
            }
            for record in records
        ],
    }
    return json.dumps(envelope, ensure_ascii=False, indent=2).encode("utf-8")


# ==================== Netscape HTML ====================

def _html_link(record: ExportRecord, indent: str) -> str:
    attrs = [
        f'HREF="{html.escape(record.url, quote=True)}"',
        f'ADD_DATE="{epoch_seconds(record.created_at)}"',
        f'LAST_MODIFIED="{epoch_seconds(record.updated_at or record.created_at)}"',
    ]
    if record.pinned:
        attrs.append(f'ICON="{PINNED_ICON}"')
    return f'{indent}<DT><A {" ".join(attrs)}>{html.escape(record.title)}</A>'


def render_html(records: List[ExportRecord], exported_at: datetime) -> bytes:
    """浏览器书签文件格式

    每个书签只放在它的第一个分类文件夹下，避免重复；
    文件夹按分类名排序，未分类书签放在所有文件夹之后的顶层。
    """
    folders: Dict[str, List[ExportRecord]] = {}
    uncategorized: List[ExportRecord] = []
    for record in records:
        if record.categories:
            folders.setdefault(record.categories[0], []).append(record)
        else:
            uncategorized.append(record)

    stamp = epoch_seconds(exported_at)
    lines = [
        "<!DOCTYPE NETSCAPE-Bookmark-file-1>",
        "<!-- This is an automatically generated file.",
        "     It will be read and overwritten.",
        "     DO NOT EDIT! -->",
        '<META HTTP-EQUIV="Content-Type" CONTENT="text/html; charset=UTF-8">',
        "<TITLE>Bookmarks</TITLE>",
        "<H1>Bookmarks</H1>",
        "<DL><p>",
    ]

    for name in sorted(folders, key=category_sort_key):
        lines.append(f'    <DT><H3 ADD_DATE="{stamp}" LAST_MODIFIED="{stamp}">{html.escape(name)}</H3>')
        lines.append("    <DL><p>")
        lines.extend(_html_link(record, " " * 8) for record in folders[name])
        lines.append("    </DL><p>")

    lines.extend(_html_link(record, " " * 4) for record in uncategorized)
    lines.append("</DL><p>")

    return ("\n".join(lines) + "\n").encode("utf-8")
