"""分类名排序规则

与平台默认的字符串比较无关，显式实现：
- 忽略大小写
- 数字按数值比较（"Item 2" < "Item 10"）
- 重音字符先按基本字母比较，基本字母相同时再区分重音
"""
import re
import unicodedata
from typing import Iterable, List, Tuple, TypeVar

T = TypeVar("T")

_DIGITS = re.compile(r"(\d+)")


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def _chunks(text: str) -> Tuple[Tuple[int, int, str], ...]:
    """拆成 (类型, 数值, 文本) 片段，数字片段排在文本片段之前"""
    parts = []
    for part in _DIGITS.split(text):
        if not part:
            continue
        # "²" 之类 isdigit() 为真但 int() 无法解析，只按 \d 划分数字
        if _DIGITS.fullmatch(part):
            parts.append((0, int(part), ""))
        else:
            parts.append((1, 0, part))
    return tuple(parts)


def category_sort_key(name: str) -> tuple:
    """分类名比较键"""
    folded = (name or "").strip().casefold()
    return (
        _chunks(_strip_accents(folded)),  # 基本字母
        _chunks(folded),                  # 重音
        name or "",                       # 最后按原文保证稳定
    )


def sort_by_name(items: Iterable[T], key=lambda item: item.name) -> List[T]:
    """按分类名排序任意对象"""
    return sorted(items, key=lambda item: category_sort_key(key(item)))
