"""
种子模型

职责：
- 保存唯一的种子字符串（不可变），
- 用固定的结构化正则把种子拆分为 name / attributes / content 三个字段，
- 记录每个字段在种子中的下标区间，供变异器按区间回写（而不是按文本查找替换）。

若种子不匹配结构化模式，`decompose()` 抛出 `SeedMismatch`，调用方应视为致命错误。
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Pattern

# <name attributes>content</name>，闭合标签通过反向引用与开标签名一致
HTML_PATTERN = re.compile(r"<(\w+)([^>]*)>(.*?)</\1>")

# 变异器可选的目标字段；"seed" 表示整条种子
FIELD_NAMES = ("name", "attributes", "content")
SEED_FIELD = "seed"


class SeedMismatch(ValueError):
    """种子不符合结构化模式。"""


@dataclass(frozen=True)
class FieldSpan:
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class StructuralFields:
    """从种子中拆出的三个结构化字段及其区间。"""

    name: str
    attributes: str
    content: str
    spans: Dict[str, FieldSpan]

    def get(self, field: str) -> str:
        if field not in FIELD_NAMES:
            raise KeyError(f"unknown structural field: {field}")
        return getattr(self, field)

    def reassemble(self) -> str:
        """按固定分隔符重新拼出原始种子。"""
        return f"<{self.name}{self.attributes}>{self.content}</{self.name}>"


@dataclass(frozen=True)
class Seed:
    text: str
    fields: StructuralFields

    def field_text(self, field: str) -> str:
        if field == SEED_FIELD:
            return self.text
        return self.fields.get(field)

    def span(self, field: str) -> FieldSpan:
        if field == SEED_FIELD:
            return FieldSpan(0, len(self.text))
        if field not in self.fields.spans:
            raise KeyError(f"unknown structural field: {field}")
        return self.fields.spans[field]

    def splice(self, field: str, value: str) -> str:
        """把字段所在区间替换为 value，返回新的完整字符串（种子本身不变）。"""
        sp = self.span(field)
        return self.text[:sp.start] + value + self.text[sp.end:]


def decompose(text: str, pattern: Pattern[str] = HTML_PATTERN) -> StructuralFields:
    """按 pattern 拆分种子；pattern 必须带 name/attributes/content 三个捕获组。"""
    m = pattern.fullmatch(text)
    if m is None:
        raise SeedMismatch(f"seed input does not match structural pattern: {text!r}")
    spans = {}
    for idx, field in enumerate(FIELD_NAMES, start=1):
        start, end = m.span(idx)
        spans[field] = FieldSpan(start, end)
    return StructuralFields(name=m.group(1), attributes=m.group(2),
                            content=m.group(3), spans=spans)


def load_seed(text: str, pattern: Pattern[str] = HTML_PATTERN) -> Seed:
    return Seed(text=text, fields=decompose(text, pattern))


__all__ = [
    "HTML_PATTERN",
    "FIELD_NAMES",
    "SEED_FIELD",
    "SeedMismatch",
    "FieldSpan",
    "StructuralFields",
    "Seed",
    "decompose",
    "load_seed",
]
