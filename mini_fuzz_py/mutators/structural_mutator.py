"""确定性的结构化变异器。

每个变异器都是 Seed -> str 的纯函数，针对标签类解析器的已知边界情况：
超长标签名、畸形分隔符、缺失闭合标签、重复嵌套等。

字段级变异按字段区间回写；分隔符级变异（'<'、'>'）对整条输入做字面替换。
"""
from __future__ import annotations

from typing import Callable, Dict, List, Tuple

from ..core.seed import Seed, SEED_FIELD

# 标签名中不允许出现的字符
INVALID_TAG = "<AÃ©ada#>"


def repeat_field(seed: Seed, field: str, times: int) -> str:
	"""把字段替换为自身重复 times 次；field 为 "seed" 时重复整条输入。"""
	return seed.splice(field, seed.field_text(field) * times)


def _open_tag_end(seed: Seed) -> int:
	# "<name" 的结束位置
	return seed.span("name").end


def replace_open_tag(seed: Seed) -> str:
	return "a" + seed.text[_open_tag_end(seed):]


def strip_open_tag(seed: Seed) -> str:
	return seed.text[_open_tag_end(seed):]


def strip_open_tag_and_brackets(seed: Seed) -> str:
	return replace_open_tag(seed).replace(">", "")


def collapse_content(seed: Seed) -> str:
	# 先按区间替换内容，再处理分隔符，避免区间失效
	text = seed.splice("content", "a")
	end = _open_tag_end(seed)
	return ("a" + text[end:]).replace(">", "")


def remove_closing_tag(seed: Seed) -> str:
	return seed.text[:seed.span("content").end]


def inject_invalid_tag(seed: Seed) -> str:
	return INVALID_TAG + seed.text[_open_tag_end(seed):]


def repeat_open_bracket(seed: Seed, times: int = 10) -> str:
	return seed.text.replace("<", "<" * times)


def repeat_close_bracket(seed: Seed, times: int = 10) -> str:
	return seed.text.replace(">", ">" * times)


def _repeat(field: str, times: int) -> Callable[[Seed], str]:
	def _apply(seed: Seed) -> str:
		return repeat_field(seed, field, times)
	_apply.__name__ = f"repeat_{field}_{times}"
	return _apply


# 固定顺序的确定性变异器目录：(名称, 函数)
STRUCTURAL_MUTATORS: List[Tuple[str, Callable[[Seed], str]]] = [
	("replace_open_tag", replace_open_tag),
	("strip_open_tag", strip_open_tag),
	("strip_open_tag_and_brackets", strip_open_tag_and_brackets),
	("collapse_content", collapse_content),
	("remove_closing_tag", remove_closing_tag),
	("inject_invalid_tag", inject_invalid_tag),
	("repeat_name_10", _repeat("name", 10)),
	("repeat_attributes_100", _repeat("attributes", 100)),
	("repeat_content_100", _repeat("content", 100)),
	("repeat_seed_100", _repeat(SEED_FIELD, 100)),
	("repeat_open_bracket_10", repeat_open_bracket),
	("repeat_close_bracket_10", repeat_close_bracket),
]


def structural_table() -> Dict[str, Callable[[Seed], str]]:
	return dict(STRUCTURAL_MUTATORS)


__all__ = [
	"STRUCTURAL_MUTATORS",
	"structural_table",
	"repeat_field",
	"replace_open_tag",
	"strip_open_tag",
	"strip_open_tag_and_brackets",
	"collapse_content",
	"remove_closing_tag",
	"inject_invalid_tag",
	"repeat_open_bracket",
	"repeat_close_bracket",
]
