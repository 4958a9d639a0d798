"""
变异器目录

变异器以描述符（名称、类型、目标字段、参数）表示，而不是捕获外部状态的闭包：
- structural：确定性结构化变异，按 `strategy` 查表；
- insert / substitute / delete：随机字符级变异，`apply()` 时显式传入随机源。

目录在进程启动时构建一次，之后只读；列表顺序即报告顺序。
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional

from ..core.seed import Seed, FIELD_NAMES, SEED_FIELD
from .structural_mutator import STRUCTURAL_MUTATORS, structural_table
from .char_mutator import insert_random_char, substitute_random_chars, delete_random_chars

KIND_STRUCTURAL = "structural"
KIND_INSERT = "insert"
KIND_SUBSTITUTE = "substitute"
KIND_DELETE = "delete"

RANDOM_KINDS = (KIND_INSERT, KIND_SUBSTITUTE, KIND_DELETE)
# 随机变异器依次作用的目标
TARGET_FIELDS = FIELD_NAMES + (SEED_FIELD,)

_STRUCTURAL = structural_table()


@dataclass(frozen=True)
class Mutator:
    """单个变异策略的描述符。

    字段：
    - name: 报告用名称（在目录内唯一）
    - kind: structural | insert | substitute | delete
    - strategy: structural 类型的查表键
    - field: 随机变异的目标字段（name / attributes / content / seed）
    - count: substitute / delete 的字符个数
    - special: insert 是否允许特殊字符
    """

    name: str
    kind: str
    strategy: Optional[str] = None
    field: Optional[str] = None
    count: int = 1
    special: bool = True

    def apply(self, seed: Seed, rng: random.Random) -> str:
        if self.kind == KIND_STRUCTURAL:
            return _STRUCTURAL[self.strategy](seed)
        value = seed.field_text(self.field)
        if self.kind == KIND_INSERT:
            mutated = insert_random_char(value, rng, special=self.special)
        elif self.kind == KIND_SUBSTITUTE:
            mutated = substitute_random_chars(value, rng, self.count)
        elif self.kind == KIND_DELETE:
            mutated = delete_random_chars(value, rng, self.count)
        else:
            raise ValueError(f"unknown mutator kind: {self.kind}")
        return seed.splice(self.field, mutated)


def build_default_mutators(seed: Seed, trials: int = 10, substitute_count: int = 10,
                           delete_count: int = 1, special: bool = True) -> List[Mutator]:
    """构建默认变异器目录。

    先是全部确定性结构化变异器；随后每种随机策略重复 `trials` 轮，每轮依次作用于
    name / attributes / content / seed。空字段不注册 substitute / delete（无法在空区间采样下标）。
    """
    mutators: List[Mutator] = [Mutator(name=name, kind=KIND_STRUCTURAL, strategy=name)
                               for name, _ in STRUCTURAL_MUTATORS]
    for kind in RANDOM_KINDS:
        count = substitute_count if kind == KIND_SUBSTITUTE else delete_count
        for trial in range(trials):
            for field in TARGET_FIELDS:
                if kind != KIND_INSERT and not seed.field_text(field):
                    continue
                mutators.append(Mutator(name=f"{kind}_{field}_{trial}", kind=kind,
                                        field=field, count=count, special=special))
    return mutators


__all__ = [
    "Mutator",
    "build_default_mutators",
    "KIND_STRUCTURAL",
    "KIND_INSERT",
    "KIND_SUBSTITUTE",
    "KIND_DELETE",
    "TARGET_FIELDS",
]
