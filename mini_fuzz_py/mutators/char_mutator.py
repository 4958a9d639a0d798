"""
Character-level mutators

在单个字段上执行随机的字符级编辑：插入、替换、删除。

所有函数都显式接收 `random.Random` 实例，不使用全局随机状态；给定相同的随机种子即可复现变异结果。
替换与删除需要在字段内采样下标，因此不能作用于空字段（调用方负责避免，函数本身会抛 ValueError）。
"""
from __future__ import annotations

import random

ALPHA_BOUND = 26
# 'a'/'A' + [0, 127)，覆盖可打印字符及 Latin-1 扩展区
SPECIAL_BOUND = 127


def random_char(rng: random.Random, special: bool = False) -> str:
    """随机生成一个字符。

    - special=False：大小写字母之一；
    - special=True：以 'a' 或 'A' 为起点偏移 0..126，可能落入标点、DEL 或扩展字节区。
    """
    bound = SPECIAL_BOUND if special else ALPHA_BOUND
    base = 'a' if rng.random() < 0.5 else 'A'
    return chr(ord(base) + rng.randrange(bound))


def insert_random_char(text: str, rng: random.Random, special: bool = True) -> str:
    """在 [0, len(text)] 内随机位置插入一个随机字符；空串也可插入（位置 0）。"""
    idx = rng.randrange(len(text) + 1)
    return text[:idx] + random_char(rng, special) + text[idx:]


def substitute_random_chars(text: str, rng: random.Random, count: int) -> str:
    """随机选 count 个位置（可重复）改写为随机字母，长度不变。"""
    if not text:
        raise ValueError("cannot substitute characters in an empty field")
    chars = list(text)
    for _ in range(count):
        i = rng.randrange(len(chars))
        chars[i] = random_char(rng, special=False)
    return ''.join(chars)


def delete_random_chars(text: str, rng: random.Random, count: int) -> str:
    """逐个删除 count 个随机字符，每次删除后在缩短的字段内重新采样。

    字段长度不超过 count 时直接塌缩为空串。
    """
    if not text:
        raise ValueError("cannot delete characters from an empty field")
    if len(text) <= count:
        return ""
    chars = list(text)
    for _ in range(count):
        del chars[rng.randrange(len(chars))]
    return ''.join(chars)


__all__ = [
    "random_char",
    "insert_random_char",
    "substitute_random_chars",
    "delete_random_chars",
]
