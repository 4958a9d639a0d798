"""

语料生成器负责：
- 对种子逐一应用目录中的每个变异器（互不组合、互不链式），
- 按目录顺序产出候选输入，每个变异器恰好一条，
- 不去重：不同变异器产出相同字符串时两条都保留。

"""

from dataclasses import dataclass
import random
from typing import List, Optional, Sequence

from .seed import Seed
from ..mutators.registry import Mutator

SEED_MUTATOR = "seed"


@dataclass
class Candidate:
    """一条待执行的候选输入。

    字段：
      id: 序号（种子为 0，变异候选从 1 开始）
      mutator: 产生该输入的变异器名称（种子本身为 "seed"）
      data: 输入文本
    """

    id: int
    mutator: str
    data: str

    def encode(self) -> bytes:
        return self.data.encode("utf-8")


def generate_candidates(seed: Seed, mutators: Sequence[Mutator],
                        rng: Optional[random.Random] = None) -> List[Candidate]:
    """每个变异器对原始种子独立应用一次，返回与目录等长、同序的候选列表。"""
    rng = rng if rng is not None else random.Random()
    return [Candidate(id=i, mutator=m.name, data=m.apply(seed, rng))
            for i, m in enumerate(mutators, start=1)]


def seed_candidate(seed: Seed) -> Candidate:
    return Candidate(id=0, mutator=SEED_MUTATOR, data=seed.text)


__all__ = ["Candidate", "generate_candidates", "seed_candidate", "SEED_MUTATOR"]
