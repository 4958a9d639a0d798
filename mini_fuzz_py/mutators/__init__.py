"""mutators 子模块

变异器目录与具体变异策略：
- structural_mutator: 确定性的结构化变异
- char_mutator: 随机字符级插入 / 替换 / 删除
- registry: 变异器描述符与默认目录
"""

from .registry import Mutator, build_default_mutators

__all__ = [
    "char_mutator",
    "structural_mutator",
    "registry",
    "Mutator",
    "build_default_mutators",
]
