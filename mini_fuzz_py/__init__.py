"""
mini_fuzz_py

miniFuzz 的 Python 包入口。

基于变异的黑盒 fuzz 工具：从一个结构化种子派生变异输入，逐条写入目标程序的标准输入，
以退出码是否为 0 判定故障。实现分散在子模块中：
- core: 种子模型、语料生成、监控判定与评估导出
- mutators: 变异器目录（确定性结构化变异与随机字符级变异）
- targets: 被测目标适配器（shell 命令 + stdin）
- utils: 配置与绘图工具
"""

__all__ = [
    "core",
    "mutators",
    "targets",
    "utils",
]

__version__ = "0.1.0"
