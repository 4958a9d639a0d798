"""
配置模块

提供默认配置，以及从 JSON 文件覆盖默认值的 `load_config()`。
命令行参数优先级最高，其次是配置文件，最后是 DEFAULTS。
"""
from __future__ import annotations

import json
from typing import Any, Dict, Optional, Tuple

DEFAULTS: Dict[str, Any] = {
    # 唯一的结构化种子
    "seed_input": '<html a="value">...</html>',
    # 命令相对该目录解析，子进程也在该目录运行
    "workdir": "./",
    # 单次执行超时（秒），<=0 或 None 表示不限时
    "timeout": 5.0,
}

# 变异器目录参数
DEFAULTS.update({
    # 每种随机策略对每个字段的独立试验次数
    "trials": 10,
    "substitute_count": 10,
    "delete_count": 1,
    # 插入变异是否允许特殊/扩展字符
    "insert_special": True,
    # 随机种子，None 表示每次运行不同
    "rng_seed": None,
})


# 每个键允许的取值类型（bool 不当作 int）
CONFIG_TYPES: Dict[str, Tuple[type, ...]] = {
    "seed_input": (str,),
    "workdir": (str,),
    "timeout": (int, float, type(None)),
    "trials": (int,),
    "substitute_count": (int,),
    "delete_count": (int,),
    "insert_special": (bool,),
    "rng_seed": (int, type(None)),
}


class ConfigError(Exception):
    pass


def check_types(data: Dict[str, Any], source: str) -> None:
    """校验配置值类型，不匹配时抛出 ConfigError。"""
    for key, value in data.items():
        allowed = CONFIG_TYPES[key]
        if isinstance(value, bool) and bool not in allowed:
            ok = False
        else:
            ok = isinstance(value, allowed)
        if not ok:
            names = "/".join("null" if t is type(None) else t.__name__ for t in allowed)
            raise ConfigError(f"invalid value for '{key}' in {source}: expected {names}, got {value!r}")


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """返回 DEFAULTS 的副本，若给出 path 则用其中的 JSON 对象覆盖。

    文件不可读、不是 JSON 对象、包含未知键或值类型不符时抛出 ConfigError。
    """
    config = DEFAULTS.copy()
    if path is None:
        return config
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")
    unknown = sorted(set(data) - set(DEFAULTS))
    if unknown:
        raise ConfigError(f"unknown config keys in {path}: {', '.join(unknown)}")
    check_types(data, path)
    config.update(data)
    return config
