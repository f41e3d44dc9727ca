"""
列表工具模块
保序去重等列表操作
"""
from typing import Iterable, List, Sequence


def append_unique(target: List, values: Iterable) -> List:
    """
    向列表追加尚未出现的值（保持首次出现顺序）

    Args:
        target: 目标列表（原地修改）
        values: 待追加的值

    Returns:
        目标列表本身
    """
    for value in values:
        if value not in target:
            target.append(value)
    return target


def unique_by_key(items: Sequence, key) -> List:
    """按 key 去重，保留第一次出现的元素"""
    seen = set()
    result = []
    for item in items:
        k = key(item)
        if k not in seen:
            seen.add(k)
            result.append(item)
    return result
