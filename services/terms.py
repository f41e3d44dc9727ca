"""
词条数据模块
定义导出用的词条、标签元数据以及记录压平（crush）逻辑
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from utils.list_utils import append_unique, unique_by_key


@dataclass
class Term:
    """
    扁平化的词条

    tags / rules 语义上是有序集合：追加已存在的代码不会产生重复。
    """
    expression: str
    reading: str = ""
    tags: List[str] = field(default_factory=list)
    rules: List[str] = field(default_factory=list)
    score: int = 0
    glossary: List[str] = field(default_factory=list)

    def add_tags(self, *tags: str) -> None:
        append_unique(self.tags, tags)

    def add_rules(self, *rules: str) -> None:
        append_unique(self.rules, rules)

    def to_record(self) -> List[Any]:
        """转换为数据库记录: [表记, 读音, 标签, 规则, 分数, 释义...]"""
        record: List[Any] = [
            self.expression,
            self.reading,
            " ".join(self.tags),
            " ".join(self.rules),
            self.score,
        ]
        record.extend(self.glossary)
        return record


@dataclass
class TagMeta:
    """标签元数据；order 越小越靠前"""
    notes: str = ""
    category: str = ""
    order: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """序列化，省略空值字段"""
        data: Dict[str, Any] = {}
        if self.category:
            data["category"] = self.category
        if self.notes:
            data["notes"] = self.notes
        if self.order:
            data["order"] = self.order
        return data


def crush(terms: List[Term]) -> List[List[Any]]:
    """
    将词条列表压平为数据库记录，并去掉完全相同的记录

    Args:
        terms: 词条列表（保持顺序）

    Returns:
        记录列表，按首次出现顺序
    """
    records = [term.to_record() for term in terms]
    return unique_by_key(records, key=tuple)
