"""
词典数据库写出模块
把记录按分卷写成 JSON 文件，并生成 index.json
"""
import glob
import json
import logging
import os
from typing import Any, Dict, List, Mapping, Optional

from config import config
from services.terms import TagMeta


logger = logging.getLogger(__name__)

DB_VERSION = 1
DB_REVISION = "jmdict1"


def _dump_json(path: str, data: Any, pretty: bool) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        if pretty:
            json.dump(data, f, ensure_ascii=False, indent=2)
        else:
            json.dump(data, f, ensure_ascii=False, separators=(',', ':'))


def _remove_stale_banks(output_dir: str, prefix: str) -> None:
    """删除上次导出遗留的分卷文件"""
    for path in glob.glob(os.path.join(output_dir, f"{prefix}_bank_*.json")):
        os.remove(path)


def write_db_records(
    output_dir: str,
    prefix: str,
    records: Optional[List[List[Any]]],
    pretty: bool,
    bank_size: int
) -> int:
    """
    分卷写出记录

    同前缀的旧分卷文件会先被删除，目录中只保留本次写出的分卷。

    Args:
        output_dir: 输出目录
        prefix: 文件名前缀，如 "term" -> term_bank_1.json
        records: 记录列表，None 或空列表时不写文件
        pretty: 是否缩进
        bank_size: 每卷记录数

    Returns:
        写出的分卷数
    """
    _remove_stale_banks(output_dir, prefix)
    if not records:
        return 0

    banks = 0
    for start in range(0, len(records), bank_size):
        banks += 1
        path = os.path.join(output_dir, f"{prefix}_bank_{banks}.json")
        _dump_json(path, records[start:start + bank_size], pretty)

    logger.info(f"✓ {prefix}记录写出完成: {len(records)}条, {banks}卷")
    return banks


def write_db(
    output_dir: str,
    title: str,
    term_records: List[List[Any]],
    kanji_records: Optional[List[List[Any]]],
    tag_meta: Mapping[str, TagMeta],
    pretty: bool
) -> int:
    """
    写出完整的词典数据库目录

    Args:
        output_dir: 输出目录（不存在时自动创建）
        title: 词典标题
        term_records: 词条记录
        kanji_records: 汉字记录（JMdict 导出时为 None）
        tag_meta: 标签元数据
        pretty: 是否输出缩进格式

    Returns:
        词条分卷数
    """
    os.makedirs(output_dir, exist_ok=True)

    term_banks = write_db_records(
        output_dir, "term", term_records, pretty, config.BANK_SIZE
    )
    kanji_banks = write_db_records(
        output_dir, "kanji", kanji_records, pretty, config.BANK_SIZE
    )

    index: Dict[str, Any] = {
        "title": title,
        "version": DB_VERSION,
        "revision": DB_REVISION,
        "tagMeta": {name: meta.to_dict() for name, meta in tag_meta.items()},
        "termBanks": term_banks,
        "kanjiBanks": kanji_banks,
    }
    _dump_json(os.path.join(output_dir, "index.json"), index, pretty)

    logger.info(f"✓ 词典数据库写出完成: {output_dir} ({title})")
    return term_banks
