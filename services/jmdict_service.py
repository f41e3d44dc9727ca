"""
JMdict 词条导出服务模块
把层级结构的 JMdict 词条展开为扁平词条，计算活用规则、分数和标签元数据
"""
import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import BinaryIO, Dict, List, Mapping, Optional, Union

from services.db_writer import write_db
from services.jmdict_parser import JmdictEntry, JmdictKanji, JmdictReading, load_jmdict
from services.terms import TagMeta, Term, crush


logger = logging.getLogger(__name__)

# 直接作为规则代码的标签
RULE_TAGS = ("adj-i", "v1", "vk", "vs")
# 高频标签（+5）和古语/不规则汉字标签（-1）
TOP_FREQUENCY_TAGS = ("gai1", "ichi1", "news1", "spec1")
PENALTY_TAGS = ("arch", "iK")
EXPRESSION_TAGS = ("exp", "id")

BASE_TAG_META: Mapping[str, TagMeta] = MappingProxyType({
    "news1": TagMeta(notes="appears frequently in Mainichi Shimbun (top listing)", category="frequent", order=3),
    "ichi1": TagMeta(notes="listed as common in Ichimango Goi Bunruishuu (top listing)", category="frequent", order=3),
    "spec1": TagMeta(notes="common words not included in frequency lists (top listing)", category="frequent", order=3),
    "gai1": TagMeta(notes="common loanword (top listing)", category="frequent", order=3),
    "news2": TagMeta(notes="appears frequently in Mainichi Shimbun (bottom listing)", order=3),
    "ichi2": TagMeta(notes="listed as common in Ichimango Goi Bunruishuu (bottom listing)", order=3),
    "spec2": TagMeta(notes="common words not included in frequency lists (bottom listing)", order=3),
    "gai2": TagMeta(notes="common loanword (bottom listing)", order=3),
})


@dataclass
class ExportSummary:
    """一次导出的统计结果"""
    output_dir: str
    title: str
    entries: int
    terms: int
    records: int
    term_banks: int

    def to_dict(self) -> Dict:
        return {
            "output_dir": self.output_dir,
            "title": self.title,
            "entries": self.entries,
            "terms": self.terms,
            "records": self.records,
            "term_banks": self.term_banks,
        }


def compute_jmdict_rules(term: Term) -> None:
    """根据词性标签追加活用规则；所有 v5* 子类归一为 v5"""
    for tag in term.tags:
        if tag in RULE_TAGS:
            term.add_rules(tag)
        elif tag.startswith("v5"):
            term.add_rules("v5")


def compute_jmdict_score(term: Term) -> None:
    """重新计算词条分数（覆盖旧值）"""
    term.score = 0
    for tag in term.tags:
        if tag in TOP_FREQUENCY_TAGS:
            term.score += 5
        elif tag in PENALTY_TAGS:
            term.score -= 1


def compute_jmdict_tag_meta(entities: Mapping[str, str]) -> Dict[str, TagMeta]:
    """
    生成标签元数据

    以内置的频度标签表为基础，再用词典实体定义覆盖。
    注意：实体中的高频标签 order 为 1，而内置表中为 3。

    Args:
        entities: 标签代码 -> 说明文本

    Returns:
        标签代码 -> TagMeta
    """
    tags = {name: replace(meta) for name, meta in BASE_TAG_META.items()}

    for name, value in entities.items():
        tag = TagMeta(notes=value)

        if name in TOP_FREQUENCY_TAGS:
            tag.category = "frequent"
            tag.order = 1
        elif name in EXPRESSION_TAGS:
            tag.category = "expression"
            tag.order = 2
        elif name in PENALTY_TAGS:
            tag.category = "archaism"
            tag.order = 2

        tags[name] = tag

    return tags


def _build_term_base(reading: JmdictReading, kanji: Optional[JmdictKanji]) -> Term:
    """生成某个（汉字表记, 读音）组合共享的词条基础部分"""
    if kanji is None:
        base = Term(expression=reading.reading)
        base.add_tags(*reading.information)
        base.add_tags(*reading.priorities)
        return base

    base = Term(expression=kanji.expression, reading=reading.reading)
    base.add_tags(*reading.information)
    base.add_tags(*kanji.information)
    # 只保留汉字表记和读音都标注的频度
    base.add_tags(*[p for p in kanji.priorities if p in reading.priorities])
    return base


def _convert(
    entry: JmdictEntry,
    reading: JmdictReading,
    kanji: Optional[JmdictKanji]
) -> List[Term]:
    if kanji is not None and reading.restrictions is not None \
            and kanji.expression not in reading.restrictions:
        return []

    base = _build_term_base(reading, kanji)
    terms = []

    for sense in entry.senses:
        if sense.restricted_readings is not None \
                and reading.reading not in sense.restricted_readings:
            continue
        if kanji is not None and sense.restricted_kanji is not None \
                and kanji.expression not in sense.restricted_kanji:
            continue

        term = Term(expression=base.expression, reading=base.reading)
        term.add_tags(*base.tags)
        term.add_tags(*sense.parts_of_speech)
        term.add_tags(*sense.fields)
        term.add_tags(*sense.misc)
        term.add_tags(*sense.dialects)
        term.glossary.extend(g.content for g in sense.glossary)

        compute_jmdict_rules(term)
        compute_jmdict_score(term)

        terms.append(term)

    return terms


def extract_jmdict_terms(entry: JmdictEntry) -> List[Term]:
    """
    把一个词条展开为（表记 × 读音 × 义项）的扁平词条

    三种限定（读音→汉字、义项→读音、义项→汉字）各自独立过滤，
    只去掉不成立的组合。

    Args:
        entry: JMdict 词条

    Returns:
        词条列表，可能为空
    """
    terms: List[Term] = []

    if entry.kanji:
        for kanji in entry.kanji:
            for reading in entry.readings:
                terms.extend(_convert(entry, reading, kanji))
    else:
        for reading in entry.readings:
            terms.extend(_convert(entry, reading, None))

    return terms


def export_jmdict_db(
    output_dir: str,
    title: str,
    source: Union[str, BinaryIO],
    pretty: bool = False
) -> ExportSummary:
    """
    导出 JMdict 词条数据库

    解析失败时异常原样抛出，不会写入任何文件。

    Args:
        output_dir: 输出目录
        title: 词典标题
        source: JMdict 文件路径或二进制文件对象
        pretty: 是否输出缩进格式的 JSON

    Returns:
        导出统计
    """
    entries, entities = load_jmdict(source)

    terms: List[Term] = []
    for entry in entries:
        terms.extend(extract_jmdict_terms(entry))
    logger.info(f"词条展开完成: {len(entries)}条词条 -> {len(terms)}个词项")

    records = crush(terms)
    term_banks = write_db(
        output_dir,
        title,
        records,
        None,
        compute_jmdict_tag_meta(entities),
        pretty,
    )

    return ExportSummary(
        output_dir=output_dir,
        title=title,
        entries=len(entries),
        terms=len(terms),
        records=len(records),
        term_banks=term_banks,
    )
