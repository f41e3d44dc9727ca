"""
JMdict 解析模块
读取 JMdict XML（支持 .gz），生成词条结构和实体定义表
"""
import gzip
import logging
import re
import xml.etree.ElementTree as ET
import zlib
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, List, Optional, Tuple, Union


logger = logging.getLogger(__name__)

XML_LANG = '{http://www.w3.org/XML/1998/namespace}lang'

_XML_ENCODING_RE = re.compile(rb'\s*<\?xml[^>]*?encoding\s*=\s*["\']([A-Za-z0-9._-]+)["\']')
_DOCTYPE_SUBSET_RE = re.compile(r'<!DOCTYPE\s+[\w-]+[^\[>]*\[(.*?)\]\s*>', re.S)
_DOCTYPE_PLAIN_RE = re.compile(r'<!DOCTYPE[^\[>]*>')
_ENTITY_DECL_RE = re.compile(r'<!ENTITY\s+([\w.-]+)\s+"([^"]*)"\s*>')
_ENTITY_REF_RE = re.compile(r'&([\w.-]+);')
_PREDEFINED_ENTITIES = {'lt', 'gt', 'amp', 'apos', 'quot'}


@dataclass
class JmdictKanji:
    """汉字表记 <k_ele>"""
    expression: str
    information: List[str] = field(default_factory=list)
    priorities: List[str] = field(default_factory=list)


@dataclass
class JmdictReading:
    """读音 <r_ele>；restrictions 为 None 表示不限定汉字表记"""
    reading: str
    no_kanji: bool = False
    restrictions: Optional[List[str]] = None
    information: List[str] = field(default_factory=list)
    priorities: List[str] = field(default_factory=list)


@dataclass
class JmdictGlossary:
    content: str
    language: Optional[str] = None
    gender: Optional[str] = None
    type: Optional[str] = None


@dataclass
class JmdictSense:
    """义项 <sense>"""
    restricted_kanji: Optional[List[str]] = None
    restricted_readings: Optional[List[str]] = None
    references: List[str] = field(default_factory=list)
    antonyms: List[str] = field(default_factory=list)
    parts_of_speech: List[str] = field(default_factory=list)
    fields: List[str] = field(default_factory=list)
    misc: List[str] = field(default_factory=list)
    information: List[str] = field(default_factory=list)
    dialects: List[str] = field(default_factory=list)
    glossary: List[JmdictGlossary] = field(default_factory=list)


@dataclass
class JmdictEntry:
    sequence: int = 0
    kanji: List[JmdictKanji] = field(default_factory=list)
    readings: List[JmdictReading] = field(default_factory=list)
    senses: List[JmdictSense] = field(default_factory=list)


def read_source(source: Union[str, BinaryIO]) -> str:
    """
    读取源文件内容

    Args:
        source: 文件路径（.gz 自动解压）或二进制文件对象

    Returns:
        按 XML 声明的编码（默认 UTF-8）解码后的文本

    Raises:
        FileNotFoundError: 文件不存在
        xml.etree.ElementTree.ParseError: gzip 数据损坏或无法解码
    """
    try:
        if isinstance(source, str):
            if source.endswith('.gz'):
                with gzip.open(source, 'rb') as f:
                    data = f.read()
            else:
                with open(source, 'rb') as f:
                    data = f.read()
        else:
            data = source.read()

        # 上传的流可能仍是 gzip 压缩
        if data[:2] == b'\x1f\x8b':
            data = gzip.decompress(data)
    except (gzip.BadGzipFile, EOFError, zlib.error) as e:
        raise ET.ParseError(f"gzip数据损坏: {e}") from e

    match = _XML_ENCODING_RE.match(data)
    encoding = match.group(1).decode('ascii') if match else 'utf-8-sig'
    try:
        return data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise ET.ParseError(f"无法按{encoding}解码: {e}") from e


def parse_entities(text: str) -> Dict[str, str]:
    """
    从 DOCTYPE 内部子集提取实体定义

    Args:
        text: 完整的 XML 文本

    Returns:
        标签代码 -> 说明文本
    """
    match = _DOCTYPE_SUBSET_RE.search(text)
    if match is None:
        return {}

    entities: Dict[str, str] = {}
    for name, value in _ENTITY_DECL_RE.findall(match.group(1)):
        if name not in _PREDEFINED_ENTITIES:
            entities[name] = value
    return entities


def _strip_doctype(text: str) -> str:
    text = _DOCTYPE_SUBSET_RE.sub('', text, count=1)
    return _DOCTYPE_PLAIN_RE.sub('', text, count=1)


def _keep_entity_names(body: str, entities: Dict[str, str]) -> str:
    """把 &v5k; 之类的实体引用替换为代码本身，而不是展开成说明文本"""
    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name in entities:
            return name
        return match.group(0)

    return _ENTITY_REF_RE.sub(replace, body)


def _texts(parent: ET.Element, tag: str) -> List[str]:
    return [(e.text or '').strip() for e in parent.findall(tag)]


def _optional_texts(parent: ET.Element, tag: str) -> Optional[List[str]]:
    found = parent.findall(tag)
    if not found:
        return None
    return [(e.text or '').strip() for e in found]


def _parse_kanji(element: ET.Element) -> JmdictKanji:
    return JmdictKanji(
        expression=(element.findtext('keb') or '').strip(),
        information=_texts(element, 'ke_inf'),
        priorities=_texts(element, 'ke_pri'),
    )


def _parse_reading(element: ET.Element) -> JmdictReading:
    return JmdictReading(
        reading=(element.findtext('reb') or '').strip(),
        no_kanji=element.find('re_nokanji') is not None,
        restrictions=_optional_texts(element, 're_restr'),
        information=_texts(element, 're_inf'),
        priorities=_texts(element, 're_pri'),
    )


def _parse_sense(element: ET.Element) -> JmdictSense:
    glossary = [
        JmdictGlossary(
            content=(g.text or '').strip(),
            language=g.attrib.get(XML_LANG),
            gender=g.attrib.get('g_gend'),
            type=g.attrib.get('g_type'),
        )
        for g in element.findall('gloss')
    ]
    return JmdictSense(
        restricted_kanji=_optional_texts(element, 'stagk'),
        restricted_readings=_optional_texts(element, 'stagr'),
        references=_texts(element, 'xref'),
        antonyms=_texts(element, 'ant'),
        parts_of_speech=_texts(element, 'pos'),
        fields=_texts(element, 'field'),
        misc=_texts(element, 'misc'),
        information=_texts(element, 's_inf'),
        dialects=_texts(element, 'dial'),
        glossary=glossary,
    )


def parse_entry(element: ET.Element) -> JmdictEntry:
    """解析单个 <entry> 元素"""
    seq = (element.findtext('ent_seq') or '0').strip()
    return JmdictEntry(
        sequence=int(seq) if seq.isdigit() else 0,
        kanji=[_parse_kanji(e) for e in element.findall('k_ele')],
        readings=[_parse_reading(e) for e in element.findall('r_ele')],
        senses=[_parse_sense(e) for e in element.findall('sense')],
    )


def load_jmdict(
    source: Union[str, BinaryIO]
) -> Tuple[List[JmdictEntry], Dict[str, str]]:
    """
    加载 JMdict 词典

    实体引用保留为标签代码（不展开），同时返回实体说明表。
    XML 格式错误时抛出 xml.etree.ElementTree.ParseError。

    Args:
        source: 文件路径或二进制文件对象

    Returns:
        (词条列表, 实体定义表)
    """
    text = read_source(source)
    entities = parse_entities(text)
    body = _keep_entity_names(_strip_doctype(text), entities)

    root = ET.fromstring(body)
    entries = [parse_entry(e) for e in root.findall('entry')]

    logger.info(f"✓ JMdict解析完成: {len(entries)}条词条, {len(entities)}个实体")
    return entries, entities
