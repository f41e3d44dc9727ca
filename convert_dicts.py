"""
JMdict 转换命令行入口
python convert_dicts.py JMdict_e[.gz] OUTPUT_DIR [--title T] [--pretty]
"""
import argparse
import logging
import sys
import xml.etree.ElementTree as ET
from typing import List, Optional

from app import setup_logging
from config import config
from services.jmdict_service import export_jmdict_db


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="把 JMdict XML 转换为词条数据库目录"
    )
    ap.add_argument("source", nargs="?", default=config.JMDICT_PATH,
                    help="JMdict XML 路径（支持 .gz）")
    ap.add_argument("output_dir", nargs="?", default=config.OUTPUT_DIR,
                    help="输出目录")
    ap.add_argument("--title", default=config.DEFAULT_TITLE, help="词典标题")
    ap.add_argument("--pretty", action="store_true", default=config.PRETTY_JSON,
                    help="输出缩进格式的 JSON")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    logger.info(f'[JMdict] converting {args.source} -> {args.output_dir}')
    try:
        summary = export_jmdict_db(
            args.output_dir, args.title, args.source, args.pretty
        )
    except FileNotFoundError:
        logger.error(f"✗ 文件不存在: {args.source}")
        return 1
    except ET.ParseError as e:
        logger.error(f"✗ JMdict解析失败（XML、编码或gzip损坏）: {e}")
        return 1

    logger.info(
        f'[JMdict] done: {summary.records} records, {summary.term_banks} banks'
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
