"""
API路由定义
处理 /api/export 与 /api/tags 端点的请求
"""
import logging
import os
import xml.etree.ElementTree as ET
from typing import Optional, Tuple

from flask import Blueprint, request, jsonify

from config import config
from services.jmdict_parser import load_jmdict
from services.jmdict_service import compute_jmdict_tag_meta, export_jmdict_db


logger = logging.getLogger(__name__)

# 创建蓝图
api_bp = Blueprint('api', __name__)


def _validate_source(source) -> Optional[Tuple]:
    """校验源文件参数，返回错误响应或 None"""
    if not isinstance(source, str) or not source:
        return jsonify({"error": "source参数必须是非空字符串"}), 400
    if not os.path.isfile(source):
        return jsonify({"error": f"源文件不存在: {source}"}), 404
    return None


def _resolve_output_dir(output_dir: str) -> Optional[str]:
    """
    把输出目录解析到 config.OUTPUT_DIR 之下

    相对路径以 OUTPUT_DIR 为基准；解析后（含符号链接）不在其下的返回 None。
    """
    root = os.path.realpath(config.OUTPUT_DIR)
    path = os.path.realpath(os.path.join(root, output_dir))
    if os.path.commonpath([root, path]) != root:
        return None
    return path


@api_bp.route('/export', methods=['POST'])
def export_dictionary() -> tuple:
    """
    把 JMdict 导出为词条数据库

    请求体:
        {
            "source": "JMdict_e.gz",
            "output_dir": "输出目录（位于 OUTPUT_DIR 之下，可为相对路径）",
            "title": "JMdict",
            "pretty": true/false
        }

    返回:
        导出统计: output_dir, title, entries, terms, records, term_banks
    """
    try:
        data = request.get_json(silent=True)

        if not data or "source" not in data or "output_dir" not in data:
            return jsonify({"error": "缺少source或output_dir参数"}), 400

        error = _validate_source(data["source"])
        if error:
            return error

        output_dir = data["output_dir"]
        if not isinstance(output_dir, str) or not output_dir:
            return jsonify({"error": "output_dir参数必须是非空字符串"}), 400

        output_dir = _resolve_output_dir(output_dir)
        if output_dir is None:
            logger.warning(f"⚠ 拒绝输出目录: {data['output_dir']}")
            return jsonify({
                "error": f"output_dir必须位于{config.OUTPUT_DIR}之下"
            }), 400

        title = data.get("title") or config.DEFAULT_TITLE
        if not isinstance(title, str):
            return jsonify({"error": "title参数必须是字符串类型"}), 400

        pretty = data.get("pretty", config.PRETTY_JSON)
        if not isinstance(pretty, bool):
            return jsonify({"error": "pretty参数必须是布尔类型"}), 400

        summary = export_jmdict_db(output_dir, title, data["source"], pretty)
        logger.info(f"✓ 导出完成: {summary.records}条记录 -> {output_dir}")
        return jsonify(summary.to_dict()), 200

    except ET.ParseError as e:
        logger.warning(f"JMdict XML解析失败: {e}")
        return jsonify({"error": f"XML解析失败: {e}"}), 400
    except Exception as e:
        logger.error(f"处理请求时发生错误: {e}", exc_info=True)
        return jsonify({"error": f"服务器内部错误: {str(e)}"}), 500


@api_bp.route('/tags', methods=['GET'])
def get_tag_meta() -> tuple:
    """
    返回某个 JMdict 源文件的标签元数据

    查询参数:
        source: JMdict 文件路径
    """
    try:
        source = request.args.get("source", "")
        error = _validate_source(source)
        if error:
            return error

        _, entities = load_jmdict(source)
        tags = compute_jmdict_tag_meta(entities)
        return jsonify({name: meta.to_dict() for name, meta in tags.items()}), 200

    except ET.ParseError as e:
        logger.warning(f"JMdict XML解析失败: {e}")
        return jsonify({"error": f"XML解析失败: {e}"}), 400
    except Exception as e:
        logger.error(f"处理请求时发生错误: {e}", exc_info=True)
        return jsonify({"error": f"服务器内部错误: {str(e)}"}), 500
