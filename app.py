"""
Flask应用主入口
采用应用工厂模式，提供词典导出 API
"""
import logging
from datetime import datetime

from flask import Flask, jsonify
from flask_cors import CORS

from config import config
from api.routes import api_bp


def setup_logging() -> None:
    """配置日志系统"""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(config.LOG_FILE, encoding='utf-8')
        ]
    )


def create_app(config_obj=None) -> Flask:
    """
    应用工厂函数

    Args:
        config_obj: 配置对象，如果为None则使用默认配置

    Returns:
        Flask应用实例
    """
    setup_logging()
    logger = logging.getLogger(__name__)

    app = Flask(__name__)

    if config_obj:
        app.config.from_object(config_obj)
    else:
        config.validate()

    # 配置CORS
    if config.CORS_ORIGINS == '*':
        CORS(app)
        logger.warning("⚠ CORS允许所有源，生产环境请设置CORS_ORIGINS")
    else:
        CORS(app, origins=config.CORS_ORIGINS.split(','))
        logger.info(f"✓ CORS配置完成: {config.CORS_ORIGINS}")

    app.register_blueprint(api_bp, url_prefix='/api')
    logger.info("✓ API蓝图注册完成")

    @app.route("/health")
    def health():
        return jsonify({
            "status": "healthy",
            "service": "JMdict Term Exporter",
            "timestamp": datetime.now().isoformat()
        })

    logger.info(f"词典导出服务启动: http://{config.HOST}:{config.PORT}")
    return app


def main():
    """主函数"""
    app = create_app()
    app.run(
        host=config.HOST,
        port=config.PORT,
        debug=config.DEBUG
    )


if __name__ == "__main__":
    main()
