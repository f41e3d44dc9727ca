"""
应用配置模块
统一管理所有配置项和环境变量
"""
import os
from dataclasses import dataclass


@dataclass
class Config:
    """应用配置类"""

    # 服务器配置
    HOST: str = os.getenv('FLASK_HOST', '127.0.0.1')
    PORT: int = int(os.getenv('FLASK_PORT', '5000'))
    DEBUG: bool = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'

    # 路径配置
    BASE_DIR: str = os.path.dirname(os.path.abspath(__file__))

    # JMdict 源文件（XML 或 .gz）
    JMDICT_PATH: str = os.getenv(
        'JMDICT_XML',
        os.path.join(BASE_DIR, 'JMdict_e.gz')
    )
    OUTPUT_DIR: str = os.getenv(
        'OUTPUT_DIR',
        os.path.join(BASE_DIR, 'output')
    )

    # 导出配置
    DEFAULT_TITLE: str = os.getenv('DB_TITLE', 'JMdict')
    BANK_SIZE: int = int(os.getenv('BANK_SIZE', '10000'))
    PRETTY_JSON: bool = os.getenv('PRETTY_JSON', 'False').lower() == 'true'

    # 日志配置
    LOG_FILE: str = os.getenv('LOG_FILE', 'app.log')

    # CORS配置
    CORS_ORIGINS: str = os.getenv('CORS_ORIGINS', '*')

    @classmethod
    def from_env(cls) -> 'Config':
        """从环境变量创建配置实例"""
        return cls()

    def validate(self) -> None:
        """验证配置的有效性"""
        if self.PORT < 1 or self.PORT > 65535:
            raise ValueError(f"无效的端口号: {self.PORT}")

        if self.BANK_SIZE <= 0:
            raise ValueError(f"词条分卷大小必须大于0: {self.BANK_SIZE}")

        if not self.DEFAULT_TITLE:
            raise ValueError("词典标题不能为空")


# 全局配置实例
config = Config.from_env()
