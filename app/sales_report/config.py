"""
アプリケーション設定
環境変数 SALES_REPORT_ENV で設定クラスを切り替える
"""
import logging
import os


class Config:
    """アプリケーション設定クラス"""

    # ログ設定
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    @classmethod
    def init_app(cls):
        """ロギングを設定"""
        logging.basicConfig(
            level=cls.LOG_LEVEL,
            format=cls.LOG_FORMAT
        )


class DevelopmentConfig(Config):
    """開発環境設定（集計のスキップ明細までログ出力）"""
    LOG_LEVEL = 'DEBUG'


class ProductionConfig(Config):
    """本番環境設定"""


# 設定マッピング
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}


def get_config():
    """現在の設定を取得"""
    env = os.getenv('SALES_REPORT_ENV', 'development')
    return config.get(env, config['default'])
