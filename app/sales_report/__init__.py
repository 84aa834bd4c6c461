"""
販売者別売上レポート

使用例:
    import sales_report
    from sales_report.aggregator import analyze_sales_data, AnalysisOptions

    sales_report.init_app()     # ロギング設定（アプリケーション起動時に1回）
    report = analyze_sales_data(data, AnalysisOptions())
"""

__version__ = '1.0.0'


def init_app(config=None):
    """
    アプリケーション初期化

    Args:
        config: 設定クラス（省略時は SALES_REPORT_ENV から選択）

    Returns:
        適用した設定クラス
    """
    if config is None:
        from .config import get_config
        config = get_config()
    config.init_app()
    return config
