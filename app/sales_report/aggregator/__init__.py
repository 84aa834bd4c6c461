"""
集計ロジック（販売者別売上レポート）
"""

from .seller_report import (
    analyze_sales_data,
    round_money,
    SellerReportAggregator,
    SellerReport,
    ReportRow,
    SellerStats,
    TopProduct,
    AnalysisOptions,
    ValidationError,
    InvalidDataError,
    InvalidOptionsError,
)
from .strategies import calculate_simple_revenue, calculate_bonus_by_profit

__all__ = [
    'analyze_sales_data',
    'round_money',
    'SellerReportAggregator',
    'SellerReport',
    'ReportRow',
    'SellerStats',
    'TopProduct',
    'AnalysisOptions',
    'ValidationError',
    'InvalidDataError',
    'InvalidOptionsError',
    'calculate_simple_revenue',
    'calculate_bonus_by_profit'
]
