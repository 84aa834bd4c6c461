"""
売上・ボーナス計算ストラテジー
analyze_sales_data() の options に渡す標準の計算関数
"""
from typing import Any, Mapping


# ボーナス率（利益に対する%）
TOP_SELLER_PERCENT = 15      # 1位
RUNNER_UP_PERCENT = 10       # 2位・3位
DEFAULT_PERCENT = 5          # その他


def calculate_simple_revenue(item: Mapping[str, Any], product: Mapping[str, Any]) -> float:
    """
    明細1行の売上（割引後）を計算

    Args:
        item: 購入明細（sale_price, quantity, discount）
        product: 商品カード（この計算では未使用）

    Returns:
        sale_price × quantity × (100 - discount) / 100（sale_price と同じ数値型）
    """
    discount = item.get("discount", 0)
    return item["sale_price"] * item["quantity"] * (100 - discount) / 100


def calculate_bonus_by_profit(index: int, total: int, seller) -> float:
    """
    利益順位に応じたボーナスを計算

    条件は上から順に判定し、最初に一致したものを採用する。
    販売者が1人だけの場合は1位として扱う。
    profit が Decimal の場合は Decimal で返す。

    Args:
        index: 利益降順に並べたときの順位（0始まり）
        total: 販売者の総数
        seller: profit 属性を持つ販売者集計

    Returns:
        float: ボーナス額
    """
    if index == 0:
        return seller.profit * TOP_SELLER_PERCENT / 100
    elif index == 1 or index == 2:
        return seller.profit * RUNNER_UP_PERCENT / 100
    elif index == total - 1:
        return 0
    else:
        return seller.profit * DEFAULT_PERCENT / 100
