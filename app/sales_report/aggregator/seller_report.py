"""
販売者別売上レポート集計モジュール
購入履歴を販売者・商品マスタと突き合わせ、売上・利益・ボーナス・売れ筋商品を集計する
"""
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP, localcontext
from numbers import Rational
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging

import pandas as pd

from .strategies import calculate_simple_revenue, calculate_bonus_by_profit

logger = logging.getLogger(__name__)


RevenueFunction = Callable[[Mapping, Mapping], float]
BonusFunction = Callable[[int, int, "SellerStats"], float]

# レポートの列順
REPORT_COLUMNS = [
    "seller_id", "name", "revenue", "profit", "sales_count", "top_products", "bonus"
]


class ValidationError(ValueError):
    """入力チェックに失敗した場合の例外"""
    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class InvalidDataError(ValidationError):
    """入力データ（data）が不正な場合の例外"""


class InvalidOptionsError(ValidationError):
    """オプション（options）が不正な場合の例外"""


@dataclass
class AnalysisOptions:
    """集計オプション（売上・ボーナスの計算関数）"""
    calculate_revenue: RevenueFunction = calculate_simple_revenue
    calculate_bonus: BonusFunction = calculate_bonus_by_profit


@dataclass(frozen=True)
class TopProduct:
    """売れ筋商品"""
    sku: str
    quantity: float

    def to_dict(self):
        """辞書形式に変換"""
        return {'sku': self.sku, 'quantity': self.quantity}


@dataclass
class SellerStats:
    """販売者別の集計中データ"""
    seller_id: Any
    name: str
    revenue: Any = 0    # total_amount・売上関数と同じ数値型で累計
    profit: Any = 0
    sales_count: int = 0
    products_sold: Dict[str, float] = field(default_factory=dict)   # SKU → 累計数量
    top_products: List[TopProduct] = field(default_factory=list)
    bonus: Any = 0


@dataclass(frozen=True)
class ReportRow:
    """販売者別レポート行（金額は小数点以下2桁に丸め済み）"""
    seller_id: Any
    name: str
    revenue: float
    profit: float
    sales_count: int
    top_products: Tuple[TopProduct, ...]
    bonus: float

    def to_dict(self):
        """辞書形式に変換"""
        return {
            'seller_id': self.seller_id,
            'name': self.name,
            'revenue': self.revenue,
            'profit': self.profit,
            'sales_count': self.sales_count,
            'top_products': [p.to_dict() for p in self.top_products],
            'bonus': self.bonus
        }


class SellerReport(Sequence):
    """利益降順に並んだレポート行の一覧"""

    def __init__(self, rows):
        self._rows: Tuple[ReportRow, ...] = tuple(rows)

    def __getitem__(self, index):
        return self._rows[index]

    def __len__(self):
        return len(self._rows)

    def __repr__(self):
        return f"SellerReport({list(self._rows)!r})"

    def to_dicts(self) -> List[dict]:
        """全行を辞書のリストに変換"""
        return [row.to_dict() for row in self._rows]

    def to_dataframe(self) -> pd.DataFrame:
        """
        DataFrameに変換

        Returns:
            pd.DataFrame: 1販売者1行。top_products は辞書のリストのまま保持する
        """
        return pd.DataFrame(self.to_dicts(), columns=REPORT_COLUMNS)


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, Rational):
        return Decimal(value.numerator) / Decimal(value.denominator)
    return Decimal(str(value))


def round_money(value) -> float:
    """
    金額を小数点以下2桁に丸める（0.5は0から遠い方へ）

    int・float・Decimal・Fraction のいずれも float で返す。
    桁数の多い金額は精度を広げて丸めるため、InvalidOperation にはならない。
    """
    amount = _to_decimal(value)
    if not amount.is_finite() or amount.as_tuple().exponent >= -2:
        return float(amount)

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return float(amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _index_key(value) -> str:
    """索引用のキー（"1" と 1 を同じ販売者・商品として扱う）"""
    return str(value)


def _is_sequence(value) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


class SellerReportAggregator:
    """
    販売者別売上レポート集計クラス

    使用例:
        aggregator = SellerReportAggregator(data, AnalysisOptions())
        report = aggregator.aggregate()
    """

    # 売れ筋商品の最大件数
    TOP_PRODUCTS_LIMIT = 10

    def __init__(
        self,
        data: Mapping,
        options,
        progress_callback: Optional[Callable[[str, int], None]] = None
    ):
        """
        Args:
            data: sellers / products / purchase_records を持つ入力データ
            options: AnalysisOptions、または calculate_revenue / calculate_bonus を持つ辞書
            progress_callback: 進捗通知用コールバック (message, percentage)
        """
        self.data = data
        self.options = options
        self.progress_callback = progress_callback

        self.calculate_revenue: Optional[RevenueFunction] = None
        self.calculate_bonus: Optional[BonusFunction] = None

        # 集計中データ
        self.seller_stats: List[SellerStats] = []
        self.seller_index: Dict[str, SellerStats] = {}
        self.product_index: Dict[str, Mapping] = {}
        self.skipped_records = 0
        self.skipped_items = 0

    def _notify_progress(self, message: str, percentage: int):
        """進捗を通知"""
        logger.info(f"[{percentage}%] {message}")
        if self.progress_callback:
            self.progress_callback(message, percentage)

    def aggregate(self) -> SellerReport:
        """
        全ての集計を実行

        Returns:
            SellerReport: 利益降順のレポート

        Raises:
            InvalidDataError: 入力データが不正な場合
            InvalidOptionsError: オプションが不正な場合
        """
        # Step 1: 入力チェック（データには触れない）
        self._validate_data()
        self._validate_options()
        self._notify_progress("入力チェック完了", 10)

        # Step 2: 販売者・商品の索引作成
        self._build_seller_stats()
        self._build_product_index()
        self._notify_progress("販売者・商品の索引作成完了", 20)

        # Step 3: 購入履歴の集計
        self._aggregate_purchase_records()
        self._notify_progress("購入履歴の集計完了", 70)

        # Step 4: 利益順位付け
        self._rank_sellers()
        self._notify_progress("利益順位付け完了", 80)

        # Step 5: ボーナス・売れ筋商品の確定
        self._finalize_sellers()
        self._notify_progress("ボーナス計算完了", 90)

        report = SellerReport(self._build_row(seller) for seller in self.seller_stats)
        self._notify_progress("集計完了", 100)
        return report

    def _validate_data(self) -> None:
        """
        入力データの形式チェック

        Raises:
            InvalidDataError: 入力データが不正な場合
        """
        if not isinstance(self.data, Mapping):
            raise InvalidDataError("入力データが不正です: data がありません", field="data")

        for key in ("sellers", "products"):
            value = self.data.get(key)
            if not _is_sequence(value) or len(value) == 0:
                raise InvalidDataError(
                    f"入力データが不正です: {key} は空でないリストを指定してください",
                    field=key
                )

        if not _is_sequence(self.data.get("purchase_records")):
            raise InvalidDataError(
                "入力データが不正です: purchase_records はリストを指定してください",
                field="purchase_records"
            )

    def _validate_options(self) -> None:
        """
        オプションのチェック

        Raises:
            InvalidOptionsError: オプションが不正な場合
        """
        if isinstance(self.options, AnalysisOptions):
            calculate_revenue = self.options.calculate_revenue
            calculate_bonus = self.options.calculate_bonus
        elif isinstance(self.options, Mapping):
            calculate_revenue = self.options.get("calculate_revenue")
            calculate_bonus = self.options.get("calculate_bonus")
        else:
            raise InvalidOptionsError("オプションが不足しています: options がありません", field="options")

        for name, func in (("calculate_revenue", calculate_revenue),
                           ("calculate_bonus", calculate_bonus)):
            if not callable(func):
                raise InvalidOptionsError(
                    f"オプションが不足しています: {name} に関数を指定してください",
                    field=name
                )

        self.calculate_revenue = calculate_revenue
        self.calculate_bonus = calculate_bonus

    def _build_seller_stats(self) -> None:
        """
        販売者ごとの集計データを初期化

        索引は id を文字列化したキーで引く。レポートの seller_id は入力の値のまま。
        """
        self.seller_stats = [
            SellerStats(
                seller_id=seller["id"],
                name=f"{seller['first_name']} {seller['last_name']}"
            )
            for seller in self.data["sellers"]
        ]
        self.seller_index = {_index_key(stats.seller_id): stats for stats in self.seller_stats}
        self.skipped_records = 0
        self.skipped_items = 0
        logger.info(f"販売者数: {len(self.seller_stats)}")

    def _build_product_index(self) -> None:
        """SKU → 商品の索引を作成"""
        self.product_index = {_index_key(product["sku"]): product for product in self.data["products"]}
        logger.info(f"商品数: {len(self.product_index)}")

    def _aggregate_purchase_records(self) -> None:
        """購入履歴を販売者ごとに集計"""
        for record in self.data["purchase_records"]:
            seller = self.seller_index.get(_index_key(record.get("seller_id")))
            if seller is None:
                logger.debug(f"未登録の販売者のためスキップ: seller_id={record.get('seller_id')}")
                self.skipped_records += 1
                continue

            seller.sales_count += 1
            seller.revenue += record["total_amount"]

            for item in record.get("items", ()):
                product = self.product_index.get(_index_key(item.get("sku")))
                if product is None:
                    logger.debug(f"未登録の商品のためスキップ: sku={item.get('sku')}")
                    self.skipped_items += 1
                    continue

                cost = product["purchase_price"] * item["quantity"]
                revenue = self.calculate_revenue(item, product)
                seller.profit += revenue - cost

                sku = product["sku"]
                seller.products_sold[sku] = seller.products_sold.get(sku, 0) + item["quantity"]

        logger.info(f"購入履歴: {len(self.data['purchase_records'])}件")
        if self.skipped_records or self.skipped_items:
            logger.warning(
                f"マスタにない参照をスキップしました: 購入履歴{self.skipped_records}件, 明細{self.skipped_items}件"
            )

    def _rank_sellers(self) -> None:
        """利益の降順に並べ替え（同額は入力順を維持）"""
        self.seller_stats = sorted(self.seller_stats, key=lambda s: s.profit, reverse=True)

    def _finalize_sellers(self) -> None:
        """順位に応じたボーナスと売れ筋商品を確定"""
        total = len(self.seller_stats)
        for index, seller in enumerate(self.seller_stats):
            seller.bonus = self.calculate_bonus(index, total, seller)
            seller.top_products = self._top_products(seller)
            logger.info(
                f"販売者 {seller.name}: 売上 {round_money(seller.revenue):,.2f} / "
                f"利益 {round_money(seller.profit):,.2f} / ボーナス {round_money(seller.bonus):,.2f}"
            )

    def _top_products(self, seller: SellerStats) -> List[TopProduct]:
        """販売数量の多い順に上位商品を取得（同数は最初に売れた順）"""
        ranked = sorted(seller.products_sold.items(), key=lambda kv: kv[1], reverse=True)
        return [TopProduct(sku=sku, quantity=quantity)
                for sku, quantity in ranked[:self.TOP_PRODUCTS_LIMIT]]

    def _build_row(self, seller: SellerStats) -> ReportRow:
        """集計中データからレポート行を作成"""
        return ReportRow(
            seller_id=seller.seller_id,
            name=seller.name,
            revenue=round_money(seller.revenue),
            profit=round_money(seller.profit),
            sales_count=seller.sales_count,
            top_products=tuple(seller.top_products),
            bonus=round_money(seller.bonus)
        )


def analyze_sales_data(
    data: Mapping,
    options,
    progress_callback: Optional[Callable[[str, int], None]] = None
) -> SellerReport:
    """
    販売者別の売上レポートを作成

    Args:
        data: sellers / products / purchase_records を持つ入力データ
        options: AnalysisOptions、または calculate_revenue / calculate_bonus を持つ辞書
        progress_callback: 進捗通知用コールバック (message, percentage)

    Returns:
        SellerReport: 利益降順のレポート
    """
    return SellerReportAggregator(data, options, progress_callback).aggregate()
