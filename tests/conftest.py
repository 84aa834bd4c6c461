"""
テスト共通フィクスチャ
"""
import pytest

from sales_report.aggregator import AnalysisOptions


def make_seller(seller_id, first_name="Ann", last_name="Lee"):
    return {"id": seller_id, "first_name": first_name, "last_name": last_name}


def make_item(sku, quantity, sale_price, discount=0):
    return {"sku": sku, "quantity": quantity, "sale_price": sale_price, "discount": discount}


def make_record(seller_id, total_amount, items):
    return {"seller_id": seller_id, "total_amount": total_amount, "items": items}


@pytest.fixture
def options():
    return AnalysisOptions()


@pytest.fixture
def ann_lee_data():
    """販売者1人・商品1件・購入1件の最小データ"""
    return {
        "sellers": [make_seller(1)],
        "products": [{"sku": "A1", "purchase_price": 10}],
        "purchase_records": [make_record(1, 50, [make_item("A1", 2, 30)])],
    }


@pytest.fixture
def team_data():
    """販売者5人の集計用データ"""
    sellers = [
        make_seller("s1", "Ann", "Lee"),
        make_seller("s2", "Bob", "Ray"),
        make_seller("s3", "Cid", "Moe"),
        make_seller("s4", "Dee", "Fox"),
        make_seller("s5", "Eve", "Kim"),
    ]
    products = [
        {"sku": "P1", "purchase_price": 10},
        {"sku": "P2", "purchase_price": 20},
        {"sku": "P3", "purchase_price": 5},
    ]
    records = [
        # s1: 利益 (50-10)*4 = 160
        make_record("s1", 200, [make_item("P1", 4, 50)]),
        # s2: 利益 (40-20)*2 + (15-5)*3 = 70
        make_record("s2", 125, [make_item("P2", 2, 40), make_item("P3", 3, 15)]),
        # s3: 利益 (30-10)*1 = 20
        make_record("s3", 30, [make_item("P1", 1, 30)]),
        # s4: 利益 (25-20)*2 = 10
        make_record("s4", 50, [make_item("P2", 2, 25)]),
        # s5: 利益 (8-5)*1 = 3
        make_record("s5", 8, [make_item("P3", 1, 8)]),
        # s1: 利益 (15-5)*2 = 20 → 合計 180
        make_record("s1", 30, [make_item("P3", 2, 15)]),
    ]
    return {"sellers": sellers, "products": products, "purchase_records": records}
