"""
Tests for the CSV / JSON export builders.
"""

import csv
import io

from backend.services.export_service import CSV_HEADER, build_csv, build_json_export

FACILITY = {
    "id": 7,
    "facility_name": "Sample Diner",
    "business_type": "restaurant",
    "address": "東京都渋谷区神南1-2-3",
    "created_by": "user-1",
}

KEYWORDS = {
    "menu_service": ["ランチ", "ディナー, コース"],
    "environment_facility": ["個室あり"],
    "recommended_scene": ["デート", "記念日", "女子会"],
}


class TestBuildCsv:
    """build_csv() writes one row per keyword after the header."""

    def test_header_and_row_count(self):
        rows = list(csv.reader(io.StringIO(build_csv(FACILITY, KEYWORDS))))

        assert rows[0] == CSV_HEADER == ["施設名", "業種", "住所", "カテゴリ", "キーワード"]
        assert len(rows) == 1 + 2 + 1 + 3

    def test_rows_carry_facility_and_category_label(self):
        rows = list(csv.reader(io.StringIO(build_csv(FACILITY, KEYWORDS))))

        assert rows[1] == ["Sample Diner", "restaurant", "東京都渋谷区神南1-2-3", "メニュー・サービス", "ランチ"]
        assert rows[2][4] == "ディナー, コース"
        assert rows[3][3] == "環境・設備"
        assert rows[4][3] == "おすすめの利用シーン"

    def test_empty_keyword_set_gives_header_only(self):
        content = build_csv({"facility_name": "X"}, {})

        assert content == "施設名,業種,住所,カテゴリ,キーワード\n"


class TestBuildJsonExport:
    def test_selected_fields_only(self):
        export = build_json_export(FACILITY, KEYWORDS)

        assert export["facility"]["facility_name"] == "Sample Diner"
        assert "created_by" not in export["facility"]
        assert export["keywords"] == KEYWORDS
