"""
Static fallback keywords.

Used when AI generation is unavailable or its output is unusable. The result
depends only on the facility's business_type, address and facility_name, so
the same facility always gets the same keywords.
"""

import re
from typing import Any, Dict, List, Mapping, Tuple

from backend.utils.constants import (
    ENVIRONMENT_FACILITY,
    MAX_KEYWORD_LENGTH,
    MENU_SERVICE,
    RECOMMENDED_SCENE,
)

# (business type tokens, keyword table); checked in order, first match wins.
# ASCII tokens match whole words only ("inn" must not match "dinner").
_BUSINESS_TYPE_TABLES: Tuple[Tuple[Tuple[str, ...], Dict[str, List[str]]], ...] = (
    (
        ("restaurant", "cafe", "café", "diner", "dinner", "bistro", "izakaya",
         "レストラン", "飲食", "カフェ", "居酒屋"),
        {
            MENU_SERVICE: [
                "ランチメニュー", "ディナーコース", "テイクアウト", "宴会プラン",
                "飲み放題", "食べ放題", "季節限定メニュー",
            ],
            ENVIRONMENT_FACILITY: [
                "個室あり", "座敷あり", "テラス席", "禁煙", "駐車場完備",
                "Wi-Fi完備", "バリアフリー",
            ],
            RECOMMENDED_SCENE: [
                "家族での食事", "デート", "接待", "女子会", "宴会",
                "記念日", "誕生日",
            ],
        },
    ),
    (
        ("salon", "beauty", "hair", "美容", "サロン", "ヘア"),
        {
            MENU_SERVICE: [
                "カット", "カラー", "パーマ", "トリートメント", "ヘッドスパ",
                "マツエク", "ネイル",
            ],
            ENVIRONMENT_FACILITY: [
                "完全個室", "駐車場あり", "予約制", "キッズスペース",
                "バリアフリー", "Wi-Fi完備",
            ],
            RECOMMENDED_SCENE: [
                "結婚式前", "デート前", "就職活動", "記念日",
                "イメージチェンジ", "リフレッシュ",
            ],
        },
    ),
    (
        ("hotel", "inn", "ryokan", "lodging", "ホテル", "旅館", "宿"),
        {
            MENU_SERVICE: [
                "朝食付き", "夕食付き", "温泉", "マッサージ", "ルームサービス",
                "送迎サービス", "観光案内",
            ],
            ENVIRONMENT_FACILITY: [
                "大浴場", "露天風呂", "Wi-Fi完備", "駐車場無料",
                "バリアフリー", "禁煙ルーム",
            ],
            RECOMMENDED_SCENE: [
                "家族旅行", "カップル旅行", "一人旅", "ビジネス出張",
                "記念日", "女子旅", "グループ旅行",
            ],
        },
    ),
)

_GENERIC_TABLE: Dict[str, List[str]] = {
    MENU_SERVICE: [
        "サービスメニュー", "料金プラン", "初回割引", "定期コース",
        "会員特典", "期間限定",
    ],
    ENVIRONMENT_FACILITY: [
        "駐車場あり", "アクセス便利", "バリアフリー", "Wi-Fi完備",
        "予約可能", "完全個室",
    ],
    RECOMMENDED_SCENE: [
        "家族で利用", "友人と一緒に", "デート", "記念日",
        "リラックスタイム", "日常使い",
    ],
}

# Prefecture / city / ward / town / village suffixes
_ADDRESS_SPLIT = re.compile(r"[都道府県市区町村]")

_DEFAULT_PLACE_LABEL = "店舗"


def _text(facility: Mapping[str, Any], key: str) -> str:
    value = facility.get(key)
    return value.strip() if isinstance(value, str) else ""


def _matches(token: str, lowered: str) -> bool:
    if token.isascii():
        return re.search(rf"\b{re.escape(token)}\b", lowered) is not None
    return token in lowered


def _table_for(business_type: str) -> Dict[str, List[str]]:
    lowered = business_type.lower()
    if lowered:
        for tokens, table in _BUSINESS_TYPE_TABLES:
            if any(_matches(token, lowered) for token in tokens):
                return table
    return _GENERIC_TABLE


def _location_keywords(address: str, business_type: str) -> List[str]:
    parts = _ADDRESS_SPLIT.split(address)
    area = parts[0].strip()
    if len(parts) < 2 or not area:
        return []

    return [
        f"{area}の{business_type or _DEFAULT_PLACE_LABEL}",
        f"{area}エリア",
        f"{area}周辺",
    ]


def generate_fallback_keywords(facility: Mapping[str, Any]) -> Dict[str, List[str]]:
    """
    Build a Keyword Set from the static tables.

    - business_type picks the restaurant, salon, hotel or generic table
      (case-insensitive; English tokens match whole words; missing type -> generic)
    - an address like "東京都渋谷区..." adds area keywords to menu_service
    - facility_name adds one keyword per category
    - derived keywords longer than MAX_KEYWORD_LENGTH are dropped

    Returns:
        Keyword Set with all three categories non-empty
    """
    business_type = _text(facility, "business_type")
    address = _text(facility, "address")
    name = _text(facility, "facility_name")

    table = _table_for(business_type)
    keywords = {category: list(values) for category, values in table.items()}

    if address:
        keywords[MENU_SERVICE].extend(_location_keywords(address, business_type))

    if name:
        keywords[MENU_SERVICE].append(f"{name}のおすすめメニュー")
        keywords[ENVIRONMENT_FACILITY].append(f"{name}の設備")
        keywords[RECOMMENDED_SCENE].append(f"{name}でのひととき")

    return {
        category: [keyword for keyword in values if len(keyword) <= MAX_KEYWORD_LENGTH]
        for category, values in keywords.items()
    }
