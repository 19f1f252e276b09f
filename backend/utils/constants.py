"""
Keyword category constants.

Every Keyword Set has exactly these three categories. The labels are the
localized names used in CSV exports and in the staff UI.
"""

MENU_SERVICE = "menu_service"
ENVIRONMENT_FACILITY = "environment_facility"
RECOMMENDED_SCENE = "recommended_scene"

# Order matters: exports and prompts list categories in this order
KEYWORD_CATEGORIES = (MENU_SERVICE, ENVIRONMENT_FACILITY, RECOMMENDED_SCENE)

CATEGORY_LABELS = {
    MENU_SERVICE: "メニュー・サービス",
    ENVIRONMENT_FACILITY: "環境・設備",
    RECOMMENDED_SCENE: "おすすめの利用シーン",
}

# Upper bound for a single keyword (characters, after trimming)
MAX_KEYWORD_LENGTH = 100

FACILITIES_TABLE = "facilities"
KEYWORDS_TABLE = "keywords"
