"""
config.py - パス解決・アプリ定数
Ticket Board v0.1
"""

import os
import sys

# ---------------------------------------------------------------------------
# パス解決（exe 化対応）
# ---------------------------------------------------------------------------


def get_base_path() -> str:
    """
    実行環境に応じてアプリのベースディレクトリを返す。
    - exe 化後  : exe ファイルの存在するディレクトリ
    - スクリプト: プロジェクトルート
    """
    if getattr(sys, "frozen", False):
        return os.path.dirname(sys.executable)
    # config.py is in ticketboard/, so project root is one level up
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


BASE_PATH = get_base_path()

# チケット一覧の JSON（外部ストアが書き出したもの）
TICKETS_PATH = os.environ.get(
    "TICKETBOARD_TICKETS", os.path.join(BASE_PATH, "tickets.json")
)
LOG_LEVEL = os.environ.get("TICKETBOARD_LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# エンジン定数
# ---------------------------------------------------------------------------

APP_TITLE = "Ticket Board"

DRAG_THRESHOLD = 4  # px (Manhattan) before a pending press becomes a drag
DEFAULT_SORT_FIELD = "priority"
DEFAULT_SORT_DIR = "asc"
UNGROUPED_KEY = "__ungrouped__"
UNGROUPED_LABEL = "Ungrouped"

# Graph view node size handed to the layout function
NODE_WIDTH = 340
NODE_HEIGHT = 56

# ---------------------------------------------------------------------------
# カラーパレット（ダーク / Linear ライク）
# ---------------------------------------------------------------------------

COLOR_BG = "#09090B"
COLOR_CARD = "#18181B"
COLOR_CARD_SELECTED = "#1E293B"
COLOR_BORDER = "#27272A"
COLOR_TEXT_MUTED = "#71717A"
COLOR_TEXT_MAIN = "#E4E4E7"
COLOR_PRIMARY = "#3B82F6"

STATUS_COLORS = {
    "open": "#3B82F6",
    "in_progress": "#F59E0B",
    "closed": "#22C55E",
    "cancelled": "#71717A",
}

# UI 定数
BORDER_RADIUS_CARD = 6
ROW_HEIGHT = 40
