"""Cantonese romanization (Jyutping, tone numbers always shown)."""

from typing import Dict, List, Optional

from ..models import RomanizationOptions
from .base import Piece, TransliterationEngine, split_runs
from .chinese import HAN_CHAR_RE

UNKNOWN_SYLLABLE = "?"

JYUTPING = {
    # Particles, negation and pronouns
    "嘅": "ge3", "咗": "zo2", "咁": "gam3", "啲": "di1", "嘢": "je5",
    "唔": "m4", "係": "hai6", "佢": "keoi5", "哋": "dei6", "喺": "hai2",
    "冇": "mou5", "嚟": "lai4", "乜": "mat1", "啦": "laa1", "呀": "aa3",
    # Polyphonic characters take their most common reading
    "行": "haang4", "更": "gaang1",
    "你": "nei5", "好": "hou2", "我": "ngo5", "有": "jau5", "去": "heoi3",
    "食": "sik6", "飲": "jam2", "睇": "tai2", "聽": "teng1", "講": "gong2",
    "話": "waa6", "知": "zi1", "道": "dou6", "做": "zou6", "買": "maai5",
    "賣": "maai6", "錢": "cin4", "屋": "uk1", "企": "kei5", "坐": "co5",
    "走": "zau2", "跑": "paau2", "跳": "tiu3", "游": "jau4", "大": "daai6",
    "細": "sai3", "高": "gou1", "矮": "ai2", "長": "coeng4", "短": "dyun2",
    "肥": "fei4", "瘦": "sau3", "新": "san1", "舊": "gau6", "靚": "leng3",
    "醜": "cau2", "快": "faai3", "慢": "maan6", "早": "zou2", "遲": "ci4",
    "熱": "jit6", "凍": "dung3", "暖": "nyun5", "涼": "loeng4",
    # Common lyric vocabulary
    "愛": "oi3", "心": "sam1", "人": "jan4", "一": "jat1", "天": "tin1",
    "的": "dik1", "是": "si6", "不": "bat1", "在": "zoi6", "個": "go3",
    "世": "sai3", "界": "gaai3", "夢": "mung6", "風": "fung1", "雨": "jyu5",
    "情": "cing4", "歌": "go1", "唱": "coeng3", "月": "jyut6", "光": "gwong1",
    "海": "hoi2", "花": "faa1", "時": "si4", "間": "gaan1", "生": "saang1",
    "日": "jat6", "夜": "je6", "明": "ming4", "白": "baak6", "紅": "hung4",
    "淚": "leoi6", "笑": "siu3", "等": "dang2", "誰": "seoi4", "最": "zeoi3",
    "今": "gam1", "未": "mei6", "也": "jaa5", "都": "dou1", "會": "wui5",
    "想": "soeng2", "再": "zoi3", "見": "gin3", "多": "do1", "少": "siu2",
    "香": "hoeng1", "港": "gong2", "中": "zung1", "國": "gwok3", "文": "man4",
    "粵": "jyut6", "語": "jyu5",
}

# Simplified -> traditional so simplified input still hits the table
SIMPLIFIED_TO_TRADITIONAL = {
    "讲": "講", "话": "話", "听": "聽", "买": "買", "卖": "賣",
    "钱": "錢", "长": "長", "细": "細", "旧": "舊", "靓": "靚",
    "丑": "醜", "迟": "遲", "热": "熱", "冻": "凍", "凉": "涼",
    "饮": "飲", "爱": "愛", "个": "個", "梦": "夢", "风": "風",
    "时": "時", "间": "間", "红": "紅", "泪": "淚", "谁": "誰",
    "会": "會", "见": "見", "国": "國", "语": "語", "粤": "粵",
}


class CantoneseEngine(TransliterationEngine):
    """Table-driven Jyutping; unknown Han characters become ``?``."""

    script = "yue"
    name = "CantoneseEngine"
    systems = ("jyutping",)
    confidence = 0.90
    variants = SIMPLIFIED_TO_TRADITIONAL

    def __init__(self, table: Optional[Dict[str, str]] = None):
        self.table = dict(JYUTPING)
        if table:
            self.table.update(table)

    def transliterate(
        self, text: str, system: str, options: RomanizationOptions
    ) -> List[Piece]:
        pieces: List[Piece] = []
        for start, end, chunk, is_han in split_runs(text, HAN_CHAR_RE):
            if is_han:
                syllable = self.table.get(chunk, UNKNOWN_SYLLABLE)
                pieces.append(Piece(start, end, syllable))
            else:
                pieces.append(Piece(start, end, chunk, converted=False))
        return pieces
