"""
Voice catalog.

Known voice codes of the remote endpoint, grouped by category. The pipeline
treats voice codes as opaque strings; the catalog only backs ``--voices``,
``GET /v1/voices`` and the CLI's up-front voice check. Some codes appear in
more than one category; lookups by code return the first entry.
"""
from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional


class Voice(NamedTuple):
    name: str
    code: str
    category: str
    language: str


ENGLISH_STANDARD = "English Standard"
ENGLISH_CHARACTER = "English Character"
ENGLISH_SEASONAL = "English Seasonal"
ENGLISH_DISNEY = "English Disney"
FRENCH = "French"
SPANISH = "Spanish"
PORTUGUESE = "Portuguese"
GERMAN = "German"
INDONESIAN = "Indonesian"
JAPANESE = "Japanese"
KOREAN = "Korean"
VIETNAMESE = "Vietnamese"
OTHER = "Other"

CATEGORIES = (
    ENGLISH_STANDARD,
    ENGLISH_CHARACTER,
    ENGLISH_SEASONAL,
    ENGLISH_DISNEY,
    FRENCH,
    SPANISH,
    PORTUGUESE,
    GERMAN,
    INDONESIAN,
    JAPANESE,
    KOREAN,
    VIETNAMESE,
    OTHER,
)

VOICES: tuple[Voice, ...] = (
    # English Standard
    Voice("Jessie", "en_us_002", ENGLISH_STANDARD, "English"),
    Voice("Joey", "en_us_006", ENGLISH_STANDARD, "English"),
    Voice("Professor", "en_us_007", ENGLISH_STANDARD, "English"),
    Voice("Scientist", "en_us_009", ENGLISH_STANDARD, "English"),
    Voice("Confidence", "en_us_010", ENGLISH_STANDARD, "English"),
    Voice("Male English UK", "en_uk_001", ENGLISH_STANDARD, "English"),
    Voice("Male English UK 2", "en_uk_003", ENGLISH_STANDARD, "English"),
    Voice("Metro (Australian)", "en_au_001", ENGLISH_STANDARD, "English"),
    Voice("Smooth (Australian)", "en_au_002", ENGLISH_STANDARD, "English"),

    # English Character Voices
    Voice("Game On", "en_male_jomboy", ENGLISH_CHARACTER, "English"),
    Voice("Warm", "es_mx_002", ENGLISH_CHARACTER, "English"),
    Voice("Wacky", "en_male_funny", ENGLISH_CHARACTER, "English"),
    Voice("Scream", "en_us_ghostface", ENGLISH_CHARACTER, "English"),
    Voice("Empathetic", "en_female_samc", ENGLISH_CHARACTER, "English"),
    Voice("Serious", "en_male_cody", ENGLISH_CHARACTER, "English"),
    Voice("Beauty Guru", "en_female_makeup", ENGLISH_CHARACTER, "English"),
    Voice("Bestie", "en_female_richgirl", ENGLISH_CHARACTER, "English"),
    Voice("Trickster", "en_male_grinch", ENGLISH_CHARACTER, "English"),
    Voice("Story Teller", "en_male_narration", ENGLISH_CHARACTER, "English"),
    Voice("Mr. GoodGuy", "en_male_deadpool", ENGLISH_CHARACTER, "English"),
    Voice("Narrator", "en_uk_001", ENGLISH_CHARACTER, "English"),
    Voice("Alfred", "en_male_jarvis", ENGLISH_CHARACTER, "English"),
    Voice("Ashmagic", "en_male_ashmagic", ENGLISH_CHARACTER, "English"),
    Voice("Olantekkers", "en_male_olantekkers", ENGLISH_CHARACTER, "English"),
    Voice("Lord Cringe", "en_male_ukneighbor", ENGLISH_CHARACTER, "English"),
    Voice("Mr. Meticulous", "en_male_ukbutler", ENGLISH_CHARACTER, "English"),
    Voice("Debutante", "en_female_shenna", ENGLISH_CHARACTER, "English"),
    Voice("Varsity", "en_female_pansino", ENGLISH_CHARACTER, "English"),
    Voice("Marty", "en_male_trevor", ENGLISH_CHARACTER, "English"),
    Voice("Pop Lullaby", "en_female_f08_twinkle", ENGLISH_CHARACTER, "English"),
    Voice("Classic Electric", "en_male_m03_classical", ENGLISH_CHARACTER, "English"),
    Voice("Bae", "en_female_betty", ENGLISH_CHARACTER, "English"),
    Voice("Cupid", "en_male_cupid", ENGLISH_CHARACTER, "English"),
    Voice("Granny", "en_female_grandma", ENGLISH_CHARACTER, "English"),
    Voice("Cozy", "en_male_m2_xhxs_m03_christmas", ENGLISH_CHARACTER, "English"),
    Voice("Peaceful", "en_female_emotional", ENGLISH_CHARACTER, "English"),
    Voice("Toon Beat", "en_male_m03_sunshine_soon", ENGLISH_CHARACTER, "English"),
    Voice("Open Mic", "en_female_f08_warmy_breeze", ENGLISH_CHARACTER, "English"),
    Voice("Jingle", "en_male_m03_lobby", ENGLISH_CHARACTER, "English"),
    Voice("Cottagecore", "en_female_f08_salut_damour", ENGLISH_CHARACTER, "English"),

    # English Seasonal
    Voice("Author", "en_male_santa_narration", ENGLISH_SEASONAL, "English"),
    Voice("Caroler", "en_male_sing_deep_jingle", ENGLISH_SEASONAL, "English"),
    Voice("Santa", "en_male_santa_effect", ENGLISH_SEASONAL, "English"),
    Voice("NYE 2023", "en_female_ht_f08_newyear", ENGLISH_SEASONAL, "English"),
    Voice("Magician", "en_male_wizard", ENGLISH_SEASONAL, "English"),
    Voice("Opera", "en_female_ht_f08_halloween", ENGLISH_SEASONAL, "English"),
    Voice("Euphoric", "en_female_ht_f08_glorious", ENGLISH_SEASONAL, "English"),
    Voice("Hypetrain", "en_male_sing_funny_it_goes_up", ENGLISH_SEASONAL, "English"),
    Voice("Melodrama", "en_female_ht_f08_wonderful_world", ENGLISH_SEASONAL, "English"),
    Voice("Quirky Time", "en_male_m2_xhxs_m03_silly", ENGLISH_SEASONAL, "English"),
    Voice("Thanksgiving", "en_male_sing_funny_thanksgiving", ENGLISH_SEASONAL, "English"),

    # English Disney
    Voice("Ghost Face", "en_us_ghostface", ENGLISH_DISNEY, "English"),
    Voice("Chewbacca", "en_us_chewbacca", ENGLISH_DISNEY, "English"),
    Voice("C3PO", "en_us_c3po", ENGLISH_DISNEY, "English"),
    Voice("Stitch", "en_us_stitch", ENGLISH_DISNEY, "English"),
    Voice("Stormtrooper", "en_us_stormtrooper", ENGLISH_DISNEY, "English"),
    Voice("Rocket", "en_us_rocket", ENGLISH_DISNEY, "English"),
    Voice("Madame Leota", "en_female_madam_leota", ENGLISH_DISNEY, "English"),
    Voice("Ghost Host", "en_male_ghosthost", ENGLISH_DISNEY, "English"),
    Voice("Pirate", "en_male_pirate", ENGLISH_DISNEY, "English"),

    # French
    Voice("French - Male 1", "fr_001", FRENCH, "French"),
    Voice("French - Male 2", "fr_002", FRENCH, "French"),

    # Spanish
    Voice("Spanish (Spain) - Male", "es_002", SPANISH, "Spanish"),
    Voice("Spanish MX - Male", "es_mx_002", SPANISH, "Spanish"),

    # Portuguese
    Voice("Portuguese BR - Female 1", "br_001", PORTUGUESE, "Portuguese"),
    Voice("Portuguese BR - Female 2", "br_003", PORTUGUESE, "Portuguese"),
    Voice("Portuguese BR - Female 3", "br_004", PORTUGUESE, "Portuguese"),
    Voice("Portuguese BR - Male", "br_005", PORTUGUESE, "Portuguese"),
    Voice("Ivete Sangalo", "bp_female_ivete", PORTUGUESE, "Portuguese"),
    Voice("Ludmilla", "bp_female_ludmilla", PORTUGUESE, "Portuguese"),
    Voice("Lhays Macedo", "pt_female_lhays", PORTUGUESE, "Portuguese"),
    Voice("Laizza", "pt_female_laizza", PORTUGUESE, "Portuguese"),
    Voice("Galvão Bueno", "pt_male_bueno", PORTUGUESE, "Portuguese"),

    # German
    Voice("German - Female", "de_001", GERMAN, "German"),
    Voice("German - Male", "de_002", GERMAN, "German"),

    # Indonesian
    Voice("Indonesian - Female", "id_001", INDONESIAN, "Indonesian"),

    # Japanese
    Voice("Japanese - Female 1", "jp_001", JAPANESE, "Japanese"),
    Voice("Japanese - Female 2", "jp_003", JAPANESE, "Japanese"),
    Voice("Japanese - Female 3", "jp_005", JAPANESE, "Japanese"),
    Voice("Japanese - Male", "jp_006", JAPANESE, "Japanese"),
    Voice("りーさ", "jp_female_fujicochan", JAPANESE, "Japanese"),
    Voice("世羅鈴", "jp_female_hasegawariona", JAPANESE, "Japanese"),
    Voice("Morio's Kitchen", "jp_male_keiichinakano", JAPANESE, "Japanese"),
    Voice("夏絵ココ", "jp_female_oomaeaika", JAPANESE, "Japanese"),
    Voice("低音ボイス", "jp_male_yujinchigusa", JAPANESE, "Japanese"),
    Voice("四郎", "jp_female_shirou", JAPANESE, "Japanese"),
    Voice("玉川寿紀", "jp_male_tamawakazuki", JAPANESE, "Japanese"),
    Voice("庄司果織", "jp_female_kaorishoji", JAPANESE, "Japanese"),
    Voice("八木沙季", "jp_female_yagishaki", JAPANESE, "Japanese"),
    Voice("ヒカキン", "jp_male_hikakin", JAPANESE, "Japanese"),
    Voice("丸山礼", "jp_female_rei", JAPANESE, "Japanese"),
    Voice("修一朗", "jp_male_shuichiro", JAPANESE, "Japanese"),
    Voice("マツダ家の日常", "jp_male_matsudake", JAPANESE, "Japanese"),
    Voice("まちこりーた", "jp_female_machikoriiita", JAPANESE, "Japanese"),
    Voice("モジャオ", "jp_male_matsuo", JAPANESE, "Japanese"),
    Voice("モリスケ", "jp_male_osada", JAPANESE, "Japanese"),

    # Korean
    Voice("Korean - Male 1", "kr_002", KOREAN, "Korean"),
    Voice("Korean - Female", "kr_003", KOREAN, "Korean"),
    Voice("Korean - Male 2", "kr_004", KOREAN, "Korean"),

    # Vietnamese
    Voice("Vietnamese - Female", "BV074_streaming", VIETNAMESE, "Vietnamese"),
    Voice("Vietnamese - Male", "BV075_streaming", VIETNAMESE, "Vietnamese"),

    # Other
    Voice("Alto", "en_female_f08_salut_damour", OTHER, "Other"),
    Voice("Tenor", "en_male_m03_lobby", OTHER, "Other"),
    Voice("Sunshine Soon", "en_male_m03_sunshine_soon", OTHER, "Other"),
    Voice("Warmy Breeze", "en_female_f08_warmy_breeze", OTHER, "Other"),
    Voice("Glorious", "en_female_ht_f08_glorious", OTHER, "Other"),
    Voice("It Goes Up", "en_male_sing_funny_it_goes_up", OTHER, "Other"),
    Voice("Chipmunk", "en_male_m2_xhxs_m03_silly", OTHER, "Other"),
    Voice("Dramatic", "en_female_ht_f08_wonderful_world", OTHER, "Other"),
)

POPULAR_CODES = (
    "en_us_002",
    "en_us_006",
    "en_uk_001",
    "en_uk_003",
    "en_au_001",
    "en_female_samc",
    "en_male_narration",
    "fr_001",
    "es_002",
    "jp_001",
)

_BY_CODE: Dict[str, Voice] = {}
for _voice in VOICES:
    _BY_CODE.setdefault(_voice.code, _voice)


def get_voice_by_code(code: str) -> Optional[Voice]:
    return _BY_CODE.get(code)


def is_known_voice(code: str) -> bool:
    return code in _BY_CODE


def voices_by_category() -> Dict[str, List[Voice]]:
    """Return the catalog grouped by category, in catalog order."""
    grouped: Dict[str, List[Voice]] = {category: [] for category in CATEGORIES}
    for voice in VOICES:
        grouped[voice.category].append(voice)
    return grouped


def popular_voices() -> List[Voice]:
    return [_BY_CODE[code] for code in POPULAR_CODES if code in _BY_CODE]
