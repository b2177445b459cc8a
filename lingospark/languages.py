"""Fixed catalog of selectable languages."""

from typing import List, Optional

from .models import Language

SUPPORTED_LANGUAGES: List[Language] = [
    Language(code="en", name="English", flag="🇬🇧"),
    Language(code="zh", name="Chinese", flag="🇨🇳"),
    Language(code="es", name="Spanish", flag="🇪🇸"),
    Language(code="fr", name="French", flag="🇫🇷"),
    Language(code="de", name="German", flag="🇩🇪"),
    Language(code="ja", name="Japanese", flag="🇯🇵"),
    Language(code="ko", name="Korean", flag="🇰🇷"),
    Language(code="ru", name="Russian", flag="🇷🇺"),
    Language(code="pt", name="Portuguese", flag="🇧🇷"),
    Language(code="it", name="Italian", flag="🇮🇹"),
]

_BY_CODE = {lang.code: lang for lang in SUPPORTED_LANGUAGES}


def get_language(code: str) -> Optional[Language]:
    """Look up a catalog entry by its code."""
    return _BY_CODE.get(code)
