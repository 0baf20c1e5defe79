"""Internationalization for cart notices"""

SUPPORTED_LANGUAGES = {
    "en": "English",
    "pt": "Português",
}

DEFAULT_LANGUAGE = "en"

_TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        "cart.out_of_stock": "Product out of stock",
        "cart.insufficient_stock": "Requested quantity is out of stock",
        "cart.update_failed": "Failed to change product quantity",
        "cart.remove_failed": "Failed to remove product",
        "cart.add_failed": "Failed to add product",
    },
    "pt": {
        "cart.out_of_stock": "Quantidade solicitada fora de estoque",
        "cart.insufficient_stock": "Quantidade solicitada fora de estoque",
        "cart.update_failed": "Erro na alteração de quantidade do produto",
        "cart.remove_failed": "Erro na remoção do produto",
        "cart.add_failed": "Erro na adição do produto",
    },
}


def detect_language(language_code: str | None) -> str:
    """
    Normalize a language code to a supported one.

    Args:
        language_code: Code such as "pt-BR", "en" or None

    Returns:
        Supported language code, DEFAULT_LANGUAGE otherwise
    """
    if not language_code:
        return DEFAULT_LANGUAGE

    # Normalize: "pt-BR" -> "pt"
    lang = language_code.split("-")[0].lower()
    return lang if lang in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def get_text(key: str, lang: str = DEFAULT_LANGUAGE, default: str | None = None) -> str:
    """
    Get translated text by key.

    Falls back to English, then to ``default``, then to the key itself.
    """
    lang = detect_language(lang)

    text = _TRANSLATIONS[lang].get(key)
    if text is None and lang != DEFAULT_LANGUAGE:
        text = _TRANSLATIONS[DEFAULT_LANGUAGE].get(key)

    if text is None:
        return default if default is not None else key

    return text
