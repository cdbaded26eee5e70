from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Language:
    code: str
    name: str
    native: str


SUPPORTED_LANGUAGES: tuple[Language, ...] = (
    Language("ar", "Arabic", "العربية"),
    Language("bn", "Bengali", "বাংলা"),
    Language("zh", "Chinese (Simplified)", "简体中文"),
    Language("zh-TW", "Chinese (Traditional)", "繁體中文"),
    Language("nl", "Dutch", "Nederlands"),
    Language("en", "English", "English"),
    Language("fr", "French", "Français"),
    Language("de", "German", "Deutsch"),
    Language("hi", "Hindi", "हिन्दी"),
    Language("it", "Italian", "Italiano"),
    Language("ja", "Japanese", "日本語"),
    Language("ko", "Korean", "한국어"),
    Language("pt", "Portuguese", "Português"),
    Language("pt-BR", "Portuguese (Brazil)", "Português (Brasil)"),
    Language("ru", "Russian", "Русский"),
    Language("es", "Spanish", "Español"),
    Language("tr", "Turkish", "Türkçe"),
    Language("vi", "Vietnamese", "Tiếng Việt"),
    Language("fa", "Persian", "فارسی"),
    Language("km", "Khmer", "ខ្មែរ"),
    Language("kn", "Kannada", "ಕನ್ನಡ"),
    Language("my", "Myanmar", "မြန်မာ"),
    Language("pl", "Polish", "Polski"),
    Language("sw", "Swahili", "Kiswahili"),
    Language("te", "Telugu", "తెలుగు"),
    Language("ur", "Urdu", "اردو"),
)

_BY_CODE = {language.code.lower(): language for language in SUPPORTED_LANGUAGES}


def _normalize(code: str) -> str:
    # Android region qualifiers use `pt-rBR`; the catalog uses `pt-BR`.
    parts = code.replace("_", "-").split("-")
    if len(parts) == 2 and parts[1].startswith("r") and len(parts[1]) == 3:
        parts[1] = parts[1][1:]
    return "-".join(parts).lower()


def resource_qualifier(code: str) -> str:
    """Android resource-directory form of a locale code, e.g. `pt-BR` -> `pt-rBR`.

    Only language-plus-region codes are rewritten; anything else is returned as-is.
    """
    parts = code.replace("_", "-").split("-")
    if len(parts) != 2:
        return code
    language, region = parts
    if len(region) == 3 and region[0] in "rR":
        region = region[1:]
    if len(region) != 2 or not region.isalpha():
        return code
    return f"{language.lower()}-r{region.upper()}"


def find_language(code: str | None) -> Language | None:
    if not code:
        return None
    normalized = _normalize(code)
    return _BY_CODE.get(normalized) or _BY_CODE.get(normalized.split("-", 1)[0])


def language_name(code: str | None) -> str:
    """English display name for a locale code; unknown codes are upper-cased."""
    language = find_language(code)
    if language:
        return language.name
    return (code or "").upper()
