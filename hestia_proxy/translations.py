import json
import os
from rich.console import Console

console = Console(stderr=True)
TRANSLATIONS = {}
DEFAULT_LANG = "en"
LOCALES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "locales")

def load_language(lang_code=None):
    """
    Loads the translation file for `lang_code` into the global
    TRANSLATIONS dictionary. Falls back to English when the file
    is missing or unreadable. Returns the language actually loaded.
    """
    global TRANSLATIONS

    lang_code = lang_code or DEFAULT_LANG
    filepath = os.path.join(LOCALES_DIR, f"{lang_code}.json")

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            TRANSLATIONS = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        if lang_code != DEFAULT_LANG:
            console.print(f"[bold red]Could not load language file: {filepath}. Defaulting to English.[/bold red]")
        lang_code = DEFAULT_LANG
        filepath = os.path.join(LOCALES_DIR, f"{DEFAULT_LANG}.json")
        with open(filepath, "r", encoding="utf-8") as f:
            TRANSLATIONS = json.load(f)

    return lang_code

def t(key, default=None, **kwargs):
    """Looks `key` up in the loaded catalogue and fills in its {placeholders}."""
    if not TRANSLATIONS:
        load_language(DEFAULT_LANG)

    text = TRANSLATIONS.get(key, default)
    if text is None:
        # Unknown keys show up as themselves.
        text = key
    return text.format(**kwargs) if kwargs else text
