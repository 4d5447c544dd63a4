import questionary

from hestia_proxy.translations import t

STYLE = questionary.Style([
    ('pointer', 'bold fg:yellow'),
    ('highlighted', 'bold fg:yellow'),
    ('selected', 'fg:white bg:blue'),
])

def ask_text(message, default=""):
    """Returns the stripped answer, or None if the prompt was cancelled."""
    answer = questionary.text(message, default=default).ask()
    if answer is None:
        return None
    return answer.strip()

def ask_select(message, choices, numbered=True):
    return questionary.select(
        message,
        choices=choices,
        use_shortcuts=numbered,
        pointer="👉",
        use_indicator=True,
        style=STYLE,
    ).ask()

def ask_confirm(message, default=False):
    return bool(questionary.confirm(message, default=default).ask())

def pause():
    questionary.press_any_key_to_continue(t('press_any_key')).ask()
