import datetime
import os

from rich.console import Console
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)

LOG_FILE = None

LEVEL_STYLES = {
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
}

def configure(log_file):
    """Sets the file every message is appended to. None disables it."""
    global LOG_FILE
    LOG_FILE = log_file or None

def log(msg, level='INFO'):
    now = datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    style = LEVEL_STYLES.get(level, 'white')
    target = err_console if level == 'ERROR' else console
    target.print(f"[bold {style}]{escape(f'[{level}]')}[/bold {style}] {escape(str(msg))}")
    if not LOG_FILE:
        return
    line = f"[{now}] [{level}] {msg}"
    try:
        os.makedirs(os.path.dirname(LOG_FILE) or '.', exist_ok=True)
        with open(LOG_FILE, 'a', encoding='utf-8') as f:
            f.write(line + '\n')
    except OSError:
        pass

def info(msg):
    log(msg, 'INFO')

def warning(msg):
    log(msg, 'WARNING')

def error(msg):
    log(msg, 'ERROR')
