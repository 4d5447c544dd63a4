import os
import shutil
import subprocess

from hestia_proxy.errors import MissingBinaryError


def run_command(command):
    """
    Runs a command given as an argument list, without a shell, and
    captures its output. Returns the CompletedProcess whatever the exit
    status; raises FileNotFoundError if the executable does not exist.
    """
    return subprocess.run(
        command,
        check=False,
        capture_output=True,
        text=True,
        encoding='utf-8',
        errors='replace',
    )

def run_interactive(command):
    """Runs a command attached to the current terminal and returns its exit code."""
    return subprocess.call(command)

def is_tool_installed(name):
    """Check whether `name` is on PATH and marked as executable."""
    return shutil.which(name) is not None

def is_executable(path):
    return os.path.isfile(path) and os.access(path, os.X_OK)

def is_root():
    """Check if the script is run as root."""
    return os.geteuid() == 0


def resolve_editor(config):
    """Returns the preferred editor if installed, otherwise the fallback one."""
    for editor in (config.editor, config.fallback_editor):
        if editor and is_tool_installed(editor):
            return editor
    raise MissingBinaryError(binary=config.editor)

def open_in_editor(config, path):
    editor = resolve_editor(config)
    return run_interactive([editor, path])
