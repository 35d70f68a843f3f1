import os
import shlex

DEFAULT_EDITOR = "nvim"


def build_editor_argv(path, line=None, command=None):
    if command:
        argv = list(command)
    else:
        editor = os.environ.get("VISUAL") or os.environ.get("EDITOR") or DEFAULT_EDITOR
        argv = shlex.split(editor)
    if line:
        # +N is understood by vim, nvim, nano and emacs
        argv.append(f"+{int(line)}")
    argv.append(str(path))
    return argv


class EditorLauncher:
    """Runs the editor in the current terminal and returns its exit code."""

    def __init__(self, run_interactive, command=None):
        self.run_interactive = run_interactive
        self.command = command

    def __call__(self, path, line=None):
        return self.run_interactive(build_editor_argv(path, line, self.command))
