"""
Developer plugin: git, npm and the editor.

Commands run in ``skills.developer.repo_dir`` (default: the current
directory). Commit and push always ask first.
"""

import asyncio
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

name = "developer"
description = "Git, npm and editor shortcuts"

MAX_OUTPUT_LINES = 10


async def run(context, *command):
    """Run a command in the configured repository; returns (code, output)."""
    cwd = Path(context.settings("developer").get("repo_dir", ".")).expanduser()
    logger.info(f"Running {' '.join(command)} in {cwd}")
    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except FileNotFoundError:
        return 127, f"{command[0]} is not installed."
    stdout, _ = await proc.communicate()
    return proc.returncode, stdout.decode(errors="replace").strip()


def _summarize(output):
    lines = output.splitlines()
    if len(lines) > MAX_OUTPUT_LINES:
        lines = lines[:MAX_OUTPUT_LINES] + [f"... ({len(lines) - MAX_OUTPUT_LINES} more lines)"]
    return "\n".join(lines)


async def git_status(params, context):
    code, output = await run(context, "git", "status", "--short", "--branch")
    if code != 0:
        return f"git status failed: {_summarize(output)}"
    lines = output.splitlines()
    if len(lines) <= 1:
        return "Working tree is clean, sir."
    return f"{len(lines) - 1} changed file(s):\n{_summarize(output)}"


async def git_pull(params, context):
    code, output = await run(context, "git", "pull")
    if code != 0:
        return f"git pull failed: {_summarize(output)}"
    return f"Pulled latest changes, sir.\n{_summarize(output)}"


async def git_commit(params, context):
    message = params.get("message") or "Update"
    code, output = await run(context, "git", "commit", "-am", message)
    if code != 0:
        return f"git commit failed: {_summarize(output)}"
    return f'Committed with message "{message}", sir.'


async def git_push(params, context):
    code, output = await run(context, "git", "push")
    if code != 0:
        return f"git push failed: {_summarize(output)}"
    return "Pushed to remote, sir."


async def npm_install(params, context):
    code, output = await run(context, "npm", "install")
    if code != 0:
        return f"npm install failed: {_summarize(output)}"
    return "Dependencies installed, sir."


async def open_vscode(params, context):
    code, output = await run(context, "code", ".")
    if code != 0:
        return f"Couldn't open VS Code: {_summarize(output)}"
    return "Opening VS Code, sir."


intents = {
    "git_status": {"handler": git_status, "confidence": 0.6, "requires_confirmation": False},
    "git_pull": {"handler": git_pull, "confidence": 0.7, "requires_confirmation": False},
    "git_commit": {"handler": git_commit, "confidence": 0.8, "requires_confirmation": True},
    "git_push": {"handler": git_push, "confidence": 0.8, "requires_confirmation": True},
    "npm_install": {"handler": npm_install, "confidence": 0.7, "requires_confirmation": False},
    "open_vscode": {"handler": open_vscode, "confidence": 0.6, "requires_confirmation": False},
}
