"""Developer tooling rules: git, npm, editor."""

import re

from .matcher import Rule, hit

GIT_STATUS = re.compile(r"\b(git status|git ka status|repo status|repository status|check git|git changes)\b")
NPM_INSTALL = re.compile(r"\b(npm install|npm i|install packages|install dependencies|node modules install)\b")
OPEN_VSCODE = re.compile(r"\b(open vscode|open vs code|vscode kholo|launch vscode|start vscode|visual studio code|code editor)\b")
GIT_COMMIT = re.compile(r"\b(git commit|commit changes|commit karo)\b")
COMMIT_MESSAGE = re.compile(r"\b(?:with message|message|saying)\s+[\"']?(.+?)[\"']?$")
GIT_PUSH = re.compile(r"\b(git push|push changes|push to remote|push to github)\b")
GIT_PULL = re.compile(r"\b(git pull|pull changes|pull from remote)\b")


def git_status(analysis):
    if GIT_STATUS.search(analysis.text):
        return hit("git_status")
    return None


def npm_install(analysis):
    if NPM_INSTALL.search(analysis.text):
        return hit("npm_install")
    return None


def open_vscode(analysis):
    if OPEN_VSCODE.search(analysis.text):
        return hit("open_vscode")
    return None


def git_commit(analysis):
    if GIT_COMMIT.search(analysis.text):
        match = COMMIT_MESSAGE.search(analysis.raw.strip())
        return hit("git_commit", message=match.group(1) if match else None)
    return None


def git_push(analysis):
    if GIT_PUSH.search(analysis.text):
        return hit("git_push")
    return None


def git_pull(analysis):
    if GIT_PULL.search(analysis.text):
        return hit("git_pull")
    return None


RULES = [
    Rule("git_status", "developer", git_status),
    Rule("npm_install", "developer", npm_install),
    Rule("open_vscode", "developer", open_vscode),
    Rule("git_commit", "developer", git_commit),
    Rule("git_push", "developer", git_push),
    Rule("git_pull", "developer", git_pull),
]
