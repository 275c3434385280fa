"""
File operation rules.

These run before the website rules so that "delete notes.txt" is never
read as a URL.
"""

import re

from .matcher import Rule, hit

LIST_FILES = re.compile(
    r"\b(list files|show files|files dikha|files dikhao|list directory|dir|ls"
    r"|show folder contents|what files)\b"
)
DELETE_FILE = re.compile(r"\b(delete file|remove file|file delete|file hatao|erase file|trash file)\b")
DELETE_FILE_NAME = re.compile(r"(?:delete|remove|erase|trash)\s+(?:the\s+)?(?:file\s+)?([a-z0-9_.-]+)")
DELETE_FOLDER = re.compile(r"\b(delete|remove)\s+(?:the\s+)?(folder|directory)\s+([a-z0-9_.-]+)")
CREATE_FOLDER = re.compile(r"\b(create folder|make folder|new folder|folder banao|create directory|make directory)\b")
CREATE_FILE = re.compile(r"\b(create file|make file|new file|file banao|touch)\b")
TARGET_NAME = re.compile(
    r"\b(?:folder|directory|file|touch)\s+(?:named\s+|called\s+)?([a-z0-9_.-]+)\s*$"
)


def _target_name(text):
    match = TARGET_NAME.search(text)
    return match.group(1) if match else None


def list_files(analysis):
    if LIST_FILES.search(analysis.text):
        return hit("list_files")
    return None


def delete_folder(analysis):
    match = DELETE_FOLDER.search(analysis.text)
    if match:
        return hit("delete_folder", folder=match.group(3))
    return None


def delete_file(analysis):
    if DELETE_FILE.search(analysis.text):
        match = DELETE_FILE_NAME.search(analysis.text)
        filename = match.group(1) if match else None
        if filename == "file":
            filename = None
        return hit("delete_file", filename=filename)
    return None


def create_folder(analysis):
    if CREATE_FOLDER.search(analysis.text):
        return hit("create_folder", folder=_target_name(analysis.text))
    return None


def create_file(analysis):
    if CREATE_FILE.search(analysis.text):
        return hit("create_file", filename=_target_name(analysis.text))
    return None


RULES = [
    Rule("list_files", "file", list_files),
    Rule("delete_folder", "file", delete_folder),
    Rule("delete_file", "file", delete_file),
    Rule("create_folder", "file", create_folder),
    Rule("create_file", "file", create_file),
]
