"""
File operations, confined to ``skills.files.base_dir``.

Deletions always go through the confirmation flow. Listings are paged;
"more" after a listing shows the next page.
"""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

name = "files"
description = "List, create and delete files and folders"

PAGE_SIZE = 10
LISTING_VARIABLE = "files_listing"


def base_dir(context):
    return Path(context.settings("files").get("base_dir", ".")).expanduser().resolve()


def safe_path(context, target):
    """Resolve ``target`` inside the base directory, or raise ValueError."""
    root = base_dir(context)
    path = (root / target).resolve()
    if path != root and root not in path.parents:
        raise ValueError(f"Path escapes base directory: {target}")
    return path


def _page(context, names, offset):
    page = names[offset:offset + PAGE_SIZE]
    remaining = len(names) - offset - len(page)
    if remaining > 0:
        context.store.set_variable(
            context.session_id, LISTING_VARIABLE, {"names": names, "offset": offset + PAGE_SIZE}
        )
        return f"{', '.join(page)} ... and {remaining} more. Say \"more\" to continue."
    context.store.pop_variable(context.session_id, LISTING_VARIABLE)
    return ", ".join(page)


async def list_files(params, context):
    root = base_dir(context)
    names = sorted(p.name + ("/" if p.is_dir() else "") for p in root.iterdir())
    if not names:
        return f"{root.name or root} is empty."
    return f"Files in {root.name or root}: {_page(context, names, 0)}"


async def continue_listing(params, context):
    listing = context.store.get_variable(context.session_id, LISTING_VARIABLE)
    if not listing:
        return "There's nothing more to show."
    return _page(context, listing["names"], listing["offset"])


async def create_file(params, context):
    filename = params.get("filename")
    if not filename:
        return "What should I name the file?"
    path = safe_path(context, filename)
    if path.exists():
        return f"{filename} already exists."
    path.touch()
    logger.info(f"Created file {path}")
    return f"Created {filename}, sir."


async def create_folder(params, context):
    folder = params.get("folder")
    if not folder:
        return "What should I name the folder?"
    path = safe_path(context, folder)
    if path.exists():
        return f"{folder} already exists."
    path.mkdir(parents=True)
    logger.info(f"Created folder {path}")
    return f"Created folder {folder}, sir."


async def delete_file(params, context):
    filename = params.get("filename")
    if not filename:
        return "Which file should I delete?"
    path = safe_path(context, filename)
    if not path.is_file():
        return f"I couldn't find a file named {filename}."
    path.unlink()
    logger.info(f"Deleted file {path}")
    return f"Deleted {filename}, sir."


async def delete_folder(params, context):
    folder = params.get("folder")
    if not folder:
        return "Which folder should I delete?"
    path = safe_path(context, folder)
    if path == base_dir(context):
        return "I won't delete the base folder."
    if not path.is_dir():
        return f"I couldn't find a folder named {folder}."
    shutil.rmtree(path)
    logger.info(f"Deleted folder {path}")
    return f"Deleted folder {folder}, sir."


intents = {
    "list_files": {"handler": list_files, "confidence": 0.5, "requires_confirmation": False},
    "continue": {"handler": continue_listing, "confidence": 0.5, "requires_confirmation": False},
    "create_file": {"handler": create_file, "confidence": 0.6, "requires_confirmation": False},
    "create_folder": {"handler": create_folder, "confidence": 0.6, "requires_confirmation": False},
    "delete_file": {"handler": delete_file, "confidence": 0.7, "requires_confirmation": True},
    "delete_folder": {"handler": delete_folder, "confidence": 0.7, "requires_confirmation": True},
}
