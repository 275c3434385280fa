"""
System plugin.

Runs nothing unless ``skills.system.dry_run`` is false *and* a command is
configured for the intent under ``skills.system.commands``, e.g.::

    skills:
      system:
        dry_run: false
        commands:
          lock_screen: ["loginctl", "lock-session"]
"""

import asyncio
import logging

logger = logging.getLogger(__name__)

name = "system"
description = "Screen, power, connectivity and application control"


async def run_configured(intent, context, *args):
    """
    Run the command configured for ``intent``.

    Returns True when a command ran successfully, False in dry-run mode or
    when nothing is configured.
    """
    settings = context.settings("system")
    command = settings.get("commands", {}).get(intent)
    if settings.get("dry_run", True) or not command:
        logger.info(f"Dry run: {intent} {' '.join(args)}".rstrip())
        return False

    proc = await asyncio.create_subprocess_exec(
        *command, *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    _, stderr = await proc.communicate()
    if proc.returncode != 0:
        raise RuntimeError(f"{command[0]} exited with {proc.returncode}: {stderr.decode().strip()}")
    return True


async def lock_screen(params, context):
    await run_configured("lock_screen", context)
    return "Locking the screen, sir."


async def take_screenshot(params, context):
    await run_configured("take_screenshot", context)
    return "Screenshot taken, sir."


async def shutdown_system(params, context):
    if await run_configured("shutdown_system", context):
        return "Shutting down, sir."
    return "Shutdown requested, sir. (dry run)"


async def restart_system(params, context):
    if await run_configured("restart_system", context):
        return "Restarting, sir."
    return "Restart requested, sir. (dry run)"


async def open_app(params, context):
    app = params.get("app") or params.get("app_name")
    if not app:
        return "Which application should I open?"
    await run_configured("open_app", context, app)
    return f"Opening {app}, sir."


async def toggle_wifi(params, context):
    action = params.get("action", "toggle")
    await run_configured("toggle_wifi", context, action)
    return "Toggling WiFi, sir." if action == "toggle" else f"Turning WiFi {action}, sir."


async def toggle_bluetooth(params, context):
    action = params.get("action", "toggle")
    await run_configured("toggle_bluetooth", context, action)
    return "Toggling Bluetooth, sir." if action == "toggle" else f"Turning Bluetooth {action}, sir."


async def brightness_up(params, context):
    await run_configured("display.brightness_up", context)
    return "Increasing brightness, sir."


async def brightness_down(params, context):
    await run_configured("display.brightness_down", context)
    return "Decreasing brightness, sir."


intents = {
    "lock_screen": {"handler": lock_screen, "confidence": 0.6, "requires_confirmation": False},
    "take_screenshot": {"handler": take_screenshot, "confidence": 0.5, "requires_confirmation": False},
    "shutdown_system": {"handler": shutdown_system, "confidence": 0.8, "requires_confirmation": True},
    "restart_system": {"handler": restart_system, "confidence": 0.8, "requires_confirmation": True},
    "open_app": {"handler": open_app, "confidence": 0.5, "requires_confirmation": False},
    "toggle_wifi": {"handler": toggle_wifi, "confidence": 0.6, "requires_confirmation": False},
    "toggle_bluetooth": {"handler": toggle_bluetooth, "confidence": 0.6, "requires_confirmation": False},
    "display.brightness_up": {"handler": brightness_up, "confidence": 0.5, "requires_confirmation": False},
    "display.brightness_down": {"handler": brightness_down, "confidence": 0.5, "requires_confirmation": False},
}
