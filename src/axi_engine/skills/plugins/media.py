"""
Media plugin.

Playback state (playing flag, current track, volume, mute) lives in
session variables; no audio device is touched.
"""

name = "media"
description = "Media playback and volume control"

VOLUME_STEP = 10


def _state(context):
    state = context.store.get_variable(context.session_id, "media")
    if state is None:
        state = {"playing": False, "track": None, "volume": 50, "muted": False}
        context.store.set_variable(context.session_id, "media", state)
    return state


async def play(params, context):
    state = _state(context)
    state["playing"] = True
    song = params.get("song")
    if song:
        state["track"] = song
        return f"Playing {song}, sir."
    return "Playing media, sir."


async def pause(params, context):
    state = _state(context)
    if not state["playing"]:
        return "Nothing is playing right now."
    state["playing"] = False
    return "Pausing media, sir."


async def next_track(params, context):
    _state(context)["playing"] = True
    return "Playing next track, sir."


async def previous_track(params, context):
    _state(context)["playing"] = True
    return "Playing previous track, sir."


async def volume_up(params, context):
    state = _state(context)
    state["muted"] = False
    state["volume"] = min(100, state["volume"] + VOLUME_STEP)
    return f"Volume increased to {state['volume']}%."


async def volume_down(params, context):
    state = _state(context)
    state["volume"] = max(0, state["volume"] - VOLUME_STEP)
    return f"Volume decreased to {state['volume']}%."


async def mute(params, context):
    _state(context)["muted"] = True
    return "Sound muted, sir."


async def music_control(params, context):
    return "What would you like me to do with the music? I can play, pause, skip or change the volume."


intents = {
    "play": {"handler": play, "confidence": 0.5, "requires_confirmation": False},
    "pause": {"handler": pause, "confidence": 0.5, "requires_confirmation": False},
    "next": {"handler": next_track, "confidence": 0.5, "requires_confirmation": False},
    "previous": {"handler": previous_track, "confidence": 0.5, "requires_confirmation": False},
    "volume_up": {"handler": volume_up, "confidence": 0.5, "requires_confirmation": False},
    "volume_down": {"handler": volume_down, "confidence": 0.5, "requires_confirmation": False},
    "mute": {"handler": mute, "confidence": 0.5, "requires_confirmation": False},
    "music_control": {"handler": music_control, "confidence": 0.5, "requires_confirmation": False},
}
