"""
Tests for the Built-in Plugins
==============================

Handlers are called directly with a HandlerContext; nothing here opens a
browser, touches audio, or runs system commands.
"""

import pytest

from axi_engine.config import DEFAULT_SITE_MAP, EngineConfig
from axi_engine.skills.plugins import browser, communication, developer, files, general, knowledge, media, system
from axi_engine.skills.router import AWAITING_INPUT, HandlerContext


@pytest.fixture
def context(store, config):
    return HandlerContext(session_id="s1", raw_text="", store=store, config=config)


# =============================================================================
# Knowledge
# =============================================================================

class TestCalculator:
    """Test the arithmetic evaluator."""

    @pytest.mark.parametrize("expression,expected", [
        ("3 times 4", 12),
        ("10 divided by 4", 2.5),
        ("7 x 6", 42),
        ("2^10", 1024),
        ("20 minus 5 plus 1", 16),
        ("17 mod 5", 2),
        ("-3 * (2 + 1)", -9),
    ])
    def test_safe_eval(self, expression, expected):
        assert knowledge.safe_eval(expression) == expected

    @pytest.mark.parametrize("expression", [
        "1 / 0",
        "__import__('os').system('ls')",
        "2 ** 5000",
        "hello world",
        "True + 1",
        "9^400",
        "((9^1000)^1000)^20",
        "9^300 * 9^300",
        "(-8)^0.5",
    ])
    def test_rejected(self, expression):
        assert knowledge.safe_eval(expression) is None

    def test_format_number(self):
        assert knowledge.format_number(3.0) == "3"
        assert knowledge.format_number(2.5) == "2.5"
        assert knowledge.format_number(1 / 3) == "0.33"

    async def test_calculate(self, context):
        assert await knowledge.calculate({"expression": "3 times 4"}, context) == "3 times 4 = 12, sir."
        reply = await knowledge.calculate({"expression": "one plus one"}, context)
        assert reply.startswith("I couldn't calculate")

    async def test_calculate_too_large(self, context):
        reply = await knowledge.calculate({"expression": "9^400"}, context)
        assert reply == 'I couldn\'t calculate "9^400". Please check the expression.'

    def test_large_but_finite_power(self):
        assert knowledge.safe_eval("2^1000") == 2 ** 1000


class TestUnitConvert:
    """Test unit conversion."""

    async def test_distance(self, context):
        params = {"value": "5", "from_unit": "kilometers", "to_unit": "miles"}
        assert await knowledge.unit_convert(params, context) == "5 km = 3.11 mi, sir."

    async def test_temperature(self, context):
        params = {"value": 100, "from_unit": "celsius", "to_unit": "fahrenheit"}
        assert await knowledge.unit_convert(params, context) == "100 c = 212 f, sir."

    async def test_unknown_pair(self, context):
        params = {"value": 1, "from_unit": "km", "to_unit": "kg"}
        assert await knowledge.unit_convert(params, context) == "I don't know how to convert from km to kg."

    async def test_missing_value(self, context):
        reply = await knowledge.unit_convert({"from_unit": "km", "to_unit": "mi"}, context)
        assert reply == "What value would you like me to convert?"

    def test_aliases(self):
        assert knowledge.parse_unit("Kilos") == "kg"
        assert knowledge.parse_unit("furlongs") == "furlongs"
        assert knowledge.parse_unit(None) is None


# =============================================================================
# Files
# =============================================================================

class TestFiles:
    """Test sandboxed file operations."""

    async def test_empty_listing(self, context):
        assert (await files.list_files({}, context)).endswith("is empty.")

    async def test_create_and_delete(self, context, tmp_path):
        assert await files.create_file({"filename": "notes.txt"}, context) == "Created notes.txt, sir."
        assert (tmp_path / "notes.txt").exists()
        assert await files.create_file({"filename": "notes.txt"}, context) == "notes.txt already exists."
        assert await files.delete_file({"filename": "notes.txt"}, context) == "Deleted notes.txt, sir."
        assert not (tmp_path / "notes.txt").exists()

    async def test_delete_missing(self, context):
        reply = await files.delete_file({"filename": "nope.txt"}, context)
        assert reply == "I couldn't find a file named nope.txt."

    async def test_folders(self, context, tmp_path):
        assert await files.create_folder({"folder": "projects"}, context) == "Created folder projects, sir."
        (tmp_path / "projects" / "a.txt").touch()
        assert await files.delete_folder({"folder": "projects"}, context) == "Deleted folder projects, sir."
        assert not (tmp_path / "projects").exists()

    async def test_base_folder_protected(self, context, tmp_path):
        assert await files.delete_folder({"folder": "."}, context) == "I won't delete the base folder."
        assert tmp_path.exists()

    async def test_escape_rejected(self, context):
        with pytest.raises(ValueError):
            await files.create_file({"filename": "../outside.txt"}, context)

    async def test_paging(self, context, tmp_path):
        for i in range(12):
            (tmp_path / f"file{i:02d}.txt").touch()

        first = await files.list_files({}, context)
        assert "file00.txt" in first
        assert "file09.txt" in first
        assert first.endswith('... and 2 more. Say "more" to continue.')

        second = await files.continue_listing({}, context)
        assert second == "file10.txt, file11.txt"

        assert await files.continue_listing({}, context) == "There's nothing more to show."

    async def test_directories_marked(self, context, tmp_path):
        (tmp_path / "docs").mkdir()
        assert "docs/" in await files.list_files({}, context)


# =============================================================================
# Browser
# =============================================================================

class TestBrowser:
    """Test URL resolution and launching."""

    @pytest.mark.parametrize("target,expected", [
        ("youtube", ("https://youtube.com", False)),
        ("GitHub", ("https://github.com", False)),
        ("example.com", ("https://example.com", False)),
        ("https://example.org/a", ("https://example.org/a", False)),
        ("cute cats", ("https://www.google.com/search?q=cute+cats", True)),
    ])
    def test_resolve_url(self, target, expected):
        assert browser.resolve_url(target, DEFAULT_SITE_MAP) == expected

    async def test_open_known_site(self, context):
        assert await browser.open_website({"url": "github"}, context) == "Opening github.com, sir."

    async def test_open_unknown_searches(self, context):
        reply = await browser.open_website({"url": "cute cats"}, context)
        assert reply == 'Searching Google for "cute cats", sir.'

    async def test_no_target(self, context):
        assert await browser.open_website({}, context) == "Which website would you like me to open?"

    async def test_launch_disabled(self, context, monkeypatch):
        opened = []
        monkeypatch.setattr(browser.webbrowser, "open", opened.append)
        await browser.open_youtube({}, context)
        assert opened == []

    async def test_launch_enabled(self, store, monkeypatch):
        opened = []
        monkeypatch.setattr(browser.webbrowser, "open", opened.append)
        config = EngineConfig(skills={"browser": {"launch": True}})
        context = HandlerContext(session_id="s1", raw_text="", store=store, config=config)

        reply = await browser.search_youtube({"query": "lofi beats"}, context)
        assert reply == 'Searching YouTube for "lofi beats", sir.'
        assert opened == ["https://www.youtube.com/results?search_query=lofi+beats"]


# =============================================================================
# Communication
# =============================================================================

class TestCommunication:
    """Test email and calendar shortcuts."""

    @pytest.mark.parametrize("handler,reply,url", [
        (communication.check_email, "Opening your email inbox, sir.", communication.INBOX_URL),
        (communication.send_email, "Opening the email composer, sir.", communication.COMPOSE_URL),
        (communication.check_calendar, "Here is your calendar, sir.", communication.CALENDAR_URL),
    ])
    async def test_opens_page(self, store, monkeypatch, handler, reply, url):
        opened = []
        monkeypatch.setattr(browser.webbrowser, "open", opened.append)
        config = EngineConfig(skills={"browser": {"launch": True}})
        context = HandlerContext(session_id="s1", raw_text="", store=store, config=config)

        assert await handler({}, context) == reply
        assert opened == [url]

    async def test_launch_disabled(self, context, monkeypatch):
        opened = []
        monkeypatch.setattr(browser.webbrowser, "open", opened.append)
        assert await communication.check_email({}, context) == "Opening your email inbox, sir."
        assert opened == []


# =============================================================================
# Media
# =============================================================================

class TestMedia:
    """Test session-scoped playback state."""

    async def test_play_pause(self, context):
        assert await media.pause({}, context) == "Nothing is playing right now."
        assert await media.play({"song": "Bohemian Rhapsody"}, context) == "Playing Bohemian Rhapsody, sir."
        assert await media.pause({}, context) == "Pausing media, sir."

    async def test_volume_bounds(self, context):
        assert await media.volume_up({}, context) == "Volume increased to 60%."
        for _ in range(10):
            reply = await media.volume_down({}, context)
        assert reply == "Volume decreased to 0%."
        for _ in range(15):
            reply = await media.volume_up({}, context)
        assert reply == "Volume increased to 100%."

    async def test_state_per_session(self, context, store, config):
        await media.volume_up({}, context)
        other = HandlerContext(session_id="s2", raw_text="", store=store, config=config)
        assert await media.volume_up({}, other) == "Volume increased to 60%."

    async def test_mute(self, context, store):
        assert await media.mute({}, context) == "Sound muted, sir."
        assert store.get_variable("s1", "media")["muted"] is True


# =============================================================================
# System and Developer
# =============================================================================

class TestSystem:
    """Test dry-run system control."""

    async def test_shutdown_dry_run(self, context):
        assert await system.shutdown_system({}, context) == "Shutdown requested, sir. (dry run)"

    async def test_toggle_wifi(self, context):
        assert await system.toggle_wifi({"action": "on"}, context) == "Turning WiFi on, sir."
        assert await system.toggle_wifi({}, context) == "Toggling WiFi, sir."

    async def test_open_app(self, context):
        assert await system.open_app({"app": "spotify"}, context) == "Opening spotify, sir."
        assert await system.open_app({}, context) == "Which application should I open?"

    async def test_no_command_configured(self, store):
        config = EngineConfig(skills={"system": {"dry_run": False}})
        context = HandlerContext(session_id="s1", raw_text="", store=store, config=config)
        assert await system.run_configured("lock_screen", context) is False


class FakeProcess:

    def __init__(self, returncode, output):
        self.returncode = returncode
        self.output = output

    async def communicate(self):
        return self.output, None


class TestDeveloper:
    """Test git/npm handlers against a fake subprocess."""

    @pytest.fixture
    def spawn(self, monkeypatch):
        calls = []

        def install(returncode=0, output=b""):
            async def fake_exec(*command, **kwargs):
                calls.append(command)
                return FakeProcess(returncode, output)
            monkeypatch.setattr(developer.asyncio, "create_subprocess_exec", fake_exec)
            return calls

        return install

    async def test_git_status_clean(self, context, spawn):
        calls = spawn(output=b"## main\n")
        assert await developer.git_status({}, context) == "Working tree is clean, sir."
        assert calls == [("git", "status", "--short", "--branch")]

    async def test_git_status_changes(self, context, spawn):
        spawn(output=b"## main\n M app.py\n?? new.txt\n")
        reply = await developer.git_status({}, context)
        assert reply.startswith("2 changed file(s):")

    async def test_commit_message(self, context, spawn):
        calls = spawn()
        reply = await developer.git_commit({"message": "fix typo"}, context)
        assert reply == 'Committed with message "fix typo", sir.'
        assert calls == [("git", "commit", "-am", "fix typo")]

    async def test_failure_reported(self, context, spawn):
        spawn(returncode=1, output=b"fatal: not a git repository")
        assert await developer.git_pull({}, context) == "git pull failed: fatal: not a git repository"

    async def test_missing_executable(self, context, monkeypatch):
        async def missing(*command, **kwargs):
            raise FileNotFoundError(command[0])
        monkeypatch.setattr(developer.asyncio, "create_subprocess_exec", missing)
        assert await developer.npm_install({}, context) == "npm install failed: npm is not installed."

    def test_summarize_truncates(self):
        output = "\n".join(f"line {i}" for i in range(15))
        assert developer._summarize(output).endswith("... (5 more lines)")


class TestGeneral:

    async def test_ask_which_website(self, context, store):
        assert await general.ask_which_website({}, context) == "Which website should I open, sir?"
        assert store.get_variable("s1", AWAITING_INPUT) == {"intent": "open_website", "slot": "url"}

    async def test_greeting(self, context):
        assert await general.greeting({}, context) in general.GREETINGS
