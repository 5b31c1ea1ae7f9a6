from textual.widgets import Input, Static

import main
from main import ViralStratsApp
from models import AnalysisState, ResultsState, SearchState
from ui import ResultsDisplay, format_views


class RecordingClipboard:
    def __init__(self):
        self.copied = []

    def copy(self, text):
        self.copied.append(text)


async def settle(app, pilot):
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


async def reach_analysis(app, pilot):
    app.query_one(Input).value = "cat videos"
    await pilot.press("enter")
    await settle(app, pilot)
    await pilot.press("enter")
    await settle(app, pilot)
    assert isinstance(app.controller.state, AnalysisState)


async def test_search_select_and_go_back(clients, config):
    app = ViralStratsApp(*clients, config)
    async with app.run_test() as pilot:
        assert app.sub_title == "Dashboard"
        app.query_one(Input).value = "cat videos"
        await pilot.press("enter")
        await settle(app, pilot)

        assert isinstance(app.controller.state, ResultsState)
        assert app.query_one(ResultsDisplay).row_count == 2
        assert app.sub_title == 'Results for "cat videos"'

        await pilot.press("enter")
        await settle(app, pilot)

        assert isinstance(app.controller.state, AnalysisState)
        assert app.sub_title == "Generated Content Package"
        assert app.controller.state.package.keywords == "funny cats, cat videos, cute cats"

        await pilot.press("b")
        await pilot.pause()
        assert isinstance(app.controller.state, ResultsState)
        assert app.query_one(ResultsDisplay).row_count == 2


async def test_failed_search_shows_error_banner(clients, config, provider):
    provider.statuses["/search"] = 500
    app = ViralStratsApp(*clients, config)
    async with app.run_test() as pilot:
        app.query_one(Input).value = "cats"
        await pilot.press("enter")
        await settle(app, pilot)

        assert isinstance(app.controller.state, SearchState)
        banner = app.query_one("#error-banner")
        assert banner.display
        assert app.query_one(Input).value == "cats"


def test_format_views():
    assert format_views("") == "0"
    assert format_views("1.2M views") == "1.2M views"
    assert format_views("1,000,000 views") == "1M"
    assert format_views("845,112 views") == "845.1K"
    assert format_views("999") == "999"
    assert format_views("no views") == "no views"


async def test_copy_keys_send_sections_to_clipboard(clients, config, monkeypatch):
    clipboard = RecordingClipboard()
    monkeypatch.setattr(main, "pyperclip", clipboard)
    app = ViralStratsApp(*clients, config)
    async with app.run_test() as pilot:
        await reach_analysis(app, pilot)
        package = app.controller.state.package

        await pilot.press("1")
        await pilot.press("4")
        await pilot.pause()
        assert clipboard.copied == [package.seo_title, package.veo_script]


async def test_analysis_view_renders_generated_sections(clients, config):
    app = ViralStratsApp(*clients, config)
    async with app.run_test() as pilot:
        await reach_analysis(app, pilot)
        package = app.controller.state.package

        keywords = app.query_one("#section-keywords", Static)
        assert str(keywords.render()) == "funny cats, cat videos, cute cats"
        assert str(app.query_one("#section-title", Static).render()) == package.seo_title


async def test_buttons_navigate_back_and_to_a_new_search(clients, config):
    app = ViralStratsApp(*clients, config)
    async with app.run_test() as pilot:
        await reach_analysis(app, pilot)

        await pilot.click("#back-button")
        await pilot.pause()
        assert isinstance(app.controller.state, ResultsState)

        await pilot.click("#new-search-button")
        await pilot.pause()
        assert app.controller.state == SearchState()
        assert app.query_one(Input).value == ""
