# main.py
import logging

try:
    import pyperclip
except ImportError:
    pyperclip = None

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.logging import TextualHandler
from textual.reactive import reactive
from textual.widgets import Button, Footer, Header, Input, Label

from config import Config
from controller import SessionController
from models import AnalysisState, ResultsState, SearchState, SessionState, VideoSummary
from services import ContentGenerator, DetailClient, SearchClient
from ui import BUTTON_VARIANTS, AnalysisView, ErrorBanner, LogPane, ResultsDisplay, SearchControls

class ViralStratsApp(App):
    BINDINGS = [
        ("d", "toggle_dark", "Toggle dark mode"),
        ("q", "quit", "Quit"),
        ("n", "new_search", "New Search"),
        ("b", "back_to_results", "Back to results"),
        ("1", "copy_section('title')", "Copy Title"),
        ("2", "copy_section('description')", "Copy Description"),
        ("3", "copy_section('keywords')", "Copy Keywords"),
        ("4", "copy_section('script')", "Copy Script"),
    ]
    CSS_PATH = "viral_strats.css"
    TITLE = "ViralStrats"

    session = reactive(SearchState(), always_update=True)

    def __init__(self, search_client: SearchClient, detail_client: DetailClient, generator: ContentGenerator, config: Config):
        super().__init__()
        self.config = config
        self.controller = SessionController(search_client, detail_client, generator, on_change=self.apply_session)

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="main-container"):
            yield ErrorBanner(id="error-banner")
            yield SearchControls(id="search-controls")
            with Vertical(id="results-pane"):
                with Horizontal(id="results-bar"):
                    yield Label("", id="results-count")
                    yield Button("New Search", variant=BUTTON_VARIANTS["secondary"], id="new-search-button")
                yield ResultsDisplay(id="results-table")
            yield AnalysisView(id="analysis-view")
            yield LogPane(id="log", wrap=True, highlight=True, markup=True)
        yield Footer()

    def on_mount(self) -> None:
        log = self.query_one(LogPane)
        self.query_one(Input).focus()
        if pyperclip:
            log.add_message("[green]✅ Clipboard found.[/green]")
        else:
            log.add_message("[yellow]⚠️ 'pyperclip' not installed.[/yellow]")

    def apply_session(self, state: SessionState) -> None:
        self.session = state

    def watch_session(self, old_state: SessionState, new_state: SessionState) -> None:
        search_controls = self.query_one(SearchControls)
        analysis_view = self.query_one(AnalysisView)
        search_controls.display = isinstance(new_state, SearchState)
        self.query_one("#results-pane").display = isinstance(new_state, ResultsState)
        analysis_view.display = isinstance(new_state, AnalysisState)
        self.query_one(ErrorBanner).show_error(getattr(new_state, "error", None))

        if isinstance(new_state, SearchState):
            self.sub_title = "Dashboard"
            search_controls.set_loading(new_state.loading)
            if not new_state.query:
                search_controls.clear()
        elif isinstance(new_state, ResultsState):
            self.sub_title = f'Results for "{new_state.query}"'
            self.query_one("#results-count", Label).update(f"Found {len(new_state.results)} videos")
            table = self.query_one(ResultsDisplay)
            table.show_results(new_state.results)
            table.loading = new_state.analyzing_id is not None
            if not isinstance(old_state, ResultsState):
                table.focus()
        else:
            self.sub_title = "Generated Content Package"
            analysis_view.update_analysis(new_state.detail, new_state.package, self.config.TAG_PREVIEW_LIMIT)
            analysis_view.focus()

    def action_toggle_dark(self) -> None:
        self.theme = "textual-light" if self.theme == "textual-dark" else "textual-dark"

    def action_new_search(self) -> None:
        if self.controller.new_search():
            self.query_one(Input).focus()

    def action_back_to_results(self) -> None:
        self.controller.back_to_results()

    def action_copy_section(self, name: str) -> None:
        log = self.query_one(LogPane)
        if not pyperclip:
            log.add_message("[red]❌ 'pyperclip' not installed.[/red]")
            return
        state = self.controller.state
        if isinstance(state, AnalysisState):
            pyperclip.copy(state.package.section(name))
            log.add_message(f"📋 Copied {name} to clipboard.")
        else:
            log.add_message("[yellow]⚠️ No content package to copy yet.[/yellow]")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "new-search-button":
            self.action_new_search()
        elif event.button.id == "back-button":
            self.action_back_to_results()

    def on_search_controls_search_requested(self, message: SearchControls.SearchRequested) -> None:
        self.query_one(LogPane).add_message(f"🔎 Searching for '{escape(message.query)}'...")
        self.run_worker(self.perform_search(message.query), group="search_worker")

    def on_results_display_video_chosen(self, message: ResultsDisplay.VideoChosen) -> None:
        self.run_worker(self.perform_analysis(message.video), group="analysis_worker")

    async def perform_search(self, query: str) -> None:
        log = self.query_one(LogPane)
        if not await self.controller.submit_query(query):
            return
        state = self.controller.state
        if isinstance(state, ResultsState):
            if not state.results:
                log.add_message(f"🤷 No videos found for '{escape(query)}'.")
            else:
                log.add_message(f"🎬 Found {len(state.results)} videos.")
        elif isinstance(state, SearchState) and state.error:
            log.add_message("[red]❌ An error occurred during search.[/red]")

    async def perform_analysis(self, video: VideoSummary) -> None:
        log = self.query_one(LogPane)
        log.add_message(f"🪄 Generating strategy for '[b]{escape(video.title)}[/b]'...")
        if not await self.controller.select_video(video.video_id):
            log.add_message("[yellow]⚠️ An analysis is already running.[/yellow]")
            return
        state = self.controller.state
        if isinstance(state, AnalysisState):
            log.add_message(f"[green]✅ Content package ready for '{escape(state.detail.title)}'.[/green]")
        elif isinstance(state, ResultsState) and state.error:
            log.add_message(f"[red]❌ {state.error}[/red]")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, handlers=[TextualHandler()])
    app_config = Config()
    search_client = SearchClient(app_config.SEARCH_API_BASE, app_config.REQUEST_TIMEOUT)
    detail_client = DetailClient(app_config.SEARCH_API_BASE, app_config.REQUEST_TIMEOUT)
    generator = ContentGenerator(app_config.AI_API_BASE, app_config.GENERATION_TIMEOUT)

    app = ViralStratsApp(search_client, detail_client, generator, app_config)
    app.run()
