# ui.py
import re
from typing import Optional, Sequence, Tuple

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.message import Message
from textual.widgets import Button, DataTable, Input, Label, Markdown, RichLog, Static

from models import ContentPackage, VideoDetail, VideoSummary

# Original button variants mapped onto the ones Textual ships with.
BUTTON_VARIANTS = {
    "primary": "primary",
    "secondary": "default",
    "outline": "default",
}

SECTION_HEADINGS = {
    "title": "SEO Optimized Title  (1)",
    "description": "Description & Hashtags  (2)",
    "keywords": "Keywords  (3)",
    "script": "VEO 3 · 8s AI Video Script (Hook)  (4)",
}


def format_views(views: str) -> str:
    """Abbreviates a raw view count ("1234567 views" -> "1.2M"); keeps K/M values as-is."""
    if not views:
        return "0"
    if re.search(r"[KMkm]", views):
        return views
    digits = re.sub(r"[^0-9]", "", views)
    if not digits:
        return views
    count = int(digits)
    for threshold, suffix in ((1_000_000, "M"), (1_000, "K")):
        if count >= threshold:
            return re.sub(r"\.0$", "", f"{count / threshold:.1f}") + suffix
    return str(count)


class SearchControls(Static):
    """Widget for the search input and button."""
    class SearchRequested(Message):
        def __init__(self, query: str) -> None:
            self.query = query
            super().__init__()

    def compose(self) -> ComposeResult:
        yield Label("What do you want to analyze?", id="search-heading")
        yield Label("Enter a keyword, topic, or niche to find viral opportunities.")
        yield Input(placeholder="e.g. 'AI ASMR', 'Minecraft Speedrun', 'Tech Reviews'", id="search-input")
        yield Button("Search", variant=BUTTON_VARIANTS["primary"], id="search-button")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.post_search_message()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.post_search_message()

    def post_search_message(self) -> None:
        query = self.query_one(Input).value.strip()
        if query:
            self.post_message(self.SearchRequested(query))

    def set_loading(self, loading: bool) -> None:
        self.query_one(Input).disabled = loading
        button = self.query_one(Button)
        button.disabled = loading
        button.label = "Searching..." if loading else "Search"

    def clear(self) -> None:
        self.query_one(Input).value = ""


class ResultsDisplay(DataTable):
    """Widget for the search results table."""
    class VideoChosen(Message):
        def __init__(self, video: VideoSummary) -> None:
            self.video = video
            super().__init__()

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.results: Tuple[VideoSummary, ...] = ()

    def on_mount(self) -> None:
        self.add_columns("Title", "Channel", "Views", "Published", "Duration")
        self.cursor_type = "row"

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.row_key.value is not None:
            self.post_message(self.VideoChosen(self.results[int(event.row_key.value)]))

    def show_results(self, results: Sequence[VideoSummary]) -> None:
        results = tuple(results)
        if results == self.results:
            return
        self.results = results
        self.clear()
        # Row keys are positions; provider ids are not guaranteed unique.
        for index, r in enumerate(results):
            self.add_row(r.title, r.channel, format_views(r.views), r.published, r.duration, key=str(index))


class AnalysisView(VerticalScroll):
    """The analyzed source video followed by the four generated sections."""

    def compose(self) -> ComposeResult:
        yield Button("← Back to results", variant=BUTTON_VARIANTS["outline"], id="back-button")
        yield Markdown(id="source-card")
        for name, heading in SECTION_HEADINGS.items():
            yield Label(heading, classes="section-title")
            yield Static("", id=f"section-{name}", classes="section-body", markup=False)

    def update_analysis(self, detail: VideoDetail, package: ContentPackage, tag_limit: int) -> None:
        tags = " ".join(f"`#{tag}`" for tag in detail.tags[:tag_limit])
        self.query_one("#source-card", Markdown).update(
            f"## {detail.title}\n\n"
            f"- **Channel**: {detail.channel.name} ({detail.channel.subscribers})\n"
            f"- **Published**: {detail.stats.date}\n"
            f"- **Views**: {detail.stats.views} · **Likes**: {detail.stats.likes}\n"
            f"- **Thumbnail**: `{detail.thumbnail_url}`\n\n"
            f"{tags}"
        )
        for name in ContentPackage.SECTIONS:
            self.query_one(f"#section-{name}", Static).update(package.section(name))
        self.scroll_home(animate=False)


class ErrorBanner(Static):
    def show_error(self, error: Optional[str]) -> None:
        self.update(f"❌ {error}" if error else "")
        self.display = bool(error)


class LogPane(RichLog):
    """A dedicated widget for logging application events."""
    def add_message(self, message: str) -> None:
        self.write(message)
