# controller.py
import itertools
import logging
from typing import Callable, Optional, Tuple

from models import AnalysisState, ResultsState, SearchState, SessionState
from services import (ContentGenerator, DetailClient, DetailFailure, GenerationFailure,
                      SearchClient, SearchFailure)

logger = logging.getLogger(__name__)

SEARCH_ERROR = "Failed to fetch search results. Please try again."
ANALYSIS_ERROR = "Failed to generate content. The API might be busy."


class SessionController:
    """Owns the single SessionState and drives search -> results -> analysis.

    Each outstanding request carries a ticket; a response whose ticket no
    longer matches the current state is dropped instead of applied.
    """

    def __init__(
        self,
        search_client: SearchClient,
        detail_client: DetailClient,
        generator: ContentGenerator,
        on_change: Optional[Callable[[SessionState], None]] = None,
    ):
        self.search_client = search_client
        self.detail_client = detail_client
        self.generator = generator
        self.on_change = on_change
        self._state: SessionState = SearchState()
        self._tickets = itertools.count(1)
        self._pending: Optional[Tuple[int, str]] = None

    @property
    def state(self) -> SessionState:
        return self._state

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        if self.on_change:
            self.on_change(state)

    def _is_current(self, ticket: Tuple[int, str]) -> bool:
        return self._pending == ticket

    def _settle(self, ticket: Tuple[int, str], outcome: SessionState) -> None:
        if not self._is_current(ticket):
            logger.info("discarding stale response for %r", ticket[1])
            return
        self._pending = None
        self._set_state(outcome)

    async def submit_query(self, query: str) -> bool:
        """Runs a search. Returns False when the guard rejects the trigger."""
        state = self._state
        query = query.strip()
        if not isinstance(state, SearchState) or state.loading or not query:
            return False

        ticket = (next(self._tickets), query)
        self._pending = ticket
        self._set_state(SearchState(query=query, loading=True))
        # Anything escaping the search still clears the loading flag.
        outcome: SessionState = SearchState(query=query)
        try:
            results = await self.search_client.search(query)
            outcome = ResultsState(query=query, results=tuple(results))
        except SearchFailure:
            outcome = SearchState(query=query, error=SEARCH_ERROR)
        finally:
            self._settle(ticket, outcome)
        return True

    async def select_video(self, video_id: str) -> bool:
        """Fetches details then generates a package. Only one analysis at a time."""
        state = self._state
        if not isinstance(state, ResultsState) or state.analyzing_id is not None:
            return False
        if not any(video.video_id == video_id for video in state.results):
            return False

        ticket = (next(self._tickets), video_id)
        self._pending = ticket
        self._set_state(ResultsState(query=state.query, results=state.results, analyzing_id=video_id))
        # Anything escaping the analysis still clears the analyzing marker.
        outcome: SessionState = ResultsState(query=state.query, results=state.results)
        try:
            detail = await self.detail_client.get_details(video_id)
            package = await self.generator.generate(detail)
            outcome = AnalysisState(query=state.query, results=state.results, detail=detail, package=package)
        except (DetailFailure, GenerationFailure):
            outcome = ResultsState(query=state.query, results=state.results, error=ANALYSIS_ERROR)
        finally:
            self._settle(ticket, outcome)
        return True

    def new_search(self) -> bool:
        """Leaves the results for a blank search; any analysis in flight becomes stale."""
        if not isinstance(self._state, ResultsState):
            return False
        self._pending = None
        self._set_state(SearchState())
        return True

    def back_to_results(self) -> bool:
        state = self._state
        if not isinstance(state, AnalysisState):
            return False
        self._set_state(ResultsState(query=state.query, results=state.results))
        return True
