"""FastAPI server exposing filter sessions to a thin front end."""

from typing import Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from browse_app.app import ItemBrowserApp
from browse_app.logging_config import configure_logging
from memory.filter_sessions import FilterSession


class SessionRequest(BaseModel):
    """Request payload for opening a filter session."""

    locked: Dict[str, str] | None = Field(None, description="Facets pinned by the hosting page, e.g. a brand page")
    filters: Dict[str, str] | None = Field(None, description="Initial selection")
    search_term: str = ""


class FacetChange(BaseModel):
    key: str
    value: Optional[Union[str, int, float]] = None


class ClearRequest(BaseModel):
    except_keys: List[str] = Field(default_factory=list)


class TermRequest(BaseModel):
    term: str = ""


class PreferenceUpdate(BaseModel):
    value: bool


def _selection_response(session: FilterSession, changed: bool) -> dict:
    return {
        "changed": changed,
        "selection": session.store.selection,
        "search_term": session.store.search_term,
        "has_clearable_filters": session.store.has_clearable_filters(),
    }


def create_app(browser: ItemBrowserApp | None = None) -> FastAPI:
    """Build the ASGI app around an :class:`ItemBrowserApp`."""

    configure_logging()
    browser = browser or ItemBrowserApp()
    api = FastAPI(title="Wardrobe Item Browser", version="0.1.0")
    api.state.browser = browser

    def session_or_404(session_id: str) -> FilterSession:
        try:
            return browser.get_session(session_id)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"unknown session {session_id}") from None

    @api.get("/healthz")
    def healthcheck() -> dict:
        """Readiness probe."""

        return {
            "status": "ok",
            "service": "wardrobe-item-browser",
            "environment": browser.config.environment or "local",
            "sessions": len(browser.sessions),
        }

    @api.post("/sessions")
    def create_session(request: SessionRequest) -> dict:
        session_id = browser.start_session(
            locked=request.locked, initial=request.filters, search_term=request.search_term
        )
        return {"session_id": session_id, "selection": browser.get_session(session_id).store.selection}

    @api.delete("/sessions/{session_id}")
    def end_session(session_id: str) -> dict:
        if not browser.end_session(session_id):
            raise HTTPException(status_code=404, detail=f"unknown session {session_id}")
        return {"status": "ok"}

    @api.post("/sessions/{session_id}/single")
    def set_single(session_id: str, change: FacetChange) -> dict:
        session = session_or_404(session_id)
        return _selection_response(session, session.store.set_single(change.key, change.value))

    @api.post("/sessions/{session_id}/multi")
    def toggle_multi(session_id: str, change: FacetChange) -> dict:
        session = session_or_404(session_id)
        return _selection_response(session, session.store.toggle_multi(change.key, change.value))

    @api.post("/sessions/{session_id}/clear")
    def clear_all(session_id: str, request: ClearRequest) -> dict:
        session = session_or_404(session_id)
        return _selection_response(session, session.store.clear_all(request.except_keys))

    @api.post("/sessions/{session_id}/search-term")
    def set_search_term(session_id: str, request: TermRequest) -> dict:
        session = session_or_404(session_id)
        return _selection_response(session, session.store.set_search_term(request.term))

    @api.post("/sessions/{session_id}/brand-search")
    def brand_search(session_id: str, request: TermRequest) -> dict:
        session_or_404(session_id)
        browser.set_brand_query(session_id, request.term)
        return {"status": "ok"}

    @api.get("/sessions/{session_id}/panel")
    def panel(session_id: str, nationality_query: str = "") -> dict:
        session_or_404(session_id)
        sections = browser.panel(session_id, nationality_query=nationality_query)
        return {"sections": [section.to_dict() for section in sections]}

    @api.get("/sessions/{session_id}/results")
    def results(session_id: str) -> dict:
        session_or_404(session_id)
        state = browser.results(session_id)
        return {
            "items": [item.model_dump(by_alias=True) for item in state.results],
            "total": state.total,
            "has_more": state.has_more,
            "loading": state.loading,
            "error": state.error,
            "sequence": state.applied_sequence,
            "query": state.query,
        }

    @api.get("/preferences/show-original-background")
    def get_show_original_background() -> dict:
        return {"value": browser.preferences.show_original_background()}

    @api.put("/preferences/show-original-background")
    def put_show_original_background(update: PreferenceUpdate) -> dict:
        return {"value": browser.preferences.set_show_original_background(update.value)}

    return api


app = create_app()


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:app", host="0.0.0.0", port=8080, reload=False)
