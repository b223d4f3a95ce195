"""Main application module for OE Radio.

This module defines the FastAPI application, registers middleware,
defines REST endpoints for the Austrian callsign service, and mounts an
MCP server for Model Context Protocol operations. At startup, it
constructs the FastAPI app via ``create_app`` and exposes it as a
module-level variable named ``app`` so that ASGI servers like Uvicorn can
discover it automatically.
"""

from __future__ import annotations

import os
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from fastapi_mcp import FastApiMCP

from .adapters.callsign import get_callsign_adapter
from .adapters.database import CallsignDatabaseError, CallsignDatabaseMissingError
from .middleware import RequestLogMiddleware, log_error
from .models.lookup import AvailabilityRequest, BatchLookupRequest, SuggestOptions
from .rules import DISTRICTS, LICENSE_CLASSES


def create_app(api_key: Optional[str] = None) -> FastAPI:
    """Factory function for constructing the FastAPI application.

    The returned application includes CORS middleware, request logging,
    optional API key authentication (``OERADIO_API_KEY``), and the REST
    endpoints for callsign lookups, suffix availability, suggestions and
    database information. The MCP server is mounted with the operation
    identifiers defined on the route decorators.
    """
    api_key = api_key if api_key is not None else os.getenv("OERADIO_API_KEY")
    app = FastAPI(title="OE Radio")

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLogMiddleware)

    # -----------------------------------------------------------------------
    # API key dependency
    # -----------------------------------------------------------------------
    api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)

    def require_api_key(x_api_key: str = Depends(api_key_header)) -> None:
        """Validate the ``x-api-key`` header against ``OERADIO_API_KEY``."""
        if api_key and x_api_key != api_key:
            raise HTTPException(status_code=401, detail="Missing or invalid API key")

    protected = [Depends(require_api_key)]

    # -----------------------------------------------------------------------
    # Error handling
    # -----------------------------------------------------------------------
    @app.exception_handler(CallsignDatabaseError)
    async def database_error_handler(request: Request, exc: CallsignDatabaseError) -> JSONResponse:
        log_error("callsign_database_unavailable", path=request.url.path, error=str(exc))
        if isinstance(exc, CallsignDatabaseMissingError):
            detail = "Callsign database not loaded. Run scripts/update_callsigns.py"
        else:
            detail = f"Callsign database unavailable: {exc}"
        return JSONResponse(status_code=503, content={"detail": detail})

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    @app.get("/api")
    def api_root():
        """Return a simple service descriptor for programmatic clients."""
        return {
            "ok": True,
            "service": "OE Radio",
            "docs": "/docs",
            "health": "/health",
            "mcp": "/mcp",
        }

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"ok": True}

    @app.get(
        "/api/callsigns/search",
        operation_id="callsign_search",
        tags=["Callsign"],
        dependencies=protected,
    )
    async def rest_callsign_search(
        pattern: str = Query(..., min_length=1, description="Callsign pattern, * as wildcard (e.g. OE8*)"),
        district: Optional[int] = Query(None, ge=0, le=9, description="Restrict to one district"),
        license_class: Optional[int] = Query(None, ge=1, le=4, description="Restrict to a license class"),
        club_only: bool = Query(False, description="Only club stations"),
        limit: int = Query(50, ge=1, le=500, description="Maximum number of results"),
    ) -> JSONResponse:
        """Search the official Austrian callsign list by pattern.

        Hidden entries are returned without personal data.
        """
        records = get_callsign_adapter().search(
            pattern,
            district=district,
            license_class=license_class,
            club_only=club_only,
            limit=limit,
        )
        return JSONResponse({"count": len(records), "records": [r.model_dump() for r in records]})

    @app.post(
        "/api/callsigns/lookup",
        operation_id="callsign_lookup_multiple",
        tags=["Callsign"],
        dependencies=protected,
    )
    async def rest_callsign_lookup_multiple(body: BatchLookupRequest) -> JSONResponse:
        """Look up several callsigns at once.

        Returns a mapping from normalized callsign to lookup result.
        """
        results = await get_callsign_adapter().lookup_multiple(
            body.callsigns, local_only=body.local_only
        )
        return JSONResponse({"results": {cs: r.model_dump() for cs, r in results.items()}})

    @app.get(
        "/api/callsign/{callsign}",
        operation_id="callsign_lookup",
        tags=["Callsign"],
        dependencies=protected,
    )
    async def rest_callsign(
        callsign: str,
        skip_cache: bool = Query(False, description="Bypass the lookup cache"),
        local_only: bool = Query(False, description="Only consult the official Austrian list"),
    ) -> JSONResponse:
        """Look up a callsign.

        The official Austrian list (fb.gv.at) is consulted first, then
        QRZ.com (if credentials are configured) and HamQTH. An Austrian
        callsign that is only found externally carries a warning because
        it is missing from the official list.
        """
        result = await get_callsign_adapter().lookup(
            callsign, skip_cache=skip_cache, local_only=local_only
        )
        return JSONResponse({"record": result.model_dump()})

    @app.get(
        "/api/callsign/{callsign}/validate",
        operation_id="callsign_validate",
        tags=["Callsign"],
        dependencies=protected,
    )
    async def rest_callsign_validate(callsign: str) -> JSONResponse:
        """Check a callsign against the Austrian format rules.

        Does not check whether the callsign is assigned.
        """
        validation = get_callsign_adapter().validate(callsign)
        return JSONResponse({"record": validation.model_dump()})

    @app.get(
        "/api/availability/{suffix}",
        operation_id="suffix_availability",
        tags=["Availability"],
        dependencies=protected,
    )
    async def rest_suffix_availability(
        suffix: str,
        district: Optional[int] = Query(None, ge=0, le=9, description="Check a single district only"),
    ) -> JSONResponse:
        """Check in which districts a suffix is still free.

        Taken districts list the current holder; hidden holders are shown
        as "[versteckt]".
        """
        result = get_callsign_adapter().check_availability(suffix, district)
        return JSONResponse({"record": result.model_dump()})

    @app.post(
        "/api/availability",
        operation_id="suffix_availability_multiple",
        tags=["Availability"],
        dependencies=protected,
    )
    async def rest_suffix_availability_multiple(body: AvailabilityRequest) -> JSONResponse:
        """Check several suffixes at once."""
        results = get_callsign_adapter().check_multiple_availability(body.suffixes, body.district)
        return JSONResponse({"results": {s: r.model_dump() for s, r in results.items()}})

    @app.get(
        "/api/availability/district/{district}/two-letter",
        operation_id="two_letter_suffixes",
        tags=["Availability"],
        dependencies=protected,
    )
    async def rest_two_letter_suffixes(
        district: int,
        exclude_club: bool = Query(False, description="Skip club suffixes (starting with X)"),
        club_only: bool = Query(False, description="Only club suffixes (starting with X)"),
    ) -> JSONResponse:
        """List all free two-letter suffixes in a district."""
        if not 0 <= district <= 9:
            raise HTTPException(status_code=400, detail=f"Invalid district: {district}")
        suffixes = get_callsign_adapter().find_available_two_letter_suffixes(
            district, exclude_club=exclude_club, club_only=club_only
        )
        return JSONResponse({"district": district, "count": len(suffixes), "suffixes": suffixes})

    @app.get(
        "/api/suggest",
        operation_id="callsign_suggest",
        tags=["Suggestions"],
        dependencies=protected,
    )
    async def rest_suggest(
        name: str = Query(..., description="Full name, e.g. 'Hans Muster'"),
        preferred_district: Optional[int] = Query(None, ge=0, le=9, description="Preferred district"),
        max_results: int = Query(10, ge=1, le=50, description="Maximum number of suggestions"),
        exclude_club: bool = Query(True, description="Skip club suffixes (starting with X)"),
        min_phonetic_score: float = Query(0.5, ge=0, le=1, description="Minimum phonetic score"),
    ) -> JSONResponse:
        """Suggest free callsign suffixes derived from a name.

        Candidates are scored for pronounceability and Morse brevity and
        ranked by ``0.6 * phonetic + 0.4 * cw``.
        """
        options = SuggestOptions(
            name=name,
            preferred_district=preferred_district,
            max_results=max_results,
            exclude_club=exclude_club,
            min_phonetic_score=min_phonetic_score,
        )
        suggestions = get_callsign_adapter().generate_suggestions(options)
        return JSONResponse(
            {
                "count": len(suggestions),
                "suggestions": [
                    {**s.model_dump(), "combined_score": round(s.combined_score, 2)}
                    for s in suggestions
                ],
            }
        )

    @app.get(
        "/api/suggest/random",
        operation_id="callsign_suggest_random",
        tags=["Suggestions"],
        dependencies=protected,
    )
    async def rest_suggest_random(
        count: int = Query(5, ge=1, le=50, description="Number of suggestions"),
        district: Optional[int] = Query(None, ge=0, le=9, description="Restrict to one district"),
        length: int = Query(3, ge=2, le=3, description="Suffix length"),
        exclude_club: bool = Query(True, description="Skip club suffixes (starting with X)"),
    ) -> JSONResponse:
        """Suggest random free suffixes."""
        suggestions = get_callsign_adapter().generate_random_suggestions(
            count, district=district, length=length, exclude_club=exclude_club
        )
        return JSONResponse(
            {"count": len(suggestions), "suggestions": [s.model_dump() for s in suggestions]}
        )

    @app.get(
        "/api/database/info",
        operation_id="callsign_database_info",
        tags=["Database"],
        dependencies=protected,
    )
    async def rest_database_info() -> JSONResponse:
        """Version, size and legal notice of the callsign database."""
        info = get_callsign_adapter().get_database_info()
        return JSONResponse({"record": info.model_dump()})

    @app.get(
        "/api/database/stats",
        operation_id="callsign_database_stats",
        tags=["Database"],
        dependencies=protected,
    )
    async def rest_database_stats() -> JSONResponse:
        """Entry counts per district and license class."""
        stats = get_callsign_adapter().get_database_stats()
        return JSONResponse({"record": stats.model_dump()})

    @app.get(
        "/api/districts",
        operation_id="district_list",
        tags=["Reference"],
    )
    async def rest_districts() -> JSONResponse:
        """Austrian callsign districts and their regions."""
        return JSONResponse(
            {"districts": [{"district": d, "name": n} for d, n in DISTRICTS.items()]}
        )

    @app.get(
        "/api/license-classes",
        operation_id="license_class_list",
        tags=["Reference"],
    )
    async def rest_license_classes() -> JSONResponse:
        """Austrian license classes."""
        return JSONResponse(
            {
                "license_classes": [
                    {"license_class": c, "description": d} for c, d in LICENSE_CLASSES.items()
                ]
            }
        )

    # -----------------------------------------------------------------------
    # MCP server mount
    # -----------------------------------------------------------------------
    # Include all operation identifiers so they are exposed over the MCP server
    mcp = FastApiMCP(
        app,
        include_operations=[
            "callsign_lookup",
            "callsign_lookup_multiple",
            "callsign_search",
            "callsign_validate",
            "suffix_availability",
            "suffix_availability_multiple",
            "two_letter_suffixes",
            "callsign_suggest",
            "callsign_suggest_random",
            "callsign_database_info",
            "callsign_database_stats",
            "district_list",
            "license_class_list",
        ],
    )
    mcp.mount()

    return app


# ---------------------------------------------------------------------------
# FastAPI application instance
# ---------------------------------------------------------------------------
app = create_app()
