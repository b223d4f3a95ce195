from typing import List, Optional

from fastmcp import FastMCP
from pydantic import ValidationError

from oeradio.adapters.callsign import get_callsign_adapter
from oeradio.adapters.database import CallsignDatabaseError
from oeradio.models.lookup import SuggestOptions
from oeradio.rules import district_name, license_class_name

# Create FastMCP instance (no stateless_http parameter needed)
mcp = FastMCP("OE Radio")

DATABASE_HINT = "Run scripts/update_callsigns.py to build the callsign database."
INPUT_HINT = "Districts are 0-9, suffix length is 2 or 3, max_results is 1-50."


def _database_error(exc: CallsignDatabaseError) -> dict:
    return {"error": str(exc), "hint": DATABASE_HINT}


def _invalid_input(exc: ValueError) -> dict:
    return {"error": str(exc), "hint": INPUT_HINT}


@mcp.tool
async def callsign_lookup(callsign: str, local_only: bool = False) -> str:
    """Look up an amateur radio callsign. Austrian calls are checked against the official list first."""
    try:
        result = await get_callsign_adapter().lookup(callsign, local_only=local_only)
    except CallsignDatabaseError as e:
        return f"Error: {e}. {DATABASE_HINT}"

    if not result.exists or result.data is None:
        message = f"Callsign {callsign.upper().strip()} not found"
        return f"{message} ({result.warning})" if result.warning else message

    rec = result.data
    parts = [f"Call: {rec.callsign}"]
    if rec.is_hidden:
        parts.append("Name: [versteckt]")
    elif rec.name:
        parts.append(f"Name: {rec.name}")
    if rec.qth:
        parts.append(f"QTH: {' '.join(p for p in (rec.plz, rec.qth) if p)}")
    if rec.prefix == "OE":
        parts.append(f"District: OE{rec.district} ({district_name(rec.district)})")
    parts.append(f"Class: {license_class_name(rec.license_class)}")
    if rec.is_club:
        parts.append("Club station")
    parts.append(f"Source: {result.source}")
    if result.warning:
        parts.append(f"Warning: {result.warning}")
    return " | ".join(parts)


@mcp.tool
async def callsign_validate(callsign: str) -> dict:
    """Check whether a callsign follows the Austrian format rules."""
    return get_callsign_adapter().validate(callsign).model_dump()


@mcp.tool
async def suffix_availability(suffix: str, district: Optional[int] = None) -> dict:
    """Check in which Austrian districts (1-9) a callsign suffix is still free."""
    try:
        return get_callsign_adapter().check_availability(suffix, district).model_dump()
    except CallsignDatabaseError as e:
        return _database_error(e)


@mcp.tool
async def suffix_availability_multiple(suffixes: List[str], district: Optional[int] = None) -> dict:
    """Check several callsign suffixes at once."""
    try:
        results = get_callsign_adapter().check_multiple_availability(suffixes, district)
    except CallsignDatabaseError as e:
        return _database_error(e)
    return {suffix: r.model_dump() for suffix, r in results.items()}


@mcp.tool
async def callsign_suggest(
    name: str,
    preferred_district: Optional[int] = None,
    max_results: int = 10,
    exclude_club: bool = True,
    min_phonetic_score: float = 0.5,
) -> dict:
    """Suggest free callsign suffixes derived from a person's name."""
    try:
        options = SuggestOptions(
            name=name,
            preferred_district=preferred_district,
            max_results=max_results,
            exclude_club=exclude_club,
            min_phonetic_score=min_phonetic_score,
        )
    except ValidationError as e:
        return _invalid_input(e)
    try:
        suggestions = get_callsign_adapter().generate_suggestions(options)
    except CallsignDatabaseError as e:
        return _database_error(e)
    return {"count": len(suggestions), "suggestions": [s.model_dump() for s in suggestions]}


@mcp.tool
async def callsign_suggest_random(
    count: int = 5, district: Optional[int] = None, length: int = 3, exclude_club: bool = True
) -> dict:
    """Suggest random free callsign suffixes."""
    try:
        suggestions = get_callsign_adapter().generate_random_suggestions(
            count, district=district, length=length, exclude_club=exclude_club
        )
    except CallsignDatabaseError as e:
        return _database_error(e)
    except ValueError as e:
        return _invalid_input(e)
    return {"count": len(suggestions), "suggestions": [s.model_dump() for s in suggestions]}


@mcp.tool
async def callsign_database_info() -> dict:
    """Version, size, source and legal notice of the Austrian callsign list."""
    try:
        return get_callsign_adapter().get_database_info().model_dump()
    except CallsignDatabaseError as e:
        return _database_error(e)


@mcp.tool
async def callsign_database_stats() -> dict:
    """Entry counts of the Austrian callsign list per district and license class."""
    try:
        return get_callsign_adapter().get_database_stats().model_dump()
    except CallsignDatabaseError as e:
        return _database_error(e)


if __name__ == "__main__":
    mcp.run()
