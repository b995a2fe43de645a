"""
Basic usage example of fastapi-request-context.

Demonstrates:
- Installing the middleware from environment settings
- Binding the request body more than once
- Writing envelopes that show up in the request log
"""

from fastapi import Depends, FastAPI
from pydantic import BaseModel

from fastapi_request_context import (
    RequestContext,
    bind,
    get_request_context,
    install_request_context,
    load_settings,
    setup_logging,
    success,
    write_success,
)

settings = load_settings()
setup_logging(settings.log_level, json_format=settings.log_json)

app = FastAPI(title="Basic Request Context Example")
install_request_context(app, settings)


class Note(BaseModel):
    title: str
    body: str = ""


@app.post("/notes")
async def create_note(ctx: RequestContext = Depends(get_request_context)):
    """The body is cached, so a second bind sees the same payload."""
    note = await bind(ctx, Note)
    again = await bind(ctx, Note)
    return write_success(ctx, success({"title": note.title, "same": note == again}))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)

    # Test with:
    # TOKEN_SECRET=dev-secret python examples/01_basic_usage.py
    # curl -X POST -H "Content-Type: application/json" \
    #      -d '{"title": "hi"}' http://localhost:8000/notes
