"""
Token identity example.

Demonstrates:
- Optional identity with identity_for() and IdentityError
- Required identity with the require_identity() dependency
- Paged list endpoints with extract_pager()
"""

from fastapi import Depends, FastAPI

from fastapi_request_context import (
    IdentityError,
    LoginUser,
    RequestContext,
    Settings,
    extract_pager,
    get_request_context,
    install_request_context,
    require_identity,
    setup_logging,
    success,
    write_success,
)

setup_logging("info")

app = FastAPI(title="Authentication Example")
resolver = install_request_context(app, Settings(token_secret="dev-secret"))

ARTICLES = [{"id": i, "title": f"Article {i}"} for i in range(1, 251)]


@app.get("/greeting")
async def greeting(ctx: RequestContext = Depends(get_request_context)):
    """Anonymous callers are allowed; the log records uid 0 for them."""
    try:
        user = resolver.identity_for(ctx)
    except IdentityError:
        return write_success(ctx, success({"message": "Hello, guest!"}))
    return write_success(ctx, success({"message": f"Hello, user {user.id}!"}))


@app.get("/articles")
async def list_articles(
    user: LoginUser = Depends(require_identity(resolver)),
    ctx: RequestContext = Depends(get_request_context),
):
    """Requires a token. ``?page=2&pageSize=50`` is clamped to at most 100."""
    pager = await extract_pager(ctx)
    items = ARTICLES[pager.offset : pager.offset + pager.page_size]
    return write_success(
        ctx,
        success({"owner": user.id, "page": pager.page, "items": items}),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Mint a token with:
    # python -c "import jwt; print(jwt.encode({'uid': 7}, 'dev-secret', algorithm='HS256'))"
    # curl http://localhost:8000/greeting
    # curl -H "Authorization: Bearer <token>" "http://localhost:8000/articles?page=2"
