import httpx
import pytest

from frontmatter_viewer.sync import DocumentFetcher, FetchOutcomeKind

PAGE_ID = "6999390af17c96c558f7d57e"
BODY = "---\ntitle: Hello\n---\n# Page"


def make_fetcher(handler) -> DocumentFetcher:
    client = httpx.AsyncClient(base_url="http://wiki.test", transport=httpx.MockTransport(handler))
    return DocumentFetcher(client)


@pytest.mark.asyncio
async def test_falls_back_to_second_prefix_after_404():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        assert request.url.params["pageId"] == PAGE_ID
        if request.url.path.startswith("/_api/v3"):
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(200, json={"data": {"page": {"revision": {"body": BODY}}}})

    outcome = await make_fetcher(handler).fetch(PAGE_ID)
    assert outcome.kind == FetchOutcomeKind.SUCCESS
    assert outcome.body == BODY
    assert seen == ["/_api/v3/page", "/api/v3/page"]


@pytest.mark.asyncio
async def test_first_prefix_with_body_wins():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"page": {"revision": {"body": BODY}}})

    outcome = await make_fetcher(handler).fetch("/" + PAGE_ID)
    assert outcome.ok
    assert seen == ["/_api/v3/page"]


@pytest.mark.asyncio
async def test_transport_errors_and_non_json_are_not_fatal():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/_api/v3"):
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, text="<html>login</html>")

    outcome = await make_fetcher(handler).fetch(PAGE_ID)
    assert outcome.kind == FetchOutcomeKind.FAILURE
    assert outcome.body is None


@pytest.mark.asyncio
async def test_json_without_body_is_empty():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"page": {"revision": {"body": ""}}})

    outcome = await make_fetcher(handler).fetch(PAGE_ID)
    assert outcome.kind == FetchOutcomeKind.EMPTY


@pytest.mark.asyncio
async def test_undecodable_json_is_a_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"})

    outcome = await make_fetcher(handler).fetch(PAGE_ID)
    assert outcome.kind == FetchOutcomeKind.FAILURE


@pytest.mark.asyncio
async def test_empty_identifier_skips_requests():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    outcome = await make_fetcher(handler).fetch("/")
    assert outcome.kind == FetchOutcomeKind.EMPTY


@pytest.mark.asyncio
async def test_revision_fetch_accepts_both_envelopes():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        if request.url.path.startswith("/_api/v3"):
            return httpx.Response(200, json={"something": "else"})
        return httpx.Response(200, json={"data": {"revision": {"body": BODY}}})

    outcome = await make_fetcher(handler).fetch(PAGE_ID, revision_id="rev-1")
    assert outcome.body == BODY
    assert seen == [
        f"/_api/v3/pages/{PAGE_ID}/revisions/rev-1",
        f"/api/v3/pages/{PAGE_ID}/revisions/rev-1",
    ]


@pytest.mark.asyncio
async def test_revision_fetch_direct_envelope():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"revision": {"body": BODY}})

    outcome = await make_fetcher(handler).fetch(PAGE_ID, revision_id="rev-2")
    assert outcome.body == BODY


@pytest.mark.asyncio
async def test_fetch_metadata_parses_block():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"page": {"revision": {"body": BODY}}})

    block = await make_fetcher(handler).fetch_metadata(PAGE_ID)
    assert block is not None
    assert block.structured == {"title": "Hello"}


@pytest.mark.asyncio
async def test_fetch_metadata_none_when_nothing_found():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    assert await make_fetcher(handler).fetch_metadata(PAGE_ID) is None


@pytest.mark.asyncio
async def test_non_httpx_exception_falls_through_to_next_prefix():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        if request.url.path.startswith("/_api/v3"):
            raise ConnectionResetError("peer reset")
        return httpx.Response(200, json={"page": {"revision": {"body": BODY}}})

    outcome = await make_fetcher(handler).fetch(PAGE_ID)
    assert outcome.body == BODY
    assert seen == ["/_api/v3/page", "/api/v3/page"]


@pytest.mark.asyncio
async def test_unexpected_exception_on_every_prefix_is_a_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise RuntimeError("client closed")

    outcome = await make_fetcher(handler).fetch(PAGE_ID)
    assert outcome.kind == FetchOutcomeKind.FAILURE


@pytest.mark.asyncio
async def test_fetch_metadata_with_pathologically_deep_block():
    deep = "\n".join(" " * depth + f"k{depth}:" for depth in range(1200))

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"page": {"revision": {"body": f"---\n{deep}\n---\n"}}})

    assert await make_fetcher(handler).fetch_metadata(PAGE_ID) is None
