import httpx
import pytest

from freedom_wall.client.board_session import BoardSession
from freedom_wall.client.share import ShareService, WebhookShareTarget
from freedom_wall.client.store_client import ImageAttachment, WallStoreClient
from freedom_wall.schemas.comment_schema import SortOption

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16

@pytest.fixture
async def session(store, notifier):
    board = BoardSession(store, notifier=notifier, sharer=ShareService())
    await board.refresh()
    return board

@pytest.mark.asyncio
async def test_post_like_delete_scenario(session, notifier, request_log):
    """Hello appears on top with no likes, gains one like locally, then goes away"""
    await session.post_comment("Earlier")
    before = len(session.threads)

    assert await session.post_comment("Hello")
    hello = session.threads[0]
    assert hello.message == "Hello"
    assert hello.likes == 0
    assert notifier.last == ("success", "Comment posted successfully!")

    request_log.clear()
    assert await session.like(hello.id)

    assert session.threads[0].likes == 1
    assert request_log == [("POST", f"/api/v1/comments/{hello.id}/like")]

    assert await session.delete(hello.id)
    assert len(session.threads) == before
    assert session.find_comment(hello.id) is None

@pytest.mark.asyncio
async def test_reply_builds_single_thread(session):
    await session.post_comment("Parent")
    parent = session.threads[0]

    assert session.start_reply(parent.id) == parent.id
    assert await session.post_comment("Child")

    assert session.state.replying_to is None
    assert len(session.threads) == 1
    assert [(r.message, r.parent_id) for r in session.threads[0].replies] == [("Child", parent.id)]

@pytest.mark.asyncio
async def test_start_reply_toggles_and_rejects_replies(session):
    await session.post_comment("Parent")
    parent = session.threads[0]
    session.start_reply(parent.id)
    await session.post_comment("Child")
    reply = session.threads[0].replies[0]

    assert session.start_reply(parent.id) == parent.id
    assert session.start_reply(parent.id) is None

    with pytest.raises(ValueError):
        session.start_reply(reply.id)

@pytest.mark.asyncio
async def test_validation_happens_before_any_request(session, notifier, request_log):
    request_log.clear()

    assert not await session.post_comment("a" * 501)
    assert notifier.last == ("error", "Message cannot exceed 500 characters")

    assert not await session.post_comment("   ")
    assert notifier.last == ("error", "Please enter a message")

    gif = ImageAttachment(filename="a.gif", content=b"GIF89a", content_type="image/gif")
    assert not await session.post_comment("with image", image=gif)
    assert notifier.last == ("error", "Please select a valid image file (JPEG or PNG)")

    assert request_log == []

    assert await session.post_comment("a" * 500)
    assert ("POST", "/api/v1/comments") in request_log

@pytest.mark.asyncio
async def test_post_with_image(session):
    image = ImageAttachment(filename="cat.png", content=PNG_BYTES, content_type="image/png")

    assert await session.post_comment("Look at this", image=image)

    posted = session.threads[0]
    assert posted.image_url.startswith("http://test/storage/freedom-wall-images/")
    assert posted.image_url.endswith(".png")

@pytest.mark.asyncio
async def test_submit_ignored_while_in_flight(session, request_log):
    request_log.clear()
    session.is_submitting = True

    assert not await session.post_comment("double click")
    assert request_log == []

@pytest.mark.asyncio
async def test_search_states(session):
    assert session.empty_state == "No comments yet. Be the first to share your thoughts!"

    await session.post_comment("Hello world")
    session.set_search("xyz")

    assert session.visible_threads == []
    assert session.empty_state == "No comments match your search"

    session.set_search("WORLD")
    assert [t.message for t in session.visible_threads] == ["Hello world"]
    assert session.empty_state is None

@pytest.mark.asyncio
async def test_sort_change_refetches(session, request_log):
    await session.post_comment("first")
    await session.post_comment("second")

    assert [t.message for t in session.threads] == ["second", "first"]

    request_log.clear()
    await session.set_sort(SortOption.OLDEST)

    assert request_log == [("GET", "/api/v1/comments")]
    assert [t.message for t in session.threads] == ["first", "second"]

@pytest.mark.asyncio
async def test_failed_like_leaves_count_unchanged(session, notifier):
    await session.post_comment("Hello")
    hello = session.threads[0]
    await session.delete(hello.id)
    session.threads = [hello]

    assert not await session.like(hello.id)

    assert session.threads[0].likes == 0
    assert notifier.last == ("error", "Failed to like comment")

@pytest.mark.asyncio
async def test_failed_delete_keeps_local_state(session, notifier):
    await session.post_comment("Hello")

    assert not await session.delete(424242)

    assert len(session.threads) == 1
    assert notifier.last == ("error", "Failed to delete comment")

@pytest.mark.asyncio
async def test_refresh_failure_keeps_snapshot(notifier):
    def refuse(request):
        return httpx.Response(500, json={"detail": "Failed to load comments"})

    http = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://test")
    board = BoardSession(WallStoreClient(http_client=http), notifier=notifier, sharer=ShareService())

    assert not await board.refresh()
    assert board.threads == []
    assert board.loading is False
    assert notifier.last == ("error", "Failed to load comments")

    await http.aclose()

@pytest.mark.asyncio
async def test_share_reports_outcome(store, notifier):
    copied = []

    async def copy(text):
        copied.append(text)

    board = BoardSession(store, notifier=notifier, sharer=ShareService(copy=copy))
    await board.post_comment("Share me")

    result = await board.share(board.threads[0])

    assert result.method == "clipboard"
    assert copied == ['Check out this comment on Freedom Wall:\n\n"Share me"']
    assert notifier.last == ("success", "Comment copied to clipboard!")

@pytest.mark.asyncio
async def test_dark_mode_toggle(store):
    board = BoardSession(store, sharer=ShareService())

    assert board.state.dark_mode is False
    assert board.toggle_dark_mode() is True
    assert board.toggle_dark_mode() is False

@pytest.mark.asyncio
async def test_blank_search_on_empty_board(session):
    session.set_search("   ")

    assert session.empty_state == "No comments yet. Be the first to share your thoughts!"

@pytest.mark.asyncio
async def test_unreadable_store_responses_are_reported(notifier):
    def garbled(request):
        if request.url.path.endswith("/like"):
            return httpx.Response(200, json={"unexpected": True})
        if request.method == "POST":
            return httpx.Response(200, json={"id": "not-a-number"})
        return httpx.Response(200, text="<html>maintenance</html>")

    http = httpx.AsyncClient(transport=httpx.MockTransport(garbled), base_url="http://test")
    board = BoardSession(WallStoreClient(http_client=http), notifier=notifier, sharer=ShareService())

    assert not await board.refresh()
    assert notifier.last == ("error", "Failed to load comments")

    assert not await board.post_comment("Hello")
    assert notifier.last == ("error", "Failed to post comment. Please try again.")

    assert not await board.like(1)
    assert notifier.last == ("error", "Failed to like comment")

    await http.aclose()

@pytest.mark.asyncio
async def test_session_closes_what_it_created(test_client):
    store = WallStoreClient(base_url="http://test")
    sharer = ShareService(share=WebhookShareTarget("http://hooks.test/share"))

    async with BoardSession(store, sharer=sharer):
        pass

    assert store.http.is_closed
    assert sharer.share.http.is_closed

    borrowed = BoardSession(WallStoreClient(http_client=test_client), sharer=ShareService())
    await borrowed.aclose()

    assert not test_client.is_closed
