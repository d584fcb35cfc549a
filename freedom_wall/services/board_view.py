"""
Thread building and view filtering for the comment board.

Everything here is a pure transformation over comment snapshots so the same
code serves the board endpoint and the client session.
"""
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from freedom_wall.schemas.comment_schema import CommentResponse, ThreadedCommentResponse

NO_MATCH_MESSAGE = "No comments match your search"
NO_COMMENTS_MESSAGE = "No comments yet. Be the first to share your thoughts!"


def build_threads(comments: Sequence[CommentResponse]) -> List[ThreadedCommentResponse]:
    """
    Group a flat, already sorted comment list into top-level threads.

    Top-level comments keep their relative order and each one collects its
    direct replies in their relative order. Replies whose parent is missing
    or is itself a reply are dropped.
    """
    replies_by_parent: Dict[int, List[CommentResponse]] = defaultdict(list)
    for comment in comments:
        if comment.parent_id is not None:
            replies_by_parent[comment.parent_id].append(_as_reply(comment))

    return [
        ThreadedCommentResponse(
            **comment.model_dump(exclude={"replies"}),
            replies=replies_by_parent.get(comment.id, []),
        )
        for comment in comments
        if comment.parent_id is None
    ]


def filter_threads(
    threads: Sequence[ThreadedCommentResponse],
    search: str
) -> List[ThreadedCommentResponse]:
    """
    Keep threads whose message or any reply contains the search text.

    Matching is case-insensitive and a kept thread keeps all of its replies.
    A blank search keeps everything.
    """
    if not search or not search.strip():
        return list(threads)

    needle = search.lower()
    return [
        thread for thread in threads
        if needle in thread.message.lower()
        or any(needle in reply.message.lower() for reply in thread.replies)
    ]


def empty_state_message(
    visible: Sequence[ThreadedCommentResponse],
    search: str
) -> Optional[str]:
    if visible:
        return None
    return NO_MATCH_MESSAGE if search and search.strip() else NO_COMMENTS_MESSAGE


def apply_like(
    threads: Sequence[ThreadedCommentResponse],
    comment_id: int
) -> List[ThreadedCommentResponse]:
    """Return the threads with exactly one more like on comment_id"""
    updated = []
    for thread in threads:
        if thread.id == comment_id:
            thread = thread.model_copy(update={"likes": thread.likes + 1})
        elif any(reply.id == comment_id for reply in thread.replies):
            replies = [
                reply.model_copy(update={"likes": reply.likes + 1})
                if reply.id == comment_id else reply
                for reply in thread.replies
            ]
            thread = thread.model_copy(update={"replies": replies})
        updated.append(thread)
    return updated


def remove_comment(
    threads: Sequence[ThreadedCommentResponse],
    comment_id: int
) -> List[ThreadedCommentResponse]:
    """Drop a top-level thread, or a single reply, by identifier"""
    remaining = []
    for thread in threads:
        if thread.id == comment_id:
            continue
        if any(reply.id == comment_id for reply in thread.replies):
            thread = thread.model_copy(
                update={"replies": [r for r in thread.replies if r.id != comment_id]}
            )
        remaining.append(thread)
    return remaining


def share_text(comment: CommentResponse) -> str:
    return f'Check out this comment on Freedom Wall:\n\n"{comment.message}"'


def _as_reply(comment: CommentResponse) -> CommentResponse:
    if type(comment) is CommentResponse:
        return comment
    return CommentResponse(**comment.model_dump(exclude={"replies"}))
