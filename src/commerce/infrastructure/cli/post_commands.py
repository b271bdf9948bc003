"""CLI commands for posts, likes and comments."""

from __future__ import annotations

import click

from commerce.application.comment_post import AddCommentHandler, RemoveCommentHandler
from commerce.application.create_post import CreatePostHandler
from commerce.application.like_post import LikePostHandler, UnlikePostHandler
from commerce.domain.exceptions import DomainException
from commerce.infrastructure.bootstrap import comment_repository, like_repository, post_repository


@click.command("create")
@click.option("--title", required=True)
@click.option("--author", "author_id", required=True, help="Author user ID.")
def post_create(title: str, author_id: str) -> None:
    """Create a post with a unique slug."""
    try:
        post = CreatePostHandler(post_repository()).handle(title, author_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Post {post.id} created  (slug={post.slug})")


@click.command("like")
@click.option("--id", "post_id", required=True, help="Post ID.")
@click.option("--user", "user_id", required=True, help="User ID.")
@click.option("--undo", is_flag=True, default=False, help="Remove the like instead.")
def post_like(post_id: str, user_id: str, undo: bool) -> None:
    """Like (or unlike) a post."""
    handler_cls = UnlikePostHandler if undo else LikePostHandler
    handler = handler_cls(post_repo=post_repository(), like_repo=like_repository())

    try:
        changed = handler.handle(user_id, post_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    post = post_repository().get_by_id(post_id)
    verb = "unliked" if undo else "liked"
    if changed:
        click.echo(f"Post {post_id} {verb} by {user_id}  (likes={post.like_count})")
    else:
        click.echo(f"Nothing to do  (likes={post.like_count})")


@click.command("comment")
@click.option("--id", "post_id", required=True, help="Post ID.")
@click.option("--user", "author_id", required=True, help="Author user ID.")
@click.option("--text", "content", required=True)
def post_comment(post_id: str, author_id: str, content: str) -> None:
    """Add a comment to a post."""
    handler = AddCommentHandler(post_repo=post_repository(), comment_repo=comment_repository())

    try:
        comment = handler.handle(post_id, author_id, content)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Comment #{comment.id} added to post {post_id}")


@click.command("uncomment")
@click.option("--comment-id", required=True, type=int)
def post_uncomment(comment_id: int) -> None:
    """Remove a comment."""
    handler = RemoveCommentHandler(post_repo=post_repository(), comment_repo=comment_repository())

    try:
        removed = handler.handle(comment_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Comment #{comment_id} removed." if removed else f"Comment #{comment_id} was already gone.")
