"""Example node types for TreeSync.

This package demonstrates framework usage but is not part of the core API.
"""

from .blog import App, Comment, Comments, Person, Post, Posts

__all__ = [
    "App",
    "Comment",
    "Comments",
    "Person",
    "Post",
    "Posts",
]
