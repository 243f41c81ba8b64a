# razorblog/models/__init__.py
from .author import Author, EmailClaim, normalize_email
from .post import Post
from .comment import Comment
from .share import Share
from .page import Page

__all__ = ['Author', 'EmailClaim', 'normalize_email', 'Post', 'Comment', 'Share', 'Page']
