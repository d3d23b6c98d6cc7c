"""Typed error outcomes raised by the page tree services.

Every error carries a stable ``code`` so callers (HTTP layer, jobs) can map it
to their own status without matching on messages.
"""


class PageTreeError(Exception):
    code = "PAGE_TREE_ERROR"
    message = "Page tree error"

    def __init__(self, message: str = None, **context):
        self.message = message or self.message
        self.context = context
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# ============ PAGES ============

class PageNotFound(PageTreeError):
    code = "PAGE_NOT_FOUND"
    message = "Page not found"


class PageInTrash(PageTreeError):
    code = "PAGE_IN_TRASH"
    message = "Cannot perform this operation on a trashed page"


class PageAlreadyInTrash(PageTreeError):
    code = "PAGE_ALREADY_IN_TRASH"
    message = "Page is already in trash"


class PageNotInTrash(PageTreeError):
    code = "PAGE_NOT_IN_TRASH"
    message = "Page is not in trash"


class InvalidParent(PageTreeError):
    code = "INVALID_PARENT"
    message = "Invalid parent page"


class SlugAlreadyExists(PageTreeError):
    code = "SLUG_ALREADY_EXISTS"
    message = "This public slug is already in use"


# ============ FAVORITES ============

class FavoriteExists(PageTreeError):
    code = "FAVORITE_EXISTS"
    message = "Page is already in favorites"


class FavoriteNotFound(PageTreeError):
    code = "FAVORITE_NOT_FOUND"
    message = "Favorite not found"
