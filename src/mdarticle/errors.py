"""Exception types raised across mdarticle"""


class MdArticleError(Exception):
    """Base class for all mdarticle errors."""


class FrontmatterError(MdArticleError, ValueError):
    """Raised when a frontmatter header cannot be read as a YAML mapping."""


class ArchiveCollisionError(MdArticleError):
    """Raised when two archive entries sanitize to the same name under the 'error' policy."""

    def __init__(self, name: str):
        super().__init__(f"Duplicate archive entry name: {name}")
        self.name = name


class DocumentNotFound(MdArticleError, LookupError):
    """Raised when an article id resolves to nothing in the store."""

    def __init__(self, article_id):
        super().__init__(f"Document not found: {article_id}")
        self.article_id = article_id
