"""Exceptions raised while opening and reading EPUB archives."""

import re


class EpubError(Exception):
    """Base class for every error raised by epub_parts."""


class MIMEError(EpubError, ValueError):
    """An identifying string or media type does not match what was expected."""

    def __init__(self, id: str, actual: str | None, expected: "str | re.Pattern[str]"):
        self.id = id
        self.actual = actual
        self.expected = expected
        pattern = expected.pattern if isinstance(expected, re.Pattern) else expected
        super().__init__(
            f"Invalid mime type for {id}: got {actual!r}, expected {pattern!r}"
        )

    @classmethod
    def unless(
        cls, *, id: str, actual: str | None, expected: "str | re.Pattern[str]"
    ) -> None:
        """Raise unless ``actual`` matches ``expected``.

        A plain string must match exactly, a compiled pattern only has to
        be found somewhere in ``actual``.
        """
        if actual is not None:
            if isinstance(expected, re.Pattern):
                if expected.search(actual):
                    return
            elif actual == expected:
                return
        raise cls(id=id, actual=actual, expected=expected)


class DanglingReferenceError(EpubError, TypeError):
    """A spine itemref names an id that is absent from the manifest."""

    def __init__(self, index: int, idref: str | None, item=None):
        self.index = index
        self.idref = idref
        super().__init__(f"Missing id at index {index} | idref {idref!r}, item {item}")


class UnknownItemError(EpubError, LookupError):
    """A lookup by id found nothing in the manifest."""

    def __init__(self, id: str):
        self.id = id
        super().__init__(f"Unknown manifest item: {id}")


class NoTableOfContentsError(EpubError):
    """None of the table of contents strategies produced any chapter."""


class EntryNotFoundError(EpubError, FileNotFoundError):
    """No archive entry matches the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Could not find entry with name {name}")


class EmptyArchiveError(EpubError):
    """The archive has no entries at all."""


class MissingRootfileError(EpubError):
    """META-INF/container.xml does not declare a rootfile."""
