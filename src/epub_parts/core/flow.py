"""Reading flow derived from the spine."""

from epub_parts.models.epub import Flow, FlowEntry, Item


def parse_flow(contents: list[Item]) -> Flow:
    """Mirror the resolved spine contents as a linear reading path."""
    return Flow(
        entries=[
            FlowEntry(index=index, id=item.id, href=item.href, media_type=item.media_type)
            for index, item in enumerate(contents)
        ]
    )
