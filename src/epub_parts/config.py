"""Parser configuration."""

from dataclasses import dataclass


@dataclass
class ParseConfig:
    """Options shared by the archive reader and the package parsers."""

    encoding: str = "utf-8"
    check_mimetype: bool = True
    recover_xml: bool = True  # let lxml repair sloppy markup instead of failing
