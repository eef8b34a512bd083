from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Pattern

from .errors import ArgumentError


class ExtractionMode(str, Enum):
    OUTER = "outer"
    INNER = "inner"
    TEXT = "text"
    ATTRIBUTE = "attribute"


DEFAULT_THEME = "monokai"


@dataclass(frozen=True)
class ScrapeConfig:
    """一次运行的全部设置（来自命令行参数与环境变量）"""

    url: str
    selector: Optional[str] = None
    attribute: Optional[str] = None
    inner: bool = False
    text: bool = False
    regex: Optional[str] = None
    count: Optional[int] = None
    quiet: bool = False
    mozilla: bool = False
    print_headers: bool = False
    colors: bool = True
    theme: str = DEFAULT_THEME
    lang: Optional[str] = None

    @property
    def mode(self) -> ExtractionMode:
        if self.attribute is not None:
            return ExtractionMode.ATTRIBUTE
        if self.inner:
            return ExtractionMode.INNER
        if self.text:
            return ExtractionMode.TEXT
        return ExtractionMode.OUTER

    def validate(self) -> None:
        """检查参数之间的冲突，出错时抛出 ArgumentError"""
        chosen = [
            flag
            for flag, enabled in (
                ("--attribute", self.attribute is not None),
                ("--inner", self.inner),
                ("--text", self.text),
            )
            if enabled
        ]
        if len(chosen) > 1:
            raise ArgumentError(f"{' and '.join(chosen)} cannot be used together")

        if self.selector is None:
            needs_selector = chosen + (["--count"] if self.count is not None else [])
            if needs_selector:
                raise ArgumentError(f"{', '.join(needs_selector)} requires a SELECTOR")

        if self.attribute is not None and not self.attribute.strip():
            raise ArgumentError("--attribute must not be empty")

        if self.count is not None and self.count <= 0:
            raise ArgumentError("--count must be a positive integer")

        self.compiled_regex()

    def compiled_regex(self) -> Optional[Pattern[str]]:
        if self.regex is None:
            return None
        try:
            return re.compile(self.regex)
        except re.error as e:
            raise ArgumentError(f"Invalid regex '{self.regex}': {e}") from e
