from __future__ import annotations

from typing import Iterable, Optional

import click
from rich.console import Console
from rich.syntax import Syntax

from .config import DEFAULT_THEME


class PlainPresenter:
    """每个输出单元占一行，原样写到 stdout"""

    def show(self, units: Iterable[str]) -> None:
        for unit in units:
            click.echo(unit)


class HighlightPresenter:
    """用 rich 的 Syntax 给输出单元着色，只用于终端"""

    def __init__(
        self,
        console: Optional[Console] = None,
        theme: str = DEFAULT_THEME,
        language: Optional[str] = None,
    ):
        self.console = console or Console()
        self.theme = theme
        self.language = language

    def show(self, units: Iterable[str]) -> None:
        for unit in units:
            self.console.print(self.render(unit), soft_wrap=True)

    def render(self, unit: str):
        # 未知的 lexer 或主题由 rich 回退为纯文本/默认主题
        syntax = Syntax(
            unit,
            self.language or "text",
            theme=self.theme,
            background_color="default",
        )
        text = syntax.highlight(unit)
        # pygments 会在末尾补一个换行
        if not unit.endswith("\n"):
            text.remove_suffix("\n")
        return text


def make_presenter(
    colors: bool,
    theme: str = DEFAULT_THEME,
    language: Optional[str] = None,
    console: Optional[Console] = None,
):
    console = console or Console()
    # 管道输出必须原样写出，rich 会展开 tab、去掉 \r
    if not colors or not console.is_terminal:
        return PlainPresenter()
    return HighlightPresenter(console=console, theme=theme, language=language)
