import sys

import click
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import DEFAULT_THEME, ExtractionMode, ScrapeConfig
from .errors import ArgumentError, ScrapeError
from .extractor import Extractor, compile_selector, parse_document
from .fetcher import Fetcher, parse_url
from .log import setup_logging
from .presenter import make_presenter

err_console = Console(stderr=True)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="scrape")
@click.argument("url")
@click.argument("selector", required=False)
@click.option("-a", "--attribute", help="提取指定属性的值（缺少该属性的节点会被跳过）")
@click.option("--inner", is_flag=True, help="输出节点的 inner HTML")
@click.option("--text", is_flag=True, help="输出节点的纯文本")
@click.option("-r", "--regex", help="对每个结果应用正则，只保留第一个匹配")
@click.option("-q", "--quiet", is_flag=True, help="不显示进度和警告")
@click.option("-m", "--mozilla", is_flag=True, help="伪装成浏览器（Mozilla User-Agent）")
@click.option("--headers", "print_headers", is_flag=True, envvar="HEADERS", help="把响应头打印到 stderr")
@click.option("-n", "--count", type=click.IntRange(min=1), help="最多输出多少个节点")
@click.option("--no-colors", is_flag=True, help="关闭语法高亮")
@click.option("-t", "--theme", default=DEFAULT_THEME, show_default=True, help="语法高亮主题")
@click.option("-l", "--lang", help="高亮所用的语法（默认根据 Content-Type 判断）")
def cli(
    url: str,
    selector: str,
    attribute: str,
    inner: bool,
    text: bool,
    regex: str,
    quiet: bool,
    mozilla: bool,
    print_headers: bool,
    count: int,
    no_colors: bool,
    theme: str,
    lang: str,
):
    """下载网页，并用 CSS 选择器提取内容"""
    config = ScrapeConfig(
        url=url,
        selector=selector,
        attribute=attribute,
        inner=inner,
        text=text,
        regex=regex,
        count=count,
        quiet=quiet,
        mozilla=mozilla,
        print_headers=print_headers,
        colors=not no_colors,
        theme=theme,
        lang=lang,
    )
    setup_logging(quiet=quiet, console=err_console)

    try:
        units, language = scrape(config)
    except ArgumentError as e:
        raise click.UsageError(str(e)) from e
    except ScrapeError as e:
        err_console.print(f"[red]错误: {escape(str(e))}[/red]", highlight=False, soft_wrap=True)
        sys.exit(e.exit_code)

    presenter = make_presenter(config.colors, theme=config.theme, language=language)
    presenter.show(units)


def scrape(config: ScrapeConfig):
    """执行 下载 → 解析 → 选择 → 提取，返回 (输出单元, 高亮语法)"""
    config.validate()
    regex = config.compiled_regex()
    url = parse_url(config.url)
    # 选择器在请求之前编译，非法时不会访问网络
    selector = compile_selector(config.selector) if config.selector is not None else None

    fetcher = Fetcher(
        mozilla=config.mozilla,
        show_progress=not config.quiet,
        print_headers=config.print_headers,
        console=err_console,
    )
    page = fetcher.fetch(url)

    extractor = Extractor(
        mode=config.mode,
        attribute=config.attribute,
        regex=regex,
        count=config.count,
    )
    if selector is None:
        return [extractor.narrow(page.body)], config.lang or page.language

    units = extractor.extract(parse_document(page.body), selector)
    if config.lang:
        return units, config.lang
    if config.mode in (ExtractionMode.OUTER, ExtractionMode.INNER):
        return units, "html"
    return units, None


def main():
    cli()


if __name__ == "__main__":
    main()
