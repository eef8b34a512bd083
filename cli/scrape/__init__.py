"""scrape - Download a web page and extract content with CSS selectors"""

__version__ = "0.1.0"

from .extractor import Extractor, compile_selector, parse_document, select_nodes
from .fetcher import Fetcher, Page

__all__ = ["Extractor", "Fetcher", "Page", "compile_selector", "parse_document", "select_nodes", "main"]


def main() -> None:
    # 延迟导入，避免把 CLI 依赖强绑到库导入路径
    from .__main__ import main as _main

    _main()
