from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Pattern

import soupsieve
from bs4 import BeautifulSoup, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from .config import ExtractionMode
from .errors import InvalidSelector

logger = logging.getLogger(__name__)


class SourceOrderFormatter(HTMLFormatter):
    """与 bs4 默认的 minimal 格式相同，但按源码顺序输出属性（默认会排序）"""

    def __init__(self):
        super().__init__(entity_substitution=EntitySubstitution.substitute_xml)

    def attributes(self, tag):
        if tag.attrs is None:
            return []
        return list(tag.attrs.items())


SOURCE_ORDER = SourceOrderFormatter()


def compile_selector(selector: str) -> soupsieve.SoupSieve:
    """编译 CSS 选择器；在发起请求之前调用，以便尽早报告错误"""
    if not selector or not selector.strip():
        raise InvalidSelector("Invalid selector: selector is empty")
    try:
        return soupsieve.compile(selector)
    except soupsieve.SelectorSyntaxError as e:
        raise InvalidSelector(f"Invalid selector '{selector}': {e}") from e


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def select_nodes(
    document: BeautifulSoup,
    selector: soupsieve.SoupSieve,
    count: Optional[int] = None,
) -> List[Tag]:
    """按文档顺序（深度优先、先序）返回匹配的节点，最多 count 个"""
    # soupsieve 中 limit=0 表示不限制
    return selector.select(document, limit=count or 0)


class Extractor:
    """把匹配到的节点转换成输出单元（HTML、文本或属性值）"""

    def __init__(
        self,
        mode: ExtractionMode = ExtractionMode.OUTER,
        attribute: Optional[str] = None,
        regex: Optional[Pattern[str]] = None,
        count: Optional[int] = None,
    ):
        if mode is ExtractionMode.ATTRIBUTE and not attribute:
            raise ValueError("attribute mode needs an attribute name")
        self.mode = mode
        self.attribute = attribute
        self.regex = regex
        self.count = count

    def extract(self, document: BeautifulSoup, selector: soupsieve.SoupSieve) -> List[str]:
        nodes = select_nodes(document, selector, self.count)
        logger.debug("selector %r matched %d node(s)", selector.pattern, len(nodes))
        return list(self.iter_units(nodes))

    def iter_units(self, nodes: Iterable[Tag]) -> Iterable[str]:
        for node in nodes:
            unit = self._render(node)
            if unit is None:
                logger.debug("<%s> has no attribute %r, skipped", node.name, self.attribute)
                continue
            yield self.narrow(unit)

    def narrow(self, unit: str) -> str:
        """应用正则：取第一个匹配，没有匹配时原样返回"""
        if self.regex is None:
            return unit
        match = self.regex.search(unit)
        return match.group(0) if match else unit

    def _render(self, node: Tag) -> Optional[str]:
        if self.mode is ExtractionMode.ATTRIBUTE:
            value = node.get(self.attribute)
            if value is None:
                return None
            # class/rel 等多值属性会被解析成列表
            if isinstance(value, (list, tuple)):
                return " ".join(value)
            return value
        if self.mode is ExtractionMode.INNER:
            return node.decode_contents(formatter=SOURCE_ORDER)
        if self.mode is ExtractionMode.TEXT:
            return node.get_text()
        return node.decode(formatter=SOURCE_ORDER)
