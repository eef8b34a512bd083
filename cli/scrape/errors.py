from __future__ import annotations


class ScrapeError(Exception):
    """所有可向用户报告的错误的基类"""

    exit_code = 1


class InvalidUrl(ScrapeError):
    pass


class InvalidSelector(ScrapeError):
    pass


class FetchError(ScrapeError):
    pass


class ArgumentError(ScrapeError):
    """参数冲突或格式错误，CLI 会转成 click.UsageError"""

    exit_code = 2
