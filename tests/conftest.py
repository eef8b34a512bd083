"""
Shared fixtures: fake HTTP responses so no test touches the network.
"""

import io

import pytest
import requests
from requests.structures import CaseInsensitiveDict


def make_response(
    body,
    status_code=200,
    content_type="text/html; charset=utf-8",
    url="https://example.com/",
    content_length=True,
    encoding="utf-8",
):
    """Build a real requests.Response backed by an in-memory stream."""
    data = body.encode("utf-8") if isinstance(body, str) else body
    response = requests.Response()
    response.status_code = status_code
    response.reason = "OK" if status_code < 400 else "Not Found"
    response.url = url
    response.encoding = encoding
    response.raw = io.BytesIO(data)
    headers = CaseInsensitiveDict()
    if content_type:
        headers["Content-Type"] = content_type
    if content_length:
        headers["Content-Length"] = str(len(data))
    response.headers = headers
    return response


@pytest.fixture
def html_response():
    return make_response


LIST_HTML = """
<html>
  <body>
    <ul id="outer">
      <li id="first" class="item primary"><a href="/a">A</a></li>
      <li class="item">B
        <ul>
          <li id="nested" class="item">C</li>
        </ul>
      </li>
      <li id="last" class="item" data-empty="">D</li>
    </ul>
  </body>
</html>
"""


@pytest.fixture
def list_html():
    return LIST_HTML
