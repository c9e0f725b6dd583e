"""
Output normalizer: every provider output shape flattens to a list of URL strings.
"""

import httpx
import pytest
from pydantic import AnyUrl

from banana_studio.services.output_normalizer import OutputShape, classify_output, normalize_output


class AsyncFile:
    def __init__(self, value):
        self.value = value

    async def url(self):
        return self.value


class SyncFile:
    def __init__(self, value):
        self.value = value

    def url(self):
        return self.value


class BrokenFile:
    async def url(self):
        raise RuntimeError("expired")


class RaisingAttribute:
    @property
    def url(self):
        raise RuntimeError("nope")


class TestClassifyOutput:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("https://x/a.png", OutputShape.STRING),
            (httpx.URL("https://x/a.png"), OutputShape.URL),
            (AsyncFile("https://x/a.png"), OutputShape.ACCESSOR),
            (["a"], OutputShape.SEQUENCE),
            (("a",), OutputShape.SEQUENCE),
            ({"a": "b"}, OutputShape.MAPPING),
            (None, OutputShape.OTHER),
            (42, OutputShape.OTHER),
            (b"bytes", OutputShape.OTHER),
            (RaisingAttribute(), OutputShape.OTHER),
        ],
    )
    def test_shapes(self, value, expected):
        assert classify_output(value) is expected


class TestNormalizeOutput:
    @pytest.mark.asyncio
    async def test_plain_string(self):
        assert await normalize_output("https://x/a.png") == ["https://x/a.png"]

    @pytest.mark.asyncio
    async def test_url_objects(self):
        url = httpx.URL("https://x/a.png")
        assert await normalize_output(url) == [str(url)]
        any_url = AnyUrl("https://x/b.png")
        assert await normalize_output(any_url) == [str(any_url)]

    @pytest.mark.asyncio
    async def test_async_accessor(self):
        assert await normalize_output(AsyncFile("https://x/a.png")) == ["https://x/a.png"]

    @pytest.mark.asyncio
    async def test_accessor_resolving_to_url_object(self):
        assert await normalize_output(AsyncFile(httpx.URL("https://x/a.png"))) == ["https://x/a.png"]

    @pytest.mark.asyncio
    async def test_sync_accessor(self):
        assert await normalize_output(SyncFile("https://x/a.png")) == ["https://x/a.png"]

    @pytest.mark.asyncio
    async def test_accessor_not_coercible(self):
        assert await normalize_output(AsyncFile(42)) == []
        assert await normalize_output(AsyncFile(None)) == []

    @pytest.mark.asyncio
    async def test_failing_accessor_degrades_to_empty(self):
        assert await normalize_output(BrokenFile()) == []

    @pytest.mark.asyncio
    async def test_sequence_flattens_in_order_and_drops_empties(self):
        output = [
            "https://x/1.png",
            [AsyncFile("https://x/2.png"), ["https://x/3.png"]],
            None,
            42,
            "",
            BrokenFile(),
            httpx.URL("https://x/4.png"),
        ]
        assert await normalize_output(output) == [
            "https://x/1.png",
            "https://x/2.png",
            "https://x/3.png",
            "https://x/4.png",
        ]

    @pytest.mark.asyncio
    async def test_sequence_equals_concatenation_of_elements(self):
        items = ["https://x/a.png", {"k": "https://x/b.png"}, (SyncFile("https://x/c.png"),), 3.5]
        expected = []
        for item in items:
            expected.extend(url for url in await normalize_output(item) if url)
        assert await normalize_output(items) == expected

    @pytest.mark.asyncio
    async def test_mapping_keeps_only_immediate_string_values(self):
        output = {
            "first": "https://x/1.png",
            "nested_list": ["https://x/nested.png"],
            "nested_map": {"inner": "https://x/inner.png"},
            "file": AsyncFile("https://x/2.png"),
            "url": httpx.URL("https://x/3.png"),
            "count": 5,
            "empty": "",
        }
        assert await normalize_output(output) == [
            "https://x/1.png",
            "https://x/2.png",
            "https://x/3.png",
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resolved", [42, None, b"https://x/a.png", ["https://x/a.png"], ""])
    async def test_mapping_drops_accessor_with_unusable_url(self, resolved):
        output = {"bad": AsyncFile(resolved), "bad_sync": SyncFile(resolved), "good": "https://x/1.png"}
        assert await normalize_output(output) == ["https://x/1.png"]

    @pytest.mark.asyncio
    async def test_mapping_drops_failing_accessor(self):
        assert await normalize_output({"bad": BrokenFile(), "good": "https://x/1.png"}) == ["https://x/1.png"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [None, 42, {}, {"a": 1, "b": None}, object(), b"https://x/a.png"])
    async def test_unusable_values_yield_empty_list(self, value):
        assert await normalize_output(value) == []
