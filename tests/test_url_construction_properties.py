"""
Property-based tests for URL construction.

These tests verify that search URLs are built with correctly encoded
keywords for any query.
"""

from urllib.parse import urlparse, parse_qs, unquote

from hypothesis import given, settings, strategies as st

from mcp_1688.url_builder import OfferSearchURLBuilder


# Strategy for generating search queries, CJK included
search_queries = st.text(
    alphabet=st.characters(
        whitelist_categories=('L', 'N', 'P', 'Zs'),
        blacklist_characters='\x00'
    ),
    min_size=2,
    max_size=60
)


@given(query=search_queries)
@settings(max_examples=100)
def test_url_keyword_round_trip(query):
    """
    **Property: keyword encoding fidelity**

    For any query, decoding the keywords parameter gives back the query.
    """
    url = OfferSearchURLBuilder().build_search_url(query)

    assert url.startswith("https://s.1688.com/selloffer/offer_search.htm?keywords=")
    encoded = url.split("keywords=", 1)[1]
    assert unquote(encoded) == query


@given(query=search_queries)
@settings(max_examples=100)
def test_url_has_single_keywords_parameter(query):
    """
    **Property: URL shape**

    The URL targets the offer search page and carries exactly one parameter.
    """
    url = OfferSearchURLBuilder().build_search_url(query)
    parsed = urlparse(url)

    assert parsed.scheme == "https"
    assert parsed.netloc == "s.1688.com"
    assert parsed.path == "/selloffer/offer_search.htm"
    assert "#" not in url
    assert list(parse_qs(parsed.query, keep_blank_values=True).keys()) == ["keywords"]


def test_spaces_encoded_as_percent_20():
    """Spaces use %20 like encodeURIComponent, not '+'."""
    url = OfferSearchURLBuilder().build_search_url("stainless steel cup")

    assert url == "https://s.1688.com/selloffer/offer_search.htm?keywords=stainless%20steel%20cup"


def test_cjk_query_percent_encoded_utf8():
    """CJK text is percent-encoded as UTF-8."""
    url = OfferSearchURLBuilder().build_search_url("保温杯")

    assert url.endswith("keywords=%E4%BF%9D%E6%B8%A9%E6%9D%AF")


def test_reserved_characters_are_encoded():
    """Characters that would break the query string are escaped."""
    url = OfferSearchURLBuilder().build_search_url("a&b=c/d?")

    assert url.endswith("keywords=a%26b%3Dc%2Fd%3F")

