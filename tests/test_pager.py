from __future__ import annotations

import httpx

from nrclient.pager import LinkHeaderPager, Paging, parse_link_header


def test_parse_link_header_multiple_rels() -> None:
    header = (
        '<https://api.newrelic.com/v2/alerts_policies.json?page=2>; rel="next", '
        '<https://api.newrelic.com/v2/alerts_policies.json?page=5>; rel="last"'
    )

    links = parse_link_header(header)

    assert links == {
        "next": "https://api.newrelic.com/v2/alerts_policies.json?page=2",
        "last": "https://api.newrelic.com/v2/alerts_policies.json?page=5",
    }


def test_parse_link_header_ignores_malformed_parts() -> None:
    assert parse_link_header("") == {}
    assert parse_link_header('garbage; rel="next"') == {}
    assert parse_link_header("<https://x.test/a>; title=foo") == {}


def test_pager_reads_response_headers() -> None:
    response = httpx.Response(
        200,
        headers={
            "Link": '<https://x.test/p?page=1>; rel="first", <https://x.test/p?page=3>; rel="next"'
        },
    )

    paging = LinkHeaderPager().parse(response)

    assert paging == Paging(next="https://x.test/p?page=3", first="https://x.test/p?page=1")


def test_pager_without_link_header_has_no_next() -> None:
    paging = LinkHeaderPager().parse(httpx.Response(200))

    assert paging.next is None
    assert paging == Paging()
