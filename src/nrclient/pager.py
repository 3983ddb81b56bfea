"""Link header pagination for the REST v2 API."""

from __future__ import annotations

from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class Paging:
    """Navigation links advertised by a paged REST response."""

    next: str | None = None
    prev: str | None = None
    first: str | None = None
    last: str | None = None


def parse_link_header(link_header: str) -> dict[str, str]:
    """Parse an RFC 5988 ``Link`` header into a mapping of rel to URL.

    Example:
        >>> parse_link_header('<https://api.newrelic.com/v2/alerts_policies.json?page=2>; rel="next"')
        {'next': 'https://api.newrelic.com/v2/alerts_policies.json?page=2'}
    """

    links: dict[str, str] = {}
    if not link_header:
        return links
    for part in link_header.split(","):
        pieces = [p.strip() for p in part.strip().split(";")]
        if not pieces or not pieces[0].startswith("<"):
            continue
        url = pieces[0].strip("<>")
        for attr in pieces[1:]:
            if "=" not in attr:
                continue
            key, value = attr.split("=", 1)
            if key.strip() == "rel":
                for rel in value.strip().strip('"').split():
                    links[rel] = url
    return links


class LinkHeaderPager:
    """Extract :class:`Paging` metadata from a response's ``Link`` header."""

    def parse(self, response: httpx.Response) -> Paging:
        links = parse_link_header(response.headers.get("Link", ""))
        return Paging(
            next=links.get("next") or None,
            prev=links.get("prev") or None,
            first=links.get("first") or None,
            last=links.get("last") or None,
        )


__all__ = ["LinkHeaderPager", "Paging", "parse_link_header"]
