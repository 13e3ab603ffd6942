"""
The weekly job: fetch last week's page views from Fathom, pick the most
read articles and tweet them with an OAuth 1.0 signed request.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol
from urllib.parse import urlencode

from .config import Settings
from .oauth1 import OAuth1Signer, SigningRequest, JSON_CONTENT_TYPE
from .pageview import aggregate_page_views, parse_page_views
from .tweet import compose_tweet, tweet_payload

logger = logging.getLogger(__name__)

# Only count article pages, i.e. slugs like /some-article
ARTICLE_FILTER = [{"property": "pathname", "operator": "is like", "value": "/*-*"}]


class Transport(Protocol):
    def send(self, request: SigningRequest) -> bytes:
        ...


def iso8601(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def analytics_request(settings: Settings, now: datetime) -> SigningRequest:
    date_from = now - timedelta(days=settings.period_days)
    query = urlencode([
        ("entity", "pageview"),
        ("entity_id", settings.fathom_entity_id),
        ("aggregates", "uniques"),
        ("field_grouping", "pathname"),
        ("sort_by", "uniques:desc"),
        ("timezone", settings.timezone),
        ("date_from", iso8601(date_from)),
        ("date_to", iso8601(now)),
        ("filters", json.dumps(ARTICLE_FILTER)),
    ])
    return SigningRequest(
        url=f"{settings.fathom_url}?{query}",
        method="GET",
        headers={"Authorization": f"Bearer {settings.fathom_token}"})


def tweet_request(settings: Settings, text: str) -> SigningRequest:
    return SigningRequest(
        url=settings.twitter_url,
        method="POST",
        headers={"Content-Type": JSON_CONTENT_TYPE},
        body=tweet_payload(text))


def make_signer(settings: Settings) -> OAuth1Signer:
    return OAuth1Signer(
        settings.credentials,
        signature_method=settings.signature_method,
        base64_variant=settings.base64_variant)


def run(settings: Settings,
        transport: Transport,
        *,
        signer: Optional[OAuth1Signer] = None,
        now: Optional[datetime] = None,
        dry_run: bool = False) -> str:
    """
    Run the weekly job once and return the tweet text. With `dry_run`,
    the tweet is composed and signed but not posted.
    """
    now = now or datetime.now(timezone.utc)
    signer = signer or make_signer(settings)

    payload = transport.send(analytics_request(settings, now))
    page_views = parse_page_views(payload)
    top_page_views = aggregate_page_views(page_views, settings.top_count)
    logger.info(f"Top {len(top_page_views)} of {len(page_views)} page views: "
                f"{[page_view.pathname for page_view in top_page_views]}")

    text = compose_tweet(top_page_views, settings.blog_host, settings.hashtags)
    signed_request = signer.adapt_request(tweet_request(settings, text))
    if dry_run:
        logger.info("Dry run, not posting the tweet.")
        return text

    transport.send(signed_request)
    logger.info("Tweet posted.")
    return text
