import inspect
import json
from typing import Iterable, Sequence

from .pageview import PageView

TWEET_TEMPLATE = """
    Happy Friday everyone! 👋

    Hope you've all had a great week. Here's a look back at the week's most read articles in my blog:

    {articles}

    {hashtags}
"""


# Keycap emoji for the digit index+1, e.g. "1️⃣"
def keycap_emoji(index: int) -> str:
    if not 0 <= index <= 8:
        raise ValueError(f"No keycap emoji for position {index + 1}.")
    return chr(0x31 + index) + "\ufe0f" + "\u20e3"


def article_lines(page_views: Sequence[PageView], blog_host: str) -> str:
    return "\n".join(
        f"{keycap_emoji(index)} {blog_host}/{page_view.pathname}"
        for index, page_view in enumerate(page_views))


def compose_tweet(page_views: Sequence[PageView], blog_host: str, hashtags: Iterable[str]) -> str:
    # Dedent the template before substitution, the article list spans several lines.
    return inspect.cleandoc(TWEET_TEMPLATE).format(
        articles=article_lines(page_views, blog_host),
        hashtags=" ".join(hashtags))


def tweet_payload(text: str) -> bytes:
    return json.dumps({"text": text}).encode("utf-8")
