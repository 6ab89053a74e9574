"""Mention stream over the Twitter web GraphQL API using cookie auth (auth_token + ct0).

Searches for ``@<handle> -is:retweet`` on the Latest timeline and yields
Mention records; the first attached photo is downloaded as the token image.
"""
import json
import os
import uuid
import logging
from typing import Dict, List, Optional

import httpx

from launchpad.models import Mention

logger = logging.getLogger(__name__)

TWITTER_API_BASE = "https://x.com/i/api/graphql"
BEARER_TOKEN = "Bearer AAAAAAAAAAAAAAAAAAAAANRILgAAAAAAnNwIzUejRCOuH5E6I8xnZz4puTs%3D1Zv7ttfk8LF81IUq16cHjhLTvJu4FA33AGWWjCpTnA"

# Query IDs rotate; tried in order
SEARCH_QUERY_IDS = ["M1jEez78PEfVfbQLvlWMvQ", "5h0kNbk3ii97rmfY6CdgAA", "Tp1sewRU1AsZpBWhqCZicQ"]

SEARCH_FEATURES = {
    "rweb_video_screen_enabled": True,
    "profile_label_improvements_pcf_label_in_post_enabled": True,
    "responsive_web_profile_redirect_enabled": True,
    "rweb_tipjar_consumption_enabled": True,
    "verified_phone_label_enabled": False,
    "creator_subscriptions_tweet_preview_api_enabled": True,
    "responsive_web_graphql_timeline_navigation_enabled": True,
    "responsive_web_graphql_exclude_directive_enabled": True,
    "responsive_web_graphql_skip_user_profile_image_extensions_enabled": False,
    "premium_content_api_read_enabled": False,
    "communities_web_enable_tweet_community_results_fetch": True,
    "c9s_tweet_anatomy_moderator_badge_enabled": True,
    "responsive_web_edit_tweet_api_enabled": True,
    "graphql_is_translatable_rweb_tweet_is_translatable_enabled": True,
    "view_counts_everywhere_api_enabled": True,
    "longform_notetweets_consumption_enabled": True,
    "responsive_web_twitter_article_tweet_consumption_enabled": True,
    "tweet_awards_web_tipping_enabled": False,
    "freedom_of_speech_not_reach_fetch_enabled": True,
    "standardized_nudges_misinfo": True,
    "tweet_with_visibility_results_prefer_gql_limited_actions_policy_enabled": True,
    "rweb_video_timestamps_enabled": True,
    "longform_notetweets_rich_text_read_enabled": True,
    "longform_notetweets_inline_media_enabled": True,
    "articles_preview_enabled": True,
    "responsive_web_enhance_cards_enabled": False,
}


class MentionFetchError(Exception):
    pass


def get_credentials() -> Optional[tuple]:
    """Twitter cookie credentials from environment as (auth_token, ct0), or None."""
    # Secrets injected by some hosts carry stray newlines
    auth_token = "".join((os.environ.get("TWITTER_AUTH_TOKEN") or "").split())
    ct0 = "".join((os.environ.get("TWITTER_CT0") or "").split())
    if not auth_token or not ct0:
        return None
    return (auth_token, ct0)


def _build_headers(auth_token: str, ct0: str) -> dict:
    return {
        "accept": "*/*",
        "authorization": BEARER_TOKEN,
        "x-csrf-token": ct0,
        "x-twitter-auth-type": "OAuth2Session",
        "x-twitter-active-user": "yes",
        "x-client-uuid": str(uuid.uuid4()),
        "cookie": f"auth_token={auth_token}; ct0={ct0}",
        "origin": "https://x.com",
        "referer": "https://x.com/",
        "content-type": "application/json",
    }


def _photo_urls(result: dict) -> List[str]:
    legacy = result.get("legacy", {})
    media = legacy.get("extended_entities", {}).get("media") or legacy.get("entities", {}).get("media") or []
    return [m["media_url_https"] for m in media if m.get("type") == "photo" and m.get("media_url_https")]


def _parse_mention_result(result: dict) -> Optional[Dict]:
    if result.get("__typename") == "TweetWithVisibilityResults":
        result = result.get("tweet", result)
    if not result.get("rest_id"):
        return None

    user_result = result.get("core", {}).get("user_results", {}).get("result", {})
    username = (user_result.get("legacy", {}).get("screen_name")
                or user_result.get("core", {}).get("screen_name", ""))

    note = result.get("note_tweet", {}).get("note_tweet_results", {}).get("result", {})
    legacy = result.get("legacy", {})
    text = note.get("text") or legacy.get("full_text", "") or legacy.get("text", "")
    if not text:
        return None

    return {
        "id": result["rest_id"],
        "text": text,
        "author": username or None,
        "photo_urls": _photo_urls(result),
    }


def parse_search_response(data: dict) -> List[Dict]:
    """Flatten a SearchTimeline response into raw mention dicts, deduplicated by id."""
    instructions = (
        data.get("data", {})
        .get("search_by_raw_query", {})
        .get("search_timeline", {})
        .get("timeline", {})
        .get("instructions", [])
    )
    mentions = []
    seen = set()
    for instruction in instructions or []:
        for entry in instruction.get("entries", []):
            content = entry.get("content", {})
            result = content.get("itemContent", {}).get("tweet_results", {}).get("result")
            if not result:
                continue
            parsed = _parse_mention_result(result)
            if parsed and parsed["id"] not in seen:
                seen.add(parsed["id"])
                mentions.append(parsed)
    return mentions


class TwitterMentionSource:
    def __init__(self, handle: str, count: int = 20, credentials: Optional[tuple] = None,
                 timeout: float = 30, image_timeout: float = 15):
        self.handle = handle.lstrip("@")
        self.count = count
        self.credentials = credentials
        self.timeout = timeout
        self.image_timeout = image_timeout

    async def _search(self, client: httpx.AsyncClient, headers: dict) -> List[Dict]:
        variables = {
            "rawQuery": f"@{self.handle} -is:retweet",
            "count": self.count,
            "querySource": "typed_query",
            "product": "Latest",
        }
        last_error = "no query id succeeded"
        for qid in SEARCH_QUERY_IDS:
            params = {"variables": json.dumps(variables)}
            url = f"{TWITTER_API_BASE}/{qid}/SearchTimeline?{httpx.QueryParams(params)}"
            try:
                resp = await client.post(url, headers=headers, json={"features": SEARCH_FEATURES, "queryId": qid})
            except httpx.HTTPError as e:
                logger.warning("Twitter mention search error with qid %s: %s", qid, e)
                last_error = str(e)
                continue
            if resp.status_code == 404:
                continue
            if resp.status_code != 200:
                logger.warning("Twitter mention search HTTP %s with qid %s", resp.status_code, qid)
                last_error = f"HTTP {resp.status_code}"
                continue
            return parse_search_response(resp.json())
        raise MentionFetchError(f"Twitter mention search failed: {last_error}")

    async def _download_image(self, client: httpx.AsyncClient, url: str) -> Optional[bytes]:
        try:
            resp = await client.get(url, timeout=self.image_timeout)
        except httpx.HTTPError as e:
            logger.warning("Failed to download mention image %s: %s", url, e)
            return None
        if resp.status_code != 200:
            logger.warning("Mention image %s returned %s", url, resp.status_code)
            return None
        return resp.content

    async def fetch_mentions(self) -> List[Mention]:
        creds = self.credentials or get_credentials()
        if not creds:
            raise MentionFetchError("Twitter credentials not set (TWITTER_AUTH_TOKEN/TWITTER_CT0)")
        headers = _build_headers(*creds)

        mentions: List[Mention] = []
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            raw = await self._search(client, headers)
            for item in raw:
                image = None
                if item["photo_urls"]:
                    image = await self._download_image(client, item["photo_urls"][0])
                mentions.append(Mention(id=item["id"], text=item["text"], image=image, author=item["author"]))
        logger.info("Twitter: %d mentions of @%s", len(mentions), self.handle)
        return mentions
