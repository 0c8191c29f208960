"""
Published articles stored as one JSON file per article.

Layout: <articles_dir>/<slug>.json, in the format the static site reads:

    {
      "id": "local-pool-reopens-after-repairs",
      "slug": "local-pool-reopens-after-repairs",
      "title": "...",
      "description": "...",
      "date": "2025-10-18",
      "author": "...",
      "category": "community",
      "tags": ["community"],
      "image": "/images/placeholder-council.jpg",
      "featured": false,
      "content": [{"type": "paragraph", "text": "..."}]
    }

Images sent as data URLs are written to <images_dir>/<slug>-<ms>.<ext> and
the article stores their public path under images_url.
"""

from __future__ import annotations

import base64
import json
import logging
import os
import re
import time
from datetime import date
from typing import Any, Dict, List, Tuple

from features.articles.domain.errors import ArticleNotFoundError, InvalidArticleFilenameError
from features.articles.domain.interfaces import IArticleStore
from features.articles.infrastructure.text_metrics import slugify

logger = logging.getLogger(__name__)


DEFAULT_IMAGE = "/images/placeholder-council.jpg"

DEFAULT_IMAGES_DIR = os.path.join("public", "images", "extracted")
DEFAULT_IMAGES_URL = "/images/extracted"

# Images pasted into the admin tool arrive as data URLs
DATA_URL_RE = re.compile(r"^data:(image/(png|jpeg|jpg|webp));base64,(.+)$", re.IGNORECASE | re.DOTALL)


def normalize_content(blocks: List[Any]) -> List[Any]:
    """Wrap plain-string blocks as paragraph blocks."""
    return [{"type": "paragraph", "text": b} if isinstance(b, str) else b for b in blocks]


def to_article_json(article: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize an article dict into the stored JSON shape."""
    title = str(article.get("title") or "").strip()
    slug = slugify(title)
    if not slug:
        raise ValueError("Article title is empty")

    content = normalize_content(article.get("content") or article.get("paragraphs") or [])
    if not content and article.get("body"):
        content.append({"type": "paragraph", "text": article["body"]})

    return {
        "id": slug,
        "slug": slug,
        "title": title,
        "description": article.get("description", ""),
        "date": article.get("date") or date.today().isoformat(),
        "author": article.get("author", ""),
        "category": article.get("category", "community"),
        "tags": list(article.get("tags") or []),
        "image": article.get("image") or DEFAULT_IMAGE,
        "featured": bool(article.get("featured", False)),
        "content": content,
    }


class JsonArticleStore(IArticleStore):
    """IArticleStore adapter writing one JSON file per article."""

    def __init__(
        self,
        articles_dir: str,
        images_dir: str = DEFAULT_IMAGES_DIR,
        images_url: str = DEFAULT_IMAGES_URL,
    ):
        self.articles_dir = articles_dir
        self.images_dir = images_dir
        self.images_url = images_url.rstrip("/")

    def _path(self, filename: str) -> str:
        if not filename or ".." in filename or "/" in filename or "\\" in filename:
            raise InvalidArticleFilenameError(f"Invalid filename: {filename!r}")
        return os.path.join(self.articles_dir, filename)

    def _store_image(self, slug: str, image: Any) -> Any:
        """
        Write a data-URL image to images_dir and return its public path.

        Anything that is not a png/jpeg/webp data URL is returned unchanged.
        Raises ValueError for undecodable base64 data.
        """
        if not isinstance(image, str):
            return image
        match = DATA_URL_RE.match(image)
        if not match:
            return image

        ext = "jpg" if match.group(2).lower() == "jpeg" else match.group(2).lower()
        data = base64.b64decode(match.group(3))
        os.makedirs(self.images_dir, exist_ok=True)
        image_name = f"{slug}-{int(time.time() * 1000)}.{ext}"
        with open(os.path.join(self.images_dir, image_name), "wb") as f:
            f.write(data)

        logger.info(f"JsonArticleStore: saved image {image_name} ({len(data)} bytes)")
        return f"{self.images_url}/{image_name}"

    def publish(self, articles: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        os.makedirs(self.articles_dir, exist_ok=True)
        results: List[Dict[str, Any]] = []
        errors: List[Dict[str, Any]] = []

        for article in articles:
            title = article.get("title")
            try:
                data = to_article_json(article)
                data["image"] = self._store_image(data["slug"], data["image"])
                filename = f"{data['slug']}.json"
                path = self._path(filename)
                with open(path, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
            except (OSError, ValueError, TypeError) as e:
                logger.error(f"JsonArticleStore: failed to publish {title!r}: {e}")
                errors.append({"title": title, "error": str(e)})
                continue

            logger.info(f"JsonArticleStore: published {filename}")
            results.append({
                "slug": data["slug"],
                "title": data["title"],
                "filename": filename,
                "image": data["image"],
            })

        return results, errors

    def list(self) -> List[Dict[str, Any]]:
        if not os.path.isdir(self.articles_dir):
            return []

        articles: List[Dict[str, Any]] = []
        for filename in sorted(os.listdir(self.articles_dir)):
            if not filename.endswith(".json"):
                continue
            try:
                with open(os.path.join(self.articles_dir, filename), "r", encoding="utf-8") as f:
                    article = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"JsonArticleStore: skipping unreadable {filename}: {e}")
                continue
            if not isinstance(article, dict):
                logger.warning(f"JsonArticleStore: skipping {filename}: not a JSON object")
                continue
            article["filename"] = filename
            articles.append(article)

        # Newest first; ISO dates sort lexicographically
        articles.sort(key=lambda a: str(a.get("date") or ""), reverse=True)
        return articles

    def delete(self, filename: str) -> None:
        path = self._path(filename)
        if not os.path.isfile(path):
            raise ArticleNotFoundError(f"Article not found: {filename}")
        os.remove(path)
        logger.info(f"JsonArticleStore: deleted {filename}")

    def update(self, filename: str, article: Dict[str, Any]) -> Dict[str, Any]:
        """
        Shallow-merge `article` over the stored file and rewrite it.

        A missing file is created from `article` alone. String content
        blocks become paragraph blocks and data-URL images are saved.
        """
        path = self._path(filename)
        existing: Dict[str, Any] = {}
        if os.path.isfile(path):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
            except json.JSONDecodeError as e:
                logger.warning(f"JsonArticleStore: replacing unreadable {filename}: {e}")
            else:
                if isinstance(loaded, dict):
                    existing = loaded
        else:
            logger.info(f"JsonArticleStore: {filename} not found, creating it")

        updated = {**existing, **article}
        if isinstance(article.get("content"), list):
            updated["content"] = normalize_content(article["content"])
        slug = str(updated.get("slug") or os.path.splitext(filename)[0])
        if "image" in updated:
            updated["image"] = self._store_image(slug, updated["image"])

        os.makedirs(self.articles_dir, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(updated, f, ensure_ascii=False, indent=2)

        logger.info(f"JsonArticleStore: updated {filename}")
        return updated
