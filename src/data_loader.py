"""
JSON data loading for venues and keywords.

File formats:

venues.json:
    {"venues": [{"id": "...", "name": "...", "url": "...", "district": "...",
                 "address": "...", "content": "...", "features": ["wifi", ...],
                 "hashtags": "#..."}]}

keywords.json:
    {"core_keywords": [{"name": "不限時", "weight": 3.0, "category": "環境"}],
     "secondary_keywords": [...],
     "reference_keywords": [...]}

Keyword sections are merged in core → secondary → reference order. The tier
of each keyword is derived from its weight, not from the section it sits in.

Missing files, invalid JSON and empty payloads fall back to built-in default
data (logged); loading never raises for I/O problems.
"""

import json
import logging
from pathlib import Path
from typing import List, Union

from .ranking import Keyword, Venue

logger = logging.getLogger(__name__)

KEYWORD_SECTIONS = ("core_keywords", "secondary_keywords", "reference_keywords")


def _read_json(path: Union[str, Path]):
    path = Path(path)
    if not path.exists():
        logger.warning(f"Data file not found: {path}")
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to read {path}: {e}")
        return None


def parse_venue(data: dict) -> Venue:
    """
    Build a Venue from a JSON object.

    Raises:
        KeyError: If id or name is missing
    """
    return Venue(
        id=str(data["id"]),
        name=data["name"],
        url=data.get("url", ""),
        district=data.get("district", ""),
        address=data.get("address", ""),
        content=data.get("content", ""),
        features=set(data.get("features") or []),
        baseline_score=float(data.get("baseline_score", 0.0)),
        hashtags=data.get("hashtags", ""),
    )


def load_venues(path: Union[str, Path]) -> List[Venue]:
    """Load venues, or the defaults if the file is unusable"""
    payload = _read_json(path)
    entries = payload.get("venues") if isinstance(payload, dict) else None
    if not entries:
        logger.warning("Venue data empty, using default venues")
        return default_venues()

    venues = []
    for entry in entries:
        try:
            venues.append(parse_venue(entry))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping invalid venue entry {entry!r}: {e}")

    logger.info(f"Loaded {len(venues)} venues from {path}")
    return venues


def load_keywords(path: Union[str, Path]) -> List[Keyword]:
    """Load keywords from all tier sections, or the defaults if the file is unusable"""
    payload = _read_json(path)
    if not isinstance(payload, dict) or not any(payload.get(s) for s in KEYWORD_SECTIONS):
        logger.warning("Keyword data empty, using default keywords")
        return default_keywords()

    keywords = []
    for section in KEYWORD_SECTIONS:
        for entry in payload.get(section) or []:
            try:
                keywords.append(Keyword(entry["name"], entry["weight"], entry.get("category", "")))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping invalid keyword entry in {section} {entry!r}: {e}")

    logger.info(f"Loaded {len(keywords)} keywords from {path}")
    return keywords


def default_venues() -> List[Venue]:
    return [
        Venue(
            id="cafe_001",
            name="讀字書店咖啡廳",
            url="https://example.com/cafe1",
            district="大安區",
            address="台北市大安區羅斯福路三段269巷16號",
            content="結合書店與咖啡廳，提供舒適的閱讀空間。不限時，安靜，有插座和wifi，適合讀書。",
            features={"不限時", "插座", "wifi", "安靜"},
        ),
        Venue(
            id="cafe_002",
            name="工業風咖啡",
            url="https://example.com/cafe2",
            district="中山區",
            address="台北市中山區南京東路二段123號",
            content="工業風格裝潢，適合工作。有插座和wifi，咖啡好喝。",
            features={"插座", "wifi"},
        ),
    ]


def default_keywords() -> List[Keyword]:
    return [
        # Core
        Keyword("不限時", 3.0, "環境"),
        Keyword("適合讀書", 2.9, "用途"),
        Keyword("安靜", 2.8, "環境"),
        Keyword("插座", 2.7, "設備"),
        Keyword("wifi", 2.6, "設備"),
        # Secondary
        Keyword("咖啡", 1.8, "餐飲"),
        Keyword("舒適", 1.6, "環境"),
        Keyword("文青", 1.5, "風格"),
        # Reference
        Keyword("甜點", 0.8, "餐飲"),
        Keyword("早午餐", 0.7, "餐飲"),
    ]
