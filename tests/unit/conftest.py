"""Unit test fixtures - small in-memory catalog"""

import pytest

from src.ranking import Keyword, KeywordRegistry, Venue
from src.search_engine import SearchEngine


@pytest.fixture
def keywords():
    """Keywords spanning all three tiers"""
    return [
        Keyword("不限時", 3.0, "環境"),
        Keyword("安靜", 2.5, "環境"),
        Keyword("插座", 2.5, "設備"),
        Keyword("wifi", 1.5, "設備"),
        Keyword("咖啡", 0.8, "餐飲"),
    ]


@pytest.fixture
def registry(keywords):
    return KeywordRegistry(keywords)


@pytest.fixture
def venues():
    return [
        Venue(
            id="cafe_001",
            name="讀字書店",
            district="大安區",
            address="台北市大安區羅斯福路三段269巷16號",
            content="不限時 安靜 插座 wifi 咖啡",
            features={"不限時", "插座", "wifi", "安靜"},
        ),
        Venue(
            id="cafe_002",
            name="工業風咖啡",
            district="中山區",
            address="台北市中山區南京東路二段123號",
            content="插座 wifi wifi 咖啡",
            features={"插座", "wifi"},
        ),
        Venue(
            id="cafe_003",
            name="巷弄早午餐",
            district="信義區",
            address="台北市信義區松仁路88號",
            content="早午餐 甜點",
            features={"寵物友善"},
        ),
    ]


@pytest.fixture
def engine(venues, keywords):
    engine = SearchEngine(venues=venues, keywords=keywords)
    engine.initialize()
    return engine
