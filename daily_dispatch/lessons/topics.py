import random
from typing import List, Optional

NEWS_CATEGORIES: List[str] = [
    # Technology
    "artificial intelligence breakthroughs",
    "latest smartphone technology",
    "cybersecurity threats",
    "space exploration news",
    "electric vehicles",
    "social media trends",
    # Business
    "stock market news",
    "startup funding",
    "corporate mergers acquisitions",
    "cryptocurrency market",
    "global trade",
    # Science
    "climate change research",
    "medical breakthroughs",
    "renewable energy",
    "scientific discoveries",
    "ocean exploration",
    # Entertainment
    "movie releases",
    "music industry news",
    "streaming platforms",
    "video game releases",
    # Sports
    "football championship",
    "basketball NBA news",
    "tennis grand slam",
    "olympic games",
    "soccer world cup",
    # Health & Wellness
    "mental health awareness",
    "fitness trends",
    "nutrition research",
    "healthy lifestyle tips",
    # Environment
    "wildlife conservation",
    "sustainable living",
    "national parks",
    "marine life discoveries",
    # Lifestyle
    "travel destinations",
    "food trends",
    "fashion industry",
    "home improvement",
    "personal finance tips",
    # Education
    "online learning trends",
    "study abroad programs",
    "educational technology",
]


def get_random_news_topic(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(NEWS_CATEGORIES)
