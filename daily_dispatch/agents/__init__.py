"""
News agents for Daily Dispatch

Provides:
- NewsAgent: chat-completions agent with a bounded tool loop
- News tools wired to the fetch chain and the article content fetcher
"""

from .agent import NewsAgent
from .tools import AgentTool, build_news_tools

__all__ = [
    "NewsAgent",
    "AgentTool",
    "build_news_tools",
]
