"""Lesson schemas shared by the generation agents, the repository and the API"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import Field

from ..core.schemas import CamelModel


class VocabularyWord(CamelModel):
    word: str = Field(description="The vocabulary word")
    pronunciation: str = Field(description="IPA pronunciation with syllable emphasis, e.g., /ɪkˈsplɔɪt/ [ik-SPLOIT]")
    part_of_speech: str = Field(description="Part of speech (n., v., adj., adv., etc.)")
    definition: str = Field(description="Clear, simple definition of the word")
    example_sentence: str = Field(description="An example sentence using the word")
    additional_info: Optional[str] = Field(
        default=None,
        description="Related words, antonyms, or additional usage notes. Null if none."
    )


class ComprehensionQuestion(CamelModel):
    question: str = Field(description="A comprehension question about the article")
    answer: str = Field(description="The answer to the comprehension question")


class Paragraph(CamelModel):
    text: str = Field(description="A paragraph of the article")
    comprehension_question: Optional[ComprehensionQuestion] = Field(
        default=None,
        description="Optional comprehension question after this paragraph, null if none"
    )


class ArticleContent(CamelModel):
    paragraphs: List[Paragraph] = Field(
        min_length=7,
        max_length=8,
        description="The article broken into 7-8 paragraphs with optional comprehension questions"
    )
    source: str = Field(description="The source attribution (e.g., 'This article was provided by The Associated Press.')")


class Discussion(CamelModel):
    topic: str = Field(description="Brief description of the discussion topic")
    questions: List[str] = Field(description="2-3 discussion questions for the topic")


class LessonOutput(CamelModel):
    """Structured lesson produced by the lesson generator agent"""
    title: str = Field(description="An engaging, descriptive headline for the article (original but based on the news)")
    posted_date: str = Field(description="The date the article was posted in format: Month Day, Year")
    category: str = Field(description="The news category (e.g., Technology, Science, Business)")
    warm_up_questions: List[str] = Field(description="2-3 warm-up questions to engage the student before reading")
    vocabulary: List[VocabularyWord] = Field(
        min_length=5,
        max_length=5,
        description="Exactly 5 vocabulary words from the article with definitions and pronunciations"
    )
    article_content: ArticleContent
    summary_question: str = Field(description="A question to check if the student can summarize the article")
    discussion_a: Discussion
    discussion_b: Discussion


class StoredLesson(LessonOutput):
    id: str
    topic: str
    created_at: str
    updated_at: str


class LessonSearchParams(CamelModel):
    category: Optional[str] = None
    topic: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class LessonStats(CamelModel):
    total_lessons: int
    category_counts: Dict[str, int]
    recent_lessons: int


class ArticleSourceRef(CamelModel):
    name: str
    url: str


class StructuredArticle(CamelModel):
    headline: str = Field(description="A compelling headline for the article")
    summary: str = Field(description="A 2-3 sentence summary of the article")
    body: str = Field(description="The full article body")
    tags: List[str] = Field(description="Relevant tags for the article")
    sources: List[ArticleSourceRef] = Field(description="Sources referenced in the article")


class DispatchConfig(CamelModel):
    topics: List[str]
    output_format: Literal["summary", "article", "structured"] = "article"
    max_articles_per_topic: Optional[int] = None


class DispatchResult(CamelModel):
    topic: str
    content: str
    generated_at: datetime
    success: bool
    error: Optional[str] = None
