from .schemas import LessonOutput

HEAVY_RULE = "═" * 80
LIGHT_RULE = "─" * 40


def _section(title: str) -> str:
    return f"{LIGHT_RULE}\n{title}\n{LIGHT_RULE}\n"


def format_lesson(lesson: LessonOutput) -> str:
    """Render a lesson as plain text for printing or review"""
    out = [f"{HEAVY_RULE}\n{lesson.title}\n{HEAVY_RULE}\n\n"]
    out.append(f"Published: {lesson.posted_date}\n")
    out.append(f"Topic: {lesson.category}\n\n")

    out.append(_section("CONVERSATION STARTERS"))
    out.append("Begin with these introductory questions:\n\n")
    for question in lesson.warm_up_questions:
        out.append(f"  - {question}\n")
    out.append("\n")

    out.append(_section("KEY VOCABULARY"))
    out.append("Review the following words and their meanings:\n\n")
    for vocab in lesson.vocabulary:
        out.append(f"{vocab.word} {vocab.pronunciation} ({vocab.part_of_speech})\n")
        out.append(f"   Meaning: {vocab.definition}\n")
        out.append(f"   Usage: {vocab.example_sentence}\n")
        if vocab.additional_info:
            out.append(f"   Note: {vocab.additional_info}\n")
        out.append("\n")

    out.append(_section("READING PASSAGE"))
    out.append("Read the following article:\n\n")
    for para in lesson.article_content.paragraphs:
        out.append(f"{para.text}\n\n")
        if para.comprehension_question:
            out.append(f"   Q: {para.comprehension_question.question}\n")
            out.append(f"   A: {para.comprehension_question.answer}\n\n")
    out.append(f"\n{lesson.article_content.source}\n\n")

    out.append(_section("COMPREHENSION CHECK"))
    out.append(f"{lesson.summary_question}\n\n")

    out.append(_section("DISCUSSION TOPICS"))
    out.append("\n")
    for label, discussion in (("A", lesson.discussion_a), ("B", lesson.discussion_b)):
        out.append(f"Topic {label}: {discussion.topic}\n")
        for question in discussion.questions:
            out.append(f"  • {question}\n")
        out.append("\n")

    return "".join(out)
