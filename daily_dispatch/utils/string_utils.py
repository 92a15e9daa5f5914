def clean_text(text: str) -> str:
    return ' '.join(text.split())


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length]
