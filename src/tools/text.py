"""Small text formatting helpers shared by the tools."""


def format_rating(rating: float) -> str:
    """Render a vote average without a trailing '.0' (8.0 -> '8', 8.8 -> '8.8')."""
    return f"{rating:g}"


def release_year(release_date: str | None, fallback: str) -> str:
    """Year part of a TMDb 'YYYY-MM-DD' date, or ``fallback`` when missing."""
    return release_date[:4] if release_date else fallback


def truncate(text: str, limit: int) -> str:
    """Cut text to ``limit`` characters, marking the cut with '...'."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."
