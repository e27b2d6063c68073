"""
Exercise video records recommended by the chat trainer.
"""

from typing import Optional

from pydantic import BaseModel


class VideoRecord(BaseModel):
    """An exercise demonstration video (exercise_videos row)."""

    id: str
    name: str
    description: str = ""
    category: str = ""
    muscle_group: str = ""
    difficulty: str = ""
    video_url: str
    thumbnail_url: Optional[str] = None
