"""
Story Store — holds the currently loaded story and its analysis.

Updated by: POST /story
Queried by: timeline, causality and validation endpoints
"""

import logging
from typing import Optional

from story_kernel.models.analysis import StoryAnalysis
from story_kernel.models.story import StoryData

logger = logging.getLogger(__name__)


class StoryStore:
    """
    In-memory story store. One story at a time; loading replaces it.
    Persistence belongs to the caller.
    """

    def __init__(self):
        self._story: Optional[StoryData] = None
        self._analysis: Optional[StoryAnalysis] = None

    @property
    def story(self) -> Optional[StoryData]:
        return self._story

    @property
    def analysis(self) -> Optional[StoryAnalysis]:
        return self._analysis

    @property
    def loaded(self) -> bool:
        return self._story is not None

    def load(self, story: StoryData, analysis: StoryAnalysis) -> None:
        """Replace the current story and its analysis."""
        self._story = story
        self._analysis = analysis
        logger.info(
            "Loaded story: %d persons, %d locations, %d acts",
            len(story.persons), len(story.locations), len(story.acts),
        )

    def clear(self) -> None:
        self._story = None
        self._analysis = None
