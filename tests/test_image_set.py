"""
Tests for ImageSetGenerator.
"""

from unittest.mock import AsyncMock

import pytest

from core.errors import AnalysisError
from core.pacing import RequestPacer
from services.analysis import ScriptAnalyzer
from services.image_set import ImageSetGenerator, ImageType

from conftest import BASIC_ANALYSIS, fenced, image_provider, text_provider


def _generator(config, images, analysis=BASIC_ANALYSIS, pacer_factory=None):
    analyzer = ScriptAnalyzer(text_provider(fenced(analysis)), config)
    return ImageSetGenerator(analyzer, images, config, pacer_factory=pacer_factory)


class TestImageSetGenerator:

    @pytest.mark.asyncio
    async def test_sample_script_produces_five_images(self, config, sample_script):
        images = image_provider()
        image_set = await _generator(config, images).generate_episode_image_set(sample_script)

        assert image_set.master_background.type == ImageType.MASTER_BACKGROUND
        assert image_set.master_background.location == "Downtown Portland parking garage"
        assert image_set.master_background.timeframe == "October 1987"
        assert image_set.thumbnail.type == ImageType.YOUTUBE_THUMBNAIL
        assert image_set.thumbnail.title == "The Vanishing of Sarah Mitchell"
        assert [p.subject for p in image_set.portraits] == ["Sarah Mitchell", "Robert Johnson", "Mark Stevens"]
        assert [p.role for p in image_set.portraits] == ["victim", "detective", "suspect"]
        assert image_set.metadata.total_images == 5
        assert image_set.failures == []
        assert images.generate_image.await_count == 5

    @pytest.mark.asyncio
    async def test_thumbnail_uses_thumbnail_size(self, config, sample_script):
        images = image_provider()
        await _generator(config, images).generate_episode_image_set(sample_script)

        sizes = [call.kwargs["size"] for call in images.generate_image.await_args_list]
        assert sizes[1] == config.images.thumbnail_size
        assert sizes[0] == sizes[2] == config.images.resolution

    @pytest.mark.asyncio
    async def test_failed_portrait_is_skipped(self, config, sample_script):
        image_set = await _generator(config, image_provider(fail_on=("Mark Stevens",))).generate_episode_image_set(
            sample_script
        )

        assert [p.subject for p in image_set.portraits] == ["Sarah Mitchell", "Robert Johnson"]
        assert image_set.metadata.total_images == 4
        assert len(image_set.failures) == 1
        failure = image_set.failures[0]
        assert failure.type == ImageType.SUBJECT_PORTRAIT
        assert failure.subject == "Mark Stevens"
        assert failure.reason_code == "HTTP_400"

    @pytest.mark.asyncio
    async def test_total_counts_only_existing_images(self, config, sample_script):
        """Background and thumbnail failures are not counted."""
        images = image_provider(fail_on=("Establishing shot", "YouTube thumbnail", "Robert Johnson"))
        image_set = await _generator(config, images).generate_episode_image_set(sample_script)

        assert image_set.master_background is None
        assert image_set.thumbnail is None
        assert len(image_set.portraits) == 2
        assert image_set.metadata.total_images == 2
        assert {f.type for f in image_set.failures} == {
            ImageType.MASTER_BACKGROUND,
            ImageType.YOUTUBE_THUMBNAIL,
            ImageType.SUBJECT_PORTRAIT,
        }

    @pytest.mark.asyncio
    async def test_portraits_are_paced(self, config, sample_script):
        sleep = AsyncMock()
        pacer = RequestPacer(1.0, sleep=sleep, clock=lambda: 0.0)
        image_set = await _generator(config, image_provider(), pacer_factory=lambda: pacer).generate_episode_image_set(
            sample_script
        )

        assert len(image_set.portraits) == 3
        assert pacer.calls == 3
        # Delay before the 2nd and 3rd portrait only
        assert sleep.await_count == 2
        sleep.assert_awaited_with(1.0)

    @pytest.mark.asyncio
    async def test_analysis_failure_generates_nothing(self, config, sample_script):
        images = image_provider()
        generator = _generator(config, images, analysis={"episodeTitle": "Only a title"})

        with pytest.raises(AnalysisError):
            await generator.generate_episode_image_set(sample_script)

        images.generate_image.assert_not_called()

    @pytest.mark.asyncio
    async def test_portrait_descriptions(self, config, sample_script):
        image_set = await _generator(config, image_provider()).generate_episode_image_set(sample_script)

        descriptions = image_set.portrait_descriptions()
        assert len(descriptions) == 3
        assert descriptions[0].startswith("victim portrait of Sarah Mitchell")

    @pytest.mark.asyncio
    async def test_primary_image_prefers_thumbnail(self, config, sample_script):
        image_set = await _generator(config, image_provider()).generate_episode_image_set(sample_script)
        assert image_set.primary_image_url() == image_set.thumbnail.url

        no_thumb = await _generator(config, image_provider(fail_on=("YouTube thumbnail",))).generate_episode_image_set(
            sample_script
        )
        assert no_thumb.primary_image_url() == no_thumb.master_background.url
