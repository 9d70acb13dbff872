"""Tests for tool argument schemas."""

import pytest
from pydantic import ValidationError

from play_console_mcp.models.tool_args import (
    CreateReleaseArgs,
    GetReviewsArgs,
    GetStatisticsArgs,
    ListReleasesArgs,
    UpdateListingArgs,
)


class TestTrackValidation:
    """Track must be one of the four Play tracks."""

    @pytest.mark.parametrize("track", ["internal", "alpha", "beta", "production"])
    def test_known_tracks(self, track):
        args = ListReleasesArgs.model_validate({"packageName": "com.example.app", "track": track})
        assert args.track == track

    def test_unknown_track(self):
        with pytest.raises(ValidationError):
            ListReleasesArgs.model_validate({"packageName": "com.example.app", "track": "nightly"})


class TestReviewsArgs:

    def test_default_max_results(self):
        args = GetReviewsArgs.model_validate({"packageName": "com.example.app"})
        assert args.max_results == 10

    def test_zero_max_results_rejected(self):
        with pytest.raises(ValidationError):
            GetReviewsArgs.model_validate({"packageName": "com.example.app", "maxResults": 0})


class TestCreateReleaseArgs:

    def _args(self, **extra):
        data = {"packageName": "com.example.app", "track": "beta", "versionCode": 42}
        data.update(extra)
        return CreateReleaseArgs.model_validate(data)

    def test_staged_release(self):
        release = self._args(userFraction=0.1).release()

        assert release["status"] == "inProgress"
        assert release["userFraction"] == 0.1
        assert release["versionCodes"] == ["42"]

    def test_full_release(self):
        release = self._args().release()

        assert release == {"versionCodes": ["42"], "status": "completed"}

    def test_release_notes_language(self):
        release = self._args(releaseNotes="Nouveautés", releaseNotesLanguage="fr-FR").release()

        assert release["releaseNotes"] == [{"language": "fr-FR", "text": "Nouveautés"}]

    @pytest.mark.parametrize("fraction", [0, -0.5, 1.5])
    def test_fraction_out_of_range(self, fraction):
        with pytest.raises(ValidationError):
            self._args(userFraction=fraction)

    def test_version_code_must_be_positive(self):
        with pytest.raises(ValidationError):
            self._args(versionCode=0)


class TestUpdateListingArgs:

    def test_listing_fields_use_api_names(self):
        args = UpdateListingArgs.model_validate({
            "packageName": "com.example.app",
            "title": "Example",
            "fullDescription": "Long text",
        })

        assert args.language == "en-US"
        assert args.listing_fields() == {"title": "Example", "fullDescription": "Long text"}

    def test_requires_a_field(self):
        with pytest.raises(ValidationError):
            UpdateListingArgs.model_validate({"packageName": "com.example.app", "language": "en-US"})


def test_statistics_metric():
    with pytest.raises(ValidationError):
        GetStatisticsArgs.model_validate({"packageName": "com.example.app", "metric": "revenue"})
