"""Argument schemas for the Play Console tools.

Each tool's raw arguments are validated against one of these models before
any credential is loaded or API call is made. Field aliases are the
camelCase names used on the wire; the JSON schemas published in the tool
catalog are generated from the same models.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

Track = Literal["internal", "alpha", "beta", "production"]
Metric = Literal["ratings", "installs", "crashes"]

DEFAULT_LANGUAGE = "en-US"
DEFAULT_MAX_REVIEWS = 10


class ToolArgs(BaseModel):
    """Base for tool argument models."""

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def input_schema(cls) -> Dict[str, Any]:
        """JSON schema advertised in the tool catalog."""
        schema = cls.model_json_schema(by_alias=True)
        schema.pop("title", None)
        return schema


class PackageArgs(ToolArgs):
    package_name: str = Field(
        ...,
        alias="packageName",
        min_length=1,
        description="The package name of the app (e.g., com.example.app)"
    )


class ListAppsArgs(ToolArgs):
    pass


class GetAppInfoArgs(PackageArgs):
    pass


class ListReleasesArgs(PackageArgs):
    track: Track = Field(..., description="The release track")


class GetListingArgs(PackageArgs):
    language: str = Field(
        DEFAULT_LANGUAGE,
        min_length=2,
        description="Language code of the listing (e.g., en-US)"
    )


class UpdateListingArgs(GetListingArgs):
    """Listing fields to change; omitted fields are left as they are."""

    title: Optional[str] = Field(None, description="App title")
    short_description: Optional[str] = Field(
        None, alias="shortDescription", description="Short description"
    )
    full_description: Optional[str] = Field(
        None, alias="fullDescription", description="Full description"
    )
    video: Optional[str] = Field(None, description="Promotional YouTube video URL")

    @model_validator(mode="after")
    def require_a_field(self) -> "UpdateListingArgs":
        if not self.listing_fields():
            raise ValueError(
                "At least one of title, shortDescription, fullDescription or video is required"
            )
        return self

    def listing_fields(self) -> Dict[str, str]:
        """Listing fields present in the request, keyed by API field name."""
        return self.model_dump(
            by_alias=True,
            exclude_none=True,
            include={"title", "short_description", "full_description", "video"},
        )


class CreateReleaseArgs(PackageArgs):
    track: Track = Field(..., description="The release track")
    version_code: int = Field(
        ..., alias="versionCode", ge=1, description="Version code of an uploaded bundle or APK"
    )
    release_notes: Optional[str] = Field(
        None, alias="releaseNotes", description="Release notes text"
    )
    release_notes_language: str = Field(
        DEFAULT_LANGUAGE,
        alias="releaseNotesLanguage",
        description="Language code for the release notes"
    )
    user_fraction: Optional[float] = Field(
        None,
        alias="userFraction",
        gt=0.0,
        le=1.0,
        description="Staged rollout fraction (0-1); below 1 starts a staged rollout"
    )

    @property
    def is_staged(self) -> bool:
        return self.user_fraction is not None and self.user_fraction < 1.0

    def release(self) -> Dict[str, Any]:
        """Release resource for tracks.update."""
        release: Dict[str, Any] = {
            "versionCodes": [str(self.version_code)],
            "status": "inProgress" if self.is_staged else "completed",
        }
        if self.is_staged:
            release["userFraction"] = self.user_fraction
        if self.release_notes:
            release["releaseNotes"] = [
                {"language": self.release_notes_language, "text": self.release_notes}
            ]
        return release


class GetStatisticsArgs(PackageArgs):
    metric: Metric = Field(..., description="The statistic to retrieve")


class GetReviewsArgs(PackageArgs):
    max_results: int = Field(
        DEFAULT_MAX_REVIEWS,
        alias="maxResults",
        ge=1,
        description="Maximum number of reviews to return"
    )


class ReplyToReviewArgs(PackageArgs):
    review_id: str = Field(..., alias="reviewId", min_length=1, description="The review to answer")
    reply_text: str = Field(..., alias="replyText", min_length=1, description="Text of the reply")
