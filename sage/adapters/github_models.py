"""Pydantic models for the GitHub API adapter."""

from datetime import datetime

from pydantic import BaseModel, Field


class GitHubIssue(BaseModel):
    number: int
    title: str
    body: str | None = None
    labels: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    html_url: str | None = None


class GitHubComment(BaseModel):
    id: int
    body: str
    html_url: str | None = None
