"""
Request/response bodies of the AI functions (suggest-tags, summarize-note).

Both functions answer with either the success body below or
`{"error": "<message>"}`.
"""

from typing import List

from pydantic import BaseModel, Field


class SuggestTagsRequest(BaseModel):
    title: str = Field(description="Note title")
    content: str = Field(description="Note markdown body")


class SuggestTagsResponse(BaseModel):
    tags: List[str] = Field(description="3-5 lowercase tags, at most two words each")


class SummarizeNoteRequest(BaseModel):
    content: str = Field(description="Note markdown body")


class SummarizeNoteResponse(BaseModel):
    summary: str = Field(description="Short summary of the note")


class FunctionErrorResponse(BaseModel):
    error: str = Field(description="Human-readable error message")
