"""
AI Tool Schemas.
"""

from pydantic import BaseModel, Field


class GenerateScriptRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=4000)
    genre: str | None = Field(default=None, max_length=100)
    tone: str | None = Field(default=None, max_length=100)
    length: str | None = Field(default=None, max_length=50, examples=["short", "feature"])


class EnhanceScriptRequest(BaseModel):
    script_content: str = Field(..., min_length=1)
    enhancement: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="What to improve, e.g. dialogue or pacing",
    )


class AnalyzeScriptRequest(BaseModel):
    script_content: str = Field(..., min_length=1)


class AiResult(BaseModel):
    """Generated text plus the credit accounting for the call."""

    content: str
    credits_used: int
    remaining_credits: int
