from pydantic import BaseModel, Field

MAX_INPUT_LENGTH = 1000


class EnhanceRequest(BaseModel):
    input: str = Field(
        ...,
        min_length=1,
        max_length=MAX_INPUT_LENGTH,
        description="One-sentence website idea. Surrounding whitespace is trimmed before the length check.",
        examples=["A portfolio website for a photographer"],
    )

    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "examples": [
                {"input": "A portfolio website for a photographer"}
            ]
        },
    }


class EnhanceResponse(BaseModel):
    enhanced: str = Field(
        ...,
        description="Markdown blueprint from the model, or a fallback message when the provider failed.",
    )


class ErrorResponse(BaseModel):
    error: str = Field(..., examples=["Invalid input"])


class HealthResponse(BaseModel):
    status: str = Field(..., examples=["OK"])
    model: str = Field(..., examples=["gemini-2.5-flash"])
    timestamp: str = Field(..., description="ISO-8601 UTC timestamp")
