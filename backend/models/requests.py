from pydantic import BaseModel, Field


class CompareRequest(BaseModel):
    job_posting: str = Field(..., max_length=10000, description="Job posting text")
    cv: str = Field(..., max_length=50000, description="Plain text CV content")
