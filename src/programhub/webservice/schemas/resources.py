"""Request bodies for programs, courses and reviews."""

from typing import List

from pydantic import BaseModel, Field

from programhub.commons.vocabulary import Career, MinimumSkill


class ProgramCreate(BaseModel):
    """Program creation payload. ``address`` is geocoded and not stored."""

    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=500)
    address: str = Field(..., min_length=1)
    careers: List[Career] = Field(..., min_length=1)
    website: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    email: str | None = None
    averageRating: float | None = Field(default=None, ge=1, le=10)
    averageCost: float | None = Field(default=None, ge=0)
    photo: str = "no-photo.jpg"
    housing: bool = False
    jobAssistance: bool = False
    jobGuarantee: bool = False
    acceptGi: bool = False


class ProgramUpdate(BaseModel):
    """Partial program update."""

    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, min_length=1, max_length=500)
    address: str | None = Field(default=None, min_length=1)
    careers: List[Career] | None = Field(default=None, min_length=1)
    website: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    email: str | None = None
    averageRating: float | None = Field(default=None, ge=1, le=10)
    averageCost: float | None = Field(default=None, ge=0)
    housing: bool | None = None
    jobAssistance: bool | None = None
    jobGuarantee: bool | None = None
    acceptGi: bool | None = None


class CourseCreate(BaseModel):
    """Course creation payload. The program comes from the route."""

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    weeks: int = Field(..., ge=1)
    tuition: float = Field(..., ge=0)
    minimumSkill: MinimumSkill
    scholarshipAvailable: bool = False


class CourseUpdate(BaseModel):
    """Partial course update."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    weeks: int | None = Field(default=None, ge=1)
    tuition: float | None = Field(default=None, ge=0)
    minimumSkill: MinimumSkill | None = None
    scholarshipAvailable: bool | None = None


class ReviewCreate(BaseModel):
    """Review creation payload. The program comes from the route."""

    title: str = Field(..., min_length=1, max_length=100)
    text: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=10)
