"""Pydantic models for request bodies, stored documents and response envelopes.

Field names are snake_case in Python and camelCase on the wire.
"""
from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool
from pydantic.alias_generators import to_camel

from cardfolio.domain.profile import AvatarOption, UserType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def dump(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# ------------------------------------------------------------------ envelopes
class Envelope(BaseModel):
    """Standard response wrapper: ``{"success", "message", "data"}``."""

    model_config = ConfigDict(extra="allow")

    success: bool
    message: str = ""
    data: Any = None


# ------------------------------------------------------------------ auth
class RegisterRequest(CamelModel):
    name: str = ""
    email: str = ""
    password: str = ""


class CodeRequest(CamelModel):
    email: str = ""
    code: str = ""


class LoginRequest(CamelModel):
    email: str = ""
    password: str = ""


class EmailRequest(CamelModel):
    email: str = ""


class ResetPasswordRequest(CamelModel):
    email: str = ""
    code: str = ""
    new_password: str = ""


class PublishRequest(CamelModel):
    is_published: StrictBool


class PremiumRequest(CamelModel):
    is_premium: StrictBool


# ------------------------------------------------------------------ profile
class SocialMedia(CamelModel):
    platform: str = ""
    url: str = ""


class Profile(CamelModel):
    user_type: UserType = UserType.STUDENT
    full_name: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    linkedin: str = ""
    facebook: str = ""
    bio: str = ""
    gender: str = ""
    avatar: str = ""
    avatar_option: AvatarOption = AvatarOption.NONE
    avatar_custom_url: str = ""
    profile_picture: Optional[str] = None
    social_medias: list[SocialMedia] = Field(default_factory=list)
    # student
    institution_name: str = ""
    aim_in_life: str = ""
    hobby: str = ""
    # businessman
    business_name: str = ""
    business_type: str = ""
    position: str = ""
    # official
    job_title: str = ""
    official_position: str = ""
    office_address: str = ""
    official_phone: str = ""
    company_website: str = ""
    # shared between groups
    department: str = ""
    company: str = ""


# ------------------------------------------------------------------ about
class PersonalInfo(CamelModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    education: str = ""
    languages: str = ""
    nationality: str = ""
    freelance: str = "Available"
    description: str = ""


class Service(CamelModel):
    id: Optional[int] = None
    title: str = ""
    image: str = ""
    desc: str = ""


class Testimonial(CamelModel):
    id: Optional[int] = None
    text: str = ""
    name: str = ""
    position: str = ""
    company: str = ""
    avatar: str = ""


class PricingFeature(CamelModel):
    id: Optional[int] = None
    text: str = ""
    included: bool = True


class PricingPlan(CamelModel):
    id: Optional[int] = None
    name: str = ""
    price: Optional[Union[int, float]] = None
    period: str = ""
    features: list[PricingFeature] = Field(default_factory=list)


class Brand(CamelModel):
    id: Optional[int] = None
    src: str = ""
    alt: str = ""


class AboutDocument(CamelModel):
    personal: PersonalInfo = Field(default_factory=PersonalInfo)
    services: list[Service] = Field(default_factory=list)
    testimonials: list[Testimonial] = Field(default_factory=list)
    pricing: list[PricingPlan] = Field(default_factory=list)
    brands: list[Brand] = Field(default_factory=list)


class AboutUpdate(CamelModel):
    personal: Optional[PersonalInfo] = None
    services: Optional[list[Service]] = None
    testimonials: Optional[list[Testimonial]] = None
    pricing: Optional[list[PricingPlan]] = None
    brands: Optional[list[Brand]] = None


# ------------------------------------------------------------------ blog
class BlogCategoryIn(CamelModel):
    id: Optional[int] = None
    name: str = ""


class BlogPostIn(CamelModel):
    id: Optional[int] = None
    title: str = ""
    image: str = ""
    category: str = ""
    content: str = ""
    excerpt: str = ""
    date: str = ""


class BlogPostPatch(CamelModel):
    title: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    date: Optional[str] = None


# ------------------------------------------------------------------ portfolio
ProjectStatus = Literal["planning", "in-progress", "completed", "on-hold"]


class PortfolioCategory(CamelModel):
    id: Optional[int] = None
    name: str = ""
    created_at: str = ""


class PortfolioProject(CamelModel):
    id: Optional[int] = None
    title: str = ""
    project_type: str = ""
    category: str = ""
    client: str = ""
    duration: str = ""
    budget: str = ""
    description: str = ""
    image: str = ""
    technologies: list[str] = Field(default_factory=list)
    status: ProjectStatus = "planning"


class PortfolioSettings(CamelModel):
    template: str = "modern"
    color_scheme: str = "purple"
    layout: str = "grid"


class PortfolioDocument(CamelModel):
    categories: list[PortfolioCategory] = Field(default_factory=list)
    projects: list[PortfolioProject] = Field(default_factory=list)
    is_published: bool = False
    settings: PortfolioSettings = Field(default_factory=PortfolioSettings)


class PortfolioCategoriesBulk(CamelModel):
    categories: list[PortfolioCategory]


class PortfolioProjectsBulk(CamelModel):
    projects: list[PortfolioProject]


# ------------------------------------------------------------------ resume
class Education(CamelModel):
    id: Optional[int] = None
    degree: str = ""
    university: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    logo: str = ""
    desc: str = ""


class WorkExperience(CamelModel):
    id: Optional[int] = None
    role: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    logo: str = ""
    desc: str = ""


class Award(CamelModel):
    id: Optional[int] = None
    title: str = ""
    year: str = ""
    association: str = ""
    location: str = ""
    logo: str = ""
    desc: str = ""


class Reference(CamelModel):
    id: Optional[int] = None
    name: str = ""
    email: str = ""
    designation: str = ""
    phone: str = ""
    workplace: str = ""
    image: str = ""
    desc: str = ""


class SkillItem(CamelModel):
    name: str = ""
    level: int = Field(default=0, ge=0, le=100)


class SkillCategory(CamelModel):
    id: Optional[int] = None
    category: str = ""
    items: list[SkillItem] = Field(default_factory=list)


class AboutCategory(CamelModel):
    id: Optional[int] = None
    title: str = ""
    icon: str = "FiBook"
    items: list[str] = Field(default_factory=list)


class ResumeSettings(CamelModel):
    template: str = "modern"
    color_scheme: str = "purple"
    font_family: str = "inter"


class ResumeDocument(CamelModel):
    education: list[Education] = Field(default_factory=list)
    work_experiences: list[WorkExperience] = Field(default_factory=list)
    awards: list[Award] = Field(default_factory=list)
    references: list[Reference] = Field(default_factory=list)
    skills: list[SkillCategory] = Field(default_factory=list)
    about_categories: list[AboutCategory] = Field(default_factory=list)
    is_published: bool = False
    settings: ResumeSettings = Field(default_factory=ResumeSettings)


# ------------------------------------------------------------------ navbar
class Navbar(CamelModel):
    name: str = ""
    logo: str = ""
    content: str = ""


# ------------------------------------------------------------------ contact
ContactStatus = Literal["pending", "replied"]


class ContactSubmission(CamelModel):
    recipient_id: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    subject: str = ""
    message: str = ""


class ContactReply(CamelModel):
    reply_message: str = ""


class ContactStatusUpdate(CamelModel):
    status: Optional[ContactStatus] = None
    read: Optional[StrictBool] = None


class ContactMessageOut(CamelModel):
    id: int
    name: str = ""
    email: str = ""
    phone: str = ""
    subject: str = ""
    message: str = ""
    status: ContactStatus = "pending"
    read: bool = False
    reply_message: str = ""
    replied_at: Optional[str] = None
    created_at: Optional[str] = None
