"""
Database Schemas

MongoDB collection schemas for the open source alternatives directory.
Each Pydantic model represents a collection; the collection name is the
lowercase model name:
- Alternative -> "alternative"
- ProprietarySoftware -> "proprietarysoftware"
- CreatorNotification -> "creatornotification"

References to other documents are stored as string ids.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Role = Literal["user", "moderator", "admin"]
ApprovalStatus = Literal["pending", "approved", "rejected"]
SubmissionPlan = Literal["free", "sponsor"]
AdType = Literal["banner", "card", "popup"]
NotificationType = Literal["response_request", "new_discussion"]


class User(BaseModel):
    """
    Registered account
    Collection name: "user"
    """
    email: str = Field(..., description="Unique, lowercased email address")
    password_hash: str = Field(..., description="bcrypt hash")
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    github_username: Optional[str] = None
    twitter_username: Optional[str] = None
    role: Role = "user"
    email_verified: bool = False


class Session(BaseModel):
    """
    Issued auth token; deleting it signs the token out
    Collection name: "session"
    """
    user_id: str
    token: str
    expires_at: datetime


class Category(BaseModel):
    """
    Collection name: "category"
    """
    name: str
    slug: str
    description: str = ""
    icon: str = Field("Code", description="Icon name used by the UI")
    parent_id: Optional[str] = Field(None, description="Parent category id for nested taxonomies")


class Tag(BaseModel):
    """
    Collection name: "tag"
    """
    name: str
    slug: str


class TechStack(BaseModel):
    """
    Collection name: "techstack"
    """
    name: str
    slug: str
    type: str = "Tool"


class ProprietarySoftware(BaseModel):
    """
    Commercial product that alternatives are listed against
    Collection name: "proprietarysoftware"
    """
    name: str
    slug: str
    description: str
    website: str
    icon_url: Optional[str] = None
    categories: List[str] = Field(default_factory=list, description="Category ids")


class AlternativeTags(BaseModel):
    alerts: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)
    platforms: List[str] = Field(default_factory=list)
    properties: List[str] = Field(default_factory=list)


class Alternative(BaseModel):
    """
    Open source project listed as a substitute for proprietary software
    Collection name: "alternative"
    """
    name: str
    slug: str
    description: str
    short_description: Optional[str] = None
    long_description: Optional[str] = None
    icon_url: Optional[str] = None
    website: str
    github: str = Field(..., description="Repository URL")
    stars: int = Field(0, ge=0)
    forks: int = Field(0, ge=0)
    contributors: int = Field(0, ge=0)
    last_commit: Optional[datetime] = None
    license: Optional[str] = None
    is_self_hosted: bool = False
    health_score: int = Field(50, ge=0, le=100)
    vote_score: int = Field(0, description="Sum of signed votes")
    featured: bool = False
    approved: bool = False
    status: ApprovalStatus = "pending"
    rejection_reason: Optional[str] = None
    rejected_at: Optional[datetime] = None
    submitter_name: Optional[str] = None
    submitter_email: Optional[str] = None
    user_id: Optional[str] = None
    screenshots: List[str] = Field(default_factory=list)
    submission_plan: SubmissionPlan = "free"
    sponsor_featured_until: Optional[datetime] = None
    sponsor_priority_until: Optional[datetime] = None
    sponsor_payment_id: Optional[str] = None
    sponsor_paid_at: Optional[datetime] = None
    newsletter_included: bool = False
    last_edited_at: Optional[datetime] = None
    github_synced_at: Optional[datetime] = None
    alternative_tags: AlternativeTags = Field(default_factory=AlternativeTags)
    categories: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    tech_stacks: List[str] = Field(default_factory=list)
    alternative_to: List[str] = Field(default_factory=list, description="ProprietarySoftware ids")


class Vote(BaseModel):
    """
    One signed vote per user per alternative
    Collection name: "vote"
    """
    user_id: str
    alternative_id: str
    vote_type: Literal[-1, 1]


class Discussion(BaseModel):
    """
    Comment on an alternative; replies carry the top-level parent_id
    Collection name: "discussion"
    """
    alternative_id: str
    user_id: str
    content: str = Field(..., min_length=1, max_length=5000)
    parent_id: Optional[str] = None
    request_creator_response: bool = False
    is_creator_response: bool = False


class CreatorNotification(BaseModel):
    """
    Collection name: "creatornotification"
    """
    creator_id: str
    alternative_id: str
    discussion_id: str
    type: NotificationType
    message: str
    is_read: bool = False


class Advertisement(BaseModel):
    """
    Collection name: "advertisement"
    """
    name: str
    description: str
    ad_type: AdType
    company_name: str
    company_website: str
    company_logo: Optional[str] = None
    headline: Optional[str] = None
    cta_text: str = "Learn More"
    destination_url: str
    icon_url: Optional[str] = None
    short_description: Optional[str] = None
    is_active: bool = False
    priority: int = 0
    status: ApprovalStatus = "pending"
    rejection_reason: Optional[str] = None
    approved_at: Optional[datetime] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    user_id: Optional[str] = None
    submitter_name: Optional[str] = None
    submitter_email: str
    impressions: int = 0
    clicks: int = 0
    payment_id: Optional[str] = None
    paid_at: Optional[datetime] = None
    payment_amount: Optional[float] = None
    expires_at: Optional[datetime] = None


class NewsletterSubscription(BaseModel):
    """
    Collection name: "newslettersubscription"
    """
    email: str
