from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Type, Union
import uuid

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from portfolio.core.schemas import CamelModel
from portfolio.domains.content.entities import ContentSection


class SectionData(BaseModel):
    """Данные раздела: известные поля проверяются, прочие сохраняются как есть"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class CtaButton(SectionData):
    text: str
    link: str


class HeroData(SectionData):
    name: Optional[str] = None
    tagline: Optional[str] = None
    bio: Optional[str] = None
    cta_buttons: Optional[List[CtaButton]] = None


class TimelineEntry(SectionData):
    year: str
    title: str
    description: Optional[str] = None


class AboutData(SectionData):
    bio: Optional[str] = None
    photo: Optional[str] = None
    timeline: Optional[List[TimelineEntry]] = None
    skills: Optional[List[str]] = None
    resume_url: Optional[str] = None


class SkillCategory(SectionData):
    name: str
    icon: Optional[str] = None
    skills: List[str] = Field(default_factory=list)


class SkillsData(SectionData):
    categories: Optional[List[SkillCategory]] = None


class SocialLink(SectionData):
    platform: str
    url: str
    icon: Optional[str] = None


class ContactData(SectionData):
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    social_links: Optional[List[SocialLink]] = None
    form_enabled: Optional[bool] = None


class SettingsData(SectionData):
    site_name: Optional[str] = None
    site_description: Optional[str] = None
    admin_key_combo: Optional[str] = None
    google_analytics_id: Optional[str] = None
    contact_email: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None


SECTION_DATA_MODELS: Dict[str, Type[SectionData]] = {
    ContentSection.HERO.value: HeroData,
    ContentSection.ABOUT.value: AboutData,
    ContentSection.SKILLS.value: SkillsData,
    ContentSection.CONTACT.value: ContactData,
    ContentSection.SETTINGS.value: SettingsData,
}


def data_model_for(section: str) -> Type[SectionData]:
    """Модель данных раздела; для незарегистрированных разделов данные непрозрачны"""
    return SECTION_DATA_MODELS.get(section, SectionData)


class HeroContent(BaseModel):
    section: Literal["hero"]
    data: HeroData


class AboutContent(BaseModel):
    section: Literal["about"]
    data: AboutData


class SkillsContent(BaseModel):
    section: Literal["skills"]
    data: SkillsData


class ContactContent(BaseModel):
    section: Literal["contact"]
    data: ContactData


class SettingsContent(BaseModel):
    section: Literal["settings"]
    data: SettingsData


# Тело запроса на сохранение: тип данных выбирается по полю section
ContentUpsert = Annotated[
    Union[HeroContent, AboutContent, SkillsContent, ContactContent, SettingsContent],
    Field(discriminator="section"),
]


class ContentResponse(CamelModel):
    """Схема для ответа с содержимым раздела"""
    id: Optional[uuid.UUID] = None
    section: str
    data: Dict[str, Any]
    updated_by: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
