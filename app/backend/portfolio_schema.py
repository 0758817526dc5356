from typing import Dict, Any, List, Optional
from pydantic import BaseModel, Field

# --- Response schema sent to the generation service ---

PORTFOLIO_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "personalDetails": {
            "type": "OBJECT",
            "properties": {
                "name": {"type": "STRING"},
                "title": {"type": "STRING"},
                "email": {"type": "STRING"},
                "phone": {"type": "STRING"},
                "linkedin": {"type": "STRING"},
                "github": {"type": "STRING"},
                "leetcode": {"type": "STRING"},
                "hackerrank": {"type": "STRING"},
                "summary": {"type": "STRING", "description": "A 3-4 sentence professional summary."},
                "resumeUrl": {"type": "STRING", "description": "A public URL to the user's resume, e.g., a Google Drive share link. Omit if not found."},
                "profilePictureUrl": {"type": "STRING", "description": "This will be provided by user upload. Leave this field empty."},
            },
            "required": ["name", "title", "email", "summary"],
        },
        "education": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "institution": {"type": "STRING"},
                    "degree": {"type": "STRING"},
                    "fieldOfStudy": {"type": "STRING"},
                    "startDate": {"type": "STRING"},
                    "endDate": {"type": "STRING"},
                    "description": {"type": "STRING"},
                },
                "required": ["institution", "degree", "startDate", "endDate"],
            },
        },
        "workExperience": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "company": {"type": "STRING"},
                    "jobTitle": {"type": "STRING"},
                    "startDate": {"type": "STRING"},
                    "endDate": {"type": "STRING"},
                    "responsibilities": {"type": "ARRAY", "items": {"type": "STRING"}},
                },
                "required": ["company", "jobTitle", "startDate", "endDate", "responsibilities"],
            },
        },
        "skills": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "category": {"type": "STRING", "description": "e.g., Programming Languages, Frameworks & Libraries"},
                    "name": {"type": "STRING"},
                    "level": {"type": "NUMBER", "description": "Proficiency level from 0 to 100, where 100 is expert."},
                },
                "required": ["category", "name", "level"],
            },
        },
        "projects": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "description": {"type": "STRING"},
                    "technologies": {"type": "ARRAY", "items": {"type": "STRING"}},
                    "link": {"type": "STRING"},
                    "imageUrl": {"type": "STRING", "description": "This will be provided by user upload. Leave this field empty."},
                },
                "required": ["name", "description", "technologies"],
            },
        },
        "achievements": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": {"type": "STRING"},
                    "description": {"type": "STRING"},
                },
                "required": ["title", "description"],
            },
        },
        "certifications": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "issuingOrganization": {"type": "STRING"},
                    "date": {"type": "STRING"},
                    "credentialUrl": {"type": "STRING"},
                },
                "required": ["name", "issuingOrganization", "date"],
            },
        },
        "seo": {
            "type": "OBJECT",
            "properties": {
                "title": {"type": "STRING"},
                "description": {"type": "STRING", "description": "Meta description for search engines, around 155 characters."},
            },
            "required": ["title", "description"],
        },
    },
}

SECTIONS: List[str] = list(PORTFOLIO_RESPONSE_SCHEMA["properties"].keys())
LIST_SECTIONS: List[str] = [
    name for name, spec in PORTFOLIO_RESPONSE_SCHEMA["properties"].items() if spec["type"] == "ARRAY"
]

# Sections the generated document cannot do without.
ESSENTIAL_SECTIONS = ("personalDetails", "workExperience")

# Sections with a safe default when the model leaves them out.
SECTION_DEFAULTS: Dict[str, Any] = {"certifications": []}

SKILL_LEVEL_MIN = 0
SKILL_LEVEL_MAX = 100


def nested_list_fields(section: str) -> List[str]:
    """Returns the string-list fields (e.g. responsibilities) of a list section's items."""
    spec = PORTFOLIO_RESPONSE_SCHEMA["properties"].get(section, {})
    if spec.get("type") != "ARRAY":
        return []
    props = spec["items"]["properties"]
    return [name for name, p in props.items() if p["type"] == "ARRAY"]


# --- Document models, used to validate hand-authored saves ---

class PersonalDetails(BaseModel):
    name: str
    title: str
    email: str
    summary: str
    phone: Optional[str] = ""
    linkedin: Optional[str] = ""
    github: Optional[str] = ""
    leetcode: Optional[str] = None
    hackerrank: Optional[str] = None
    resumeUrl: Optional[str] = None
    profilePictureUrl: Optional[str] = ""

class Education(BaseModel):
    institution: str
    degree: str
    startDate: str
    endDate: str
    fieldOfStudy: Optional[str] = ""
    description: Optional[str] = ""

class WorkExperience(BaseModel):
    company: str
    jobTitle: str
    startDate: str
    endDate: str
    responsibilities: List[str] = Field(default_factory=list)

class Skill(BaseModel):
    category: str
    name: str
    level: float = Field(..., ge=SKILL_LEVEL_MIN, le=SKILL_LEVEL_MAX, allow_inf_nan=False)

class Project(BaseModel):
    name: str
    description: str
    technologies: List[str] = Field(default_factory=list)
    link: Optional[str] = ""
    imageUrl: Optional[str] = ""

class Achievement(BaseModel):
    title: str
    description: str

class Certification(BaseModel):
    name: str
    issuingOrganization: str
    date: str
    credentialUrl: Optional[str] = ""

class SEO(BaseModel):
    title: str
    description: str

class PortfolioData(BaseModel):
    personalDetails: PersonalDetails
    education: List[Education] = Field(default_factory=list)
    workExperience: List[WorkExperience] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    achievements: List[Achievement] = Field(default_factory=list)
    certifications: List[Certification] = Field(default_factory=list)
    seo: SEO = Field(default_factory=lambda: SEO(title="", description=""))


DEFAULT_PORTFOLIO: Dict[str, Any] = {
    "personalDetails": {
        "name": "",
        "title": "",
        "email": "",
        "phone": "",
        "linkedin": "",
        "github": "",
        "summary": "",
        "profilePictureUrl": "",
    },
    "education": [],
    "workExperience": [],
    "skills": [],
    "projects": [],
    "achievements": [],
    "certifications": [],
    "seo": {"title": "", "description": ""},
}
