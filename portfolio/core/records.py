"""
Content Records
===============

One record type per content table. Rows coming out of the store and
payloads coming in from the admin forms both pass through ``from_row``,
which drops unknown keys and validates the fields the site relies on.
"""

import json
import re
from dataclasses import dataclass, field, fields, asdict
from typing import Any, Dict, List, Optional

# Rejects consecutive dots, leading/trailing dots in local part
_VALID_EMAIL = re.compile(r'^[a-zA-Z0-9_%+-]+(\.[a-zA-Z0-9_%+-]+)*@[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)*\.[a-zA-Z]{2,}$')

SKILL_ICONS = ('Code2', 'PenTool', 'Server')


class RecordValidationError(ValueError):
    """A row or form payload does not fit its table's record type."""


def _clean(value, keep_whitespace=False):
    if isinstance(value, str):
        if not value.strip():
            return None
        return value if keep_whitespace else value.strip()
    return value


@dataclass
class Record:
    TABLE = ''
    # Columns the store fills in; never written by callers
    READ_ONLY = ('id', 'created_at', 'updated_at')
    # Markup fields whose leading spaces are significant
    RAW_TEXT = ()

    @classmethod
    def from_row(cls, row: Dict[str, Any]):
        known = {f.name for f in fields(cls)}
        values = {
            key: _clean(value, keep_whitespace=key in cls.RAW_TEXT)
            for key, value in row.items() if key in known
        }
        record = cls(**values)
        record.validate()
        return record

    def validate(self):
        pass

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_row(self) -> Dict[str, Any]:
        """Column values for an insert or full update"""
        return {key: value for key, value in asdict(self).items() if key not in self.READ_ONLY}

    @staticmethod
    def _require(value, message):
        if value is None or (isinstance(value, str) and not value):
            raise RecordValidationError(message)


@dataclass
class BlogPost(Record):
    TABLE = 'blog_posts'
    RAW_TEXT = ('description', 'mini_description')

    title: Optional[str] = None
    slug: Optional[str] = None
    mini_description: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    read_time: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def validate(self):
        self._require(self.title, 'Title is required')


def parse_technologies(value) -> List[str]:
    """Accept a JSON list, a comma separated string or a list"""
    if not value:
        return []
    if isinstance(value, str):
        if value.startswith('['):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                value = value.strip('[]').split(',')
        else:
            value = value.split(',')
    if not isinstance(value, (list, tuple)):
        raise RecordValidationError('Technologies must be a list or a comma separated string')
    return [str(item).strip() for item in value if str(item).strip()]


@dataclass
class Project(Record):
    TABLE = 'projects'

    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    project_url: Optional[str] = None
    github_url: Optional[str] = None
    category: Optional[str] = None
    technologies: List[str] = field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def validate(self):
        self._require(self.title, 'Title is required')
        self.technologies = parse_technologies(self.technologies)
        self.category = self.category or ''

    def to_row(self):
        row = super().to_row()
        row['technologies'] = json.dumps(self.technologies)
        return row


@dataclass
class Skill(Record):
    TABLE = 'skills'

    name: Optional[str] = None
    category: Optional[str] = None
    icon: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[str] = None

    def validate(self):
        self._require(self.name, 'Skill name is required')
        if self.icon and self.icon not in SKILL_ICONS:
            raise RecordValidationError(f'Icon must be one of: {", ".join(SKILL_ICONS)}')


@dataclass
class Experience(Record):
    TABLE = 'experiences'

    title: Optional[str] = None
    company: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[str] = None

    def validate(self):
        self._require(self.title, 'Title is required')


@dataclass
class ContactMessage(Record):
    TABLE = 'contact_messages'

    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None
    is_processed: bool = False
    id: Optional[int] = None
    created_at: Optional[str] = None

    def validate(self):
        if not self.name or len(self.name) < 2:
            raise RecordValidationError('Name must be at least 2 characters')
        if not self.email or not _VALID_EMAIL.match(self.email):
            raise RecordValidationError('Please enter a valid email address')
        if not self.message or len(self.message) < 10:
            raise RecordValidationError('Message must be at least 10 characters')
        self.is_processed = bool(self.is_processed)

    def matches(self, search):
        """Case-insensitive match on name, email or message"""
        needle = (search or '').lower()
        return any(needle in (value or '').lower() for value in (self.name, self.email, self.message))


@dataclass
class SiteInfo(Record):
    TABLE = 'site_info'
    EDITABLE_FIELDS = (
        'email', 'phone', 'address', 'github_url', 'linkedin_url',
        'twitter_url', 'instagram_url', 'cv_url',
    )

    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    cv_url: Optional[str] = None
    id: Optional[int] = None
    updated_at: Optional[str] = None

    def validate(self):
        if self.email and not _VALID_EMAIL.match(self.email):
            raise RecordValidationError('Please enter a valid email address')
