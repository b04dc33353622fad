"""
Tests for the content record types.
Run with: pytest tests/test_records.py -v
"""

import json

import pytest

from portfolio.core.records import (
    BlogPost, ContactMessage, Project, RecordValidationError, SiteInfo, Skill,
    parse_technologies,
)


def test_from_row_drops_unknown_keys_and_blank_strings():
    post = BlogPost.from_row({'title': '  Hello ', 'category': '   ', 'rogue': 'x'})
    assert post.title == 'Hello'
    assert post.category is None
    assert not hasattr(post, 'rogue')


def test_blog_body_keeps_leading_indent():
    post = BlogPost.from_row({'title': 'T', 'description': '    indented\n', 'mini_description': '  lead'})
    assert post.description == '    indented\n'
    assert post.mini_description == '  lead'
    assert BlogPost.from_row(post.to_dict()).description == '    indented\n'


def test_blank_blog_body_becomes_none():
    assert BlogPost.from_row({'title': 'T', 'description': '   \n '}).description is None


def test_blog_post_requires_title():
    with pytest.raises(RecordValidationError, match='Title'):
        BlogPost.from_row({'title': ''})


def test_to_row_leaves_out_store_managed_columns():
    row = BlogPost.from_row({'id': 3, 'title': 'T', 'created_at': 'now'}).to_row()
    assert 'id' not in row
    assert 'created_at' not in row
    assert row['title'] == 'T'


@pytest.mark.parametrize("value,expected", [
    ('Python, Flask ,SQLite', ['Python', 'Flask', 'SQLite']),
    ('["Go", "Rust"]', ['Go', 'Rust']),
    (['a', ' b ', ''], ['a', 'b']),
    ('', []),
    (None, []),
])
def test_parse_technologies(value, expected):
    assert parse_technologies(value) == expected


def test_project_stores_technologies_as_json():
    project = Project.from_row({'title': 'Site', 'technologies': 'Python, Flask'})
    assert project.technologies == ['Python', 'Flask']
    assert project.category == ''
    assert json.loads(project.to_row()['technologies']) == ['Python', 'Flask']


def test_project_reads_json_from_row():
    project = Project.from_row({'id': 1, 'title': 'Site', 'technologies': '["Go"]'})
    assert project.to_dict()['technologies'] == ['Go']


def test_skill_icon_must_be_known():
    assert Skill.from_row({'name': 'Design', 'icon': 'PenTool'}).icon == 'PenTool'
    with pytest.raises(RecordValidationError, match='Icon'):
        Skill.from_row({'name': 'Design', 'icon': 'Rocket'})


@pytest.mark.parametrize("payload,message", [
    ({'name': 'A', 'email': 'a@b.com', 'message': 'long enough text'}, 'Name'),
    ({'name': 'Ann', 'email': 'not-an-email', 'message': 'long enough text'}, 'email'),
    ({'name': 'Ann', 'email': 'a..b@c.com', 'message': 'long enough text'}, 'email'),
    ({'name': 'Ann', 'email': 'a@b.com', 'message': 'short'}, 'Message'),
])
def test_contact_message_validation(payload, message):
    with pytest.raises(RecordValidationError, match=message):
        ContactMessage.from_row(payload)


def test_contact_message_search_is_case_insensitive():
    message = ContactMessage.from_row({
        'name': 'Ada Lovelace', 'email': 'ada@example.com', 'message': 'About the Analytical Engine',
    })
    assert message.is_processed is False
    assert message.matches('lovelace')
    assert message.matches('EXAMPLE.COM')
    assert message.matches('analytical')
    assert not message.matches('babbage')


def test_site_info_email_is_optional_but_validated():
    assert SiteInfo.from_row({}).email is None
    with pytest.raises(RecordValidationError):
        SiteInfo.from_row({'email': 'nope'})
