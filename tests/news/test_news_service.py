from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from hrm_portal.common.pagination import PageQuery
from hrm_portal.core.enums import Role
from hrm_portal.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from hrm_portal.news.service import NewsData, NewsService, parse_tags


@pytest.fixture
def service(repos):
    return NewsService(repos.news)


@pytest.fixture
def admin(repos):
    return repos.users.add("root", role=Role.ADMIN)


def test_tags_from_string_or_list():
    assert parse_tags(" hr, events ,,hr") == ("hr", "events")
    assert parse_tags(["hr", " it "]) == ("hr", "it")
    assert parse_tags(None) == ()


def test_create_requires_title_and_content(service, admin):
    with pytest.raises(ValidationError):
        service.create(admin, NewsData(title=" ", content="body"))
    with pytest.raises(ValidationError):
        service.create(admin, NewsData(title="Title", content=""))


def test_create_and_update(service, admin):
    item = service.create(admin, NewsData(title="Year end party", content="Friday 6pm", tags="events,hr"))
    assert item.tags == ("events", "hr")
    assert item.created_by == admin.user_id

    updated = service.update(item.news_id, title="Year end party (moved)", tags=["events"])
    assert updated.title == "Year end party (moved)"
    assert updated.tags == ("events",)
    assert updated.content == "Friday 6pm"


def test_is_new_for_a_day(repos, service, admin):
    item = service.create(admin, NewsData(title="Hello", content="World"))
    assert item.is_new(item.created_at + timedelta(hours=23))
    assert not item.is_new(item.created_at + timedelta(hours=24))


def test_delete_by_creator_or_admin(repos, service, admin):
    author = repos.users.add("writer", role=Role.MANAGER)
    stranger = repos.users.add("bob")
    item = service.create(author, NewsData(title="Hi", content="there"))

    with pytest.raises(AuthorizationError):
        service.delete(stranger, item.news_id)
    service.delete(author, item.news_id)
    with pytest.raises(NotFoundError):
        service.get(item.news_id)

    other = service.create(author, NewsData(title="Again", content="there"))
    service.delete(admin, other.news_id)


def test_list_searches_title_and_content(service, admin):
    service.create(admin, NewsData(title="Payroll update", content="March"))
    service.create(admin, NewsData(title="Party", content="payroll team hosts"))
    service.create(admin, NewsData(title="Other", content="nothing"))

    assert service.list(PageQuery(search="Payroll")).total == 1
    assert service.list(PageQuery(search="ayroll")).total == 2
