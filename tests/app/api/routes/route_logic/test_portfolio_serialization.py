import json
from datetime import datetime

import pytest

from portfolio_generator.app.api.routes.route_logic.portfolio_serialization import (
    build_portfolio_data,
    deserialize_list,
    parse_list_field,
    portfolio_from_row,
    portfolio_to_columns,
    serialize_list,
)
from portfolio_generator.app.core.exceptions import ValidationError
from portfolio_generator.app.models.portfolio import Portfolio


@pytest.mark.parametrize("raw", [None, "", "not json", '{"a": 1}', '"text"', "42"])
def test_deserialize_list_reads_bad_columns_as_empty(raw):
    assert deserialize_list(raw) == []


def test_serialize_list_keeps_order_and_unicode():
    encoded = serialize_list(["Écoute", "Leadership"])

    assert encoded == '["Écoute", "Leadership"]'
    assert deserialize_list(encoded) == ["Écoute", "Leadership"]
    assert deserialize_list(serialize_list([])) == []


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_parse_list_field_missing_is_empty(raw):
    assert parse_list_field("softSkills", raw) == []


def test_parse_list_field_not_json():
    with pytest.raises(ValidationError) as exc_info:
        parse_list_field("softSkills", "[Leadership")
    assert exc_info.value.message == "softSkills must be JSON-encoded"


def test_parse_list_field_not_an_array():
    with pytest.raises(ValidationError) as exc_info:
        parse_list_field("workExperience", '{"companyName": "X"}')
    assert exc_info.value.message == "workExperience must be a JSON array"


def test_build_portfolio_data():
    fields = {
        "fullName": "Ada Lovelace",
        "contactInfo": "ada@example.com",
        "bio": "Mathematician",
        "softSkills": '["Leadership"]',
        "technicalSkills": None,
        "academicBackground": '[{"institute": "Home", "degree": "Mathematics"}]',
        "workExperience": "",
        "projectsPublications": '[{"title": "Note G"}]',
    }

    data = build_portfolio_data(fields, photo_path="/uploads/photo-abc.png")

    assert data.full_name == "Ada Lovelace"
    assert data.contact_info == "ada@example.com"
    assert data.photo_path == "/uploads/photo-abc.png"
    assert data.soft_skills == ["Leadership"]
    assert data.technical_skills == []
    assert data.academic_background[0].degree == "Mathematics"
    assert data.work_experience == []
    assert data.projects_publications[0].title == "Note G"


def test_build_portfolio_data_rejects_wrong_entry_shape():
    with pytest.raises(ValidationError) as exc_info:
        build_portfolio_data({"softSkills": '[{"name": "x"}]'}, photo_path=None)
    assert exc_info.value.message.startswith("Invalid portfolio data at softSkills.0")


def test_portfolio_to_columns_uses_wire_names():
    data = build_portfolio_data(
        {
            "fullName": "Ada",
            "workExperience": '[{"companyName": "Engine", "responsibilities": "Notes", "team": "R&D"}]',
        },
        photo_path=None,
    )

    columns = portfolio_to_columns(data)

    assert columns["full_name"] == "Ada"
    assert columns["photo_path"] is None
    assert json.loads(columns["work_experience"]) == [
        {"companyName": "Engine", "responsibilities": "Notes", "team": "R&D"},
    ]
    assert columns["soft_skills"] == "[]"


def test_portfolio_from_row():
    created = datetime(2024, 1, 1, 12, 0, 0)
    row = Portfolio(
        id=3,
        user_id=7,
        full_name="Ada",
        contact_info=None,
        photo_path=None,
        bio=None,
        soft_skills='["Leadership"]',
        technical_skills=None,
        academic_background="corrupt",
        work_experience="[]",
        projects_publications='[{"title": "Note G"}]',
        created_at=created,
        updated_at=created,
    )

    portfolio = portfolio_from_row(row)

    assert portfolio.id == 3
    assert portfolio.user_id == 7
    assert portfolio.soft_skills == ["Leadership"]
    assert portfolio.technical_skills == []
    assert portfolio.academic_background == []
    assert portfolio.projects_publications[0].title == "Note G"

    wire = portfolio.model_dump(mode="json", by_alias=True)
    assert wire["userId"] == 7
    assert wire["fullName"] == "Ada"
    assert wire["softSkills"] == ["Leadership"]
    assert wire["createdAt"] == "2024-01-01T12:00:00"


def test_build_portfolio_data_accepts_any_json_scalar():
    data = build_portfolio_data(
        {
            "softSkills": '["Leadership", 10]',
            "technicalSkills": "[3.5]",
            "academicBackground": '[{"institute": 42, "degree": "BSc", "year": 2020}]',
            "workExperience": '[{"companyName": 3, "duration": 2020, "responsibilities": 7}]',
            "projectsPublications": '[{"title": 1984, "description": 2.5}]',
        },
        photo_path=None,
    )

    assert data.soft_skills == ["Leadership", 10]
    assert data.technical_skills == [3.5]
    assert data.academic_background[0].institute == 42
    assert data.work_experience[0].duration == 2020
    assert data.work_experience[0].responsibilities == 7
    assert data.projects_publications[0].title == 1984

    columns = portfolio_to_columns(data)
    assert json.loads(columns["soft_skills"]) == ["Leadership", 10]
    assert json.loads(columns["work_experience"]) == [
        {"companyName": 3, "duration": 2020, "responsibilities": 7},
    ]
