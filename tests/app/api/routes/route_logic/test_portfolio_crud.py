from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from portfolio_generator.app.api.routes.route_logic.portfolio_crud import (
    get_portfolio_by_user,
    get_portfolio_row,
    save_portfolio,
)
from portfolio_generator.app.models.portfolio import Portfolio
from portfolio_generator.app.models.user import User, UserData
from portfolio_generator.app.schemas.portfolio import PortfolioData


@pytest.fixture
def user_id(db_session):
    user = User(data=UserData(email="ada@example.com", hashed_password="hash"))
    db_session.add(user)
    db_session.commit()
    return user.id


def test_get_portfolio_by_user_none(db_session, user_id):
    assert get_portfolio_by_user(db_session, user_id) is None
    assert get_portfolio_row(db_session, user_id) is None


def test_save_then_update_keeps_one_row(db_session, user_id):
    first = PortfolioData(full_name="Ada", soft_skills=["Leadership"])
    second = PortfolioData(full_name="Ada Lovelace", technical_skills=["Python"])

    assert save_portfolio(db_session, user_id, first) is True
    assert save_portfolio(db_session, user_id, second) is False

    assert db_session.query(Portfolio).count() == 1
    portfolio = get_portfolio_by_user(db_session, user_id)
    assert portfolio.full_name == "Ada Lovelace"
    assert portfolio.soft_skills == []
    assert portfolio.technical_skills == ["Python"]
    assert portfolio.user_id == user_id
    assert portfolio.created_at is not None
    assert portfolio.updated_at >= portfolio.created_at


def test_list_sections_round_trip_in_order(db_session, user_id):
    data = PortfolioData.model_validate(
        {
            "softSkills": ["Teamwork", "Leadership", "Écoute"],
            "academicBackground": [
                {"institute": "University of London", "degree": "Mathematics", "year": 1840},
                {"institute": "Home", "grade": "A"},
            ],
            "workExperience": [
                {
                    "companyName": "Analytical Engine",
                    "duration": "1842-1843",
                    "responsibilities": ["Notes", "Algorithms"],
                    "location": "London",
                },
            ],
            "projectsPublications": [{"title": "Note G", "description": "Bernoulli numbers"}],
        },
    )

    save_portfolio(db_session, user_id, data)
    portfolio = get_portfolio_by_user(db_session, user_id)

    assert portfolio.soft_skills == ["Teamwork", "Leadership", "Écoute"]
    assert [entry.institute for entry in portfolio.academic_background] == [
        "University of London",
        "Home",
    ]
    assert portfolio.academic_background[0].year == 1840
    work = portfolio.work_experience[0]
    assert work.company_name == "Analytical Engine"
    assert work.responsibilities == ["Notes", "Algorithms"]
    assert work.model_extra == {"location": "London"}
    assert portfolio.projects_publications[0].title == "Note G"


def test_empty_lists_stored_as_empty_arrays(db_session, user_id):
    save_portfolio(db_session, user_id, PortfolioData())

    row = get_portfolio_row(db_session, user_id)
    assert row.soft_skills == "[]"
    assert row.work_experience == "[]"
    assert get_portfolio_by_user(db_session, user_id).work_experience == []


def test_save_rolls_back_and_reraises():
    mock_db = MagicMock()
    mock_db.get_bind.return_value.dialect.name = "sqlite"
    mock_db.query.return_value.filter.return_value.first.return_value = None
    mock_db.execute.side_effect = OperationalError("INSERT", {}, Exception("locked"))

    with pytest.raises(OperationalError):
        save_portfolio(mock_db, 1, PortfolioData(full_name="Ada"))

    mock_db.rollback.assert_called_once()
    mock_db.commit.assert_not_called()


def test_save_on_dialect_without_upsert_inserts_locked_row():
    mock_db = MagicMock()
    mock_db.get_bind.return_value.dialect.name = "mysql"
    query = mock_db.query.return_value.filter.return_value
    query.first.return_value = None
    query.with_for_update.return_value.first.return_value = None

    created = save_portfolio(mock_db, 1, PortfolioData(full_name="Ada"))

    assert created is True
    query.with_for_update.assert_called_once()
    added = mock_db.add.call_args.args[0]
    assert isinstance(added, Portfolio)
    assert added.user_id == 1
    assert added.full_name == "Ada"
    assert added.soft_skills == "[]"
    mock_db.commit.assert_called_once()


def test_save_on_dialect_without_upsert_updates_locked_row():
    mock_db = MagicMock()
    mock_db.get_bind.return_value.dialect.name = "mysql"
    existing = Portfolio(user_id=1, full_name="Old")
    query = mock_db.query.return_value.filter.return_value
    query.first.return_value = (existing.id,)
    query.with_for_update.return_value.first.return_value = existing

    created = save_portfolio(mock_db, 1, PortfolioData(full_name="New"))

    assert created is False
    assert existing.full_name == "New"
    assert existing.updated_at is not None
    mock_db.add.assert_not_called()
    mock_db.commit.assert_called_once()
