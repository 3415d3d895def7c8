import json
import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from portfolio_generator.app.core.exceptions import ValidationError
from portfolio_generator.app.models.portfolio import Portfolio
from portfolio_generator.app.schemas.portfolio import PortfolioData, PortfolioResponse

log = logging.getLogger(__name__)

# Column name -> wire name of the list-valued portfolio sections.
LIST_FIELDS = {
    "soft_skills": "softSkills",
    "technical_skills": "technicalSkills",
    "academic_background": "academicBackground",
    "work_experience": "workExperience",
    "projects_publications": "projectsPublications",
}


def serialize_list(items: list[Any]) -> str:
    """Encode a list section as JSON text for storage."""
    return json.dumps(items, ensure_ascii=False)


def deserialize_list(raw: str | None) -> list[Any]:
    """Decode a stored list section.

    Args:
        raw (str | None): The JSON text stored in the column.

    Returns:
        list[Any]: The decoded list. Empty when the column is empty, null,
            not valid JSON, or holds something other than a list.

    """
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        _msg = "Stored portfolio section is not valid JSON, reading it as empty"
        log.warning(_msg)
        return []
    if not isinstance(value, list):
        _msg = f"Stored portfolio section is a {type(value).__name__}, reading it as empty"
        log.warning(_msg)
        return []
    return value


def parse_list_field(field_name: str, raw: str | None) -> list[Any]:
    """Decode a list section submitted as a JSON-encoded form field.

    Args:
        field_name (str): Wire name of the field, used in error messages.
        raw (str | None): The submitted text. Missing or blank means an empty list.

    Returns:
        list[Any]: The decoded list.

    Raises:
        ValidationError: If the text is not JSON or does not encode a list.

    """
    if raw is None or not raw.strip():
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        _msg = f"{field_name} must be JSON-encoded"
        log.warning(_msg)
        raise ValidationError(_msg)
    if not isinstance(value, list):
        _msg = f"{field_name} must be a JSON array"
        log.warning(_msg)
        raise ValidationError(_msg)
    return value


def build_portfolio_data(
    fields: dict[str, str | None],
    photo_path: str | None,
) -> PortfolioData:
    """Build validated portfolio data from submitted form fields.

    Args:
        fields (dict[str, str | None]): Submitted values keyed by wire name
            (`fullName`, `contactInfo`, `bio` and the JSON-encoded list sections).
        photo_path (str | None): Reference path of the photo to keep or store.

    Returns:
        PortfolioData: The validated portfolio content.

    Raises:
        ValidationError: If a list section is malformed or an entry has the wrong shape.

    Notes:
        1. Decode every list section with `parse_list_field`.
        2. Validate the combined payload against `PortfolioData`.
        3. Report the first schema problem as a ValidationError.

    """
    payload: dict[str, Any] = {
        "fullName": fields.get("fullName"),
        "contactInfo": fields.get("contactInfo"),
        "bio": fields.get("bio"),
        "photoPath": photo_path,
    }
    for wire_name in LIST_FIELDS.values():
        payload[wire_name] = parse_list_field(wire_name, fields.get(wire_name))

    try:
        return PortfolioData.model_validate(payload)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        _msg = f"Invalid portfolio data at {location}: {first['msg']}"
        log.warning(_msg)
        raise ValidationError(_msg)


def portfolio_to_columns(data: PortfolioData) -> dict[str, Any]:
    """Map portfolio data onto `portfolios` column values.

    List sections are dumped with their wire names, leaving out null
    values, then encoded as JSON text.
    """
    columns: dict[str, Any] = {
        "full_name": data.full_name,
        "contact_info": data.contact_info,
        "photo_path": data.photo_path,
        "bio": data.bio,
    }
    for column in LIST_FIELDS:
        items = getattr(data, column)
        columns[column] = serialize_list(
            [
                item.model_dump(by_alias=True, exclude_none=True)
                if hasattr(item, "model_dump")
                else item
                for item in items
            ],
        )
    return columns


def portfolio_from_row(portfolio: Portfolio) -> PortfolioResponse:
    """Build the API representation of a stored portfolio.

    Args:
        portfolio (Portfolio): The stored row.

    Returns:
        PortfolioResponse: The portfolio with every list section decoded.

    """
    payload: dict[str, Any] = {
        "id": portfolio.id,
        "user_id": portfolio.user_id,
        "full_name": portfolio.full_name,
        "contact_info": portfolio.contact_info,
        "photo_path": portfolio.photo_path,
        "bio": portfolio.bio,
        "created_at": portfolio.created_at,
        "updated_at": portfolio.updated_at,
    }
    for column in LIST_FIELDS:
        payload[column] = deserialize_list(getattr(portfolio, column))
    return PortfolioResponse.model_validate(payload)
