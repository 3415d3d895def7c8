import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from portfolio_generator.app.schemas.portfolio import PortfolioData

log = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent.parent.parent / "templates"

_environment = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR / "pdf")),
    autoescape=True,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_portfolio_html(
    portfolio: PortfolioData,
    photo_src: str | None = None,
) -> str:
    """Render a portfolio as a standalone HTML document for PDF export.

    Args:
        portfolio (PortfolioData): The portfolio content.
        photo_src (str | None): Image source for the header photo, normally a
            `data:` URI so the document needs no file or network access.

    Returns:
        str: The HTML document.

    Notes:
        1. Sections whose content is empty are left out entirely, as are empty
           fields inside an entry.
        2. All user text is HTML-escaped.
        3. The output depends only on the arguments, so rendering the same
           portfolio twice yields identical documents.
        4. No disk, network, or database access beyond the cached template.

    """
    _msg = "render_portfolio_html starting"
    log.debug(_msg)
    template = _environment.get_template("portfolio.html")
    html = template.render(portfolio=portfolio, photo_src=photo_src)
    _msg = "render_portfolio_html returning"
    log.debug(_msg)
    return html
