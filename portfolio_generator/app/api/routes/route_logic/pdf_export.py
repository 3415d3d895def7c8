import logging

from playwright.async_api import async_playwright

from portfolio_generator.app.core.exceptions import PdfGenerationError

log = logging.getLogger(__name__)


async def render_pdf(html: str, margin: str = "20px") -> bytes:
    """Print an HTML document to an A4 PDF with headless Chromium.

    Args:
        html (str): The complete HTML document to print.
        margin (str): CSS length applied to all four page margins.

    Returns:
        bytes: The PDF file content.

    Raises:
        PdfGenerationError: If launching the browser, loading the content, or
            printing fails.

    Notes:
        1. Start Playwright and launch a headless Chromium instance.
        2. Open a page and set the HTML as its content, waiting for the network to go idle.
        3. Print to A4 with background graphics and the given margins.
        4. Close the browser on every exit path, successful or not.
        5. Any failure is logged and reported as a PdfGenerationError; nothing is retried.

    """
    _msg = "render_pdf starting"
    log.debug(_msg)

    try:
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(headless=True)
            try:
                page = await browser.new_page()
                await page.set_content(html, wait_until="networkidle")
                pdf = await page.pdf(
                    format="A4",
                    print_background=True,
                    margin={
                        "top": margin,
                        "right": margin,
                        "bottom": margin,
                        "left": margin,
                    },
                )
            finally:
                await browser.close()
    except Exception as e:
        _msg = f"PDF generation failed: {e}"
        log.exception(_msg)
        raise PdfGenerationError() from e

    _msg = f"render_pdf returning {len(pdf)} bytes"
    log.debug(_msg)
    return pdf
