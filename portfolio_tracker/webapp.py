"""
Portfolio tracker web page.
A Gradio app with a form for new positions and a saved-portfolio view whose
prices refresh every minute.
"""

import html
from datetime import datetime
from typing import List, Optional, Tuple

import gradio as gr
from loguru import logger

from .api import AsyncQuoteAPI
from .config import REFRESH_INTERVAL, load_settings
from .errors import ConfigError, FetchError, ValidationError
from .logging_setup import setup_logging
from .portfolio.form import PositionForm
from .portfolio.models import PositionQuote
from .portfolio.portfolio_storage import PortfolioStorage, create_storage
from .portfolio.price_service import PortfolioPriceService

RETURN_COLORS = {
    "positive": "#22c55e",
    "negative": "#ef4444",
    "neutral": "#6b7280",
}


def format_return(return_pct: float) -> Tuple[str, str]:
    """Return the percentage text and its color"""
    if return_pct > 0:
        color = RETURN_COLORS["positive"]
    elif return_pct < 0:
        color = RETURN_COLORS["negative"]
    else:
        color = RETURN_COLORS["neutral"]
    return f"{return_pct:.2f}%", color


def render_portfolio_html(rows: List[PositionQuote], updated_at: Optional[datetime] = None) -> str:
    """Render the saved portfolio as a grid of cards"""
    if not rows:
        return "<p>No positions saved yet.</p>"

    cards = []
    for row in rows:
        position = row.position
        current = f"${row.current_price}" if row.current_price else "N/A"
        pct_text, color = format_return(row.return_pct)
        cards.append(
            '<div style="background:#e5e7eb;padding:1rem;border-radius:0.375rem;">'
            f"<p><strong>Ticker:</strong> {html.escape(position.ticker)}</p>"
            f"<p><strong>Quantity:</strong> {position.quantity:g}</p>"
            f"<p><strong>Average Buy Price:</strong> {position.average_buy_price:g}</p>"
            f"<p><strong>Target Entry:</strong> {position.target_entry:g}</p>"
            f"<p><strong>Target Exit:</strong> {position.target_exit:g}</p>"
            f"<p><strong>Current Price:</strong> {current}</p>"
            f'<p><strong>Return:</strong> <span style="color:{color}">{pct_text}</span></p>'
            "</div>"
        )

    footer = ""
    if updated_at is not None:
        footer = f"<p><em>Prices updated {updated_at.strftime('%Y-%m-%d %H:%M:%S')}</em></p>"

    return (
        '<div style="display:grid;grid-template-columns:repeat(auto-fill,minmax(16rem,1fr));gap:1rem;">'
        + "".join(cards)
        + "</div>"
        + footer
    )


class PortfolioPage:
    """Handlers behind the page's form and portfolio view"""

    def __init__(self, storage: PortfolioStorage, price_service: PortfolioPriceService):
        self.storage = storage
        self.price_service = price_service

    async def refresh(self) -> str:
        """Re-read the portfolio, fetch current prices and render"""
        try:
            positions = await self.storage.list_entries()
        except FetchError as e:
            logger.error(f"Error fetching stocks: {e}")
            return f"<p>Could not load portfolio: {html.escape(e.message)}</p>"

        rows = await self.price_service.refresh(positions)
        return render_portfolio_html(rows, datetime.now())

    async def add_stock(self, ticker, quantity, average_buy_price, target_entry, target_exit):
        """
        Submit the form.

        Raises:
            gr.Error: On invalid input or when the store cannot be written
        """
        form = PositionForm()
        form.update(
            ticker=ticker,
            quantity=quantity,
            averageBuyPrice=average_buy_price,
            targetEntry=target_entry,
            targetExit=target_exit,
        )

        try:
            position = await form.submit(self.storage)
        except ValidationError as e:
            raise gr.Error(e.message)
        except FetchError as e:
            logger.error(f"Error adding stock: {e}")
            raise gr.Error(f"Could not save position: {e.message}")

        logger.info(f"Added {position.ticker} from web form")
        portfolio_html = await self.refresh()
        # Cleared form fields followed by the refreshed portfolio
        return "", None, None, None, None, portfolio_html


def build_app(page: PortfolioPage, refresh_interval: float = REFRESH_INTERVAL) -> gr.Blocks:
    """Lay out the page and wire its events"""
    with gr.Blocks(title="Portfolio Tracker") as app:
        gr.Markdown("# Portfolio Tracker")

        with gr.Row():
            with gr.Column(scale=1):
                ticker = gr.Textbox(label="Stock Ticker", placeholder="e.g. NVDA")
                quantity = gr.Number(label="Quantity", value=None, minimum=0)
                average_buy_price = gr.Number(label="Average Buy Price", value=None)
                target_entry = gr.Number(label="Target Entry Price", value=None)
                target_exit = gr.Number(label="Target Exit Price", value=None)
                submit_button = gr.Button("Submit", variant="primary")

            with gr.Column(scale=2):
                gr.Markdown("## Saved Portfolio")
                portfolio_view = gr.HTML("<p>Loading prices...</p>")

        timer = gr.Timer(refresh_interval)

        submit_button.click(
            page.add_stock,
            inputs=[ticker, quantity, average_buy_price, target_entry, target_exit],
            outputs=[ticker, quantity, average_buy_price, target_entry, target_exit, portfolio_view],
        )
        app.load(page.refresh, outputs=[portfolio_view])
        timer.tick(page.refresh, outputs=[portfolio_view])

    return app


def main():
    setup_logging()

    try:
        settings = load_settings(require_notifier=False)
    except ConfigError as e:
        logger.critical(f"ERROR: {e}")
        raise SystemExit(1)

    storage = create_storage(settings.portfolio_store, settings.portfolio_file)
    price_service = PortfolioPriceService(AsyncQuoteAPI(api_key=settings.quote_api_key))
    app = build_app(PortfolioPage(storage, price_service), settings.refresh_interval)

    logger.info("Starting portfolio page...")
    app.launch()


if __name__ == "__main__":
    main()
